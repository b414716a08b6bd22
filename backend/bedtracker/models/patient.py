from datetime import datetime
from sqlalchemy import Column, String, Date, Text, Integer, DateTime, UniqueConstraint
from .base import Base, TimestampMixin, generate_uuid


class PatientFieldsMixin:
    """Columns shared by active and archived patient records."""
    patient_id = Column(String(64), nullable=False, index=True)
    date = Column(Date, nullable=False)  # Admission date
    name = Column(String(200), nullable=False)
    age = Column(Integer, nullable=False)
    gender = Column(String(20), nullable=False)
    condition = Column(Text, nullable=True)
    blood_group = Column(String(10), nullable=True)
    phone_no = Column(String(30), nullable=True)
    address = Column(Text, nullable=True)

    # Emergency booking contact
    emergency_contact_name = Column(String(200), nullable=True)
    emergency_contact_phone = Column(String(30), nullable=True)
    emergency_contact_relationship = Column(String(50), nullable=True)

    # Non-owning reference into bed_categories.bed_type (no FK, no cascade)
    bed_type = Column(String(100), nullable=False, index=True)


PATIENT_FIELDS = (
    "patient_id",
    "date",
    "name",
    "age",
    "gender",
    "condition",
    "blood_group",
    "phone_no",
    "address",
    "emergency_contact_name",
    "emergency_contact_phone",
    "emergency_contact_relationship",
    "bed_type",
)


class Patient(Base, TimestampMixin, PatientFieldsMixin):
    __tablename__ = "patients"
    # Unique only among active patients; archived ids may repeat after re-admission
    __table_args__ = (UniqueConstraint("patient_id", name="uq_patients_patient_id"),)

    id = Column(String, primary_key=True, default=generate_uuid)


class CheckedOutPatient(Base, TimestampMixin, PatientFieldsMixin):
    """Immutable archive entry written once per checkout."""
    __tablename__ = "checked_out_patients"

    id = Column(String, primary_key=True, default=generate_uuid)
    checkout_date = Column(DateTime, nullable=False, default=datetime.utcnow)
