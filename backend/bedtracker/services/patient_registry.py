"""
Patient Registry - active admissions and the checked-out archive.
"""
import datetime as dt
import logging
import random
import re
from typing import List, Mapping, Optional, Union

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.errors import DuplicatePatientId, InvalidPatientId, PatientNotFound, ValidationError
from ..models.base import generate_uuid
from ..models.patient import PATIENT_FIELDS, CheckedOutPatient, Patient

logger = logging.getLogger(__name__)

PATIENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class PatientCreate(BaseModel):
    """Admission payload. Accepts camelCase (``bedType``) or snake_case keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    patient_id: Optional[str] = None
    date: Optional[dt.date] = None
    name: str = Field(..., min_length=1)
    age: int = Field(..., gt=0)
    gender: str = Field(..., min_length=1)
    condition: Optional[str] = None
    blood_group: Optional[str] = None
    phone_no: Optional[str] = None
    address: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    emergency_contact_relationship: Optional[str] = None
    bed_type: str = Field(..., min_length=1)

    @field_validator(
        "patient_id",
        "condition",
        "blood_group",
        "phone_no",
        "address",
        "emergency_contact_name",
        "emergency_contact_phone",
        "emergency_contact_relationship",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("age", mode="before")
    @classmethod
    def reject_boolean_age(cls, v):
        if isinstance(v, bool):
            raise ValueError("age must be a number, not a boolean")
        return v

    @field_validator("patient_id")
    @classmethod
    def check_patient_id(cls, v):
        if v is not None and not PATIENT_ID_PATTERN.match(v):
            raise ValueError("patientId may only contain letters, digits, '-' and '_' (max 64)")
        return v

    @model_validator(mode="after")
    def require_condition_or_blood_group(self):
        if not self.condition and not self.blood_group:
            raise ValueError("Either condition or bloodGroup is required")
        return self


def format_validation_error(exc: pydantic.ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


def coerce_patient_input(patient_input: Union[PatientCreate, Mapping]) -> PatientCreate:
    if isinstance(patient_input, PatientCreate):
        return patient_input
    try:
        return PatientCreate.model_validate(dict(patient_input or {}))
    except pydantic.ValidationError as e:
        raise ValidationError(format_validation_error(e))


def validate_patient_id(patient_id: str) -> str:
    if not isinstance(patient_id, str) or not PATIENT_ID_PATTERN.match(patient_id):
        raise InvalidPatientId(f"Invalid patient id '{patient_id}'")
    return patient_id


def _snapshot(patient: Patient) -> Patient:
    """Transient copy that stays readable after the row is deleted."""
    copy = Patient(**{f: getattr(patient, f) for f in PATIENT_FIELDS})
    copy.id = patient.id
    copy.created_at = patient.created_at
    copy.updated_at = patient.updated_at
    return copy


class PatientRegistry:
    """Owns active patients and the archive of checked-out patients."""

    def __init__(self, db: Session):
        self.db = db

    # ── Active patients ─────────────────────────────────────────────────────

    def list_active(self, search: Optional[str] = None) -> List[Patient]:
        """List active patients, optionally filtered by name or patient ID substring."""
        q = self.db.query(Patient)
        if search and search.strip():
            term = search.strip()
            q = q.filter(
                Patient.name.icontains(term, autoescape=True)
                | Patient.patient_id.contains(term, autoescape=True)
            )
        return q.order_by(Patient.created_at, Patient.patient_id).all()

    def get(self, patient_id: str) -> Patient:
        patient = self.db.query(Patient).filter(Patient.patient_id == patient_id).first()
        if not patient:
            raise PatientNotFound(patient_id)
        return patient

    def is_active(self, patient_id: str) -> bool:
        return self.db.query(Patient.id).filter(Patient.patient_id == patient_id).first() is not None

    def _generate_patient_id(self) -> str:
        for _ in range(settings.PATIENT_ID_MAX_ATTEMPTS):
            candidate = str(random.randint(100000, 999999))
            if not self.is_active(candidate):
                return candidate
        raise ValidationError("Could not generate a unique patient id; supply patientId explicitly")

    def admit(self, patient_input: Union[PatientCreate, Mapping], commit: bool = True) -> Patient:
        """
        Register a patient. Does not touch the bed ledger; callers that need a
        bed must reserve it first (see AdmissionWorkflow).
        """
        data = coerce_patient_input(patient_input)
        if data.patient_id is not None:
            patient_id = data.patient_id
            if self.is_active(patient_id):
                raise DuplicatePatientId(patient_id)
        else:
            patient_id = self._generate_patient_id()

        fields = data.model_dump(exclude={"patient_id", "date"})
        patient = Patient(
            id=generate_uuid(),
            patient_id=patient_id,
            date=data.date or dt.date.today(),
            **fields,
        )
        self.db.add(patient)
        if not commit:
            self.db.flush()
            return patient
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicatePatientId(patient_id)
        self.db.refresh(patient)
        return patient

    def remove(self, patient_id: str, commit: bool = True) -> Patient:
        """Delete an active patient and return a detached copy of the removed record."""
        patient = self.get(patient_id)
        removed = _snapshot(patient)
        self.db.delete(patient)
        if commit:
            self.db.commit()
        else:
            self.db.flush()
        return removed

    # ── Archive ─────────────────────────────────────────────────────────────

    def list_archived(self) -> List[CheckedOutPatient]:
        return (
            self.db.query(CheckedOutPatient)
            .order_by(CheckedOutPatient.checkout_date.desc(), CheckedOutPatient.patient_id)
            .all()
        )

    def archive(
        self,
        patient: Patient,
        checkout_time: Optional[dt.datetime] = None,
        commit: bool = True,
    ) -> CheckedOutPatient:
        record = CheckedOutPatient(
            id=generate_uuid(),
            checkout_date=checkout_time or dt.datetime.utcnow(),
            **{f: getattr(patient, f) for f in PATIENT_FIELDS},
        )
        self.db.add(record)
        if commit:
            self.db.commit()
            self.db.refresh(record)
        else:
            self.db.flush()
        return record
