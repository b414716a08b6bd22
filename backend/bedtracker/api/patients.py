from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
import datetime as dt
from ..models.base import get_db
from ..services.admission import AdmissionWorkflow
from ..services.patient_registry import PatientCreate, PatientRegistry
from ..core.errors import BedTrackerError, UnknownBedType

router = APIRouter(tags=["patients"])


class PatientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    patient_id: str
    date: dt.date
    name: str
    age: int
    gender: str
    condition: Optional[str]
    blood_group: Optional[str]
    phone_no: Optional[str]
    address: Optional[str]
    emergency_contact_name: Optional[str]
    emergency_contact_phone: Optional[str]
    emergency_contact_relationship: Optional[str]
    bed_type: str


class CheckedOutPatientResponse(PatientResponse):
    checkout_date: dt.datetime


class AdmissionResponse(BaseModel):
    message: str
    patient: PatientResponse


class CheckoutResponse(BaseModel):
    message: str
    patient: CheckedOutPatientResponse


@router.get("/patients", response_model=List[PatientResponse])
def list_patients(
    search: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """List active patients; ``search`` matches name (case-insensitive) or patient ID."""
    return PatientRegistry(db).list_active(search=search)


@router.post("/patients", response_model=AdmissionResponse, status_code=status.HTTP_201_CREATED)
def admit_patient(
    patient_in: PatientCreate,
    db: Session = Depends(get_db),
):
    """Admit a patient, booking one bed of the requested type."""
    try:
        patient = AdmissionWorkflow(db).admit(patient_in)
    except UnknownBedType as e:
        # An unknown bed type is bad input for an admission
        raise HTTPException(status_code=400, detail=e.message)
    except BedTrackerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return AdmissionResponse(
        message="Patient added successfully and bed booked",
        patient=PatientResponse.model_validate(patient),
    )


@router.get("/patients/{patient_id}", response_model=PatientResponse)
def get_patient(patient_id: str, db: Session = Depends(get_db)):
    try:
        return PatientRegistry(db).get(patient_id)
    except BedTrackerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/patients/checkout/{patient_id}", response_model=CheckoutResponse)
def checkout_patient(patient_id: str, db: Session = Depends(get_db)):
    """Discharge a patient: archive the record and free the bed."""
    try:
        archived = AdmissionWorkflow(db).checkout(patient_id)
    except BedTrackerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return CheckoutResponse(
        message="Patient checked out successfully",
        patient=CheckedOutPatientResponse.model_validate(archived),
    )


@router.get("/checkedoutpatients", response_model=List[CheckedOutPatientResponse])
def list_checked_out_patients(db: Session = Depends(get_db)):
    """Archive of discharged patients, newest first."""
    return PatientRegistry(db).list_archived()
