"""
Admission and checkout workflow tying the bed ledger to the patient registry.

Admission: validate -> reserve bed -> persist patient -> commit.
If persisting fails after the bed was reserved, the reservation is released
before the error is reported so the ledger never counts a phantom occupant.

Checkout: remove -> archive -> release, committed as a single transaction.
"""
import datetime as dt
import logging
from typing import Mapping, Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import DuplicatePatientId, ValidationError
from ..models.patient import CheckedOutPatient, Patient
from .bed_ledger import BedLedger
from .patient_registry import PatientCreate, PatientRegistry, coerce_patient_input, validate_patient_id

logger = logging.getLogger(__name__)


class AdmissionState:
    VALIDATING = "validating"
    RESERVING_BED = "reserving_bed"
    PERSISTING_PATIENT = "persisting_patient"
    DONE = "done"
    REJECTED = "rejected"


class AdmissionWorkflow:
    def __init__(self, db: Session, ledger: Optional[BedLedger] = None, registry: Optional[PatientRegistry] = None):
        self.db = db
        self.ledger = ledger or BedLedger(db)
        self.registry = registry or PatientRegistry(db)
        self.state = AdmissionState.VALIDATING

    def admit(self, payload: Union[PatientCreate, Mapping]) -> Patient:
        self.state = AdmissionState.VALIDATING
        try:
            data = coerce_patient_input(payload)

            self.state = AdmissionState.RESERVING_BED
            self.ledger.reserve(data.bed_type, commit=False)

            self.state = AdmissionState.PERSISTING_PATIENT
            try:
                patient = self.registry.admit(data, commit=False)
            except (DuplicatePatientId, ValidationError):
                # Compensate: hand the reserved bed back before reporting
                self.ledger.release(data.bed_type, commit=False)
                self.db.commit()
                raise
            except IntegrityError:
                # Concurrent admission with the same id; the reservation is uncommitted
                self.db.rollback()
                raise DuplicatePatientId(data.patient_id or "")

            self.db.commit()
            self.db.refresh(patient)
        except Exception:
            self.state = AdmissionState.REJECTED
            if self.db.in_transaction():
                self.db.rollback()
            raise

        self.state = AdmissionState.DONE
        logger.info("Admitted patient %s to '%s'", patient.patient_id, patient.bed_type)
        return patient

    def checkout(self, patient_id: str, checkout_time: Optional[dt.datetime] = None) -> CheckedOutPatient:
        """Discharge a patient: archive the record and free the bed in one transaction."""
        validate_patient_id(patient_id)
        try:
            removed = self.registry.remove(patient_id, commit=False)
            archived = self.registry.archive(removed, checkout_time or dt.datetime.utcnow(), commit=False)
            self.ledger.release(removed.bed_type, commit=False)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(archived)
        logger.info("Checked out patient %s from '%s'", archived.patient_id, archived.bed_type)
        return archived
