"""
Domain error taxonomy.

Services raise these; routers turn them into HTTP responses using ``status_code``.
"""


class BedTrackerError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BedTrackerError):
    """Missing or malformed input (client fault)."""
    status_code = 400


class InvalidCount(ValidationError):
    pass


class MissingCoordinates(ValidationError):
    def __init__(self, message: str = "Latitude and longitude are required"):
        super().__init__(message)


class InvalidPatientId(ValidationError):
    pass


class NotFound(BedTrackerError):
    status_code = 404


class UnknownBedType(NotFound):
    def __init__(self, bed_type: str):
        super().__init__(f"Bed type '{bed_type}' not found")
        self.bed_type = bed_type


class PatientNotFound(NotFound):
    def __init__(self, patient_id: str):
        super().__init__(f"Patient '{patient_id}' not found")
        self.patient_id = patient_id


class Conflict(BedTrackerError):
    # The public API reports conflicts as bad requests
    status_code = 400


class NoBedsAvailable(Conflict):
    def __init__(self, bed_type: str):
        super().__init__(f"No beds available for '{bed_type}'")
        self.bed_type = bed_type


class DuplicatePatientId(Conflict):
    def __init__(self, patient_id: str):
        super().__init__(f"Patient ID '{patient_id}' already exists")
        self.patient_id = patient_id


class InternalError(BedTrackerError):
    status_code = 500
