from .base import Base
from .bed import BedCategory
from .patient import Patient, CheckedOutPatient
from .facility import Facility

__all__ = ["Base", "BedCategory", "Patient", "CheckedOutPatient", "Facility"]
