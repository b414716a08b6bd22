import os
from pydantic_settings import BaseSettings
from typing import Dict, List

DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "data")


class Settings(BaseSettings):
    APP_NAME: str = "Hospital Bed Tracker"
    VERSION: str = "1.0.0"

    DATABASE_URL: str = "sqlite:///./bedtracker.db"

    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    # Creates missing bed categories on startup; never resets existing counters
    SEED_ON_STARTUP: bool = True
    DEFAULT_BED_CATEGORIES: Dict[str, int] = {
        "General Bed": 50,
        "ICU Bed": 10,
        "Ventilator Bed": 5,
        "Oxygen Bed": 20,
        "Pediatric Bed": 15,
    }

    # Emergency lookup reference data
    FACILITIES_FILE: str = os.path.join(DATA_DIR, "hospitals.json")

    PATIENT_ID_MAX_ATTEMPTS: int = 20

    class Config:
        env_file = ".env"


settings = Settings()
