"""Emergency lookup: hospitals ranked by distance from the caller."""
import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from pydantic import BaseModel, ConfigDict

from ..models.base import get_db
from ..services.geo import nearest_facilities
from ..core.errors import BedTrackerError
from ..seed import load_facilities_file

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/hospitals", tags=["hospitals"])


class FacilityDistanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[str]
    name: str
    address: Optional[str]
    lat: float
    lng: float
    contact: Optional[str]
    distance: float


@router.get("", response_model=List[FacilityDistanceResponse])
def hospitals_by_distance(
    lat: Optional[float] = Query(None, description="Caller latitude"),
    lng: Optional[float] = Query(None, description="Caller longitude"),
    db: Session = Depends(get_db),
):
    """Every known hospital with ``distance`` (km), nearest first."""
    try:
        return nearest_facilities(db, lat, lng)
    except BedTrackerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/load-data")
def load_hospital_data(db: Session = Depends(get_db)):
    """Load the bundled hospital list. Hospitals already present are skipped."""
    try:
        loaded = load_facilities_file(db)
    except BedTrackerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except (OSError, ValueError) as e:
        logger.error("Error loading hospital data: %s", e)
        raise HTTPException(status_code=500, detail="Error loading hospital data")
    return {"message": "Hospitals data loaded successfully", "loaded": loaded}
