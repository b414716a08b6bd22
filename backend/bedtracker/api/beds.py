"""Bed availability endpoints."""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..models.base import get_db
from ..services.bed_ledger import BedLedger
from ..core.errors import BedTrackerError

router = APIRouter(prefix="/beds", tags=["beds"])


class BedCategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    bed_type: str
    beds_available: int


class BedUpdateRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    bed_type: str = Field(..., min_length=1)
    beds_available: int

    @field_validator("beds_available", mode="before")
    @classmethod
    def reject_boolean_count(cls, v):
        if isinstance(v, bool):
            raise ValueError("bedsAvailable must be a number, not a boolean")
        return v


@router.get("", response_model=List[BedCategoryResponse])
def list_beds(db: Session = Depends(get_db)):
    """Availability for every bed category."""
    return BedLedger(db).list_availability()


@router.put("/update", response_model=BedCategoryResponse)
def update_beds(req: BedUpdateRequest, db: Session = Depends(get_db)):
    """Administrative override of a category's available count."""
    try:
        return BedLedger(db).set_availability(req.bed_type, req.beds_available)
    except BedTrackerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/{bed_type}", response_model=BedCategoryResponse)
def get_bed_category(bed_type: str, db: Session = Depends(get_db)):
    try:
        return BedLedger(db).get(bed_type)
    except BedTrackerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
