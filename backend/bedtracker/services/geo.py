"""
Nearest-facility lookup for the emergency feature.
Great-circle (haversine) distance from the caller to every known hospital.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import numpy as np
from sqlalchemy.orm import Session

from ..core.errors import MissingCoordinates, ValidationError
from ..models.facility import Facility

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1, lng1, lat2, lng2):
    """Distance in km between points given in degrees. Scalars or numpy arrays."""
    lat1, lng1, lat2, lng2 = (np.radians(np.asarray(v, dtype=float)) for v in (lat1, lng1, lat2, lng2))
    dlat = lat2 - lat1
    dlng = lng2 - lng1
    a = np.sin(dlat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_KM * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


@dataclass
class RankedFacility:
    id: Optional[str]
    name: str
    address: Optional[str]
    lat: float
    lng: float
    contact: Optional[str]
    distance: float  # km


def rank_by_distance(origin_lat: float, origin_lng: float, facilities: Sequence) -> List[RankedFacility]:
    """
    Attach ``distance`` to every facility and sort ascending.
    Stable: facilities at equal distance keep their input order. No cutoff.
    """
    facilities = list(facilities)
    if not facilities:
        return []
    lats = np.array([f.lat for f in facilities], dtype=float)
    lngs = np.array([f.lng for f in facilities], dtype=float)
    distances = haversine_km(origin_lat, origin_lng, lats, lngs)
    order = np.argsort(distances, kind="stable")
    return [
        RankedFacility(
            id=getattr(facilities[i], "id", None),
            name=facilities[i].name,
            address=getattr(facilities[i], "address", None),
            lat=float(facilities[i].lat),
            lng=float(facilities[i].lng),
            contact=getattr(facilities[i], "contact", None),
            distance=float(distances[i]),
        )
        for i in order
    ]


def validate_coordinates(lat: Optional[float], lng: Optional[float]) -> None:
    if lat is None or lng is None:
        raise MissingCoordinates()
    if not -90.0 <= lat <= 90.0:
        raise ValidationError("Latitude must be between -90 and 90")
    if not -180.0 <= lng <= 180.0:
        raise ValidationError("Longitude must be between -180 and 180")


def list_facilities(db: Session) -> List[Facility]:
    return db.query(Facility).order_by(Facility.created_at, Facility.name).all()


def nearest_facilities(db: Session, lat: Optional[float], lng: Optional[float]) -> List[RankedFacility]:
    validate_coordinates(lat, lng)
    return rank_by_distance(lat, lng, list_facilities(db))


def facilities_from_records(records: Iterable[dict]) -> List[Facility]:
    """Build Facility rows from raw JSON records, rejecting out-of-range coordinates."""
    facilities = []
    for rec in records:
        try:
            lat = float(rec["lat"])
            lng = float(rec["lng"])
        except (KeyError, TypeError, ValueError):
            raise ValidationError(f"Facility {rec.get('name')!r} has missing or invalid coordinates")
        validate_coordinates(lat, lng)
        if not rec.get("name"):
            raise ValidationError("Facility name is required")
        facilities.append(
            Facility(
                name=rec["name"],
                address=rec.get("address"),
                lat=lat,
                lng=lng,
                contact=rec.get("contact"),
            )
        )
    return facilities
