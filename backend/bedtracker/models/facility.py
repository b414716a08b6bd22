from sqlalchemy import Column, String, Float, Text, CheckConstraint
from .base import Base, TimestampMixin, generate_uuid


class Facility(Base, TimestampMixin):
    """Static hospital reference data used by the emergency lookup."""
    __tablename__ = "facilities"
    __table_args__ = (
        CheckConstraint("lat >= -90 AND lat <= 90", name="ck_facilities_lat_range"),
        CheckConstraint("lng >= -180 AND lng <= 180", name="ck_facilities_lng_range"),
    )

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(200), nullable=False, index=True)
    address = Column(Text, nullable=True)
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    contact = Column(String(100), nullable=True)
