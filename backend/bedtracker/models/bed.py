from sqlalchemy import Column, String, Integer, CheckConstraint
from .base import Base, TimestampMixin, generate_uuid


class BedCategory(Base, TimestampMixin):
    """A named pool of interchangeable beds with its own availability counter."""
    __tablename__ = "bed_categories"
    __table_args__ = (
        CheckConstraint("beds_available >= 0", name="ck_bed_categories_beds_available_non_negative"),
    )

    id = Column(String, primary_key=True, default=generate_uuid)
    bed_type = Column(String(100), unique=True, nullable=False, index=True)  # e.g. "ICU Bed"
    beds_available = Column(Integer, nullable=False, default=0)
