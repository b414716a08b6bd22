"""
Bed Ledger - one availability counter per bed category.

Counter changes are issued as single conditional UPDATE statements so two
concurrent admissions can never both take the last bed.
"""
import logging
from typing import Iterable, List, Mapping, Tuple, Union
from sqlalchemy.orm import Session

from ..models.bed import BedCategory
from ..models.base import generate_uuid
from ..core.errors import InvalidCount, NoBedsAvailable, UnknownBedType, ValidationError

logger = logging.getLogger(__name__)

CategorySpec = Union[Mapping, Tuple[str, int]]


def _is_valid_count(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _normalize_categories(categories) -> List[Tuple[str, int]]:
    """Accept ``{name: total}``, ``[(name, total)]`` or ``[{"bed_type": .., "total_beds": ..}]``."""
    if isinstance(categories, Mapping):
        categories = list(categories.items())

    normalized: List[Tuple[str, int]] = []
    seen = set()
    for entry in categories:
        if isinstance(entry, Mapping):
            bed_type = entry.get("bed_type", entry.get("bedType"))
            total = entry.get("total_beds", entry.get("totalBeds"))
        else:
            bed_type, total = entry
        bed_type = (bed_type or "").strip() if isinstance(bed_type, str) else bed_type
        if not bed_type or not isinstance(bed_type, str):
            raise ValidationError("Bed type name is required")
        if not _is_valid_count(total):
            raise InvalidCount(f"Total beds for '{bed_type}' must be a non-negative integer")
        if bed_type in seen:
            raise ValidationError(f"Duplicate bed type '{bed_type}'")
        seen.add(bed_type)
        normalized.append((bed_type, total))
    return normalized


class BedLedger:
    """Availability counters keyed by bed type."""

    def __init__(self, db: Session):
        self.db = db

    def list_availability(self) -> List[BedCategory]:
        return self.db.query(BedCategory).order_by(BedCategory.bed_type).all()

    def get(self, bed_type: str) -> BedCategory:
        category = self.db.query(BedCategory).filter(BedCategory.bed_type == bed_type).first()
        if not category:
            raise UnknownBedType(bed_type)
        return category

    def _exists(self, bed_type: str) -> bool:
        return (
            self.db.query(BedCategory.id).filter(BedCategory.bed_type == bed_type).first()
            is not None
        )

    def reserve(self, bed_type: str, commit: bool = True) -> None:
        """Take one bed. Decrements only where the counter is still positive."""
        updated = (
            self.db.query(BedCategory)
            .filter(BedCategory.bed_type == bed_type, BedCategory.beds_available > 0)
            .update(
                {BedCategory.beds_available: BedCategory.beds_available - 1},
                synchronize_session="fetch",
            )
        )
        if updated == 0:
            if not self._exists(bed_type):
                raise UnknownBedType(bed_type)
            raise NoBedsAvailable(bed_type)
        if commit:
            self.db.commit()
        logger.debug("Reserved one '%s' bed", bed_type)

    def release(self, bed_type: str, commit: bool = True) -> None:
        """Give one bed back. Never creates a missing category."""
        updated = (
            self.db.query(BedCategory)
            .filter(BedCategory.bed_type == bed_type)
            .update(
                {BedCategory.beds_available: BedCategory.beds_available + 1},
                synchronize_session="fetch",
            )
        )
        if updated == 0:
            raise UnknownBedType(bed_type)
        if commit:
            self.db.commit()
        logger.debug("Released one '%s' bed", bed_type)

    def set_availability(self, bed_type: str, count: int) -> BedCategory:
        """Administrative override: replace the counter unconditionally."""
        if not _is_valid_count(count):
            raise InvalidCount("bedsAvailable must be a non-negative integer")
        category = self.get(bed_type)
        previous = category.beds_available
        category.beds_available = count
        self.db.commit()
        self.db.refresh(category)
        logger.info("Bed availability for '%s' overridden: %d -> %d", bed_type, previous, count)
        return category

    def initialize(self, categories: Iterable[CategorySpec]) -> List[BedCategory]:
        """
        Destructive reset: drop every category and recreate them with the given totals.
        Discards in-flight occupancy, so only operator tooling should call this.
        """
        normalized = _normalize_categories(categories)
        self.db.query(BedCategory).delete(synchronize_session=False)
        created = []
        for bed_type, total in normalized:
            category = BedCategory(id=generate_uuid(), bed_type=bed_type, beds_available=total)
            self.db.add(category)
            created.append(category)
        self.db.commit()
        logger.warning("Bed ledger re-initialized with %d categories", len(created))
        return created

    def seed_missing(self, categories: Iterable[CategorySpec]) -> List[BedCategory]:
        """Create categories that do not exist yet. Existing counters are left untouched."""
        normalized = _normalize_categories(categories)
        existing = {bed_type for (bed_type,) in self.db.query(BedCategory.bed_type).all()}
        created = []
        for bed_type, total in normalized:
            if bed_type in existing:
                continue
            category = BedCategory(id=generate_uuid(), bed_type=bed_type, beds_available=total)
            self.db.add(category)
            created.append(category)
        if created:
            self.db.commit()
            logger.info("Seeded %d missing bed categories", len(created))
        return created
