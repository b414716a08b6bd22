"""
Operator tasks for the bed tracker.

    python -m bedtracker.seed seed-beds
    python -m bedtracker.seed reset-beds --category "ICU Bed=12" --category "General Bed=40"
    python -m bedtracker.seed load-facilities --file hospitals.json

``seed-beds`` is idempotent and is also what runs on startup when
SEED_ON_STARTUP is set. ``reset-beds`` is destructive: it discards current
occupancy and must only be run deliberately, as a migration step.
"""
import argparse
import json
import sys
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from .core.config import settings
from .core.errors import BedTrackerError
from .models.base import SessionLocal, Base, engine
from .models.facility import Facility
from .services.bed_ledger import BedLedger
from .services.geo import facilities_from_records


def seed_bed_categories(categories: Optional[Dict[str, int]] = None) -> List[str]:
    """Create any missing bed categories. Existing counters are never touched."""
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        created = BedLedger(db).seed_missing(categories or settings.DEFAULT_BED_CATEGORIES)
        names = [c.bed_type for c in created]
    finally:
        db.close()
    for name in names:
        print(f"[seed] Created bed category: {name}")
    return names


def reset_bed_categories(categories: Optional[Dict[str, int]] = None) -> List[str]:
    """Drop every bed category and recreate it with its full total."""
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        created = BedLedger(db).initialize(categories or settings.DEFAULT_BED_CATEGORIES)
        summary = [(c.bed_type, c.beds_available) for c in created]
    finally:
        db.close()
    for name, total in summary:
        print(f"[seed] Reset bed category: {name} = {total}")
    return [name for name, _ in summary]


def load_facilities_file(db: Session, path: Optional[str] = None) -> int:
    """Load facilities from a JSON array file; names already present are skipped."""
    path = path or settings.FACILITIES_FILE
    with open(path, "r", encoding="utf-8") as fh:
        records = json.load(fh)
    if not isinstance(records, list):
        raise ValueError(f"{path}: expected a JSON array of facilities")

    existing = {name for (name,) in db.query(Facility.name).all()}
    loaded = 0
    for facility in facilities_from_records(records):
        if facility.name in existing:
            continue
        db.add(facility)
        existing.add(facility.name)
        loaded += 1
    db.commit()
    return loaded


def load_facilities(path: Optional[str] = None) -> int:
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        loaded = load_facilities_file(db, path)
    finally:
        db.close()
    print(f"[seed] Loaded {loaded} facilities")
    return loaded


def _parse_category(value: str):
    name, sep, count = value.rpartition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=COUNT, got {value!r}")
    try:
        total = int(count)
    except ValueError:
        raise argparse.ArgumentTypeError(f"bed count must be an integer, got {count!r}")
    return name.strip(), total


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="python -m bedtracker.seed", description=__doc__.split("\n\n")[0])
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("seed-beds", help="create missing bed categories (safe to repeat)")

    reset = sub.add_parser("reset-beds", help="DESTRUCTIVE: reset all bed categories to full totals")
    reset.add_argument(
        "--category",
        action="append",
        type=_parse_category,
        metavar="NAME=COUNT",
        help="category to create; defaults to DEFAULT_BED_CATEGORIES",
    )

    facilities = sub.add_parser("load-facilities", help="load hospitals for the emergency lookup")
    facilities.add_argument("--file", default=None, help="JSON array of {name, address, lat, lng, contact}")

    args = parser.parse_args(argv)
    try:
        if args.command == "seed-beds":
            seed_bed_categories()
        elif args.command == "reset-beds":
            reset_bed_categories(dict(args.category) if args.category else None)
        elif args.command == "load-facilities":
            load_facilities(args.file)
    except (BedTrackerError, OSError, ValueError) as e:
        print(f"[seed] error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
