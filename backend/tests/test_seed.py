"""Tests for the operator seeding tasks."""
import json

import pytest

from bedtracker.core.config import settings
from bedtracker.models.bed import BedCategory
from bedtracker.models.facility import Facility
from bedtracker.seed import load_facilities, main, reset_bed_categories, seed_bed_categories
from bedtracker.services.bed_ledger import BedLedger


class TestSeedBeds:
    def test_creates_default_categories(self, db):
        created = seed_bed_categories()
        assert sorted(created) == sorted(settings.DEFAULT_BED_CATEGORIES)
        counts = {c.bed_type: c.beds_available for c in db.query(BedCategory).all()}
        assert counts == settings.DEFAULT_BED_CATEGORIES

    def test_idempotent_and_keeps_occupancy(self, db):
        seed_bed_categories({"ICU Bed": 10})
        BedLedger(db).reserve("ICU Bed")
        assert seed_bed_categories({"ICU Bed": 10}) == []
        db.expire_all()
        assert db.query(BedCategory).filter(BedCategory.bed_type == "ICU Bed").one().beds_available == 9
        assert db.query(BedCategory).count() == 1


class TestResetBeds:
    def test_reset_restores_totals(self, db):
        seed_bed_categories({"ICU Bed": 10, "General Bed": 5})
        BedLedger(db).reserve("ICU Bed")
        reset_bed_categories({"ICU Bed": 10})
        db.expire_all()
        rows = [(c.bed_type, c.beds_available) for c in db.query(BedCategory).all()]
        assert rows == [("ICU Bed", 10)]

    def test_cli_reset_with_categories(self, db, capsys):
        assert main(["reset-beds", "--category", "ICU Bed=3", "--category", "Burn Unit=1"]) == 0
        counts = {c.bed_type: c.beds_available for c in db.query(BedCategory).all()}
        assert counts == {"ICU Bed": 3, "Burn Unit": 1}
        assert "Reset bed category: ICU Bed = 3" in capsys.readouterr().out

    def test_cli_rejects_malformed_category(self, session_factory):
        with pytest.raises(SystemExit):
            main(["reset-beds", "--category", "ICU Bed"])

    def test_cli_reports_invalid_totals(self, session_factory, capsys):
        assert main(["reset-beds", "--category", "ICU Bed=-4"]) == 1
        assert "error" in capsys.readouterr().err


class TestLoadFacilities:
    def test_loads_bundled_file_once(self, db):
        assert load_facilities() == 5
        assert load_facilities() == 0
        assert db.query(Facility).count() == 5

    def test_loads_custom_file(self, db, tmp_path):
        path = tmp_path / "hospitals.json"
        path.write_text(json.dumps([{"name": "Field Hospital", "lat": 1.5, "lng": 2.5, "contact": "112"}]))
        assert main(["load-facilities", "--file", str(path)]) == 0
        facility = db.query(Facility).one()
        assert (facility.name, facility.lat, facility.lng) == ("Field Hospital", 1.5, 2.5)

    def test_rejects_non_array_file(self, session_factory, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"name": "Not a list"}))
        with pytest.raises(ValueError):
            load_facilities(str(path))
