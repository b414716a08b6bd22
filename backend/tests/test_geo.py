from types import SimpleNamespace

import numpy as np
import pytest

from bedtracker.core.errors import MissingCoordinates, ValidationError
from bedtracker.models.facility import Facility
from bedtracker.services.geo import (
    facilities_from_records,
    haversine_km,
    nearest_facilities,
    rank_by_distance,
)


def _facility(name, lat, lng):
    return SimpleNamespace(id=name, name=name, address=None, lat=lat, lng=lng, contact=None)


class TestHaversine:
    def test_identical_points_are_zero(self):
        assert haversine_km(28.6139, 77.2090, 28.6139, 77.2090) == 0

    def test_distance_is_symmetric(self):
        a = (51.5074, -0.1278)
        b = (40.7128, -74.0060)
        assert haversine_km(*a, *b) == pytest.approx(haversine_km(*b, *a))

    def test_one_degree_of_longitude_on_the_equator(self):
        assert haversine_km(0, 0, 0, 1) == pytest.approx(111.19, abs=0.01)

    def test_known_city_pair(self):
        # London to New York is roughly 5570 km on a 6371 km sphere
        assert haversine_km(51.5074, -0.1278, 40.7128, -74.0060) == pytest.approx(5570, rel=0.005)

    def test_antipodal_points(self):
        assert haversine_km(0, 0, 0, 180) == pytest.approx(np.pi * 6371.0)

    def test_vectorised_input(self):
        d = haversine_km(0, 0, np.array([0.0, 0.0]), np.array([1.0, 10.0]))
        assert d.shape == (2,)
        assert d[1] > d[0]


class TestRanking:
    def test_orders_nearest_first_with_distances(self):
        facilities = [_facility("far", 0, 10), _facility("here", 0, 0), _facility("near", 0, 1)]
        ranked = rank_by_distance(0, 0, facilities)
        assert [f.name for f in ranked] == ["here", "near", "far"]
        assert [f.distance for f in ranked] == pytest.approx([0.0, 111.19, 1111.95], abs=0.01)

    def test_ties_keep_input_order(self):
        east = _facility("east", 0, 1)
        west = _facility("west", 0, -1)
        assert [f.name for f in rank_by_distance(0, 0, [east, west])] == ["east", "west"]
        assert [f.name for f in rank_by_distance(0, 0, [west, east])] == ["west", "east"]

    def test_returns_every_facility(self):
        facilities = [_facility(f"h{i}", 0, i * 20) for i in range(8)]
        assert len(rank_by_distance(0, 0, facilities)) == 8

    def test_empty_input(self):
        assert rank_by_distance(10, 10, []) == []

    def test_distances_are_plain_floats(self):
        ranked = rank_by_distance(0, 0, [_facility("a", 1, 1)])
        assert type(ranked[0].distance) is float


class TestNearestFacilities:
    def test_missing_coordinates(self, db):
        with pytest.raises(MissingCoordinates):
            nearest_facilities(db, None, 77.2)
        with pytest.raises(MissingCoordinates):
            nearest_facilities(db, 28.6, None)

    def test_zero_is_a_valid_coordinate(self, db):
        db.add(Facility(name="Null Island Clinic", lat=0.0, lng=0.0))
        db.commit()
        ranked = nearest_facilities(db, 0.0, 0.0)
        assert ranked[0].name == "Null Island Clinic"
        assert ranked[0].distance == 0

    @pytest.mark.parametrize("lat,lng", [(91, 0), (-90.5, 0), (0, 181), (0, -180.1)])
    def test_out_of_range(self, db, lat, lng):
        with pytest.raises(ValidationError):
            nearest_facilities(db, lat, lng)

    def test_reads_facilities_from_database(self, db):
        db.add_all([Facility(name="B", lat=0, lng=5), Facility(name="A", lat=0, lng=2)])
        db.commit()
        assert [f.name for f in nearest_facilities(db, 0, 0)] == ["A", "B"]


class TestFacilityRecords:
    def test_builds_rows(self):
        rows = facilities_from_records([{"name": "X", "lat": "12.5", "lng": 77, "contact": "100"}])
        assert rows[0].lat == 12.5
        assert rows[0].contact == "100"

    def test_rejects_missing_coordinates(self):
        with pytest.raises(ValidationError):
            facilities_from_records([{"name": "X", "lat": 1}])

    def test_rejects_out_of_range(self):
        with pytest.raises(ValidationError):
            facilities_from_records([{"name": "X", "lat": 100, "lng": 0}])
