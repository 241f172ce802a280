"""Tests for distance functions."""
import pytest
from postal_geocoder.core.models import Point, PostalRecord
from postal_geocoder.core.proximity import (
    EARTH_RADIUS_KM,
    find_nearest_records,
    haversine_km,
    meridian_distance_km,
    parallel_distance_km,
)


def test_haversine_zero_distance():
    assert haversine_km(40.7547, -73.9925, 40.7547, -73.9925) == pytest.approx(0.0, abs=1e-9)


def test_haversine_ten_degrees_near_equator():
    assert haversine_km(0, 0, 10, 10) == pytest.approx(1568.5, abs=1.0)


def test_haversine_symmetric_and_across_antimeridian():
    assert haversine_km(10, 179.5, 10, -179.5) == pytest.approx(haversine_km(10, -179.5, 10, 179.5))
    # One degree of longitude at 10 degrees latitude, not 359
    assert haversine_km(10, 179.5, 10, -179.5) < 120


def test_parallel_distance():
    assert parallel_distance_km(10, 9) == pytest.approx(EARTH_RADIUS_KM * 3.141592653589793 / 180)
    assert parallel_distance_km(9, 10) == parallel_distance_km(10, 9)


def test_meridian_distance():
    """Test cross-track distance to a meridian, including the pole case."""
    assert meridian_distance_km(45, 3, 3) == pytest.approx(0.0, abs=1e-9)
    # On the equator the meridian distance is the longitude arc
    assert meridian_distance_km(0, 5, 0) == pytest.approx(haversine_km(0, 5, 0, 0))
    # Never more than the distance to any point on the meridian
    assert meridian_distance_km(60, 10, 0) <= haversine_km(60, 10, 60, 0)
    # More than 90 degrees away: nearest point is the pole
    assert meridian_distance_km(80, 0, 180) == pytest.approx(haversine_km(80, 0, 90, 0))
    assert meridian_distance_km(10, 179, 180) == pytest.approx(meridian_distance_km(10, -179, 180))


def test_find_nearest_records():
    """Test the linear reference scan."""
    records = [
        PostalRecord(latitude=0.0, longitude=1.0, postal_code="east"),
        PostalRecord(latitude=0.0, longitude=-1.0, postal_code="west"),
        PostalRecord(latitude=5.0, longitude=0.0, postal_code="north"),
    ]

    results = find_nearest_records(Point(0, 0), records, limit=2)

    assert [r.record.postal_code for r in results] == ["east", "west"]
    assert results[0].distance == results[1].distance
