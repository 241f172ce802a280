"""Great-circle distance functions used for ranking and pruning."""
import math
from typing import Iterable, List
from postal_geocoder.core.models import Point, PostalRecord, QueryResult

# Spherical Earth radius in kilometers
EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate distance between two points using Haversine formula.

    Args:
        lat1: Latitude of first point
        lon1: Longitude of first point
        lat2: Latitude of second point
        lon2: Longitude of second point

    Returns:
        Distance in kilometers
    """
    # Convert to radians
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    # Haversine formula
    a = math.sin(dlat/2)**2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon/2)**2
    c = 2 * math.asin(min(1.0, math.sqrt(a)))

    return EARTH_RADIUS_KM * c


def parallel_distance_km(lat: float, parallel_lat: float) -> float:
    """Shortest distance from a point at `lat` to the parallel `parallel_lat`."""
    return EARTH_RADIUS_KM * math.radians(abs(lat - parallel_lat))


def meridian_distance_km(lat: float, lon: float, meridian_lon: float) -> float:
    """
    Shortest distance from a point to the half great circle of a meridian.

    Args:
        lat: Latitude of the point
        lon: Longitude of the point
        meridian_lon: Longitude of the meridian (pole to pole)

    Returns:
        Distance in kilometers
    """
    dlon = (lon - meridian_lon + 180.0) % 360.0 - 180.0
    if abs(dlon) > 90.0:
        # Closest point of the meridian is the nearer pole
        return EARTH_RADIUS_KM * math.radians(90.0 - abs(lat))
    cross = math.cos(math.radians(lat)) * abs(math.sin(math.radians(dlon)))
    return EARTH_RADIUS_KM * math.asin(min(1.0, cross))


def find_nearest_records(
    point: Point,
    records: Iterable[PostalRecord],
    limit: int = 1
) -> List[QueryResult]:
    """
    Find nearest records by scanning every record.

    Linear reference for the k-d tree search: same metric, same ordering
    (distance, then input order).

    Args:
        point: Query point
        records: Records to scan
        limit: Maximum number of results

    Returns:
        Results sorted by distance
    """
    scored = [
        (haversine_km(point.latitude, point.longitude, record.latitude, record.longitude), seq, record)
        for seq, record in enumerate(records)
    ]

    # Sort by distance
    scored.sort(key=lambda x: (x[0], x[1]))

    return [QueryResult(record=record, distance=distance) for distance, _, record in scored[:limit]]
