"""Data models for postal code records and lookup results."""
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any
from postal_geocoder.core.errors import InvalidQueryPointError


@dataclass(frozen=True)
class PostalRecord:
    """One row of the GeoNames postal code dump."""
    latitude: float
    longitude: float
    country_code: Optional[str] = None
    postal_code: Optional[str] = None
    place_name: Optional[str] = None
    admin_name1: Optional[str] = None
    admin_code1: Optional[str] = None
    admin_name2: Optional[str] = None
    admin_code2: Optional[str] = None
    admin_name3: Optional[str] = None
    admin_code3: Optional[str] = None
    accuracy: Optional[int] = None
    latitude_text: Optional[str] = None
    longitude_text: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)


def _coerce_coordinate(value: Any, name: str, limit: float) -> float:
    if value is None or isinstance(value, bool):
        raise InvalidQueryPointError(f"{name} is required")
    if isinstance(value, str):
        value = value.strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidQueryPointError(f"{name} must be numeric, got {value!r}")
    if not math.isfinite(number):
        raise InvalidQueryPointError(f"{name} must be finite, got {value!r}")
    if not -limit <= number <= limit:
        raise InvalidQueryPointError(f"{name} {number} outside [-{limit:g}, {limit:g}]")
    return number


@dataclass(frozen=True)
class Point:
    """Latitude/longitude pair used as the index key and query input."""
    latitude: float
    longitude: float

    def __post_init__(self):
        object.__setattr__(self, "latitude", _coerce_coordinate(self.latitude, "latitude", 90.0))
        object.__setattr__(self, "longitude", _coerce_coordinate(self.longitude, "longitude", 180.0))

    @classmethod
    def from_value(cls, value: Any) -> "Point":
        """
        Build a point from a Point, a latitude/longitude mapping or a (lat, lon) pair.

        Mapping values may be numeric strings, as received from query strings.

        Raises:
            InvalidQueryPointError: If the value cannot be read as valid coordinates
        """
        if isinstance(value, Point):
            return value
        if isinstance(value, Mapping):
            return cls(value.get("latitude"), value.get("longitude"))
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)) and len(value) == 2:
            return cls(value[0], value[1])
        raise InvalidQueryPointError(f"Cannot interpret {value!r} as a latitude/longitude point")

    def as_tuple(self):
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class QueryResult:
    """A postal code record annotated with its distance from the query point."""
    record: PostalRecord
    distance: float  # kilometres

    def to_dict(self) -> Dict[str, Any]:
        """Flatten the record fields and add the distance."""
        data = self.record.to_dict()
        data["distance"] = self.distance
        return data
