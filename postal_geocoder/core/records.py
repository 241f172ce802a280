"""Parsing of GeoNames postal code rows into PostalRecord objects."""
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Optional, Sequence
from postal_geocoder.core.errors import MalformedRecordError
from postal_geocoder.core.models import PostalRecord
from postal_geocoder.utils.logging import log_structured

# Column order of http://download.geonames.org/export/zip/ dumps
POSTAL_CODE_COLUMNS = [
    "country_code",  # iso country code, 2 characters
    "postal_code",   # varchar(20)
    "place_name",    # varchar(180)
    "admin_name1",   # 1. order subdivision (state) varchar(100)
    "admin_code1",   # 1. order subdivision (state) varchar(20)
    "admin_name2",   # 2. order subdivision (county/province) varchar(100)
    "admin_code2",   # 2. order subdivision (county/province) varchar(20)
    "admin_name3",   # 3. order subdivision (community) varchar(100)
    "admin_code3",   # 3. order subdivision (community) varchar(20)
    "latitude",      # estimated latitude (wgs84)
    "longitude",     # estimated longitude (wgs84)
    "accuracy",      # accuracy of lat/lng from 1=estimated, 4=geonameid, 6=centroid
]

# Plain decimal degrees only: no exponents, underscores or inf/nan spellings
_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")


@dataclass
class ParseStats:
    """Counters for one ingestion run."""
    parsed: int = 0
    skipped: int = 0


def _clean(value: Any) -> Optional[str]:
    # Short rows read through pandas come back as NaN floats
    if not isinstance(value, str) or not value.strip():
        return None
    return value


def _parse_coordinate(text: Optional[str], name: str, limit: float, line_number: Optional[int]) -> float:
    if text is None:
        raise MalformedRecordError(f"missing {name}", line_number)
    if not _DECIMAL_RE.fullmatch(text.strip()):
        raise MalformedRecordError(f"non-numeric {name} {text!r}", line_number)
    value = float(text.strip())
    if not math.isfinite(value) or not -limit <= value <= limit:
        raise MalformedRecordError(f"{name} {text!r} out of range", line_number)
    return value


def _parse_accuracy(text: Optional[str]) -> Optional[int]:
    if text is None:
        return None
    try:
        return int(text.strip())
    except ValueError:
        return None


def parse_fields(fields: Sequence[Any], line_number: Optional[int] = None) -> PostalRecord:
    """
    Map an already split row onto the postal code column schema.

    Missing trailing fields and empty values become None. Extra fields are ignored.

    Args:
        fields: Row values in POSTAL_CODE_COLUMNS order
        line_number: Source line number, used in error messages

    Returns:
        PostalRecord

    Raises:
        MalformedRecordError: If latitude or longitude is missing or invalid
    """
    values = {
        column: _clean(fields[i]) if i < len(fields) else None
        for i, column in enumerate(POSTAL_CODE_COLUMNS)
    }

    latitude_text = values.pop("latitude")
    longitude_text = values.pop("longitude")
    accuracy_text = values.pop("accuracy")

    return PostalRecord(
        latitude=_parse_coordinate(latitude_text, "latitude", 90.0, line_number),
        longitude=_parse_coordinate(longitude_text, "longitude", 180.0, line_number),
        accuracy=_parse_accuracy(accuracy_text),
        latitude_text=latitude_text,
        longitude_text=longitude_text,
        **values
    )


def parse_line(line: str, line_number: Optional[int] = None) -> PostalRecord:
    """Parse one tab-delimited line of the postal code dump."""
    return parse_fields(line.rstrip("\r\n").split("\t"), line_number)


def iter_records(
    rows: Iterable[Any],
    stats: Optional[ParseStats] = None,
    parse: Callable[[Any, Optional[int]], PostalRecord] = parse_line
) -> Iterator[PostalRecord]:
    """
    Parse rows lazily, skipping and logging the ones that are malformed.

    Args:
        rows: Raw lines (or pre-split rows when parse is parse_fields)
        stats: Optional counters updated while iterating
        parse: Row parser

    Yields:
        PostalRecord for each well-formed row
    """
    if stats is None:
        stats = ParseStats()

    for line_number, row in enumerate(rows, start=1):
        if isinstance(row, str) and not row.strip():
            continue
        try:
            record = parse(row, line_number)
        except MalformedRecordError as e:
            stats.skipped += 1
            log_structured(
                "warning",
                "Skipping malformed postal code record",
                line_number=line_number,
                reason=str(e)
            )
            continue
        stats.parsed += 1
        yield record
