"""Pytest configuration and fixtures."""
import random
import pytest
from postal_geocoder.core.geocoder import ReversePostalGeocoder
from postal_geocoder.core.index_builder import build
from postal_geocoder.core.models import PostalRecord
from postal_geocoder.gazetteers.base import PostalCodeProvider


SAMPLE_TSV_LINES = [
    "US\t10018\tNew York\tNew York\tNY\tNew York\t061\t\t\t40.7547\t-73.9925\t4",
    "US\t10122\tNew York\tNew York\tNY\tNew York\t061\t\t\t40.7518\t-73.9922\t",
    "NA\t9000\tWindhoek\tKhomas\t\t\t\t\t\t-22.5594\t17.0832\t1",
    "AD\tAD100\tCanillo\t\t\t\t\t\t\t42.5833\t1.6667",
    "XX\t000\tNowhere\t\t\t\t\t\t\tabc\t1.0\t1",
    "YY\t111\tShort",
]


@pytest.fixture
def manhattan_records():
    """Two postal codes a few hundred meters apart in Manhattan."""
    return [
        PostalRecord(latitude=40.7547, longitude=-73.9925, country_code="US", postal_code="10018",
                     place_name="New York", latitude_text="40.7547", longitude_text="-73.9925"),
        PostalRecord(latitude=40.7518, longitude=-73.9922, country_code="US", postal_code="10122",
                     place_name="New York", latitude_text="40.7518", longitude_text="-73.9922"),
    ]


@pytest.fixture
def random_records():
    """Random records over the whole globe, with clusters at the antimeridian and poles."""
    rng = random.Random(42)
    records = []
    for i in range(1500):
        bucket = i % 3
        if bucket == 0:
            lat, lon = rng.uniform(-90, 90), rng.uniform(-180, 180)
        elif bucket == 1:
            lat, lon = rng.uniform(-60, 60), rng.choice([-1, 1]) * rng.uniform(175, 180)
        else:
            lat, lon = rng.choice([-1, 1]) * rng.uniform(80, 90), rng.uniform(-180, 180)
        records.append(PostalRecord(latitude=lat, longitude=lon, postal_code=str(i)))
    return records


@pytest.fixture
def sample_lines():
    """Raw GeoNames rows: four good, two without usable coordinates."""
    return list(SAMPLE_TSV_LINES)


@pytest.fixture
def sample_tsv(tmp_path):
    """GeoNames-style TSV with two malformed rows."""
    path = tmp_path / "allCountries.txt"
    path.write_text("\n".join(SAMPLE_TSV_LINES) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def geocoder(manhattan_records):
    """Geocoder with a ready index over the Manhattan records."""
    return ReversePostalGeocoder(index=build(manhattan_records))


class ListProvider(PostalCodeProvider):
    """Provider serving records from memory."""

    def __init__(self, records):
        self.records = records

    def iter_records(self):
        return iter(self.records)

    def get_name(self):
        return "List"


@pytest.fixture
def list_provider():
    """Factory for in-memory record providers."""
    return ListProvider
