"""Tests for postal code record parsing."""
import pytest
from postal_geocoder.core.errors import MalformedRecordError
from postal_geocoder.core.records import POSTAL_CODE_COLUMNS, ParseStats, iter_records, parse_line


def test_parse_full_line(sample_lines):
    """Test positional mapping of a complete row."""
    record = parse_line(sample_lines[0] + "\n")

    assert record.country_code == "US"
    assert record.postal_code == "10018"
    assert record.place_name == "New York"
    assert record.admin_name1 == "New York"
    assert record.admin_code1 == "NY"
    assert record.admin_name2 == "New York"
    assert record.admin_code2 == "061"
    assert record.latitude == pytest.approx(40.7547)
    assert record.longitude == pytest.approx(-73.9925)
    assert record.latitude_text == "40.7547"
    assert record.longitude_text == "-73.9925"
    assert record.accuracy == 4


def test_empty_and_missing_fields_are_none(sample_lines):
    """Test that absent values become None, not '' or 0."""
    record = parse_line(sample_lines[3])

    assert record.admin_name1 is None
    assert record.admin_code3 is None
    assert record.accuracy is None
    assert record.postal_code == "AD100"


def test_extra_fields_are_ignored(sample_lines):
    record = parse_line(sample_lines[0] + "\textra\tcolumns")
    assert record.accuracy == 4


def test_non_integer_accuracy_is_none():
    record = parse_line("US\t10018\tNew York\t\t\t\t\t\t\t40.7547\t-73.9925\thigh")
    assert record.accuracy is None


@pytest.mark.parametrize("line", [
    "XX\t000\tNowhere\t\t\t\t\t\t\tabc\t1.0\t1",
    "XX\t000\tNowhere\t\t\t\t\t\t\t1.0\t\t1",
    "XX\t000\tNowhere\t\t\t\t\t\t\t91.0\t1.0\t1",
    "XX\t000\tNowhere\t\t\t\t\t\t\t1.0\t-180.5\t1",
    "XX\t000\tNowhere\t\t\t\t\t\t\tnan\t1.0\t1",
    "XX\t000\tNowhere\t\t\t\t\t\t\t1_0\t1.0\t1",
    "XX\t000\tNowhere\t\t\t\t\t\t\t1.0\tinfinity\t1",
    "XX\t000\tNowhere\t\t\t\t\t\t\t1e1\t1.0\t1",
    "XX\t000\tNowhere\t\t\t\t\t\t\t1.0\t0x10\t1",
    "YY\t111\tShort",
])
def test_bad_coordinates_are_rejected(line):
    """Test that rows without usable coordinates raise MalformedRecordError."""
    with pytest.raises(MalformedRecordError):
        parse_line(line)


@pytest.mark.parametrize("text, expected", [
    ("+40.5", 40.5),
    ("-.5", -0.5),
    ("12.", 12.0),
    (" 7 ", 7.0),
])
def test_plain_decimal_coordinates(text, expected):
    record = parse_line(f"US\t10018\tNew York\t\t\t\t\t\t\t{text}\t{text}\t4")
    assert record.latitude == expected
    assert record.longitude == expected


def test_malformed_record_error_carries_line_number():
    with pytest.raises(MalformedRecordError) as excinfo:
        parse_line("YY\t111\tShort", line_number=7)
    assert excinfo.value.line_number == 7
    assert "line 7" in str(excinfo.value)


def test_iter_records_skips_malformed_rows(sample_lines):
    """Test that one bad line does not abort ingestion of the rest."""
    stats = ParseStats()
    records = list(iter_records(sample_lines + ["", "   "], stats))

    assert [r.postal_code for r in records] == ["10018", "10122", "9000", "AD100"]
    assert stats.parsed == 4
    assert stats.skipped == 2


def test_column_schema():
    assert len(POSTAL_CODE_COLUMNS) == 12
    assert POSTAL_CODE_COLUMNS[9:] == ["latitude", "longitude", "accuracy"]
