"""Tests for the GeoNames postal code provider."""
import pytest
from postal_geocoder.gazetteers.geonames import GeoNamesPostalProvider


def test_reads_tsv_and_skips_malformed_rows(sample_tsv):
    """Test pandas-based ingestion of a GeoNames dump."""
    provider = GeoNamesPostalProvider(sample_tsv)

    records = list(provider.iter_records())

    assert [r.postal_code for r in records] == ["10018", "10122", "9000", "AD100"]
    assert provider.stats.parsed == 4
    assert provider.stats.skipped == 2


def test_values_are_not_coerced(sample_tsv):
    """Test that 'NA' stays a country code and empty cells become None."""
    records = {r.postal_code: r for r in GeoNamesPostalProvider(sample_tsv).iter_records()}

    namibia = records["9000"]
    assert namibia.country_code == "NA"
    assert namibia.admin_code1 is None
    assert namibia.accuracy == 1

    assert records["10122"].accuracy is None
    assert records["10018"].admin_code2 == "061"
    assert records["10018"].latitude_text == "40.7547"
    assert records["AD100"].accuracy is None


def test_small_chunks(sample_tsv):
    provider = GeoNamesPostalProvider(sample_tsv, chunksize=2)
    assert len(list(provider.iter_records())) == 4


def test_empty_file(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("", encoding="utf-8")

    assert list(GeoNamesPostalProvider(path).iter_records()) == []


def test_missing_file(tmp_path):
    provider = GeoNamesPostalProvider(tmp_path / "missing.txt")

    with pytest.raises(FileNotFoundError):
        list(provider.iter_records())


def test_get_name(sample_tsv):
    assert GeoNamesPostalProvider(sample_tsv).get_name() == "GeoNames"


def test_undecodable_bytes_do_not_abort_ingestion(tmp_path):
    """Test that a Latin-1 byte in one row does not stop the rest of the file."""
    path = tmp_path / "DE.txt"
    path.write_bytes(
        b"DE\t10115\tBerlin\t\t\t\t\t\t\t52.5323\t13.3846\t4\n"
        b"DE\t80331\tM\xfcnchen\t\t\t\t\t\t\t48.1372\t11.5755\t4\n"
        b"DE\t20095\tHamburg\t\t\t\t\t\t\t53.5511\t9.9937\t4\n"
    )
    provider = GeoNamesPostalProvider(path)

    records = list(provider.iter_records())

    assert [r.postal_code for r in records] == ["10115", "80331", "20095"]
    assert records[1].place_name == "M\ufffdnchen"
    assert records[1].latitude == pytest.approx(48.1372)
    assert provider.stats.parsed == 3


@pytest.mark.parametrize("long_row_first", [False, True])
def test_extra_trailing_fields_are_ignored(sample_lines, tmp_path, long_row_first):
    """Test that rows with more than 12 fields are kept, like parse_line does."""
    long_row = sample_lines[1] + "\textra\tcolumns"
    lines = [long_row, sample_lines[0]] if long_row_first else [sample_lines[0], long_row]
    path = tmp_path / "US.txt"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    provider = GeoNamesPostalProvider(path)

    records = {r.postal_code: r for r in provider.iter_records()}

    assert sorted(records) == ["10018", "10122"]
    assert records["10122"].accuracy is None
    assert records["10122"].longitude_text == "-73.9922"
    assert provider.stats.parsed == 2
    assert provider.stats.skipped == 0


def test_file_with_only_malformed_rows(tmp_path):
    path = tmp_path / "bad.txt"
    path.write_text(
        "XX\t000\tNowhere\t\t\t\t\t\t\tabc\t1.0\t1\n"
        "YY\t111\tShort\n"
        "ZZ\t222\tFar\t\t\t\t\t\t\t95.0\t1.0\t1\n",
        encoding="utf-8"
    )
    provider = GeoNamesPostalProvider(path)

    assert list(provider.iter_records()) == []
    assert provider.stats.parsed == 0
    assert provider.stats.skipped == 3
