"""GeoNames postal code provider using local export files."""
import csv
from pathlib import Path
from typing import Iterator, Tuple
import pandas as pd
from postal_geocoder.core.models import PostalRecord
from postal_geocoder.core.records import POSTAL_CODE_COLUMNS, ParseStats, iter_records, parse_fields
from postal_geocoder.gazetteers.base import PostalCodeProvider
from postal_geocoder.utils.logging import log_structured


class GeoNamesPostalProvider(PostalCodeProvider):
    """GeoNames provider reading a postal code TSV dump (allCountries.txt or a country file)."""

    def __init__(self, data_path: Path, chunksize: int = 250_000):
        """
        Initialize GeoNames provider.

        Args:
            data_path: Path to the GeoNames postal code TSV file
            chunksize: Rows read per pandas chunk
        """
        self.data_path = Path(data_path)
        self.chunksize = chunksize
        self.stats = ParseStats()

    def _iter_rows(self) -> Iterator[Tuple]:
        if self.data_path.stat().st_size == 0:
            return

        # Every column stays a string; empty cells are mapped to None by the parser.
        # usecols keeps rows with extra trailing fields (only the first 12 are read),
        # undecodable bytes are replaced so one bad line cannot abort the file.
        reader = pd.read_csv(
            self.data_path,
            sep="\t",
            header=None,
            names=POSTAL_CODE_COLUMNS,
            usecols=list(range(len(POSTAL_CODE_COLUMNS))),
            index_col=False,
            dtype=str,
            keep_default_na=False,
            quoting=csv.QUOTE_NONE,
            on_bad_lines="skip",
            encoding="utf-8",
            encoding_errors="replace",
            chunksize=self.chunksize,
        )

        with reader:
            for chunk in reader:
                yield from chunk.itertuples(index=False, name=None)

    def iter_records(self) -> Iterator[PostalRecord]:
        """Stream records from the TSV file, skipping rows with bad coordinates."""
        if not self.data_path.exists():
            raise FileNotFoundError(f"GeoNames postal code file not found: {self.data_path}")

        self.stats = ParseStats()
        log_structured("info", "Parsing GeoNames postal code data", data_path=str(self.data_path))

        yield from iter_records(self._iter_rows(), self.stats, parse=parse_fields)

        log_structured(
            "info",
            "Finished parsing GeoNames postal code data",
            data_path=str(self.data_path),
            parsed=self.stats.parsed,
            skipped=self.stats.skipped
        )

    def get_name(self) -> str:
        """Get provider name."""
        return "GeoNames"
