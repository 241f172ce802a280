"""Reverse postal code lookup service."""
import concurrent.futures
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Union
from postal_geocoder.core.config import DEFAULT_MAX_RESULTS, GEONAMES_DATA_FILE, LOOKUP_MAX_WORKERS
from postal_geocoder.core.errors import InvalidQueryPointError, NotInitializedError
from postal_geocoder.core.index_builder import build
from postal_geocoder.core.models import Point, PostalRecord, QueryResult
from postal_geocoder.core.spatial_index import SpatialIndex
from postal_geocoder.gazetteers.base import PostalCodeProvider
from postal_geocoder.gazetteers.download import get_postal_code_data
from postal_geocoder.gazetteers.geonames import GeoNamesPostalProvider
from postal_geocoder.utils.logging import log_structured
from postal_geocoder.utils.timing import Timer

PointLike = Union[Point, Mapping, tuple]
BatchResult = Union[List[QueryResult], InvalidQueryPointError]


def _is_single_point(points: Any) -> bool:
    # Lists are batches; tuples are (lat, lon) pairs
    return isinstance(points, (Point, Mapping, tuple))


class ReversePostalGeocoder:
    """Looks up the nearest postal codes for latitude/longitude points."""

    def __init__(
        self,
        index: Optional[SpatialIndex] = None,
        provider: Optional[PostalCodeProvider] = None,
        max_workers: int = LOOKUP_MAX_WORKERS
    ):
        """
        Initialize geocoder.

        Args:
            index: Prebuilt spatial index; the geocoder is ready immediately when given
            provider: Record source used by init() instead of the GeoNames download cache
            max_workers: Threads used for batch lookups (1 = sequential)
        """
        self.provider = provider
        self.max_workers = max(1, max_workers)
        self._index: Optional[SpatialIndex] = None
        self._ready = threading.Event()
        if index is not None:
            self._set_index(index)

    def _set_index(self, index: SpatialIndex):
        self._index = index
        self._ready.set()

    @property
    def index(self) -> Optional[SpatialIndex]:
        return self._index

    def is_ready(self) -> bool:
        """Whether the index is built and lookups can be served."""
        return self._ready.is_set()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the index is built; returns False on timeout."""
        return self._ready.wait(timeout)

    def load_records(self, records: Iterable[PostalRecord]) -> SpatialIndex:
        """
        Build the index from already parsed records and mark the geocoder ready.

        A previously built index is discarded only once the new one is complete.
        """
        records = list(records)
        with Timer("build_kdtree", records=len(records)):
            index = build(records)
        self._set_index(index)
        log_structured("info", "Postal code k-d tree ready", records=len(index), depth=index.depth())
        return index

    def init(self, cache_dir: Optional[Path] = None, data_file: Optional[Path] = None) -> SpatialIndex:
        """
        Load the postal code dataset and build the index.

        Args:
            cache_dir: GeoNames cache directory (default from config)
            data_file: Explicit TSV path; skips the download cache

        Returns:
            The built SpatialIndex

        Raises:
            DataDownloadError: If the dataset cannot be obtained
        """
        provider = self.provider
        if provider is None:
            data_file = data_file or GEONAMES_DATA_FILE
            if data_file is None:
                data_file = get_postal_code_data(cache_dir)
            provider = GeoNamesPostalProvider(data_file)

        log_structured("info", "Initializing reverse postal code geocoder", provider=provider.get_name())
        with Timer("parse_postal_codes"):
            records = list(provider.iter_records())
        return self.load_records(records)

    def _look_up_point(self, point: Any, max_results: int) -> List[QueryResult]:
        return self._index.nearest(Point.from_value(point), max_results)

    def _look_up_batch(self, points: Sequence[Any], max_results: int) -> List[BatchResult]:
        def _safe(point):
            try:
                return self._look_up_point(point, max_results)
            except InvalidQueryPointError as e:
                return e

        if self.max_workers == 1 or len(points) < 2:
            return [_safe(point) for point in points]

        # map() keeps input order
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(_safe, points))

    def look_up(
        self,
        points: Union[PointLike, Sequence[PointLike]],
        max_results: int = DEFAULT_MAX_RESULTS
    ) -> Union[Optional[List[QueryResult]], List[BatchResult]]:
        """
        Find the nearest postal codes for one point or a batch of points.

        A single point (Point, mapping with latitude/longitude keys, or a
        (lat, lon) tuple) returns its result list, or None when there is no
        result. A list of points returns one entry per point in input order:
        the point's result list, or the InvalidQueryPointError it raised.

        Args:
            points: One point or a list of points
            max_results: Maximum results per point

        Returns:
            Results for the single point, or a list of per-point results

        Raises:
            NotInitializedError: If called before the index is built
            InvalidQueryPointError: If a single point is invalid
            ValueError: If max_results is not a positive integer
        """
        if not self.is_ready():
            raise NotInitializedError()
        if isinstance(max_results, bool) or not isinstance(max_results, int) or max_results < 1:
            raise ValueError(f"max_results must be a positive integer, got {max_results!r}")

        if _is_single_point(points):
            results = self._look_up_point(points, max_results)
            return results or None

        if isinstance(points, (str, bytes)) or not isinstance(points, Sequence):
            raise InvalidQueryPointError(f"Cannot interpret {points!r} as points")
        return self._look_up_batch(points, max_results)
