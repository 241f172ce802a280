"""Static k-d tree over postal code coordinates with K-nearest-neighbour search."""
import heapq
from typing import List, Optional
from postal_geocoder.core.models import Point, PostalRecord, QueryResult
from postal_geocoder.core.proximity import haversine_km, parallel_distance_km, meridian_distance_km

LATITUDE_AXIS = 0
LONGITUDE_AXIS = 1

# Slack so candidates tied with the current K-th best on the split plane are still visited
_PRUNE_EPSILON_KM = 1e-9


class KDNode:
    """Node of the k-d tree; owns its two subtrees."""
    __slots__ = ("record", "point", "seq", "axis", "left", "right")

    def __init__(self, record: PostalRecord, seq: int, axis: int):
        # seq: position of the record in the build input, used to break distance ties
        # axis: split dimension (0 = latitude, 1 = longitude)
        self.record = record
        self.point = (record.latitude, record.longitude)
        self.seq = seq
        self.axis = axis
        self.left: Optional["KDNode"] = None
        self.right: Optional["KDNode"] = None


def split_lower_bound_km(lat: float, lon: float, node: KDNode) -> float:
    """
    Lower bound on the distance from (lat, lon) to any point across the node's split.

    A latitude split at s is a parallel. A longitude split at s divides the
    longitudes into [-180, s) and [s, 180], so reaching the other half means
    crossing either meridian s or the antimeridian.
    """
    split = node.point[node.axis]
    if node.axis == LATITUDE_AXIS:
        return parallel_distance_km(lat, split)
    return min(
        meridian_distance_km(lat, lon, split),
        meridian_distance_km(lat, lon, 180.0)
    )


class SpatialIndex:
    """Immutable k-d tree built by postal_geocoder.core.index_builder.build."""

    def __init__(self, root: Optional[KDNode] = None, size: int = 0):
        self._root = root
        self._size = size

    def __len__(self) -> int:
        return self._size

    @property
    def is_empty(self) -> bool:
        return self._root is None

    def depth(self) -> int:
        """Height of the tree, 0 when empty."""
        def _depth(node):
            if node is None:
                return 0
            return 1 + max(_depth(node.left), _depth(node.right))
        return _depth(self._root)

    def nearest(self, point: Point, k: int = 1) -> List[QueryResult]:
        """
        Find the k records closest to a point by great-circle distance.

        Args:
            point: Query point
            k: Maximum number of results (clamped to the index size)

        Returns:
            Results ordered by ascending distance, ties in insertion order

        Raises:
            ValueError: If k is not a positive integer
        """
        if isinstance(k, bool) or not isinstance(k, int) or k < 1:
            raise ValueError(f"k must be a positive integer, got {k!r}")
        if self._root is None:
            return []

        lat, lon = point.latitude, point.longitude
        k = min(k, self._size)
        # Max-heap of the best k as (-distance, -seq, node)
        best = []

        def _visit(node: KDNode):
            if node is None:
                return

            distance = haversine_km(lat, lon, node.point[0], node.point[1])
            candidate = (-distance, -node.seq, node)
            if len(best) < k:
                heapq.heappush(best, candidate)
            elif (distance, node.seq) < (-best[0][0], -best[0][1]):
                heapq.heapreplace(best, candidate)

            query_value = lat if node.axis == LATITUDE_AXIS else lon
            if query_value < node.point[node.axis]:
                near, far = node.left, node.right
            else:
                near, far = node.right, node.left

            _visit(near)

            if far is None:
                return
            if len(best) < k or split_lower_bound_km(lat, lon, node) <= -best[0][0] + _PRUNE_EPSILON_KM:
                _visit(far)

        _visit(self._root)

        ordered = sorted(best, key=lambda c: (-c[0], -c[1]))
        return [QueryResult(record=node.record, distance=-neg_distance) for neg_distance, _, node in ordered]


def query(index: SpatialIndex, point: Point, k: int) -> List[QueryResult]:
    """Return the k nearest records to point, ordered by distance."""
    return index.nearest(point, k)


def is_ready(index: Optional[SpatialIndex]) -> bool:
    """Whether an index has been built and can serve queries."""
    return index is not None
