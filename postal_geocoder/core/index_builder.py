"""Construction of a balanced k-d tree from parsed postal code records."""
from typing import Iterable, List, Optional
from postal_geocoder.core.models import PostalRecord
from postal_geocoder.core.spatial_index import KDNode, SpatialIndex

DIMENSIONS = 2


def build(records: Iterable[PostalRecord]) -> SpatialIndex:
    """
    Build a balanced k-d tree by recursive median split.

    The split axis alternates latitude, longitude, latitude, ... by depth.
    Each axis is sorted once up front; the sorted orders are partitioned
    down the recursion so every level costs O(n). Sorting is stable, so
    records with equal coordinates keep their input order. Duplicates are kept.

    Args:
        records: Finite iterable of records

    Returns:
        SpatialIndex (empty when there are no records)
    """
    records = list(records)
    if not records:
        return SpatialIndex()

    coords = [(r.latitude, r.longitude) for r in records]
    by_axis = [
        sorted(range(len(records)), key=lambda i, axis=axis: coords[i][axis])
        for axis in range(DIMENSIONS)
    ]
    # Scratch marker reused by every partition step
    goes_left = bytearray(len(records))

    def _build(orders: List[List[int]], depth: int) -> Optional[KDNode]:
        ordered = orders[depth % DIMENSIONS]
        if not ordered:
            return None

        axis = depth % DIMENSIONS
        median = len(ordered) // 2
        seq = ordered[median]
        node = KDNode(records[seq], seq, axis)

        left_ids = ordered[:median]
        right_ids = ordered[median + 1:]
        for i in left_ids:
            goes_left[i] = 1

        left_orders = [None] * DIMENSIONS
        right_orders = [None] * DIMENSIONS
        left_orders[axis] = left_ids
        right_orders[axis] = right_ids
        for other in range(DIMENSIONS):
            if other == axis:
                continue
            left_orders[other] = [i for i in orders[other] if goes_left[i]]
            right_orders[other] = [i for i in orders[other] if not goes_left[i] and i != seq]

        for i in left_ids:
            goes_left[i] = 0

        node.left = _build(left_orders, depth + 1)
        node.right = _build(right_orders, depth + 1)
        return node

    root = _build(by_axis, 0)
    return SpatialIndex(root, len(records))
