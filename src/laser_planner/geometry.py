"""Derived geometry over segment sequences."""

import math
from typing import Optional, Sequence

import numpy as np

from laser_planner.models import BoundingBox, Point2D, Segment

# Endpoints closer than 10**-CENTROID_DECIMALS are merged
CENTROID_DECIMALS = 4


def _endpoints(segments: Sequence[Segment]) -> np.ndarray:
    """Stack start and end points as an (2N, 2) array in program order."""
    coords = []
    for seg in segments:
        coords.append((seg.start.x, seg.start.y))
        coords.append((seg.end.x, seg.end.y))
    return np.array(coords, dtype=float).reshape(-1, 2)


def bounding_box(segments: Sequence[Segment]) -> BoundingBox:
    """Calculate the axis-aligned bounding box of all segment endpoints.

    Args:
        segments: Segments to cover

    Returns:
        BoundingBox. For an empty sequence the infinite sentinel from
        ``BoundingBox.empty()`` is returned; callers must check ``is_empty``
        before computing a scale from it.

    Examples:
        >>> segs = [
        ...     Segment(Point2D(0, 0), Point2D(10, 10), is_rapid=True),
        ...     Segment(Point2D(10, 10), Point2D(-5, 15), is_rapid=False),
        ... ]
        >>> box = bounding_box(segs)
        >>> (box.min.x, box.min.y, box.max.x, box.max.y)
        (-5.0, 0.0, 10.0, 15.0)
    """
    if not segments:
        return BoundingBox.empty()

    points = _endpoints(segments)
    low = points.min(axis=0)
    high = points.max(axis=0)
    return BoundingBox(
        min=Point2D(float(low[0]), float(low[1])),
        max=Point2D(float(high[0]), float(high[1])),
    )


def centroid(segments: Sequence[Segment], decimals: int = CENTROID_DECIMALS) -> Point2D:
    """Calculate the mean of the unique segment endpoints.

    This is a vertex-set centroid, not a length-weighted one: a joint shared
    by consecutive segments counts once. Endpoints are deduplicated on
    integer keys ``round(v * 10**decimals)``; the first occurrence of each
    key is the one averaged.

    Args:
        segments: Segments to average
        decimals: Quantization precision used to merge near-identical points

    Returns:
        Centroid point, or ``Point2D(0, 0)`` for an empty sequence
    """
    if not segments:
        return Point2D(0.0, 0.0)

    points = _endpoints(segments)
    keys = np.round(points * 10**decimals).astype(np.int64)
    _, first_index = np.unique(keys, axis=0, return_index=True)
    unique_points = points[np.sort(first_index)]

    mean = unique_points.mean(axis=0)
    return Point2D(float(mean[0]), float(mean[1]))


def distance_to_segment(point: Point2D, segment: Segment) -> float:
    """Shortest distance from a point to a segment.

    The point is projected onto the segment's line and the projection is
    clamped to the segment's ends. A zero-length segment degrades to the
    distance from its start point.
    """
    dx, dy = segment.dx, segment.dy
    length_sq = dx * dx + dy * dy

    t = -1.0
    if length_sq != 0:
        t = ((point.x - segment.start.x) * dx + (point.y - segment.start.y) * dy) / length_sq

    if t < 0:
        nearest = segment.start
    elif t > 1:
        nearest = segment.end
    else:
        nearest = Point2D(segment.start.x + t * dx, segment.start.y + t * dy)

    return math.hypot(point.x - nearest.x, point.y - nearest.y)


def nearest_segment(
    segments: Sequence[Segment], point: Point2D, max_distance: float
) -> Optional[int]:
    """Find the segment closest to a point, within a distance threshold.

    Args:
        segments: Segments to search
        point: Query point in program units
        max_distance: Segments at this distance or farther are ignored

    Returns:
        Index of the closest segment, or None if none is close enough.
        Ties resolve to the earliest segment.
    """
    best_index = None
    best_distance = max_distance
    for i, seg in enumerate(segments):
        distance = distance_to_segment(point, seg)
        if distance < best_distance:
            best_distance = distance
            best_index = i
    return best_index
