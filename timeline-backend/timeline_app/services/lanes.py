"""Lane assignment for work orders that share a work center row."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Protocol

from ..models.timeline import LaneAssignment
from .interval_math import Interval, overlaps


class Placeable(Protocol):
    id: str
    work_center_id: str

    @property
    def interval(self) -> Interval: ...


def assign_lanes(orders: Iterable[Placeable]) -> LaneAssignment:
    """Greedy interval partitioning into the minimum number of lanes.

    Orders are placed in ``(start, id)`` order into the first lane whose
    most recently placed interval does not overlap. Processing in start order
    means the last interval of a lane is the only one that can still collide.
    An empty row still reserves one lane.
    """
    ordered = sorted(orders, key=lambda order: (order.interval.start, order.id))
    lane_tails: List[Interval] = []
    lanes: Dict[str, int] = {}

    for order in ordered:
        interval = order.interval
        for index, tail in enumerate(lane_tails):
            if not overlaps(interval, tail):
                lane_tails[index] = interval
                lanes[order.id] = index
                break
        else:
            lanes[order.id] = len(lane_tails)
            lane_tails.append(interval)

    return LaneAssignment(lanes=lanes, lane_count=max(1, len(lane_tails)))


def assign_lanes_by_row(orders: Iterable[Placeable]) -> Dict[str, LaneAssignment]:
    by_row: Dict[str, List[Placeable]] = defaultdict(list)
    for order in orders:
        by_row[order.work_center_id].append(order)
    return {row_id: assign_lanes(row_orders) for row_id, row_orders in by_row.items()}


def row_height(lane_count: int, lane_height: int, padding: int, min_row_height: int) -> int:
    return max(min_row_height, lane_count * lane_height + padding)


__all__ = ["assign_lanes", "assign_lanes_by_row", "row_height"]
