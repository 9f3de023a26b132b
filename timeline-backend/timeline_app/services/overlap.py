from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from ..models.work_orders import WorkOrder
from .interval_math import Interval, overlaps

if TYPE_CHECKING:
    from ..repos.schedule_store import ScheduleStore


class OverlapDetector:
    """Authoritative conflict rule for the write path.

    Uses the same inclusive-day predicate as lane assignment, so a mutation is
    rejected exactly when it would have to be drawn in a second lane.
    """

    def __init__(self, store: "ScheduleStore") -> None:
        self._store = store

    def conflicts(self, row_id: str, candidate: Interval, exclude_id: Optional[str] = None) -> List[WorkOrder]:
        return [
            existing
            for existing in self._store.list_by_row(row_id)
            if existing.id != exclude_id and overlaps(candidate, existing.interval)
        ]

    def has_conflict(self, row_id: str, candidate: Interval, exclude_id: Optional[str] = None) -> bool:
        return bool(self.conflicts(row_id, candidate, exclude_id))
