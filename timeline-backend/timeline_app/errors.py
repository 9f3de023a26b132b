from __future__ import annotations


class InvalidDateFormat(ValueError):
    """Raised when a boundary value is not an ISO calendar date (YYYY-MM-DD)."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid date format: {value!r} (expected YYYY-MM-DD)")


class InvalidRange(ValueError):
    """Raised when a range or interval ends before it starts."""

    def __init__(self, start: object, end: object):
        self.start = start
        self.end = end
        super().__init__(f"Invalid range: end {end} is before start {start}")


class WorkOrderNotFound(LookupError):
    def __init__(self, work_order_id: str):
        self.work_order_id = work_order_id
        super().__init__(f"Work order {work_order_id} not found")


class DuplicateWorkOrder(ValueError):
    """Raised when a create names an id that is already stored."""

    def __init__(self, work_order_id: str):
        self.work_order_id = work_order_id
        super().__init__(f"Work order {work_order_id} already exists")
