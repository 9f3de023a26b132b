from .timeline import (
    BarGeometry,
    BoardBar,
    BoardResponse,
    BoardRow,
    ColumnsResponse,
    DateRange,
    DraftPrefill,
    LaneAssignment,
    TimelineClickRequest,
    TimelineColumn,
    ZoomLevel,
)
from .work_orders import (
    STATUS_CONFIG,
    CommitResult,
    Conflict,
    OverlapCheckRequest,
    OverlapCheckResponse,
    StatusConfig,
    WorkCenter,
    WorkOrder,
    WorkOrderDraft,
    WorkOrderStatus,
)
