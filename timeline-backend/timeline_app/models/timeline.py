from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .work_orders import WorkOrderStatus

ZoomLevel = Literal["hour", "day", "week", "month"]


class DateRange(BaseModel):
    start: date
    end: date


class TimelineColumn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    date: datetime
    label: str
    sub_label: str = Field(alias="subLabel")
    is_today: bool = Field(alias="isToday")
    is_weekend: bool = Field(alias="isWeekend")
    width: int


class BarGeometry(BaseModel):
    left: float
    width: float


class LaneAssignment(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    lanes: Dict[str, int] = Field(default_factory=dict)
    lane_count: int = Field(default=1, alias="laneCount")


class BoardBar(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    status: WorkOrderStatus
    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")
    lane: int
    left: float
    width: float
    top: int
    height: int


class BoardRow(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    work_center_id: str = Field(alias="workCenterId")
    name: str
    lane_count: int = Field(alias="laneCount")
    height: int
    bars: List[BoardBar] = Field(default_factory=list)


class BoardResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    zoom: ZoomLevel
    visible_range: DateRange = Field(alias="visibleRange")
    column_width: int = Field(alias="columnWidth")
    total_width: float = Field(alias="totalWidth")
    today_pixel: float = Field(alias="todayPixel")
    scroll_offset: Optional[float] = Field(default=None, alias="scrollOffset")
    columns: List[TimelineColumn] = Field(default_factory=list)
    rows: List[BoardRow] = Field(default_factory=list)


class ColumnsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    zoom: ZoomLevel
    visible_range: DateRange = Field(alias="visibleRange")
    columns: List[TimelineColumn] = Field(default_factory=list)


class TimelineClickRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    work_center_id: str = Field(alias="workCenterId")
    pixel: float
    zoom: Optional[ZoomLevel] = None


class DraftPrefill(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    work_center_id: str = Field(alias="workCenterId")
    status: WorkOrderStatus = "open"
    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")
    clicked_at: datetime = Field(alias="clickedAt")
