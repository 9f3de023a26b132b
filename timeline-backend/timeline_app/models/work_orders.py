from __future__ import annotations

from datetime import date
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..errors import InvalidRange
from ..services.interval_math import Interval, parse_iso_date

WorkOrderStatus = Literal["open", "in-progress", "complete", "blocked"]


class StatusConfig(BaseModel):
    label: str
    value: WorkOrderStatus
    color: str
    bg_color: str = Field(alias="bgColor")

    model_config = ConfigDict(populate_by_name=True)


STATUS_CONFIG: Dict[str, StatusConfig] = {
    "open": StatusConfig(label="Open", value="open", color="#5659FF", bg_color="#EEEEFF"),
    "in-progress": StatusConfig(label="In Progress", value="in-progress", color="#7C4DFF", bg_color="#F3EEFF"),
    "complete": StatusConfig(label="Complete", value="complete", color="#34A853", bg_color="#E6F4EA"),
    "blocked": StatusConfig(label="Blocked", value="blocked", color="#F29D0A", bg_color="#FEF3E0"),
}


class WorkCenter(BaseModel):
    id: str
    name: str


class WorkOrderDraft(BaseModel):
    """Create/update payload. Dates arrive as ISO strings at the boundary."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    work_center_id: str = Field(alias="workCenterId")
    status: WorkOrderStatus = "open"
    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")
    depends_on: List[str] = Field(default_factory=list, alias="dependsOn")

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _parse_dates(cls, value):
        return parse_iso_date(value)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be empty")
        return value

    @model_validator(mode="after")
    def _check_range(self):
        if self.end_date < self.start_date:
            raise InvalidRange(self.start_date, self.end_date)
        return self

    @property
    def interval(self) -> Interval:
        return Interval(start=self.start_date, end=self.end_date)


class WorkOrder(WorkOrderDraft):
    id: str

    @classmethod
    def from_draft(cls, work_order_id: str, draft: WorkOrderDraft) -> "WorkOrder":
        return cls(id=work_order_id, **draft.model_dump())


class Conflict(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    work_center_id: str = Field(alias="workCenterId")
    candidate_start: date = Field(alias="candidateStart")
    candidate_end: date = Field(alias="candidateEnd")
    conflicting_ids: List[str] = Field(default_factory=list, alias="conflictingIds")
    message: str = (
        "This work order overlaps with an existing order on the same work center. "
        "Please adjust the dates."
    )


class CommitResult(BaseModel):
    work_order: Optional[WorkOrder] = None
    conflict: Optional[Conflict] = None

    @property
    def ok(self) -> bool:
        return self.conflict is None


class OverlapCheckRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    work_center_id: str = Field(alias="workCenterId")
    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")
    exclude_id: Optional[str] = Field(default=None, alias="excludeId")

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _parse_dates(cls, value):
        return parse_iso_date(value)

    @model_validator(mode="after")
    def _check_range(self):
        if self.end_date < self.start_date:
            raise InvalidRange(self.start_date, self.end_date)
        return self


class OverlapCheckResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    conflict: bool
    conflicting_ids: List[str] = Field(default_factory=list, alias="conflictingIds")
