from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from ..errors import DuplicateWorkOrder, InvalidDateFormat, InvalidRange, WorkOrderNotFound
from ..models.work_orders import (
    OverlapCheckRequest,
    OverlapCheckResponse,
    WorkCenter,
    WorkOrder,
    WorkOrderDraft,
)
from ..repos.schedule_store import ScheduleStore
from ..services.interval_math import Interval

logger = logging.getLogger(__name__)


def get_store(request: Request) -> ScheduleStore:
    return request.app.state.store


router = APIRouter(prefix="/api", tags=["work-orders"])


def _require_work_center(store: ScheduleStore, work_center_id: str) -> WorkCenter:
    center = store.get_work_center(work_center_id)
    if center is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Work center {work_center_id} not found")
    return center


def _commit(store: ScheduleStore, candidate: WorkOrderDraft, mode: str) -> WorkOrder:
    _require_work_center(store, candidate.work_center_id)
    try:
        result = store.commit(candidate, mode=mode)
    except WorkOrderNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except DuplicateWorkOrder as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except (InvalidDateFormat, InvalidRange) as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    if result.conflict is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=result.conflict.model_dump(mode="json", by_alias=True),
        )
    return result.work_order


@router.get("/work-centers", response_model=List[WorkCenter])
def list_work_centers(store: ScheduleStore = Depends(get_store)) -> List[WorkCenter]:
    return store.list_work_centers()


@router.get("/work-centers/{work_center_id}", response_model=WorkCenter)
def get_work_center(work_center_id: str, store: ScheduleStore = Depends(get_store)) -> WorkCenter:
    return _require_work_center(store, work_center_id)


@router.get("/work-orders", response_model=List[WorkOrder])
def list_work_orders(
    work_center_id: Optional[str] = Query(default=None, alias="workCenterId"),
    store: ScheduleStore = Depends(get_store),
) -> List[WorkOrder]:
    orders = store.list_by_row(work_center_id) if work_center_id else store.list_all()
    return sorted(orders, key=lambda order: (order.start_date, order.id))


@router.post("/work-orders/check-overlap", response_model=OverlapCheckResponse)
def check_overlap(payload: OverlapCheckRequest, store: ScheduleStore = Depends(get_store)) -> OverlapCheckResponse:
    candidate = Interval(start=payload.start_date, end=payload.end_date)
    conflicting = store.overlap_detector.conflicts(payload.work_center_id, candidate, payload.exclude_id)
    return OverlapCheckResponse(conflict=bool(conflicting), conflicting_ids=[order.id for order in conflicting])


@router.post("/work-orders/reset", status_code=status.HTTP_204_NO_CONTENT)
def reset_work_orders(store: ScheduleStore = Depends(get_store)) -> Response:
    store.reset_to_sample_data()
    logger.info("work_orders_reset work_orders=%s", len(store.list_all()))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/work-orders/{work_order_id}", response_model=WorkOrder)
def get_work_order(work_order_id: str, store: ScheduleStore = Depends(get_store)) -> WorkOrder:
    order = store.get_by_id(work_order_id)
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Work order {work_order_id} not found")
    return order


@router.post("/work-orders", response_model=WorkOrder, status_code=status.HTTP_201_CREATED)
def create_work_order(payload: WorkOrderDraft, store: ScheduleStore = Depends(get_store)) -> WorkOrder:
    return _commit(store, payload, mode="create")


@router.put("/work-orders/{work_order_id}", response_model=WorkOrder)
def update_work_order(
    work_order_id: str,
    payload: WorkOrderDraft,
    store: ScheduleStore = Depends(get_store),
) -> WorkOrder:
    return _commit(store, WorkOrder.from_draft(work_order_id, payload), mode="update")


@router.delete("/work-orders/{work_order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_work_order(work_order_id: str, store: ScheduleStore = Depends(get_store)) -> Response:
    if not store.delete(work_order_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Work order {work_order_id} not found")
    logger.info("work_order_delete id=%s", work_order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
