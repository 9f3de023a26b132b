from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Response, status

from ..config import settings
from ..errors import InvalidDateFormat, InvalidRange
from ..models.timeline import BoardResponse, ColumnsResponse, DraftPrefill, TimelineClickRequest, ZoomLevel
from ..repos.schedule_store import ScheduleStore
from ..services.board import build_board, resolve_click
from ..services.timeline import TimeCoordinateSystem
from .work_orders import get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/timeline", tags=["timeline"])


def _ensure_feature_enabled() -> None:
    if not settings.feature_timeline_ui:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Timeline feature disabled")


def get_coordinates() -> TimeCoordinateSystem:
    return TimeCoordinateSystem(zoom_level=settings.default_zoom)


def _configure(
    coords: TimeCoordinateSystem,
    zoom: Optional[str],
    start: Optional[str],
    end: Optional[str],
) -> TimeCoordinateSystem:
    if zoom is not None:
        coords.set_zoom(zoom)
    if start is not None or end is not None:
        if start is None or end is None:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="start and end must be supplied together",
            )
        try:
            coords.set_visible_range(start, end)
        except (InvalidDateFormat, InvalidRange) as exc:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return coords


@router.get("", response_model=BoardResponse)
def timeline_board(
    response: Response,
    zoom: Optional[ZoomLevel] = Query(default=None),
    start: Optional[str] = Query(default=None),
    end: Optional[str] = Query(default=None),
    viewport_width: Optional[float] = Query(default=None, alias="viewportWidth", ge=0),
    store: ScheduleStore = Depends(get_store),
    coords: TimeCoordinateSystem = Depends(get_coordinates),
    x_request_id: Optional[str] = Header(default=None, alias="X-Request-Id"),
) -> BoardResponse:
    _ensure_feature_enabled()
    coords = _configure(coords, zoom, start, end)
    board = build_board(store, coords, settings, viewport_width=viewport_width)
    response.headers["Cache-Control"] = "no-store"
    logger.info(
        "timeline_board zoom=%s rows=%s columns=%s request_id=%s",
        board.zoom,
        len(board.rows),
        len(board.columns),
        x_request_id,
    )
    return board


@router.get("/columns", response_model=ColumnsResponse)
def timeline_columns(
    zoom: Optional[ZoomLevel] = Query(default=None),
    start: Optional[str] = Query(default=None),
    end: Optional[str] = Query(default=None),
    coords: TimeCoordinateSystem = Depends(get_coordinates),
) -> ColumnsResponse:
    _ensure_feature_enabled()
    coords = _configure(coords, zoom, start, end)
    return ColumnsResponse(zoom=coords.zoom_level, visible_range=coords.visible_range, columns=list(coords.columns()))


@router.post("/click", response_model=DraftPrefill)
def timeline_click(
    payload: TimelineClickRequest,
    start: Optional[date] = Query(default=None),
    end: Optional[date] = Query(default=None),
    store: ScheduleStore = Depends(get_store),
    coords: TimeCoordinateSystem = Depends(get_coordinates),
) -> DraftPrefill:
    _ensure_feature_enabled()
    if store.get_work_center(payload.work_center_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Work center {payload.work_center_id} not found",
        )
    coords = _configure(
        coords,
        payload.zoom,
        start.isoformat() if start else None,
        end.isoformat() if end else None,
    )
    return resolve_click(coords, payload.pixel, payload.work_center_id)
