"""Compose store contents, lanes and coordinates into render-ready board data."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional

from ..config import Settings
from ..models.timeline import BoardBar, BoardResponse, BoardRow, DraftPrefill
from ..repos.schedule_store import ScheduleStore
from .lanes import assign_lanes, row_height
from .timeline import TimeCoordinateSystem

logger = logging.getLogger(__name__)

DEFAULT_DRAFT_DAYS = 7


def build_board(
    store: ScheduleStore,
    coords: TimeCoordinateSystem,
    settings: Settings,
    viewport_width: Optional[float] = None,
) -> BoardResponse:
    rows = []
    bar_count = 0
    for center in store.list_work_centers():
        orders = store.list_by_row(center.id)
        layout = assign_lanes(orders)
        bars = []
        for order in sorted(orders, key=lambda item: (item.start_date, item.id)):
            lane = layout.lanes[order.id]
            geometry = coords.bar_geometry(order.interval)
            bars.append(
                BoardBar(
                    id=order.id,
                    name=order.name,
                    status=order.status,
                    start_date=order.start_date,
                    end_date=order.end_date,
                    lane=lane,
                    left=geometry.left,
                    width=geometry.width,
                    top=settings.row_padding // 2 + lane * settings.lane_height,
                    height=settings.bar_height,
                )
            )
        bar_count += len(bars)
        rows.append(
            BoardRow(
                work_center_id=center.id,
                name=center.name,
                lane_count=layout.lane_count,
                height=row_height(
                    layout.lane_count,
                    lane_height=settings.lane_height,
                    padding=settings.row_padding,
                    min_row_height=settings.min_row_height,
                ),
                bars=bars,
            )
        )

    logger.debug("build_board zoom=%s rows=%s bars=%s", coords.zoom_level, len(rows), bar_count)
    return BoardResponse(
        zoom=coords.zoom_level,
        visible_range=coords.visible_range,
        column_width=coords.column_width,
        total_width=coords.total_width,
        today_pixel=coords.today_pixel(),
        scroll_offset=coords.centering_scroll_offset(viewport_width) if viewport_width is not None else None,
        columns=list(coords.columns()),
        rows=rows,
    )


def resolve_click(coords: TimeCoordinateSystem, pixel: float, work_center_id: str) -> DraftPrefill:
    """Turn a click on an empty row area into a prefilled create draft."""
    clicked_at = coords.pixel_to_date(pixel)
    start = clicked_at.date()
    return DraftPrefill(
        work_center_id=work_center_id,
        start_date=start,
        end_date=start + timedelta(days=DEFAULT_DRAFT_DAYS),
        clicked_at=clicked_at,
    )
