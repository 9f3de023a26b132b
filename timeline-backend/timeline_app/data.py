from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, List, Optional

FALLBACK_WORK_CENTERS: List[Dict[str, object]] = [
    {"id": "wc-001", "name": "Extrusion Line A"},
    {"id": "wc-002", "name": "CNC Machine 1"},
    {"id": "wc-003", "name": "Assembly Station"},
    {"id": "wc-004", "name": "Quality Control"},
    {"id": "wc-005", "name": "Packaging Line"},
]

# Offsets are days relative to today so the sample board always straddles "now".
FALLBACK_WORK_ORDERS: List[Dict[str, object]] = [
    {
        "id": "wo-001",
        "name": "Aluminum Profile Batch #1247",
        "work_center_id": "wc-001",
        "status": "complete",
        "start": -10,
        "end": -5,
    },
    {
        "id": "wo-002",
        "name": "Steel Tubing Run #892",
        "work_center_id": "wc-001",
        "status": "in-progress",
        "start": -2,
        "end": 5,
    },
    {
        "id": "wo-003",
        "name": "Precision Gear Set #456",
        "work_center_id": "wc-002",
        "status": "open",
        "start": 2,
        "end": 8,
    },
    {
        "id": "wo-004",
        "name": "Motor Housing #789",
        "work_center_id": "wc-002",
        "status": "blocked",
        "start": -7,
        "end": -1,
    },
    {
        "id": "wo-005",
        "name": "Widget Assembly A-100",
        "work_center_id": "wc-003",
        "status": "complete",
        "start": -14,
        "end": -10,
    },
    {
        "id": "wo-006",
        "name": "Component Kit B-200",
        "work_center_id": "wc-003",
        "status": "in-progress",
        "start": -3,
        "end": 2,
    },
    {
        "id": "wo-007",
        "name": "Final Assembly C-300",
        "work_center_id": "wc-003",
        "status": "open",
        "start": 4,
        "end": 12,
        "depends_on": ["wo-006"],
    },
    {
        "id": "wo-008",
        "name": "QC Inspection Batch #567",
        "work_center_id": "wc-004",
        "status": "in-progress",
        "start": -1,
        "end": 3,
    },
    {
        "id": "wo-009",
        "name": "Shipping Prep Order #1001",
        "work_center_id": "wc-005",
        "status": "blocked",
        "start": 0,
        "end": 4,
    },
    {
        "id": "wo-010",
        "name": "Export Package #1002",
        "work_center_id": "wc-005",
        "status": "open",
        "start": 6,
        "end": 10,
        "depends_on": ["wo-009"],
    },
]


def fallback_work_centers() -> List[Dict[str, object]]:
    return [dict(record) for record in FALLBACK_WORK_CENTERS]


def fallback_work_orders(today: Optional[date] = None) -> List[Dict[str, object]]:
    """Sample work orders as store documents, dated relative to ``today``."""
    anchor = today or date.today()
    documents: List[Dict[str, object]] = []
    for record in FALLBACK_WORK_ORDERS:
        documents.append(
            {
                "id": record["id"],
                "name": record["name"],
                "work_center_id": record["work_center_id"],
                "status": record["status"],
                "start_date": (anchor + timedelta(days=record["start"])).isoformat(),
                "end_date": (anchor + timedelta(days=record["end"])).isoformat(),
                "depends_on": list(record.get("depends_on", [])),
            }
        )
    return documents
