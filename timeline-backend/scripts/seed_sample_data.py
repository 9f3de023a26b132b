#!/usr/bin/env python3
"""
Reset the work center timeline document store to the sample data set.

Work order dates are generated relative to the anchor date (today by default),
so the seeded board always straddles the current day. Existing documents are
replaced; the store is last-write-wins and keeps no history.
"""
from __future__ import annotations

import argparse
from datetime import date

from timeline_app.config import settings
from timeline_app.data import fallback_work_centers, fallback_work_orders
from timeline_app.db import close_pool, initialize_database, open_pool, pool
from timeline_app.repos.schedule_store import build_store


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed sample work centers and work orders.")
    parser.add_argument(
        "--anchor-date",
        type=date.fromisoformat,
        default=None,
        help="Date the sample schedule is centred on (YYYY-MM-DD, default: today).",
    )
    parser.add_argument("--dry-run", action="store_true", help="Preview actions without writing to the database.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    if not settings.database_url:
        raise SystemExit("TIMELINE_DATABASE_URL is not configured.")

    anchor = args.anchor_date or date.today()
    centers = fallback_work_centers()
    orders = fallback_work_orders(anchor)
    if args.dry_run:
        for order in orders:
            print(f"{order['work_center_id']}  {order['id']}  {order['start_date']}..{order['end_date']}  {order['name']}")
        print(f"Would seed {len(centers)} work centers and {len(orders)} work orders (anchor={anchor}).")
        return

    open_pool()
    try:
        initialize_database()
        store = build_store("postgres", pool)
        store.reset_to_sample_data(today=anchor)
    finally:
        close_pool()
    print(f"Seeded {len(centers)} work centers and {len(orders)} work orders (anchor={anchor}).")


if __name__ == "__main__":
    main()
