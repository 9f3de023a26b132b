from __future__ import annotations

import logging
import threading
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import date
from time import perf_counter
from typing import ContextManager, Dict, Iterable, Iterator, List, Literal, Optional

from psycopg.rows import dict_row
from psycopg.types.json import Json

from ..data import fallback_work_centers, fallback_work_orders
from ..errors import DuplicateWorkOrder, WorkOrderNotFound
from ..models.work_orders import CommitResult, Conflict, WorkCenter, WorkOrder, WorkOrderDraft
from ..services.interval_math import make_interval
from ..services.overlap import OverlapDetector

logger = logging.getLogger(__name__)

CommitMode = Literal["create", "update"]


def _new_work_order_id() -> str:
    return f"wo-{uuid.uuid4().hex[:12]}"


class ScheduleStore(ABC):
    """Document store for work centers and work orders.

    Subclasses provide storage; the commit path (interval validation, overlap
    veto, id assignment) is shared so every backend enforces the same rule.
    """

    def __init__(self) -> None:
        self.overlap_detector = OverlapDetector(self)
        self._write_lock = threading.Lock()

    # ------------------------------------------------------------------ #
    # Storage primitives
    # ------------------------------------------------------------------ #

    @abstractmethod
    def list_work_centers(self) -> List[WorkCenter]: ...

    @abstractmethod
    def get_work_center(self, work_center_id: str) -> Optional[WorkCenter]: ...

    @abstractmethod
    def list_all(self) -> List[WorkOrder]: ...

    @abstractmethod
    def list_by_row(self, row_id: str) -> List[WorkOrder]: ...

    @abstractmethod
    def get_by_id(self, work_order_id: str) -> Optional[WorkOrder]: ...

    @abstractmethod
    def delete(self, work_order_id: str) -> bool: ...

    @abstractmethod
    def reset(self, work_centers: Iterable[WorkCenter], work_orders: Iterable[WorkOrder]) -> None: ...

    @abstractmethod
    def _save(self, work_order: WorkOrder) -> None: ...

    # ------------------------------------------------------------------ #
    # Write path
    # ------------------------------------------------------------------ #

    def _write_guard(self, work_center_id: str) -> ContextManager:
        """Serialise check-then-save for commits landing on ``work_center_id``."""
        return self._write_lock

    def commit(
        self,
        candidate: WorkOrderDraft,
        mode: CommitMode = "create",
        exclude_id: Optional[str] = None,
    ) -> CommitResult:
        """Create or update a work order unless it overlaps its row.

        ``update`` requires ``candidate`` to be a :class:`WorkOrder` that
        already exists; its own id is excluded from the overlap check unless
        ``exclude_id`` says otherwise. ``create`` refuses an id that is already
        stored. A conflict is returned as data and nothing is written.
        """
        interval = make_interval(candidate.start_date, candidate.end_date)

        if mode == "update":
            if not isinstance(candidate, WorkOrder):
                raise ValueError("update requires a work order with an id")
            work_order = candidate
            if exclude_id is None:
                exclude_id = candidate.id
        elif mode == "create":
            if isinstance(candidate, WorkOrder):
                work_order = candidate
            else:
                work_order = WorkOrder.from_draft(_new_work_order_id(), candidate)
        else:
            raise ValueError(f"Unsupported commit mode: {mode}")

        with self._write_guard(work_order.work_center_id):
            stored = self.get_by_id(work_order.id)
            if mode == "update" and stored is None:
                raise WorkOrderNotFound(work_order.id)
            if mode == "create" and stored is not None:
                raise DuplicateWorkOrder(work_order.id)

            conflicting = self.overlap_detector.conflicts(work_order.work_center_id, interval, exclude_id)
            if conflicting:
                logger.info(
                    "work_order_commit mode=%s id=%s work_center=%s interval=%s conflict_with=%s",
                    mode,
                    work_order.id,
                    work_order.work_center_id,
                    interval,
                    [existing.id for existing in conflicting],
                )
                return CommitResult(
                    conflict=Conflict(
                        work_center_id=work_order.work_center_id,
                        candidate_start=interval.start,
                        candidate_end=interval.end,
                        conflicting_ids=[existing.id for existing in conflicting],
                    )
                )

            self._save(work_order)
        logger.info(
            "work_order_commit mode=%s id=%s work_center=%s interval=%s",
            mode,
            work_order.id,
            work_order.work_center_id,
            interval,
        )
        return CommitResult(work_order=work_order)

    def reset_to_sample_data(self, today: Optional[date] = None) -> None:
        self.reset(
            [WorkCenter.model_validate(record) for record in fallback_work_centers()],
            [WorkOrder.model_validate(record) for record in fallback_work_orders(today)],
        )


class InMemoryScheduleStore(ScheduleStore):
    def __init__(self) -> None:
        super().__init__()
        self._work_centers: Dict[str, WorkCenter] = {}
        self._work_orders: Dict[str, WorkOrder] = {}

    def list_work_centers(self) -> List[WorkCenter]:
        return list(self._work_centers.values())

    def get_work_center(self, work_center_id: str) -> Optional[WorkCenter]:
        return self._work_centers.get(work_center_id)

    def list_all(self) -> List[WorkOrder]:
        return list(self._work_orders.values())

    def list_by_row(self, row_id: str) -> List[WorkOrder]:
        return [order for order in self._work_orders.values() if order.work_center_id == row_id]

    def get_by_id(self, work_order_id: str) -> Optional[WorkOrder]:
        return self._work_orders.get(work_order_id)

    def delete(self, work_order_id: str) -> bool:
        return self._work_orders.pop(work_order_id, None) is not None

    def reset(self, work_centers: Iterable[WorkCenter], work_orders: Iterable[WorkOrder]) -> None:
        self._work_centers = {center.id: center for center in work_centers}
        self._work_orders = {order.id: order for order in work_orders}

    def _save(self, work_order: WorkOrder) -> None:
        self._work_orders[work_order.id] = work_order


class PostgresScheduleStore(ScheduleStore):
    """Work centers and work orders as JSONB documents in ``timeline.documents``.

    Commits hold a transaction-scoped advisory lock keyed on the work center,
    so the overlap check and the upsert run on one connection and concurrent
    writers to the same row queue behind each other, across processes too.
    """

    def __init__(self, pool) -> None:
        super().__init__()
        self._pool = pool
        self._local = threading.local()

    @contextmanager
    def _connection(self) -> Iterator:
        conn = getattr(self._local, "conn", None)
        if conn is not None:
            yield conn
            return
        with self._pool.connection() as conn:
            yield conn

    @contextmanager
    def _write_guard(self, work_center_id: str) -> Iterator[None]:
        with self._pool.connection() as conn:
            with conn.transaction():
                conn.execute("SELECT pg_advisory_xact_lock(hashtext(%s))", (work_center_id,))
                self._local.conn = conn
                try:
                    yield
                finally:
                    self._local.conn = None

    def _fetch(self, query: str, params: tuple = ()) -> List[dict]:
        start = perf_counter()
        with self._connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(query, params)
                rows = cur.fetchall()
        logger.debug("document_fetch rows=%s elapsed_ms=%.2f", len(rows), (perf_counter() - start) * 1000)
        return rows

    def list_work_centers(self) -> List[WorkCenter]:
        rows = self._fetch(
            "SELECT data FROM timeline.documents WHERE doc_type = 'workCenter' ORDER BY doc_id"
        )
        return [WorkCenter.model_validate(row["data"]) for row in rows]

    def get_work_center(self, work_center_id: str) -> Optional[WorkCenter]:
        rows = self._fetch(
            "SELECT data FROM timeline.documents WHERE doc_type = 'workCenter' AND doc_id = %s",
            (work_center_id,),
        )
        return WorkCenter.model_validate(rows[0]["data"]) if rows else None

    def list_all(self) -> List[WorkOrder]:
        rows = self._fetch(
            "SELECT data FROM timeline.documents WHERE doc_type = 'workOrder' ORDER BY doc_id"
        )
        return [WorkOrder.model_validate(row["data"]) for row in rows]

    def list_by_row(self, row_id: str) -> List[WorkOrder]:
        rows = self._fetch(
            """
            SELECT data FROM timeline.documents
            WHERE doc_type = 'workOrder' AND data->>'work_center_id' = %s
            ORDER BY doc_id
            """,
            (row_id,),
        )
        return [WorkOrder.model_validate(row["data"]) for row in rows]

    def get_by_id(self, work_order_id: str) -> Optional[WorkOrder]:
        rows = self._fetch(
            "SELECT data FROM timeline.documents WHERE doc_type = 'workOrder' AND doc_id = %s",
            (work_order_id,),
        )
        return WorkOrder.model_validate(rows[0]["data"]) if rows else None

    def delete(self, work_order_id: str) -> bool:
        with self._pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "DELETE FROM timeline.documents WHERE doc_type = 'workOrder' AND doc_id = %s",
                    (work_order_id,),
                )
                deleted = cur.rowcount > 0
            conn.commit()
        return deleted

    def reset(self, work_centers: Iterable[WorkCenter], work_orders: Iterable[WorkOrder]) -> None:
        with self._pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM timeline.documents")
                for center in work_centers:
                    self._upsert(cur, center.id, "workCenter", center.model_dump(mode="json"))
                for order in work_orders:
                    self._upsert(cur, order.id, "workOrder", order.model_dump(mode="json"))
            conn.commit()

    def _save(self, work_order: WorkOrder) -> None:
        # nests as a savepoint when called under _write_guard
        with self._connection() as conn:
            with conn.transaction():
                with conn.cursor() as cur:
                    self._upsert(cur, work_order.id, "workOrder", work_order.model_dump(mode="json"))

    @staticmethod
    def _upsert(cur, doc_id: str, doc_type: str, data: dict) -> None:
        cur.execute(
            """
            INSERT INTO timeline.documents (doc_id, doc_type, data, updated_at)
            VALUES (%s, %s, %s, NOW())
            ON CONFLICT (doc_id) DO UPDATE SET
                doc_type = EXCLUDED.doc_type,
                data = EXCLUDED.data,
                updated_at = NOW()
            """,
            (doc_id, doc_type, Json(data)),
        )


def build_store(backend: str, pool=None) -> ScheduleStore:
    if backend == "postgres":
        if pool is None:
            raise ValueError("postgres store requires a connection pool")
        return PostgresScheduleStore(pool)
    if backend == "memory":
        return InMemoryScheduleStore()
    raise ValueError(f"Unsupported store backend: {backend}")


__all__ = [
    "CommitMode",
    "InMemoryScheduleStore",
    "PostgresScheduleStore",
    "ScheduleStore",
    "build_store",
]
