import logging
from typing import Iterable

from psycopg_pool import ConnectionPool

from .config import settings

logger = logging.getLogger(__name__)

# start closed, we'll open in app lifespan when the postgres store is selected
pool = ConnectionPool(conninfo=settings.database_url or "", max_size=10, open=False)


SCHEMA_STATEMENTS: Iterable[str] = (
    """
    CREATE TABLE IF NOT EXISTS timeline.documents (
        doc_id TEXT PRIMARY KEY,
        doc_type TEXT NOT NULL,
        data JSONB NOT NULL DEFAULT '{}'::jsonb,
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_documents_doc_type ON timeline.documents(doc_type)
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_documents_work_center
        ON timeline.documents ((data->>'work_center_id'))
        WHERE doc_type = 'workOrder'
    """,
)


def open_pool() -> None:
    if pool.closed:
        pool.open()


def close_pool() -> None:
    if not pool.closed:
        pool.close()


def initialize_database() -> None:
    try:
        ensure_schema()
    except Exception:  # pragma: no cover - defensive guard
        logger.exception("Database initialization failed")
        raise


def ensure_schema() -> None:
    with pool.connection() as conn:
        with conn.cursor() as cur:
            cur.execute("CREATE SCHEMA IF NOT EXISTS timeline")
            cur.execute("SET search_path TO timeline, public")
            for statement in SCHEMA_STATEMENTS:
                cur.execute(statement)
        conn.commit()
