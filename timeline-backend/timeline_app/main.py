import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from .config import settings
from .db import close_pool, initialize_database, open_pool, pool
from .repos.schedule_store import build_store
from .routers import timeline, work_orders


logger = logging.getLogger(__name__)


def _create_store():
    if settings.store_backend == "postgres":
        try:
            open_pool()
            initialize_database()
            store = build_store("postgres", pool)
            if settings.seed_sample_data and not store.list_work_centers():
                store.reset_to_sample_data()
            return store, True
        except Exception as exc:  # pragma: no cover - defensive fallback for local dev
            logger.warning("Database initialization failed; continuing with in-memory sample data: %s", exc)
            close_pool()
    store = build_store("memory")
    if settings.seed_sample_data:
        store.reset_to_sample_data()
    return store, False


@asynccontextmanager
async def lifespan(app: FastAPI):
    store, database_available = _create_store()
    app.state.store = store
    app.state.database_available = database_available
    logger.info(
        "timeline_startup backend=%s database_available=%s work_orders=%s",
        type(store).__name__,
        database_available,
        len(store.list_all()),
    )
    try:
        yield
    finally:
        close_pool()  # close pool at shutdown


app = FastAPI(
    title="Work Center Timeline Backend",
    version="0.1.0",
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)

# Allow any localhost/127.* origin for dev tools (Vite/Angular dev server, etc.)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(work_orders.router)
app.include_router(timeline.router)


@app.get("/api/health")
def health():
    return {"ok": True, "database": app.state.database_available}
