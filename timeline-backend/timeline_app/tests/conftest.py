from __future__ import annotations

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from timeline_app.config import settings
from timeline_app.main import app
from timeline_app.models.work_orders import WorkCenter
from timeline_app.repos.schedule_store import InMemoryScheduleStore

FIXED_NOW = datetime(2024, 1, 5, 9, 30)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def store() -> InMemoryScheduleStore:
    store = InMemoryScheduleStore()
    store.reset([WorkCenter(id="wc-1", name="Extrusion Line A"), WorkCenter(id="wc-2", name="CNC Machine 1")], [])
    return store


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(settings, "store_backend", "memory")
    monkeypatch.setattr(settings, "seed_sample_data", True)
    monkeypatch.setattr(settings, "feature_timeline_ui", True)
    with TestClient(app) as c:
        yield c
