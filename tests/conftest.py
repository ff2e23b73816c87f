"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient

import hazardcast.main as main_module
from hazardcast.config import AppConfig
from hazardcast.core.models import Report, Severity
from hazardcast.core.stats import PredictionStats
from hazardcast.storage.file_storage import FileReportSource

# Saturday 2025-03-15 12:00 UTC.
NOW_MS = int(datetime(2025, 3, 15, 12, tzinfo=timezone.utc).timestamp() * 1000)
# Friday 2025-03-14 18:00 UTC, 18 hours before NOW_MS.
FRIDAY_18_MS = int(datetime(2025, 3, 14, 18, tzinfo=timezone.utc).timestamp() * 1000)


@pytest.fixture
def make_report():
    """Factory for reports with sensible defaults."""
    counter = iter(range(1, 1_000_000))

    def _make(lat: float = 21.03, lng: float = 105.85, severity: str = "low",
              created_at_ms: int = FRIDAY_18_MS, id: str | None = None,
              description: str = "") -> Report:
        return Report(
            id=id if id is not None else f"r{next(counter)}",
            lng=lng,
            lat=lat,
            severity=Severity(severity),
            created_at_ms=created_at_ms,
            description=description,
        )

    return _make


@pytest.fixture
def data_dir(tmp_path):
    path = tmp_path / "data"
    path.mkdir(exist_ok=True)
    return path


@pytest.fixture(autouse=True)
def _init_service(data_dir):
    """Initialize service singletons for every test, using a temp directory."""
    config = AppConfig()
    config.storage.base_dir = str(data_dir)
    config.logging.level = "warning"

    main_module._config = config
    main_module._stats = PredictionStats()
    main_module._source = FileReportSource(base_dir=config.storage.base_dir)

    yield

    # Cleanup
    main_module._config = None
    main_module._stats = None
    main_module._source = None


@pytest.fixture
async def client():
    from hazardcast.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
