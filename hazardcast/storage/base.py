"""Storage interface (port) for reading reports and hazard zones."""

from __future__ import annotations

from typing import Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from hazardcast.core.models import HazardZone, Report


class ReportSource(Protocol):
    """Port: supplies historical reports and currently active hazard zones."""

    async def fetch_reports(self, since_ms: int) -> list[Report]: ...

    async def fetch_active_zones(self) -> list[HazardZone]: ...
