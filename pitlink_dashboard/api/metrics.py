"""REST endpoints for reading recorded metrics.

Paths:
    GET /api/metrics/current
    GET /api/metrics/history?limit=N

Read-through only.  Nothing here mutates the collector or keeps state
between requests.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter

from pitlink_dashboard.models.responses import NoDataResponse
from pitlink_dashboard.store.metrics_collector import MetricsCollector

logger = logging.getLogger(__name__)


def parse_limit(raw: Optional[str]) -> Optional[int]:
    """Lenient ``limit`` parsing: anything not a positive integer means "all".

    Out-of-range limits are clamped by the collector, never rejected.
    """
    if raw is None:
        return None
    try:
        limit = int(raw.strip())
    except ValueError:
        logger.debug("Ignoring non-integer history limit %r", raw)
        return None
    return limit if limit > 0 else None


def create_metrics_router(collector: MetricsCollector) -> APIRouter:
    """Factory that wires the metrics endpoints to a concrete collector."""

    router = APIRouter(prefix="/api/metrics", tags=["metrics"])

    @router.get("/current")
    async def get_current() -> dict[str, Any]:
        """Latest snapshot, or the no-data shape before the first update."""
        snapshot = collector.current()
        if snapshot is None:
            return NoDataResponse().model_dump(mode="json")
        return snapshot.to_json_dict()

    @router.get("/history")
    async def get_history(limit: Optional[str] = None) -> list[dict[str, Any]]:
        """Up to *limit* most recent snapshots, oldest-first."""
        snapshots = collector.history(parse_limit(limit))
        return [s.to_json_dict() for s in snapshots]

    return router
