"""Liveness endpoint.

Path: GET /api/health
"""

from __future__ import annotations

from fastapi import APIRouter

from pitlink_dashboard.models.responses import HealthResponse
from pitlink_dashboard.store.metrics_collector import MetricsCollector


def create_health_router(collector: MetricsCollector, service_name: str) -> APIRouter:
    router = APIRouter(prefix="/api", tags=["system"])

    @router.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        stats = collector.stats()
        return HealthResponse(
            service=service_name,
            has_data=stats.has_data,
            retained=stats.retained,
            capacity=stats.capacity,
            total_updates=stats.total_updates,
        )

    return router
