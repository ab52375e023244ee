"""Pydantic models for the JSON bodies served by the query endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from pitlink_dashboard.domain.snapshot import MetricsSnapshot


class NoDataResponse(BaseModel):
    """Returned by /api/metrics/current before the first update.

    "Dashboard started, no metrics yet" is a normal state, so this is a
    200 with an explicit null rather than an error.
    """

    status: str = Field(default="no_data")
    detail: str = Field(default="No metrics have been recorded yet")
    metrics: Optional[MetricsSnapshot] = None


class HealthResponse(BaseModel):
    """Liveness payload.  Always produced while the process is running."""

    status: str = Field(default="ok")
    service: str
    has_data: bool
    retained: int
    capacity: int
    total_updates: int
