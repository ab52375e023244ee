"""pitlink-dashboard — live metrics for the PitlinkPQC transport platform.

This is the application entry point.  It builds the MetricsCollector,
wires the query routers and the static dashboard page around it, and
optionally starts the demo producer.

Each ``create_app()`` call owns its own collector (also reachable as
``app.state.collector``), so in-process producers and tests get an explicit
handle instead of a global.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse

from pitlink_dashboard.api.health import create_health_router
from pitlink_dashboard.api.metrics import create_metrics_router
from pitlink_dashboard.config import Settings, settings
from pitlink_dashboard.producers.simulator import MetricsSimulator
from pitlink_dashboard.store.metrics_collector import MetricsCollector

# ── Logging ──────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)

logger = logging.getLogger(__name__)

_STATIC_DIR = Path(__file__).parent / "static"


def create_app(
    config: Optional[Settings] = None,
    collector: Optional[MetricsCollector] = None,
) -> FastAPI:
    """Build the dashboard application.

    Args:
        config: Settings to use; defaults to the environment-loaded ones.
        collector: An existing collector to serve; a new one sized from
            ``config.history_capacity`` is created otherwise.
    """
    config = config or settings
    collector = collector or MetricsCollector(capacity=config.history_capacity)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        task: Optional[asyncio.Task] = None
        if config.simulate:
            simulator = MetricsSimulator(
                collector,
                interval_seconds=config.simulate_interval_seconds,
                slow_every=config.simulate_slow_every,
            )
            task = asyncio.create_task(simulator.run())
        logger.info("%s serving %r", config.app_name, collector)
        try:
            yield
        finally:
            if task is not None:
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task

    app = FastAPI(
        title=config.app_name,
        description="Live network, AI routing, QUIC-FEC and compression metrics",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.collector = collector

    # ── Middleware ───────────────────────────────────────────────────────

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routes ───────────────────────────────────────────────────────────

    app.include_router(create_metrics_router(collector))
    app.include_router(create_health_router(collector, config.app_name))

    @app.get("/", include_in_schema=False)
    async def index_page() -> FileResponse:
        return FileResponse(_STATIC_DIR / "index.html", media_type="text/html")

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve ``app`` with uvicorn."""
    import uvicorn

    logger.info("Starting %s on http://%s:%d", settings.app_name, settings.host, settings.port)
    uvicorn.run(
        "pitlink_dashboard.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
