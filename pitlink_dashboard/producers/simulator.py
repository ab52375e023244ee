"""Demo producer — feeds synthetic measurements into a MetricsCollector.

Stands in for the transport runtime when the dashboard runs on its own.
It behaves like the real producers: the network/AI/FEC loop reports every
cycle while compression and performance report only every
``slow_every`` cycles, relying on the collector to carry them forward.

Values are random walks around plausible operating points.  They mean
nothing; they only make the charts move.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Optional

from pitlink_dashboard.domain.enums import NetworkPath, Severity
from pitlink_dashboard.domain.snapshot import (
    AiDecisionMetrics,
    CompressionMetrics,
    MetricsSnapshot,
    NetworkMetrics,
    PerformanceMetrics,
    QuicFecMetrics,
)
from pitlink_dashboard.store.metrics_collector import MetricsCollector

logger = logging.getLogger(__name__)

_BASE_RTT_MS = {
    NetworkPath.WIFI: 18.0,
    NetworkPath.FIVE_G: 32.0,
    NetworkPath.STARLINK: 45.0,
    NetworkPath.MULTIPATH: 22.0,
}

_CHUNK_BYTES = 1024 * 1024


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class MetricsSimulator:
    """Periodic synthetic producer.

    Args:
        collector: Where to send updates.
        interval_seconds: Delay between cycles in ``run()``.
        slow_every: Compression/performance are reported on every
            ``slow_every``-th cycle only.
        seed: Optional RNG seed for reproducible runs.
    """

    def __init__(
        self,
        collector: MetricsCollector,
        interval_seconds: float = 1.0,
        slow_every: int = 5,
        seed: Optional[int] = None,
    ) -> None:
        if slow_every < 1:
            raise ValueError("slow_every must be >= 1")

        self._collector = collector
        self._interval = interval_seconds
        self._slow_every = slow_every
        self._rng = random.Random(seed)
        self._cycle = 0

        self._path = NetworkPath.WIFI
        self._rtt_ms = _BASE_RTT_MS[self._path]
        self._packets_sent = 0
        self._packets_received = 0
        self._packets_recovered = 0
        self._handovers = 0
        self._chunks = 0
        self._lz4 = 0
        self._zstd = 0
        self._bytes_in = 0
        self._bytes_out = 0

    @property
    def cycles(self) -> int:
        return self._cycle

    # ── One cycle ────────────────────────────────────────────────────────

    def step(self) -> MetricsSnapshot:
        """Produce one measurement cycle and push it to the collector."""
        rng = self._rng

        if rng.random() < 0.05:
            self._path = rng.choice(list(NetworkPath))
            self._handovers += 1

        base = _BASE_RTT_MS[self._path]
        self._rtt_ms = _clamp(self._rtt_ms + rng.gauss(0.0, 2.0), base * 0.5, base * 3.0)
        loss = _clamp(rng.gauss(0.01, 0.01), 0.0, 0.2)
        quality = _clamp(1.0 - loss * 5.0 - (self._rtt_ms - base) / (base * 4.0), 0.0, 1.0)

        sent = rng.randint(800, 1200)
        lost = int(sent * loss)
        recovered = rng.randint(0, lost) if lost else 0
        self._packets_sent += sent
        self._packets_received += sent - lost + recovered
        self._packets_recovered += recovered

        if quality > 0.7:
            severity = Severity.LOW
        elif quality > 0.4:
            severity = Severity.MEDIUM
        elif quality > 0.2:
            severity = Severity.HIGH
        else:
            severity = Severity.CRITICAL

        similarity = rng.random()
        network = NetworkMetrics(
            path=self._path,
            rtt_ms=round(self._rtt_ms, 2),
            jitter_ms=round(abs(rng.gauss(0.0, 3.0)), 2),
            loss_rate=round(loss, 4),
            throughput_mbps=round(_clamp(rng.gauss(80.0, 15.0), 1.0, 200.0), 2),
            signal_strength_dbm=round(rng.uniform(-85.0, -45.0), 1),
            quality_score=round(quality, 3),
        )
        ai_decision = AiDecisionMetrics(
            route=self._path,
            severity=severity,
            should_send=similarity < 0.95,
            similarity=round(similarity, 3),
            optimization_hint="prefer_fec" if loss > 0.03 else "none",
            congestion_predicted=loss > 0.05,
            wfq_weights=tuple(round(rng.uniform(0.1, 1.0), 2) for _ in range(3)),
        )
        quic_fec = QuicFecMetrics(
            connected=True,
            fec_enabled=True,
            packets_sent=self._packets_sent,
            packets_received=self._packets_received,
            packets_recovered=self._packets_recovered,
            handovers=self._handovers,
            data_shards=10,
            parity_shards=3 if loss > 0.02 else 2,
        )

        compression = None
        performance = None
        if self._cycle % self._slow_every == 0:
            compression, performance = self._slow_metrics()

        self._cycle += 1
        return self._collector.update(
            network=network,
            ai_decision=ai_decision,
            quic_fec=quic_fec,
            compression=compression,
            performance=performance,
        )

    def _slow_metrics(self) -> tuple[CompressionMetrics, PerformanceMetrics]:
        rng = self._rng
        chunks = self._slow_every
        self._chunks += chunks
        for _ in range(chunks):
            if rng.random() < 0.7:
                self._lz4 += 1
            else:
                self._zstd += 1

        ratio = _clamp(rng.gauss(0.45, 0.08), 0.05, 1.0)
        self._bytes_in += chunks * _CHUNK_BYTES
        self._bytes_out += int(chunks * _CHUNK_BYTES * ratio)

        compression = CompressionMetrics(
            ratio=round(ratio, 3),
            lz4_count=self._lz4,
            zstd_count=self._zstd,
            bytes_compressed=self._bytes_out,
            bytes_uncompressed=self._bytes_in,
        )
        performance = PerformanceMetrics(
            chunks_processed=self._chunks,
            avg_processing_ms=round(_clamp(rng.gauss(4.0, 1.0), 0.5, 20.0), 2),
            ai_inference_ms=round(_clamp(rng.gauss(1.2, 0.3), 0.1, 10.0), 2),
            bytes_sent=self._bytes_out,
            bytes_received=self._bytes_in,
        )
        return compression, performance

    # ── Loop ─────────────────────────────────────────────────────────────

    async def run(self) -> None:
        """Step forever at the configured interval until cancelled."""
        logger.info(
            "Simulator started (interval=%.2fs, slow_every=%d)",
            self._interval,
            self._slow_every,
        )
        try:
            while True:
                try:
                    self.step()
                except Exception:
                    logger.exception("Simulator cycle %d failed", self._cycle)
                await asyncio.sleep(self._interval)
        finally:
            logger.info("Simulator stopped after %d cycle(s)", self._cycle)
