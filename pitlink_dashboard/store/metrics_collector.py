"""In-memory metrics collector: the current snapshot plus a bounded history.

Design notes:
    - One collector is constructed at startup and handed to whoever needs
      it (routers, producers).  There is no module-level instance, so tests
      build independent collectors freely.
    - Writers serialize on a threading.Lock held only for the O(1) build,
      append and publish.  Producers may live on worker threads or on the
      event loop; nothing under the lock awaits or does I/O.
    - Every update publishes an immutable ``_Published(end_seq, current)``
      with one attribute assignment.  Readers never take the lock: they
      grab the published version, read the ring range it covers, and
      check the sequence stamps.  If a writer lapped them they retry on
      the newer version, and only after repeated laps fall back to the
      lock.  ``current`` and ``history`` returned from one ``view()`` call
      therefore always belong to the same update.
    - Values are never validated or corrected.  Producers are trusted.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pitlink_dashboard.domain.snapshot import (
    AiDecisionMetrics,
    CompressionMetrics,
    MetricsSnapshot,
    NetworkMetrics,
    PerformanceMetrics,
    QuicFecMetrics,
)
from pitlink_dashboard.foundation.clock import utc_now
from pitlink_dashboard.store.history_ring import HistoryRing

logger = logging.getLogger(__name__)

# Optimistic lock-free attempts before a reader falls back to the write lock.
_MAX_OPTIMISTIC_READS = 8


@dataclass(frozen=True)
class _Published:
    """The version readers see: ring entries ``[.., end_seq)`` and their head."""

    end_seq: int
    current: Optional[MetricsSnapshot]


@dataclass(frozen=True)
class CollectorView:
    """Current snapshot and history taken from the same published version."""

    current: Optional[MetricsSnapshot]
    history: list[MetricsSnapshot]
    total_updates: int


class CollectorStats:
    """Retention counters for health and observability endpoints."""

    __slots__ = ("capacity", "retained", "total_updates", "evicted", "has_data")

    def __init__(
        self,
        capacity: int,
        retained: int = 0,
        total_updates: int = 0,
        evicted: int = 0,
        has_data: bool = False,
    ) -> None:
        self.capacity = capacity
        self.retained = retained
        self.total_updates = total_updates
        self.evicted = evicted
        self.has_data = has_data

    def to_dict(self) -> dict:
        return {
            "capacity": self.capacity,
            "retained": self.retained,
            "total_updates": self.total_updates,
            "evicted": self.evicted,
            "has_data": self.has_data,
        }


class MetricsCollector:
    """Single source of truth for what the platform is doing now and recently.

    Args:
        capacity: Number of snapshots retained in history.  Must be >= 1.
    """

    def __init__(self, capacity: int = 1000) -> None:
        self._ring = HistoryRing(capacity)
        self._lock = threading.Lock()
        self._published = _Published(end_seq=0, current=None)
        logger.info("Metrics collector ready (history capacity=%d)", capacity)

    # ── Producer API ─────────────────────────────────────────────────────

    def update(
        self,
        network: NetworkMetrics,
        ai_decision: AiDecisionMetrics,
        quic_fec: QuicFecMetrics,
        compression: Optional[CompressionMetrics] = None,
        performance: Optional[PerformanceMetrics] = None,
        timestamp: Optional[datetime] = None,
    ) -> MetricsSnapshot:
        """Build a snapshot from one measurement cycle and store it.

        Compression and performance producers report less often than the
        network/AI loop.  When either is omitted, the value from the
        current snapshot is carried forward instead of going blank.
        """
        with self._lock:
            previous = self._published.current
            if compression is None:
                compression = previous.compression if previous else CompressionMetrics()
            if performance is None:
                performance = previous.performance if previous else PerformanceMetrics()

            snapshot = MetricsSnapshot(
                timestamp=timestamp or utc_now(),
                network=network,
                ai_decision=ai_decision,
                quic_fec=quic_fec,
                compression=compression,
                performance=performance,
            )
            self._store(snapshot)
        return snapshot

    def record(self, snapshot: MetricsSnapshot) -> MetricsSnapshot:
        """Store a producer-built snapshot carrying all five subsections."""
        with self._lock:
            self._store(snapshot)
        return snapshot

    # ── Reader API ───────────────────────────────────────────────────────

    def current(self) -> Optional[MetricsSnapshot]:
        """The most recent snapshot, or None if nothing was recorded yet."""
        return self._published.current

    def history(self, limit: Optional[int] = None) -> list[MetricsSnapshot]:
        """Up to *limit* most recent snapshots, oldest-first.

        ``None``, zero, negative, or a limit larger than what is retained
        all return the full retained history.
        """
        _, entries = self._read(limit)
        return entries

    def view(self, limit: Optional[int] = None) -> CollectorView:
        """Current snapshot and history from one consistent version."""
        published, entries = self._read(limit)
        return CollectorView(
            current=published.current,
            history=entries,
            total_updates=published.end_seq,
        )

    @property
    def capacity(self) -> int:
        return self._ring.capacity

    @property
    def total_updates(self) -> int:
        return self._published.end_seq

    @property
    def has_data(self) -> bool:
        return self._published.current is not None

    def stats(self) -> CollectorStats:
        published = self._published
        capacity = self._ring.capacity
        return CollectorStats(
            capacity=capacity,
            retained=min(published.end_seq, capacity),
            total_updates=published.end_seq,
            evicted=max(0, published.end_seq - capacity),
            has_data=published.current is not None,
        )

    # ── Internals ────────────────────────────────────────────────────────

    def _store(self, snapshot: MetricsSnapshot) -> None:
        """Must be called while holding self._lock."""
        seq = self._ring.append(snapshot)
        # Publish only after the slot is written so readers never see a
        # version whose entries are missing.
        self._published = _Published(end_seq=seq + 1, current=snapshot)
        logger.debug("Recorded snapshot seq=%d at %s", seq, snapshot.timestamp.isoformat())

    def _resolve_count(self, limit: Optional[int], end_seq: int) -> int:
        retained = min(end_seq, self._ring.capacity)
        if limit is None or limit <= 0:
            return retained
        return min(limit, retained)

    def _read(self, limit: Optional[int]) -> tuple[_Published, list[MetricsSnapshot]]:
        for _ in range(_MAX_OPTIMISTIC_READS):
            published = self._published
            entries = self._ring.read_range(
                published.end_seq, self._resolve_count(limit, published.end_seq)
            )
            if entries is not None:
                return published, entries

        logger.debug("History read lapped %d times, reading under lock", _MAX_OPTIMISTIC_READS)
        with self._lock:
            published = self._published
            entries = self._ring.read_range(
                published.end_seq, self._resolve_count(limit, published.end_seq)
            )
        # No writer can run while the lock is held, so the range is intact.
        assert entries is not None
        return published, entries

    def __repr__(self) -> str:
        return (
            f"MetricsCollector(capacity={self._ring.capacity}, "
            f"updates={self._published.end_seq})"
        )
