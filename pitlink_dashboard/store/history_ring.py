"""Fixed-capacity history of snapshots with oldest-first eviction.

Design notes:
    - The ring is an arena of ``capacity`` slots plus a monotonically
      increasing write sequence.  Entry ``seq`` lives in slot
      ``seq % capacity``; writing it overwrites entry ``seq - capacity``.
      Appends and evictions are therefore O(1) with no list shifting.
    - Each slot holds an immutable ``(seq, snapshot)`` tuple and is replaced
      with a single assignment, so a concurrent reader sees either the old
      tuple or the new one, never a mix.
    - The ring itself does not lock.  A single writer at a time is the
      caller's job (MetricsCollector holds its write lock around append).
      Readers may call ``read_range`` concurrently with a writer: the
      sequence stamp on every slot tells them whether what they read is
      still the entry they asked for.
"""

from __future__ import annotations

import logging
from typing import Optional

from pitlink_dashboard.domain.snapshot import MetricsSnapshot

logger = logging.getLogger(__name__)

# (sequence number, snapshot): replaced as a whole, never mutated.
_Slot = tuple[int, MetricsSnapshot]


class HistoryRing:
    """Bounded, insertion-ordered store of MetricsSnapshots.

    Args:
        capacity: Maximum number of snapshots retained.  Must be >= 1.
    """

    __slots__ = ("_capacity", "_slots", "_next_seq")

    def __init__(self, capacity: int = 1000) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")

        self._capacity = capacity
        self._slots: list[Optional[_Slot]] = [None] * capacity
        self._next_seq: int = 0

    # ── Mutation (single writer) ─────────────────────────────────────────

    def append(self, snapshot: MetricsSnapshot) -> int:
        """Store *snapshot*, evicting the oldest entry if the ring is full.

        Returns the sequence number assigned to the snapshot.
        """
        seq = self._next_seq
        evicted = self._slots[seq % self._capacity]
        self._slots[seq % self._capacity] = (seq, snapshot)
        self._next_seq = seq + 1
        if evicted is not None:
            logger.debug("Evicted snapshot seq=%d for seq=%d", evicted[0], seq)
        return seq

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def total_appended(self) -> int:
        """Number of snapshots ever appended (the next sequence number)."""
        return self._next_seq

    @property
    def evicted_count(self) -> int:
        return max(0, self._next_seq - self._capacity)

    def __len__(self) -> int:
        return min(self._next_seq, self._capacity)

    def read_range(self, end_seq: int, count: int) -> Optional[list[MetricsSnapshot]]:
        """Return the *count* entries ending just before *end_seq*, oldest-first.

        ``end_seq`` is the exclusive upper bound, i.e. the value of
        ``total_appended`` the caller observed.  Returns None if any of the
        requested entries has already been overwritten by a later append;
        the caller should retry against a newer ``end_seq``.
        """
        count = min(count, end_seq, self._capacity)
        result: list[MetricsSnapshot] = []
        for seq in range(end_seq - count, end_seq):
            slot = self._slots[seq % self._capacity]
            if slot is None or slot[0] != seq:
                return None
            result.append(slot[1])
        return result

    def snapshots(self) -> list[MetricsSnapshot]:
        """All retained snapshots, oldest-first.

        Only consistent when no writer is active (tests, shutdown).
        """
        return self.read_range(self._next_seq, len(self)) or []

    def __repr__(self) -> str:
        return (
            f"HistoryRing(capacity={self._capacity}, "
            f"retained={len(self)}, "
            f"appended={self._next_seq})"
        )
