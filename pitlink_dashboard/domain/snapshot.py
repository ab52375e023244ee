"""MetricsSnapshot — one immutable, timestamped measurement of the platform.

A snapshot is a *record*, not a judgement.  Every value in it was computed
by an upstream producer (the transport runtime, the AI router, the FEC
layer, the compressor) and is stored exactly as supplied.

Fields are typed but deliberately NOT range-checked: a negative packet
count or a similarity of 1.3 is accepted.  Validation belongs to the
producers; this model only guarantees shape and immutability.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

from pitlink_dashboard.domain.enums import NetworkPath, Severity
from pitlink_dashboard.foundation.clock import utc_now


# ── Subsections ──────────────────────────────────────────────────────────────

class NetworkMetrics(BaseModel):
    """Quality of the path the transport is currently using."""

    path: NetworkPath = Field(..., description="Active path")
    rtt_ms: float = Field(..., description="Round-trip time in milliseconds")
    jitter_ms: float = Field(..., description="RTT variation in milliseconds")
    loss_rate: float = Field(..., description="Packet loss rate, 0..1")
    throughput_mbps: float = Field(..., description="Observed throughput")
    signal_strength_dbm: float = Field(..., description="Radio signal strength")
    quality_score: float = Field(..., description="Producer-derived path health, 0..1")

    model_config = {"frozen": True}


class AiDecisionMetrics(BaseModel):
    """Output of the AI routing subsystem for one cycle."""

    route: NetworkPath = Field(..., description="Path chosen by the router")
    severity: Severity = Field(..., description="Classification of current conditions")
    should_send: bool = Field(..., description="Whether the chunk should be transmitted")
    similarity: float = Field(..., description="Similarity to the previous chunk, 0..1")
    optimization_hint: str = Field(default="", description="Free-form hint from the router")
    congestion_predicted: bool = Field(default=False)
    wfq_weights: tuple[float, ...] = Field(
        default=(),
        description="Weighted-fair-queue weight per flow, stored verbatim",
    )

    model_config = {"frozen": True}


class QuicFecMetrics(BaseModel):
    """State of the FEC-protected QUIC transport."""

    connected: bool = False
    fec_enabled: bool = False
    packets_sent: int = 0
    packets_received: int = 0
    packets_recovered: int = 0
    handovers: int = 0
    data_shards: int = 0
    parity_shards: int = 0

    model_config = {"frozen": True}


class CompressionMetrics(BaseModel):
    """Compression layer counters.  Zero-valued until a producer reports."""

    ratio: float = 0.0
    lz4_count: int = 0
    zstd_count: int = 0
    bytes_compressed: int = 0
    bytes_uncompressed: int = 0

    model_config = {"frozen": True}


class PerformanceMetrics(BaseModel):
    """Pipeline throughput and latency.  Zero-valued until a producer reports."""

    chunks_processed: int = 0
    avg_processing_ms: float = 0.0
    ai_inference_ms: float = 0.0
    bytes_sent: int = 0
    bytes_received: int = 0

    model_config = {"frozen": True}


# ── Snapshot ─────────────────────────────────────────────────────────────────

class MetricsSnapshot(BaseModel):
    """All tracked subsections at a single instant.

    Immutable after creation.  An update never edits a stored snapshot;
    it builds a new one.
    """

    timestamp: datetime = Field(default_factory=utc_now)
    network: NetworkMetrics
    ai_decision: AiDecisionMetrics
    quic_fec: QuicFecMetrics
    compression: CompressionMetrics = Field(default_factory=CompressionMetrics)
    performance: PerformanceMetrics = Field(default_factory=PerformanceMetrics)

    model_config = {"frozen": True}

    @field_validator("timestamp")
    @classmethod
    def timestamp_must_be_aware(cls, v: datetime) -> datetime:
        # Naive datetimes are taken to be UTC
        if v.tzinfo is None:
            v = v.replace(tzinfo=timezone.utc)
        return v

    def to_json_dict(self) -> dict:
        """JSON-ready dict (ISO timestamp, enum values, arrays)."""
        return self.model_dump(mode="json")
