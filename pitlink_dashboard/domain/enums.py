"""Controlled enumerations for the dashboard domain.

Categorical fields in a snapshot reference an enum defined here.  The
values match what the transport runtime emits, so they are serialized
verbatim.
"""

from __future__ import annotations

from enum import Enum


class NetworkPath(str, Enum):
    """Physical or aggregated path the transport is currently using."""

    WIFI = "WiFi"
    FIVE_G = "5G"
    STARLINK = "Starlink"
    MULTIPATH = "Multipath"


class Severity(str, Enum):
    """Severity classification assigned by the AI routing subsystem."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"
