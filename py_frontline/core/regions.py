"""
Live region ownership as seen by the renderer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol


class RegionState(str, Enum):
    NEUTRAL = "NEUTRAL"  # Unclaimed
    OWNED = "OWNED"
    CONTESTED = "CONTESTED"  # Under attack
    FORTIFIED = "FORTIFIED"  # Recently captured, immune for a while
    PROTECTED = "PROTECTED"  # Home region


@dataclass(frozen=True)
class RegionStatus:
    region_id: str
    round_id: int
    owner_team: Optional[str] = None
    state: RegionState = RegionState.NEUTRAL
    owned_since: Optional[int] = None
    times_captured: int = 0


class RegionStatusProvider(Protocol):
    """Ownership authority for lettered grid cells."""

    def get_region_status(self, region_id: str) -> Optional[RegionStatus]:
        ...
