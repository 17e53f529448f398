"""
Rounds and the round-scoped region name store.

Round lifecycle (phases, scoring, victory) is managed elsewhere; the grid
only needs the current round's id and somewhere to keep region names.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Protocol


class RoundStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


@dataclass(frozen=True)
class Round:
    round_id: int
    start_time: int
    world_seed: int
    status: RoundStatus = RoundStatus.PENDING
    current_phase: int = 1
    end_time: Optional[int] = None
    world_name: Optional[str] = None
    winning_team: Optional[str] = None

    @property
    def is_running(self) -> bool:
        return self.status in (RoundStatus.PENDING, RoundStatus.ACTIVE)


class RoundNameStore(Protocol):
    """Where region names live between restarts, keyed by round."""

    def get_current_round(self) -> Optional[Round]:
        ...

    def get_region_names(self, round_id: int) -> Dict[str, str]:
        ...

    def set_region_names(self, round_id: int, names: Dict[str, str]) -> None:
        ...
