"""
Team value types and operation results.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

PlayerId = Union[str, uuid.UUID]


class Team(BaseModel):
    """A faction. ``color`` is styling only; capacity lives in ``max_size``."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, description="Stable slug, e.g. 'red'")
    display_name: str = Field(description="Name shown to players")
    color: int = Field(description="ARGB-packed color used for map styling")
    max_size: int = Field(default=0, ge=0, description="Member capacity, 0 for unlimited")

    @property
    def is_capped(self) -> bool:
        return self.max_size > 0


class JoinReason(str, Enum):
    """Why a player is being placed on a team."""

    PLAYER_CHOICE = "player_choice"
    ADMIN_ASSIGN = "admin_assign"
    AUTO_BALANCE = "auto_balance"


class JoinResult(str, Enum):
    OK = "ok"
    TEAM_NOT_FOUND = "team_not_found"
    TEAM_FULL = "team_full"
    ALREADY_IN_TEAM = "already_in_team"


class LeaveResult(str, Enum):
    OK = "ok"
    NOT_IN_TEAM = "not_in_team"


class SwapResult(str, Enum):
    OK = "ok"
    NOT_IN_TEAM = "not_in_team"
    TEAM_NOT_FOUND = "team_not_found"
    TEAM_FULL = "team_full"


def normalize_player_id(player_id: PlayerId) -> str:
    if player_id is None:
        raise ValueError("player_id is required")
    value = str(player_id)
    if not value:
        raise ValueError("player_id must not be empty")
    return value
