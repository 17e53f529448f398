"""Seeds the two canonical teams, their home regions and spawns."""

from __future__ import annotations

from typing import Optional

import structlog

from .grid import REGION_BLOCKS, TeamId, World, hardcoded_team_spawn, home_region_key
from .team_registry import TeamRegistry
from .teams import Team

logger = structlog.get_logger()

RED_DEFAULT_COLOR = 0xFF000033
BLUE_DEFAULT_COLOR = 0x0000FF33

DISPLAY_NAMES = {
    TeamId.RED: "Red Team",
    TeamId.BLUE: "Blue Team",
}


def seed_defaults(
    registry: TeamRegistry,
    world: World,
    red_color: Optional[int] = None,
    blue_color: Optional[int] = None,
    max_size: int = 0,
    edge: int = REGION_BLOCKS,
) -> None:
    """
    Ensure "red" and "blue" exist with a claimed home region and a spawn.

    Teams are upserted on every call. Spawns are only written when a team
    has none, so a spawn moved by an admin survives restarts.
    """
    if world is None:
        raise ValueError("world is required")

    colors = {
        TeamId.RED: RED_DEFAULT_COLOR if red_color is None else red_color,
        TeamId.BLUE: BLUE_DEFAULT_COLOR if blue_color is None else blue_color,
    }

    for team_id in TeamId:
        registry.create_team(
            Team(
                id=team_id.value,
                display_name=DISPLAY_NAMES[team_id],
                color=colors[team_id],
                max_size=max_size,
            )
        )

        home = home_region_key(team_id, edge)
        registry.claim_region(home, team_id.value)

        if registry.get_team_spawn(team_id.value) is None:
            registry.set_team_spawn(team_id.value, hardcoded_team_spawn(world, team_id))

        logger.info(
            "Team seeded",
            team_id=team_id.value,
            home_corner_x=home.corner_x,
            home_corner_z=home.corner_z,
        )
