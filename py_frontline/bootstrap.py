"""Wires storage, the team registry and the renderer together."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

import structlog

from .config.config import Settings
from .core.grid import World, grid_cell_ids
from .core.team_registry import TeamRegistry
from .core.team_seeder import seed_defaults
from .db.connection import Database, db
from .db.regions import SqlRegionStatusStore
from .db.rounds import SqlRoundStore
from .db.teams import TeamDb
from .render.markers import MapService
from .render.region_renderer import RegionRenderer
from .render.scheduler import Scheduler, TickScheduler

logger = structlog.get_logger()


@dataclass
class FlatWorld:
    """World with a constant surface height, for hosts without terrain."""

    name: str
    surface_y: int = 64

    def get_highest_block_y_at(self, x: int, z: int) -> int:
        return self.surface_y


@dataclass
class Services:
    settings: Settings
    world: World
    database: Database
    teams: TeamRegistry
    rounds: SqlRoundStore
    region_status: SqlRegionStatusStore
    renderer: Optional[RegionRenderer] = None
    scheduler: Optional[Scheduler] = None

    def region_names(self) -> Dict[str, Optional[str]]:
        """Display name per lettered cell, None where no name exists yet."""
        if self.renderer is not None:
            return {
                cell_id: self.renderer.get_region_name(cell_id)
                for cell_id in grid_cell_ids(self.settings.grid_size)
            }

        current = self.rounds.get_current_round()
        stored = self.rounds.get_region_names(current.round_id) if current else {}
        return {cell_id: stored.get(cell_id) for cell_id in grid_cell_ids(self.settings.grid_size)}

    def close(self) -> None:
        if self.renderer is not None:
            self.renderer.shutdown()
        self.database.close()


def build_services(
    settings: Settings,
    world: World,
    map_service: Optional[MapService] = None,
    scheduler: Optional[Scheduler] = None,
    database: Optional[Database] = None,
) -> Services:
    """
    Open storage, seed the canonical teams and start rendering if possible.

    The renderer is only created when rendering is enabled and a map service
    was supplied; without one the rest of the system runs unchanged.
    """
    if world is None:
        raise ValueError("world is required")

    database = database or db
    if not database.initialized:
        database.initialize(settings.database_url)

    registry = TeamRegistry(TeamDb(database))
    seed_defaults(
        registry,
        world,
        red_color=settings.red_team_color,
        blue_color=settings.blue_team_color,
        max_size=settings.default_team_max_size,
        edge=settings.region_blocks,
    )

    rounds = SqlRoundStore(database)
    region_status = SqlRegionStatusStore(database, rounds)

    renderer = None
    if settings.render_enabled and map_service is not None:
        scheduler = scheduler or TickScheduler()
        renderer = RegionRenderer(rounds, region_status, map_service, scheduler, settings)
        renderer.load_names_for_current_round()
        renderer.schedule_update(world)
    elif settings.render_enabled:
        logger.warning("Rendering enabled but no map service supplied, markers disabled")

    logger.info("Services ready", world=world.name, rendering=renderer is not None)
    return Services(
        settings=settings,
        world=world,
        database=database,
        teams=registry,
        rounds=rounds,
        region_status=region_status,
        renderer=renderer,
        scheduler=scheduler,
    )
