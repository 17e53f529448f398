"""
Keeps the external map's region markers in sync with ownership and names.

Lifecycle:

    POLLING  --map service + map found-->  ACTIVE  (periodic refresh)
    POLLING  --max_polls exhausted------>  DISABLED (no further retries)

Only one timer exists at a time: the poll task is cancelled before the
refresh task is scheduled. Rendering is optional; everything else works
whether or not the renderer ever becomes active.

Region names are scoped to the current round. They are looked up in memory,
then in the round store, and finally generated; names generated during a
refresh are written back at the end of that pass when a round is active.
"""

from __future__ import annotations

import html
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

import structlog

from ..config.config import Settings, settings as default_settings
from ..core.grid import (
    RegionKey,
    TeamId,
    World,
    format_grid_cell_id,
    grid_cell_bounds,
    grid_cell_id_for_block,
    grid_cell_ids,
    hardcoded_team_spawn,
    region_key_for_block,
)
from ..core.name_generator import RegionNameGenerator
from ..core.regions import RegionStatusProvider
from ..core.rounds import Round, RoundNameStore
from .markers import Color, HtmlMarker, MapService, MapSurface, Marker, MarkerSet, ShapeMarker
from .scheduler import ScheduledTask, Scheduler

logger = structlog.get_logger()

MARKER_SET_ID = "major-regions"
MARKER_SET_LABEL = "Major Regions"
AREA_MARKER_PREFIX = "arena.region.area."
LABEL_MARKER_PREFIX = "arena.region.label."

# Log every Nth unsuccessful poll (plus the first)
POLL_LOG_EVERY = 10


class RenderState(str, Enum):
    POLLING = "polling"
    ACTIVE = "active"
    DISABLED = "disabled"


def area_marker_id(cell_id: str) -> str:
    return AREA_MARKER_PREFIX + cell_id


def label_marker_id(cell_id: str) -> str:
    return LABEL_MARKER_PREFIX + cell_id


def label_html(name: str) -> str:
    return (
        '<div style="'
        "transform: translate(-50%, -50%);"
        "font-size: 1.0em;"
        "font-weight: bold;"
        "color: #ffffffcc;"
        "text-shadow: 0 0 6px #000000;"
        "pointer-events: none;"
        "white-space: nowrap;"
        '">'
        f"{html.escape(name)}"
        "</div>"
    )


class RegionRenderer:
    """Polls for the map service, then refreshes region markers periodically."""

    def __init__(
        self,
        round_store: RoundNameStore,
        region_status: Optional[RegionStatusProvider],
        map_service: MapService,
        scheduler: Scheduler,
        settings: Optional[Settings] = None,
        name_generator: Optional[RegionNameGenerator] = None,
    ):
        self.round_store = round_store
        self.region_status = region_status
        self.map_service = map_service
        self.scheduler = scheduler
        self.settings = settings or default_settings
        self.name_generator = name_generator or RegionNameGenerator()

        self.state = RenderState.POLLING
        self.polls = 0
        self.map_id: Optional[str] = None

        self._task: Optional[ScheduledTask] = None
        self._world: Optional[World] = None
        self._refreshing: Set[str] = set()

        # cell id -> display name, for the round in _loaded_round_id
        self._names: Dict[str, str] = {}
        self._loaded_round_id: Optional[int] = None
        self._unsaved = False

        self._palette: Dict[str, Tuple[Color, Color]] = {
            TeamId.RED.value: (
                Color.from_hex(self.settings.red_line_color),
                Color.from_hex(self.settings.red_fill_color),
            ),
            TeamId.BLUE.value: (
                Color.from_hex(self.settings.blue_line_color),
                Color.from_hex(self.settings.blue_fill_color),
            ),
        }
        self._neutral = (
            Color.from_hex(self.settings.default_line_color),
            Color.from_hex(self.settings.default_fill_color),
        )

    @property
    def grid_size(self) -> int:
        return self.settings.grid_size

    @property
    def edge(self) -> int:
        return self.settings.region_blocks

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def schedule_update(self, world: World) -> None:
        """Start polling for the map service on behalf of ``world``."""
        if world is None:
            raise ValueError("world is required")

        self._cancel_task()
        self._world = world
        self.state = RenderState.POLLING
        self.polls = 0
        self.map_id = None

        logger.info("Scheduling marker update", world=world.name)
        self._task = self.scheduler.run_task_timer(
            self._poll, 0, self.settings.poll_period_ticks
        )

    def _poll(self) -> None:
        if self.state is not RenderState.POLLING or self._world is None:
            return

        world = self._world
        self.polls += 1

        if not self.map_service.is_available():
            self._poll_failed("Waiting for map service")
            return

        surface = self.find_map_for_world(world)
        if surface is None:
            self._poll_failed(f"Waiting for map '{world.name}'")
            return

        # Map is available: swap the poll task for the long-lived refresh task
        self._cancel_task()
        self.state = RenderState.ACTIVE
        self.map_id = surface.id
        logger.info(
            "Map found, scheduling periodic marker refresh",
            map_id=surface.id,
            every_seconds=self.settings.marker_refresh_seconds,
            polls=self.polls,
        )

        refresh_ticks = self.settings.marker_refresh_ticks
        self._task = self.scheduler.run_task_timer(
            self._scheduled_refresh, refresh_ticks, refresh_ticks
        )
        self._scheduled_refresh()

    def _poll_failed(self, message: str) -> None:
        max_polls = self.settings.max_polls
        if self.polls == 1 or self.polls % POLL_LOG_EVERY == 0:
            logger.info(message, poll=self.polls, max_polls=max_polls)

        if self.polls >= max_polls:
            self._cancel_task()
            self.state = RenderState.DISABLED
            logger.warning(
                "Map service not ready, region rendering disabled",
                reason=message,
                polls=self.polls,
            )

    def _scheduled_refresh(self) -> None:
        if self._world is None:
            return
        try:
            self.refresh_markers(self._world)
        except Exception as e:
            logger.warning("Error during periodic marker refresh", error=str(e))

    def _cancel_task(self) -> None:
        if self._task is not None and not self._task.cancelled:
            self._task.cancel()
        self._task = None

    def shutdown(self) -> None:
        """Cancel any pending timer. The renderer does not restart by itself."""
        self._cancel_task()
        self.state = RenderState.DISABLED
        logger.info("Region renderer shut down")

    def find_map_for_world(self, world: World) -> Optional[MapSurface]:
        """Map whose id matches the world name (case-insensitive), else any map."""
        maps = self.map_service.get_maps()
        world_name = world.name.lower()

        for surface in maps:
            if surface.id.lower() == world_name:
                return surface
        return maps[0] if maps else None

    # ------------------------------------------------------------------
    # Round-scoped names
    # ------------------------------------------------------------------

    def _current_round(self) -> Optional[Round]:
        try:
            return self.round_store.get_current_round()
        except Exception as e:
            logger.warning("Failed to look up current round", error=str(e))
            return None

    def _sync_round(self, current: Optional[Round]) -> None:
        """
        Drop names from a previous round and load the current round's.

        ``_loaded_round_id`` is only set once the round's stored names were
        read. Until then names live in memory only and are never written
        back, so a failed read cannot overwrite what storage holds; the
        next pass retries the load.
        """
        if current is None or current.round_id == self._loaded_round_id:
            return

        if self._loaded_round_id is not None:
            logger.info(
                "Round changed, clearing region names",
                previous_round=self._loaded_round_id,
                round_id=current.round_id,
            )
        self._names.clear()
        self._unsaved = False
        self._loaded_round_id = None

        try:
            persisted = self.round_store.get_region_names(current.round_id)
        except Exception as e:
            logger.warning(
                "Failed to load persisted region names, will retry",
                round_id=current.round_id,
                error=str(e),
            )
            return

        self._loaded_round_id = current.round_id

        if persisted:
            self._names.update(persisted)
            logger.info("Loaded persisted region names", round_id=current.round_id, count=len(persisted))
        else:
            logger.info("No persisted region names", round_id=current.round_id)

    def load_names_for_current_round(self) -> bool:
        """Replace in-memory names with the current round's stored names."""
        current = self._current_round()
        if current is None:
            logger.info("No active round, region names not loaded")
            return False

        try:
            persisted = self.round_store.get_region_names(current.round_id)
        except Exception as e:
            logger.warning(
                "Failed to load region names", round_id=current.round_id, error=str(e)
            )
            return False

        if not persisted:
            logger.info("No persisted region names", round_id=current.round_id)
            return False

        self._names.clear()
        self._names.update(persisted)
        self._loaded_round_id = current.round_id
        self._unsaved = False
        logger.info("Loaded region names", round_id=current.round_id, count=len(persisted))
        return True

    def generate_and_persist_names(self, world: World) -> Dict[str, str]:
        """
        Fill in a name for every grid cell and persist them for the round.

        A changed round id clears the in-memory names and reloads the stored
        ones first. New names are distinct from every name already in use.
        Without an active round the names stay in memory only.
        """
        if world is None:
            raise ValueError("world is required")

        logger.info("Generating region names", world=world.name)

        current = self._current_round()
        if current is None:
            logger.warning("No active round, generated names will not be persisted")
        self._sync_round(current)

        used = set(self._names.values())
        generated = 0

        for cell_id in grid_cell_ids(self.grid_size):
            if cell_id in self._names:
                continue

            name = self.name_generator.generate_distinct_name(used)
            used.add(name)
            self._names[cell_id] = name
            generated += 1
            logger.debug("Generated region name", region_id=cell_id, name=name)

        if generated and current is not None and current.round_id == self._loaded_round_id:
            self._persist(current.round_id)
        elif generated:
            logger.info("Stored names unavailable, generated names are transient", count=generated)
        else:
            logger.info("All region names already present, nothing to persist")

        return dict(self._names)

    def _persist(self, round_id: int) -> bool:
        try:
            self.round_store.set_region_names(round_id, dict(self._names))
        except Exception as e:
            logger.warning("Failed to persist region names", round_id=round_id, error=str(e))
            return False

        self._unsaved = False
        logger.info("Region names persisted", round_id=round_id, count=len(self._names))
        return True

    def save_pending_names(self) -> bool:
        """Persist names generated during refreshes, if a round is active."""
        if not self._unsaved:
            return False

        current = self._current_round()
        if current is None or current.round_id != self._loaded_round_id:
            return False
        return self._persist(current.round_id)

    def _resolve_name(self, cell_id: str, current: Optional[Round], saved: Dict[str, str]) -> str:
        name = self._names.get(cell_id)
        if name is not None:
            return name

        if current is not None and cell_id in saved:
            name = saved[cell_id]
        else:
            name = self.name_generator.generate_distinct_name(self._names.values())
            self._unsaved = True

        self._names[cell_id] = name
        return name

    def get_region_name(self, cell_id: str) -> Optional[str]:
        if not self._names:
            self.load_names_for_current_round()
        return self._names.get(cell_id)

    def get_region_name_for_block(self, block_x: int, block_z: int) -> Optional[str]:
        cell_id = grid_cell_id_for_block(block_x, block_z, self.grid_size, self.edge)
        if cell_id is None:
            return None
        return self.get_region_name(cell_id)

    def get_region_id_by_name(self, name: str) -> Optional[str]:
        wanted = name.lower()
        for cell_id, region_name in self._names.items():
            if region_name.lower() == wanted:
                return cell_id
        return None

    def get_all_region_names(self) -> List[str]:
        return list(self._names.values())

    def format_region_grid(self) -> str:
        """Names laid out as the grid, one row per letter."""
        lines = []
        for row in range(self.grid_size):
            ids = [format_grid_cell_id(row, col) for col in range(self.grid_size)]
            names = [f"{self._names.get(cell_id, 'Unknown'):<20}" for cell_id in ids]
            lines.append(f"Row {chr(ord('A') + row)}: " + " | ".join(names))
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Markers
    # ------------------------------------------------------------------

    def _home_regions(self, world: World) -> Dict[RegionKey, str]:
        homes = {}
        for team_id in TeamId:
            spawn = hardcoded_team_spawn(world, team_id)
            homes[region_key_for_block(spawn.block_x, spawn.block_z, self.edge)] = team_id.value
        return homes

    def _colors_for(self, cell_id: str, cell_key: RegionKey, homes: Dict[RegionKey, str]):
        home_team = homes.get(cell_key)
        if home_team is not None:
            return self._palette[home_team]

        if self.region_status is None:
            return self._neutral

        status = self.region_status.get_region_status(cell_id)
        if status is None or not status.owner_team:
            return self._neutral
        return self._palette.get(status.owner_team.lower(), self._neutral)

    def refresh_markers(self, world: World) -> bool:
        """
        Rebuild every region marker for ``world``.

        Returns False without touching anything when the renderer is not
        active, the map is gone, or a refresh for the world is in flight.
        """
        if world is None:
            raise ValueError("world is required")

        if self.state is not RenderState.ACTIVE:
            logger.debug("Skipping marker refresh, renderer not active", state=self.state.value)
            return False

        if world.name in self._refreshing:
            logger.debug("Marker refresh already running", world=world.name)
            return False

        self._refreshing.add(world.name)
        try:
            return self._refresh(world)
        finally:
            self._refreshing.discard(world.name)

    def _refresh(self, world: World) -> bool:
        if not self.map_service.is_available():
            logger.warning("Cannot refresh markers, map service not available")
            return False

        surface = self.find_map_for_world(world)
        if surface is None:
            logger.warning("Cannot refresh markers, map not found", world=world.name)
            return False

        current = self._current_round()
        self._sync_round(current)

        saved: Dict[str, str] = {}
        if current is not None and len(self._names) < self.grid_size ** 2:
            try:
                saved = self.round_store.get_region_names(current.round_id)
            except Exception as e:
                logger.warning("Failed to load persisted region names", error=str(e))

        homes = self._home_regions(world)
        y = self.settings.map_layer_y
        markers: Dict[str, Marker] = {}

        for cell_id in grid_cell_ids(self.grid_size):
            cell = grid_cell_bounds(cell_id, self.grid_size, self.edge)
            cell_key = region_key_for_block(cell.center_x, cell.center_z, self.edge)

            line_color, fill_color = self._colors_for(cell_id, cell_key, homes)
            name = self._resolve_name(cell_id, current, saved)

            markers[area_marker_id(cell_id)] = ShapeMarker(
                label=name,
                shape=[
                    (cell.min_x, cell.min_z),
                    (cell.max_x, cell.min_z),
                    (cell.max_x, cell.max_z),
                    (cell.min_x, cell.max_z),
                ],
                shape_y=y,
                line_color=line_color,
                line_width=3,
                fill_color=fill_color,
                depth_test_enabled=False,
            )
            markers[label_marker_id(cell_id)] = HtmlMarker(
                label=name,
                position=(cell.center_x, y + self.settings.label_y_offset, cell.center_z),
                html=label_html(name),
                anchor=(0, 0),
                listed=False,
                min_distance=10,
                max_distance=10_000_000,
            )

        marker_set = surface.marker_sets.get(MARKER_SET_ID)
        if marker_set is None:
            marker_set = MarkerSet(label=MARKER_SET_LABEL, toggleable=True, default_hidden=False)
            surface.marker_sets[MARKER_SET_ID] = marker_set

        marker_set.markers.clear()
        marker_set.markers.update(markers)

        self.save_pending_names()
        logger.debug("Markers refreshed", map_id=surface.id, markers=len(markers))
        return True
