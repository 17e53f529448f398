"""
Region grid geometry.

Two coordinate systems coexist here and are kept deliberately separate:

1. RegionKey / RegionInfo: an unbounded grid of square regions addressed by
   their corner block. Corners come from floor division, so negative block
   coordinates land in the region that actually contains them.
2. Lettered grid cells ("A1".."D4"): a bounded grid_size x grid_size window
   centered on the world origin. Indices come from truncating division on a
   shifted origin and anything outside [0, grid_size) has no cell.

The two schemes disagree for blocks just outside the lettered window
(e.g. x in [-1535, -1025] truncates to column 0). That behaviour is relied on
by existing rounds and is preserved as is.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Protocol, Tuple, Union

# 32 chunks * 16 blocks
REGION_BLOCKS = 512
HALF_REGION_BLOCKS = REGION_BLOCKS // 2
GRID_SIZE = 4

RED_SPAWN_X = -767
RED_SPAWN_Z = -767
BLUE_SPAWN_X = 767
BLUE_SPAWN_Z = 767


class TeamId(str, Enum):
    """The two factions with hardcoded home coordinates."""

    RED = "red"
    BLUE = "blue"


TEAM_SPAWN_COORDS = {
    TeamId.RED: (RED_SPAWN_X, RED_SPAWN_Z),
    TeamId.BLUE: (BLUE_SPAWN_X, BLUE_SPAWN_Z),
}


class World(Protocol):
    """The slice of a game world the grid needs."""

    name: str

    def get_highest_block_y_at(self, x: int, z: int) -> int:
        ...


@dataclass(frozen=True)
class Location:
    """A position in a named world, with facing angles."""

    world: str
    x: float
    y: float
    z: float
    yaw: float = 0.0
    pitch: float = 0.0

    @property
    def block_x(self) -> int:
        return math.floor(self.x)

    @property
    def block_z(self) -> int:
        return math.floor(self.z)


@dataclass(frozen=True)
class RegionKey:
    """Corner block of a region; always a multiple of the region edge."""

    corner_x: int
    corner_z: int


@dataclass(frozen=True)
class RegionInfo:
    """Derived view of a RegionKey. Never persisted."""

    key: RegionKey
    min_x: int
    min_z: int
    max_x: int
    max_z: int
    center_x: int
    center_z: int
    id: str
    name: str


@dataclass(frozen=True)
class GridCell:
    """Geometry of one lettered cell of the rendered grid."""

    id: str
    row: int
    col: int
    min_x: int
    min_z: int
    max_x: int
    max_z: int

    @property
    def center_x(self) -> int:
        return self.min_x + (self.max_x - self.min_x) // 2

    @property
    def center_z(self) -> int:
        return self.min_z + (self.max_z - self.min_z) // 2


def _floor_to_region_corner(block_coord: int, edge: int) -> int:
    return (block_coord // edge) * edge


def _truncating_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def region_key_for_block(block_x: int, block_z: int, edge: int = REGION_BLOCKS) -> RegionKey:
    """Region containing a block, by floor division on each axis."""
    return RegionKey(
        _floor_to_region_corner(block_x, edge),
        _floor_to_region_corner(block_z, edge),
    )


def region_info_for_key(key: RegionKey, edge: int = REGION_BLOCKS) -> RegionInfo:
    if key is None:
        raise ValueError("key is required")

    x0 = key.corner_x
    z0 = key.corner_z
    grid_x = x0 // edge
    grid_z = z0 // edge
    region_id = f"{grid_x},{grid_z}"

    return RegionInfo(
        key=key,
        min_x=x0,
        min_z=z0,
        max_x=x0 + edge,
        max_z=z0 + edge,
        center_x=x0 + edge // 2,
        center_z=z0 + edge // 2,
        id=region_id,
        name=f"Region {region_id}",
    )


def region_info_for_block(block_x: int, block_z: int, edge: int = REGION_BLOCKS) -> RegionInfo:
    return region_info_for_key(region_key_for_block(block_x, block_z, edge), edge)


def region_contains_block(
    key: RegionKey, block_x: int, block_z: int, edge: int = REGION_BLOCKS
) -> bool:
    """Half-open containment test: [corner, corner + edge) on both axes."""
    if key is None:
        raise ValueError("key is required")
    return (
        key.corner_x <= block_x < key.corner_x + edge
        and key.corner_z <= block_z < key.corner_z + edge
    )


def _resolve_team_id(team_id: Union[TeamId, str]) -> TeamId:
    if team_id is None:
        raise ValueError("team_id is required")
    try:
        return TeamId(team_id.lower() if isinstance(team_id, str) else team_id)
    except ValueError:
        raise ValueError(f"No hardcoded spawn for team '{team_id}'") from None


def hardcoded_team_spawn(world: World, team_id: Union[TeamId, str]) -> Location:
    """
    Fixed spawn point for a team.

    Y is one block above the highest block at the spawn column; X/Z are
    centered on the block and the facing angles are zero.
    """
    if world is None:
        raise ValueError("world is required")
    x, z = TEAM_SPAWN_COORDS[_resolve_team_id(team_id)]

    y = world.get_highest_block_y_at(x, z) + 1
    return Location(world.name, x + 0.5, y, z + 0.5, 0.0, 0.0)


def home_region_key(team_id: Union[TeamId, str], edge: int = REGION_BLOCKS) -> RegionKey:
    """RegionKey containing a team's hardcoded spawn."""
    x, z = TEAM_SPAWN_COORDS[_resolve_team_id(team_id)]
    return region_key_for_block(x, z, edge)


# ---------------------------------------------------------------------------
# Lettered grid cells
# ---------------------------------------------------------------------------


def format_grid_cell_id(row: int, col: int) -> str:
    return f"{chr(ord('A') + row)}{col + 1}"


def parse_grid_cell_id(cell_id: str, grid_size: int = GRID_SIZE) -> Tuple[int, int]:
    """Split "B3" into (row, col) = (1, 2), validating against the grid size."""
    if not cell_id or len(cell_id) < 2:
        raise ValueError(f"Invalid grid cell id: {cell_id!r}")

    row = ord(cell_id[0].upper()) - ord("A")
    try:
        col = int(cell_id[1:]) - 1
    except ValueError:
        raise ValueError(f"Invalid grid cell id: {cell_id!r}") from None

    if not (0 <= row < grid_size and 0 <= col < grid_size):
        raise ValueError(f"Grid cell id {cell_id!r} outside {grid_size}x{grid_size} grid")
    return row, col


def grid_cell_ids(grid_size: int = GRID_SIZE) -> Iterator[str]:
    """Lettered ids in row-major order: A1, A2, ..., B1, ..."""
    for row in range(grid_size):
        for col in range(grid_size):
            yield format_grid_cell_id(row, col)


def grid_cell_bounds(
    cell_id: str, grid_size: int = GRID_SIZE, edge: int = REGION_BLOCKS
) -> GridCell:
    row, col = parse_grid_cell_id(cell_id, grid_size)
    half_extent = (grid_size * edge) // 2

    x0 = col * edge - half_extent
    z0 = row * edge - half_extent
    return GridCell(
        id=format_grid_cell_id(row, col),
        row=row,
        col=col,
        min_x=x0,
        min_z=z0,
        max_x=x0 + edge,
        max_z=z0 + edge,
    )


def grid_cell_id_for_block(
    block_x: int, block_z: int, grid_size: int = GRID_SIZE, edge: int = REGION_BLOCKS
) -> Optional[str]:
    """
    Lettered cell containing a block, or None outside the grid window.

    Uses truncating division on the origin-shifted coordinate, not the floor
    division RegionKey uses.
    """
    half_extent = (grid_size * edge) // 2

    grid_x = _truncating_div(block_x + half_extent, edge)
    grid_z = _truncating_div(block_z + half_extent, edge)

    if grid_x < 0 or grid_x >= grid_size or grid_z < 0 or grid_z >= grid_size:
        return None

    return format_grid_cell_id(grid_z, grid_x)
