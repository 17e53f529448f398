"""
Region grid, name generation and team membership.
"""

from .grid import (
    GRID_SIZE,
    REGION_BLOCKS,
    GridCell,
    Location,
    RegionInfo,
    RegionKey,
    TeamId,
    grid_cell_bounds,
    grid_cell_id_for_block,
    grid_cell_ids,
    hardcoded_team_spawn,
    home_region_key,
    region_contains_block,
    region_info_for_block,
    region_info_for_key,
    region_key_for_block,
)
from .name_generator import (
    NameParts,
    RegionNameGenerator,
    generate_region_name,
    generate_unique_names,
)
from .teams import JoinReason, JoinResult, LeaveResult, SwapResult, Team

__all__ = [
    'GRID_SIZE', 'REGION_BLOCKS', 'GridCell', 'Location', 'RegionInfo', 'RegionKey', 'TeamId',
    'grid_cell_bounds', 'grid_cell_id_for_block', 'grid_cell_ids', 'hardcoded_team_spawn',
    'home_region_key', 'region_contains_block', 'region_info_for_block', 'region_info_for_key',
    'region_key_for_block',
    'NameParts', 'RegionNameGenerator', 'generate_region_name', 'generate_unique_names',
    'JoinReason', 'JoinResult', 'LeaveResult', 'SwapResult', 'Team',
]
