"""
Database utilities and models.

This package provides:
- SQLAlchemy models for teams, rounds and region state
- Database connection management (embedded SQLite)
- Stores for teams, rounds/region names and region ownership
"""

from .connection import Database, db
from .models import (
    Base, TeamRow, MembershipRow, TeamSpawnRow, RegionClaimRow,
    RoundRow, RegionNameRow, RegionStatusRow,
)
from .regions import SqlRegionStatusStore
from .rounds import SqlRoundStore
from .teams import TeamDb

__all__ = [
    # Connection management
    'Database', 'db',

    # Stores
    'TeamDb', 'SqlRoundStore', 'SqlRegionStatusStore',

    # Models
    'Base', 'TeamRow', 'MembershipRow', 'TeamSpawnRow', 'RegionClaimRow',
    'RoundRow', 'RegionNameRow', 'RegionStatusRow',
]
