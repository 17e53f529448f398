"""
Durable storage for teams, memberships, spawns and region claims.

Every method runs in its own session and commits before returning. Storage
errors (``sqlalchemy.exc.SQLAlchemyError``) propagate unchanged so the
caller never mistakes a failed write for a successful one.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import structlog

from ..core.grid import Location, RegionKey
from ..core.teams import Team
from .connection import Database
from .models import MembershipRow, RegionClaimRow, TeamRow, TeamSpawnRow

logger = structlog.get_logger()


class TeamDb:
    """SQL persistence behind the team registry."""

    def __init__(self, database: Database):
        self.database = database

    # --- Teams ---

    def load_teams(self) -> Dict[str, Team]:
        with self.database.get_session() as session:
            rows = session.query(TeamRow).all()
            return {
                row.id: Team(
                    id=row.id,
                    display_name=row.display_name,
                    color=row.color,
                    max_size=row.max_size or 0,
                )
                for row in rows
            }

    def upsert_team(self, team: Team) -> bool:
        with self.database.get_session() as session:
            session.merge(
                TeamRow(
                    id=team.id,
                    display_name=team.display_name,
                    color=team.color,
                    max_size=team.max_size,
                )
            )
        return True

    def delete_team(self, team_id: str) -> bool:
        """Delete a team; memberships, spawn and claims cascade."""
        with self.database.get_session() as session:
            deleted = (
                session.query(TeamRow)
                .filter(TeamRow.id == team_id)
                .delete(synchronize_session=False)
            )
        return deleted > 0

    # --- Memberships ---

    def load_memberships(self) -> Dict[str, str]:
        with self.database.get_session() as session:
            return {row.player_id: row.team_id for row in session.query(MembershipRow).all()}

    def set_membership(self, player_id: str, team_id: str) -> None:
        with self.database.get_session() as session:
            session.merge(MembershipRow(player_id=player_id, team_id=team_id))

    def clear_membership(self, player_id: str) -> None:
        with self.database.get_session() as session:
            session.query(MembershipRow).filter(
                MembershipRow.player_id == player_id
            ).delete(synchronize_session=False)

    def clear_all_memberships(self) -> int:
        with self.database.get_session() as session:
            return session.query(MembershipRow).delete(synchronize_session=False)

    def count_members(self, team_id: str) -> int:
        with self.database.get_session() as session:
            return (
                session.query(MembershipRow)
                .filter(MembershipRow.team_id == team_id)
                .count()
            )

    # --- Spawns ---

    def load_spawns(self) -> Dict[str, Location]:
        with self.database.get_session() as session:
            return {
                row.team_id: Location(
                    world=row.world,
                    x=row.x,
                    y=row.y,
                    z=row.z,
                    yaw=row.yaw,
                    pitch=row.pitch,
                )
                for row in session.query(TeamSpawnRow).all()
            }

    def upsert_spawn(self, team_id: str, location: Location) -> None:
        if not location.world:
            raise ValueError("location.world is required")

        with self.database.get_session() as session:
            session.merge(
                TeamSpawnRow(
                    team_id=team_id,
                    world=location.world,
                    x=location.x,
                    y=location.y,
                    z=location.z,
                    yaw=location.yaw,
                    pitch=location.pitch,
                )
            )

    # --- Region claims ---

    def claim_region(self, key: RegionKey, team_id: str) -> None:
        with self.database.get_session() as session:
            session.merge(
                RegionClaimRow(corner_x=key.corner_x, corner_z=key.corner_z, team_id=team_id)
            )

    def get_region_owner(self, key: RegionKey) -> Optional[str]:
        with self.database.get_session() as session:
            row = (
                session.query(RegionClaimRow)
                .filter(
                    RegionClaimRow.corner_x == key.corner_x,
                    RegionClaimRow.corner_z == key.corner_z,
                )
                .first()
            )
            return row.team_id if row else None

    def list_claims(self, team_id: Optional[str] = None) -> List[RegionKey]:
        with self.database.get_session() as session:
            query = session.query(RegionClaimRow)
            if team_id is not None:
                query = query.filter(RegionClaimRow.team_id == team_id)
            return [
                RegionKey(row.corner_x, row.corner_z)
                for row in query.order_by(RegionClaimRow.corner_x, RegionClaimRow.corner_z)
            ]
