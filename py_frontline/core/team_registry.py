"""
Team registry: membership rules over a write-through cache.

The cache is loaded once from storage at construction. Every mutation writes
storage first and only then touches the cache, so a failed write leaves the
cache exactly as it was. Storage errors propagate to the caller.

All calls are expected on the host's single logical thread; the registry
does no locking of its own.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import structlog

from ..db.teams import TeamDb
from .grid import Location, RegionKey
from .teams import (
    JoinReason,
    JoinResult,
    LeaveResult,
    PlayerId,
    SwapResult,
    Team,
    normalize_player_id,
)

logger = structlog.get_logger()


class TeamRegistry:
    """Teams, memberships and spawns backed by :class:`TeamDb`."""

    def __init__(self, team_db: TeamDb):
        self.team_db = team_db
        self._teams: Dict[str, Team] = {}
        self._memberships: Dict[str, str] = {}
        self._spawns: Dict[str, Location] = {}
        self.refresh_cache()

    def refresh_cache(self) -> None:
        """Reload every cache from storage."""
        teams = self.team_db.load_teams()
        memberships = self.team_db.load_memberships()
        spawns = self.team_db.load_spawns()

        self._teams = dict(teams)
        self._memberships = dict(memberships)
        self._spawns = dict(spawns)
        logger.info(
            "Team cache loaded",
            teams=len(self._teams),
            memberships=len(self._memberships),
            spawns=len(self._spawns),
        )

    # --- Reads ---

    def get_team(self, team_id: str) -> Optional[Team]:
        return self._teams.get(team_id)

    def list_teams(self) -> List[Team]:
        return sorted(self._teams.values(), key=lambda team: team.id)

    def get_player_team(self, player_id: PlayerId) -> Optional[str]:
        return self._memberships.get(normalize_player_id(player_id))

    def count_team_members(self, team_id: str) -> int:
        return sum(1 for member_team in self._memberships.values() if member_team == team_id)

    def list_members(self, team_id: str) -> List[str]:
        return sorted(
            player for player, member_team in self._memberships.items() if member_team == team_id
        )

    def get_team_spawn(self, team_id: str) -> Optional[Location]:
        return self._spawns.get(team_id)

    def _is_full(self, team: Team) -> bool:
        return team.is_capped and self.count_team_members(team.id) >= team.max_size

    # --- Membership ---

    def join_team(
        self,
        player_id: PlayerId,
        team_id: str,
        reason: JoinReason = JoinReason.PLAYER_CHOICE,
    ) -> JoinResult:
        player = normalize_player_id(player_id)

        team = self._teams.get(team_id)
        if team is None:
            return JoinResult.TEAM_NOT_FOUND

        if player in self._memberships:
            return JoinResult.ALREADY_IN_TEAM

        if self._is_full(team):
            return JoinResult.TEAM_FULL

        self.team_db.set_membership(player, team_id)
        self._memberships[player] = team_id
        logger.info("Player joined team", player_id=player, team_id=team_id, reason=reason.value)
        return JoinResult.OK

    def leave_team(self, player_id: PlayerId) -> LeaveResult:
        player = normalize_player_id(player_id)
        if player not in self._memberships:
            return LeaveResult.NOT_IN_TEAM

        team_id = self._memberships[player]
        self.team_db.clear_membership(player)
        del self._memberships[player]
        logger.info("Player left team", player_id=player, team_id=team_id)
        return LeaveResult.OK

    def swap_team(self, player_id: PlayerId, to_team_id: str) -> SwapResult:
        player = normalize_player_id(player_id)

        current = self._memberships.get(player)
        if current is None:
            return SwapResult.NOT_IN_TEAM
        if current == to_team_id:
            return SwapResult.OK

        team = self._teams.get(to_team_id)
        if team is None:
            return SwapResult.TEAM_NOT_FOUND

        if self._is_full(team):
            return SwapResult.TEAM_FULL

        self.team_db.set_membership(player, to_team_id)
        self._memberships[player] = to_team_id
        logger.info("Player swapped team", player_id=player, from_team=current, to_team=to_team_id)
        return SwapResult.OK

    def reset_all_teams(self) -> None:
        """Clear every membership. Teams and spawns are kept."""
        removed = self.team_db.clear_all_memberships()
        self._memberships.clear()
        logger.info("All team memberships cleared", removed=removed)

    # --- Spawns ---

    def set_team_spawn(self, team_id: str, location: Location) -> None:
        if location is None:
            raise ValueError("location is required")
        if team_id not in self._teams:
            raise ValueError(f"Unknown team '{team_id}'")

        self.team_db.upsert_spawn(team_id, location)
        self._spawns[team_id] = location
        logger.info(
            "Team spawn set",
            team_id=team_id,
            world=location.world,
            x=location.x,
            y=location.y,
            z=location.z,
        )

    # --- Teams ---

    def create_team(self, team: Team) -> bool:
        """Create or update a team."""
        if team is None:
            raise ValueError("team is required")

        success = self.team_db.upsert_team(team)
        if success:
            self._teams[team.id] = team
            logger.info("Team stored", team_id=team.id, max_size=team.max_size)
        return success

    def delete_team(self, team_id: str) -> bool:
        """Delete a team together with its memberships and spawn."""
        success = self.team_db.delete_team(team_id)
        if success:
            self._teams.pop(team_id, None)
            self._memberships = {
                player: member_team
                for player, member_team in self._memberships.items()
                if member_team != team_id
            }
            self._spawns.pop(team_id, None)
            logger.info("Team deleted", team_id=team_id)
        return success

    # --- Region claims (seed-time ownership) ---

    def claim_region(self, key: RegionKey, team_id: str) -> None:
        if key is None:
            raise ValueError("key is required")
        if team_id not in self._teams:
            raise ValueError(f"Unknown team '{team_id}'")
        self.team_db.claim_region(key, team_id)

    def get_region_claim(self, key: RegionKey) -> Optional[str]:
        return self.team_db.get_region_owner(key)

    def list_region_claims(self, team_id: Optional[str] = None) -> List[RegionKey]:
        return self.team_db.list_claims(team_id)
