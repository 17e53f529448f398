"""SQL-backed live region ownership for the current round."""

from __future__ import annotations

import time
from typing import List, Optional

import structlog

from ..core.regions import RegionState, RegionStatus
from .connection import Database
from .models import RegionStatusRow
from .rounds import SqlRoundStore

logger = structlog.get_logger()


def _to_status(row: RegionStatusRow) -> RegionStatus:
    return RegionStatus(
        region_id=row.region_id,
        round_id=row.round_id,
        owner_team=row.owner_team,
        state=RegionState(row.state),
        owned_since=row.owned_since,
        times_captured=row.times_captured or 0,
    )


class SqlRegionStatusStore:
    """
    Region ownership keyed by lettered cell id within the current round.

    Only ownership bookkeeping lives here; influence and capture rules are
    applied by whoever calls ``set_region_owner``.
    """

    def __init__(self, database: Database, rounds: SqlRoundStore):
        self.database = database
        self.rounds = rounds

    def _current_round_id(self) -> Optional[int]:
        current = self.rounds.get_current_round()
        return current.round_id if current else None

    def get_region_status(self, region_id: str) -> Optional[RegionStatus]:
        round_id = self._current_round_id()
        if round_id is None:
            return None

        with self.database.get_session() as session:
            row = session.get(RegionStatusRow, (round_id, region_id))
            return _to_status(row) if row else None

    def list_region_statuses(self) -> List[RegionStatus]:
        round_id = self._current_round_id()
        if round_id is None:
            return []

        with self.database.get_session() as session:
            rows = (
                session.query(RegionStatusRow)
                .filter(RegionStatusRow.round_id == round_id)
                .order_by(RegionStatusRow.region_id)
            )
            return [_to_status(row) for row in rows]

    def set_region_owner(
        self,
        region_id: str,
        team_id: Optional[str],
        state: Optional[RegionState] = None,
    ) -> RegionStatus:
        """Record a new owner (None for neutral) for a cell in the current round."""
        round_id = self._current_round_id()
        if round_id is None:
            raise ValueError("No active round to record region ownership in")

        if state is None:
            state = RegionState.OWNED if team_id else RegionState.NEUTRAL

        with self.database.get_session() as session:
            row = session.get(RegionStatusRow, (round_id, region_id))
            if row is None:
                row = RegionStatusRow(round_id=round_id, region_id=region_id, times_captured=0)
                session.add(row)

            if team_id and team_id != row.owner_team:
                row.times_captured = (row.times_captured or 0) + 1
                row.owned_since = int(time.time() * 1000)
            elif not team_id:
                row.owned_since = None

            row.owner_team = team_id
            row.state = state.value
            session.flush()
            status = _to_status(row)

        logger.info("Region owner set", region_id=region_id, round_id=round_id, owner=team_id)
        return status
