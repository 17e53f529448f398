"""SQL-backed rounds and round-scoped region names."""

from __future__ import annotations

import time
from typing import Dict, List, Optional

import structlog

from ..core.rounds import Round, RoundStatus
from .connection import Database
from .models import RegionNameRow, RoundRow

logger = structlog.get_logger()


def _now_millis() -> int:
    return int(time.time() * 1000)


def _to_round(row: RoundRow) -> Round:
    return Round(
        round_id=row.round_id,
        start_time=row.start_time,
        world_seed=row.world_seed,
        status=RoundStatus(row.status),
        current_phase=row.current_phase,
        end_time=row.end_time,
        world_name=row.world_name,
        winning_team=row.winning_team,
    )


class SqlRoundStore:
    """Rounds table plus the region names scoped to each round."""

    def __init__(self, database: Database):
        self.database = database

    def create_round(self, world_seed: int, world_name: Optional[str] = None) -> Round:
        with self.database.get_session() as session:
            row = RoundRow(
                start_time=_now_millis(),
                current_phase=1,
                world_seed=world_seed,
                world_name=world_name,
                status=RoundStatus.PENDING.value,
            )
            session.add(row)
            session.flush()
            created = _to_round(row)

        logger.info("Round created", round_id=created.round_id, world_seed=world_seed)
        return created

    def _set_status(self, round_id: int, status: RoundStatus, **values) -> Round:
        with self.database.get_session() as session:
            row = session.get(RoundRow, round_id)
            if row is None:
                raise ValueError(f"Round {round_id} does not exist")
            row.status = status.value
            for key, value in values.items():
                setattr(row, key, value)
            session.flush()
            return _to_round(row)

    def start_round(self, round_id: int) -> Round:
        started = self._set_status(round_id, RoundStatus.ACTIVE)
        logger.info("Round started", round_id=round_id)
        return started

    def end_round(self, round_id: int, winning_team: Optional[str] = None) -> Round:
        ended = self._set_status(
            round_id, RoundStatus.COMPLETED, end_time=_now_millis(), winning_team=winning_team
        )
        logger.info("Round ended", round_id=round_id, winning_team=winning_team)
        return ended

    def get_round(self, round_id: int) -> Optional[Round]:
        with self.database.get_session() as session:
            row = session.get(RoundRow, round_id)
            return _to_round(row) if row else None

    def get_current_round(self) -> Optional[Round]:
        """Most recent round that is pending or active."""
        with self.database.get_session() as session:
            row = (
                session.query(RoundRow)
                .filter(RoundRow.status.in_([RoundStatus.PENDING.value, RoundStatus.ACTIVE.value]))
                .order_by(RoundRow.round_id.desc())
                .first()
            )
            return _to_round(row) if row else None

    def list_rounds(self) -> List[Round]:
        with self.database.get_session() as session:
            return [
                _to_round(row)
                for row in session.query(RoundRow).order_by(RoundRow.round_id.desc())
            ]

    def get_region_names(self, round_id: int) -> Dict[str, str]:
        with self.database.get_session() as session:
            rows = session.query(RegionNameRow).filter(RegionNameRow.round_id == round_id)
            return {row.region_id: row.region_name for row in rows}

    def set_region_names(self, round_id: int, names: Dict[str, str]) -> None:
        """Replace all names stored for a round in one transaction."""
        with self.database.get_session() as session:
            session.query(RegionNameRow).filter(RegionNameRow.round_id == round_id).delete(
                synchronize_session=False
            )
            session.add_all(
                RegionNameRow(round_id=round_id, region_id=region_id, region_name=name)
                for region_id, name in names.items()
            )
        logger.debug("Region names stored", round_id=round_id, count=len(names))
