"""Shared fixtures: temporary SQLite storage, fake world and collaborators."""

import random
from typing import Dict, Optional

import pytest

from py_frontline.config.config import Settings
from py_frontline.core.name_generator import RegionNameGenerator
from py_frontline.core.regions import RegionStatus
from py_frontline.core.rounds import Round, RoundStatus
from py_frontline.core.team_registry import TeamRegistry
from py_frontline.db.connection import Database
from py_frontline.db.rounds import SqlRoundStore
from py_frontline.db.teams import TeamDb
from py_frontline.render.markers import InMemoryMapService
from py_frontline.render.scheduler import TickScheduler


class FakeWorld:
    """World with a fixed terrain height everywhere."""

    def __init__(self, name: str = "world", height: int = 64):
        self.name = name
        self.height = height

    def get_highest_block_y_at(self, x: int, z: int) -> int:
        return self.height


class InMemoryRoundStore:
    """Round name store with switchable failures."""

    def __init__(self, current: Optional[Round] = None):
        self.current = current
        self.names: Dict[int, Dict[str, str]] = {}
        self.fail_reads = False
        self.fail_writes = False
        self.writes = 0

    def get_current_round(self) -> Optional[Round]:
        return self.current

    def get_region_names(self, round_id: int) -> Dict[str, str]:
        if self.fail_reads:
            raise RuntimeError("name store unavailable")
        return dict(self.names.get(round_id, {}))

    def set_region_names(self, round_id: int, names: Dict[str, str]) -> None:
        if self.fail_writes:
            raise RuntimeError("name store unavailable")
        self.writes += 1
        self.names[round_id] = dict(names)


class FakeRegionStatus:
    """Ownership collaborator backed by a dict."""

    def __init__(self):
        self.statuses: Dict[str, RegionStatus] = {}
        self.calls = 0

    def set_owner(self, region_id: str, owner: Optional[str]) -> None:
        self.statuses[region_id] = RegionStatus(region_id=region_id, round_id=1, owner_team=owner)

    def get_region_status(self, region_id: str) -> Optional[RegionStatus]:
        self.calls += 1
        return self.statuses.get(region_id)


def make_round(round_id: int, status: RoundStatus = RoundStatus.ACTIVE) -> Round:
    return Round(round_id=round_id, start_time=0, world_seed=42, status=status)


@pytest.fixture
def database(tmp_path):
    database = Database()
    database.initialize(f"sqlite:///{tmp_path / 'frontline.db'}")
    yield database
    database.close()


@pytest.fixture
def team_db(database):
    return TeamDb(database)


@pytest.fixture
def registry(team_db):
    return TeamRegistry(team_db)


@pytest.fixture
def round_store(database):
    return SqlRoundStore(database)


@pytest.fixture
def world():
    return FakeWorld()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def name_generator(rng):
    return RegionNameGenerator(rng)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        db_path=str(tmp_path / "frontline.db"),
        poll_period_ticks=1,
        max_polls=5,
        ticks_per_second=2,
        marker_refresh_seconds=1,
    )


@pytest.fixture
def map_service():
    return InMemoryMapService(["world"])


@pytest.fixture
def scheduler():
    return TickScheduler()


@pytest.fixture
def memory_rounds():
    return InMemoryRoundStore(make_round(1))


@pytest.fixture
def region_status():
    return FakeRegionStatus()
