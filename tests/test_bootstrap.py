"""Tests for wiring storage, teams and the renderer together."""

import pytest

from conftest import FakeWorld
from py_frontline.bootstrap import FlatWorld, build_services
from py_frontline.config.config import Settings
from py_frontline.render.region_renderer import RenderState


class TestBuildServices:
    """build_services with and without a map service."""

    def test_seeds_teams(self, settings, world, database):
        services = build_services(settings, world, database=database)

        assert {team.id for team in services.teams.list_teams()} == {"red", "blue"}
        assert services.teams.get_team_spawn("blue").x == 767.5
        assert services.renderer is None

    def test_initializes_database(self, settings, world):
        services = build_services(settings, world)
        try:
            assert services.database.initialized
            assert services.database.ping()
        finally:
            services.close()
        assert not services.database.initialized

    def test_renderer_started(self, settings, world, database, map_service, scheduler):
        services = build_services(
            settings, world, map_service=map_service, scheduler=scheduler, database=database
        )

        assert services.renderer.state is RenderState.POLLING
        scheduler.tick_once()
        assert services.renderer.state is RenderState.ACTIVE

    def test_rendering_disabled(self, tmp_path, world, database, map_service):
        settings = Settings(db_path=str(tmp_path / "x.db"), render_enabled=False)

        services = build_services(settings, world, map_service=map_service, database=database)

        assert services.renderer is None

    def test_region_names_from_store(self, settings, world, database):
        services = build_services(settings, world, database=database)
        assert set(services.region_names().values()) == {None}

        round_id = services.rounds.create_round(world_seed=1).round_id
        services.rounds.set_region_names(round_id, {"D4": "Ironridge"})

        assert services.region_names()["D4"] == "Ironridge"

    def test_region_names_from_renderer(
        self, settings, world, database, round_store, map_service, scheduler
    ):
        round_id = round_store.create_round(world_seed=3).round_id
        services = build_services(
            settings, world, map_service=map_service, scheduler=scheduler, database=database
        )
        scheduler.tick_once()

        names = services.region_names()
        assert len(set(names.values())) == 16
        assert services.rounds.get_region_names(round_id) == names

    def test_restart_keeps_state(self, settings, world, database):
        first = build_services(settings, world, database=database)
        first.teams.join_team("alice", "blue")

        second = build_services(settings, FakeWorld(height=100), database=database)

        assert second.teams.get_player_team("alice") == "blue"
        assert second.teams.get_team_spawn("red").y == 65

    def test_requires_world(self, settings, database):
        with pytest.raises(ValueError):
            build_services(settings, None, database=database)


def test_flat_world():
    world = FlatWorld("world", surface_y=70)
    assert world.get_highest_block_y_at(123, -456) == 70
