"""Tests for region grid geometry."""

import pytest

from conftest import FakeWorld
from py_frontline.core.grid import (
    GRID_SIZE,
    REGION_BLOCKS,
    Location,
    RegionKey,
    TeamId,
    grid_cell_bounds,
    grid_cell_id_for_block,
    grid_cell_ids,
    hardcoded_team_spawn,
    home_region_key,
    parse_grid_cell_id,
    region_contains_block,
    region_info_for_block,
    region_info_for_key,
    region_key_for_block,
)

SAMPLE_COORDS = [
    -100000, -2049, -2048, -1025, -1024, -1023, -767, -513, -512, -511, -1,
    0, 1, 255, 256, 511, 512, 513, 767, 1023, 1024, 2047, 2048, 99999,
]


class TestRegionKey:
    """Floor-division mapping from blocks to regions."""

    @pytest.mark.parametrize("x", SAMPLE_COORDS)
    @pytest.mark.parametrize("z", [-1025, -1, 0, 511, 512, 4097])
    def test_key_contains_its_block(self, x, z):
        key = region_key_for_block(x, z)

        assert region_contains_block(key, x, z)
        assert key.corner_x % REGION_BLOCKS == 0
        assert key.corner_z % REGION_BLOCKS == 0
        assert key.corner_x <= x < key.corner_x + REGION_BLOCKS
        assert key.corner_z <= z < key.corner_z + REGION_BLOCKS

    def test_negative_coordinates_floor(self):
        """-767 / 512 floors to -2, so the corner is -1024."""
        assert region_key_for_block(-767, -767) == RegionKey(-1024, -1024)
        assert region_key_for_block(-1, -512) == RegionKey(-512, -512)
        assert region_key_for_block(-513, 0) == RegionKey(-1024, 0)

    def test_keys_are_value_types(self):
        assert region_key_for_block(10, 20) == region_key_for_block(500, 300)
        assert len({region_key_for_block(0, 0), RegionKey(0, 0)}) == 1

    def test_custom_edge(self):
        assert region_key_for_block(-1, 15, edge=16) == RegionKey(-16, 0)


class TestRegionInfo:
    """Derived region geometry and ids."""

    def test_info_for_negative_key(self):
        info = region_info_for_key(RegionKey(-1024, 512))

        assert (info.min_x, info.min_z) == (-1024, 512)
        assert (info.max_x, info.max_z) == (-512, 1024)
        assert (info.center_x, info.center_z) == (-768, 768)
        assert info.id == "-2,1"
        assert info.name == "Region -2,1"

    def test_info_for_block(self):
        info = region_info_for_block(700, -10)
        assert info.key == RegionKey(512, -512)
        assert info.id == "1,-1"

    def test_containment_is_half_open(self):
        key = RegionKey(0, 0)
        assert region_contains_block(key, 0, 0)
        assert region_contains_block(key, 511, 511)
        assert not region_contains_block(key, 512, 0)
        assert not region_contains_block(key, 0, -1)

    def test_missing_key_rejected(self):
        with pytest.raises(ValueError):
            region_info_for_key(None)


class TestGridCells:
    """Bounded lettered grid using truncating division."""

    def test_ids_row_major(self):
        ids = list(grid_cell_ids())
        assert len(ids) == GRID_SIZE * GRID_SIZE
        assert ids[:5] == ["A1", "A2", "A3", "A4", "B1"]
        assert ids[-1] == "D4"
        assert len(set(ids)) == len(ids)

    def test_corners_of_window(self):
        assert grid_cell_id_for_block(-1024, -1024) == "A1"
        assert grid_cell_id_for_block(1023, -1024) == "A4"
        assert grid_cell_id_for_block(-1024, 1023) == "D1"
        assert grid_cell_id_for_block(1023, 1023) == "D4"
        assert grid_cell_id_for_block(0, 0) == "C3"

    def test_outside_window(self):
        # (-2000 + 1024) / 512 truncates to -1
        assert grid_cell_id_for_block(0, -2000) is None
        assert grid_cell_id_for_block(1024, 0) is None
        assert grid_cell_id_for_block(0, 5000) is None

    def test_truncation_differs_from_floor(self):
        """Blocks just west of the window truncate into column 0."""
        assert grid_cell_id_for_block(-1100, 0) == "C1"
        assert grid_cell_id_for_block(-1535, 0) == "C1"
        assert grid_cell_id_for_block(-1536, 0) is None

        cell = grid_cell_bounds("C1")
        assert not (cell.min_x <= -1100 < cell.max_x)
        assert region_key_for_block(-1100, 0).corner_x == -1536

    def test_bounds(self):
        cell = grid_cell_bounds("A1")
        assert (cell.row, cell.col) == (0, 0)
        assert (cell.min_x, cell.min_z, cell.max_x, cell.max_z) == (-1024, -1024, -512, -512)
        assert (cell.center_x, cell.center_z) == (-768, -768)

        cell = grid_cell_bounds("D4")
        assert (cell.min_x, cell.min_z) == (512, 512)

    def test_bounds_agree_with_lookup_inside_window(self):
        for cell_id in grid_cell_ids():
            cell = grid_cell_bounds(cell_id)
            assert grid_cell_id_for_block(cell.center_x, cell.center_z) == cell_id
            assert grid_cell_id_for_block(cell.min_x, cell.min_z) == cell_id

    def test_parse(self):
        assert parse_grid_cell_id("B3") == (1, 2)
        assert parse_grid_cell_id("d4") == (3, 3)

    @pytest.mark.parametrize("bad", ["", "A", "E1", "A0", "A5", "1A", "AA"])
    def test_parse_rejects_invalid(self, bad):
        with pytest.raises(ValueError):
            parse_grid_cell_id(bad)

    def test_smaller_grid(self):
        assert list(grid_cell_ids(2)) == ["A1", "A2", "B1", "B2"]
        assert grid_cell_id_for_block(-512, -512, grid_size=2) == "A1"
        assert grid_cell_id_for_block(512, 0, grid_size=2) is None


class TestTeamSpawns:
    """Hardcoded team spawn points."""

    def test_red_spawn(self):
        spawn = hardcoded_team_spawn(FakeWorld(height=70), TeamId.RED)

        assert spawn == Location("world", -766.5, 71, -766.5, 0.0, 0.0)
        assert (spawn.block_x, spawn.block_z) == (-767, -767)

    def test_blue_spawn_by_slug(self):
        spawn = hardcoded_team_spawn(FakeWorld(), "BLUE")
        assert (spawn.x, spawn.y, spawn.z) == (767.5, 65, 767.5)

    def test_home_regions(self):
        assert home_region_key(TeamId.RED) == RegionKey(-1024, -1024)
        assert home_region_key("blue") == RegionKey(512, 512)

    def test_home_regions_are_lettered_corners(self):
        red = grid_cell_bounds("A1")
        blue = grid_cell_bounds("D4")
        assert home_region_key("red") == region_key_for_block(red.center_x, red.center_z)
        assert home_region_key("blue") == region_key_for_block(blue.center_x, blue.center_z)

    def test_preconditions(self):
        with pytest.raises(ValueError):
            hardcoded_team_spawn(None, TeamId.RED)
        with pytest.raises(ValueError):
            hardcoded_team_spawn(FakeWorld(), None)
        with pytest.raises(ValueError):
            hardcoded_team_spawn(FakeWorld(), "green")
