"""
Tests for collision helpers and the path post-processing filters.
"""

import math

import numpy as np
import pytest

from store_nav.core.collision import (
    is_cell_clear,
    is_collision_free,
    is_point_clear,
    ray_distance_to_obstacle,
    segment_samples,
)
from store_nav.core.map_model import FloorGrid
from store_nav.core.path_simplify import cells_to_points, simplify_collinear
from store_nav.core.path_smoothing import center_in_aisles, post_process, shortcut_path, smooth_path


def _grid(width, depth, walkable=None):
    if walkable is None:
        walkable = np.ones((depth, width), dtype=bool)
    return FloorGrid(walkable=walkable, cost=np.ones((depth, width), dtype=np.float32))


def _corridor():
    """20x10，只有 z∈[2,7] 可通行"""
    walkable = np.zeros((10, 20), dtype=bool)
    walkable[2:8, :] = True
    return _grid(20, 10, walkable)


class TestCollision:
    """碰撞检测"""

    def test_cell_clear_needs_neighbourhood_in_grid(self):
        grid = _grid(10, 10)
        assert is_cell_clear(grid, 5, 5, 1)
        assert not is_cell_clear(grid, 0, 5, 1)
        assert is_cell_clear(grid, 0, 5, 0)
        assert is_point_clear(grid, (5.9, 5.1), 4)
        assert not is_point_clear(grid, (5.9, 5.1), 5)

    def test_segment_samples_exclude_start(self):
        samples = segment_samples((0.0, 0.0), (1.0, 0.0), 0.25)
        assert len(samples) == 4
        assert samples[0] == (0.25, 0.0)
        assert samples[-1] == (1.0, 0.0)
        assert segment_samples((1.0, 1.0), (1.0, 1.0), 0.25) == [(1.0, 1.0)]

    def test_collision_free(self):
        walkable = np.ones((10, 10), dtype=bool)
        walkable[5, 5] = False
        grid = _grid(10, 10, walkable)
        assert not is_collision_free(grid, (1.5, 5.5), (8.5, 5.5), 0)
        assert is_collision_free(grid, (1.5, 2.5), (8.5, 2.5), 1)

    def test_ray_distance(self):
        grid = _corridor()
        assert ray_distance_to_obstacle(grid, (10.0, 4.0), (0.0, -1.0)) == pytest.approx(2.0, abs=0.11)
        assert ray_distance_to_obstacle(grid, (10.0, 4.0), (0.0, 1.0)) == pytest.approx(4.0, abs=0.11)
        # 走出栅格时返回当前距离
        assert ray_distance_to_obstacle(grid, (18.0, 4.0), (1.0, 0.0)) == pytest.approx(2.0, abs=0.11)
        # 量程内无障碍
        assert ray_distance_to_obstacle(grid, (2.0, 4.0), (1.0, 0.0), max_range=3.0) == 3.0


class TestSimplify:
    """共线点简化"""

    def test_cells_to_points_snaps_ends(self):
        points = cells_to_points([(1, 1), (2, 2), (3, 2)], (1.2, 1.3), (3.9, 2.01))
        assert points == [(1.2, 1.3), (2.5, 2.5), (3.9, 2.01)]
        assert cells_to_points([], (0.0, 0.0), (1.0, 1.0)) == []
        assert cells_to_points([(4, 4)], (4.2, 4.2), (4.6, 4.9)) == [(4.2, 4.2), (4.6, 4.9)]

    def test_straight_line(self):
        path = [(0.0, 0.0), (1.0, 0.0), (2.0, 0.0), (3.0, 0.0)]
        assert simplify_collinear(path) == [(0.0, 0.0), (3.0, 0.0)]

    def test_keeps_corners(self):
        path = [(0.0, 0.0), (1.0, 0.0), (2.0, 0.0), (2.0, 1.0), (2.0, 2.0)]
        assert simplify_collinear(path) == [(0.0, 0.0), (2.0, 0.0), (2.0, 2.0)]

    def test_drops_tiny_segments(self):
        path = [(0.0, 0.0), (0.05, 0.0), (0.05, 3.0)]
        assert simplify_collinear(path) == [(0.0, 0.0), (0.05, 3.0)]

    def test_short_paths_unchanged(self):
        assert simplify_collinear([(0.0, 0.0), (1.0, 1.0)]) == [(0.0, 0.0), (1.0, 1.0)]


class TestShortcut:
    """视线捷径"""

    def test_open_grid_goes_direct(self):
        path = [(1.5, 1.5), (5.5, 1.5), (5.5, 5.5)]
        assert shortcut_path(path, _grid(10, 10)) == [(1.5, 1.5), (5.5, 5.5)]

    def test_keeps_detour_around_wall(self):
        walkable = np.ones((10, 10), dtype=bool)
        walkable[0:7, 4:6] = False
        grid = _grid(10, 10, walkable)
        path = [(1.5, 1.5), (1.5, 8.5), (8.5, 8.5), (8.5, 1.5)]
        result = shortcut_path(path, grid)
        assert result == path
        for a, b in zip(result, result[1:]):
            assert is_collision_free(grid, a, b, 1)


class TestSmoothAndCenter:
    """平滑与居中"""

    def test_smooth_pulls_corner_inward(self):
        path = [(2.5, 2.5), (7.5, 2.5), (7.5, 7.5)]
        smoothed = smooth_path(path, _grid(10, 10))
        assert smoothed[0] == path[0] and smoothed[-1] == path[-1]
        assert len(smoothed) == 3
        before = math.hypot(7.5 - 5.0, 2.5 - 5.0)
        after = math.hypot(smoothed[1][0] - 5.0, smoothed[1][1] - 5.0)
        assert after < before
        # 输入不变
        assert path[1] == (7.5, 2.5)

    def test_smooth_rejects_colliding_moves(self):
        walkable = np.ones((10, 10), dtype=bool)
        walkable[4:6, 4:6] = False
        path = [(2.5, 2.5), (7.5, 2.5), (7.5, 7.5)]
        smoothed = smooth_path(path, _grid(10, 10, walkable))
        assert smoothed == path

    def test_center_moves_point_to_corridor_middle(self):
        path = [(2.5, 5.0), (10.0, 4.0), (17.5, 5.0)]
        centered = center_in_aisles(path, _corridor())
        assert centered[1][0] == pytest.approx(10.0)
        assert centered[1][1] == pytest.approx(5.0, abs=0.15)
        assert centered[0] == path[0] and centered[2] == path[2]

    def test_center_skips_degenerate_direction(self):
        path = [(5.0, 5.0), (6.0, 4.0), (5.0, 5.0)]
        assert center_in_aisles(path, _corridor()) == path


class TestPostProcess:
    """后处理流水线"""

    def test_idempotent(self):
        walkable = np.ones((20, 20), dtype=bool)
        walkable[5:15, 8:12] = False
        grid = _grid(20, 20, walkable)
        cells = [(2, 2)] + [(2, z) for z in range(3, 17)] + [(x, 17) for x in range(3, 18)]
        points = cells_to_points(cells, (2.0, 2.0), (17.5, 17.5))

        once = post_process(points, grid)
        twice = post_process(once, grid)
        assert len(twice) <= len(once)
        assert twice[0] == once[0] == (2.0, 2.0)
        assert twice[-1] == once[-1] == (17.5, 17.5)
