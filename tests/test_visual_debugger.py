"""
Tests for the ASCII grid view.
"""

import numpy as np

from store_nav.core.map_model import FloorGrid
from store_nav.core.visual_debugger import render_ascii


def _grid():
    walkable = np.ones((3, 5), dtype=bool)
    walkable[1, 2] = False
    cost = np.ones((3, 5), dtype=np.float32)
    cost[0, 4] = 5.0
    return FloorGrid(walkable=walkable, cost=cost)


class TestRenderAscii:
    def test_grid_only(self):
        assert render_ascii(_grid()).splitlines() == [
            "....+",
            "..#..",
            ".....",
        ]

    def test_path_marks(self):
        lines = render_ascii(_grid(), [(0.5, 2.5), (4.5, 2.5)]).splitlines()
        assert lines[2] == "S***G"
        assert lines[1] == "..#.."

    def test_explicit_start_goal_out_of_grid_ignored(self):
        lines = render_ascii(_grid(), start=(0.2, 0.2), goal=(9, 9)).splitlines()
        assert lines[0] == "S...+"
        assert "G" not in "".join(lines)
