"""
Tests for the store-nav command line entry.
"""

import json
import sys

import pytest
from loguru import logger

from store_nav.navigation_main import build_parser, main

from conftest import make_bay


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def layout_file(tmp_path):
    data = {
        "gridSize": {"width": 50, "depth": 60},
        "entrance": {"x": 25, "z": 58, "floor": 0},
        "elevators": [],
        "zones": [{"id": "Z1", "aisles": [{"id": "A1", "bays": [make_bay()]}]}],
        "products": [{"id": "p1", "name": "Milk", "bayId": "B1", "shelfId": "S1"}],
    }
    path = tmp_path / "store.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestParser:
    def test_target_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["store.json"])

    def test_product_and_to_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["store.json", "--product", "p1", "--to", "1", "2", "0"])


class TestMain:
    """命令行返回码与输出"""

    def test_product_route(self, layout_file, capsys):
        code = main([str(layout_file), "--product", "p1", "--log-level", "WARNING"])
        assert code == 0
        first_line = capsys.readouterr().out.splitlines()[0]
        path = json.loads(first_line)
        assert path[0] == {"x": 25, "z": 58, "floor": 0}
        assert path[-1]["z"] == pytest.approx(13.76)

    def test_coordinate_route_with_ascii(self, layout_file, capsys):
        code = main([str(layout_file), "--to", "13", "16", "0", "--from", "25", "50", "0", "--ascii"])
        assert code == 0
        out = capsys.readouterr().out
        assert "floor 0:" in out
        assert "S" in out and "G" in out and "#" in out

    def test_unknown_product(self, layout_file, capsys):
        assert main([str(layout_file), "--product", "missing"]) == 2
        assert capsys.readouterr().out == ""

    def test_missing_layout(self, tmp_path):
        assert main([str(tmp_path / "nope.json"), "--to", "1", "1", "0"]) == 2

    def test_missing_config(self, layout_file, tmp_path):
        code = main([str(layout_file), "--to", "1", "1", "0", "--config", str(tmp_path / "none.yaml")])
        assert code == 2

    def test_no_route(self, layout_file, capsys):
        # 跨层但没有电梯
        code = main([str(layout_file), "--to", "5", "5", "1"])
        assert code == 1
        assert json.loads(capsys.readouterr().out.splitlines()[0]) == []

    def test_ascii_uses_search_grid(self, layout_file, capsys):
        """起点在货位旁，地图画的是清理过起点邻域的搜索栅格"""
        code = main([str(layout_file), "--to", "13", "16", "0", "--from", "9.5", "12.5", "0", "--ascii"])
        assert code == 0
        rows = capsys.readouterr().out.splitlines()
        grid_rows = rows[rows.index("floor 0:") + 1:]
        assert grid_rows[12][9] == "S"
        assert grid_rows[12][11] != "#"
