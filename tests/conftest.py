"""
Shared fixtures: small store layouts built from plain dicts.
"""

import pytest

from store_nav.layout import parse_layout


def make_bay(bay_id="B1", column=10, row=10, width=6, depth=4, shelves=None, floor=0, **extra):
    if shelves is None:
        shelves = [{"id": "S1", "name": "Shelf 1"}]
    bay = {
        "id": bay_id,
        "name": bay_id,
        "floor": floor,
        "row": row,
        "column": column,
        "width": width,
        "depth": depth,
        "shelves": shelves,
    }
    bay.update(extra)
    return bay


def make_layout(bays=(), width=50, depth=60, elevators=(), products=(), entrance=None):
    data = {
        "gridSize": {"width": width, "depth": depth},
        "entrance": entrance or {"x": 25, "z": 58, "floor": 0},
        "elevators": list(elevators),
        "zones": [{
            "id": "Z1",
            "name": "Zone 1",
            "aisles": [{"id": "Z1-A1", "name": "Aisle 1", "bays": list(bays)}],
        }],
        "products": list(products),
    }
    return parse_layout(data)


@pytest.fixture
def single_bay_layout():
    """50x60 网格，一个货位 (10,10) 6x4，一个货架，默认背面封闭"""
    return make_layout([make_bay()])


@pytest.fixture
def empty_layout():
    """10x10 空网格"""
    return make_layout([], width=10, depth=10, entrance={"x": 1, "z": 1, "floor": 0})


@pytest.fixture
def two_floor_layout():
    """30x30 两层，两个电梯，没有货位"""
    return make_layout(
        [],
        width=30,
        depth=30,
        elevators=[{"x": 5, "z": 5}, {"x": 25, "z": 25}],
        entrance={"x": 3, "z": 3, "floor": 0},
    )
