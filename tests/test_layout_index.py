"""
Tests for layout flattening, shelf slot geometry and legacy migration.
"""

import pytest

from store_nav.layout import (
    LayoutIndex,
    compute_shelf_slots,
    find_location_for_bay,
    get_all_bays,
    get_all_floors,
    get_bays_on_floor,
    get_product_location,
    migrate_store_config,
    parse_layout,
)
from store_nav.layout.layout_index import get_aisle_bounds, get_aisle_id_for_bay, nearest_slot_by_x
from store_nav.layout.models import Bay

from conftest import make_bay, make_layout


def _bay(**kwargs) -> Bay:
    return Bay.model_validate(make_bay(**kwargs))


class TestComputeShelfSlots:
    """货架单元几何"""

    def test_single_shelf_geometry(self):
        """单个货架占满货位宽度，进深内缩 0.5 并居中"""
        slot = compute_shelf_slots(_bay())[0]
        assert slot.left_x == pytest.approx(10.0)
        assert slot.right_x == pytest.approx(16.0)
        assert slot.center_x == pytest.approx(13.0)
        assert slot.center_z == pytest.approx(12.0)
        assert slot.back_z == pytest.approx(10.25)
        assert slot.front_z == pytest.approx(13.75)
        assert slot.shelf_depth == pytest.approx(3.5)

    def test_uniform_spacing(self):
        """统一间距：单元宽度 = (宽度 - 总间距) / 数量"""
        bay = _bay(shelves=[{"id": "S1"}, {"id": "S2"}], shelfSpacing=1)
        s0, s1 = compute_shelf_slots(bay)
        assert s0.unit_width == pytest.approx(2.5)
        assert (s0.left_x, s0.right_x) == (pytest.approx(10.0), pytest.approx(12.5))
        assert (s1.left_x, s1.right_x) == (pytest.approx(13.5), pytest.approx(16.0))

    def test_non_uniform_spacing(self):
        """间距列表按顺序累加"""
        bay = _bay(width=9, shelves=[{"id": "S1"}, {"id": "S2"}, {"id": "S3"}], shelf_spacing=[1, 2])
        slots = compute_shelf_slots(bay)
        assert [s.left_x for s in slots] == [pytest.approx(10.0), pytest.approx(13.0), pytest.approx(17.0)]
        assert [s.right_x for s in slots] == [pytest.approx(12.0), pytest.approx(15.0), pytest.approx(19.0)]

    def test_negative_extent_is_clamped(self):
        """负的宽度/进深按 0 处理"""
        slot = compute_shelf_slots(_bay(width=-3, depth=-1))[0]
        assert slot.unit_width == 0.0
        assert slot.shelf_depth == 0.0

    def test_closed_faces_default_to_back(self):
        """未声明或空的封闭面集合视为背面封闭"""
        bay = _bay(shelves=[{"id": "S1"}, {"id": "S2", "closedSides": []}, {"id": "S3", "closedSides": ["front"]}])
        s1, s2, s3 = compute_shelf_slots(bay)
        assert s1.closed_faces == frozenset({"back"})
        assert s2.closed_faces == frozenset({"back"})
        assert s3.closed_faces == frozenset({"front"})
        assert s3.is_open("back")

    def test_nearest_slot_tie_prefers_higher_index(self):
        """x 方向距离相同时取序号大的货架"""
        bay = _bay(shelves=[{"id": "S1"}, {"id": "S2"}])
        slots = compute_shelf_slots(bay)
        assert nearest_slot_by_x(slots, 13.0).index == 1
        assert nearest_slot_by_x(slots, 11.0).index == 0
        assert nearest_slot_by_x([], 11.0) is None


class TestLayoutQueries:
    """层级展平与查询"""

    def test_flatten_and_floors(self):
        layout = make_layout([make_bay("B1"), make_bay("B2", column=30, floor=1)])
        assert [b.id for b in get_all_bays(layout)] == ["B1", "B2"]
        assert [b.id for b in get_bays_on_floor(layout, 1)] == ["B2"]
        assert get_all_floors(layout) == [0, 1]

    def test_find_location_and_aisle(self):
        layout = make_layout([make_bay("B1"), make_bay("B2", column=20)])
        zone, aisle, bay = find_location_for_bay(layout, "B2")
        assert (zone.id, aisle.id, bay.id) == ("Z1", "Z1-A1", "B2")
        assert get_aisle_id_for_bay(layout, "B2") == "Z1-A1"
        assert find_location_for_bay(layout, "missing") is None

    def test_aisle_bounds(self):
        layout = make_layout([make_bay("B1"), make_bay("B2", column=20, row=12, depth=5)])
        bounds = get_aisle_bounds(layout, "Z1-A1")
        assert bounds == {"min_x": 10, "max_x": 26, "min_z": 10, "max_z": 17, "floor": 0}
        assert get_aisle_bounds(layout, "nope") is None

    def test_product_location(self):
        layout = make_layout(
            [make_bay("B1", shelves=[{"id": "S1"}, {"id": "S2"}])],
            products=[{"id": "p1", "bayId": "B1", "shelfId": "S2"}, {"id": "p2", "departmentId": "B1"}],
        )
        _, _, bay, shelf = get_product_location(layout, layout.products[0])
        assert bay.id == "B1" and shelf.id == "S2"
        _, _, bay, shelf = get_product_location(layout, layout.products[1])
        assert bay.id == "B1" and shelf is None

    def test_layout_index_caches_slots(self, single_bay_layout):
        index = LayoutIndex(single_bay_layout)
        bay = index.floor_bays(0)[0]
        assert index.slots(bay) is index.slots(bay)
        assert index.grid_extent == (50, 60)
        assert index.find_slot("B1", "S1").index == 0
        assert index.find_slot("B1", "nope") is None
        assert index.floor_bays(3) == []


class TestMigrateStoreConfig:
    """旧版 departments 布局迁移"""

    def _departments(self):
        return [make_bay(f"D{i}", column=5 * i) for i in range(4)] + [make_bay("D9", floor=1)]

    def test_departments_grouped_by_floor_and_aisle(self):
        raw = {"gridSize": {"width": 40, "depth": 40}, "departments": self._departments()}
        migrated = migrate_store_config(raw)
        zones = migrated["zones"]
        assert [z["id"] for z in zones] == ["Z1", "Z2"]
        assert [a["id"] for a in zones[0]["aisles"]] == ["Z1-A1", "Z1-A2"]
        assert [len(a["bays"]) for a in zones[0]["aisles"]] == [3, 1]
        assert zones[0]["name"] == "Grocery Zone"
        assert zones[1]["name"] == "Electronics & Home Zone"
        assert "departments" not in migrated
        # 输入不被修改
        assert "departments" in raw

    def test_existing_zones_unchanged(self):
        raw = {"zones": [{"id": "Z1", "aisles": []}]}
        assert migrate_store_config(raw) == raw

    def test_neither_gives_empty_zones(self):
        assert migrate_store_config({"gridSize": {"width": 1, "depth": 1}})["zones"] == []

    def test_legacy_layout_parses(self):
        layout = parse_layout({"gridSize": {"width": 40, "depth": 40}, "departments": self._departments()})
        assert len(get_all_bays(layout)) == 5
        assert get_all_floors(layout) == [0, 1]
