#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
布局索引模块

功能：
- 展平 zone → aisle → bay 层级，提供按楼层/ID 的查询
- 计算每个货架单元（shelf slot）的矩形占位与封闭面
- 旧版 departments 布局迁移为 zone/aisle/bay 结构
"""

import copy
import math
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from loguru import logger

from store_nav.common.constants import DEFAULT_CLOSED_FACES, SHELF_DEPTH_INSET
from store_nav.layout.models import Aisle, Bay, Product, Shelf, StoreLayout, Zone


@dataclass(frozen=True)
class ShelfSlot:
    """货架单元的世界坐标占位"""
    bay: Bay
    index: int
    shelf: Shelf
    left_x: float
    right_x: float
    back_z: float
    front_z: float
    unit_width: float
    shelf_depth: float
    closed_faces: FrozenSet[str]

    @property
    def center_x(self) -> float:
        return (self.left_x + self.right_x) / 2.0

    @property
    def center_z(self) -> float:
        return (self.back_z + self.front_z) / 2.0

    @property
    def is_wide(self) -> bool:
        """宽货架（宽度大于进深）"""
        return self.unit_width > self.shelf_depth

    def is_open(self, face: str) -> bool:
        return face not in self.closed_faces

    def contains(self, x: float, z: float) -> bool:
        """点是否落在货架的严格矩形内"""
        return self.left_x <= x <= self.right_x and self.back_z <= z <= self.front_z


def _spacing_gaps(bay: Bay, num_shelves: int) -> List[float]:
    """把统一间距或间距列表展开为 n-1 个非负间距"""
    if num_shelves <= 1 or bay.shelf_spacing is None:
        return [0.0] * max(0, num_shelves - 1)
    if isinstance(bay.shelf_spacing, list):
        gaps = [max(0.0, float(g)) for g in bay.shelf_spacing[:num_shelves - 1]]
        gaps += [0.0] * (num_shelves - 1 - len(gaps))
        return gaps
    return [max(0.0, float(bay.shelf_spacing))] * (num_shelves - 1)


def compute_shelf_slots(bay: Bay, depth_inset: float = SHELF_DEPTH_INSET) -> List[ShelfSlot]:
    """
    计算货位中每个货架单元的占位矩形

    单元宽度 = (货位宽度 - 总间距) / 货架数；货架进深 = 货位进深 - depth_inset，
    在 z 方向居中于货位。负的宽度/进深按 0 处理。

    Args:
        bay: 货位
        depth_inset: 货架进深内缩

    Returns:
        按货架顺序排列的 ShelfSlot 列表
    """
    width = max(0.0, bay.width)
    depth = max(0.0, bay.depth)
    if width != bay.width or depth != bay.depth:
        logger.debug(f"货位 {bay.id} 尺寸非法，已截断: width={bay.width}, depth={bay.depth}")

    num_shelves = len(bay.shelves)
    gaps = _spacing_gaps(bay, num_shelves)
    unit_width = max(0.0, (width - sum(gaps)) / num_shelves) if num_shelves > 0 else width

    center_z = bay.row + depth / 2.0
    shelf_depth = max(0.0, depth - depth_inset)
    back_z = center_z - shelf_depth / 2.0
    front_z = center_z + shelf_depth / 2.0

    slots: List[ShelfSlot] = []
    offset = 0.0
    for idx, shelf in enumerate(bay.shelves):
        left_x = bay.column + idx * unit_width + offset
        closed = frozenset(shelf.closed_sides) if shelf.closed_sides else DEFAULT_CLOSED_FACES
        slots.append(ShelfSlot(
            bay=bay,
            index=idx,
            shelf=shelf,
            left_x=left_x,
            right_x=left_x + unit_width,
            back_z=back_z,
            front_z=front_z,
            unit_width=unit_width,
            shelf_depth=shelf_depth,
            closed_faces=closed,
        ))
        if idx < len(gaps):
            offset += gaps[idx]
    return slots


def nearest_slot_by_x(slots: List[ShelfSlot], x: float) -> Optional[ShelfSlot]:
    """按 x 方向找中心最近的货架单元（距离相同取序号较大者）"""
    best: Optional[ShelfSlot] = None
    best_dist = float("inf")
    for slot in slots:
        d = abs(slot.center_x - x)
        if d <= best_dist:
            best_dist = d
            best = slot
    return best


# ------------------------------------------------------------------
# 层级展平 / 查询
# ------------------------------------------------------------------
def get_all_bays(layout: StoreLayout) -> List[Bay]:
    """展平所有区域/通道下的货位（保持文档顺序）"""
    return [bay for zone in layout.zones for aisle in zone.aisles for bay in aisle.bays]


def get_bays_on_floor(layout: StoreLayout, floor: int) -> List[Bay]:
    return [bay for bay in get_all_bays(layout) if bay.floor == floor]


def get_all_floors(layout: StoreLayout) -> List[int]:
    return sorted({bay.floor for bay in get_all_bays(layout)})


def find_location_for_bay(layout: StoreLayout, bay_id: str) -> Optional[Tuple[Zone, Aisle, Bay]]:
    """查找货位所在的 (zone, aisle, bay)"""
    for zone in layout.zones:
        for aisle in zone.aisles:
            for bay in aisle.bays:
                if bay.id == bay_id:
                    return zone, aisle, bay
    return None


def find_bay_by_id(layout: StoreLayout, bay_id: str) -> Optional[Bay]:
    location = find_location_for_bay(layout, bay_id)
    return location[2] if location else None


def get_aisle_id_for_bay(layout: StoreLayout, bay_id: str) -> Optional[str]:
    location = find_location_for_bay(layout, bay_id)
    return location[1].id if location else None


def get_bays_for_aisle(layout: StoreLayout, aisle_id: str) -> List[Bay]:
    for zone in layout.zones:
        for aisle in zone.aisles:
            if aisle.id == aisle_id:
                return list(aisle.bays)
    return []


def get_aisle_bounds(layout: StoreLayout, aisle_id: str) -> Optional[Dict[str, float]]:
    """通道内所有货位的包围盒 {min_x, max_x, min_z, max_z, floor}"""
    bays = get_bays_for_aisle(layout, aisle_id)
    if not bays:
        return None
    return {
        "min_x": min(b.column for b in bays),
        "max_x": max(b.column + b.width for b in bays),
        "min_z": min(b.row for b in bays),
        "max_z": max(b.row + b.depth for b in bays),
        "floor": bays[0].floor,
    }


def get_product_location(
    layout: StoreLayout, product: Product
) -> Optional[Tuple[Zone, Aisle, Bay, Optional[Shelf]]]:
    """商品的完整位置层级 (zone, aisle, bay, shelf)；货架找不到时 shelf 为 None"""
    bay_id = product.location_bay_id
    if not bay_id:
        return None
    location = find_location_for_bay(layout, bay_id)
    if location is None:
        return None
    zone, aisle, bay = location
    shelf = None
    if product.shelf_id:
        shelf = next((s for s in bay.shelves if s.id == product.shelf_id), None)
    return zone, aisle, bay, shelf


def find_product(layout: StoreLayout, product_id: str) -> Optional[Product]:
    return next((p for p in layout.products if p.id == product_id), None)


# ------------------------------------------------------------------
# 旧版布局迁移
# ------------------------------------------------------------------
_DEPARTMENTS_PER_AISLE = 3


def migrate_store_config(raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    把旧版 departments 平铺布局迁移为 zone/aisle/bay 结构

    - 已有 zones：原样返回（深拷贝）
    - 有 departments：每层一个 zone（Z1, Z2, ...），每 3 个 department 组成一个 aisle
    - 都没有：返回空 zones

    Args:
        raw: JSON 解析后的布局字典

    Returns:
        新的布局字典（不修改输入）
    """
    config = copy.deepcopy(raw)
    if isinstance(config.get("zones"), list):
        return config

    departments = config.pop("departments", None)
    if not isinstance(departments, list):
        config["zones"] = []
        return config

    floors = sorted({d.get("floor", 0) for d in departments})
    zones = []
    for floor_idx, floor in enumerate(floors):
        zone_id = f"Z{floor_idx + 1}"
        floor_depts = [d for d in departments if d.get("floor", 0) == floor]
        aisles = []
        for i in range(0, len(floor_depts), _DEPARTMENTS_PER_AISLE):
            aisle_no = i // _DEPARTMENTS_PER_AISLE + 1
            aisles.append({
                "id": f"{zone_id}-A{aisle_no}",
                "name": f"Aisle {aisle_no}",
                "bays": floor_depts[i:i + _DEPARTMENTS_PER_AISLE],
            })
        zones.append({
            "id": zone_id,
            "name": "Grocery Zone" if floor == 0 else "Electronics & Home Zone",
            "aisles": aisles,
        })

    logger.info(f"旧版布局已迁移: departments={len(departments)}, zones={len(zones)}")
    config["zones"] = zones
    return config


class LayoutIndex:
    """
    单次查询用的布局索引

    按楼层缓存货位列表，按货位缓存货架单元占位。
    每次寻路请求新建一个实例，不跨请求共享。
    """

    def __init__(self, layout: StoreLayout, depth_inset: float = SHELF_DEPTH_INSET):
        self.layout_ = layout
        self.depth_inset_ = depth_inset
        self.floors_: Dict[int, List[Bay]] = {}
        for bay in get_all_bays(layout):
            self.floors_.setdefault(bay.floor, []).append(bay)
        self.slots_: Dict[int, List[ShelfSlot]] = {}

    @property
    def grid_extent(self) -> Tuple[int, int]:
        """栅格尺寸 (width, depth)，向上取整"""
        return (
            max(0, math.ceil(self.layout_.grid_size.width)),
            max(0, math.ceil(self.layout_.grid_size.depth)),
        )

    def floor_bays(self, floor: int) -> List[Bay]:
        return self.floors_.get(floor, [])

    def slots(self, bay: Bay) -> List[ShelfSlot]:
        key = id(bay)
        if key not in self.slots_:
            self.slots_[key] = compute_shelf_slots(bay, self.depth_inset_)
        return self.slots_[key]

    def find_slot(self, bay_id: str, shelf_id: Optional[str] = None) -> Optional[ShelfSlot]:
        """按货位/货架 ID 查找货架单元；shelf_id 为空或找不到时返回 None"""
        bay = find_bay_by_id(self.layout_, bay_id)
        if bay is None or shelf_id is None:
            return None
        return next((s for s in self.slots(bay) if s.shelf.id == shelf_id), None)
