#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
栅格预处理模块：货架栅格化、障碍膨胀和代价图构建

功能：
- 按货位逐个栅格化货架：阻挡货架本体 → 阻挡封闭面 → 打通四周通道 → 货位地面加代价
- 对障碍进行膨胀，为顾客预留安全距离
- 搜索前强制打通入口区域、重置终点附近代价

各步骤按顺序写同一张栅格，后写的覆盖先写的。
"""

import math
from typing import Optional, Tuple

import cv2
import numpy as np
from loguru import logger

from store_nav.common.constants import FACE_BACK, FACE_FRONT, FACE_LEFT, FACE_RIGHT
from store_nav.config.models import RasterConfig
from store_nav.core.map_model import FloorGrid, GridCoord, WorldPoint
from store_nav.layout.layout_index import LayoutIndex, ShelfSlot, nearest_slot_by_x
from store_nav.layout.models import Bay


def _span(lo: float, hi: float, limit: int) -> Optional[Tuple[int, int]]:
    """[floor(lo), floor(hi)] 截断到 [0, limit) 后的切片范围，空则返回 None"""
    a = max(0, math.floor(lo))
    b = min(limit - 1, math.floor(hi))
    if a > b:
        return None
    return a, b + 1


def _set_rect(
    grid: np.ndarray,
    x_lo: float, x_hi: float,
    z_lo: float, z_hi: float,
    value,
) -> None:
    """把 x∈[⌊x_lo⌋,⌊x_hi⌋]、z∈[⌊z_lo⌋,⌊z_hi⌋] 的格子写成 value（自动截断）"""
    depth, width = grid.shape
    xs = _span(x_lo, x_hi, width)
    zs = _span(z_lo, z_hi, depth)
    if xs is None or zs is None:
        return
    grid[zs[0]:zs[1], xs[0]:xs[1]] = value


def _block_shelf_body(
    walkable: np.ndarray,
    slot: ShelfSlot,
    buffer: float,
    endpoint_hint: Optional[WorldPoint],
    exempt_radius: float,
) -> None:
    """阻挡货架本体（含缓冲），终点附近且在货架严格矩形外的格子保持原状"""
    depth, width = walkable.shape
    xs = _span(slot.left_x - buffer, slot.right_x + buffer, width)
    zs = _span(slot.back_z - buffer, slot.front_z + buffer, depth)
    if xs is None or zs is None:
        return

    if endpoint_hint is None or exempt_radius <= 0:
        walkable[zs[0]:zs[1], xs[0]:xs[1]] = False
        return

    # 格子中心
    cx = np.arange(xs[0], xs[1], dtype=np.float64) + 0.5
    cz = np.arange(zs[0], zs[1], dtype=np.float64) + 0.5
    gx, gz = np.meshgrid(cx, cz)
    hx, hz = endpoint_hint
    near_hint = (gx - hx) ** 2 + (gz - hz) ** 2 <= exempt_radius ** 2
    outside_body = (gx < slot.left_x) | (gx > slot.right_x) | (gz < slot.back_z) | (gz > slot.front_z)
    exempt = near_hint & outside_body

    region = walkable[zs[0]:zs[1], xs[0]:xs[1]]
    region &= exempt


def _block_closed_faces(walkable: np.ndarray, slot: ShelfSlot, cfg: RasterConfig) -> None:
    """在封闭面外侧阻挡一条窄带"""
    d = cfg.closed_face_depth
    o = cfg.closed_face_overhang
    if FACE_FRONT in slot.closed_faces:
        _set_rect(walkable, slot.left_x - o, slot.right_x + o, slot.front_z, slot.front_z + d, False)
    if FACE_BACK in slot.closed_faces:
        _set_rect(walkable, slot.left_x - o, slot.right_x + o, slot.back_z - d, slot.back_z, False)
    if FACE_LEFT in slot.closed_faces:
        _set_rect(walkable, slot.left_x - d, slot.left_x, slot.back_z - o, slot.front_z + o, False)
    if FACE_RIGHT in slot.closed_faces:
        _set_rect(walkable, slot.right_x, slot.right_x + d, slot.back_z - o, slot.front_z + o, False)


def _open_aisles(walkable: np.ndarray, bay: Bay, margin: float) -> None:
    """强制打通货位前后左右的通道"""
    col, row = bay.column, bay.row
    right = bay.column + max(0.0, bay.width)
    front = bay.row + max(0.0, bay.depth)

    # 前/后通道
    _set_rect(walkable, col - margin, right + margin, front + 0.5, front + margin + 0.5, True)
    _set_rect(walkable, col - margin, right + margin, row - margin - 0.5, row - 0.5, True)
    # 左/右通道
    _set_rect(walkable, col - margin, col - 0.5, row - margin, front + margin, True)
    _set_rect(walkable, right + 0.5, right + margin, row - margin, front + margin, True)


def _penalize_bay_floor(walkable: np.ndarray, cost: np.ndarray, bay: Bay, penalty: float) -> None:
    """货位矩形内仍可通行的格子加代价，引导路径走通道"""
    depth, width = walkable.shape
    xs = _span(bay.column, bay.column + max(0.0, bay.width), width)
    zs = _span(bay.row, bay.row + max(0.0, bay.depth), depth)
    if xs is None or zs is None:
        return
    region_cost = cost[zs[0]:zs[1], xs[0]:xs[1]]
    region_cost[walkable[zs[0]:zs[1], xs[0]:xs[1]]] = penalty


def inflate_obstacles(walkable: np.ndarray, radius: int) -> np.ndarray:
    """
    障碍膨胀（方形核，一次膨胀，不级联）

    Args:
        walkable: (depth, width) bool，True=可通行
        radius: 膨胀半径（格）

    Returns:
        膨胀后的可通行图（新数组）
    """
    if radius <= 0 or walkable.size == 0:
        return walkable.copy()
    blocked = (~walkable).astype(np.uint8)
    k = 2 * radius + 1
    kernel = np.ones((k, k), np.uint8)
    inflated = cv2.dilate(blocked, kernel, iterations=1)
    logger.debug(f"障碍膨胀完成: 半径={radius}, 核大小={k}x{k}, "
                 f"阻挡格 {int(blocked.sum())} -> {int(inflated.sum())}")
    return inflated == 0


def rasterize(
    index: LayoutIndex,
    floor: int,
    endpoint_hint: Optional[WorldPoint] = None,
    target_slot: Optional[ShelfSlot] = None,
    config: Optional[RasterConfig] = None,
) -> FloorGrid:
    """
    把一层楼的货位栅格化为可通行图 + 代价图

    每次查询重新构建（封闭面豁免取决于本次目标货架）。

    Args:
        index: 布局索引
        floor: 楼层
        endpoint_hint: 终点提示（其附近的货架缓冲格保持可通行）
        target_slot: 目标货架单元（跳过其封闭面阻挡）
        config: 栅格化配置

    Returns:
        FloorGrid
    """
    cfg = config or RasterConfig()
    width, depth = index.grid_extent
    walkable = np.ones((depth, width), dtype=bool)
    cost = np.ones((depth, width), dtype=np.float32)

    bays = index.floor_bays(floor)
    for bay in bays:
        for slot in index.slots(bay):
            _block_shelf_body(walkable, slot, cfg.shelf_buffer, endpoint_hint, cfg.endpoint_exempt_radius)
            is_target = (
                target_slot is not None
                and target_slot.bay.id == bay.id
                and target_slot.index == slot.index
            )
            if not is_target:
                _block_closed_faces(walkable, slot, cfg)

        _open_aisles(walkable, bay, cfg.aisle_margin)
        _penalize_bay_floor(walkable, cost, bay, cfg.bay_floor_penalty)

    walkable = inflate_obstacles(walkable, cfg.clearance_cells)

    logger.debug(f"栅格化完成: floor={floor}, grid=({width}, {depth}), bays={len(bays)}, "
                 f"阻挡格={int((~walkable).sum())}")
    return FloorGrid(walkable=walkable, cost=cost)


def prepare_search_grid(
    grid: FloorGrid,
    start_cell: GridCoord,
    goal_cell: GridCoord,
    start_radius: int = 3,
    goal_radius: int = 1,
) -> FloorGrid:
    """
    搜索前修正栅格（返回新栅格，不修改输入）

    - 终点周围 (2*goal_radius+1)^2 代价重置为 1
    - 起点周围 (2*start_radius+1)^2 强制可通行且代价为 1
    - 终点格强制可通行
    """
    prepared = grid.copy()
    gx, gz = goal_cell
    sx, sz = start_cell

    _set_rect(prepared.cost, gx - goal_radius, gx + goal_radius, gz - goal_radius, gz + goal_radius, 1.0)
    _set_rect(prepared.walkable, sx - start_radius, sx + start_radius, sz - start_radius, sz + start_radius, True)
    _set_rect(prepared.cost, sx - start_radius, sx + start_radius, sz - start_radius, sz + start_radius, 1.0)
    if prepared.in_bounds(gx, gz):
        prepared.walkable[gz, gx] = True
        prepared.cost[gz, gx] = 1.0
    return prepared


def _distance_to_bay(bay: Bay, x: float, z: float) -> float:
    """点到货位矩形的距离（在矩形内为 0）"""
    right = bay.column + max(0.0, bay.width)
    front = bay.row + max(0.0, bay.depth)
    dx = max(bay.column - x, 0.0, x - right)
    dz = max(bay.row - z, 0.0, z - front)
    return math.hypot(dx, dz)


def find_target_slot(
    index: LayoutIndex,
    floor: int,
    endpoint: WorldPoint,
    max_distance: float = 3.0,
) -> Optional[ShelfSlot]:
    """
    根据终点推断目标货架单元

    取距离终点最近的货位（点到矩形距离，相同时取先出现的），
    超过 max_distance 视为没有目标；货位内按 x 方向取最近的货架单元。

    Args:
        index: 布局索引
        floor: 楼层
        endpoint: 终点世界坐标
        max_distance: 最大吸附距离

    Returns:
        ShelfSlot 或 None
    """
    ex, ez = endpoint
    best_bay: Optional[Bay] = None
    best_dist = float("inf")
    for bay in index.floor_bays(floor):
        d = _distance_to_bay(bay, ex, ez)
        if d < best_dist:
            best_dist = d
            best_bay = bay

    if best_bay is None or best_dist > max_distance:
        return None
    slot = nearest_slot_by_x(index.slots(best_bay), ex)
    if slot is not None:
        logger.debug(f"目标货架: bay={best_bay.id}, shelf={slot.shelf.id}, 距离={best_dist:.2f}")
    return slot
