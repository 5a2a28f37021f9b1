#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
终点解析模块

给定目标货架单元和期望终点，选出可到达的开放货架面，计算：
- A* 使用的终点格（沿面法线向外找到的第一个可通行格）
- 路径最终落点（恰好在货架面外 epsilon 处）
"""

import math
from typing import Dict, List, Optional, Tuple

from loguru import logger

from store_nav.common.constants import (
    FACE_BACK,
    FACE_DISTANCE_TOLERANCE,
    FACE_FRONT,
    FACE_LEFT,
    FACE_ORDER,
    FACE_RIGHT,
)
from store_nav.config.models import GoalConfig
from store_nav.core.map_model import FloorGrid, GoalResolution, WorldPoint
from store_nav.layout.layout_index import ShelfSlot

# 各面外法线
FACE_NORMALS: Dict[str, Tuple[float, float]] = {
    FACE_FRONT: (0.0, 1.0),
    FACE_BACK: (0.0, -1.0),
    FACE_RIGHT: (1.0, 0.0),
    FACE_LEFT: (-1.0, 0.0),
}

# 没有面落在通道内时的回退顺序
WIDE_FALLBACK_ORDER = (FACE_FRONT, FACE_BACK, FACE_RIGHT, FACE_LEFT)
NARROW_FALLBACK_ORDER = (FACE_RIGHT, FACE_LEFT, FACE_FRONT, FACE_BACK)


def face_point(slot: ShelfSlot, face: str, offset: float) -> WorldPoint:
    """货架面中心沿外法线偏移 offset 后的点"""
    if face == FACE_FRONT:
        return (slot.center_x, slot.front_z + offset)
    if face == FACE_BACK:
        return (slot.center_x, slot.back_z - offset)
    if face == FACE_RIGHT:
        return (slot.right_x + offset, slot.center_z)
    if face == FACE_LEFT:
        return (slot.left_x - offset, slot.center_z)
    raise ValueError(f"未知的货架面: {face}")


def _inside_bay(slot: ShelfSlot, point: WorldPoint) -> bool:
    bay = slot.bay
    x, z = point
    return (bay.column <= x <= bay.column + bay.width
            and bay.row <= z <= bay.row + bay.depth)


def choose_face(slot: ShelfSlot, desired: WorldPoint, offset: float) -> str:
    """
    选择接近货架的面

    优先选开放且接近点落在货位外（通道内）的面，多个时取离期望点最近的
    （距离相同取枚举顺序靠前的）；否则按宽/窄货架的固定顺序回退。

    Args:
        slot: 目标货架单元
        desired: 期望终点
        offset: 接近点外移距离

    Returns:
        面名称
    """
    chosen: Optional[str] = None
    best_dist = float("inf")
    for face in FACE_ORDER:
        if not slot.is_open(face):
            continue
        point = face_point(slot, face, offset)
        if _inside_bay(slot, point):
            continue
        d = math.hypot(desired[0] - point[0], desired[1] - point[1])
        if d < best_dist - FACE_DISTANCE_TOLERANCE:
            best_dist = d
            chosen = face
    if chosen is not None:
        return chosen

    order = WIDE_FALLBACK_ORDER if slot.is_wide else NARROW_FALLBACK_ORDER
    for face in order:
        if slot.is_open(face):
            return face
    return FACE_FRONT


def _clamp_point(grid: FloorGrid, point: WorldPoint) -> WorldPoint:
    x = max(0.0, min(point[0], grid.width - 1))
    z = max(0.0, min(point[1], grid.depth - 1))
    return (x, z)


def march_to_walkable(
    grid: FloorGrid,
    origin: WorldPoint,
    normal: Tuple[float, float],
    step: float,
    max_steps: int,
) -> Tuple[WorldPoint, bool]:
    """
    从 origin 沿 normal 逐步外移，找第一个落在可通行格内的采样点

    Returns:
        (采样点, 是否找到)；没找到时返回最后一个采样点
    """
    samples: List[WorldPoint] = [
        (origin[0] + normal[0] * s * step, origin[1] + normal[1] * s * step)
        for s in range(max_steps + 1)
    ]
    for p in samples:
        if grid.is_walkable(math.floor(p[0]), math.floor(p[1])):
            return p, True
    return samples[-1], False


def resolve_goal(
    slot: Optional[ShelfSlot],
    desired: WorldPoint,
    grid: FloorGrid,
    config: Optional[GoalConfig] = None,
    clearance: int = 1,
) -> GoalResolution:
    """
    解析终点

    Args:
        slot: 目标货架单元，None 表示直接走到期望点
        desired: 期望终点（世界坐标）
        grid: 栅格化后的楼层
        config: 终点解析配置
        clearance: 障碍膨胀半径（格），接近点外移 clearance + approach_epsilon

    Returns:
        GoalResolution
    """
    cfg = config or GoalConfig()

    if slot is None:
        point = _clamp_point(grid, desired)
        return GoalResolution(
            goal_cell=grid.clamp_cell(*point),
            goal_point=point,
            render_end=point,
        )

    offset = clearance + cfg.approach_epsilon
    face = choose_face(slot, desired, offset)
    approach = face_point(slot, face, offset)
    render_end = _clamp_point(grid, face_point(slot, face, cfg.face_epsilon))

    goal_point, found = march_to_walkable(
        grid, approach, FACE_NORMALS[face], cfg.march_step, cfg.march_max_steps
    )
    if not found:
        logger.warning(f"终点附近未找到可通行格，使用最后采样点: shelf={slot.shelf.id}, "
                       f"face={face}, point=({goal_point[0]:.2f}, {goal_point[1]:.2f})")
    goal_point = _clamp_point(grid, goal_point)

    logger.debug(f"终点解析: shelf={slot.shelf.id}, face={face}, "
                 f"goal=({goal_point[0]:.2f}, {goal_point[1]:.2f}), "
                 f"render_end=({render_end[0]:.2f}, {render_end[1]:.2f})")
    return GoalResolution(
        goal_cell=grid.clamp_cell(*goal_point),
        goal_point=goal_point,
        render_end=render_end,
        face=face,
        degraded=not found,
    )
