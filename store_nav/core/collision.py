#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
碰撞检测工具

在可通行栅格上做带安全半径的点/线段检测和射线测距，供路径后处理使用。
"""

import math
from typing import List

from store_nav.core.map_model import FloorGrid, WorldPoint


def is_cell_clear(grid: FloorGrid, cx: int, cz: int, clearance: int = 1) -> bool:
    """以 (cx, cz) 为中心 (2c+1)^2 范围内的格子全部在栅格内且可通行"""
    x0, x1 = cx - clearance, cx + clearance + 1
    z0, z1 = cz - clearance, cz + clearance + 1
    if x0 < 0 or z0 < 0 or x1 > grid.width or z1 > grid.depth:
        return False
    return bool(grid.walkable[z0:z1, x0:x1].all())


def is_point_clear(grid: FloorGrid, point: WorldPoint, clearance: int = 1) -> bool:
    return is_cell_clear(grid, math.floor(point[0]), math.floor(point[1]), clearance)


def segment_samples(a: WorldPoint, b: WorldPoint, step: float = 0.25) -> List[WorldPoint]:
    """
    线段等距采样（不含起点，含终点）

    Args:
        a: 起点
        b: 终点
        step: 采样步长

    Returns:
        采样点列表，至少一个点
    """
    dx = b[0] - a[0]
    dz = b[1] - a[1]
    dist = math.hypot(dx, dz)
    steps = max(1, math.ceil(dist / step))
    return [(a[0] + dx * i / steps, a[1] + dz * i / steps) for i in range(1, steps + 1)]


def is_collision_free(
    grid: FloorGrid,
    a: WorldPoint,
    b: WorldPoint,
    clearance: int = 1,
    step: float = 0.25,
) -> bool:
    """线段上所有采样点都满足安全半径"""
    return all(is_point_clear(grid, p, clearance) for p in segment_samples(a, b, step))


def ray_distance_to_obstacle(
    grid: FloorGrid,
    origin: WorldPoint,
    direction: WorldPoint,
    max_range: float = 6.0,
    step: float = 0.1,
) -> float:
    """
    沿方向发射射线，返回到障碍的距离

    - 碰到阻挡格：后退一步（不小于 0）
    - 走出栅格：返回当前距离
    - 都没有：返回 max_range
    """
    length = math.hypot(direction[0], direction[1]) or 1.0
    ux, uz = direction[0] / length, direction[1] / length
    dist = 0.0
    while dist <= max_range:
        px = origin[0] + ux * dist
        pz = origin[1] + uz * dist
        if px < 0 or pz < 0 or px >= grid.width or pz >= grid.depth:
            return dist
        if not grid.walkable[math.floor(pz), math.floor(px)]:
            return max(0.0, dist - step)
        dist += step
    return max_range
