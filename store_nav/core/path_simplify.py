#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
路径简化模块：去除A*路径中的多余点

功能：
- 栅格路径转世界坐标（首尾对齐到精确起点/终点）
- 方向一致性判断：去除近似共线的中间点
"""

import math
from typing import List, Sequence, Tuple

from store_nav.core.map_model import WorldPoint

Coord = Tuple[int, int]  # (x, z)


def cells_to_points(cells: Sequence[Coord], start: WorldPoint, end: WorldPoint) -> List[WorldPoint]:
    """
    栅格路径转为格子中心点，第一个点替换为 start，最后一个点替换为 end

    Args:
        cells: A* 输出的栅格路径
        start: 精确起点
        end: 渲染终点

    Returns:
        世界坐标路径；cells 为空时返回 []
    """
    if not cells:
        return []
    points = [(cx + 0.5, cz + 0.5) for cx, cz in cells]
    if len(points) == 1:
        return [start] if start == end else [start, end]
    points[0] = start
    points[-1] = end
    return points


def simplify_collinear(
    path: Sequence[WorldPoint],
    threshold: float = 0.95,
    min_len: float = 0.1,
) -> List[WorldPoint]:
    """
    基于方向一致性简化路径

    与上一个保留点比较：入向、出向线段都长于 min_len 且
    归一化点积 < threshold 时保留中间点，否则丢弃。

    Args:
        path: 路径 [(x, z), ...]
        threshold: 共线阈值
        min_len: 最短线段

    Returns:
        简化后的路径（首尾保留）
    """
    if len(path) <= 2:
        return list(path)

    simplified = [path[0]]
    for i in range(1, len(path) - 1):
        prev = simplified[-1]
        cur = path[i]
        nxt = path[i + 1]
        dx1, dz1 = cur[0] - prev[0], cur[1] - prev[1]
        dx2, dz2 = nxt[0] - cur[0], nxt[1] - cur[1]
        len1 = math.hypot(dx1, dz1)
        len2 = math.hypot(dx2, dz2)
        if len1 > min_len and len2 > min_len:
            dot = (dx1 * dx2 + dz1 * dz2) / (len1 * len2)
            if dot < threshold:
                simplified.append(cur)
    simplified.append(path[-1])
    return simplified
