#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
栅格 ASCII 可视化（调试用）

'#' = 障碍, '+' = 加代价区域, '.' = 空地, '*' = 路径, 'S' = 起点, 'G' = 终点
"""

import math
from typing import Optional, Sequence

import numpy as np

from store_nav.core.collision import segment_samples
from store_nav.core.map_model import FloorGrid, WorldPoint


def _mark(vis: np.ndarray, point: WorldPoint, ch: str) -> None:
    x, z = math.floor(point[0]), math.floor(point[1])
    if 0 <= z < vis.shape[0] and 0 <= x < vis.shape[1]:
        vis[z, x] = ch


def render_ascii(
    grid: FloorGrid,
    path: Sequence[WorldPoint] = (),
    start: Optional[WorldPoint] = None,
    goal: Optional[WorldPoint] = None,
) -> str:
    """
    把栅格和路径画成字符图，每行对应一个 z

    Args:
        grid: 楼层栅格
        path: 路径点（世界坐标），线段按 0.5 步长采样后标记
        start: 起点，默认取路径第一个点
        goal: 终点，默认取路径最后一个点

    Returns:
        多行字符串
    """
    vis = np.full((grid.depth, grid.width), '.', dtype='<U1')
    vis[grid.cost > 1.0] = '+'
    vis[~grid.walkable] = '#'

    if path:
        _mark(vis, path[0], '*')
        for a, b in zip(path, path[1:]):
            for p in segment_samples(a, b, 0.5):
                _mark(vis, p, '*')
        start = start if start is not None else path[0]
        goal = goal if goal is not None else path[-1]

    if start is not None:
        _mark(vis, start, 'S')
    if goal is not None:
        _mark(vis, goal, 'G')

    return "\n".join("".join(row) for row in vis)
