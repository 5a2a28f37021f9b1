#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
路径平滑模块：捷径、松弛平滑、通道居中

功能：
- 视线捷径：从每个保留点直接连到最远的无碰撞点
- 拉普拉斯松弛：中间点向相邻点中点靠拢
- 通道居中：沿路径法线两侧测距，把点移到通道中线附近

每个函数都返回新列表，不修改输入。
"""

import math
from typing import List, Optional, Sequence

from loguru import logger

from store_nav.config.models import PostProcessConfig
from store_nav.core.collision import is_collision_free, ray_distance_to_obstacle
from store_nav.core.map_model import FloorGrid, WorldPoint
from store_nav.core.path_simplify import simplify_collinear


def shortcut_path(
    path: Sequence[WorldPoint],
    grid: FloorGrid,
    clearance: int = 1,
    step: float = 0.25,
) -> List[WorldPoint]:
    """
    视线捷径

    从当前点向后找最远的、线段无碰撞的点，找不到就取下一个点。

    Args:
        path: 路径 [(x, z), ...]
        grid: 楼层栅格
        clearance: 安全半径（格）
        step: 线段采样步长

    Returns:
        捷径后的路径
    """
    if len(path) <= 2:
        return list(path)

    result = [path[0]]
    i = 0
    last = len(path) - 1
    while i < last:
        k = last
        while k > i + 1 and not is_collision_free(grid, path[i], path[k], clearance, step):
            k -= 1
        result.append(path[k])
        i = k
    return result


def smooth_path(
    path: Sequence[WorldPoint],
    grid: FloorGrid,
    iterations: int = 60,
    factor: float = 0.12,
    clearance: int = 2,
    step: float = 0.25,
) -> List[WorldPoint]:
    """
    拉普拉斯松弛平滑

    每轮依次把中间点向前后两点的中点移动 factor 比例，
    两侧线段都无碰撞才接受（同一轮内后面的点使用已更新的前点）。

    Args:
        path: 路径
        grid: 楼层栅格
        iterations: 迭代轮数
        factor: 阻尼系数
        clearance: 安全半径（格）
        step: 线段采样步长

    Returns:
        平滑后的路径
    """
    smoothed = list(path)
    if len(smoothed) <= 2:
        return smoothed

    for _ in range(iterations):
        for j in range(1, len(smoothed) - 1):
            prev = smoothed[j - 1]
            cur = smoothed[j]
            nxt = smoothed[j + 1]
            tx = (prev[0] + nxt[0]) / 2.0
            tz = (prev[1] + nxt[1]) / 2.0
            candidate = (cur[0] + (tx - cur[0]) * factor, cur[1] + (tz - cur[1]) * factor)
            if (is_collision_free(grid, prev, candidate, clearance, step)
                    and is_collision_free(grid, candidate, nxt, clearance, step)):
                smoothed[j] = candidate
    return smoothed


def center_in_aisles(
    path: Sequence[WorldPoint],
    grid: FloorGrid,
    max_range: float = 6.0,
    ray_step: float = 0.1,
    max_shift: float = 1.5,
    clearance: int = 2,
    step: float = 0.25,
) -> List[WorldPoint]:
    """
    通道居中

    对每个中间点，沿前后点连线的法线向两侧发射射线，
    向两侧距离的中点移动（单次不超过 max_shift）。
    新位置在栅格内且两侧线段无碰撞才接受。
    """
    centered = list(path)
    if len(centered) <= 2:
        return centered

    for i in range(1, len(centered) - 1):
        prev = centered[i - 1]
        cur = centered[i]
        nxt = centered[i + 1]
        vx = nxt[0] - prev[0]
        vz = nxt[1] - prev[1]
        vlen = math.hypot(vx, vz)
        if vlen < 1e-3:
            continue
        px, pz = -vz / vlen, vx / vlen

        left = ray_distance_to_obstacle(grid, cur, (-px, -pz), max_range, ray_step)
        right = ray_distance_to_obstacle(grid, cur, (px, pz), max_range, ray_step)
        offset = max(-max_shift, min(max_shift, (right - left) / 2.0))

        candidate = (cur[0] + px * offset, cur[1] + pz * offset)
        if not (0 <= candidate[0] < grid.width and 0 <= candidate[1] < grid.depth):
            continue
        if (is_collision_free(grid, prev, candidate, clearance, step)
                and is_collision_free(grid, candidate, nxt, clearance, step)):
            centered[i] = candidate
    return centered


def post_process(
    points: Sequence[WorldPoint],
    grid: FloorGrid,
    config: Optional[PostProcessConfig] = None,
) -> List[WorldPoint]:
    """
    路径后处理流水线：简化 → 捷径 → 平滑 → 居中 → 捷径

    Args:
        points: 格子中心路径（首尾已对齐）
        grid: 楼层栅格
        config: 后处理配置

    Returns:
        处理后的路径点
    """
    cfg = config or PostProcessConfig()
    simplified = simplify_collinear(points, cfg.collinear_threshold, cfg.min_segment_length)
    shortened = shortcut_path(simplified, grid, cfg.shortcut_clearance, cfg.sample_step)
    smoothed = smooth_path(shortened, grid, cfg.smooth_iterations, cfg.smooth_factor,
                           cfg.smooth_clearance, cfg.sample_step)
    centered = center_in_aisles(smoothed, grid, cfg.center_max_range, cfg.center_ray_step,
                                cfg.center_max_shift, cfg.center_clearance, cfg.sample_step)
    final = shortcut_path(centered, grid, cfg.shortcut_clearance, cfg.sample_step)
    logger.debug(f"路径后处理: {len(points)} -> 简化 {len(simplified)} -> 捷径 {len(shortened)} "
                 f"-> 最终 {len(final)}")
    return final
