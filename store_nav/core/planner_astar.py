#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
带代价图的A*路径规划器

功能：
- 基于可通行图 + 代价图的A*算法
- 支持8邻接移动，禁止斜向穿越障碍拐角
- 使用欧氏距离启发函数
- f 值相同时按首次入队顺序出队，保证路径可复现
"""

import heapq
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np
from loguru import logger

from store_nav.common.constants import DIRECTIONS_8WAY

Coord = Tuple[int, int]  # (x, z)


@dataclass
class SearchStats:
    """单次搜索统计"""
    nodes_expanded: int = 0
    path_length: int = 0
    cap_reached: bool = False


def astar_search_with_stats(
    walkable: np.ndarray,
    cost: np.ndarray,
    start: Coord,
    goal: Coord,
    max_expansions: Optional[int] = None,
) -> Tuple[List[Coord], SearchStats]:
    """
    在可通行图上做 A*

    Args:
        walkable: (depth, width) bool数组，True=可通行
        cost: (depth, width) 数组，进入该格的代价倍数
        start: 起点格 (x, z)
        goal: 终点格 (x, z)
        max_expansions: 最大展开节点数，超过视为无路径

    Returns:
        (path, stats)：path 为 [(x, z), ...]，从 start 到 goal，找不到则 []
    """
    depth, width = walkable.shape
    sx, sz = start
    gx, gz = goal
    stats = SearchStats()

    def in_bounds(x: int, z: int) -> bool:
        return 0 <= x < width and 0 <= z < depth

    def heuristic(x: int, z: int) -> float:
        # 欧氏距离
        return math.hypot(x - gx, z - gz)

    if not in_bounds(sx, sz) or not in_bounds(gx, gz):
        logger.warning(f"A*规划失败: 起点{start}或终点{goal}不在栅格内 ({width}x{depth})")
        return [], stats
    if start == goal:
        stats.path_length = 1
        return [start], stats

    g_score: Dict[Coord, float] = {start: 0.0}
    f_score: Dict[Coord, float] = {start: heuristic(sx, sz)}
    first_seq: Dict[Coord, int] = {start: 0}
    came_from: Dict[Coord, Coord] = {}
    closed = np.zeros((depth, width), dtype=bool)

    # (f, 首次入队序号, 节点)；g 改进时用原序号重新入队，旧条目出队时丢弃
    open_heap = [(f_score[start], 0, start)]
    seq = 1

    while open_heap:
        f, _, node = heapq.heappop(open_heap)
        x, z = node
        if closed[z, x] or f != f_score[node]:
            continue
        closed[z, x] = True
        stats.nodes_expanded += 1

        if node == goal:
            path: List[Coord] = [node]
            while node in came_from:
                node = came_from[node]
                path.append(node)
            path.reverse()
            stats.path_length = len(path)
            logger.debug(f"A*规划成功: 路径长度={len(path)}, 探索节点数={stats.nodes_expanded}")
            return path, stats

        if max_expansions is not None and stats.nodes_expanded >= max_expansions:
            stats.cap_reached = True
            logger.warning(f"A*规划中止: 展开节点数达到上限 {max_expansions}")
            return [], stats

        g_cur = g_score[node]
        for dx, dz in DIRECTIONS_8WAY:
            nx, nz = x + dx, z + dz
            if not in_bounds(nx, nz) or closed[nz, nx] or not walkable[nz, nx]:
                continue

            diagonal = dx != 0 and dz != 0
            if diagonal:
                # 两个正交相邻格都必须可通行，禁止切角
                if not (in_bounds(nx, z) and walkable[z, nx] and in_bounds(x, nz) and walkable[nz, x]):
                    continue

            step = math.sqrt(2.0) if diagonal else 1.0
            tentative_g = g_cur + step * float(cost[nz, nx])
            neighbor = (nx, nz)
            if neighbor in g_score and tentative_g >= g_score[neighbor]:
                continue

            g_score[neighbor] = tentative_g
            f_score[neighbor] = tentative_g + heuristic(nx, nz)
            came_from[neighbor] = node
            if neighbor not in first_seq:
                first_seq[neighbor] = seq
                seq += 1
            heapq.heappush(open_heap, (f_score[neighbor], first_seq[neighbor], neighbor))

    # 无路径
    logger.warning(f"A*规划失败: 无法找到从{start}到{goal}的路径, 探索节点数={stats.nodes_expanded}")
    return [], stats


def astar_search(
    walkable: np.ndarray,
    cost: np.ndarray,
    start: Coord,
    goal: Coord,
    max_expansions: Optional[int] = None,
) -> List[Coord]:
    """A* 搜索，只返回路径（空列表表示无路径）"""
    path, _ = astar_search_with_stats(walkable, cost, start, goal, max_expansions)
    return path
