#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
寻路核心：栅格化、终点解析、A*、路径后处理
"""

from .map_model import (
    PathNode,
    TargetRef,
    FloorGrid,
    GoalResolution,
    FloorPlanResult,
    PlanResult,
)
from .grid_preprocess import rasterize, prepare_search_grid, find_target_slot, inflate_obstacles
from .goal_resolver import resolve_goal
from .planner_astar import astar_search, astar_search_with_stats, SearchStats
from .path_simplify import cells_to_points, simplify_collinear
from .path_smoothing import shortcut_path, smooth_path, center_in_aisles, post_process

__all__ = [
    'PathNode',
    'TargetRef',
    'FloorGrid',
    'GoalResolution',
    'FloorPlanResult',
    'PlanResult',
    'rasterize',
    'prepare_search_grid',
    'find_target_slot',
    'inflate_obstacles',
    'resolve_goal',
    'astar_search',
    'astar_search_with_stats',
    'SearchStats',
    'cells_to_points',
    'simplify_collinear',
    'shortcut_path',
    'smooth_path',
    'center_in_aisles',
    'post_process',
]
