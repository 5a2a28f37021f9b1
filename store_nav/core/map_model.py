#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
寻路数据模型

路径点、目标货架引用、楼层栅格以及单层/整体规划结果。
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

GridCoord = Tuple[int, int]      # (x, z) 栅格坐标
WorldPoint = Tuple[float, float]  # (x, z) 世界坐标


@dataclass(frozen=True)
class PathNode:
    """路径点（世界坐标 + 楼层）"""
    x: float
    z: float
    floor: int = 0

    def to_dict(self) -> dict:
        return {"x": self.x, "z": self.z, "floor": self.floor}


@dataclass(frozen=True)
class TargetRef:
    """目标货架引用：bay_id 必填，shelf_id 为空时按期望点选最近货架"""
    bay_id: str
    shelf_id: Optional[str] = None


@dataclass
class FloorGrid:
    walkable: np.ndarray   # (depth, width) bool，True=可通行
    cost: np.ndarray       # (depth, width) float32，默认 1

    @property
    def width(self) -> int:
        return int(self.walkable.shape[1])

    @property
    def depth(self) -> int:
        return int(self.walkable.shape[0])

    def in_bounds(self, x: int, z: int) -> bool:
        return 0 <= x < self.width and 0 <= z < self.depth

    def is_walkable(self, x: int, z: int) -> bool:
        return self.in_bounds(x, z) and bool(self.walkable[z, x])

    def clamp_cell(self, x: float, z: float) -> GridCoord:
        """世界坐标 → 栅格坐标（截断到栅格内）"""
        cx = min(self.width - 1, max(0, int(np.floor(x))))
        cz = min(self.depth - 1, max(0, int(np.floor(z))))
        return (cx, cz)

    def copy(self) -> "FloorGrid":
        return FloorGrid(walkable=self.walkable.copy(), cost=self.cost.copy())


@dataclass
class GoalResolution:
    goal_cell: GridCoord          # A* 使用的终点格
    goal_point: WorldPoint        # 终点格对应的接近点
    render_end: WorldPoint        # 路径最终落点（货架面外 epsilon）
    face: Optional[str] = None    # 选中的货架面，无目标货架时为 None
    degraded: bool = False        # 向外搜索未找到可通行格


@dataclass
class FloorPlanResult:
    """单层规划结果（含中间产物，便于检查）"""
    ok: bool
    path: List[PathNode]
    grid: Optional[FloorGrid] = None
    goal: Optional[GoalResolution] = None
    raw_cells: List[GridCoord] = field(default_factory=list)
    reason: str = ""


@dataclass
class PlanResult:
    """整体规划结果：path 为各段拼接后的路径"""
    ok: bool
    path: List[PathNode]
    reason: str = ""
    degraded: bool = False
    legs: List[List[PathNode]] = field(default_factory=list)
    leg_grids: List[FloorGrid] = field(default_factory=list)  # 每段搜索使用的栅格，与 legs 一一对应
