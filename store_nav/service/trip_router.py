#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
行程路由服务

中间层：
- 单层：栅格化 → 终点解析 → 搜索前修正 → A* → 路径后处理
- 跨层：经由离起点最近的电梯拆成两段，分别在起点层、终点层规划后拼接
- 输出：PathNode 列表（空列表表示无路径）

每次请求新建布局索引和栅格，不跨请求缓存，可在多线程中并发调用。
"""

import math
from typing import List, Optional

from loguru import logger

from store_nav.config.models import WayfindingConfig
from store_nav.core.goal_resolver import resolve_goal
from store_nav.core.grid_preprocess import find_target_slot, prepare_search_grid, rasterize
from store_nav.core.map_model import FloorPlanResult, PathNode, PlanResult, TargetRef, WorldPoint
from store_nav.core.path_simplify import cells_to_points
from store_nav.core.path_smoothing import post_process
from store_nav.core.planner_astar import astar_search_with_stats
from store_nav.layout.layout_index import LayoutIndex, ShelfSlot, find_bay_by_id, nearest_slot_by_x
from store_nav.layout.models import Point, StoreLayout


def _explicit_slot(index: LayoutIndex, floor: int, target: TargetRef, end: WorldPoint) -> Optional[ShelfSlot]:
    """按 TargetRef 查找目标货架单元，找不到返回 None（由调用方回退到推断）"""
    bay = find_bay_by_id(index.layout_, target.bay_id)
    if bay is None or bay.floor != floor:
        logger.warning(f"目标货位不存在或不在本层: bay={target.bay_id}, floor={floor}，改为按终点推断")
        return None
    if target.shelf_id is None:
        return nearest_slot_by_x(index.slots(bay), end[0])
    slot = index.find_slot(target.bay_id, target.shelf_id)
    if slot is None:
        logger.warning(f"目标货架不存在: bay={target.bay_id}, shelf={target.shelf_id}，改为按终点推断")
    return slot


def plan_floor(
    index: LayoutIndex,
    floor: int,
    start: WorldPoint,
    end: WorldPoint,
    config: Optional[WayfindingConfig] = None,
    target: Optional[TargetRef] = None,
    snap_to_shelf: bool = True,
) -> FloorPlanResult:
    """
    单层路径规划

    Args:
        index: 布局索引
        floor: 楼层
        start: 起点（世界坐标）
        end: 期望终点（世界坐标）
        config: 寻路配置
        target: 显式目标货架，None 时按终点推断
        snap_to_shelf: 是否把终点吸附到货架面（电梯段为 False）

    Returns:
        FloorPlanResult（含栅格和终点解析结果）
    """
    cfg = config or WayfindingConfig()
    width, depth = index.grid_extent
    if width == 0 or depth == 0:
        logger.warning(f"栅格尺寸为空: ({width}, {depth})")
        return FloorPlanResult(ok=False, path=[], reason="栅格尺寸为空")

    slot: Optional[ShelfSlot] = None
    if snap_to_shelf:
        if target is not None:
            slot = _explicit_slot(index, floor, target, end)
        if slot is None:
            slot = find_target_slot(index, floor, end, cfg.raster.target_bay_max_distance)

    grid = rasterize(index, floor, end, slot, cfg.raster)
    goal = resolve_goal(slot, end, grid, cfg.goal, cfg.raster.clearance_cells)

    start_cell = grid.clamp_cell(*start)
    prepared = prepare_search_grid(
        grid, start_cell, goal.goal_cell,
        cfg.search.start_clear_radius, cfg.search.goal_clear_radius,
    )
    cells, stats = astar_search_with_stats(
        prepared.walkable, prepared.cost, start_cell, goal.goal_cell, cfg.search.max_expansions
    )
    if not cells:
        reason = "搜索达到展开上限" if stats.cap_reached else "无可达路径"
        return FloorPlanResult(ok=False, path=[], grid=prepared, goal=goal, reason=reason)

    points = cells_to_points(cells, start, goal.render_end)
    processed = post_process(points, prepared, cfg.post_process)
    path = [PathNode(x=x, z=z, floor=floor) for x, z in processed]
    return FloorPlanResult(ok=True, path=path, grid=prepared, goal=goal, raw_cells=cells, reason="ok")


def nearest_elevator(elevators: List[Point], x: float, z: float) -> Optional[Point]:
    """离 (x, z) 欧氏距离最近的电梯，距离相同取先出现的"""
    best: Optional[Point] = None
    best_dist = float("inf")
    for elevator in elevators:
        d = math.hypot(elevator.x - x, elevator.z - z)
        if d < best_dist:
            best_dist = d
            best = elevator
    return best


def fallback_segment(start: PathNode, end: PathNode) -> List[PathNode]:
    """规划失败时的直线降级路径（仅用于展示）"""
    return [start, end]


class RoutePlanner:
    """
    行程规划器

    只持有配置，本身无状态，同一实例可以在多个线程中复用。

    示例:
        ```python
        planner = RoutePlanner(load_config())
        result = planner.plan(layout, PathNode(25, 58, 0), PathNode(13, 16, 1))
        ```
    """

    def __init__(self, config: Optional[WayfindingConfig] = None):
        self.config_ = config or WayfindingConfig()

    def plan(
        self,
        layout: StoreLayout,
        start: PathNode,
        end: PathNode,
        target: Optional[TargetRef] = None,
    ) -> PlanResult:
        """
        规划从 start 到 end 的路径

        Args:
            layout: 门店布局
            start: 起点（含楼层）
            end: 终点（含楼层）
            target: 显式目标货架（可选）

        Returns:
            PlanResult；ok=False 时 path 为空，开启降级时为直线段
        """
        index = LayoutIndex(layout, self.config_.raster.shelf_depth_inset)

        if start.floor == end.floor:
            result = plan_floor(index, start.floor, (start.x, start.z), (end.x, end.z),
                                self.config_, target)
            if not result.ok:
                return self._fail(start, end, result.reason)
            degraded = result.goal is not None and result.goal.degraded
            logger.info(f"路径规划成功: floor={start.floor}, 路径点数={len(result.path)}")
            return PlanResult(ok=True, path=result.path, reason="ok", degraded=degraded,
                              legs=[result.path], leg_grids=[result.grid])

        elevator = nearest_elevator(layout.elevators, start.x, start.z)
        if elevator is None:
            logger.warning(f"跨层请求没有可用电梯: {start.floor} -> {end.floor}")
            return self._fail(start, end, "没有电梯")

        elevator_point = (elevator.x, elevator.z)
        # 电梯不是货架，起点层这一段不做货架吸附，否则电梯旁的货位会把终点拉走
        leg1 = plan_floor(index, start.floor, (start.x, start.z), elevator_point,
                          self.config_, snap_to_shelf=False)
        if not leg1.ok:
            return self._fail(start, end, f"起点层到电梯: {leg1.reason}")
        leg2 = plan_floor(index, end.floor, elevator_point, (end.x, end.z), self.config_, target)
        if not leg2.ok:
            return self._fail(start, end, f"电梯到终点层: {leg2.reason}")

        path = leg1.path + leg2.path
        degraded = leg2.goal is not None and leg2.goal.degraded
        logger.info(f"跨层路径规划成功: {start.floor} -> {end.floor}, 电梯=({elevator.x}, {elevator.z}), "
                    f"路径点数={len(leg1.path)}+{len(leg2.path)}")
        return PlanResult(ok=True, path=path, reason="ok", degraded=degraded,
                          legs=[leg1.path, leg2.path], leg_grids=[leg1.grid, leg2.grid])

    def _fail(self, start: PathNode, end: PathNode, reason: str) -> PlanResult:
        logger.warning(f"路径规划失败: {reason}, start={start}, end={end}")
        if self.config_.routing.degraded_fallback:
            return PlanResult(ok=False, path=fallback_segment(start, end), reason=reason, degraded=True)
        return PlanResult(ok=False, path=[], reason=reason)


def find_path(
    layout: StoreLayout,
    start: PathNode,
    end: PathNode,
    config: Optional[WayfindingConfig] = None,
    target: Optional[TargetRef] = None,
) -> List[PathNode]:
    """
    寻路入口：返回 {x, z, floor} 路径点列表，空列表表示无路径

    不抛异常；降级直线段不会通过这里返回。
    """
    result = RoutePlanner(config).plan(layout, start, end, target)
    return result.path if result.ok else []
