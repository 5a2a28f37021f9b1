#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
商品导航目标

把商品的 bay/shelf 位置换算成导航终点：货架开放面中心外 0.8 单位处。
"""

from typing import Optional, Tuple, Union

from loguru import logger

from store_nav.common.constants import (
    FACE_BACK,
    FACE_FRONT,
    FACE_LEFT,
    FACE_RIGHT,
    PRODUCT_SAFE_DISTANCE,
    SHELF_DEPTH_INSET,
)
from store_nav.common.exceptions import TargetResolutionError
from store_nav.config.models import WayfindingConfig
from store_nav.core.goal_resolver import face_point
from store_nav.core.map_model import PathNode, PlanResult, TargetRef
from store_nav.layout.layout_index import compute_shelf_slots, find_bay_by_id, find_product
from store_nav.layout.models import Product, StoreLayout
from store_nav.service.trip_router import RoutePlanner


def product_face(closed_faces) -> str:
    """
    商品终点所在的面

    - 后封闭、前开放 → 前
    - 前封闭、后开放 → 后
    - 前后都封闭 → 右、左依次尝试，都封闭时取前
    - 前后都开放 → 前
    """
    front_closed = FACE_FRONT in closed_faces
    back_closed = FACE_BACK in closed_faces
    if front_closed and not back_closed:
        return FACE_BACK
    if front_closed and back_closed:
        if FACE_RIGHT not in closed_faces:
            return FACE_RIGHT
        if FACE_LEFT not in closed_faces:
            return FACE_LEFT
    return FACE_FRONT


def product_target(
    layout: StoreLayout,
    product: Union[Product, str],
    safe_distance: float = PRODUCT_SAFE_DISTANCE,
    depth_inset: float = SHELF_DEPTH_INSET,
) -> Tuple[PathNode, TargetRef]:
    """
    计算商品的导航终点

    Args:
        layout: 门店布局
        product: 商品对象或商品ID
        safe_distance: 终点离货架面的距离
        depth_inset: 货架进深内缩

    Returns:
        (终点, 目标货架引用)

    Raises:
        TargetResolutionError: 商品或货位不存在
    """
    if isinstance(product, str):
        found = find_product(layout, product)
        if found is None:
            raise TargetResolutionError(f"商品不存在: {product}")
        product = found

    bay_id = product.location_bay_id
    bay = find_bay_by_id(layout, bay_id) if bay_id else None
    if bay is None:
        raise TargetResolutionError(f"商品 {product.id} 的货位不存在: {bay_id}")

    slots = compute_shelf_slots(bay, depth_inset)
    if not slots:
        logger.warning(f"货位 {bay.id} 没有货架，终点取货位前方")
        x = bay.column + max(0.0, bay.width) / 2.0
        z = bay.row + max(0.0, bay.depth) + safe_distance
        target = TargetRef(bay_id=bay.id)
    else:
        slot = next((s for s in slots if s.shelf.id == product.shelf_id), slots[0])
        face = product_face(slot.closed_faces)
        x, z = face_point(slot, face, safe_distance)
        target = TargetRef(bay_id=bay.id, shelf_id=slot.shelf.id)

    x = max(0.0, min(x, layout.grid_size.width - 1))
    z = max(0.0, min(z, layout.grid_size.depth - 1))
    logger.debug(f"商品终点: product={product.id}, bay={bay.id}, shelf={target.shelf_id}, "
                 f"point=({x:.2f}, {z:.2f}), floor={bay.floor}")
    return PathNode(x=x, z=z, floor=bay.floor), target


def route_to_product(
    layout: StoreLayout,
    product_id: str,
    config: Optional[WayfindingConfig] = None,
) -> PlanResult:
    """
    从入口规划到商品所在货架

    Raises:
        TargetResolutionError: 商品或货位不存在
    """
    cfg = config or WayfindingConfig()
    end, target = product_target(layout, product_id, depth_inset=cfg.raster.shelf_depth_inset)
    entrance = layout.entrance
    start = PathNode(x=entrance.x, z=entrance.z, floor=entrance.floor)
    return RoutePlanner(cfg).plan(layout, start, end, target)
