#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
寻路服务：行程路由与商品导航
"""

from .trip_router import RoutePlanner, find_path, plan_floor, fallback_segment, nearest_elevator
from .product_target import product_target, route_to_product

__all__ = [
    'RoutePlanner',
    'find_path',
    'plan_floor',
    'fallback_segment',
    'nearest_elevator',
    'product_target',
    'route_to_product',
]
