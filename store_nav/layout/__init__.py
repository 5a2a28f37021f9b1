#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
门店布局模块

提供布局模型、层级展平索引和 JSON 加载。
"""

from .models import (
    StoreLayout,
    Zone,
    Aisle,
    Bay,
    Shelf,
    Product,
    GridSize,
    Point,
    Entrance,
)
from .layout_index import (
    LayoutIndex,
    ShelfSlot,
    compute_shelf_slots,
    get_all_bays,
    get_bays_on_floor,
    get_all_floors,
    find_bay_by_id,
    find_location_for_bay,
    find_product,
    get_product_location,
    migrate_store_config,
)
from .loader import load_layout, parse_layout

__all__ = [
    'StoreLayout',
    'Zone',
    'Aisle',
    'Bay',
    'Shelf',
    'Product',
    'GridSize',
    'Point',
    'Entrance',
    'LayoutIndex',
    'ShelfSlot',
    'compute_shelf_slots',
    'get_all_bays',
    'get_bays_on_floor',
    'get_all_floors',
    'find_bay_by_id',
    'find_location_for_bay',
    'find_product',
    'get_product_location',
    'migrate_store_config',
    'load_layout',
    'parse_layout',
]
