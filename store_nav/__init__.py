#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
门店寻路引擎主包

对外只暴露一个纯函数 find_path(layout, start, end) -> List[PathNode]。
"""

__version__ = "0.1.0"

from store_nav.core.map_model import PathNode, TargetRef
from store_nav.service.trip_router import RoutePlanner, find_path

__all__ = ['PathNode', 'TargetRef', 'RoutePlanner', 'find_path', '__version__']
