#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
寻路配置模块

提供类型安全的配置管理和验证。
"""

from .models import (
    WayfindingConfig,
    RasterConfig,
    GoalConfig,
    SearchConfig,
    PostProcessConfig,
    RoutingConfig,
    LoggingConfig,
)
from .loader import load_config, DEFAULT_CONFIG_PATH

__all__ = [
    'WayfindingConfig',
    'RasterConfig',
    'GoalConfig',
    'SearchConfig',
    'PostProcessConfig',
    'RoutingConfig',
    'LoggingConfig',
    'load_config',
    'DEFAULT_CONFIG_PATH',
]
