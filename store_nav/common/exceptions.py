#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
自定义异常类：定义寻路模块的专用异常

注意：无路径、缺少电梯等情况不抛异常，统一以空路径表示。
"""


class WayfindingError(Exception):
    """寻路模块基础异常类"""
    pass


class LayoutError(WayfindingError):
    """门店布局加载/解析失败异常"""
    pass


class ConfigurationError(WayfindingError):
    """配置错误异常"""
    pass


class TargetResolutionError(WayfindingError):
    """商品/货架目标无法解析异常"""
    pass
