#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
寻路配置模型

使用Pydantic定义类型安全的配置模型，所有字段都带默认值，
不提供配置文件时等价于 WayfindingConfig()。
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator, AliasChoices

from store_nav.common import constants as C


class RasterConfig(BaseModel):
    """栅格化配置"""
    shelf_buffer: float = Field(C.SHELF_BLOCK_BUFFER, description="货架阻挡缓冲")
    shelf_depth_inset: float = Field(C.SHELF_DEPTH_INSET, description="货架进深内缩")
    closed_face_depth: float = Field(C.CLOSED_FACE_DEPTH, description="封闭面阻挡条带厚度")
    closed_face_overhang: float = Field(C.CLOSED_FACE_OVERHANG, description="封闭面阻挡条带外伸")
    aisle_margin: float = Field(
        C.DEFAULT_AISLE_MARGIN,
        description="货位四周强制打通的通道宽度",
        validation_alias=AliasChoices("aisle_margin", "aisle_buffer"),
    )
    bay_floor_penalty: float = Field(C.BAY_FLOOR_PENALTY, description="货位地面通行代价")
    clearance_cells: int = Field(C.CLEARANCE_CELLS, description="障碍膨胀半径（格）")
    endpoint_exempt_radius: float = Field(C.ENDPOINT_EXEMPT_RADIUS, description="终点附近免阻挡半径")
    target_bay_max_distance: float = Field(C.TARGET_BAY_MAX_DISTANCE, description="终点吸附货位的最大距离")

    @field_validator('aisle_margin')
    @classmethod
    def validate_aisle_margin(cls, v: float) -> float:
        """验证通道宽度"""
        if v < 1.0:
            raise ValueError(f"通道宽度不能小于1: {v}")
        return v

    @field_validator('clearance_cells')
    @classmethod
    def validate_clearance(cls, v: int) -> int:
        """验证膨胀半径"""
        if v < 0:
            raise ValueError(f"膨胀半径不能为负数: {v}")
        return v

    @field_validator('bay_floor_penalty')
    @classmethod
    def validate_penalty(cls, v: float) -> float:
        """验证代价倍数"""
        if v < 1.0:
            raise ValueError(f"货位地面代价不能小于1: {v}")
        return v

    @field_validator('shelf_buffer', 'shelf_depth_inset', 'closed_face_depth',
                     'closed_face_overhang', 'endpoint_exempt_radius', 'target_bay_max_distance')
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        """验证非负数"""
        if v < 0:
            raise ValueError(f"值不能为负数: {v}")
        return v


class GoalConfig(BaseModel):
    """终点解析配置"""
    approach_epsilon: float = Field(C.APPROACH_EPSILON, description="接近点额外外移")
    face_epsilon: float = Field(C.FACE_EPSILON, description="渲染终点离货架面的距离")
    march_step: float = Field(C.GOAL_MARCH_STEP, description="向外搜索步长")
    march_max_steps: int = Field(C.GOAL_MARCH_MAX_STEPS, description="向外搜索最大步数")

    @field_validator('march_step', 'face_epsilon')
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """验证正数"""
        if v <= 0:
            raise ValueError(f"值必须大于0: {v}")
        return v

    @field_validator('march_max_steps')
    @classmethod
    def validate_steps(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"步数不能为负数: {v}")
        return v


class SearchConfig(BaseModel):
    """A*搜索配置"""
    start_clear_radius: int = Field(C.START_CLEAR_RADIUS, description="起点强制可通行半径（格）")
    goal_clear_radius: int = Field(C.GOAL_CLEAR_RADIUS, description="终点代价重置半径（格）")
    max_expansions: Optional[int] = Field(None, description="最大展开节点数，None 表示不限")

    @field_validator('start_clear_radius', 'goal_clear_radius')
    @classmethod
    def validate_radius(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"半径不能为负数: {v}")
        return v

    @field_validator('max_expansions')
    @classmethod
    def validate_max_expansions(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError(f"最大展开节点数必须大于0: {v}")
        return v


class PostProcessConfig(BaseModel):
    """路径后处理配置"""
    collinear_threshold: float = Field(C.COLLINEAR_THRESHOLD, description="共线判定阈值（归一化点积）")
    min_segment_length: float = Field(C.MIN_SEGMENT_LENGTH, description="简化时的最短线段")
    sample_step: float = Field(C.SEGMENT_SAMPLE_STEP, description="线段碰撞采样步长")
    shortcut_clearance: int = Field(C.SHORTCUT_CLEARANCE, description="捷径检测安全半径（格）")
    smooth_iterations: int = Field(C.SMOOTH_ITERATIONS, description="平滑迭代次数")
    smooth_factor: float = Field(C.SMOOTH_FACTOR, description="平滑阻尼系数")
    smooth_clearance: int = Field(C.SMOOTH_CLEARANCE, description="平滑碰撞检测安全半径（格）")
    center_max_range: float = Field(C.CENTER_MAX_RANGE, description="居中射线最大距离")
    center_ray_step: float = Field(C.CENTER_RAY_STEP, description="居中射线步长")
    center_max_shift: float = Field(C.CENTER_MAX_SHIFT, description="居中单次最大偏移")
    center_clearance: int = Field(C.CENTER_CLEARANCE, description="居中碰撞检测安全半径（格）")

    @field_validator('collinear_threshold')
    @classmethod
    def validate_collinear(cls, v: float) -> float:
        """验证共线阈值"""
        if not 0.0 < v <= 1.0:
            raise ValueError(f"共线阈值必须在(0, 1]之间: {v}")
        return v

    @field_validator('smooth_factor')
    @classmethod
    def validate_smooth_factor(cls, v: float) -> float:
        """验证平滑系数范围"""
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"平滑系数必须在0.0-1.0之间: {v}")
        return v

    @field_validator('sample_step', 'center_ray_step', 'center_max_range', 'center_max_shift')
    @classmethod
    def validate_positive_float(cls, v: float) -> float:
        """验证正浮点数"""
        if v <= 0:
            raise ValueError(f"值必须大于0: {v}")
        return v

    @field_validator('smooth_iterations', 'shortcut_clearance', 'smooth_clearance', 'center_clearance')
    @classmethod
    def validate_non_negative_int(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"值不能为负数: {v}")
        return v


class RoutingConfig(BaseModel):
    """行程路由配置"""
    degraded_fallback: bool = Field(False, description="规划失败时是否附带直线降级路径")


class LoggingConfig(BaseModel):
    """日志配置"""
    level: str = Field("INFO", description="日志级别")
    log_dir: Optional[str] = Field(None, description="日志目录，None 表示只输出到终端")

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"未知的日志级别: {v}")
        return v


class WayfindingConfig(BaseModel):
    """寻路主配置"""
    raster: RasterConfig = Field(default_factory=RasterConfig, description="栅格化配置")
    goal: GoalConfig = Field(default_factory=GoalConfig, description="终点解析配置")
    search: SearchConfig = Field(default_factory=SearchConfig, description="A*搜索配置")
    post_process: PostProcessConfig = Field(default_factory=PostProcessConfig, description="路径后处理配置")
    routing: RoutingConfig = Field(default_factory=RoutingConfig, description="行程路由配置")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="日志配置")
