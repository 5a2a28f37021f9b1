#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
门店布局模型

zone → aisle → bay → shelf 的层级结构，由外部协作方（REST JSON 存储）提供。
字段同时接受 camelCase（JSON 原始格式）与 snake_case。
几何字段不做范围校验：非法尺寸在栅格化时被截断，而不是在这里报错。
"""

from typing import List, Literal, Optional, Union
from pydantic import BaseModel, Field, AliasChoices

FaceName = Literal["front", "back", "left", "right"]


class Shelf(BaseModel):
    """货架单元（货位中的一个可寻址分段）"""
    id: str = Field(..., description="货架ID")
    name: str = Field("", description="货架名称")
    level_count: Optional[int] = Field(
        None,
        description="层数",
        validation_alias=AliasChoices("level_count", "levelCount"),
    )
    closed_sides: Optional[List[FaceName]] = Field(
        None,
        description="封闭面集合；缺省或为空时背面封闭",
        validation_alias=AliasChoices("closed_sides", "closedSides"),
    )


class Bay(BaseModel):
    """货位：楼层栅格上的矩形货架组"""
    id: str = Field(..., description="货位ID")
    name: str = Field("", description="货位名称")
    floor: int = Field(0, description="所在楼层")
    row: float = Field(..., description="左上角 z（行）")
    column: float = Field(..., description="左上角 x（列）")
    width: float = Field(..., description="x 方向宽度")
    depth: float = Field(..., description="z 方向进深")
    shelves: List[Shelf] = Field(default_factory=list, description="有序货架列表")
    shelf_spacing: Optional[Union[float, List[float]]] = Field(
        None,
        description="货架间距：统一间距，或 n-1 个间距组成的列表",
        validation_alias=AliasChoices("shelf_spacing", "shelfSpacing"),
    )
    level_count: Optional[int] = Field(
        None,
        description="层数",
        validation_alias=AliasChoices("level_count", "levelCount"),
    )


class Aisle(BaseModel):
    """通道：若干货位的分组"""
    id: str
    name: str = ""
    bays: List[Bay] = Field(default_factory=list)


class Zone(BaseModel):
    """区域：若干通道的分组"""
    id: str
    name: str = ""
    aisles: List[Aisle] = Field(default_factory=list)


class GridSize(BaseModel):
    """整店栅格尺寸"""
    width: float = Field(..., description="x 方向格数")
    depth: float = Field(..., description="z 方向格数")


class Point(BaseModel):
    """平面坐标（电梯位置等，所有楼层共用）"""
    x: float
    z: float


class Entrance(BaseModel):
    """入口位置"""
    x: float
    z: float
    floor: int = 0


class Product(BaseModel):
    """商品：通过 bay_id（旧版 department_id）与 shelf_id 定位"""
    id: str
    name: str = ""
    category: str = ""
    bay_id: Optional[str] = Field(None, validation_alias=AliasChoices("bay_id", "bayId"))
    department_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("department_id", "departmentId")
    )
    shelf_id: Optional[str] = Field(None, validation_alias=AliasChoices("shelf_id", "shelfId"))
    levels: Optional[List[int]] = None

    @property
    def location_bay_id(self) -> Optional[str]:
        return self.bay_id or self.department_id


class StoreLayout(BaseModel):
    """门店布局快照（寻路引擎的只读输入）"""
    grid_size: GridSize = Field(
        ...,
        description="整店栅格尺寸",
        validation_alias=AliasChoices("grid_size", "gridSize"),
    )
    entrance: Entrance = Field(default_factory=lambda: Entrance(x=0.0, z=0.0), description="入口")
    elevators: List[Point] = Field(default_factory=list, description="电梯位置（每层都有）")
    zones: List[Zone] = Field(default_factory=list, description="区域列表")
    products: List[Product] = Field(default_factory=list, description="商品列表")
