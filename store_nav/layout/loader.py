#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
布局加载器

从 JSON 文件（外部存储导出的 store.json）加载门店布局，
自动迁移旧版 departments 结构后使用 Pydantic 验证。
"""

import json
from pathlib import Path
from typing import Any, Dict, Union

from loguru import logger
from pydantic import ValidationError

from store_nav.common.exceptions import LayoutError
from store_nav.layout.layout_index import get_all_bays, migrate_store_config
from store_nav.layout.models import StoreLayout


def parse_layout(data: Dict[str, Any]) -> StoreLayout:
    """
    解析布局字典

    Args:
        data: JSON 解析后的布局字典

    Returns:
        StoreLayout

    Raises:
        LayoutError: 布局结构验证失败
    """
    if not isinstance(data, dict):
        raise LayoutError(f"布局顶层必须是对象，实际为: {type(data).__name__}")

    try:
        layout = StoreLayout.model_validate(migrate_store_config(data))
    except ValidationError as e:
        logger.error("布局验证失败")
        for error in e.errors():
            field_path = " -> ".join(str(loc) for loc in error['loc'])
            logger.error(f"  {field_path}: {error['msg']}")
        raise LayoutError(f"布局验证失败:\n{e}") from e

    logger.debug(
        f"布局解析完成: grid=({layout.grid_size.width}, {layout.grid_size.depth}), "
        f"bays={len(get_all_bays(layout))}, elevators={len(layout.elevators)}"
    )
    return layout


def load_layout(layout_path: Union[str, Path]) -> StoreLayout:
    """
    从 JSON 文件加载布局

    Raises:
        LayoutError: 文件不存在、JSON 格式错误或验证失败
    """
    layout_path = Path(layout_path)
    if not layout_path.exists():
        error_msg = f"布局文件不存在: {layout_path}"
        logger.error(error_msg)
        raise LayoutError(error_msg)

    try:
        with open(layout_path, 'r', encoding='utf-8') as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        error_msg = f"JSON格式错误: {e}"
        logger.error(error_msg)
        raise LayoutError(error_msg) from e
    except OSError as e:
        error_msg = f"读取布局文件失败: {e}"
        logger.error(error_msg)
        raise LayoutError(error_msg) from e

    layout = parse_layout(raw)
    logger.info(f"布局加载成功: {layout_path}")
    return layout
