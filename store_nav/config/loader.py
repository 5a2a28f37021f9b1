#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
配置加载器

从YAML文件加载配置并使用Pydantic验证。
"""

import yaml
from pathlib import Path
from typing import Optional, Union
from loguru import logger
from pydantic import ValidationError

from store_nav.common.exceptions import ConfigurationError
from store_nav.config.models import WayfindingConfig

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "default_config.yaml"


def load_config(config_path: Optional[Union[str, Path]] = None) -> WayfindingConfig:
    """
    从YAML文件加载配置

    Args:
        config_path: 配置文件路径，None 时使用包内默认配置

    Returns:
        验证后的WayfindingConfig对象

    Raises:
        ConfigurationError: 配置文件不存在、YAML格式错误或验证失败
    """
    config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH

    # 检查文件是否存在
    if not config_path.exists():
        error_msg = f"配置文件不存在: {config_path}"
        logger.error(error_msg)
        raise ConfigurationError(error_msg)

    # 加载YAML文件
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        error_msg = f"YAML格式错误: {e}"
        logger.error(error_msg)
        raise ConfigurationError(error_msg) from e
    except OSError as e:
        error_msg = f"读取配置文件失败: {e}"
        logger.error(error_msg)
        raise ConfigurationError(error_msg) from e

    # 空文件视为全部使用默认值
    if raw_config is None:
        logger.warning(f"配置文件为空，使用默认配置: {config_path}")
        raw_config = {}

    if not isinstance(raw_config, dict):
        error_msg = f"配置文件顶层必须是映射: {config_path}"
        logger.error(error_msg)
        raise ConfigurationError(error_msg)

    # 使用Pydantic验证配置
    try:
        config = WayfindingConfig(**raw_config)
        logger.info(f"配置加载成功: {config_path}")
        return config
    except ValidationError as e:
        logger.error(f"配置验证失败: {config_path}")
        # 输出详细的验证错误信息
        for error in e.errors():
            field_path = " -> ".join(str(loc) for loc in error['loc'])
            logger.error(f"  {field_path}: {error['msg']}")
        raise ConfigurationError(f"配置验证失败:\n{e}") from e
