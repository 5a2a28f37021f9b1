#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
导航命令行入口

示例:
    store-nav store.json --product p-42 --ascii
    store-nav store.json --to 13 16 1 --from 25 58 0
"""

import argparse
import json
import sys
from typing import List, Optional

from loguru import logger

from store_nav.common.exceptions import WayfindingError
from store_nav.config.loader import load_config
from store_nav.core.map_model import PathNode, PlanResult
from store_nav.core.visual_debugger import render_ascii
from store_nav.layout.loader import load_layout
from store_nav.service.product_target import product_target
from store_nav.service.trip_router import RoutePlanner
from store_nav.utils.logger import setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="store-nav", description="门店寻路：从入口规划到商品或指定坐标")
    parser.add_argument("layout", help="门店布局 JSON 文件")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--product", help="目标商品ID")
    target.add_argument("--to", nargs=3, type=float, metavar=("X", "Z", "FLOOR"), help="目标坐标")
    parser.add_argument("--from", dest="start", nargs=3, type=float, metavar=("X", "Z", "FLOOR"),
                        help="起点坐标，默认使用入口")
    parser.add_argument("--config", help="YAML 配置文件，默认使用包内配置")
    parser.add_argument("--ascii", action="store_true", help="输出每段路径的 ASCII 地图")
    parser.add_argument("--log-level", default=None, help="日志级别（覆盖配置文件）")
    return parser


def _render_legs(result: PlanResult) -> List[str]:
    """用每一段实际搜索的栅格画出路径"""
    blocks = []
    for leg, grid in zip(result.legs, result.leg_grids):
        if not leg or grid is None:
            continue
        picture = render_ascii(grid, [(p.x, p.z) for p in leg])
        blocks.append(f"floor {leg[0].floor}:\n{picture}")
    return blocks


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except WayfindingError as e:
        print(f"配置错误: {e}", file=sys.stderr)
        return 2

    setup_logger(args.log_level or config.logging.level, config.logging.log_dir)

    try:
        layout = load_layout(args.layout)
        target = None
        if args.product:
            end, target = product_target(layout, args.product, depth_inset=config.raster.shelf_depth_inset)
        else:
            end = PathNode(x=args.to[0], z=args.to[1], floor=int(args.to[2]))
    except WayfindingError as e:
        logger.error(f"无法解析请求: {e}")
        return 2

    if args.start:
        start = PathNode(x=args.start[0], z=args.start[1], floor=int(args.start[2]))
    else:
        start = PathNode(x=layout.entrance.x, z=layout.entrance.z, floor=layout.entrance.floor)

    planner = RoutePlanner(config)
    result = planner.plan(layout, start, end, target)

    print(json.dumps([p.to_dict() for p in result.path], ensure_ascii=False))
    if args.ascii and result.ok:
        for block in _render_legs(result):
            print(block)

    if not result.ok:
        logger.warning(f"未找到路径: {result.reason}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
