#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
常量定义：集中管理所有魔法数字和配置常量
"""

# =============================
# 货架几何相关常量
# =============================

# 货架进深 = 货位进深 - 该值
SHELF_DEPTH_INSET: float = 0.5

# 货架阻挡缓冲（世界单位）
SHELF_BLOCK_BUFFER: float = 0.5

# 封闭面阻挡条带厚度
CLOSED_FACE_DEPTH: float = 0.5

# 封闭面阻挡条带两端外伸
CLOSED_FACE_OVERHANG: float = 0.3

# 货位四周强制打通的通道宽度
DEFAULT_AISLE_MARGIN: float = 2.0

# 货位地面的通行代价倍数
BAY_FLOOR_PENALTY: float = 6.0

# 障碍膨胀半径（格）
CLEARANCE_CELLS: int = 1

# 终点附近免阻挡半径
ENDPOINT_EXEMPT_RADIUS: float = 1.0

# 终点到货位的最大吸附距离
TARGET_BAY_MAX_DISTANCE: float = 3.0

# 货架面的名称（枚举顺序即并列时的优先顺序）
FACE_FRONT: str = "front"
FACE_BACK: str = "back"
FACE_LEFT: str = "left"
FACE_RIGHT: str = "right"
FACE_ORDER = (FACE_FRONT, FACE_BACK, FACE_RIGHT, FACE_LEFT)

# 未声明封闭面时默认封闭的面
DEFAULT_CLOSED_FACES = frozenset({FACE_BACK})

# =============================
# 终点解析相关常量
# =============================

# 接近点相对 clearance 的额外外移
APPROACH_EPSILON: float = 0.1

# 渲染终点离货架面的距离
FACE_EPSILON: float = 0.01

# 面距离比较容差，差值在此之内视为相同距离
FACE_DISTANCE_TOLERANCE: float = 1e-9

# 向外搜索可通行格的步长与步数
GOAL_MARCH_STEP: float = 0.25
GOAL_MARCH_MAX_STEPS: int = 24

# 商品导航点离货架面的安全距离
PRODUCT_SAFE_DISTANCE: float = 0.8

# =============================
# A* 相关常量
# =============================

# 8 邻接移动方向（搜索时的展开顺序）
DIRECTIONS_8WAY = [(0, 1), (0, -1), (1, 0), (-1, 0), (1, 1), (1, -1), (-1, 1), (-1, -1)]

# 起点周围强制可通行的半径（格）
START_CLEAR_RADIUS: int = 3

# 终点周围重置代价的半径（格）
GOAL_CLEAR_RADIUS: int = 1

# =============================
# 路径后处理相关常量
# =============================

COLLINEAR_THRESHOLD: float = 0.95
MIN_SEGMENT_LENGTH: float = 0.1
SEGMENT_SAMPLE_STEP: float = 0.25

SHORTCUT_CLEARANCE: int = 1

SMOOTH_ITERATIONS: int = 60
SMOOTH_FACTOR: float = 0.12
SMOOTH_CLEARANCE: int = 2

CENTER_MAX_RANGE: float = 6.0
CENTER_RAY_STEP: float = 0.1
CENTER_MAX_SHIFT: float = 1.5
CENTER_CLEARANCE: int = 2
