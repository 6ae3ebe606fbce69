"""
等级与地块开垦
"""
from typing import List

# 每级所需累计经验，共 18 级
LEVELS: List[int] = [
    0, 10, 40, 100, 220, 420, 750, 1250, 2000,
    3100, 4700, 7000, 10200, 14600, 20500, 28500, 39000, 53000,
]

# 按地块序号递增
PLOT_UNLOCK_COSTS: List[int] = [
    0, 20, 50, 100, 200, 400, 700, 1100, 1600,
    2300, 3200, 4500, 6200, 8500, 11500, 15500, 21000, 28000,
]
PLOT_UNLOCK_LEVELS: List[int] = [
    1, 1, 2, 2, 3, 4, 5, 6, 7,
    8, 9, 10, 11, 12, 13, 14, 14, 15,
]


def level_for_exp(exp: int) -> int:
    """根据经验值计算当前等级"""
    lvl = 1
    for i, need in enumerate(LEVELS):
        if exp >= need:
            lvl = i + 1
    return min(lvl, len(LEVELS))


def exp_to_next_level(exp: int) -> int:
    lvl = level_for_exp(exp)
    if lvl >= len(LEVELS):
        return 0
    return LEVELS[lvl] - exp


def plot_unlock_cost(plot_id: int) -> int:
    if 0 <= plot_id < len(PLOT_UNLOCK_COSTS):
        return PLOT_UNLOCK_COSTS[plot_id]
    return 50000


def plot_unlock_level(plot_id: int) -> int:
    if 0 <= plot_id < len(PLOT_UNLOCK_LEVELS):
        return PLOT_UNLOCK_LEVELS[plot_id]
    return 15
