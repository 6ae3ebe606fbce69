"""
肥料加速 - 改写种植时间，使作物提前成熟

折算系数按作物稀有度分档，系数越小加速越多；系数为 0 表示立即成熟。
"""
from fractions import Fraction

from .catalog import CropDefinition
from .models import Plot


def reduction_factor(level_req: int) -> Fraction:
    if level_req <= 3:
        return Fraction(0)
    if level_req <= 6:
        return Fraction(1, 2)
    if level_req <= 9:
        return Fraction(2, 3)
    if level_req <= 12:
        return Fraction(5, 6)
    return Fraction(23, 24)


def warp_planted_at(plot: Plot, crop: CropDefinition, now: int) -> int:
    """
    施肥后的新种植时间（不修改地块）

    系数为 0: 立即读作刚成熟（把已有的暂停时间一并抵消）
    否则: 原始流逝时间 elapsed = now - plantedAt，新 plantedAt = now - elapsed / 系数
    """
    factor = reduction_factor(crop.levelReq)
    if factor == 0:
        return now - crop.ripe_at - plot.pausedDuration
    elapsed = now - plot.plantedAt
    return now - int(elapsed / factor)


def apply_fertilizer(plot: Plot, crop: CropDefinition, now: int):
    """对已种植且未施肥的地块施肥，前置条件由调用方检查"""
    plot.plantedAt = warp_planted_at(plot, crop, now)
    if reduction_factor(crop.levelReq) == 0:
        # 立即成熟，剩余需求不再触发暂停
        for req in plot.waterRequirements + plot.weedRequirements:
            req.done = True
        plot.pausedAt = None
    plot.fertilized = True
