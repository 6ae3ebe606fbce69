"""
生长时钟与阶段计算

阶段永远由 (作物, 有效生长时间) 推导，不存储：
    有效生长时间 = now - plantedAt - pausedDuration
存在逾期未完成的浇水/除草需求时，刷新会累加 pausedDuration，使有效生长时间冻结。
"""
import logging
import random
from typing import Any, Dict, List, Optional

from .catalog import CropCatalog, CropDefinition
from .models import Plot, Requirement, Stage

logger = logging.getLogger(__name__)


def effective_elapsed(plot: Plot, now: int) -> int:
    """实际生长时间（秒），时钟回拨时钳制为 0"""
    if not plot.planted:
        return 0
    return max(0, now - plot.plantedAt - plot.pausedDuration)


def stage_for_elapsed(crop: CropDefinition, elapsed: int) -> Stage:
    t1, t2, t3 = crop.stages
    if elapsed < t1:
        return Stage.SEED
    if elapsed < t2:
        return Stage.SPROUT
    if elapsed < t3:
        return Stage.GROWING
    if elapsed < crop.wither_at:
        return Stage.RIPE
    return Stage.WITHER


def stage_of(plot: Plot, catalog: CropCatalog, now: int) -> Stage:
    """计算地块当前的生长阶段"""
    if not plot.planted:
        return Stage.EMPTY
    crop = catalog.get(plot.cropId)
    if crop is None:
        return Stage.ERROR
    return stage_for_elapsed(crop, effective_elapsed(plot, now))


def time_to_next_stage(plot: Plot, catalog: CropCatalog, now: int) -> int:
    """到下一阶段的剩余秒数，成熟后为距离枯萎的时间"""
    if not plot.planted:
        return 0
    crop = catalog.get(plot.cropId)
    if crop is None:
        return 0
    elapsed = effective_elapsed(plot, now)
    for boundary in (*crop.stages, crop.wither_at):
        if elapsed < boundary:
            return boundary - elapsed
    return 0


def due_requirements(requirements: List[Requirement], elapsed: int) -> List[Requirement]:
    return [r for r in requirements if not r.done and elapsed >= r.triggerTime]


def active_requirements(plot: Plot, now: int) -> List[Requirement]:
    """当前逾期未完成的全部需求（浇水 + 除草）"""
    elapsed = effective_elapsed(plot, now)
    return (due_requirements(plot.waterRequirements, elapsed)
            + due_requirements(plot.weedRequirements, elapsed))


def fulfill_due(plot: Plot, requirements: List[Requirement], now: int) -> int:
    """
    完成所有已到期的需求，返回新完成的数量

    只能完成已到期的需求，不能提前浇水。有新完成时清除 pausedAt，
    是否仍需暂停由下一次刷新重新推导。
    """
    if not plot.planted:
        return 0
    completed = 0
    for req in due_requirements(requirements, effective_elapsed(plot, now)):
        req.done = True
        completed += 1
    if completed:
        plot.pausedAt = None
    return completed


def tick(
    plot: Plot,
    crop: CropDefinition,
    now: int,
    interval: int = 1,
    pest_probability: float = 0.0,
    weed_probability: float = 0.0,
    rng: Optional[random.Random] = None,
) -> bool:
    """
    单个地块的一次刷新，返回持久化字段是否有变化

    1. 用本次刷新前的 pausedDuration 计算有效生长时间
    2. 有逾期需求: 开始暂停（记录 pausedAt）并累加 pausedDuration
    3. 无逾期需求: 结束暂停
    4. 生长中/成熟阶段独立掷虫害，虫害不会自动消失
    """
    if not plot.planted:
        return False
    rng = rng or random.Random()
    changed = False

    elapsed = effective_elapsed(plot, now)
    water_due = due_requirements(plot.waterRequirements, elapsed)
    weed_due = due_requirements(plot.weedRequirements, elapsed)

    if water_due or weed_due:
        if plot.pausedAt is None:
            plot.pausedAt = now
            logger.debug(f"地块{plot.id} 暂停生长: 浇水{len(water_due)} 除草{len(weed_due)}")
        plot.pausedDuration += interval
        changed = True
    elif plot.pausedAt is not None:
        plot.pausedAt = None
        logger.debug(f"地块{plot.id} 恢复生长")
        changed = True

    stage = stage_for_elapsed(crop, elapsed)
    if stage in (Stage.GROWING, Stage.RIPE) and not plot.pests:
        if rng.random() < pest_probability:
            plot.pests = True
            logger.info(f"地块{plot.id} 出现虫害")
            changed = True
    if stage == Stage.GROWING and not plot.hasWeeds and weed_probability > 0:
        if rng.random() < weed_probability:
            plot.hasWeeds = True

    return changed


def describe_plot(plot: Plot, catalog: CropCatalog, now: int) -> Dict[str, Any]:
    """地块的只读展示视图（全部为推导字段）"""
    crop = catalog.get(plot.cropId)
    stage = stage_of(plot, catalog, now)
    elapsed = effective_elapsed(plot, now)
    elapsed_water = due_requirements(plot.waterRequirements, elapsed)
    elapsed_weed = due_requirements(plot.weedRequirements, elapsed)
    progress = 0.0
    if crop is not None and plot.planted:
        progress = min(1.0, elapsed / crop.ripe_at)
    return {
        'id': plot.id,
        'unlocked': plot.unlocked,
        'cropId': plot.cropId,
        'name': crop.name if crop else None,
        'emoji': crop.emoji if crop else '',
        'stage': stage.value,
        'effectiveElapsed': elapsed,
        'timeToNextStage': time_to_next_stage(plot, catalog, now),
        'progress': progress,
        'paused': plot.pausedAt is not None,
        'needsWater': bool(elapsed_water),
        'needsWeeding': bool(elapsed_weed) or plot.hasWeeds,
        'pests': plot.pests,
        'fertilized': plot.fertilized,
        'isReady': stage == Stage.RIPE and not plot.pests,
    }
