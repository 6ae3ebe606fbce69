import logging
import random
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Optional, Set, Tuple

from pydantic import ValidationError

from ..common.clock import SystemClock
from ..common.config_manager import ConfigManager, get_config
from ..common.data_manager import DataManager
from ..common.results import ActionResult, DataError, Reason, failure, success
from . import growth, requirements
from .catalog import CropCatalog, default_catalog
from .fertilizer import apply_fertilizer
from .levels import level_for_exp, plot_unlock_cost, plot_unlock_level
from .models import FarmSave, Plot, Stage, new_farm_save

logger = logging.getLogger(__name__)


class FarmLogic:
    """
    地块生命周期与玩家操作

    本进程是玩家地块数据的唯一权威：已加载的存档缓存在内存中，
    每个玩家的操作和刷新都在同一把锁内执行，避免读改写交错。
    """

    def __init__(
        self,
        data_manager: Optional[DataManager] = None,
        catalog: Optional[CropCatalog] = None,
        clock: Optional[Callable[[], int]] = None,
        rng: Optional[random.Random] = None,
        config: Optional[ConfigManager] = None,
    ):
        self.config = config or get_config()
        self.dm = data_manager or DataManager(self.config.get('data_dir'))
        self.catalog = catalog or default_catalog()
        self.clock = clock or SystemClock()
        self.rng = rng or random.Random()
        self._farms: Dict[str, FarmSave] = {}
        self._dirty: Set[str] = set()
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()
        self._reported_errors: Set[Tuple[str, int, str]] = set()

    # ========== 存档 ==========

    def _lock(self, user_id: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = self._locks[user_id] = threading.RLock()
            return lock

    def load_farm(self, user_id: str) -> FarmSave:
        """加载玩家存档，不存在则创建默认存档"""
        with self._lock(user_id):
            farm = self._farms.get(user_id)
            if farm is not None:
                return farm
            raw = self.dm.load_user(user_id)
            if raw is None:
                farm = new_farm_save(
                    self.config.plot_count,
                    self.config.get('starting_inventory', {}),
                    self.clock(),
                )
                logger.info(f"为玩家 {user_id} 创建新农场")
                self.dm.save_user(user_id, farm.model_dump(mode='json'))
            else:
                try:
                    farm = FarmSave.model_validate(raw)
                except ValidationError as e:
                    logger.error(f"玩家 {user_id} 存档无效: {e}")
                    raise DataError(f"玩家 {user_id} 存档无效") from e
            self._farms[user_id] = farm
            return farm

    def save_farm(self, user_id: str, farm: Optional[FarmSave] = None):
        with self._lock(user_id):
            farm = farm or self._farms.get(user_id)
            if farm is None:
                return
            self._farms[user_id] = farm
            self.dm.save_user(user_id, farm.model_dump(mode='json'))
            self._dirty.discard(user_id)

    def flush(self) -> int:
        """把刷新中改动过的存档写盘，返回写入数量"""
        saved = 0
        for user_id in list(self._dirty):
            self.save_farm(user_id)
            saved += 1
        return saved

    def unload(self, user_id: str):
        with self._lock(user_id):
            if user_id in self._dirty:
                self.save_farm(user_id)
            self._farms.pop(user_id, None)

    def loaded_users(self) -> List[str]:
        return list(self._farms)

    @contextmanager
    def locked(self, user_id: str) -> Iterator[FarmSave]:
        """在玩家锁内取得存档，供其他子系统做原子修改"""
        with self._lock(user_id):
            yield self.load_farm(user_id)

    def commit(self, user_id: str, farm: FarmSave, action: str, description: str):
        """记录日志并保存"""
        farm.log.append({
            'date': datetime.fromtimestamp(self.clock()).isoformat(),
            'action': action,
            'description': description,
        })
        limit = int(self.config.get('log_limit', 50))
        if len(farm.log) > limit:
            del farm.log[:len(farm.log) - limit]
        self.save_farm(user_id, farm)

    # ========== 前置检查 ==========

    def _check_plot(self, farm: FarmSave, plot_id: int, need_crop: bool = True
                    ) -> Tuple[Optional[Plot], Optional[ActionResult]]:
        plot = farm.plot(plot_id)
        if plot is None:
            return None, failure(Reason.INVALID_PLOT, '地块索引无效')
        if not plot.unlocked:
            return None, failure(Reason.PLOT_LOCKED, '地块未开垦')
        if need_crop and not plot.planted:
            return None, failure(Reason.NOT_PLANTED, '该地块为空')
        return plot, None

    # ========== 地块操作 ==========

    def plant(self, user_id: str, plot_id: int, crop_id: str) -> ActionResult:
        with self.locked(user_id) as farm:
            plot, err = self._check_plot(farm, plot_id, need_crop=False)
            if err:
                return err
            if plot.cropId is not None:
                return failure(Reason.PLOT_OCCUPIED, '地块已被占用')
            crop = self.catalog.get(crop_id)
            if crop is None:
                return failure(Reason.UNKNOWN_CROP, f'未知作物: {crop_id}')
            if farm.inventory.get(crop_id, 0) <= 0:
                return failure(Reason.INSUFFICIENT_SEEDS, '没有该种子')

            now = self.clock()
            plot.clear()
            plot.cropId = crop_id
            plot.plantedAt = now
            plot.waterRequirements = requirements.generate_water(crop, self.rng)
            plot.weedRequirements = requirements.generate_weed(crop, self.rng)

            farm.inventory[crop_id] -= 1
            if farm.inventory[crop_id] <= 0:
                del farm.inventory[crop_id]
            farm.statistics.plantsGrown += 1
            self.commit(user_id, farm, '种植', f"种植了{crop.name}在地块{plot_id + 1}")
            return success(f"种植了{crop.name}", plotId=plot_id, cropId=crop_id)

    def water(self, user_id: str, plot_id: int) -> ActionResult:
        with self.locked(user_id) as farm:
            plot, err = self._check_plot(farm, plot_id)
            if err:
                return err
            done = growth.fulfill_due(plot, plot.waterRequirements, self.clock())
            if not done:
                return failure(Reason.NOTHING_TO_WATER, '现在不需要浇水')
            self.commit(user_id, farm, '浇水', f"给地块{plot_id + 1}浇水")
            return success('浇水成功', plotId=plot_id, completed=done)

    def weed(self, user_id: str, plot_id: int) -> ActionResult:
        with self.locked(user_id) as farm:
            plot, err = self._check_plot(farm, plot_id)
            if err:
                return err
            done = growth.fulfill_due(plot, plot.weedRequirements, self.clock())
            if not done and not plot.hasWeeds:
                return failure(Reason.NOTHING_TO_WEED, '没有杂草')
            plot.hasWeeds = False
            self.commit(user_id, farm, '除草', f"给地块{plot_id + 1}除草")
            return success('除草成功', plotId=plot_id, completed=done)

    def fertilize(self, user_id: str, plot_id: int) -> ActionResult:
        with self.locked(user_id) as farm:
            plot, err = self._check_plot(farm, plot_id)
            if err:
                return err
            if plot.fertilized:
                return failure(Reason.ALREADY_FERTILIZED, '本次种植已施过肥')
            if farm.fertilizer <= 0:
                return failure(Reason.INSUFFICIENT_FERTILIZER, '肥料不足')
            crop = self.catalog.get(plot.cropId)
            if crop is None:
                return failure(Reason.UNKNOWN_CROP, f'未知作物: {plot.cropId}')

            apply_fertilizer(plot, crop, self.clock())
            farm.fertilizer -= 1
            self.commit(user_id, farm, '施肥', f"给地块{plot_id + 1}施肥")
            return success('施肥成功', plotId=plot_id, plantedAt=plot.plantedAt)

    def harvest(self, user_id: str, plot_id: int) -> ActionResult:
        with self.locked(user_id) as farm:
            plot, err = self._check_plot(farm, plot_id)
            if err:
                return err
            stage = growth.stage_of(plot, self.catalog, self.clock())
            if stage == Stage.ERROR:
                return failure(Reason.UNKNOWN_CROP, f'未知作物: {plot.cropId}')
            if stage != Stage.RIPE:
                return failure(Reason.NOT_RIPE, '作物尚未成熟')
            if plot.pests and self.config.get('pests_block_harvest', True):
                return failure(Reason.HAS_PESTS, '有虫害时不能收获')

            crop = self.catalog.get(plot.cropId)
            yield_qty = crop.yield_per_harvest
            exp_gained = crop.exp * yield_qty
            level_before = level_for_exp(farm.exp)

            farm.fruits[crop.id] = farm.fruits.get(crop.id, 0) + yield_qty
            farm.exp += exp_gained
            farm.statistics.totalHarvested += yield_qty
            plot.clear()

            level = level_for_exp(farm.exp)
            self.commit(user_id, farm, '收获', f"收获了{yield_qty}个{crop.name}来自地块{plot_id + 1}")
            if level > level_before:
                logger.info(f"玩家 {user_id} 升级到 {level} 级")
            return success(
                f"收获了{crop.name}",
                plotId=plot_id, cropId=crop.id, yieldQty=yield_qty,
                expGained=exp_gained, level=level, leveledUp=level > level_before,
            )

    def pesticide(self, user_id: str, plot_id: int) -> ActionResult:
        with self.locked(user_id) as farm:
            plot, err = self._check_plot(farm, plot_id)
            if err:
                return err
            if not plot.pests:
                return failure(Reason.NO_PESTS, '没有虫害')
            plot.pests = False
            self.commit(user_id, farm, '除虫', f"给地块{plot_id + 1}除虫")
            return success('除虫成功', plotId=plot_id)

    def shovel(self, user_id: str, plot_id: int) -> ActionResult:
        with self.locked(user_id) as farm:
            plot, err = self._check_plot(farm, plot_id)
            if err:
                return err
            crop_id = plot.cropId
            plot.clear()
            self.commit(user_id, farm, '铲除', f"铲除了地块{plot_id + 1}的{crop_id}")
            return success('已铲除', plotId=plot_id, cropId=crop_id)

    def unlock_plot(self, user_id: str, plot_id: int) -> ActionResult:
        with self.locked(user_id) as farm:
            plot = farm.plot(plot_id)
            if plot is None:
                return failure(Reason.INVALID_PLOT, '地块索引无效')
            if plot.unlocked:
                return failure(Reason.ALREADY_UNLOCKED, '地块已开垦')
            need_level = plot_unlock_level(plot_id)
            level = level_for_exp(farm.exp)
            if level < need_level:
                return failure(Reason.LEVEL_TOO_LOW, f'需要{need_level}级，当前{level}级')
            cost = plot_unlock_cost(plot_id)
            if farm.coins < cost:
                return failure(Reason.INSUFFICIENT_COINS, f'开垦需要 {cost} 金币')

            farm.coins -= cost
            plot.unlocked = True
            self.commit(user_id, farm, '开垦', f"开垦了地块{plot_id + 1}，花费{cost}金币")
            return success(f"开垦了地块{plot_id + 1}", plotId=plot_id, cost=cost)

    # ========== 只读视图 ==========

    def stage_of(self, user_id: str, plot_id: int) -> Optional[Stage]:
        with self.locked(user_id) as farm:
            plot = farm.plot(plot_id)
            if plot is None:
                return None
            return growth.stage_of(plot, self.catalog, self.clock())

    def plot_status(self, user_id: str) -> List[Dict[str, Any]]:
        with self.locked(user_id) as farm:
            now = self.clock()
            return [growth.describe_plot(p, self.catalog, now) for p in farm.plots]

    def view_farm_status(self, user_id: str) -> Dict[str, Any]:
        """查看农场详细状态"""
        with self.locked(user_id) as farm:
            return {
                'coins': farm.coins,
                'zeta': farm.zeta,
                'tickets': farm.tickets,
                'exp': farm.exp,
                'level': level_for_exp(farm.exp),
                'fertilizer': farm.fertilizer,
                'inventory': dict(farm.inventory),
                'fruits': dict(farm.fruits),
                'pets': [k for k, v in farm.pets.items() if v],
                'statistics': farm.statistics.model_dump(),
                'plots': self.plot_status(user_id),
            }

    def view_farm_log(self, user_id: str) -> List[dict]:
        with self.locked(user_id) as farm:
            return list(farm.log)

    # ========== 定时刷新 ==========

    def tick_all(self, now: Optional[int] = None, interval: Optional[int] = None) -> int:
        """
        对所有已加载玩家的已种植地块执行一次刷新，返回刷新的地块数

        interval 必须等于实际调度间隔，暂停中的地块每次刷新累加这么多秒
        """
        now = self.clock() if now is None else now
        interval = interval or self.config.tick_interval
        pest_probability = self.config.pest_probability
        weed_probability = self.config.weed_probability
        ticked = 0
        for user_id in list(self._farms):
            with self._lock(user_id):
                farm = self._farms.get(user_id)
                if farm is None:
                    continue
                for plot in farm.plots:
                    if not plot.planted:
                        continue
                    crop = self.catalog.get(plot.cropId)
                    if crop is None:
                        key = (user_id, plot.id, plot.cropId)
                        if key not in self._reported_errors:
                            self._reported_errors.add(key)
                            logger.error(f"玩家 {user_id} 地块{plot.id} 引用未知作物 {plot.cropId}")
                        continue
                    if growth.tick(plot, crop, now, interval, pest_probability, weed_probability, self.rng):
                        self._dirty.add(user_id)
                    ticked += 1
        return ticked
