"""
游戏入口 - 组装各子系统，并按操作名分发玩家操作
"""
import inspect
import logging
import random
from typing import Any, Callable, Dict, Optional

from .checkin.logic import CheckinLogic
from .common.clock import SystemClock
from .common.config_manager import ConfigManager, get_config
from .common.data_manager import DataManager
from .common.results import ActionResult, Reason, failure
from .farm.catalog import CropCatalog
from .farm.logic import FarmLogic
from .farm.render import FarmRenderer
from .farm.ticker import TickDriver
from .gacha.logic import GachaLogic
from .pet.logic import PetLogic
from .shop.logic import ShopLogic

logger = logging.getLogger(__name__)


class FarmGame:
    def __init__(
        self,
        data_manager: Optional[DataManager] = None,
        catalog: Optional[CropCatalog] = None,
        clock: Optional[Callable[[], int]] = None,
        rng: Optional[random.Random] = None,
        config: Optional[ConfigManager] = None,
    ):
        self.config = config or get_config()
        self.clock = clock or SystemClock()
        self.data_manager = data_manager or DataManager(self.config.get('data_dir'))

        # 子系统初始化
        self.farm = FarmLogic(self.data_manager, catalog, self.clock, rng, self.config)
        self.shop = ShopLogic(self.farm)
        self.pet = PetLogic(self.farm)
        self.checkin = CheckinLogic(self.farm)
        self.gacha = GachaLogic(self.farm)
        self.ticker = TickDriver(self.farm, self.clock)
        self.renderer = FarmRenderer()

        # 操作名 -> 处理函数
        self._actions: Dict[str, Callable[..., ActionResult]] = {
            'plant': self.farm.plant,
            'water': self.farm.water,
            'weed': self.farm.weed,
            'fertilize': self.farm.fertilize,
            'harvest': self.farm.harvest,
            'pesticide': self.farm.pesticide,
            'shovel': self.farm.shovel,
            'unlock_plot': self.farm.unlock_plot,
            'buy_seed': self.shop.buy_seed,
            'buy_fertilizer': self.shop.buy_fertilizer,
            'sell_fruit': self.shop.sell_fruit,
            'exchange': self.shop.exchange,
            'buy_pet': self.pet.buy_pet,
            'checkin': self.checkin.checkin,
            'draw': self.gacha.draw,
        }

    @property
    def actions(self):
        return sorted(self._actions)

    def login(self, user_id: str) -> ActionResult:
        """加载存档并结算离线收益"""
        self.farm.load_farm(user_id)
        return self.pet.settle_offline_earnings(user_id)

    def logout(self, user_id: str):
        self.farm.unload(user_id)

    def act(self, user_id: str, action: str, **data: Any) -> ActionResult:
        handler = self._actions.get(action)
        if handler is None:
            return failure(Reason.UNKNOWN_ACTION, f'未知操作: {action}')
        try:
            inspect.signature(handler).bind(user_id, **data)
        except TypeError as e:
            return failure(Reason.INVALID_ARGUMENTS, f'操作 {action} 参数错误: {e}')
        result = handler(user_id, **data)
        if not result.ok:
            logger.debug(f"玩家 {user_id} 操作 {action} 被拒绝: {result.reason.value}")
        return result

    def status(self, user_id: str) -> Dict[str, Any]:
        return self.farm.view_farm_status(user_id)

    def render_status(self, user_id: str, labels: Optional[Dict[str, str]] = None) -> str:
        return self.renderer.render_status(self.status(user_id), labels)

    def start(self):
        self.ticker.start()

    def shutdown(self):
        self.ticker.shutdown()
