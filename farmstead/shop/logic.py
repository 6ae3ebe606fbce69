import logging
from typing import Optional

from ..common.config_manager import ConfigManager
from ..common.results import ActionResult, Reason, failure, success
from ..farm.logic import FarmLogic

logger = logging.getLogger(__name__)

# 兑换目标 -> 汇率配置键
EXCHANGE_RATE_KEYS = {
    'zeta': 'zeta_exchange_rate',
    'tickets': 'ticket_exchange_rate',
}


def round_coins(value: float) -> float:
    return round(value, 2)


class ShopLogic:
    """商店与银行：买种子、买肥料、卖果实、金币兑换"""

    def __init__(self, farm: FarmLogic, config: Optional[ConfigManager] = None):
        self.farm = farm
        self.config = config or farm.config

    def view_shop(self):
        return {
            'seeds': [c.model_dump() for c in self.farm.catalog],
            'fertilizer_cost': self.config.get('fertilizer_cost', 50),
        }

    def buy_seed(self, user_id: str, crop_id: str, count: int = 1) -> ActionResult:
        """购买种子（只能用金币，无等级限制）"""
        crop = self.farm.catalog.get(crop_id)
        if crop is None:
            return failure(Reason.UNKNOWN_CROP, f'没有该种子可购买: {crop_id}')
        if count < 1:
            return failure(Reason.INVALID_AMOUNT, '数量必须大于0')
        price = crop.cost * count
        with self.farm.locked(user_id) as farm:
            if farm.coins < price:
                return failure(Reason.INSUFFICIENT_COINS, '金币不足')
            farm.coins = round_coins(farm.coins - price)
            farm.inventory[crop_id] = farm.inventory.get(crop_id, 0) + count
            self.farm.commit(user_id, farm, '买种子', f"购买了{count}个{crop.name}")
            return success(f"购买了{crop.name} ×{count}", cropId=crop_id, count=count, cost=price)

    def buy_fertilizer(self, user_id: str, count: int = 1) -> ActionResult:
        if count < 1:
            return failure(Reason.INVALID_AMOUNT, '数量必须大于0')
        price = int(self.config.get('fertilizer_cost', 50)) * count
        with self.farm.locked(user_id) as farm:
            if farm.coins < price:
                return failure(Reason.INSUFFICIENT_COINS, '金币不足')
            farm.coins = round_coins(farm.coins - price)
            farm.fertilizer += count
            self.farm.commit(user_id, farm, '买肥料', f"购买了{count}袋肥料")
            return success(f"购买了肥料 ×{count}", count=count, cost=price)

    def sell_fruit(self, user_id: str, crop_id: str, count: int = 1) -> ActionResult:
        """出售农产品"""
        crop = self.farm.catalog.get(crop_id)
        if crop is None:
            return failure(Reason.UNKNOWN_CROP, f'未知作物: {crop_id}')
        if count < 1:
            return failure(Reason.INVALID_AMOUNT, '数量必须大于0')
        with self.farm.locked(user_id) as farm:
            if farm.fruits.get(crop_id, 0) < count:
                return failure(Reason.INSUFFICIENT_FRUITS, '农产品数量不足')
            total = crop.sell * count
            farm.fruits[crop_id] -= count
            if farm.fruits[crop_id] <= 0:
                del farm.fruits[crop_id]
            farm.coins = round_coins(farm.coins + total)
            farm.statistics.totalIncome += total
            self.farm.commit(user_id, farm, '出售农产品', f"出售了{count}个{crop.name}，获得{total}金币")
            return success(f"出售了{crop.name} ×{count}", cropId=crop_id, count=count, income=total)

    def exchange(self, user_id: str, amount: float, target: str) -> ActionResult:
        """
        金币兑换 ZETA 或奖券

        只兑换整数单位，实际花费 = 单位数 * 汇率
        """
        if target not in EXCHANGE_RATE_KEYS:
            return failure(Reason.UNKNOWN_TARGET, f'不支持的兑换目标: {target}')
        rate = int(self.config.get(EXCHANGE_RATE_KEYS[target]))
        units = int(amount // rate) if amount > 0 else 0
        if units < 1:
            return failure(Reason.INVALID_AMOUNT, f'至少需要 {rate} 金币')
        cost = units * rate
        with self.farm.locked(user_id) as farm:
            if farm.coins < cost:
                return failure(Reason.INSUFFICIENT_COINS, '金币不足')
            farm.coins = round_coins(farm.coins - cost)
            if target == 'zeta':
                farm.zeta += units
            else:
                farm.tickets += units
            self.farm.commit(user_id, farm, '兑换', f"用{cost}金币兑换了{units}{target}")
            return success('兑换成功', target=target, units=units, cost=cost)
