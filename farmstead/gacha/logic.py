"""
Gluck 抽奖 - 用奖券抽种子包
"""
import logging
import random
from typing import Dict, List, Optional

from ..common.results import ActionResult, Reason, failure, success
from ..farm.logic import FarmLogic

logger = logging.getLogger(__name__)

# prob 为累计概率，超过最后一档视为未中奖
SEED_POOLS: List[Dict] = [
    {'seeds': ['radish', 'strawberry'], 'prob': 0.35, 'minQty': 3, 'maxQty': 5},
    {'seeds': ['corn', 'grape'], 'prob': 0.55, 'minQty': 1, 'maxQty': 3},
    {'seeds': ['tomato', 'blueberry'], 'prob': 0.70, 'minQty': 1, 'maxQty': 2},
    {'seeds': ['pumpkin', 'pineapple'], 'prob': 0.82, 'minQty': 1, 'maxQty': 2},
    {'seeds': ['coffee', 'cocoa'], 'prob': 0.87, 'minQty': 1, 'maxQty': 2},
    {'seeds': ['tea', 'chili'], 'prob': 0.90, 'minQty': 1, 'maxQty': 2},
    {'seeds': ['rice', 'wheat'], 'prob': 0.90005, 'minQty': 1, 'maxQty': 1},
    {'seeds': ['peach', 'pear'], 'prob': 0.90008, 'minQty': 1, 'maxQty': 1},
    {'seeds': ['mango', 'cherry'], 'prob': 0.90009, 'minQty': 1, 'maxQty': 1},
]


def draw_once(rng: random.Random) -> Optional[Dict]:
    """抽一次，未中奖返回 None"""
    r = rng.random()
    for pool in SEED_POOLS:
        if r <= pool['prob']:
            return {
                'type': 'seed',
                'id': rng.choice(pool['seeds']),
                'qty': rng.randint(pool['minQty'], pool['maxQty']),
            }
    return None


class GachaLogic:
    def __init__(self, farm: FarmLogic, rng: Optional[random.Random] = None):
        self.farm = farm
        self.rng = rng or farm.rng

    def draw(self, user_id: str, count: int = 1) -> ActionResult:
        max_draws = int(self.farm.config.get('max_draws', 100))
        if count < 1 or count > max_draws:
            return failure(Reason.INVALID_AMOUNT, f'抽奖次数需在 1-{max_draws} 之间')
        cost = int(self.farm.config.get('draw_ticket_cost', 1)) * count
        with self.farm.locked(user_id) as farm:
            if farm.tickets < cost:
                return failure(Reason.INSUFFICIENT_TICKETS, '奖券不足')
            farm.tickets -= cost
            rewards = []
            for _ in range(count):
                reward = draw_once(self.rng)
                if reward is None:
                    continue
                farm.inventory[reward['id']] = farm.inventory.get(reward['id'], 0) + reward['qty']
                rewards.append(reward)
            gained = '，'.join(f"{r['id']}×{r['qty']}" for r in rewards) or '无'
            self.farm.commit(user_id, farm, '抽奖', f"抽奖{count}次，获得{gained}")
            return success('抽奖完成', rewards=rewards, misses=count - len(rewards), cost=cost)
