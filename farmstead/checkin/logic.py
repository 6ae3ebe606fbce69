"""
每日签到
"""
import logging
import random
from typing import List, Optional, Tuple

from ..common.clock import date_str, year_month_str
from ..common.results import ActionResult, Reason, failure, success
from ..farm.logic import FarmLogic

logger = logging.getLogger(__name__)

# (金币, 概率)，期望约 0.9 金币
DAILY_CHECKIN_REWARDS: List[Tuple[float, float]] = [
    (0.1, 0.55),
    (0.5, 0.30),
    (1, 0.08),
    (3, 0.04),
    (10, 0.025),
    (50, 0.005),
]


def roll_reward(rng: random.Random) -> float:
    r = rng.random()
    cumulative = 0.0
    for coins, prob in DAILY_CHECKIN_REWARDS:
        cumulative += prob
        if r <= cumulative:
            return coins
    return DAILY_CHECKIN_REWARDS[0][0]


class CheckinLogic:
    def __init__(self, farm: FarmLogic, rng: Optional[random.Random] = None):
        self.farm = farm
        self.rng = rng or farm.rng

    def has_checked_in_today(self, user_id: str) -> bool:
        with self.farm.locked(user_id) as farm:
            return farm.checkinLastDate == date_str(self.farm.clock())

    def checked_days_this_month(self, user_id: str) -> int:
        with self.farm.locked(user_id) as farm:
            return len(farm.checkinRecords.get(year_month_str(self.farm.clock()), []))

    def checkin(self, user_id: str) -> ActionResult:
        now = self.farm.clock()
        today = date_str(now)
        with self.farm.locked(user_id) as farm:
            if farm.checkinLastDate == today:
                return failure(Reason.ALREADY_CHECKED_IN, '今天已经签到过了')
            reward = roll_reward(self.rng)
            farm.coins = round(farm.coins + reward, 2)
            farm.checkinLastDate = today
            days = farm.checkinRecords.setdefault(year_month_str(now), [])
            day = int(today[-2:])
            if day not in days:
                days.append(day)
            self.farm.commit(user_id, farm, '签到', f"签到获得{reward}金币")
            return success(f"签到成功，获得 {reward} 金币", coins=reward, day=day)
