import random

from farmstead.checkin.logic import DAILY_CHECKIN_REWARDS, CheckinLogic, roll_reward
from farmstead.common.results import Reason

USER = 'daily'
# 月中，任何时区下加一天都还在同一个月
MID_MONTH = 1700000000


class FixedRandom(random.Random):
    def __init__(self, value):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


def test_roll_reward_tiers():
    assert roll_reward(FixedRandom(0.0)) == 0.1
    assert roll_reward(FixedRandom(0.56)) == 0.5
    assert roll_reward(FixedRandom(0.9)) == 1
    assert roll_reward(FixedRandom(0.999)) == 50


def test_reward_probabilities_sum_to_one():
    assert abs(sum(p for _, p in DAILY_CHECKIN_REWARDS) - 1.0) < 1e-9


def test_checkin_once_per_day(farm_logic, clock):
    clock.set(MID_MONTH)
    checkin = CheckinLogic(farm_logic, rng=FixedRandom(0.6))
    assert not checkin.has_checked_in_today(USER)

    res = checkin.checkin(USER)
    assert res.ok
    assert res.data['coins'] == 0.5
    assert checkin.has_checked_in_today(USER)
    assert checkin.checkin(USER).reason == Reason.ALREADY_CHECKED_IN

    clock.advance(86400)
    assert checkin.checkin(USER).ok
    assert checkin.checked_days_this_month(USER) == 2
    assert farm_logic.load_farm(USER).coins == 1.0
