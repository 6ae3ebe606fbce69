import random

import pytest

from farmstead.common.clock import FixedClock
from farmstead.common.config_manager import get_config
from farmstead.common.data_manager import DataManager
from farmstead.farm.logic import FarmLogic

START = 1000


@pytest.fixture(autouse=True)
def config():
    cfg = get_config()
    cfg.reset()
    # 虫害随机性会干扰阶段断言，需要时单独打开
    cfg.load_config({'pest_probability': 0.0})
    yield cfg
    cfg.reset()


@pytest.fixture
def clock():
    return FixedClock(START)


@pytest.fixture
def dm(tmp_path):
    return DataManager(base_path=tmp_path)


@pytest.fixture
def farm_logic(dm, clock, config):
    return FarmLogic(data_manager=dm, clock=clock, rng=random.Random(7), config=config)
