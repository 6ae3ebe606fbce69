"""
作物需求生成（浇水、除草）
"""
import random
from typing import List, Optional

from .catalog import CropDefinition
from .models import Requirement


def watering_count(level_req: int) -> int:
    """1-3级:1次, 4-6级:2次, 7-9级:3次, 10-13级:4次, 14-18级:5次"""
    if level_req <= 3:
        return 1
    if level_req <= 6:
        return 2
    if level_req <= 9:
        return 3
    if level_req <= 13:
        return 4
    return 5


def weeding_count(level_req: int) -> int:
    """1-3级:0次, 4-6级:1次, 7-9级:2次, 10-12级:3次, 13-15级:4次, 16-18级:5次"""
    if level_req <= 3:
        return 0
    if level_req <= 6:
        return 1
    if level_req <= 9:
        return 2
    if level_req <= 12:
        return 3
    if level_req <= 15:
        return 4
    return 5


def generate(crop: CropDefinition, count: int, rng: Optional[random.Random] = None) -> List[Requirement]:
    """在 [0, 成熟时间) 内均匀随机生成 count 个需求时间点，按时间升序"""
    rng = rng or random.Random()
    times = sorted(rng.randrange(crop.ripe_at) for _ in range(max(0, count)))
    return [Requirement(triggerTime=t) for t in times]


def generate_water(crop: CropDefinition, rng: Optional[random.Random] = None) -> List[Requirement]:
    return generate(crop, watering_count(crop.levelReq), rng)


def generate_weed(crop: CropDefinition, rng: Optional[random.Random] = None) -> List[Requirement]:
    return generate(crop, weeding_count(crop.levelReq), rng)
