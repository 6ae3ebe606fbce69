from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class Stage(str, Enum):
    EMPTY = "EMPTY"
    SEED = "SEED"
    SPROUT = "SPROUT"
    GROWING = "GROWING"
    RIPE = "RIPE"
    WITHER = "WITHER"
    ERROR = "ERROR"          # 地块引用了未知作物


# 正常生长顺序
STAGE_ORDER = [Stage.EMPTY, Stage.SEED, Stage.SPROUT, Stage.GROWING, Stage.RIPE, Stage.WITHER]


class Requirement(BaseModel):
    """浇水或除草需求，triggerTime 为种植后的有效生长秒数"""
    triggerTime: int
    done: bool = False


class Plot(BaseModel):
    id: int
    unlocked: bool = False
    cropId: Optional[str] = None
    plantedAt: Optional[int] = None
    pausedDuration: int = 0
    pausedAt: Optional[int] = None
    fertilized: bool = False
    pests: bool = False
    waterRequirements: List[Requirement] = Field(default_factory=list)
    weedRequirements: List[Requirement] = Field(default_factory=list)
    # 装饰性杂草，不影响生长，不持久化
    hasWeeds: bool = Field(default=False, exclude=True)

    @property
    def planted(self) -> bool:
        return self.cropId is not None and self.plantedAt is not None

    def clear(self):
        """清空作物占用字段（收获/铲除）"""
        self.cropId = None
        self.plantedAt = None
        self.pausedDuration = 0
        self.pausedAt = None
        self.fertilized = False
        self.pests = False
        self.hasWeeds = False
        self.waterRequirements = []
        self.weedRequirements = []


class Statistics(BaseModel):
    totalHarvested: int = 0
    totalIncome: float = 0
    plantsGrown: int = 0


class FarmSave(BaseModel):
    """玩家存档"""
    coins: float = 0
    zeta: float = 0
    tickets: int = 0
    exp: int = 0
    fertilizer: int = 0
    plots: List[Plot] = Field(default_factory=list)
    inventory: Dict[str, int] = Field(default_factory=dict)   # 种子
    fruits: Dict[str, int] = Field(default_factory=dict)      # 果实
    pets: Dict[str, bool] = Field(default_factory=dict)
    checkinLastDate: str = ""
    checkinRecords: Dict[str, List[int]] = Field(default_factory=dict)
    lastLogin: int = 0
    statistics: Statistics = Field(default_factory=Statistics)
    log: List[dict] = Field(default_factory=list)

    def plot(self, plot_id: int) -> Optional[Plot]:
        if 0 <= plot_id < len(self.plots):
            return self.plots[plot_id]
        return None


def new_farm_save(plot_count: int, starting_inventory: Dict[str, int], now: int) -> FarmSave:
    """生成默认存档：只有第一块地默认解锁"""
    return FarmSave(
        plots=[Plot(id=i, unlocked=(i == 0)) for i in range(plot_count)],
        inventory=dict(starting_inventory),
        lastLogin=now,
    )
