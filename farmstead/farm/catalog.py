"""
作物目录 - 只读的作物定义（时间单位：秒）
"""
import json
import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ..common.results import DataError

logger = logging.getLogger(__name__)

# 种植和收获是 1:1
YIELD_PER_HARVEST = 1


class CropDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    cost: int
    sell: int
    exp: int
    stages: Tuple[int, int, int]   # 到达 发芽/生长/成熟 的累计秒数
    witherAfter: int               # 成熟后多少秒枯萎
    levelReq: int
    emoji: str = ""

    @field_validator('stages')
    @classmethod
    def _check_stages(cls, v):
        t1, t2, t3 = v
        if not (0 <= t1 <= t2 <= t3):
            raise ValueError(f"stages must be ascending: {v}")
        if t3 <= 0:
            raise ValueError("ripen time must be positive")
        return v

    @field_validator('witherAfter', 'levelReq')
    @classmethod
    def _check_positive(cls, v):
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    @property
    def ripe_at(self) -> int:
        return self.stages[2]

    @property
    def wither_at(self) -> int:
        return self.stages[2] + self.witherAfter

    @property
    def yield_per_harvest(self) -> int:
        return YIELD_PER_HARVEST


# 18 种作物
_SEED_TABLE = [
    # id, 名称, 成本, 售价, 经验, 阶段, 枯萎, 等级, emoji
    ("radish", "白萝卜", 6, 12, 3, (25, 50, 75), 60, 1, "🥕"),
    ("strawberry", "草莓", 8, 18, 8, (50, 100, 150), 120, 2, "🍓"),
    ("corn", "玉米", 10, 25, 13, (100, 200, 300), 180, 3, "🌽"),
    ("grape", "葡萄", 18, 50, 23, (200, 400, 600), 300, 4, "🍇"),
    ("tomato", "番茄", 22, 70, 28, (400, 800, 1200), 480, 5, "🍅"),
    ("blueberry", "蓝莓", 30, 108, 38, (525, 1050, 1575), 600, 6, "🫐"),
    ("pumpkin", "南瓜", 42, 168, 53, (1050, 2100, 3150), 900, 7, "🎃"),
    ("pineapple", "菠萝", 58, 255, 73, (2100, 4200, 6300), 1200, 8, "🍍"),
    ("coffee", "咖啡豆", 80, 384, 80, (4200, 8400, 12600), 1800, 9, "☕"),
    ("cocoa", "可可豆", 110, 583, 110, (7200, 14400, 21600), 2400, 10, "🍫"),
    ("tea", "茶叶", 140, 812, 140, (10800, 21600, 32400), 2700, 11, "🍵"),
    ("chili", "辣椒", 160, 1008, 160, (14400, 28800, 43200), 3000, 12, "🌶️"),
    ("rice", "水稻", 190, 1292, 190, (21600, 43200, 64800), 3300, 13, "🍚"),
    ("wheat", "小麦", 220, 1628, 220, (24960, 49920, 74880), 3480, 14, "🌾"),
    ("peach", "桃子", 260, 2054, 260, (28080, 56160, 112320), 3540, 15, "🍑"),
    ("pear", "梨子", 300, 2520, 300, (56160, 112320, 168480), 3570, 16, "🍐"),
    ("mango", "芒果", 360, 3132, 360, (72000, 144000, 216000), 3590, 17, "🥭"),
    ("cherry", "樱桃", 420, 3780, 420, (108000, 216000, 324000), 3600, 18, "🍒"),
]

SEEDS: Dict[str, CropDefinition] = {
    row[0]: CropDefinition(
        id=row[0], name=row[1], cost=row[2], sell=row[3], exp=row[4],
        stages=row[5], witherAfter=row[6], levelReq=row[7], emoji=row[8],
    )
    for row in _SEED_TABLE
}


class CropCatalog:
    """按作物ID查询作物定义"""

    def __init__(self, crops: Optional[Dict[str, CropDefinition]] = None):
        self._crops: Dict[str, CropDefinition] = dict(SEEDS if crops is None else crops)

    def get(self, crop_id: Optional[str]) -> Optional[CropDefinition]:
        if crop_id is None:
            return None
        return self._crops.get(crop_id)

    def __contains__(self, crop_id) -> bool:
        return crop_id in self._crops

    def __iter__(self) -> Iterator[CropDefinition]:
        return iter(self._crops.values())

    def __len__(self) -> int:
        return len(self._crops)

    def ids(self) -> List[str]:
        return list(self._crops)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> 'CropCatalog':
        """
        从 JSON 文件加载作物目录

        格式: {"seeds": [{"id": "radish", "name": ..., "stages": [25, 50, 75], ...}]}
        """
        p = Path(path)
        try:
            raw = json.loads(p.read_text(encoding='utf-8'))
        except (OSError, json.JSONDecodeError) as e:
            raise DataError(f"读取作物目录失败 {p}: {e}") from e
        crops = {}
        for item in raw.get('seeds', []):
            try:
                crop = CropDefinition(**item)
            except ValidationError as e:
                raise DataError(f"作物定义无效 {item.get('id')}: {e}") from e
            crops[crop.id] = crop
        logger.info(f"已加载 {len(crops)} 种作物: {p}")
        return cls(crops)


def default_catalog() -> CropCatalog:
    return CropCatalog()
