from dataclasses import dataclass, asdict
from typing import Dict, List


@dataclass(frozen=True)
class Pet:
    id: str
    name: str
    emoji: str
    price: int
    coinsPerHour: float  # coinsPerHour = price / (100 * 24)，100 天回本

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data):
        return cls(**data)


PETS: List[Pet] = [
    Pet(id="cat", name="猫咪", emoji="🐱", price=100, coinsPerHour=0.041667),
    Pet(id="dog", name="小狗", emoji="🐶", price=500, coinsPerHour=0.208333),
    Pet(id="bunny", name="兔子", emoji="🐰", price=2500, coinsPerHour=1.041667),
    Pet(id="bird", name="小鸟", emoji="🐦", price=10000, coinsPerHour=4.166667),
    Pet(id="dragon", name="龙", emoji="🐉", price=50000, coinsPerHour=20.833333),
]

PETS_BY_ID: Dict[str, Pet] = {p.id: p for p in PETS}
