import logging
import math
from typing import List, Optional

from ..common.results import ActionResult, Reason, failure, success
from ..farm.logic import FarmLogic
from ..farm.models import FarmSave
from .models import PETS, PETS_BY_ID, Pet

logger = logging.getLogger(__name__)


class PetLogic:
    def __init__(self, farm: FarmLogic):
        self.farm = farm

    def list_pets(self) -> List[Pet]:
        return list(PETS)

    def get_user_pets(self, user_id: str) -> List[Pet]:
        with self.farm.locked(user_id) as farm:
            return [p for p in PETS if farm.pets.get(p.id)]

    def buy_pet(self, user_id: str, pet_id: str) -> ActionResult:
        pet = PETS_BY_ID.get(pet_id)
        if pet is None:
            return failure(Reason.UNKNOWN_PET, f'没有该宠物: {pet_id}')
        with self.farm.locked(user_id) as farm:
            if farm.pets.get(pet_id):
                return failure(Reason.ALREADY_OWNED, f'已经拥有{pet.name}')
            if farm.coins < pet.price:
                return failure(Reason.INSUFFICIENT_COINS, '金币不足')
            farm.coins = round(farm.coins - pet.price, 2)
            farm.pets[pet_id] = True
            self.farm.commit(user_id, farm, '买宠物', f"购买了{pet.name}")
            return success(f"购买了{pet.name}", petId=pet_id, cost=pet.price)

    @staticmethod
    def hourly_income(farm: FarmSave) -> float:
        return sum(p.coinsPerHour for p in PETS if farm.pets.get(p.id))

    def settle_offline_earnings(self, user_id: str, now: Optional[int] = None) -> ActionResult:
        """
        登录时一次性结算离线收益

        收益 = floor(每小时收益之和 * 离线秒数 / 3600)，并把 lastLogin 更新为现在
        """
        now = self.farm.clock() if now is None else now
        with self.farm.locked(user_id) as farm:
            elapsed = max(0, now - farm.lastLogin)
            earned = math.floor(self.hourly_income(farm) * elapsed / 3600)
            farm.lastLogin = now
            if earned > 0:
                farm.coins = round(farm.coins + earned, 2)
                self.farm.commit(user_id, farm, '离线收益',
                                 f"离线{elapsed // 3600}小时，宠物带来{earned}金币")
                logger.info(f"玩家 {user_id} 离线收益 {earned} 金币")
            else:
                self.farm.save_farm(user_id, farm)
            return success('离线收益', coins=earned, hours=elapsed // 3600)
