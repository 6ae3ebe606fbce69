"""
操作结果 - 玩家操作的前置条件失败通过结果值返回，而不是抛异常
"""
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class Reason(str, Enum):
    """机器可读的失败原因码"""
    INVALID_PLOT = "INVALID_PLOT"
    PLOT_LOCKED = "PLOT_LOCKED"
    PLOT_OCCUPIED = "PLOT_OCCUPIED"
    NOT_PLANTED = "NOT_PLANTED"
    NOT_RIPE = "NOT_RIPE"
    HAS_PESTS = "HAS_PESTS"
    NO_PESTS = "NO_PESTS"
    NOTHING_TO_WATER = "NOTHING_TO_WATER"
    NOTHING_TO_WEED = "NOTHING_TO_WEED"
    ALREADY_FERTILIZED = "ALREADY_FERTILIZED"
    INSUFFICIENT_FERTILIZER = "INSUFFICIENT_FERTILIZER"
    INSUFFICIENT_SEEDS = "INSUFFICIENT_SEEDS"
    INSUFFICIENT_COINS = "INSUFFICIENT_COINS"
    INSUFFICIENT_TICKETS = "INSUFFICIENT_TICKETS"
    INSUFFICIENT_FRUITS = "INSUFFICIENT_FRUITS"
    LEVEL_TOO_LOW = "LEVEL_TOO_LOW"
    ALREADY_UNLOCKED = "ALREADY_UNLOCKED"
    UNKNOWN_CROP = "UNKNOWN_CROP"
    UNKNOWN_PET = "UNKNOWN_PET"
    ALREADY_OWNED = "ALREADY_OWNED"
    ALREADY_CHECKED_IN = "ALREADY_CHECKED_IN"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    UNKNOWN_ACTION = "UNKNOWN_ACTION"
    UNKNOWN_TARGET = "UNKNOWN_TARGET"
    INVALID_ARGUMENTS = "INVALID_ARGUMENTS"


class ActionResult(BaseModel):
    ok: bool
    reason: Optional[Reason] = None
    message: str = ""
    data: Dict[str, Any] = Field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.ok


def success(message: str = "", **data) -> ActionResult:
    return ActionResult(ok=True, message=message, data=data)


def failure(reason: Reason, message: str = "") -> ActionResult:
    return ActionResult(ok=False, reason=reason, message=message or reason.value)


class DataError(RuntimeError):
    """存档或配置数据损坏"""
    pass
