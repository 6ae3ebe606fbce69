"""
定时刷新驱动 - 固定间隔对所有已种植地块执行刷新

生长完全由绝对时间戳推导，漏掉的刷新不会造成阶段漂移，
只会让 pausedDuration 少计（可接受的近似）。
"""
import logging
from typing import Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .logic import FarmLogic

logger = logging.getLogger(__name__)

TICK_JOB_ID = "farm_tick"
AUTOSAVE_JOB_ID = "farm_autosave"


class TickDriver:
    def __init__(
        self,
        farm: FarmLogic,
        clock: Optional[Callable[[], int]] = None,
        interval: Optional[int] = None,
        autosave_interval: Optional[int] = None,
        scheduler: Optional[AsyncIOScheduler] = None,
    ):
        self.farm = farm
        self.clock = clock or farm.clock
        self.interval = interval or farm.config.tick_interval
        self.autosave_interval = autosave_interval or farm.config.autosave_interval
        self.scheduler = scheduler or AsyncIOScheduler()
        self.ticks = 0

    def register_jobs(self):
        self.scheduler.add_job(
            self._tick_job,
            IntervalTrigger(seconds=self.interval),
            id=TICK_JOB_ID,
            name="Farm growth tick",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self.scheduler.add_job(
            self._autosave_job,
            IntervalTrigger(seconds=self.autosave_interval),
            id=AUTOSAVE_JOB_ID,
            name="Farm autosave",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )

    def start(self):
        """需要在运行中的事件循环内调用"""
        self.register_jobs()
        self.scheduler.start()
        logger.info(f"[SCHEDULER] 刷新间隔 {self.interval}s, 自动保存间隔 {self.autosave_interval}s")

    def shutdown(self):
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        saved = self.farm.flush()
        logger.info(f"[SCHEDULER] 已停止，落盘 {saved} 个存档")

    def run_once(self, now: Optional[int] = None) -> int:
        """执行一次刷新，返回刷新的地块数"""
        ticked = self.farm.tick_all(self.clock() if now is None else now, self.interval)
        self.ticks += 1
        return ticked

    async def _tick_job(self):
        self.run_once()

    async def _autosave_job(self):
        saved = self.farm.flush()
        if saved:
            logger.debug(f"[SCHEDULER] 自动保存 {saved} 个存档")
