import asyncio

from farmstead.farm import growth
from farmstead.farm.models import Requirement, Stage
from farmstead.farm.ticker import AUTOSAVE_JOB_ID, TICK_JOB_ID, TickDriver


def test_register_jobs(farm_logic):
    driver = TickDriver(farm_logic, interval=2, autosave_interval=15)
    driver.register_jobs()
    jobs = {job.id: job for job in driver.scheduler.get_jobs()}
    assert set(jobs) == {TICK_JOB_ID, AUTOSAVE_JOB_ID}
    # 重复注册会替换而不是新增
    driver.register_jobs()
    assert len(driver.scheduler.get_jobs()) == 2


def test_defaults_from_config(farm_logic, config):
    driver = TickDriver(farm_logic)
    assert driver.interval == config.tick_interval
    assert driver.autosave_interval == config.autosave_interval


def test_run_once_ticks_loaded_farms(farm_logic, clock):
    farm_logic.plant('u1', 0, 'radish')
    plot = farm_logic.load_farm('u1').plots[0]
    plot.waterRequirements = [Requirement(triggerTime=0)]
    driver = TickDriver(farm_logic)

    for _ in range(3):
        clock.advance(1)
        assert driver.run_once() == 1
    assert driver.ticks == 3
    assert plot.pausedDuration == 3


def test_jobs_run_and_shutdown_flushes(farm_logic, dm):
    farm_logic.plant('u1', 0, 'radish')
    farm_logic.load_farm('u1').plots[0].waterRequirements = [Requirement(triggerTime=0)]
    driver = TickDriver(farm_logic)

    asyncio.run(driver._tick_job())
    assert driver.ticks == 1
    driver.shutdown()
    assert dm.load_user('u1')['plots'][0]['pausedDuration'] == 1


def test_autosave_job(farm_logic, dm):
    farm_logic.plant('u1', 0, 'radish')
    farm_logic.load_farm('u1').plots[0].waterRequirements = [Requirement(triggerTime=0)]
    driver = TickDriver(farm_logic)
    driver.run_once()
    asyncio.run(driver._autosave_job())
    assert dm.load_user('u1')['plots'][0]['pausedAt'] is not None


def test_start_inside_event_loop(farm_logic):
    async def scenario():
        driver = TickDriver(farm_logic)
        driver.start()
        assert driver.scheduler.running
        driver.shutdown()
        await asyncio.sleep(0)
        return driver

    driver = asyncio.run(scenario())
    assert not driver.scheduler.running


def test_pause_holds_on_longer_interval(farm_logic, clock):
    farm_logic.plant('u1', 0, 'radish')
    plot = farm_logic.load_farm('u1').plots[0]
    plot.waterRequirements = [Requirement(triggerTime=0)]
    driver = TickDriver(farm_logic, interval=5)

    for _ in range(10):
        clock.advance(5)
        driver.run_once()
    assert plot.pausedDuration == 50
    assert growth.effective_elapsed(plot, clock()) <= driver.interval
    assert farm_logic.stage_of('u1', 0) == Stage.SEED
