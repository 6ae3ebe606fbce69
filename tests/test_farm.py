import json

import pytest

from farmstead.common.results import DataError
from farmstead.farm.logic import FarmLogic
from farmstead.farm.models import Requirement, Stage

PERSISTED_PLOT_FIELDS = {
    'id', 'unlocked', 'cropId', 'plantedAt', 'pausedDuration', 'pausedAt',
    'fertilized', 'pests', 'waterRequirements', 'weedRequirements',
}


def test_create_default_farm(farm_logic, dm, config):
    farm = farm_logic.load_farm('u1')
    assert len(farm.plots) == config.plot_count
    assert [p.unlocked for p in farm.plots[:2]] == [True, False]
    assert farm.inventory == {'radish': 1}
    # 新存档立即落盘
    assert dm.load_user('u1') is not None
    assert 'u1' in farm_logic.loaded_users()


def test_saved_layout_excludes_derived_fields(farm_logic, dm):
    farm_logic.plant('u1', 0, 'radish')
    farm_logic.load_farm('u1').plots[0].hasWeeds = True
    farm_logic.save_farm('u1')
    raw = dm.load_user('u1')
    plot = raw['plots'][0]
    assert set(plot) == PERSISTED_PLOT_FIELDS
    assert plot['cropId'] == 'radish'


def test_reload_from_disk(farm_logic, dm, clock, config):
    farm_logic.plant('u1', 0, 'radish')
    farm_logic.unload('u1')
    other = FarmLogic(data_manager=dm, clock=clock, config=config)
    farm = other.load_farm('u1')
    assert farm.plots[0].cropId == 'radish'
    assert farm.plots[0].plantedAt == clock()
    assert farm.statistics.plantsGrown == 1


def test_corrupt_save_raises(farm_logic, dm):
    (dm.saves_dir / 'bad.json').write_text('{not json', encoding='utf-8')
    with pytest.raises(DataError):
        farm_logic.load_farm('bad')


def test_invalid_schema_raises(farm_logic, dm):
    dm.save_user('odd', {'plots': 'nope'})
    with pytest.raises(DataError):
        farm_logic.load_farm('odd')


def test_log_is_trimmed(farm_logic, config):
    config.load_config({'log_limit': 3})
    farm = farm_logic.load_farm('u1')
    farm.inventory['radish'] = 10
    for _ in range(5):
        farm_logic.plant('u1', 0, 'radish')
        farm_logic.shovel('u1', 0)
    log = farm_logic.view_farm_log('u1')
    assert len(log) == 3
    assert log[-1]['action'] == '铲除'
    assert {'date', 'action', 'description'} <= set(log[0])


def test_tick_all_skips_unknown_crop(farm_logic, clock, caplog):
    farm = farm_logic.load_farm('u1')
    bad = farm.plots[0]
    bad.cropId = 'ghost'
    bad.plantedAt = clock()
    good = farm.plots[1]
    good.unlocked = True
    good.cropId = 'radish'
    good.plantedAt = clock()
    good.waterRequirements = [Requirement(triggerTime=0)]

    with caplog.at_level('ERROR'):
        assert farm_logic.tick_all() == 1
        farm_logic.tick_all()
    assert sum('ghost' in r.getMessage() for r in caplog.records) == 1
    assert good.pausedDuration == 2
    assert farm_logic.stage_of('u1', 0) == Stage.ERROR


def test_flush_writes_dirty_saves(farm_logic, dm, clock):
    farm_logic.plant('u1', 0, 'radish')
    farm_logic.load_farm('u1').plots[0].waterRequirements = [Requirement(triggerTime=0)]
    assert farm_logic.flush() == 0

    farm_logic.tick_all()
    assert dm.load_user('u1')['plots'][0]['pausedDuration'] == 0
    assert farm_logic.flush() == 1
    assert dm.load_user('u1')['plots'][0]['pausedDuration'] == 1
    assert farm_logic.flush() == 0


def test_view_farm_status(farm_logic):
    farm_logic.plant('u1', 0, 'radish')
    status = farm_logic.view_farm_status('u1')
    assert status['level'] == 1
    assert status['plots'][0]['stage'] == 'SEED'
    assert status['plots'][1]['unlocked'] is False
    assert status['statistics']['plantsGrown'] == 1
    assert status['pets'] == []


def test_save_file_is_json(farm_logic, dm):
    farm_logic.load_farm('u1')
    data = json.loads((dm.saves_dir / 'u1.json').read_text(encoding='utf-8'))
    assert data['coins'] == 0
