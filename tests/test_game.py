import random

from farmstead.common.results import Reason
from farmstead.farm.models import Stage
from farmstead.game import FarmGame


def make_game(dm, clock, config):
    return FarmGame(data_manager=dm, clock=clock, rng=random.Random(1), config=config)


def test_dispatch_actions(dm, clock, config):
    game = make_game(dm, clock, config)
    assert 'plant' in game.actions
    assert 'draw' in game.actions

    res = game.act('p1', 'plant', plot_id=0, crop_id='radish')
    assert res.ok
    clock.advance(80)
    assert game.farm.stage_of('p1', 0) == Stage.RIPE
    assert game.act('p1', 'harvest', plot_id=0).ok
    assert game.act('p1', 'sell_fruit', crop_id='radish').data['income'] == 12
    assert game.status('p1')['coins'] == 12


def test_unknown_action(dm, clock, config):
    game = make_game(dm, clock, config)
    res = game.act('p1', 'dance')
    assert not res
    assert res.reason == Reason.UNKNOWN_ACTION


def test_login_settles_offline_earnings(dm, clock, config):
    game = make_game(dm, clock, config)
    farm = game.farm.load_farm('p1')
    farm.pets['bunny'] = True
    farm.lastLogin = clock()
    game.farm.save_farm('p1')
    game.logout('p1')
    assert 'p1' not in game.farm.loaded_users()

    clock.advance(48 * 3600)
    res = game.login('p1')
    assert res.data['coins'] == 50
    assert game.status('p1')['coins'] == 50


def test_render_status(dm, clock, config):
    game = make_game(dm, clock, config)
    html = game.render_status('p1')
    assert 'stage-empty' in html


def test_bad_payload_is_rejected(dm, clock, config):
    game = make_game(dm, clock, config)
    res = game.act('p1', 'plant', plotId=0, cropId='radish')
    assert res.reason == Reason.INVALID_ARGUMENTS
    assert game.act('p1', 'plant', plot_id=0).reason == Reason.INVALID_ARGUMENTS
    assert game.act('p1', 'water', plot_id=0, extra=1).reason == Reason.INVALID_ARGUMENTS
    # 参数错误不会修改存档
    assert game.status('p1')['inventory'] == {'radish': 1}
    assert game.act('p1', 'plant', plot_id=0, crop_id='radish').ok
