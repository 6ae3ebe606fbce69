from farmstead.common.clock import fmt_time
from farmstead.farm.render import STAGE_LABELS, FarmRenderer


def test_fmt_time():
    assert fmt_time(0) == '0秒'
    assert fmt_time(-5) == '0秒'
    assert fmt_time(45) == '45秒'
    assert fmt_time(120) == '2分'
    assert fmt_time(125) == '2分5秒'


def test_render_status(farm_logic):
    farm_logic.plant('u1', 0, 'radish')
    html = FarmRenderer().render_status(farm_logic.view_farm_status('u1'))
    assert 'stage-seed' in html
    assert '白萝卜' in html
    assert STAGE_LABELS['SEED'] in html
    assert '🔒' in html


def test_render_plots_custom_labels(farm_logic, clock):
    farm_logic.plant('u1', 0, 'radish')
    clock.advance(80)
    html = FarmRenderer().render_plots(farm_logic.plot_status('u1'), labels={'RIPE': 'Ripe'})
    assert 'stage-ripe' in html
    assert 'Ripe' in html
