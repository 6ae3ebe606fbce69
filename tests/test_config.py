import json

import pytest

from farmstead.common.config_manager import ConfigManager, get_config
from farmstead.common.results import DataError


def test_singleton():
    assert ConfigManager() is get_config()
    assert ConfigManager.get_instance() is get_config()


def test_load_config_ignores_unknown_keys(config):
    config.load_config({'tick_interval': 5, 'bogus': 1})
    assert config.tick_interval == 5
    assert config.get('bogus') is None


def test_load_file(tmp_path, config):
    p = tmp_path / 'farm.json'
    p.write_text(json.dumps({'plot_count': 6, 'fertilizer_cost': 80}), encoding='utf-8')
    config.load_file(p)
    assert config.plot_count == 6
    assert config.get('fertilizer_cost') == 80

    config.reset()
    assert config.plot_count == 18


def test_load_file_errors(tmp_path, config):
    with pytest.raises(DataError):
        config.load_file(tmp_path / 'missing.json')
    p = tmp_path / 'list.json'
    p.write_text('[]', encoding='utf-8')
    with pytest.raises(DataError):
        config.load_file(p)
