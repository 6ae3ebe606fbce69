import asyncio

import pytest

from farmstead.common.data_manager import DataManager
from farmstead.common.results import DataError


def test_save_and_load(tmp_path):
    dm = DataManager(base_path=tmp_path)
    assert dm.load_user('nobody') is None
    dm.save_user('u1', {'coins': 10, 'name': '农夫'})
    assert dm.load_user('u1') == {'coins': 10, 'name': '农夫'}
    assert not list(dm.saves_dir.glob('*.tmp'))
    assert dm.get_data_path() == tmp_path


def test_async_save_and_load(tmp_path):
    dm = DataManager(base_path=tmp_path)

    async def roundtrip():
        await dm.async_save_user('a', {'x': 1})
        return await dm.async_load_user('a')

    assert asyncio.run(roundtrip()) == {'x': 1}
    assert asyncio.run(dm.async_load_user('missing')) is None


def test_list_and_delete(tmp_path):
    dm = DataManager(base_path=tmp_path)
    dm.save_user('b', {})
    dm.save_user('a', {})
    assert dm.list_users() == ['a', 'b']
    assert dm.delete_user('a')
    assert not dm.delete_user('a')
    assert dm.list_users() == ['b']


def test_corrupt_file(tmp_path):
    dm = DataManager(base_path=tmp_path)
    (dm.saves_dir / 'x.json').write_text('[1, 2]', encoding='utf-8')
    with pytest.raises(DataError):
        dm.load_user('x')
    (dm.saves_dir / 'y.json').write_text('{oops', encoding='utf-8')
    with pytest.raises(DataError):
        asyncio.run(dm.async_load_user('y'))
