import json
import logging

import pytest

import config as cfg
from conftest import make_inputs
from settings import (
    InMemorySettingsStore,
    JsonFileSettingsStore,
    format_value,
    load_inputs,
    parse_value,
    save_inputs,
    settings_keys,
)


def test_absent_key_returns_default(store):
    assert store.get('hourlyRate', 100) == 100


def test_stored_zero_is_kept():
    store = InMemorySettingsStore({'equitySwap': '0'})
    assert store.get('equitySwap', 25) == 0


@pytest.mark.parametrize('raw', ['abc', '', 'NaN', 'Infinity', '12px'])
def test_unparseable_value_falls_back_to_default(raw, caplog):
    store = InMemorySettingsStore({'hourlyRate': raw})
    with caplog.at_level(logging.WARNING, logger='settings'):
        assert store.get('hourlyRate', 100) == 100
    assert 'hourlyRate' in caplog.text


def test_set_stores_decimal_text(store):
    store.set('hoursPerWeek', 20.0)
    store.set('hourlyRate', 87.5)
    assert store.data == {'hoursPerWeek': '20', 'hourlyRate': '87.5'}


@pytest.mark.parametrize('value, text', [(20, '20'), (20.0, '20'), (0.1, '0.1'), (-3.25, '-3.25')])
def test_format_value(value, text):
    assert format_value(value) == text


def test_parse_value():
    assert parse_value('12.5') == 12.5
    assert parse_value(None) is None
    assert parse_value('nope') is None


def test_settings_keys_per_mode():
    common = ['equitySwap', 'hoursPerWeek', 'weeksPerYear', 'hourlyRate',
              'shareValue', 'optionStrikePrice']
    assert settings_keys('flat') == common + ['dividendPerShare']
    assert settings_keys('rate') == common + ['dividendRate', 'growthRate']
    with pytest.raises(ValueError):
        settings_keys('weekly')


def test_load_inputs_uses_defaults_when_empty(store):
    inputs = load_inputs(store)
    assert inputs.equity_swap_percent == cfg.DEFAULT_EQUITY_SWAP
    assert inputs.hours_per_week == cfg.DEFAULT_HOURS_PER_WEEK
    assert inputs.weeks_per_year == cfg.DEFAULT_WEEKS_PER_YEAR
    assert inputs.hourly_rate == cfg.DEFAULT_HOURLY_RATE
    assert inputs.share_value == cfg.DEFAULT_SHARE_VALUE
    assert inputs.option_strike_price == cfg.DEFAULT_OPTION_STRIKE_PRICE
    assert inputs.dividend_rate == cfg.DEFAULT_DIVIDEND_RATE
    assert inputs.growth_rate == cfg.DEFAULT_GROWTH_RATE
    assert inputs.dividend_mode == 'rate'


def test_save_then_load_flat_mode(store):
    original = make_inputs(dividend_mode='flat', dividend_per_share=0.75, equity_swap_percent=0)
    save_inputs(store, original)
    assert set(store.data) == set(settings_keys('flat'))
    loaded = load_inputs(store, 'flat')
    assert loaded.dividend_per_share == 0.75
    # zero swap survives the round trip instead of reverting to a default
    assert loaded.equity_swap_percent == 0


def test_save_rate_mode_writes_rate_keys_only(store):
    save_inputs(store, make_inputs(growth_rate=7))
    assert 'dividendPerShare' not in store.data
    assert store.data['growthRate'] == '7'
    assert store.data['dividendRate'] == '5'


def test_stored_zero_share_value_falls_back_to_defaults(caplog):
    store = InMemorySettingsStore({'shareValue': '0', 'hourlyRate': '250'})
    with caplog.at_level(logging.WARNING, logger='settings'):
        inputs = load_inputs(store)
    assert inputs.share_value == cfg.DEFAULT_SHARE_VALUE
    assert inputs.hourly_rate == cfg.DEFAULT_HOURLY_RATE
    assert 'using defaults' in caplog.text


def test_json_store_persists_across_instances(tmp_path):
    path = tmp_path / 'settings.json'
    first = JsonFileSettingsStore(str(path))
    first.set('hourlyRate', 120)
    first.set('equitySwap', 0)

    with open(path, encoding='utf-8') as fh:
        assert json.load(fh) == {'equitySwap': '0', 'hourlyRate': '120'}

    second = JsonFileSettingsStore(str(path))
    assert second.get('hourlyRate', 100) == 120
    assert second.get('equitySwap', 10) == 0


def test_json_store_missing_file_is_empty(tmp_path):
    store = JsonFileSettingsStore(str(tmp_path / 'absent.json'))
    assert store.get('shareValue', 10) == 10


@pytest.mark.parametrize('content', ['{not json', '[1, 2, 3]'])
def test_json_store_corrupt_file_is_empty(tmp_path, caplog, content):
    path = tmp_path / 'settings.json'
    path.write_text(content, encoding='utf-8')
    store = JsonFileSettingsStore(str(path))
    with caplog.at_level(logging.WARNING, logger='settings'):
        assert store.get('shareValue', 10) == 10
    assert str(path) in caplog.text
