"""Pytest configuration for the equity-swap calculator test suite."""

import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from projection import CompensationInputs
from settings import InMemorySettingsStore


def make_inputs(**overrides):
    """Inputs matching the worked example: 20 h/wk, 30 wk/yr, $100/h, 50% swap."""
    values = dict(
        equity_swap_percent=50,
        hours_per_week=20,
        weeks_per_year=30,
        hourly_rate=100,
        share_value=10,
        option_strike_price=4,
        dividend_per_share=1,
        dividend_rate=5,
        growth_rate=20,
        dividend_mode='rate',
    )
    values.update(overrides)
    return CompensationInputs(**values)


@pytest.fixture
def inputs():
    return make_inputs()


@pytest.fixture
def store():
    return InMemorySettingsStore()
