"""
Compensation projection engine for the equity-cash swap calculator.

Compares two ways of being paid for the same billable hours:
  A) All cash: every hour billed at the full hourly rate
  B) Cash + equity: a percentage of billing is swapped for options,
     topped up with a cash bonus to exercise them, plus dividends

``project`` is a pure function: identical inputs always give identical
outputs, nothing is mutated and nothing is persisted. The 21-year series
is vectorised with numpy.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from typing import Union

import numpy as np

import config as cfg


class InvalidInput(ValueError):
    """Raised when an input is non-finite, share value is zero, the
    dividend mode is unknown or the results overflow a float."""


# ─── Rounding ─────────────────────────────────────────────────────────

Number = Union[float, np.ndarray]


def round_half_away_from_zero(x: Number) -> Number:
    """Round to the nearest integer, ties away from zero.

    2.5 -> 3, -2.5 -> -3. Python's ``round`` and ``np.round`` both round
    ties to even, which would turn 2.5 options into 2.
    Finite scalars come back as ``int``, non-finite ones unchanged as
    ``float``. Arrays stay float64 (whole numbers), so values beyond the
    int64 range never wrap.
    """
    if isinstance(x, (int, np.integer)):
        return int(x)
    a = np.abs(np.asarray(x, dtype=float))
    floor = np.floor(a)
    # a - floor is exact in binary floating point, so the tie test is too
    rounded = np.copysign(floor + (a - floor >= 0.5), x)
    if np.ndim(rounded) == 0:
        return int(rounded) if math.isfinite(rounded) else float(rounded)
    return rounded


# ─── Data Classes ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class CompensationInputs:
    """User inputs for one calculation."""

    equity_swap_percent: float       # % of billing converted to equity
    hours_per_week: float            # billable hours per week
    weeks_per_year: float            # billable weeks per year
    hourly_rate: float               # billing rate per hour
    share_value: float               # current value per share/option
    option_strike_price: float       # exercise price per option
    dividend_per_share: float = cfg.DEFAULT_DIVIDEND_PER_SHARE  # flat mode
    dividend_rate: float = cfg.DEFAULT_DIVIDEND_RATE            # rate mode, %
    growth_rate: float = cfg.DEFAULT_GROWTH_RATE                # annual %, compounding
    dividend_mode: str = cfg.DEFAULT_DIVIDEND_MODE

    def __post_init__(self) -> None:
        if self.dividend_mode not in cfg.DIVIDEND_MODES:
            raise InvalidInput(
                f"Dividend mode must be one of {', '.join(cfg.DIVIDEND_MODES)}"
            )
        for f in fields(self):
            if f.name == "dividend_mode":
                continue
            value = getattr(self, f.name)
            label = cfg.FIELD_LABELS[f.name]
            try:
                finite = math.isfinite(value)
            except TypeError:
                raise InvalidInput(f"{label} must be a number") from None
            if not finite:
                raise InvalidInput(f"{label} must be a finite number")
        if self.share_value == 0:
            raise InvalidInput("Share value must not be zero")


@dataclass
class Summary:
    """Single-year figures. Monetary outputs are rounded, the
    intermediate billing and equity values keep full precision."""

    total_hours: float
    max_annual_billing: float
    cash: int
    equity_value: float
    vested_options: int
    cash_bonus: int                  # cash needed to exercise the vested options
    annual_dividend: int
    total_cash: int


@dataclass
class ProjectionSeries:
    """Year-by-year projection; every array has PROJECTION_YEARS + 1 entries."""

    years: np.ndarray = field(repr=False)
    all_cash_value: np.ndarray = field(repr=False)       # constant, unrounded
    reduced_cash_value: np.ndarray = field(repr=False)   # cash + cash bonus
    cumulative_shares: np.ndarray = field(repr=False)    # (year + 1) * vested options
    current_share_value: np.ndarray = field(repr=False)
    dividend_value: np.ndarray = field(repr=False)       # rounded per year
    equity_total: np.ndarray = field(repr=False)
    difference: np.ndarray = field(repr=False)           # equity_total - all_cash_value


# ─── Core Calculation ────────────────────────────────────────────────

def _fits_float(value) -> bool:
    try:
        return math.isfinite(value)
    except OverflowError:            # int beyond float range
        return False


def summarize(inputs: CompensationInputs) -> Summary:
    """Compute the instantaneous summary figures."""
    total_hours = inputs.hours_per_week * inputs.weeks_per_year
    max_annual_billing = total_hours * inputs.hourly_rate

    swap = inputs.equity_swap_percent / 100
    cash = round_half_away_from_zero(max_annual_billing * (1 - swap))
    equity_value = max_annual_billing * swap

    vested_options = round_half_away_from_zero(equity_value / inputs.share_value)
    cash_bonus = round_half_away_from_zero(vested_options * inputs.option_strike_price)

    if inputs.dividend_mode == cfg.DIVIDEND_FLAT:
        annual_dividend = round_half_away_from_zero(vested_options * inputs.dividend_per_share)
    else:
        annual_dividend = round_half_away_from_zero(
            vested_options * inputs.share_value * inputs.dividend_rate / 100
        )

    total_cash = cash + cash_bonus + annual_dividend
    figures = (cash, vested_options, cash_bonus, annual_dividend, cash + cash_bonus, total_cash)
    if not all(_fits_float(v) for v in figures):
        raise InvalidInput("Inputs are too large to calculate with")

    return Summary(
        total_hours=total_hours,
        max_annual_billing=max_annual_billing,
        cash=cash,
        equity_value=equity_value,
        vested_options=vested_options,
        cash_bonus=cash_bonus,
        annual_dividend=annual_dividend,
        total_cash=total_cash,
    )


def project_series(inputs: CompensationInputs, summary: Summary) -> ProjectionSeries:
    """Project the summary forward over years 0..PROJECTION_YEARS.

    Options accrue as the same flat grant every year and share value
    compounds at ``growth_rate``. This is a simplification, not a vesting
    or dilution model, and is kept exactly as is.
    """
    n = cfg.PROJECTION_YEARS + 1
    years = np.arange(n)

    all_cash = np.full(n, summary.max_annual_billing, dtype=float)
    reduced_cash = np.full(n, float(summary.cash + summary.cash_bonus))
    cumulative_shares = np.cumsum(np.full(n, float(summary.vested_options)))
    # overflow shows up as inf/nan and is rejected below
    with np.errstate(over="ignore", invalid="ignore"):
        current_share_value = inputs.share_value * (1 + inputs.growth_rate / 100) ** years

        if inputs.dividend_mode == cfg.DIVIDEND_FLAT:
            dividend_value = round_half_away_from_zero(
                cumulative_shares * inputs.dividend_per_share
            )
        else:
            dividend_value = round_half_away_from_zero(
                cumulative_shares * current_share_value * inputs.dividend_rate / 100
            )

        equity_total = reduced_cash + dividend_value
        difference = equity_total - all_cash
    if not (np.all(np.isfinite(equity_total)) and np.all(np.isfinite(difference))):
        raise InvalidInput(
            f"Inputs are too large to project over {cfg.PROJECTION_YEARS} years"
        )

    return ProjectionSeries(
        years=years,
        all_cash_value=all_cash,
        reduced_cash_value=reduced_cash,
        cumulative_shares=cumulative_shares,
        current_share_value=current_share_value,
        dividend_value=dividend_value,
        equity_total=equity_total,
        difference=difference,
    )


def project(inputs: CompensationInputs) -> tuple[Summary, ProjectionSeries]:
    """Compute the summary and the 21-year projection for *inputs*."""
    summary = summarize(inputs)
    return summary, project_series(inputs, summary)
