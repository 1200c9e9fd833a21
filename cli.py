"""
CLI interface and shared display-data computation for the
equity-cash swap calculator.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Dict, List, Optional

import numpy as np

import config as cfg
from projection import (
    CompensationInputs,
    InvalidInput,
    ProjectionSeries,
    Summary,
    project,
    round_half_away_from_zero,
)
import report
from settings import SettingsStore, format_value, load_inputs, save_inputs, settings_for

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
# Formatting helpers
# ═══════════════════════════════════════════════════════════════════

def fmt(val: float) -> str:
    """Format a monetary value as $X,XXX (whole units)."""
    whole = round_half_away_from_zero(val)
    if whole < 0:
        return f"-${-whole:,}"
    return f"${whole:,}"


def fmt_count(val: float) -> str:
    """Format an option/share count as X,XXX."""
    return f"{round_half_away_from_zero(val):,}"


def pct(val: float) -> str:
    """Percentage as entered: 50 -> '50%', 12.5 -> '12.5%'."""
    return f"{format_value(val)}%"


# ═══════════════════════════════════════════════════════════════════
# Input collection (CLI)
# ═══════════════════════════════════════════════════════════════════

PROMPTS = {
    "equity_swap_percent": ("Equity swap % of hourly rate", cfg.EQUITY_SWAP_RANGE),
    "hours_per_week": ("Hours per week", cfg.HOURS_PER_WEEK_RANGE),
    "weeks_per_year": ("Weeks per year", cfg.WEEKS_PER_YEAR_RANGE),
    "hourly_rate": ("Hourly rate ($)", None),
    "share_value": ("Share value ($)", None),
    "option_strike_price": ("Option strike price ($)", None),
    "dividend_per_share": ("Dividend per share ($/yr)", None),
    "dividend_rate": ("Dividend rate (% of share value/yr)", None),
    "growth_rate": ("Share value growth (%/yr)", None),
}


def _strip_currency(s: str) -> str:
    """Remove currency symbols, commas, spaces and percent signs."""
    return s.replace("$", "").replace(",", "").replace(" ", "").replace("%", "")


def _prompt_float(
    label: str,
    default: float,
    min_val: float | None = None,
    max_val: float | None = None,
) -> float:
    while True:
        raw = input(f"  {label} [{format_value(default)}]: ").strip()
        if not raw:
            return float(default)
        try:
            val = float(_strip_currency(raw))
        except ValueError:
            print("    Invalid number, try again.")
            continue
        if min_val is not None and val < min_val:
            print(f"    Must be at least {min_val}")
            continue
        if max_val is not None and val > max_val:
            print(f"    Must be at most {max_val}")
            continue
        return val


def collect_inputs(
    store: SettingsStore,
    dividend_mode: str = cfg.DEFAULT_DIVIDEND_MODE,
) -> CompensationInputs:
    """Prompt for every input of *dividend_mode*, defaulting to stored values."""
    print("\n  Enter your details (press Enter to keep the value shown):\n")
    current = load_inputs(store, dividend_mode)

    while True:
        values = {}
        for _, name, _ in settings_for(dividend_mode):
            label, bounds = PROMPTS[name]
            lo, hi = bounds if bounds else (None, None)
            values[name] = _prompt_float(label, getattr(current, name), lo, hi)
        try:
            return CompensationInputs(dividend_mode=dividend_mode, **values)
        except InvalidInput as exc:
            print(f"    {exc}. Please re-enter your details.\n")


# ═══════════════════════════════════════════════════════════════════
# Shared display-data computation (used by CLI, web app and charts)
# ═══════════════════════════════════════════════════════════════════

def _break_even_year(series: ProjectionSeries) -> Optional[int]:
    """First projected year in which cash + equity matches all-cash, or None."""
    hits = np.flatnonzero(series.difference >= 0)
    if len(hits) == 0:
        return None
    return int(series.years[hits[0]])


def compute_display_data(
    inputs: CompensationInputs,
    summary: Summary,
    series: ProjectionSeries,
) -> Dict[str, Any]:
    """Extract every figure needed for the summary panel, table and chart."""
    rows: List[Dict[str, Any]] = []
    for i, year in enumerate(series.years):
        rows.append({
            "year": int(year),
            "cumulative_shares": int(series.cumulative_shares[i]),
            "share_value": float(series.current_share_value[i]),
            "dividend": int(series.dividend_value[i]),
            "reduced_cash": int(series.reduced_cash_value[i]),
            "equity_total": int(series.equity_total[i]),
            "all_cash": float(series.all_cash_value[i]),
            "difference": float(series.difference[i]),
        })

    return {
        # Inputs echo
        "dividend_mode": inputs.dividend_mode,
        "equity_swap_percent": inputs.equity_swap_percent,
        "hours_per_week": inputs.hours_per_week,
        "weeks_per_year": inputs.weeks_per_year,
        "hourly_rate": inputs.hourly_rate,
        "share_value": inputs.share_value,
        "option_strike_price": inputs.option_strike_price,
        "dividend_per_share": inputs.dividend_per_share,
        "dividend_rate": inputs.dividend_rate,
        "growth_rate": inputs.growth_rate,
        # Summary panel
        "total_hours": summary.total_hours,
        "max_annual_billing": summary.max_annual_billing,
        "cash": summary.cash,
        "equity_value": summary.equity_value,
        "vested_options": summary.vested_options,
        "cash_bonus": summary.cash_bonus,
        "annual_dividend": summary.annual_dividend,
        "total_cash": summary.total_cash,
        # Projection
        "rows": rows,
        "break_even_year": _break_even_year(series),
    }


# ═══════════════════════════════════════════════════════════════════
# Box-drawing CLI output
# ═══════════════════════════════════════════════════════════════════

W = 78  # box width (characters)
H_BAR = "═"


def _box_top(title: str) -> str:
    inner = W - 2
    return (
        f"╔{H_BAR * inner}╗\n"
        f"║  {title:<{inner - 2}}║\n"
        f"╠{H_BAR * inner}╣"
    )


def _box_line(text: str = "") -> str:
    inner = W - 4
    if len(text) > inner:
        text = text[:inner]
    return f"║  {text:<{inner}}║"


def _box_row(label: str, value: str, lw: int = 38) -> str:
    return _box_line(f"{label:<{lw}}{value}")


def _box_bottom() -> str:
    return f"╚{H_BAR * (W - 2)}╝"


def _print_section(title: str, rows: List[str]) -> None:
    """Print a titled box with content rows."""
    print(_box_top(title))
    for r in rows:
        print(r)
    print(_box_bottom())
    print()


def _print_summary(d: Dict[str, Any]) -> None:
    if d["dividend_mode"] == cfg.DIVIDEND_FLAT:
        dividend_basis = f"${d['dividend_per_share']:,.2f}/share"
    else:
        dividend_basis = f"{pct(d['dividend_rate'])} of share value"
    rows = [
        _box_row("Equity swap", pct(d["equity_swap_percent"])),
        _box_row("Billable hours", f"{fmt_count(d['total_hours'])} / year"),
        _box_row("All-cash billing", f"{fmt(d['max_annual_billing'])} / year"),
        _box_line(),
        _box_row("Vested options", fmt_count(d["vested_options"])),
        _box_row("Cash", f"{fmt(d['cash'])} / year"),
        _box_row("Cash bonus to exercise options", f"{fmt(d['cash_bonus'])} / year"),
        _box_row("Annual dividend", f"{fmt(d['annual_dividend'])} / year"),
        _box_row("  Basis", dividend_basis),
        _box_line(),
        _box_row("Total cash", f"{fmt(d['total_cash'])} / year"),
    ]
    _print_section("EQUITY-CASH SWAP", rows)


def _print_projection(d: Dict[str, Any]) -> None:
    # flat dividends do not follow share value, so the column is rate-only
    show_share = d["dividend_mode"] == cfg.DIVIDEND_RATE
    header = (
        f"{'Yr':>3}  {'Shares':>9}  "
        + (f"{'Share $':>8}  " if show_share else "")
        + f"{'Dividend':>9}  {'Cash+Eq':>10}  {'All cash':>9}  {'Diff':>10}"
    )
    rows = [_box_line(header), _box_line("─" * (W - 6))]
    for r in d["rows"]:
        marker = " <<" if r["year"] == d["break_even_year"] else ""
        share = f"{r['share_value']:>8,.2f}  " if show_share else ""
        rows.append(_box_line(
            f"{r['year']:>3}  "
            f"{fmt_count(r['cumulative_shares']):>9}  "
            f"{share}"
            f"{fmt(r['dividend']):>9}  "
            f"{fmt(r['equity_total']):>10}  "
            f"{fmt(r['all_cash']):>9}  "
            f"{fmt(r['difference']):>10}"
            f"{marker}"
        ))

    rows.append(_box_line())
    if d["break_even_year"] is not None:
        rows.append(_box_line(
            f"Cash + equity catches up with all-cash in year {d['break_even_year']}."
        ))
    else:
        rows.append(_box_line(
            f"Cash + equity stays below all-cash for all {cfg.PROJECTION_YEARS} years."
        ))
    if d["dividend_mode"] == cfg.DIVIDEND_RATE:
        rows.append(_box_line(f"Share value grows {pct(d['growth_rate'])} a year."))

    _print_section("YEAR BY YEAR", rows)


# ═══════════════════════════════════════════════════════════════════
# Main CLI entry point
# ═══════════════════════════════════════════════════════════════════

def run_cli(
    store: SettingsStore,
    dividend_mode: str = cfg.DEFAULT_DIVIDEND_MODE,
    chart_path: Optional[str] = None,
) -> Dict[str, Any]:
    """Run the full CLI workflow. Returns the display data."""
    # Ensure box-drawing characters render on Windows
    try:
        sys.stdout.reconfigure(encoding="utf-8")
    except (AttributeError, OSError):
        pass
    print()
    print("=" * W)
    print("  Equity-Cash Swap Calculator")
    print("=" * W)

    while True:
        inputs = collect_inputs(store, dividend_mode)
        try:
            summary, series = project(inputs)
            break
        except InvalidInput as exc:
            print(f"    {exc}. Please re-enter your details.\n")
    save_inputs(store, inputs)
    d = compute_display_data(inputs, summary, series)

    print()
    _print_summary(d)
    _print_projection(d)

    if chart_path:
        report.save_chart(d, chart_path)
        logger.info("Chart written to %s", chart_path)
        print(f"  Chart saved to {chart_path}\n")

    return d
