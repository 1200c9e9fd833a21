"""
Chart rendering for the equity-cash swap calculator.

Provides:
  - The year-by-year bar chart (chart_projection)
  - Base64-encoded chart images for web embedding (get_web_charts)
  - PNG export for the CLI (save_chart)

Every function takes the display-data dict built by
``cli.compute_display_data``.
"""

from __future__ import annotations

import base64
import io
from typing import Any, Dict, List

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.ticker import FuncFormatter
import numpy as np

import config as cfg

# ═══════════════════════════════════════════════════════════════════
# Style constants
# ═══════════════════════════════════════════════════════════════════

BG = "#0a101f"
CARD = "#131b2e"
TEXT = "#f1f5f9"
SLATE = "#94a3b8"
BORDER = "#1e293b"
INDIGO = "#818cf8"
INDIGO_DEEP = "#6366f1"
EMERALD = "#34d399"
EMERALD_DEEP = "#10b981"
AMBER = "#fbbf24"

WEB_W, WEB_H = 10, 6


# ═══════════════════════════════════════════════════════════════════
# Axis formatters
# ═══════════════════════════════════════════════════════════════════

def _usd_fmt(x, _):
    if abs(x) >= 1e6:
        return f"${x / 1e6:.1f}M"
    if abs(x) >= 1e3:
        return f"${x / 1e3:.0f}k"
    return f"${x:.0f}"


USD_FMT = FuncFormatter(_usd_fmt)


# ═══════════════════════════════════════════════════════════════════
# Style helpers
# ═══════════════════════════════════════════════════════════════════

def _style(fig, *axes):
    """Apply dark theme to figure and all axes."""
    fig.patch.set_facecolor(BG)
    for ax in axes:
        ax.set_facecolor(CARD)
        ax.tick_params(colors=TEXT, labelsize=8)
        ax.xaxis.label.set_color(TEXT)
        ax.yaxis.label.set_color(TEXT)
        ax.title.set_color(TEXT)
        for spine in ax.spines.values():
            spine.set_color(BORDER)
        ax.grid(True, axis="y", alpha=0.15, color=SLATE)


def _legend(ax, loc="upper left"):
    ax.legend(loc=loc, fontsize=8, facecolor=CARD, edgecolor=BORDER, labelcolor=TEXT)


# ═══════════════════════════════════════════════════════════════════
# Projection bar chart
# ═══════════════════════════════════════════════════════════════════

def chart_projection(d: Dict[str, Any], figsize=(WEB_W, WEB_H)) -> plt.Figure:
    """Grouped bars per year: all-cash vs cash + equity.

    The cash + equity bar is stacked: reduced cash (cash + exercise
    bonus) at the bottom, dividends on the accumulated options on top.
    """
    fig, ax = plt.subplots(figsize=figsize, constrained_layout=True)
    _style(fig, ax)

    rows = d["rows"]
    years = np.array([r["year"] for r in rows])
    all_cash = np.array([r["all_cash"] for r in rows])
    reduced = np.array([r["reduced_cash"] for r in rows])
    dividends = np.array([r["dividend"] for r in rows])

    w = 0.4
    ax.bar(years - w / 2, all_cash, w, color=INDIGO, label="All cash",
           edgecolor=INDIGO_DEEP, linewidth=0.5)
    ax.bar(years + w / 2, reduced, w, color=EMERALD_DEEP, label="Cash + exercise bonus",
           edgecolor=EMERALD_DEEP, linewidth=0.5)
    ax.bar(years + w / 2, dividends, w, bottom=reduced, color=EMERALD,
           label="Dividends", edgecolor=EMERALD_DEEP, linewidth=0.5)

    ax.set_xticks(years)
    ax.set_xticklabels([str(y) for y in years], fontsize=7.5)
    ax.yaxis.set_major_formatter(USD_FMT)
    ax.set_xlabel("Year")
    ax.set_ylabel("Annual cash")

    if d["dividend_mode"] == cfg.DIVIDEND_RATE:
        subtitle = f"share value growing {d['growth_rate']:g}%/yr"
    else:
        subtitle = f"flat ${d['dividend_per_share']:,.2f} dividend per share"
    ax.set_title(
        f"All Cash vs {d['equity_swap_percent']:g}% Equity Swap ({subtitle})",
        fontsize=12, pad=12,
    )

    be_year = d["break_even_year"]
    if be_year is not None:
        be_row = rows[be_year]
        ax.annotate(
            "Break-even", xy=(be_year + w / 2, be_row["equity_total"]),
            fontsize=9, color=AMBER, fontweight="bold",
            xytext=(0, 15), textcoords="offset points", ha="center",
            arrowprops=dict(arrowstyle="->", color=AMBER, lw=1.5),
        )
    _legend(ax)

    return fig


# ═══════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════

def figure_to_base64(fig: plt.Figure) -> str:
    """Convert a matplotlib figure to a base64-encoded PNG string."""
    buf = io.BytesIO()
    fig.savefig(buf, format="png", facecolor=fig.get_facecolor(),
                dpi=150, bbox_inches="tight")
    buf.seek(0)
    b64 = base64.b64encode(buf.read()).decode()
    buf.close()
    return b64


def save_chart(d: Dict[str, Any], path: str) -> str:
    """Write the projection chart as a PNG. Returns the file path."""
    fig = chart_projection(d)
    fig.savefig(path, format="png", facecolor=fig.get_facecolor(),
                dpi=150, bbox_inches="tight")
    plt.close(fig)
    return path


def get_web_charts(d: Dict[str, Any]) -> List[str]:
    """Return base64-encoded PNG chart images for web embedding.

    Returns 1 chart:
      [0] All cash vs cash + equity, year by year  (grouped/stacked bar)
    """
    chart_figs = [chart_projection(d)]

    images = [figure_to_base64(f) for f in chart_figs]
    for f in chart_figs:
        plt.close(f)
    return images
