"""
Flask web application for the equity-cash swap calculator.

Single-file app using render_template_string.  Run via ``python main.py``
which starts the dev server on localhost:5000.

Two entry points share one template and one engine:
  /      dividends as a rate of (growing) share value, with growth input
  /flat  dividends as a flat amount per share
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Optional

from flask import Flask, current_app, render_template_string, request

import config as cfg
from projection import CompensationInputs, InvalidInput, project
from settings import (
    JsonFileSettingsStore,
    SettingsStore,
    format_value,
    load_inputs,
    save_inputs,
    settings_for,
)
from cli import compute_display_data, fmt, fmt_count
import report

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════
# Form parsing
# ═══════════════════════════════════════════════════════════════════

def _parse_number(s: Optional[str]) -> float:
    """Coerce form text like a browser number field.

    Blank text is 0 and unparseable text (including "$5" or "1,200")
    is NaN; the NaN is then rejected when the inputs are built.
    """
    text = (s or "").strip()
    if not text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        return math.nan


def parse_form(form: Dict[str, str], dividend_mode: str) -> CompensationInputs:
    """Parse the HTML form into CompensationInputs.

    Fields missing from the form take their configured default. Raises
    InvalidInput for NaN/infinite values or a zero share value.
    """
    values = {}
    for key, name, default in settings_for(dividend_mode):
        values[name] = _parse_number(form[key]) if key in form else float(default)
    return CompensationInputs(dividend_mode=dividend_mode, **values)


# ═══════════════════════════════════════════════════════════════════
# HTML Template
# ═══════════════════════════════════════════════════════════════════

HTML_TEMPLATE = r"""
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Equity-Cash Swap Calculator</title>
<link rel="preconnect" href="https://fonts.googleapis.com">
<link rel="preconnect" href="https://fonts.gstatic.com" crossorigin>
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700;800&display=swap" rel="stylesheet">
<style>
  *{margin:0;padding:0;box-sizing:border-box}

  :root{
    --bg-deep:#050816;
    --bg-surface:rgba(15,23,42,0.55);
    --bg-input:rgba(8,11,22,0.85);
    --border-subtle:rgba(99,102,241,0.1);
    --border-hover:rgba(99,102,241,0.25);
    --text-primary:#f1f5f9;
    --text-secondary:#94a3b8;
    --text-muted:#64748b;
    --indigo:#818cf8;
    --indigo-deep:#6366f1;
    --violet:#8b5cf6;
    --emerald:#34d399;
    --amber:#fbbf24;
    --red:#f87171;
    --radius-lg:16px;
    --radius-md:10px;
  }

  body{
    background:var(--bg-deep);color:var(--text-primary);
    font-family:'Inter',system-ui,-apple-system,sans-serif;
    line-height:1.6;min-height:100vh;
  }

  .container{max-width:960px;margin:0 auto;padding:2rem 1.5rem}

  /* ── hero header ── */
  .hero{text-align:center;padding:1.5rem 0 2rem}
  .hero h1{
    font-size:clamp(1.5rem,4vw,2.3rem);font-weight:800;
    letter-spacing:-.035em;line-height:1.15;
    background:linear-gradient(135deg,#e2e8f0 0%,#818cf8 45%,#34d399 100%);
    -webkit-background-clip:text;-webkit-text-fill-color:transparent;
    background-clip:text;
  }
  .hero-sub{color:var(--text-secondary);margin-top:.6rem;font-size:.92rem}
  .mode-links{margin-top:.8rem;font-size:.82rem}
  .mode-links a{color:var(--text-muted);text-decoration:none;margin:0 .5rem}
  .mode-links a.active{color:var(--indigo);font-weight:600}

  /* ── glass cards ── */
  .card{
    background:var(--bg-surface);
    backdrop-filter:blur(24px);-webkit-backdrop-filter:blur(24px);
    border:1px solid var(--border-subtle);
    border-radius:var(--radius-lg);padding:1.8rem;
    margin-bottom:1.4rem;
    transition:border-color .3s,box-shadow .3s;
  }
  .card:hover{border-color:var(--border-hover);box-shadow:0 8px 40px rgba(99,102,241,.06)}
  h2{font-size:1.1rem;font-weight:700;margin-bottom:1.1rem;letter-spacing:-.015em}

  /* ── form ── */
  .slider-group{margin-bottom:1.2rem}
  .slider-group label,.form-group label{
    display:block;font-size:.8rem;color:var(--text-secondary);
    margin-bottom:.35rem;font-weight:500;
  }
  .slider-row{display:flex;align-items:center;gap:1rem}
  .slider-row input[type=range]{flex:1;accent-color:var(--indigo-deep)}
  .slider-row .unit{color:var(--text-secondary);font-size:.85rem;width:2.2rem}
  input[type=number],input[type=text]{
    background:var(--bg-input);
    border:1px solid rgba(71,85,105,.35);border-radius:var(--radius-md);
    color:var(--text-primary);padding:.5rem .75rem;font-size:.88rem;
    font-family:inherit;
  }
  input:focus{outline:none;border-color:var(--indigo-deep);box-shadow:0 0 0 3px rgba(99,102,241,.12)}
  .slider-row input[type=number]{width:5.5rem;text-align:right}
  .form-grid{
    display:grid;grid-template-columns:repeat(auto-fill,minmax(200px,1fr));
    gap:1rem 1.5rem;margin-top:1rem;
  }
  .form-group input{width:100%}
  details summary{cursor:pointer;color:var(--indigo);font-size:.88rem;margin-top:.4rem}

  .btn{
    display:inline-flex;align-items:center;justify-content:center;
    padding:.7rem 1.8rem;border:none;border-radius:var(--radius-md);
    font-size:.95rem;font-weight:600;cursor:pointer;font-family:inherit;
    background:linear-gradient(135deg,var(--indigo-deep),var(--violet));
    color:#fff;box-shadow:0 4px 20px rgba(99,102,241,.3);margin-top:1.2rem;
  }

  .error{
    background:rgba(248,113,113,.08);border:1px solid rgba(248,113,113,.3);
    border-radius:var(--radius-md);padding:.75rem 1rem;margin-bottom:1.2rem;
    font-size:.86rem;color:var(--red);
  }

  /* ── stat rows ── */
  .stat-row{
    display:flex;justify-content:space-between;align-items:center;
    padding:.5rem 0;border-bottom:1px solid rgba(51,65,85,.3);
  }
  .stat-row:last-child{border-bottom:none}
  .stat-row.total{border-top:1px solid rgba(129,140,248,.25);margin-top:.3rem}
  .stat-row.total .stat-value{font-size:.95rem;color:var(--emerald)}
  .stat-label{color:var(--text-secondary);font-size:.86rem}
  .stat-value{font-weight:600;font-size:.86rem;font-variant-numeric:tabular-nums}

  /* ── charts & table ── */
  .chart-img{width:100%;border-radius:var(--radius-md);border:1px solid rgba(51,65,85,.15)}
  .chart-desc{color:var(--text-muted);font-size:.82rem;margin-bottom:.8rem;line-height:1.55}
  .table-wrap{overflow-x:auto;border-radius:var(--radius-md);border:1px solid rgba(51,65,85,.25)}
  .proj-table{width:100%;border-collapse:collapse;font-size:.82rem}
  .proj-table th{
    text-align:right;padding:.6rem .7rem;background:rgba(15,23,42,.45);
    color:var(--text-secondary);font-weight:600;font-size:.72rem;
    text-transform:uppercase;letter-spacing:.05em;
  }
  .proj-table td{
    text-align:right;padding:.45rem .7rem;font-variant-numeric:tabular-nums;
    border-bottom:1px solid rgba(51,65,85,.15);
  }
  .proj-table .break-even td{background:rgba(16,185,129,.07);font-weight:600}
  .neg{color:var(--red)}
  .pos{color:var(--emerald)}

  .footer{text-align:center;padding:1rem 0 2rem;color:var(--text-muted);font-size:.78rem}

  @media(max-width:640px){
    .container{padding:1rem}
    .card{padding:1.2rem}
  }
</style>
</head>
<body>
<div class="container">

<header class="hero">
  <h1>Equity-Cash Swap Calculator</h1>
  <p class="hero-sub">Trade part of your hourly rate for stock options. What does it pay back?</p>
  <div class="mode-links">
    <a href="{{ url_for('index') }}" class="{{ 'active' if mode == 'rate' }}">Dividend as % of share value</a>
    <a href="{{ url_for('flat') }}" class="{{ 'active' if mode == 'flat' }}">Flat dividend per share</a>
  </div>
</header>

<!-- Input Form -->
<div class="card">
  <h2>Your Details</h2>
  {% if error %}
  <div class="error">{{ error }}</div>
  {% endif %}
  <form method="POST" id="calc-form" novalidate>
    {% for s in sliders %}
    <div class="slider-group">
      <label for="{{ s.key }}">{{ s.label }}</label>
      <div class="slider-row">
        <input type="range" min="{{ s.min }}" max="{{ s.max }}" step="1"
               value="{{ form[s.key] }}" data-target="{{ s.key }}">
        <input type="number" id="{{ s.key }}" name="{{ s.key }}"
               min="{{ s.min }}" max="{{ s.max }}" step="any" value="{{ form[s.key] }}">
        <span class="unit">{{ s.unit }}</span>
      </div>
    </div>
    {% endfor %}

    <details {{ 'open' if error }}>
      <summary>Show Assumptions</summary>
      <div class="form-grid">
        {% for a in assumptions %}
        <div class="form-group">
          <label for="{{ a.key }}">{{ a.label }}</label>
          <input type="number" step="any" id="{{ a.key }}" name="{{ a.key }}" value="{{ form[a.key] }}">
        </div>
        {% endfor %}
      </div>
    </details>

    <button type="submit" class="btn">Calculate</button>
  </form>
</div>

{% if d %}
<!-- Summary panel -->
<div class="card">
  <h2>Per Year</h2>
  <div class="stat-row"><span class="stat-label">Vested Options</span><span class="stat-value">{{ fmt_count(d.vested_options) }}</span></div>
  <div class="stat-row"><span class="stat-label">Cash</span><span class="stat-value">{{ fmt(d.cash) }} / year</span></div>
  <div class="stat-row"><span class="stat-label">Cash bonus to exercise options</span><span class="stat-value">{{ fmt(d.cash_bonus) }} / year</span></div>
  <div class="stat-row"><span class="stat-label">Annual Dividend</span><span class="stat-value">{{ fmt(d.annual_dividend) }} / year</span></div>
  <div class="stat-row total"><span class="stat-label">Total cash</span><span class="stat-value">{{ fmt(d.total_cash) }} / year</span></div>
  <div class="stat-row"><span class="stat-label">All-cash alternative</span><span class="stat-value">{{ fmt(d.max_annual_billing) }} / year</span></div>
</div>

<!-- Chart -->
{% if charts %}
<div class="card">
  <h2>All Cash vs Cash + Equity</h2>
  <p class="chart-desc">
    Each year's cash with no swap (left bar) against the reduced cash plus exercise bonus and the
    dividends on every option granted so far (right bar). The same number of options is granted every year.
  </p>
  <img class="chart-img" src="data:image/png;base64,{{ charts[0] }}" alt="All cash vs cash plus equity">
</div>
{% endif %}

<!-- Year-by-year table -->
<div class="card">
  <h2>Year by Year</h2>
  <div class="table-wrap">
  <table class="proj-table">
    <thead>
      <tr>
        <th>Year</th><th>Options held</th>{% if mode == 'rate' %}<th>Share value</th>{% endif %}<th>Dividends</th>
        <th>Cash + equity</th><th>All cash</th><th>Difference</th>
      </tr>
    </thead>
    <tbody>
      {% for r in d.rows %}
      <tr class="{{ 'break-even' if r.year == d.break_even_year }}">
        <td>{{ r.year }}</td>
        <td>{{ fmt_count(r.cumulative_shares) }}</td>
        {% if mode == 'rate' %}<td>${{ "{:,.2f}".format(r.share_value) }}</td>{% endif %}
        <td>{{ fmt(r.dividend) }}</td>
        <td>{{ fmt(r.equity_total) }}</td>
        <td>{{ fmt(r.all_cash) }}</td>
        <td class="{{ 'neg' if r.difference < 0 else 'pos' }}">{{ fmt(r.difference) }}</td>
      </tr>
      {% endfor %}
    </tbody>
  </table>
  </div>
</div>
{% endif %}

<div class="footer">For illustration only. Not financial advice.</div>
</div>

<script>
/* Keep each slider and its number box in step */
document.querySelectorAll('input[type=range][data-target]').forEach(function(range){
  var box=document.getElementById(range.dataset.target);
  range.addEventListener('input',function(){box.value=range.value});
  box.addEventListener('input',function(){range.value=box.value});
});
</script>
</body>
</html>
"""

SLIDERS = [
    {"key": "equitySwap", "label": "How much of your hourly rate would you like to swap for equity?",
     "range": cfg.EQUITY_SWAP_RANGE, "unit": "%"},
    {"key": "hoursPerWeek", "label": "How many hours per week will you work?",
     "range": cfg.HOURS_PER_WEEK_RANGE, "unit": "hrs"},
    {"key": "weeksPerYear", "label": "How many weeks a year will you work?",
     "range": cfg.WEEKS_PER_YEAR_RANGE, "unit": "wks"},
]

ASSUMPTION_LABELS = {
    "hourlyRate": "Hourly Rate ($)",
    "shareValue": "Share Value ($)",
    "optionStrikePrice": "Option Strike Price ($)",
    "dividendPerShare": "Dividend Per Share ($)",
    "dividendRate": "Dividend Rate (% of share value)",
    "growthRate": "Share Value Growth (%/yr)",
}


def _form_values(inputs: CompensationInputs) -> Dict[str, str]:
    """Stored-text rendering of *inputs*, keyed like the form."""
    return {
        key: format_value(getattr(inputs, name))
        for key, name, _ in settings_for(inputs.dividend_mode)
    }


def _render(mode: str, form: Dict[str, str], d: Optional[Dict[str, Any]] = None,
            charts=None, error: str = ""):
    sliders = [
        {"key": s["key"], "label": s["label"], "min": s["range"][0],
         "max": s["range"][1], "unit": s["unit"]}
        for s in SLIDERS
    ]
    slider_keys = {s["key"] for s in SLIDERS}
    assumptions = [
        {"key": key, "label": ASSUMPTION_LABELS[key]}
        for key, _, _ in settings_for(mode)
        if key not in slider_keys
    ]
    return render_template_string(
        HTML_TEMPLATE,
        mode=mode,
        form=form,
        sliders=sliders,
        assumptions=assumptions,
        d=d,
        charts=charts or [],
        error=error,
        fmt=fmt,
        fmt_count=fmt_count,
    )


# ═══════════════════════════════════════════════════════════════════
# Routes
# ═══════════════════════════════════════════════════════════════════

def _calculator(mode: str):
    store: SettingsStore = current_app.config["SETTINGS_STORE"]

    if request.method == "GET":
        inputs = load_inputs(store, mode)
    else:
        form = request.form.to_dict()
        try:
            inputs = parse_form(form, mode)
        except InvalidInput as exc:
            logger.info("Rejected %s form: %s", mode, exc)
            return _render(mode, form, error=str(exc)), 400

    try:
        summary, series = project(inputs)
    except InvalidInput as exc:
        logger.info("Could not project %s inputs: %s", mode, exc)
        return _render(mode, _form_values(inputs), error=str(exc)), 400
    if request.method == "POST":
        save_inputs(store, inputs)

    d = compute_display_data(inputs, summary, series)
    chart_images = report.get_web_charts(d)
    return _render(mode, _form_values(inputs), d=d, charts=chart_images)


def create_app(store: Optional[SettingsStore] = None) -> Flask:
    """Build the Flask app around *store* (default: JSON file at SETTINGS_PATH)."""
    app = Flask(__name__)
    app.config["SETTINGS_STORE"] = store if store is not None else JsonFileSettingsStore(cfg.SETTINGS_PATH)

    @app.route("/", methods=["GET", "POST"])
    def index():
        return _calculator(cfg.DIVIDEND_RATE)

    @app.route("/flat", methods=["GET", "POST"])
    def flat():
        return _calculator(cfg.DIVIDEND_FLAT)

    return app


# ═══════════════════════════════════════════════════════════════════
# Entry point
# ═══════════════════════════════════════════════════════════════════

def run_web(store: Optional[SettingsStore] = None, debug: bool = True) -> None:
    """Start the Flask development server and open browser."""
    import webbrowser
    import threading

    url = f"http://{cfg.HOST}:{cfg.PORT}"
    print(f"Starting web app at {url}")
    threading.Timer(1.0, lambda: webbrowser.open(url)).start()
    create_app(store).run(host=cfg.HOST, port=cfg.PORT, debug=debug)


if __name__ == "__main__":
    run_web()
