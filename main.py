"""
Entry point for the equity-cash swap calculator.

Usage:
    python main.py                      # launches the web app at localhost:5000
    python main.py --cli                # runs the terminal interface
    python main.py --cli --flat         # terminal interface, flat dividend per share
    python main.py --cli --chart out.png
"""

import argparse
import logging

import config as cfg


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Equity-Cash Swap Calculator: all cash vs cash + equity",
    )
    parser.add_argument(
        "--cli",
        action="store_true",
        help="Run in terminal mode instead of launching the web app",
    )
    parser.add_argument(
        "--flat",
        action="store_true",
        help="CLI only: dividends as a flat amount per share instead of a rate",
    )
    parser.add_argument(
        "--settings",
        default=cfg.SETTINGS_PATH,
        help=f"File holding the last-used inputs (default: {cfg.SETTINGS_PATH})",
    )
    parser.add_argument(
        "--chart",
        metavar="PATH",
        help="CLI only: also save the projection bar chart as a PNG",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from settings import JsonFileSettingsStore
    store = JsonFileSettingsStore(args.settings)

    if args.cli:
        from cli import run_cli
        mode = cfg.DIVIDEND_FLAT if args.flat else cfg.DIVIDEND_RATE
        run_cli(store, mode, chart_path=args.chart)
    else:
        from app import run_web
        run_web(store)


if __name__ == "__main__":
    main()
