#!/usr/bin/env python3
"""
Standalone prediction script.
Loads an XSMB history export, predicts the next draw and optionally backtests.
"""
import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from xsmb_predictor.backtester import run_backtest
from xsmb_predictor.config import DEFAULT_CONFIG
from xsmb_predictor.parser import DEFAULT_DATA_PATH, history_to_frame, load_history
from xsmb_predictor.predictor import InsufficientDataError, PredictionEngine


def _build_parser():
    parser = argparse.ArgumentParser(description="Predict the next XSMB lô numbers")
    parser.add_argument("data_file", nargs="?", default=DEFAULT_DATA_PATH,
                        help="Path to the raw XSMB history text file")
    parser.add_argument("--backtest", action="store_true",
                        help="Also run a walk-forward backtest")
    parser.add_argument("--window", type=int, default=DEFAULT_CONFIG.backtest_window,
                        help="Number of days to backtest")
    parser.add_argument("--quiet", action="store_true",
                        help="Only print the predicted numbers")
    return parser


def main(argv=None):
    args = _build_parser().parse_args(argv)
    verbose = not args.quiet
    config = DEFAULT_CONFIG.replace(backtest_window=args.window)

    if verbose:
        print("Loading data...")
    history = load_history(args.data_file, config)
    if verbose and history:
        frame = history_to_frame(history)
        print(f"Range: {frame['date'].min():%Y-%m-%d} -> {frame['date'].max():%Y-%m-%d}")
        print(f"Average numbers per day: {frame['count'].mean():.1f}")

    engine = PredictionEngine(config, verbose=verbose)
    try:
        detailed = engine.predict_detailed(history)
    except InsufficientDataError as e:
        print(f"ERROR: {e}")
        return 1

    if args.quiet:
        print(" ".join(detailed["predicted_numbers"]))
    else:
        print(f"\n{'='*60}")
        print(f"XSMB LÔ PREDICTION ({engine.activated_strategy_count} strategies, "
              f"{len(history)} days)")
        print(f"{'='*60}")
        print(f"  Numbers: {', '.join(detailed['predicted_numbers'])}")
        if detailed["failed_strategies"]:
            print(f"  Failed strategies: {', '.join(detailed['failed_strategies'])}")

        print(f"\n{'='*60}")
        print("AGGREGATE RANKING - TOP 20")
        print(f"{'='*60}")
        for i, (num, score) in enumerate(detailed["rankings"][:20]):
            print(f"  #{i+1:2d}. Number {num} - Score: {score:.4f}")

    if args.backtest:
        run_backtest(history, config, engine=PredictionEngine(config), verbose=verbose)

    if verbose:
        print(f"\n{'='*60}")
        print("DISCLAIMER: XSMB is a random lottery. No model guarantees wins.")
        print(f"{'='*60}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
