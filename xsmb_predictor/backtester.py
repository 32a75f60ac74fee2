"""
Backtesting Engine for XSMB Lô

Walk-forward replay: for each test day, predict using only the days before it,
then compare against what actually landed. Tracks hit counts, a synthetic
money model (cost per number, payout per hit) and per-strategy attribution.
"""
import math
import warnings

import numpy as np
from scipy import stats

from xsmb_predictor.config import DEFAULT_CONFIG
from xsmb_predictor.digits import ALL_NUMBERS
from xsmb_predictor.predictor import PredictionEngine


def count_hits(predicted, actual):
    """How many predicted numbers landed at least once that day."""
    return len(set(predicted) & set(actual))


def _finite_or_none(value, digits=6):
    value = float(value)
    return round(value, digits) if math.isfinite(value) else None


def _empty_stats(reason):
    return {
        "reason": reason,
        "total_days_tested": 0,
        "avg_correct_per_day": 0.0,
        "days_high_accuracy": 0,
        "pct_days_high_accuracy": 0.0,
        "days_profit_threshold": 0,
        "pct_days_profitable": 0.0,
        "roi": 0.0,
        "total_investment": 0,
        "total_gains": 0,
        "net_profit": 0,
        "daily_correct_counts": [],
        "daily_net_profits": [],
        "failed_days": 0,
        "strategy_performance": {},
        "significance": None,
    }


def run_backtest(history, config=DEFAULT_CONFIG, engine=None, verbose=True):
    """
    Replay the last `config.backtest_window` days of `history`.

    Returns
    -------
    dict of summary statistics (see _compute_summary). With too little
    history, every figure is zero and `reason` explains why.
    """
    if len(history) < config.min_history + 1:
        reason = (f"Need at least {config.min_history + 1} days of history to backtest, "
                  f"got {len(history)}.")
        if verbose:
            print(f"  [Backtest] {reason}")
        return _empty_stats(reason)

    engine = engine or PredictionEngine(config)
    start = max(len(history) - config.backtest_window, config.min_history)
    n_test = len(history) - start

    if verbose:
        print(f"\n{'='*60}")
        print("XSMB BACKTESTING ENGINE")
        print(f"{'='*60}")
        print(f"Total days: {len(history)}")
        print(f"First test day: {history[start].date.isoformat()}")
        print(f"Test days: {n_test}")
        print(f"{'='*60}\n")

    results = {
        "daily_correct_counts": [],
        "daily_net_profits": [],
        "expected_hits": [],
        "failed_days": 0,
        "strategy_performance": {
            s.STRATEGY_NAME: {"total_influence_score": 0.0, "correct_numbers_supported": 0}
            for s in engine.strategies
        },
    }

    for k, i in enumerate(range(start, len(history))):
        actual = history[i].numbers
        unique_actual = set(actual)

        if verbose and k % 10 == 0:
            print(f"  Backtesting day {k+1}/{n_test} (date: {history[i].date.isoformat()})...")

        try:
            detailed = engine.predict_detailed(history[:i])
            predicted = detailed["predicted_numbers"]
            hits = count_hits(predicted, actual)
            _attribute_hits(results["strategy_performance"], detailed["contributions"],
                            set(predicted) & unique_actual)
        except Exception as e:
            if verbose:
                print(f"    Error on day {k+1}: {e}")
            results["failed_days"] += 1
            hits = 0

        results["daily_correct_counts"].append(hits)
        results["daily_net_profits"].append(hits * config.payout_per_hit - config.daily_cost)
        # Random picks of num_predicted out of 100 hit this many on average
        results["expected_hits"].append(
            config.num_predicted * len(unique_actual) / len(ALL_NUMBERS)
        )

    summary = _compute_summary(results, config)
    if verbose:
        print_backtest_report(summary)
    return summary


def _attribute_hits(performance, contributions, hit_numbers):
    """Credit every strategy that pushed a correctly predicted number."""
    for name, weighted in contributions.items():
        entry = performance.setdefault(
            name, {"total_influence_score": 0.0, "correct_numbers_supported": 0})
        for num in hit_numbers:
            value = weighted.get(num, 0.0)
            if value > 0:
                entry["total_influence_score"] += value
                entry["correct_numbers_supported"] += 1


def _compute_summary(results, config):
    """Aggregate backtest metrics."""
    daily = results["daily_correct_counts"]
    days = len(daily)
    investment = days * config.daily_cost
    gains = sum(daily) * config.payout_per_hit
    net = gains - investment

    high = sum(1 for h in daily if h >= config.high_accuracy_threshold)
    profitable = sum(1 for h in daily if h >= config.profit_threshold)

    summary = {
        "reason": None,
        "total_days_tested": days,
        "avg_correct_per_day": float(np.mean(daily)) if days else 0.0,
        "days_high_accuracy": high,
        "pct_days_high_accuracy": 100 * high / days if days else 0.0,
        "days_profit_threshold": profitable,
        "pct_days_profitable": 100 * profitable / days if days else 0.0,
        "roi": 100 * net / investment if investment else 0.0,
        "total_investment": investment,
        "total_gains": gains,
        "net_profit": net,
        "daily_correct_counts": list(daily),
        "daily_net_profits": list(results["daily_net_profits"]),
        "failed_days": results["failed_days"],
        "strategy_performance": results["strategy_performance"],
        "significance": None,
    }

    # Paired t-test: daily hits vs random-pick expectation for the same day
    if days > 1:
        observed = np.array(daily, dtype=float)
        expected = np.array(results["expected_hits"], dtype=float)
        diff = observed - expected
        with warnings.catch_warnings():
            # Constant differences give an undefined statistic
            warnings.simplefilter("ignore", RuntimeWarning)
            t_stat, p_value = stats.ttest_rel(observed, expected)
            se = np.std(diff, ddof=1) / np.sqrt(days)
        mean_diff = float(np.mean(diff))
        p = _finite_or_none(p_value)
        summary["significance"] = {
            "t_statistic": _finite_or_none(t_stat, 4),
            "p_value": p,
            "mean_expected_hits": round(float(np.mean(expected)), 4),
            "mean_diff": round(mean_diff, 4),
            "ci_95": (_finite_or_none(mean_diff - 1.96 * se, 4),
                      _finite_or_none(mean_diff + 1.96 * se, 4)),
            "significant_at_005": p is not None and p < 0.05,
            "significant_at_010": p is not None and p < 0.10,
        }

    return summary


def print_backtest_report(summary):
    """Print a formatted backtest summary."""
    print(f"\n{'='*60}")
    print("BACKTEST RESULTS SUMMARY")
    print(f"{'='*60}")

    if summary.get("reason"):
        print(f"  Backtest skipped: {summary['reason']}")
        print(f"{'='*60}")
        return

    print(f"  Days tested: {summary['total_days_tested']} "
          f"(failed: {summary.get('failed_days', 0)})")
    print(f"  Average correct per day: {summary['avg_correct_per_day']:.3f}")
    print(f"  High-accuracy days: {summary['days_high_accuracy']} "
          f"({summary['pct_days_high_accuracy']:.1f}%)")
    print(f"  Profitable days: {summary['days_profit_threshold']} "
          f"({summary['pct_days_profitable']:.1f}%)")

    print(f"\nMONEY MODEL (VND):")
    print(f"  Investment: {summary['total_investment']:,}")
    print(f"  Gains: {summary['total_gains']:,}")
    print(f"  Net profit: {summary['net_profit']:,}")
    print(f"  ROI: {summary['roi']:.2f}%")

    perf = summary.get("strategy_performance") or {}
    if perf:
        print(f"\nSTRATEGY ATTRIBUTION:")
        ranked = sorted(perf.items(), key=lambda kv: -kv[1]["total_influence_score"])
        for name, data in ranked:
            print(f"  {name}: {data['correct_numbers_supported']} hits supported, "
                  f"influence {data['total_influence_score']:.2f}")

    sig = summary.get("significance")
    if sig:
        print(f"\nSTATISTICAL SIGNIFICANCE (vs random picks):")
        print(f"  t-statistic: {sig.get('t_statistic', 'N/A')}")
        print(f"  p-value: {sig.get('p_value', 'N/A')}")
        print(f"  Mean difference: {sig.get('mean_diff', 'N/A')}")
        ci = sig.get("ci_95", ("N/A", "N/A"))
        print(f"  95% CI: ({ci[0]}, {ci[1]})")
        if sig.get("significant_at_005"):
            print("  ✓ Significant at p < 0.05")
        elif sig.get("significant_at_010"):
            print("  ~ Marginally significant at p < 0.10")
        else:
            print("  ✗ Not statistically significant")

    print(f"\n{'='*60}")
