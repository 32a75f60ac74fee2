"""
Frequency Strategy (Tần Suất Tổng Hợp)

Scores numbers by how often they landed across several windows:
- Short-term hot numbers (3 and 7 days)
- Medium / long-term consistency (30 and 60 days)
- Penalty for truly cold numbers (120 days), small boost for "medium cold"
- Deviation from the expected rate over the extended window
- Multi-hit days (2 nháy / 3 nháy)
"""

from xsmb_predictor.config import DEFAULT_CONFIG
from xsmb_predictor.digits import ALL_NUMBERS, clamp_scores


STRATEGY_NAME = "frequency"
DESCRIPTION = "Multi-window frequency: hot, consistent, cold and multi-hit numbers."


def _ranked(freq):
    return sorted(freq.items(), key=lambda kv: (-kv[1], kv[0]))


def _apply_hot_scores(scores, analyzer, config, window, top_n, multiplier):
    freq = analyzer.numbers_frequency(window)
    for idx, (num, count) in enumerate(_ranked(freq)[:top_n]):
        base = count / window / config.draws_per_day * config.max_strategy_score
        scores[num] += base * multiplier + (top_n - idx) * 0.5


def _apply_consistency_scores(scores, analyzer, config, window, top_n, multiplier):
    freq = analyzer.numbers_frequency(window)
    for idx, (num, count) in enumerate(_ranked(freq)[:top_n]):
        consistency = count / (config.draws_per_day * window) * config.max_strategy_score
        scores[num] += consistency * multiplier + (top_n - idx) * 0.2


def _apply_cold_penalty(scores, analyzer, window, factor):
    for num in analyzer.cold_numbers(20, window):
        scores[num] *= factor


def _apply_medium_cold_boost(scores, analyzer, window, boost):
    freq = analyzer.numbers_frequency(window)
    ascending = sorted(freq.items(), key=lambda kv: (kv[1], kv[0]))
    lo, hi = int(len(ascending) * 0.2), int(len(ascending) * 0.4)
    for num, count in ascending[lo:hi]:
        if count > 0:
            scores[num] += boost


def _apply_expected_rate_deviation(scores, analyzer, config, window):
    # Expected count is taken over the days actually inside the window
    days_in_window = min(window, analyzer.n_days)
    expected = config.draws_per_day * days_in_window / len(ALL_NUMBERS)
    if expected <= 0:
        return
    freq = analyzer.numbers_frequency(window)
    for num in ALL_NUMBERS:
        deviation = freq[num] - expected
        if deviation > 0:
            scores[num] += min(20, deviation * 0.5)
        elif deviation < -5:
            scores[num] += max(-15, deviation * 0.2)


def _apply_multi_hit_scores(scores, analyzer, window):
    for num, hits in analyzer.multi_hit_frequencies(window).items():
        scores[num] += hits["two_hits"] * 5 + hits["three_hits"] * 15


def predict(analyzer, config=DEFAULT_CONFIG):
    lb = config.lookback
    scores = dict.fromkeys(ALL_NUMBERS, 0.0)

    _apply_hot_scores(scores, analyzer, config, lb.very_short, 30, 2.0)
    _apply_hot_scores(scores, analyzer, config, lb.short, 20, 1.5)
    _apply_consistency_scores(scores, analyzer, config, lb.medium, 15, 0.8)
    _apply_consistency_scores(scores, analyzer, config, lb.long, 10, 0.5)
    _apply_cold_penalty(scores, analyzer, lb.very_long, 0.4)
    _apply_medium_cold_boost(scores, analyzer, lb.medium, 2.0)
    _apply_expected_rate_deviation(scores, analyzer, config, lb.extended)
    _apply_multi_hit_scores(scores, analyzer, lb.long)

    return clamp_scores(scores, config.max_strategy_score)
