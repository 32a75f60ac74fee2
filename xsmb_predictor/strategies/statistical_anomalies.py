"""
Statistical Anomalies Strategy (Bất Thường Thống Kê)

- Rapid warming: historically rare, suddenly frequent, but currently on a gan
- Gan far beyond the number's historical average
- Streaks of 2 or 3+ consecutive days
- Numbers sharing a rare total that landed yesterday
"""

from xsmb_predictor.config import DEFAULT_CONFIG
from xsmb_predictor.digits import ALL_NUMBERS, clamp_scores, numbers_with_total


STRATEGY_NAME = "statistical_anomalies"
DESCRIPTION = "Sudden warming, overdue gan, streaks and rare totals."


def _apply_rapid_warming(scores, analyzer, config):
    long_pct = analyzer.frequency_percentiles(config.lookback.long)
    short_pct = analyzer.frequency_percentiles(config.lookback.very_short)
    gan_status = analyzer.gan_status()
    for num in ALL_NUMBERS:
        if long_pct[num] < 20 and short_pct[num] > 70 and gan_status[num]["days_gone"] > 5:
            scores[num] += 60


def _apply_overdue_gan(scores, analyzer):
    for num, hist in analyzer.historical_gan_analysis().items():
        if len(hist["gan_lengths"]) > 2:
            if hist["last_gan_period"] > hist["avg_gan"] + hist["std_gan"] * 1.5:
                scores[num] += 40


def _apply_streaks(scores, analyzer):
    for num, streak in analyzer.consecutive_appearance().items():
        if streak == 2:
            scores[num] += 20
        elif streak >= 3:
            scores[num] += 50


def _apply_rare_totals(scores, analyzer, config):
    window = config.lookback.extended
    freq = analyzer.totals_frequency(window)
    for total in analyzer.last_day_totals():
        if freq[total] < window * 0.1:
            for num in numbers_with_total(total):
                scores[num] += 25


def predict(analyzer, config=DEFAULT_CONFIG):
    scores = dict.fromkeys(ALL_NUMBERS, 0.0)
    _apply_rapid_warming(scores, analyzer, config)
    _apply_overdue_gan(scores, analyzer)
    _apply_streaks(scores, analyzer)
    _apply_rare_totals(scores, analyzer, config)
    return clamp_scores(scores, config.max_strategy_score)
