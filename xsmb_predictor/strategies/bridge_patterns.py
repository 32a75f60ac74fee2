"""
Bridge Strategy (Đánh Cầu)

- Periodic bridges (cầu): evenly spaced runs that project onto the next draw
- Chạm: strong head/tail digits, plus digits on a mini-gan of 5+ days
- Totals running hot over the last week, or on a moderate gan
"""

from xsmb_predictor.config import DEFAULT_CONFIG
from xsmb_predictor.digits import (
    ALL_NUMBERS,
    ALL_TOTALS,
    DIGITS,
    clamp_scores,
    numbers_with_digit,
    numbers_with_total,
)


STRATEGY_NAME = "bridge_patterns"
DESCRIPTION = "Periodic bridges, strong or resting chạm digits and total bridges."

DIGIT_MINI_GAN = 5


def _apply_period_bridges(scores, analyzer, config):
    lb = config.lookback
    for num in analyzer.consistent_period_bridge(3, 7, lb.long):
        scores[num] += 50
    for num in analyzer.consistent_period_bridge(2, 14, lb.very_long):
        scores[num] += 25


def _apply_cham_scores(scores, analyzer, config):
    for num, cham in analyzer.cham_bridge_candidates(config.lookback.short, 30).items():
        scores[num] += cham * 0.7

    landed = (analyzer.last_day_heads(), analyzer.last_day_tails())
    for position in (0, 1):
        for digit in DIGITS:
            if digit in landed[position]:
                continue
            if analyzer.digit_days_since(position, digit) >= DIGIT_MINI_GAN:
                for num in numbers_with_digit(position, digit):
                    scores[num] += 10


def _apply_total_bridges(scores, analyzer, config):
    window = config.lookback.short
    hot_line = config.draws_per_day * window / len(ALL_TOTALS) * 1.5
    for total, freq in analyzer.totals_frequency(window).items():
        if freq > hot_line:
            for num in numbers_with_total(total):
                scores[num] += 15

    for total, status in analyzer.gan_totals_status().items():
        if 7 <= status["days_gone"] <= 20:
            for num in numbers_with_total(total):
                scores[num] += 20


def predict(analyzer, config=DEFAULT_CONFIG):
    scores = dict.fromkeys(ALL_NUMBERS, 0.0)
    _apply_period_bridges(scores, analyzer, config)
    _apply_cham_scores(scores, analyzer, config)
    _apply_total_bridges(scores, analyzer, config)
    return clamp_scores(scores, config.max_strategy_score)
