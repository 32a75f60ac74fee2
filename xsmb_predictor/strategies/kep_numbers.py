"""
Kép Strategy (doubles: 00, 11, ..., 99)

Only doubles receive a non-zero score.
"""

from xsmb_predictor.config import DEFAULT_CONFIG
from xsmb_predictor.digits import ALL_NUMBERS, clamp_scores


STRATEGY_NAME = "kep_numbers"
DESCRIPTION = "Frequency, yesterday's doubles and gan of the ten doubles."


def _neighbour_doubles(num):
    """Doubles one step above and below, e.g. 11 -> 22 and 00."""
    head = int(num[0])
    return str((head + 1) % 10) * 2, str((head - 1) % 10) * 2


def _apply_frequency_scores(scores, analyzer, config):
    for num, count in analyzer.kep_numbers_frequency(config.lookback.short).items():
        scores[num] += count * 15
    for num, count in analyzer.kep_numbers_frequency(config.lookback.medium).items():
        scores[num] += count * 5


def _apply_last_day_scores(scores, analyzer):
    landed = analyzer.last_day_doubles()
    for num in landed:
        scores[num] += 40
        for neighbour in _neighbour_doubles(num):
            if neighbour != num:
                scores[neighbour] += 20
        for other in landed:
            scores[other] += 15


def _apply_gan_scores(scores, analyzer, config):
    lo = config.gan_ranges.medium[0]
    hi = config.gan_ranges.long[1]
    ultra = config.gan_ranges.ultra_gan[1]
    for num, status in analyzer.gan_kep_numbers().items():
        days = status["days_gone"]
        if lo <= days <= hi:
            scores[num] += 30
        if days > ultra:
            scores[num] *= 0.7


def predict(analyzer, config=DEFAULT_CONFIG):
    scores = dict.fromkeys(ALL_NUMBERS, 0.0)
    _apply_frequency_scores(scores, analyzer, config)
    _apply_last_day_scores(scores, analyzer)
    _apply_gan_scores(scores, analyzer, config)
    return clamp_scores(scores, config.max_strategy_score)
