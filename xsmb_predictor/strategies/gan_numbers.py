"""
Gan Strategy (Lô Gan Chuyên Sâu)

Rewards long-absent numbers, with a separate base score and per-day slope for
each absence range (short, medium, long, super, ultra). Also:
- Returners: numbers that came back in the last week after a gan of >= 7 days
- Numbers whose current gan is within one std of their historical average
- Cool-down penalty for numbers that just ended a long gan
"""

from xsmb_predictor.config import DEFAULT_CONFIG
from xsmb_predictor.digits import ALL_NUMBERS, clamp_scores


STRATEGY_NAME = "gan_numbers"
DESCRIPTION = "Absence-range scoring with returners, average-gan proximity and cool-down."

# (range attribute, base score, per-day multiplier)
RANGE_SCORES = (
    ("short", 10, 0.5),
    ("medium", 40, 1.5),
    ("long", 60, 2.0),
    ("super_gan", 25, 0.8),
    ("ultra_gan", 10, 0.5),
)

RETURNER_BONUS = 20
PROXIMITY_SCALE = 30
COOL_DOWN_FACTOR = 0.5


def _apply_range_scores(scores, gan_status, config):
    for attr, base, multiplier in RANGE_SCORES:
        lo, hi = getattr(config.gan_ranges, attr)
        for num, status in gan_status.items():
            days = status["days_gone"]
            if lo <= days <= hi:
                scores[num] += base + (days - lo) * multiplier


def _apply_returner_scores(scores, analyzer, config):
    min_gan = config.gan_ranges.medium[0]
    n = analyzer.n_days
    for i in range(n - config.lookback.short, n):
        if i <= 0:
            continue
        before = analyzer.gan_status(prefix_length=i)
        for num in analyzer.history[i].unique_numbers:
            if before[num]["days_gone"] >= min_gan:
                scores[num] += RETURNER_BONUS


def _apply_average_gan_proximity(scores, gan_status, gan_history):
    for num, status in gan_status.items():
        hist = gan_history[num]
        if len(hist["gan_lengths"]) <= 1:
            continue
        days = status["days_gone"]
        avg, std = hist["avg_gan"], hist["std_gan"]
        spread = std or avg
        if spread and days > 0 and avg - std <= days <= avg + std:
            scores[num] += PROXIMITY_SCALE * (1 - abs(days - avg) / spread)


def _apply_cool_down_penalty(scores, gan_status, gan_history, config):
    min_gan = config.gan_ranges.medium[0]
    for num, status in gan_status.items():
        if status["days_gone"] != 0:
            continue
        lengths = gan_history[num]["gan_lengths"]
        # The streak that the last hit just ended
        if lengths and lengths[-1] >= min_gan:
            scores[num] *= COOL_DOWN_FACTOR


def predict(analyzer, config=DEFAULT_CONFIG):
    scores = dict.fromkeys(ALL_NUMBERS, 0.0)
    gan_status = analyzer.gan_status()
    gan_history = analyzer.historical_gan_analysis()

    _apply_range_scores(scores, gan_status, config)
    _apply_returner_scores(scores, analyzer, config)
    _apply_average_gan_proximity(scores, gan_status, gan_history)
    _apply_cool_down_penalty(scores, gan_status, gan_history, config)

    return clamp_scores(scores, config.max_strategy_score)
