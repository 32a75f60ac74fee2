"""
Bóng Strategy (shadow numbers)

Shadow digits: 0<->5, 1<->6, 2<->7, 3<->8, 4<->9. A number's shadow maps both
digits, e.g. 12 -> 67.
"""

from xsmb_predictor.config import DEFAULT_CONFIG
from xsmb_predictor.digits import ALL_NUMBERS, clamp_scores, shadow_digit, shadow_number


STRATEGY_NAME = "bong_tuong_sinh"
DESCRIPTION = "Shadow co-occurrence, shadows of yesterday and resting shadows."


def predict(analyzer, config=DEFAULT_CONFIG):
    scores = dict.fromkeys(ALL_NUMBERS, 0.0)

    for num, count in analyzer.bong_co_occurrences(config.lookback.short).items():
        scores[num] += count * 15

    for num in analyzer.last_day_numbers():
        scores[shadow_number(num)] += 30

    heads, tails = analyzer.last_day_heads(), analyzer.last_day_tails()
    gan_status = analyzer.gan_status()
    for num in ALL_NUMBERS:
        if shadow_digit(num[0]) in heads:
            scores[num] += 10
        if shadow_digit(num[1]) in tails:
            scores[num] += 10
        if 15 <= gan_status[shadow_number(num)]["days_gone"] <= 30:
            scores[num] += 20

    return clamp_scores(scores, config.max_strategy_score)
