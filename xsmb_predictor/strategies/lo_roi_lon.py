"""
Lô Rơi & Lô Lộn Strategy

- Lô rơi: numbers repeating on consecutive days, plus everything from the last day
- Lô lộn: reverses of recently landed numbers, plus reverses of the last day
- Sandwiched numbers (landed between two days sharing a number)
"""

from xsmb_predictor.config import DEFAULT_CONFIG
from xsmb_predictor.digits import ALL_NUMBERS, clamp_scores, is_double, reverse_number


STRATEGY_NAME = "lo_roi_lon"
DESCRIPTION = "Repeats (lô rơi), reversals (lô lộn) and sandwiched numbers."


def predict(analyzer, config=DEFAULT_CONFIG):
    window = config.lookback.short
    scores = dict.fromkeys(ALL_NUMBERS, 0.0)
    last_day = analyzer.last_day_numbers()

    # Lô rơi
    for num, count in analyzer.lo_roi_candidates(window).items():
        scores[num] += count * 15
    for num in last_day:
        scores[num] += 25

    # Lô lộn
    for num, count in analyzer.lo_lon_candidates(window).items():
        scores[num] += count * 10
    for num in last_day:
        if not is_double(num):
            scores[reverse_number(num)] += 20

    for num in analyzer.sandwiched_numbers(window):
        scores[num] += 35

    return clamp_scores(scores, config.max_strategy_score)
