"""
Day-of-Week Strategy (Tần Suất Theo Thứ)

Looks up average per-weekday frequencies for the weekday of the next draw and
rewards numbers that historically run hot on that weekday.
"""

from xsmb_predictor.config import DEFAULT_CONFIG
from xsmb_predictor.digits import ALL_NUMBERS, clamp_scores


STRATEGY_NAME = "day_of_week"
DESCRIPTION = "Numbers that run hot or cold on the weekday of the next draw."


def predict(analyzer, config=DEFAULT_CONFIG):
    window = config.lookback.extended
    scores = dict.fromkeys(ALL_NUMBERS, 0.0)

    averages = analyzer.day_of_week_average_frequencies(window)
    day_avg = averages.get(analyzer.next_day_of_week())
    if not day_avg:
        return scores

    # Top 15 for this weekday
    hot = sorted(day_avg.items(), key=lambda kv: (-kv[1], kv[0]))[:15]
    for num, avg in hot:
        scores[num] += avg * 30

    # Bottom 10, only if they landed at all
    cold = sorted(day_avg.items(), key=lambda kv: (kv[1], kv[0]))[:10]
    for num, avg in cold:
        if avg > 0:
            scores[num] += 10

    overall = analyzer.numbers_frequency(window)
    for num in ALL_NUMBERS:
        day_value = day_avg.get(num, 0.0)
        overall_avg = overall[num] / window
        if day_value > overall_avg * 1.5:
            scores[num] += 20
        elif day_value < overall_avg * 0.5 and overall_avg > 1:
            scores[num] -= 10

    return clamp_scores(scores, config.max_strategy_score)
