"""
Cycle Strategy (Phân Tích Chu Kỳ)

Uses each number's appearance cycle (gaps between landings):
- Due now: a consistent cycle projects onto the next draw (+/- a few days)
- Overdue long cycle: consistent cycle of 10+ days, 1.5x overdue
- Stable short cycle: consistent cycle under 5 days with > 5 appearances
"""

from xsmb_predictor.config import DEFAULT_CONFIG
from xsmb_predictor.digits import ALL_NUMBERS, clamp_scores


STRATEGY_NAME = "cycle_analysis"
DESCRIPTION = "Due, overdue and stable appearance cycles."


def _due_score(info, current_day_index):
    if info["avg_cycle"] <= 0 or info["consistency"] <= 0.6:
        return 0.0
    days_until_due = info["next_due"] - current_day_index
    if not -2 <= days_until_due <= 3:
        return 0.0
    return 50 * info["consistency"] * (1 - abs(days_until_due) / max(1, info["avg_cycle"]))


def predict(analyzer, config=DEFAULT_CONFIG):
    scores = dict.fromkeys(ALL_NUMBERS, 0.0)

    for num, info in analyzer.number_cycle_analysis().items():
        if not info["appearances"]:
            continue
        avg, consistency = info["avg_cycle"], info["consistency"]

        scores[num] += _due_score(info, analyzer.current_day_index)
        if info["days_since_last"] >= avg * 1.5 and avg >= 10 and consistency > 0.5:
            scores[num] += 25
        if avg < 5 and consistency > 0.8 and len(info["appearances"]) > 5:
            scores[num] += 30

    return clamp_scores(scores, config.max_strategy_score)
