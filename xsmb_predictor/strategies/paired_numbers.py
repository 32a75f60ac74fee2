"""
Paired Numbers Strategy (Xiên & Song Thủ)

Numbers that tend to land alongside, or the day after, yesterday's numbers.
"""

from xsmb_predictor.config import DEFAULT_CONFIG
from xsmb_predictor.digits import ALL_NUMBERS, clamp_scores


STRATEGY_NAME = "paired_numbers"
DESCRIPTION = "Co-occurring partners, next-day successors and reverse pairs."


def _top_partners(partners, top_n):
    return sorted(partners.items(), key=lambda kv: (-kv[1], kv[0]))[:top_n]


def predict(analyzer, config=DEFAULT_CONFIG):
    lb = config.lookback
    scores = dict.fromkeys(ALL_NUMBERS, 0.0)
    last_day = analyzer.last_day_numbers()

    pairs = analyzer.pair_co_occurrences(lb.medium)
    for num in last_day:
        for partner, count in _top_partners(pairs.get(num, {}), 5):
            scores[partner] += count * 5

    successors = analyzer.successor_frequencies(lb.long)
    for num in last_day:
        for follower, count in _top_partners(successors.get(num, {}), 3):
            scores[follower] += count * 8

    for num, count in analyzer.reverse_co_occurrences(lb.short).items():
        scores[num] += count * 10

    return clamp_scores(scores, config.max_strategy_score)
