"""
Totals & Chạm Strategy (Tổng & Chạm Số)

- Hot totals over 30 days
- Totals on a gan of 10-25 days
- Strong chạm digits over the last week
- Heads and tails that landed on the last day
"""

from xsmb_predictor.config import DEFAULT_CONFIG
from xsmb_predictor.digits import ALL_NUMBERS, clamp_scores, numbers_with_total


STRATEGY_NAME = "totals_chams"
DESCRIPTION = "Hot and resting digit totals plus strong head/tail digits."


def _apply_hot_totals(scores, analyzer, config):
    freq = analyzer.totals_frequency(config.lookback.medium)
    ranked = sorted(freq.items(), key=lambda kv: (-kv[1], kv[0]))[:5]
    for idx, (total, count) in enumerate(ranked):
        for num in numbers_with_total(total):
            scores[num] += count * 1.5 + (5 - idx) * 2


def _apply_gan_totals(scores, analyzer):
    for total, status in analyzer.gan_totals_status().items():
        if 10 <= status["days_gone"] <= 25:
            for num in numbers_with_total(total):
                scores[num] += 20


def predict(analyzer, config=DEFAULT_CONFIG):
    scores = dict.fromkeys(ALL_NUMBERS, 0.0)
    _apply_hot_totals(scores, analyzer, config)
    _apply_gan_totals(scores, analyzer)

    for num, cham in analyzer.cham_bridge_candidates(config.lookback.short, 25).items():
        scores[num] += cham * 0.8

    heads, tails = analyzer.last_day_heads(), analyzer.last_day_tails()
    for num in ALL_NUMBERS:
        if num[0] in heads:
            scores[num] += 10
        if num[1] in tails:
            scores[num] += 10

    return clamp_scores(scores, config.max_strategy_score)
