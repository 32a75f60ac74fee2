"""
Zone Strategy (Phân Tích Miền)

Splits 00-99 into four zones of 25 and compares each zone's recent and long
landings against an even share of the draws.
"""

from xsmb_predictor.config import DEFAULT_CONFIG
from xsmb_predictor.digits import ALL_NUMBERS, ZONES, clamp_scores, zone_of


STRATEGY_NAME = "zone_analysis"
DESCRIPTION = "Hot, newly hot and cold number zones."


def predict(analyzer, config=DEFAULT_CONFIG):
    lb = config.lookback
    scores = dict.fromkeys(ALL_NUMBERS, 0.0)
    short_freq = analyzer.zone_frequencies(lb.very_short)
    long_freq = analyzer.zone_frequencies(lb.long)
    expected_short = config.draws_per_day * lb.very_short / len(ZONES)
    expected_long = config.draws_per_day * lb.long / len(ZONES)

    members = {name: [n for n in ALL_NUMBERS if zone_of(n) == name] for name, _, _ in ZONES}

    # Hot zones first
    for zone, nums in members.items():
        s, l = short_freq[zone], long_freq[zone]
        boost = 0
        if s > expected_short * 1.5 and l > expected_long * 1.2:
            boost = 60
        elif s > expected_short * 1.3 and l <= expected_long * 1.2:
            boost = 40
        for num in nums:
            scores[num] += boost

    # Then cold zones
    for zone, nums in members.items():
        s, l = short_freq[zone], long_freq[zone]
        if s < expected_short * 0.5 and l < expected_long * 0.8:
            for num in nums:
                scores[num] *= 0.5
        elif l < expected_long * 0.6:
            for num in nums:
                scores[num] += 15

    return clamp_scores(scores, config.max_strategy_score)
