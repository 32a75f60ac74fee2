import pytest

from xsmb_predictor.analysis import HistoryAnalyzer
from xsmb_predictor.config import DEFAULT_CONFIG, DEFAULT_STRATEGY_WEIGHTS
from xsmb_predictor.digits import ALL_NUMBERS, is_double
from xsmb_predictor.strategies import (
    DEFAULT_STRATEGIES,
    bong_tuong_sinh,
    bridge_patterns,
    cycle_analysis,
    day_of_week,
    gan_numbers,
    kep_numbers,
    lo_roi_lon,
    paired_numbers,
    statistical_anomalies,
    zone_analysis,
)

from conftest import build_history, history_from_days


def analyzer_for(days):
    return HistoryAnalyzer(history_from_days(days))


@pytest.fixture(scope="module")
def long_analyzer(long_history):
    return HistoryAnalyzer(long_history)


def test_registry_matches_weights():
    names = [s.STRATEGY_NAME for s in DEFAULT_STRATEGIES]
    assert len(names) == 12
    assert set(names) == set(DEFAULT_STRATEGY_WEIGHTS)
    assert all(s.DESCRIPTION for s in DEFAULT_STRATEGIES)


@pytest.mark.parametrize("strategy", DEFAULT_STRATEGIES, ids=lambda s: s.STRATEGY_NAME)
def test_strategy_contract(strategy, long_analyzer):
    scores = strategy.predict(long_analyzer, DEFAULT_CONFIG)
    assert set(scores) == set(ALL_NUMBERS)
    assert all(0.0 <= v <= DEFAULT_CONFIG.max_strategy_score for v in scores.values())
    # Pure: a second run gives the same map
    assert strategy.predict(long_analyzer, DEFAULT_CONFIG) == scores


@pytest.mark.parametrize("strategy", DEFAULT_STRATEGIES, ids=lambda s: s.STRATEGY_NAME)
def test_strategy_handles_single_day(strategy):
    scores = strategy.predict(analyzer_for([["01", "12", "33"]]))
    assert len(scores) == 100
    assert all(0.0 <= v <= 100.0 for v in scores.values())


def test_cycle_due_on_every_fifth_day(seven_history):
    scores = cycle_analysis.predict(HistoryAnalyzer(seven_history))
    # Due in 2 days on a perfectly regular 5-day cycle: 50 * (1 - 2/5)
    assert scores["07"] == pytest.approx(30.0)


def test_cycle_prefers_regular_number_over_never_seen():
    def numbers(i):
        # "07" every 5th day as in seven_every_fifth_numbers, "99" never
        others = [f"{n:02d}" for n in ((i * 7 + k * 13) % 100 for k in range(40))
                  if n not in (7, 99)]
        return (["07"] + others[:26]) if i % 5 == 0 else others[:27]

    analyzer = HistoryAnalyzer(build_history(200, numbers))
    assert analyzer.gan_status()["99"]["days_gone"] == 200
    scores = cycle_analysis.predict(analyzer)
    # Last landed on day 195, so the 5-day cycle is due on the next draw
    assert scores["07"] == pytest.approx(50.0)
    assert scores["07"] > scores["99"]


def test_gan_medium_range_scores():
    analyzer = analyzer_for([["07", "01"]] + [["01"]] * 10)
    scores = gan_numbers.predict(analyzer)
    assert scores["07"] == pytest.approx(40 + 3 * 1.5)
    assert scores["01"] == 0.0
    assert scores["50"] == pytest.approx(40 + 4 * 1.5)


def test_gan_returner_then_cool_down():
    analyzer = analyzer_for([["05"]] + [["01"]] * 8 + [["05"]])
    # +20 for returning after an 8-day gan, halved for just ending a long gan
    assert gan_numbers.predict(analyzer)["05"] == pytest.approx(10.0)


def test_lo_roi_lon_last_day():
    scores = lo_roi_lon.predict(analyzer_for([["12"]]))
    assert scores["12"] == 25.0
    assert scores["21"] == 30.0
    assert sum(scores.values()) == 55.0


def test_kep_scores_only_doubles(long_analyzer):
    scores = kep_numbers.predict(long_analyzer)
    assert all(v == 0.0 for n, v in scores.items() if not is_double(n))


def test_kep_last_day_doubles():
    scores = kep_numbers.predict(analyzer_for([["33"]]))
    # 7d and 30d frequency, yesterday's double, landed-double bonus
    assert scores["33"] == pytest.approx(15 + 5 + 40 + 15)
    assert scores["22"] == 20.0
    assert scores["44"] == 20.0
    assert scores["77"] == 0.0


def test_day_of_week_without_matching_weekday():
    # Sunday..Tuesday only; the next draw is a Wednesday
    scores = day_of_week.predict(analyzer_for([["01"], ["02"], ["03"]]))
    assert set(scores.values()) == {0.0}


def test_bong_last_day():
    scores = bong_tuong_sinh.predict(analyzer_for([["12"]]))
    assert scores["67"] == 50.0
    assert scores["60"] == 10.0
    assert scores["17"] == 10.0
    assert scores["12"] == 0.0


def test_paired_numbers():
    scores = paired_numbers.predict(analyzer_for([["01", "02"], ["01", "03"]]))
    assert scores["01"] == 13.0
    assert scores["02"] == 5.0
    assert scores["03"] == 13.0
    assert scores["04"] == 0.0


def test_statistical_anomalies_streak_and_rare_total():
    scores = statistical_anomalies.predict(analyzer_for([["01"], ["01"], ["01"]]))
    assert scores["01"] == 75.0
    assert scores["10"] == 25.0
    assert scores["02"] == 0.0


def test_zone_hot_short_term():
    zone1 = [f"{n:02d}" for n in range(20)]
    scores = zone_analysis.predict(analyzer_for([zone1] * 3))
    assert scores["05"] == 55.0
    assert scores["50"] == 0.0


def test_bridge_patterns_chams_and_period():
    scores = bridge_patterns.predict(analyzer_for([["11"]] * 6))
    assert scores["11"] == 100.0
    assert scores["22"] == 20.0
    assert scores["12"] == pytest.approx(30 * 0.7 + 10)
