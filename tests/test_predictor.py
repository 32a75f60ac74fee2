from collections import Counter
from types import SimpleNamespace

import pytest

from xsmb_predictor.config import DEFAULT_CONFIG
from xsmb_predictor.digits import ALL_NUMBERS, digit_total, is_valid_number
from xsmb_predictor.parser import organize_data, parse_raw_data
from xsmb_predictor.predictor import (
    InsufficientDataError,
    PredictionEngine,
    predict_next_day,
)
from xsmb_predictor.preparer import prepare_history
from xsmb_predictor.strategies import frequency

from conftest import build_history, history_from_days


def constant_strategy(value, name="flat"):
    return SimpleNamespace(
        STRATEGY_NAME=name,
        DESCRIPTION="constant score",
        predict=lambda analyzer, config: dict.fromkeys(ALL_NUMBERS, float(value)),
    )


def failing_strategy():
    def _predict(analyzer, config):
        raise RuntimeError("boom")
    return SimpleNamespace(STRATEGY_NAME="broken", DESCRIPTION="always fails", predict=_predict)


@pytest.fixture(scope="module")
def min_history_prediction():
    history = build_history(DEFAULT_CONFIG.min_history)
    return PredictionEngine().predict_detailed(history)


def test_exactly_min_history_gives_sixteen_numbers(min_history_prediction):
    predicted = min_history_prediction["predicted_numbers"]
    assert len(predicted) == 16
    assert len(set(predicted)) == 16
    assert all(is_valid_number(n) for n in predicted)
    assert predicted == sorted(predicted, key=int)


def test_prediction_is_diversified(min_history_prediction):
    predicted = min_history_prediction["predicted_numbers"]
    top_picks = {num for num, _ in min_history_prediction["rankings"][:4]}
    for position, cap in ((0, DEFAULT_CONFIG.max_per_head), (1, DEFAULT_CONFIG.max_per_tail)):
        for digit, count in Counter(n[position] for n in predicted).items():
            if count > cap:
                # Only the exempt top picks may push a digit over its cap
                assert any(n[position] == digit for n in top_picks & set(predicted))


def test_detailed_result_shape(min_history_prediction):
    result = min_history_prediction
    assert result["failed_strategies"] == []
    assert len(result["contributions"]) == 12
    assert len(result["rankings"]) == 100
    scores = [s for _, s in result["rankings"]]
    assert scores == sorted(scores, reverse=True)
    assert all(v >= 0 for v in result["scores"].values())


def test_insufficient_history():
    with pytest.raises(InsufficientDataError) as exc_info:
        PredictionEngine().predict_next_day(build_history(10))
    assert exc_info.value.required == 200
    assert exc_info.value.available == 10
    assert isinstance(exc_info.value, ValueError)


def test_empty_input_end_to_end():
    history = prepare_history(organize_data(parse_raw_data("")))
    with pytest.raises(InsufficientDataError):
        predict_next_day(history)


def test_module_level_predict_with_config():
    config = DEFAULT_CONFIG.replace(min_history=30)
    predicted = predict_next_day(build_history(30), config)
    assert len(predicted) == 16


def test_failing_strategy_is_skipped(capsys):
    config = DEFAULT_CONFIG.replace(min_history=5)
    engine = PredictionEngine(config, strategies=(failing_strategy(), frequency))
    result = engine.predict_detailed(build_history(10))
    assert result["failed_strategies"] == ["broken"]
    assert "broken" not in result["contributions"]
    assert len(result["predicted_numbers"]) == 16
    assert "ERROR in strategy broken" in capsys.readouterr().out


def test_activated_strategy_count():
    assert PredictionEngine().activated_strategy_count == 12
    assert PredictionEngine(strategies=(frequency,)).activated_strategy_count == 1


def test_unknown_strategy_gets_unit_weight():
    config = DEFAULT_CONFIG.replace(min_history=1)
    engine = PredictionEngine(config, strategies=(constant_strategy(50),))
    scored = engine.score_numbers(history_from_days([["05"]] + [["01"]] * 9))
    assert scored["contributions"]["flat"]["33"] == 50.0


def test_global_adjustments():
    config = DEFAULT_CONFIG.replace(min_history=1)
    engine = PredictionEngine(config, strategies=(constant_strategy(50),))
    # "05" has been gone 9 days; never-seen numbers 10 days
    scores = engine.score_numbers(history_from_days([["05"]] + [["01"]] * 9))["scores"]
    assert scores["01"] == 25.0           # landed yesterday
    assert scores["05"] == 60.0           # medium gan bonus
    assert scores["33"] == 60.0
    assert scores["10"] == 75.0           # reverse of yesterday's 01
    assert scores["56"] == 70.0           # shadow of yesterday's 01


def test_second_last_day_damping():
    config = DEFAULT_CONFIG.replace(min_history=1)
    engine = PredictionEngine(config, strategies=(constant_strategy(50),))
    scores = engine.score_numbers(history_from_days([["01"], ["02"], ["12"]]))["scores"]
    assert scores["12"] == 25.0
    assert scores["02"] == 40.0
    assert scores["21"] == 65.0
    assert scores["67"] == 60.0
    assert scores["01"] == 50.0


def test_ultra_gan_damping():
    config = DEFAULT_CONFIG.replace(min_history=1)
    engine = PredictionEngine(config, strategies=(constant_strategy(10),))
    scores = engine.score_numbers(history_from_days([["01"]] * 92))["scores"]
    assert scores["33"] == pytest.approx(2.0)
    assert scores["01"] == 5.0


def test_selection_caps_after_exempt_picks():
    engine = PredictionEngine()
    scores = {num: 50 - int(num) / 10 for num in ALL_NUMBERS}
    for i, num in enumerate(["19", "18", "17", "16", "15", "14", "13", "12", "11", "10"]):
        scores[num] = 100 - i
    selected = engine.select_numbers(scores)

    assert len(selected) == 16
    assert {"16", "17", "18", "19"} <= set(selected)
    assert not {"10", "11", "12", "13", "14", "15"} & set(selected)
    heads = Counter(n[0] for n in selected)
    tails = Counter(n[1] for n in selected)
    assert heads["1"] == 4
    assert all(c <= 3 for h, c in heads.items() if h != "1")
    assert all(c <= 3 for c in tails.values())


def test_selection_ties_break_by_number():
    engine = PredictionEngine()
    selected = engine.select_numbers(dict.fromkeys(ALL_NUMBERS, 1.0))
    assert selected[:4] == ["00", "01", "02", "03"]
    assert len(selected) == 16


def test_selection_caps_shared_digit_sum():
    # Search the whole ranking in the capped pass so the total cap decides alone
    engine = PredictionEngine(DEFAULT_CONFIG.replace(pool_multiplier=7))
    scores = {num: 50 - int(num) / 10 for num in ALL_NUMBERS}
    scores.update({"00": 100, "11": 99, "22": 98, "33": 97})
    for i, num in enumerate(["09", "18", "27", "36", "45", "54", "63", "72", "81", "90"]):
        scores[num] = 90 - i
    selected = engine.select_numbers(scores)

    assert len(selected) == 16
    assert {"00", "11", "22", "33", "09", "18"} <= set(selected)
    # "27" ranks next and fits the head/tail caps, but total 9 is full
    assert "27" not in selected
    totals = Counter(digit_total(n) for n in selected)
    assert totals[9] == 2
    assert max(totals.values()) <= DEFAULT_CONFIG.max_per_total
    assert selected == ["00", "01", "09", "10", "11", "18", "20", "21",
                        "22", "32", "33", "34", "42", "43", "44", "53"]
