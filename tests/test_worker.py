from xsmb_predictor.worker import (
    PipelineWorker,
    WorkerMessage,
    handle_request,
    predict,
    prepare,
)

from conftest import build_organized, render_raw_text


def collect(request, config):
    messages = []
    handle_request(request, messages.append, config)
    return messages


def test_prepare_from_raw_text():
    history = prepare(render_raw_text(build_organized(5)))
    assert len(history) == 5
    assert history[0].day_of_week == 0


def test_predict_payload(small_config):
    history = prepare(render_raw_text(build_organized(60)), small_config)
    payload = predict(history, small_config)
    assert len(payload["predicted_numbers"]) == 16
    assert payload["history_length"] == 60
    assert payload["active_strategies"] == 12


def test_process_data_messages(small_config):
    raw = render_raw_text(build_organized(60))
    messages = collect({"type": "process_data", "payload": {"raw_data": raw}}, small_config)
    types = [m.type for m in messages]
    assert types == ["status", "status", "status", "prediction_result"]
    assert messages[1].payload == "Prepared 60 days of data."
    assert len(messages[-1].payload["predicted_numbers"]) == 16


def test_empty_data_is_an_error(small_config):
    messages = collect({"type": "process_data", "payload": {"raw_data": ""}}, small_config)
    assert messages[-1].type == "error"
    assert [m.type for m in messages].count("prediction_result") == 0


def test_short_history_is_an_error(small_config):
    raw = render_raw_text(build_organized(10))
    messages = collect({"type": "process_data", "payload": {"raw_data": raw}}, small_config)
    assert messages[-1].type == "error"
    assert "Not enough history" in messages[-1].payload


def test_unknown_request_type(small_config):
    messages = collect({"type": "shutdown", "payload": {}}, small_config)
    assert messages == [WorkerMessage("error", "Unknown request type: shutdown")]


def test_backtest_request(small_config):
    raw = render_raw_text(build_organized(62))
    messages = collect({"type": "run_backtest", "payload": {"raw_data": raw}}, small_config)
    assert [m.type for m in messages] == ["status", "backtest_result"]
    assert messages[-1].payload["total_days_tested"] == 2


def test_background_worker(small_config):
    raw = render_raw_text(build_organized(60))
    with PipelineWorker(small_config) as worker:
        worker.process_data(raw).result(timeout=120)
        messages = worker.drain()
    assert messages[-1].type == "prediction_result"
    assert messages[-1].payload["history_length"] == 60
    assert worker.drain() == []
