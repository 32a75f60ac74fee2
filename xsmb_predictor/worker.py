"""
Background worker for the XSMB pipeline.

Keeps a caller (UI, CLI) responsive by running parse -> prepare -> predict or
backtest on a single background thread. Progress and results come back as
WorkerMessage objects on a queue:

    status             progress text
    prediction_result  {"predicted_numbers", "history_length", "active_strategies"}
    backtest_result    backtest summary dict
    error              message text

Requests are dicts: {"type": "process_data" | "run_backtest",
                     "payload": {"raw_data": <text>}}.
"""
import queue
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

from xsmb_predictor.backtester import run_backtest
from xsmb_predictor.config import DEFAULT_CONFIG
from xsmb_predictor.parser import organize_data, parse_raw_data
from xsmb_predictor.predictor import PredictionEngine
from xsmb_predictor.preparer import prepare_history


PROCESS_DATA = "process_data"
RUN_BACKTEST = "run_backtest"


@dataclass(frozen=True)
class WorkerMessage:
    type: str
    payload: Any = None


# ── Pipeline steps ───────────────────────────────────────────────────────

def prepare(raw_data, config=DEFAULT_CONFIG):
    """Raw text -> prepared history (possibly empty)."""
    parsed = parse_raw_data(raw_data, draws_per_day=config.draws_per_day)
    return prepare_history(organize_data(parsed))


def predict(history, config=DEFAULT_CONFIG):
    engine = PredictionEngine(config)
    return {
        "predicted_numbers": engine.predict_next_day(history),
        "history_length": len(history),
        "active_strategies": engine.activated_strategy_count,
    }


def backtest(history, config=DEFAULT_CONFIG, verbose=False):
    return run_backtest(history, config, verbose=verbose)


# ── Dispatcher ───────────────────────────────────────────────────────────

def handle_request(request, post, config=DEFAULT_CONFIG):
    """
    Run one request synchronously, reporting through post(WorkerMessage).
    Never raises: any failure becomes an "error" message.
    """
    req_type = request.get("type")
    raw_data = (request.get("payload") or {}).get("raw_data", "")

    try:
        if req_type == PROCESS_DATA:
            post(WorkerMessage("status", "Analyzing historical data..."))
            history = prepare(raw_data, config)
            if not history:
                post(WorkerMessage("error", "No valid draw data found. Please check the input format."))
                return
            post(WorkerMessage("status", f"Prepared {len(history)} days of data."))
            post(WorkerMessage("status", "Generating prediction..."))
            post(WorkerMessage("prediction_result", predict(history, config)))

        elif req_type == RUN_BACKTEST:
            post(WorkerMessage("status", "Running backtest on historical data..."))
            history = prepare(raw_data, config)
            if not history:
                post(WorkerMessage("error", "Not enough historical data to run a backtest."))
                return
            post(WorkerMessage("backtest_result", backtest(history, config)))

        else:
            post(WorkerMessage("error", f"Unknown request type: {req_type}"))

    except Exception as e:
        post(WorkerMessage("error", f"Error processing data: {e}"))


class PipelineWorker:
    """Single background thread plus an outbound message queue."""

    def __init__(self, config=DEFAULT_CONFIG):
        self.config = config
        self.messages = queue.Queue()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="xsmb-worker")

    def post(self, message):
        self.messages.put(message)

    def submit(self, request):
        """Queue a request on the background thread; returns its Future."""
        return self._executor.submit(handle_request, request, self.post, self.config)

    def process_data(self, raw_data):
        return self.submit({"type": PROCESS_DATA, "payload": {"raw_data": raw_data}})

    def run_backtest(self, raw_data):
        return self.submit({"type": RUN_BACKTEST, "payload": {"raw_data": raw_data}})

    def drain(self):
        """All messages posted so far, oldest first."""
        drained = []
        while True:
            try:
                drained.append(self.messages.get_nowait())
            except queue.Empty:
                return drained

    def shutdown(self, wait=True):
        self._executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
        return False
