import os
import sys
from datetime import date, timedelta

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from xsmb_predictor.config import DEFAULT_CONFIG
from xsmb_predictor.preparer import prepare_history, prepare_record


START_DATE = date(2023, 1, 1)  # a Sunday


def synthetic_numbers(i, count=27):
    """27 distinct numbers for day i; 13 is coprime with 100 so no repeats."""
    return [f"{(i * 7 + k * 13) % 100:02d}" for k in range(count)]


def seven_every_fifth_numbers(i):
    """27 numbers per day; "07" lands only on days divisible by 5."""
    others = [f"{n:02d}" for n in ((i * 7 + k * 13) % 100 for k in range(40)) if n != 7]
    return (["07"] + others[:26]) if i % 5 == 0 else others[:27]


def build_organized(n_days, numbers_fn=synthetic_numbers, start=START_DATE):
    return [
        {"date": start + timedelta(days=i), "numbers": numbers_fn(i)}
        for i in range(n_days)
    ]


def build_history(n_days, numbers_fn=synthetic_numbers, start=START_DATE):
    return prepare_history(build_organized(n_days, numbers_fn, start))


def history_from_days(days, start=START_DATE):
    """Hand-written history: one list of numbers per consecutive day."""
    return [prepare_record(start + timedelta(days=i), nums) for i, nums in enumerate(days)]


def render_raw_text(organized):
    """Inverse of the parser: XSMB lô tô text with one head/tail line per head digit."""
    lines = []
    for entry in organized:
        d = entry["date"]
        lines.append(f"XSMB Thứ {d.isoweekday() % 7 + 1} ngày {d.day}-{d.month}-{d.year}")
        lines.append("Đầu Đuôi")
        for head in "0123456789":
            tails = [n[1] for n in entry["numbers"] if n[0] == head]
            if tails:
                lines.append(f"{head} {','.join(tails)}")
        lines.append("")
    return "\n".join(lines)


@pytest.fixture
def small_config():
    return DEFAULT_CONFIG.replace(min_history=60, backtest_window=3)


@pytest.fixture(scope="session")
def long_history():
    return build_history(210)


@pytest.fixture(scope="session")
def seven_history():
    return build_history(53, seven_every_fifth_numbers)
