"""
XSMB Raw Text Parser

Turns pasted / exported XSMB "lô tô" tables into chronological day entries.
Expected layout, one section per draw day:

    XSMB Thứ 2 ngày 15-01-2024
    Đầu Đuôi
    0 2,5
    1 1,3,8
    ...

Each head/tail line "H T1,T2,..." yields the numbers HT1, HT2, ... (so "0 2,5"
means 02 and 05 landed). Malformed lines are skipped with a warning, never
fatal.
"""
import os
import re
import unicodedata
import warnings
from datetime import date

import pandas as pd

from xsmb_predictor.config import DEFAULT_CONFIG
from xsmb_predictor.digits import is_valid_number
from xsmb_predictor.preparer import prepare_history


DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")
DEFAULT_DATA_PATH = os.path.join(DATA_DIR, "xsmb_history.txt")

DATE_HEADER_RE = re.compile(
    r"XSMB\s+(?:.*?\s+)?ng(?:a|à)y\s+(\d{1,2})[-/](\d{1,2})[-/](\d{4})",
    re.IGNORECASE,
)
HEAD_TAIL_RE = re.compile(r"^(\d)\s+(\d[\d,\s]*)$")


def _normalize_line(line):
    return unicodedata.normalize("NFC", line).strip()


def _is_column_header(line):
    lowered = line.lower()
    return "đầu" in lowered and "đuôi" in lowered


def parse_raw_data(raw_text, draws_per_day=DEFAULT_CONFIG.draws_per_day):
    """
    Parse raw XSMB text into {iso_date: [numbers]}.

    Returns
    -------
    dict keyed by "YYYY-MM-DD" (sorted chronologically). A date header with no
    recognised data lines maps to an empty list.
    """
    data_by_date = {}
    current_date = None

    for raw_line in (raw_text or "").splitlines():
        line = _normalize_line(raw_line)
        if not line:
            continue

        date_match = DATE_HEADER_RE.search(line)
        if date_match:
            day, month, year = date_match.groups()
            current_date = f"{year}-{int(month):02d}-{int(day):02d}"
            if current_date in data_by_date:
                warnings.warn(f"[Parser] Duplicate entry for {current_date}; "
                              f"overwriting previous data.")
            data_by_date[current_date] = []
            continue

        if current_date is None:
            if HEAD_TAIL_RE.match(line):
                warnings.warn(f"[Parser] Skipped data line {line!r}: no date header yet.")
            continue

        if _is_column_header(line):
            continue

        ht_match = HEAD_TAIL_RE.match(line)
        if not ht_match:
            warnings.warn(f"[Parser] Unrecognized line {line!r} for {current_date}. Skipped.")
            continue

        head, tails = ht_match.groups()
        for tail in tails.split(","):
            tail = tail.strip()
            if not tail:
                continue
            number = head + tail
            if is_valid_number(number):
                data_by_date[current_date].append(number)
            else:
                warnings.warn(f"[Parser] Invalid number {number!r} from line {line!r} "
                              f"on {current_date}. Skipped.")

    for day_key, numbers in data_by_date.items():
        if numbers and len(numbers) != draws_per_day:
            warnings.warn(f"[Parser] {day_key} has {len(numbers)} numbers, "
                          f"expected {draws_per_day}.")

    return {k: data_by_date[k] for k in sorted(data_by_date)}


def organize_data(parsed):
    """
    Convert {iso_date: [numbers]} into a chronological list of
    {"date": datetime.date, "numbers": [..]} entries.
    """
    organized = []
    for date_str, numbers in parsed.items():
        try:
            year, month, day = (int(part) for part in date_str.split("-"))
            day_date = date(year, month, day)
        except ValueError:
            warnings.warn(f"[Parser] Invalid date {date_str!r}. Skipping this entry.")
            continue

        clean = [str(n).zfill(2) for n in numbers]
        clean = [n for n in clean if is_valid_number(n)]
        organized.append({"date": day_date, "numbers": clean})

    organized.sort(key=lambda entry: entry["date"])
    return organized


def load_raw_file(path=DEFAULT_DATA_PATH):
    """Read a raw XSMB text export from disk."""
    with open(path, encoding="utf-8") as fh:
        return fh.read()


def load_history(path=DEFAULT_DATA_PATH, config=DEFAULT_CONFIG):
    """Read, parse, organize and prepare a history file in one go."""
    raw = load_raw_file(path)
    organized = organize_data(parse_raw_data(raw, draws_per_day=config.draws_per_day))
    history = prepare_history(organized)
    print(f"[Parser] Loaded {len(history)} draw days from {path}")
    return history


def history_to_frame(history):
    """One row per draw day, for display and quick inspection."""
    rows = []
    for record in history:
        rows.append({
            "date": pd.Timestamp(record.date),
            "day_of_week": record.day_of_week,
            "count": len(record.numbers),
            "unique_count": len(record.unique_numbers),
            "doubles": ", ".join(record.doubles_landed),
            "numbers": " ".join(record.numbers),
        })
    columns = ["date", "day_of_week", "count", "unique_count", "doubles", "numbers"]
    return pd.DataFrame(rows, columns=columns)
