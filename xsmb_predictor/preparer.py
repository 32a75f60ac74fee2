"""
Record Preparer

Enriches each organized day ({"date", "numbers"}) into an immutable
DailyDrawRecord. Every derived field is computed from that single day only;
cross-day statistics belong to the HistoryAnalyzer.
"""
import warnings
from collections import Counter
from dataclasses import dataclass
from datetime import date
from types import MappingProxyType

from xsmb_predictor.digits import (
    ALL_TOTALS,
    DIGITS,
    digit_total,
    is_double,
    reverse_number,
    shadow_number,
)


@dataclass(frozen=True)
class DailyDrawRecord:
    date: date
    numbers: tuple                  # draw order, duplicates kept
    unique_numbers: tuple           # first-seen order
    day_of_week: int                # 0 = Sunday ... 6 = Saturday
    daily_counts: MappingProxyType
    two_hits: tuple
    three_hits: tuple
    doubles_landed: tuple
    sat_doubles_landed: tuple
    near_doubles_landed: tuple
    totals_landed: tuple
    total_counts: MappingProxyType
    heads_landed: tuple
    tails_landed: tuple
    head_counts: MappingProxyType
    tail_counts: MappingProxyType
    reversed_pairs_landed: tuple
    shadow_pairs_landed: tuple

    @property
    def unique_set(self):
        return frozenset(self.unique_numbers)


def _sunday_first_weekday(day_date):
    # date.weekday() is Monday=0; records use Sunday=0
    return (day_date.weekday() + 1) % 7


def _dedupe(items):
    return tuple(dict.fromkeys(items))


def prepare_record(day_date, numbers):
    """Build one DailyDrawRecord from a day's landed numbers."""
    numbers = tuple(numbers)
    unique_numbers = _dedupe(numbers)
    unique_set = set(unique_numbers)

    daily_counts = Counter(numbers)
    two_hits = tuple(n for n, c in daily_counts.items() if c >= 2)
    three_hits = tuple(n for n, c in daily_counts.items() if c >= 3)

    # Kép (doubles) and their neighbours
    doubles = tuple(n for n in unique_numbers if is_double(n))
    sat_doubles = tuple(
        n for n in unique_numbers
        if not is_double(n) and any(n[0] == d[0] or n[1] == d[1] for d in doubles)
    )
    near_doubles = tuple(n for n in unique_numbers if abs(int(n[0]) - int(n[1])) <= 1)

    # Totals (digit sums)
    total_counts = dict.fromkeys(ALL_TOTALS, 0)
    for n in unique_numbers:
        total_counts[digit_total(n)] += 1
    totals_landed = _dedupe(digit_total(n) for n in unique_numbers)

    # Head / tail digits
    head_counts = dict.fromkeys(DIGITS, 0)
    tail_counts = dict.fromkeys(DIGITS, 0)
    for n in unique_numbers:
        head_counts[n[0]] += 1
        tail_counts[n[1]] += 1

    reversed_pairs = tuple(
        n for n in unique_numbers
        if reverse_number(n) != n and reverse_number(n) in unique_set
    )
    shadow_pairs = tuple(
        n for n in unique_numbers
        if shadow_number(n) != n and shadow_number(n) in unique_set
    )

    return DailyDrawRecord(
        date=day_date,
        numbers=numbers,
        unique_numbers=unique_numbers,
        day_of_week=_sunday_first_weekday(day_date),
        daily_counts=MappingProxyType(dict(daily_counts)),
        two_hits=two_hits,
        three_hits=three_hits,
        doubles_landed=doubles,
        sat_doubles_landed=sat_doubles,
        near_doubles_landed=near_doubles,
        totals_landed=totals_landed,
        total_counts=MappingProxyType(total_counts),
        heads_landed=_dedupe(n[0] for n in unique_numbers),
        tails_landed=_dedupe(n[1] for n in unique_numbers),
        head_counts=MappingProxyType(head_counts),
        tail_counts=MappingProxyType(tail_counts),
        reversed_pairs_landed=reversed_pairs,
        shadow_pairs_landed=shadow_pairs,
    )


def prepare_history(organized):
    """
    Enrich an organized, chronological list of {"date", "numbers"} entries.

    Returns
    -------
    list of DailyDrawRecord (the history sequence), same order as the input.
    """
    if not organized:
        warnings.warn("[Preparer] No organized data provided to prepare.")
        return []
    return [prepare_record(entry["date"], entry["numbers"]) for entry in organized]
