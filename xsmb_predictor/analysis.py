"""
XSMB Lô - History Analyzer

Query library over a prepared history (list of DailyDrawRecord). Provides
frequency, absence ("gan"), drop/reversal, doubles, weekday, bridge, pair,
successor, digit-sum, cycle, shadow, percentile/trend, streak and zone
statistics used by the scoring strategies.

Internally the history is held as two day x number matrices:
    counts   : int  (n_days, 100)  hits per day, duplicates included
    presence : bool (n_days, 100)  number landed at least once that day

All queries are pure functions of the history and their arguments. Results
are memoized per analyzer instance and shared between callers, so treat them
as read-only. Windows are counted in records, not calendar days; a window of
None falls back to the named default from ``config.lookback``.
"""
import functools
import math
from typing import Optional

import numpy as np

from xsmb_predictor.config import DEFAULT_CONFIG, PipelineConfig
from xsmb_predictor.digits import (
    ALL_NUMBERS,
    ALL_TOTALS,
    DIGITS,
    DOUBLE_NUMBERS,
    NUMBER_INDEX,
    ZONES,
    digit_total,
    is_double,
    mean,
    reverse_number,
    sample_std,
    shadow_number,
    zone_of,
)


def _memoized(method):
    """Cache a query result on the analyzer, keyed by its arguments."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        key = (method.__name__, args, tuple(sorted(kwargs.items())))
        if key not in self._cache:
            self._cache[key] = method(self, *args, **kwargs)
        return self._cache[key]
    return wrapper


def _sorted_desc(freq):
    """(number, count) pairs by count descending, ties by number ascending."""
    return sorted(freq.items(), key=lambda kv: (-kv[1], kv[0]))


def _sorted_asc(freq):
    return sorted(freq.items(), key=lambda kv: (kv[1], kv[0]))


class HistoryAnalyzer:
    """Statistics engine over an immutable, chronological draw history."""

    def __init__(self, history: list, config: PipelineConfig = DEFAULT_CONFIG):
        if not history:
            raise ValueError("HistoryAnalyzer: history cannot be empty.")
        self.history = list(history)
        self.config = config
        self.n_days = len(self.history)
        # Index of the next, not yet drawn, day
        self.current_day_index = self.n_days
        self._cache = {}

        self.counts = np.zeros((self.n_days, len(ALL_NUMBERS)), dtype=np.int64)
        self.totals_presence = np.zeros((self.n_days, len(ALL_TOTALS)), dtype=bool)
        for i, record in enumerate(self.history):
            for num in record.numbers:
                self.counts[i, NUMBER_INDEX[num]] += 1
            for total in record.totals_landed:
                self.totals_presence[i, total] = True
        self.presence = self.counts > 0
        self.days_of_week = np.array([r.day_of_week for r in self.history])

    @property
    def all_numbers(self) -> tuple:
        return ALL_NUMBERS

    # ── Helpers ──────────────────────────────────────────────────────────

    def _window(self, window, default_name):
        if window is None:
            return self.config.lookback.get(default_name)
        return int(window)

    def _slice_start(self, window):
        """First record index of the trailing window; n_days when window is 0."""
        if window <= 0:
            return self.n_days
        return max(0, self.n_days - window)

    def _history_slice(self, window):
        return self.history[self._slice_start(window):]

    def _to_number_map(self, values):
        return {num: int(values[i]) for i, num in enumerate(ALL_NUMBERS)}

    @staticmethod
    def _last_seen(presence):
        """Last row index where each column is True, -1 when never."""
        n_rows = presence.shape[0]
        if n_rows == 0:
            return np.full(presence.shape[1], -1, dtype=np.int64)
        reversed_rows = presence[::-1]
        seen = reversed_rows.any(axis=0)
        last = n_rows - 1 - reversed_rows.argmax(axis=0)
        return np.where(seen, last, -1)

    def _absence_map(self, presence, keys, length):
        last_seen = self._last_seen(presence[:length])
        result = {}
        for i, key in enumerate(keys):
            idx = int(last_seen[i])
            result[key] = {
                "days_gone": length - idx - 1 if idx >= 0 else length,
                "last_seen_index": idx,
                "last_seen_date": self.history[idx].date if idx >= 0 else None,
            }
        return result

    # ===================================================================
    # 1. Frequency
    # ===================================================================

    @_memoized
    def numbers_frequency(self, window: Optional[int] = None) -> dict:
        """Occurrences of each number over the window, duplicates included."""
        window = self._window(window, "medium")
        start = self._slice_start(window)
        return self._to_number_map(self.counts[start:].sum(axis=0))

    def hot_numbers(self, top_n: int = 10, window: Optional[int] = None) -> list:
        freq = self.numbers_frequency(self._window(window, "short"))
        return [num for num, _ in _sorted_desc(freq)[:top_n]]

    def cold_numbers(self, top_n: int = 10, window: Optional[int] = None) -> list:
        """Numbers tied at the minimum count over the window, at most top_n."""
        freq = self.numbers_frequency(self._window(window, "medium"))
        ordered = _sorted_asc(freq)
        min_count = ordered[0][1]
        return [num for num, count in ordered if count == min_count][:top_n]

    @_memoized
    def multi_hit_frequencies(self, window: Optional[int] = None) -> dict:
        """Per number, days with >=2 ("2 nháy") and >=3 ("3 nháy") hits."""
        window = self._window(window, "long")
        recent = self.counts[self._slice_start(window):]
        two = (recent >= 2).sum(axis=0)
        three = (recent >= 3).sum(axis=0)
        return {
            num: {"two_hits": int(two[i]), "three_hits": int(three[i])}
            for i, num in enumerate(ALL_NUMBERS)
        }

    @_memoized
    def special_total_frequencies(self, window: Optional[int] = None) -> dict:
        """Days each number landed, bucketed by the notable totals 0, 9, 10, 18."""
        window = self._window(window, "long")
        days = self.presence[self._slice_start(window):].sum(axis=0)
        result = {}
        for i, num in enumerate(ALL_NUMBERS):
            total = digit_total(num)
            result[num] = {
                f"total_{t}": int(days[i]) if total == t else 0
                for t in (0, 9, 10, 18)
            }
        return result

    # ===================================================================
    # 2. Absence ("gan")
    # ===================================================================

    @_memoized
    def gan_status(self, prefix_length: Optional[int] = None) -> dict:
        """
        Absence status of every number.

        With prefix_length set, the status is evaluated as if the history
        ended after that many records (used for "was it gan before day i").

        Returns
        -------
        dict {number: {days_gone, last_seen_index, last_seen_date}}
        """
        length = self.n_days if prefix_length is None else max(0, min(prefix_length, self.n_days))
        return self._absence_map(self.presence, ALL_NUMBERS, length)

    def filtered_gan_numbers(self, min_days: int = 1, max_days: float = math.inf,
                             top_n: Optional[int] = None) -> list:
        """Numbers whose absence is within [min_days, max_days], longest first."""
        items = [
            {"number": num, **status}
            for num, status in self.gan_status().items()
            if min_days <= status["days_gone"] <= max_days
        ]
        items.sort(key=lambda item: (-item["days_gone"], item["number"]))
        return items if top_n is None else items[:top_n]

    @_memoized
    def historical_gan_analysis(self) -> dict:
        """
        Completed absence streaks per number over the whole history.

        Returns
        -------
        dict {number: {gan_lengths, avg_gan, std_gan, last_gan_period}}
            gan_lengths     : list of completed streak lengths (a streak ends on reappearance)
            last_gan_period : open trailing streak, n_days if never seen
        """
        result = {}
        for j, num in enumerate(ALL_NUMBERS):
            appearances = np.flatnonzero(self.presence[:, j])
            gan_lengths = [int(g) for g in np.diff(appearances) - 1]
            if len(appearances):
                last_gan = self.n_days - 1 - int(appearances[-1])
            else:
                last_gan = self.n_days
            result[num] = {
                "gan_lengths": gan_lengths,
                "avg_gan": mean(gan_lengths),
                "std_gan": sample_std(gan_lengths),
                "last_gan_period": last_gan,
            }
        return result

    # ===================================================================
    # 3. Lô rơi (repeats) / Lô lộn (reversals)
    # ===================================================================

    @_memoized
    def lo_roi_candidates(self, window: Optional[int] = None, must_be_consecutive: bool = False) -> dict:
        """
        Numbers that landed on day i-1 and again on day i inside the window.
        Looks at window+1 records so the first day has a predecessor.
        With must_be_consecutive, a single miss after a hit disqualifies.
        """
        window = self._window(window, "short")
        block = self.presence[self._slice_start(window + 1):]
        if block.shape[0] < 2:
            return {}
        prev, cur = block[:-1], block[1:]
        drops = (prev & cur).sum(axis=0)
        broken = (prev & ~cur).any(axis=0)
        result = {}
        for i, num in enumerate(ALL_NUMBERS):
            if drops[i] > 0 and not (must_be_consecutive and broken[i]):
                result[num] = int(drops[i])
        return result

    @_memoized
    def lo_lon_candidates(self, window: Optional[int] = None, bidirectional: bool = False) -> dict:
        """Reverse of every non-double that landed, credited once per landing."""
        window = self._window(window, "short")
        counts = {}
        for record in self._history_slice(window):
            day = record.unique_set
            for num in record.unique_numbers:
                rev = reverse_number(num)
                if rev == num:
                    continue
                counts[rev] = counts.get(rev, 0) + 1
                if bidirectional and rev in day:
                    counts[num] = counts.get(num, 0) + 1
        return counts

    @_memoized
    def sandwiched_numbers(self, window: Optional[int] = None) -> frozenset:
        """Numbers on day i+1 whenever some number lands on both day i and day i+2."""
        window = self._window(window, "short")
        block = self._history_slice(window)
        found = set()
        for i in range(len(block) - 2):
            if block[i].unique_set & block[i + 2].unique_set:
                found.update(block[i + 1].unique_numbers)
        return frozenset(found)

    # ===================================================================
    # 4. Kép (doubles)
    # ===================================================================

    @_memoized
    def kep_numbers_frequency(self, window: Optional[int] = None) -> dict:
        window = self._window(window, "medium")
        days = self.presence[self._slice_start(window):].sum(axis=0)
        return {num: int(days[NUMBER_INDEX[num]]) for num in DOUBLE_NUMBERS}

    def gan_kep_numbers(self) -> dict:
        status = self.gan_status()
        return {num: status[num] for num in DOUBLE_NUMBERS}

    # ===================================================================
    # 5. Day of week
    # ===================================================================

    @_memoized
    def day_of_week_total_frequencies(self, window: Optional[int] = None) -> dict:
        """{weekday (0=Sunday): {number: occurrences}} over the window."""
        window = self._window(window, "extended")
        start = self._slice_start(window)
        counts, days = self.counts[start:], self.days_of_week[start:]
        return {
            dow: self._to_number_map(counts[days == dow].sum(axis=0))
            for dow in range(7)
        }

    @_memoized
    def day_of_week_average_frequencies(self, window: Optional[int] = None) -> dict:
        """Totals divided by how often that weekday occurs in the window."""
        window = self._window(window, "extended")
        totals = self.day_of_week_total_frequencies(window)
        days = self.days_of_week[self._slice_start(window):]
        result = {}
        for dow, freq in totals.items():
            occurrences = int((days == dow).sum())
            result[dow] = (
                {num: count / occurrences for num, count in freq.items()}
                if occurrences else {}
            )
        return result

    # ===================================================================
    # 6. Bridges (cầu) and chạm
    # ===================================================================

    @_memoized
    def consistent_period_bridge(self, min_occurrences: int = 3, max_period: int = 7,
                                 window: Optional[int] = None) -> frozenset:
        """
        Numbers with `min_occurrences` appearances spaced exactly `period`
        apart (1 <= period <= max_period) whose next step lands on
        current_day_index.
        """
        window = self._window(window, "long")
        start = self._slice_start(window)
        bridges = set()
        for j, num in enumerate(ALL_NUMBERS):
            indices = (np.flatnonzero(self.presence[start:, j]) + start).tolist()
            if len(indices) < min_occurrences:
                continue
            for period in range(1, max_period + 1):
                for i in range(len(indices) - min_occurrences + 1):
                    run = indices[i:i + min_occurrences]
                    if all(b - a == period for a, b in zip(run, run[1:])):
                        if run[-1] + period == self.current_day_index:
                            bridges.add(num)
                            break
        return frozenset(bridges)

    @_memoized
    def cham_bridge_candidates(self, window: Optional[int] = None, threshold_pct: float = 25) -> dict:
        """
        Score numbers by strong head/tail digits. A digit is strong when its
        share of all draws in the window reaches threshold_pct.
        +30 strong head, +30 strong tail, +10 more for a double with both.
        """
        window = self._window(window, "short")
        grid = self.counts[self._slice_start(window):].sum(axis=0).reshape(10, 10)
        head_counts, tail_counts = grid.sum(axis=1), grid.sum(axis=0)
        total = int(grid.sum())

        def _strong(counts):
            if total == 0:
                return set()
            return {DIGITS[d] for d in range(10) if counts[d] / total * 100 >= threshold_pct}

        strong_heads, strong_tails = _strong(head_counts), _strong(tail_counts)
        scores = {}
        for num in ALL_NUMBERS:
            score = 0
            if num[0] in strong_heads:
                score += 30
            if num[1] in strong_tails:
                score += 30
            if num[0] in strong_heads and num[1] in strong_tails and is_double(num):
                score += 10
            scores[num] = score
        return scores

    def digit_days_since(self, position: int, digit: str) -> int:
        """Records since `digit` last landed as head (position 0) or tail (1)."""
        days = 0
        for record in reversed(self.history):
            landed = record.heads_landed if position == 0 else record.tails_landed
            if digit in landed:
                break
            days += 1
        return days

    # ===================================================================
    # 7. Pairs (xiên) and successors
    # ===================================================================

    @_memoized
    def pair_co_occurrences(self, window: Optional[int] = None) -> dict:
        """Days each unordered pair landed together: {number: {partner: days}}."""
        window = self._window(window, "medium")
        block = self.presence[self._slice_start(window):].astype(np.int64)
        matrix = block.T @ block
        np.fill_diagonal(matrix, 0)
        return self._matrix_to_map(matrix)

    @_memoized
    def successor_frequencies(self, window: Optional[int] = None) -> dict:
        """{earlier: {later: count}} over adjacent record pairs in the window."""
        window = self._window(window, "long")
        block = self.presence[self._slice_start(window):].astype(np.int64)
        if block.shape[0] < 2:
            return {}
        matrix = block[:-1].T @ block[1:]
        return {num: row for num, row in self._matrix_to_map(matrix).items() if row}

    def _matrix_to_map(self, matrix):
        result = {}
        for i, num in enumerate(ALL_NUMBERS):
            nonzero = np.flatnonzero(matrix[i])
            result[num] = {ALL_NUMBERS[j]: int(matrix[i, j]) for j in nonzero}
        return result

    @_memoized
    def reverse_co_occurrences(self, window: Optional[int] = None) -> dict:
        """Days each non-double landed together with its reverse."""
        window = self._window(window, "medium")
        return self._paired_days(window, reverse_number)

    @_memoized
    def bong_co_occurrences(self, window: Optional[int] = None) -> dict:
        """Days each number landed together with its shadow (bóng)."""
        window = self._window(window, "medium")
        return self._paired_days(window, shadow_number)

    def _paired_days(self, window, partner_of):
        block = self.presence[self._slice_start(window):]
        result = {}
        for i, num in enumerate(ALL_NUMBERS):
            partner = partner_of(num)
            if partner == num:
                result[num] = 0
                continue
            both = block[:, i] & block[:, NUMBER_INDEX[partner]]
            result[num] = int(both.sum())
        return result

    # ===================================================================
    # 8. Totals (digit sums)
    # ===================================================================

    @_memoized
    def totals_frequency(self, window: Optional[int] = None) -> dict:
        """Days each total 0-18 landed (deduplicated per day)."""
        window = self._window(window, "long")
        days = self.totals_presence[self._slice_start(window):].sum(axis=0)
        return {total: int(days[total]) for total in ALL_TOTALS}

    @_memoized
    def gan_totals_status(self) -> dict:
        return self._absence_map(self.totals_presence, ALL_TOTALS, self.n_days)

    # ===================================================================
    # 9. Cycles
    # ===================================================================

    @_memoized
    def number_cycle_analysis(self) -> dict:
        """
        Appearance cycle profile of every number over the full history.

        Returns
        -------
        dict {number: {appearances, cycles, avg_cycle, cycle_std, consistency,
                       next_due, last_seen_index, days_since_last}}
            consistency : 1/(1+std) of the cycles, 1 when std is 0 or undefined,
                          0 with fewer than two appearances
            next_due    : last appearance + avg_cycle, -1 with fewer than two appearances
        """
        result = {}
        for j, num in enumerate(ALL_NUMBERS):
            appearances = np.flatnonzero(self.presence[:, j]).tolist()
            info = {
                "appearances": appearances,
                "cycles": [],
                "avg_cycle": 0.0,
                "cycle_std": 0.0,
                "consistency": 0.0,
                "next_due": -1,
                "last_seen_index": appearances[-1] if appearances else -1,
                "days_since_last": self.n_days,
            }
            if len(appearances) >= 2:
                cycles = [b - a for a, b in zip(appearances, appearances[1:])]
                std = sample_std(cycles)
                info["cycles"] = cycles
                info["avg_cycle"] = mean(cycles)
                info["cycle_std"] = std
                info["consistency"] = 1.0 if std == 0 or math.isnan(std) else 1.0 / (1.0 + std)
                info["next_due"] = appearances[-1] + info["avg_cycle"]
            if appearances:
                info["days_since_last"] = self.n_days - appearances[-1] - 1
            result[num] = info
        return result

    # ===================================================================
    # 10. Percentiles, trends and streaks
    # ===================================================================

    @_memoized
    def frequency_percentiles(self, window: Optional[int] = None) -> dict:
        """Inclusive percentile rank (0-100) of each number's window frequency."""
        window = self._window(window, "long")
        freq = self.numbers_frequency(window)
        ordered = np.sort(np.array(list(freq.values())))
        n = len(ordered)
        return {
            num: float(np.searchsorted(ordered, count, side="right")) * 100 / n
            for num, count in freq.items()
        }

    def frequency_percentile(self, number: str, window: Optional[int] = None) -> float:
        return self.frequency_percentiles(window).get(number, 0.0)

    @_memoized
    def trend_numbers(self, kind: str = "hot", threshold: float = 80,
                      short_window: Optional[int] = None, long_window: Optional[int] = None) -> dict:
        """
        Classify numbers by short vs long percentile.

        hot : 100 consistently hot, 70 newly hot
        cold: -100 consistently cold, -70 newly cold (threshold counts from the bottom)
        """
        if kind not in ("hot", "cold"):
            raise ValueError(f"Unknown trend kind: {kind!r}")
        short_pct = self.frequency_percentiles(self._window(short_window, "very_short"))
        long_pct = self.frequency_percentiles(self._window(long_window, "long"))
        scores = {}
        for num in ALL_NUMBERS:
            s, l = short_pct[num], long_pct[num]
            score = 0
            if kind == "hot" and s >= threshold:
                score = 100 if l >= threshold - 10 else 70
            elif kind == "cold":
                cold = 100 - threshold
                if s <= cold:
                    score = -100 if l <= cold + 10 else -70
            scores[num] = score
        return scores

    @_memoized
    def consecutive_appearance(self, max_days: int = 3) -> dict:
        """Length of the streak ending on the last record, capped at max_days."""
        streaks = dict.fromkeys(ALL_NUMBERS, 0)
        if self.n_days < max_days:
            return streaks
        tail = self.presence[-max_days:][::-1]
        for j, num in enumerate(ALL_NUMBERS):
            streak = 0
            for landed in tail[:, j]:
                if not landed:
                    break
                streak += 1
            streaks[num] = streak
        return streaks

    # ===================================================================
    # 11. Zones and calendar
    # ===================================================================

    @_memoized
    def zone_frequencies(self, window: Optional[int] = None) -> dict:
        """Unique-number landings per zone (00-24, 25-49, 50-74, 75-99)."""
        window = self._window(window, "medium")
        days = self.presence[self._slice_start(window):].sum(axis=0)
        return {name: int(days[low:high + 1].sum()) for name, low, high in ZONES}

    def zone_for_number(self, number: str) -> str:
        return zone_of(number)

    @_memoized
    def date_day_frequency(self, day_of_month: int, window: Optional[int] = None) -> dict:
        window = self._window(window, "extended")
        start = self._slice_start(window)
        mask = np.array([r.date.day == day_of_month for r in self.history[start:]], dtype=bool)
        block = self.presence[start:]
        if not mask.any():
            return dict.fromkeys(ALL_NUMBERS, 0)
        return self._to_number_map(block[mask].sum(axis=0))

    # ===================================================================
    # 12. Recent-day shortcuts
    # ===================================================================

    def _recent(self, offset):
        return self.history[-offset] if self.n_days >= offset else None

    def last_day_numbers(self) -> tuple:
        record = self._recent(1)
        return record.unique_numbers if record else ()

    def second_last_day_numbers(self) -> tuple:
        record = self._recent(2)
        return record.unique_numbers if record else ()

    def third_last_day_numbers(self) -> tuple:
        record = self._recent(3)
        return record.unique_numbers if record else ()

    def last_day_heads(self) -> frozenset:
        return frozenset(self.history[-1].heads_landed)

    def last_day_tails(self) -> frozenset:
        return frozenset(self.history[-1].tails_landed)

    def last_day_totals(self) -> frozenset:
        return frozenset(self.history[-1].totals_landed)

    def last_day_doubles(self) -> tuple:
        return self.history[-1].doubles_landed

    def next_day_of_week(self) -> int:
        """Weekday (0=Sunday) of the day following the last record."""
        return (self.history[-1].day_of_week + 1) % 7
