"""
The lô number universe ("00".."99") and digit helpers shared by every stage.

Vocabulary:
    head / tail  : first / second digit ("đầu" / "đuôi")
    total        : digit sum, 0-18 ("tổng")
    double       : both digits equal, e.g. "33" ("kép")
    reverse      : digits swapped, e.g. "12" -> "21" ("lộn")
    shadow       : both digits mapped through 0<->5, 1<->6, 2<->7, 3<->8, 4<->9 ("bóng")
"""
import numpy as np


ALL_NUMBERS = tuple(f"{n:02d}" for n in range(100))
NUMBER_INDEX = {num: i for i, num in enumerate(ALL_NUMBERS)}
DOUBLE_NUMBERS = tuple(num for num in ALL_NUMBERS if num[0] == num[1])
DIGITS = tuple(str(d) for d in range(10))
ALL_TOTALS = tuple(range(19))

SHADOW_DIGITS = {
    "0": "5", "5": "0",
    "1": "6", "6": "1",
    "2": "7", "7": "2",
    "3": "8", "8": "3",
    "4": "9", "9": "4",
}

ZONES = (
    ("Zone1", 0, 24),
    ("Zone2", 25, 49),
    ("Zone3", 50, 74),
    ("Zone4", 75, 99),
)


def is_valid_number(num):
    return isinstance(num, str) and len(num) == 2 and num.isdigit()


def is_double(num):
    return num[0] == num[1]


def reverse_number(num):
    """Digit reversal; a double is its own reverse."""
    return num[1] + num[0]


def shadow_digit(digit):
    return SHADOW_DIGITS[digit]


def shadow_number(num):
    return SHADOW_DIGITS[num[0]] + SHADOW_DIGITS[num[1]]


def digit_total(num):
    return int(num[0]) + int(num[1])


def zone_of(num):
    value = int(num)
    for name, low, high in ZONES:
        if low <= value <= high:
            return name
    return None


def numbers_with_total(total):
    return [num for num in ALL_NUMBERS if digit_total(num) == total]


def numbers_with_digit(position, digit):
    """All numbers whose head (position 0) or tail (position 1) is `digit`."""
    return [num for num in ALL_NUMBERS if num[position] == digit]


def mean(values):
    return float(np.mean(values)) if len(values) else 0.0


def sample_std(values):
    """Sample standard deviation (n-1); 0.0 with fewer than two values."""
    if len(values) < 2:
        return 0.0
    return float(np.std(values, ddof=1))


def clamp_scores(scores, ceiling):
    """Clamp every score into [0, ceiling]."""
    return {num: float(min(max(score, 0.0), ceiling)) for num, score in scores.items()}


def sort_numbers(numbers):
    return sorted(numbers, key=int)
