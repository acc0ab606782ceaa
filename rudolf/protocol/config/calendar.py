# MIT License
# Copyright (c) 2025 Hashborn

"""
Xmas calendar helpers.

All instants are unix timestamps (UTC seconds). Distributions happen on
Dec-25 00:00 UTC; consecutive ones are 365 days apart, or 366 days when the
span contains Feb 29.
"""

import time

SECONDS_PER_DAY = 24 * 3600

# 1970-12-25 00:00 UTC
_XMAS_1970 = 358 * SECONDS_PER_DAY


def is_leap_year(year: int) -> bool:
    """Gregorian rule: divisible by 4 and (not by 100, or by 400)."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_between_xmas(year: int) -> int:
    """Days from Dec-25 of `year - 1` to Dec-25 of `year`."""
    return 366 if is_leap_year(year) else 365


def xmas_timestamp(year: int) -> int:
    """Dec-25 00:00 UTC of `year`."""
    if year < 1970:
        raise ValueError(f"Year {year} is before the unix epoch")
    days = 0
    for y in range(1971, year + 1):
        days += days_between_xmas(y)
    return _XMAS_1970 + days * SECONDS_PER_DAY


def first_xmas_year(reference_time: int) -> int:
    """Year of the first Dec-25 00:00 UTC at or after `reference_time`."""
    if reference_time <= _XMAS_1970:
        return 1970
    year = time.gmtime(reference_time).tm_year
    ts = xmas_timestamp(year)
    while ts < reference_time:
        year += 1
        ts += days_between_xmas(year) * SECONDS_PER_DAY
    return year
