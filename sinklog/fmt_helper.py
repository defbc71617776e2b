"""Helpers to format and zero-pad integers and to split timestamps."""

from __future__ import annotations

_NS_PER_SECOND = 1_000_000_000


def count_digits(n: int) -> int:
    """Number of decimal digits in a non-negative integer (0 has one)."""
    if n < 0:
        raise ValueError("count_digits needs a non-negative integer")
    return len(str(n))


def pad2(n: int) -> str:
    """Format an integer with at least two digits."""
    if n > 99:
        return str(n)
    return f"{n:02d}"


def pad_uint(n: int, width: int) -> str:
    """Zero-pad a non-negative integer to at least ``width`` digits."""
    if n < 0:
        raise ValueError("pad_uint needs a non-negative integer")
    return str(n).zfill(width)


def pad3(n: int) -> str:
    """Zero-pad to three digits."""
    return pad_uint(n, 3)


def pad6(n: int) -> str:
    """Zero-pad to six digits."""
    return pad_uint(n, 6)


def pad9(n: int) -> str:
    """Zero-pad to nine digits."""
    return pad_uint(n, 9)


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def time_fraction(timestamp_ns: int, per_second: int) -> int:
    """Return the sub-second part of a nanosecond timestamp.

    ``per_second`` gives the unit: 1000 for milliseconds, 1_000_000 for
    microseconds, 1_000_000_000 for nanoseconds.
    """
    if per_second <= 0:
        raise ValueError("per_second must be positive")
    total_units = _trunc_div(timestamp_ns * per_second, _NS_PER_SECOND)
    whole_seconds = _trunc_div(timestamp_ns, _NS_PER_SECOND)
    return total_units - whole_seconds * per_second