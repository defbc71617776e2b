import pytest

from sinklog.fmt_helper import (
    count_digits,
    pad2,
    pad3,
    pad6,
    pad9,
    pad_uint,
    time_fraction,
)


@pytest.mark.parametrize(
    "n, expected",
    [(0, "00"), (3, "03"), (23, "23"), (123, "123"), (1234, "1234"), (-5, "-5")],
)
def test_pad2(n, expected):
    assert pad2(n) == expected


@pytest.mark.parametrize(
    "n, expected",
    [(0, "000"), (3, "003"), (23, "023"), (123, "123"), (1234, "1234")],
)
def test_pad3(n, expected):
    assert pad3(n) == expected


@pytest.mark.parametrize(
    "n, expected",
    [
        (0, "000000"),
        (3, "000003"),
        (23, "000023"),
        (123, "000123"),
        (1234, "001234"),
        (12345, "012345"),
        (123456, "123456"),
    ],
)
def test_pad6(n, expected):
    assert pad6(n) == expected


@pytest.mark.parametrize(
    "n, expected",
    [
        (0, "000000000"),
        (3, "000000003"),
        (23, "000000023"),
        (123, "000000123"),
        (1234, "000001234"),
        (12345, "000012345"),
        (123456, "000123456"),
        (1234567, "001234567"),
        (12345678, "012345678"),
        (123456789, "123456789"),
        (1234567891, "1234567891"),
    ],
)
def test_pad9(n, expected):
    assert pad9(n) == expected


def test_pad_uint_rejects_negative():
    with pytest.raises(ValueError):
        pad_uint(-1, 3)


def test_count_digits():
    assert count_digits(0) == 1
    assert count_digits(123456789) == 9
    with pytest.raises(ValueError):
        count_digits(-1)


def test_time_fraction_units():
    ts = 1_234_567_891
    assert time_fraction(ts, 1000) == 234
    assert time_fraction(ts, 1_000_000) == 234567
    assert time_fraction(ts, 1_000_000_000) == 234567891


def test_time_fraction_whole_second():
    assert time_fraction(5_000_000_000, 1000) == 0


def test_time_fraction_bounded():
    for ts in (0, 999_999_999, 1_700_000_000_123_456_789):
        assert 0 <= time_fraction(ts, 1000) < 1000


def test_time_fraction_rejects_bad_unit():
    with pytest.raises(ValueError):
        time_fraction(1, 0)