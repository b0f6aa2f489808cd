import datetime

import pytest

from goish.duration import Duration, duration_to_string


def test_integer_accessors():
    assert Duration(5 * Duration.MILLISECOND).milliseconds() == 5
    assert Duration(7 * Duration.MICROSECOND).microseconds() == 7
    assert Duration(12345).nanoseconds() == 12345


def test_accessors_truncate_toward_zero():
    assert Duration(-1500).microseconds() == -Duration(1500).microseconds()
    assert Duration(-2_500_000).milliseconds() == -Duration(2_500_000).milliseconds()


def test_float_accessors_agree():
    d = Duration(90 * Duration.MINUTE)
    assert d.minutes() * 60 == pytest.approx(d.seconds())
    assert d.hours() * 60 == pytest.approx(d.minutes())


def test_to_timedelta():
    assert Duration(90 * Duration.SECOND).to_timedelta() == datetime.timedelta(seconds=90)


def test_string_forms():
    assert str(Duration(0)) == "0s"
    assert str(Duration(Duration.HOUR + 2 * Duration.MINUTE + 3 * Duration.SECOND)) == "1h2m3s"
    assert str(Duration(1500 * Duration.MICROSECOND)) == "0s1ms500us"


def test_negative_string_has_sign_prefix():
    positive = Duration(5 * Duration.SECOND + 7)
    assert str(Duration(-positive.nanoseconds())) == "-" + str(positive)


def test_duration_to_string_matches_str():
    d = Duration(3 * Duration.MINUTE + 9 * Duration.MILLISECOND)
    assert duration_to_string(d) == str(d)


def test_arithmetic_round_trip():
    a = Duration(3 * Duration.SECOND)
    b = Duration(250 * Duration.MILLISECOND)
    assert (a + b) - b == a
    assert a * 3 == a + a + a
    assert 3 * a == a * 3
    assert (a * 4) // 4 == a


def test_division_truncates():
    assert (Duration(-7) // 2).nanoseconds() == -(Duration(7) // 2).nanoseconds()
    with pytest.raises(ZeroDivisionError):
        Duration(7) // 0


def test_ordering_and_hash():
    small, large = Duration(1), Duration(2)
    assert small < large and small <= large
    assert large > small and large >= small
    assert sorted([large, small]) == [small, large]
    assert Duration(2) == large
    assert hash(Duration(2)) == hash(large)
    assert len({Duration(2), large, small}) == 2


def test_rejects_non_integer():
    with pytest.raises(TypeError):
        Duration(1.5)