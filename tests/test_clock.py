import time

from goish.clock import Time, sleep
from goish.duration import Duration


def test_now_is_not_zero():
    now = Time.now()
    assert str(now) != ""
    assert not now.is_zero()


def test_sleeps_approximately_correct_duration():
    start = Time.now()
    sleep(Duration(200 * Duration.MILLISECOND))
    elapsed_ms = Time.now().sub(start).milliseconds()
    assert elapsed_ms >= 180
    assert elapsed_ms <= 250


def test_now_is_close_to_system_clock():
    sys_ns = time.time_ns()
    t = Time.now()
    assert abs(t.unix_nano() - sys_ns) < 5_000_000


def test_unix_construction_and_accessors():
    t = Time.from_unix(1620000000, 123456789)
    assert t.unix() == 1620000000
    assert t.unix_nano() == 1620000000_000_000_000 + 123456789


def test_date_construction():
    t = Time.date(2023, 5, 7, 12, 34, 56, 789)
    assert t.year() == 2023
    assert t.month() == 5
    assert t.day() == 7
    assert t.hour() == 12
    assert t.minute() == 34
    assert t.second() == 56
    assert t.nanosecond() == 789


def test_date_weekday_and_year_day():
    t = Time.date(2023, 5, 7, 12, 34, 56, 789)
    assert t.weekday() == 0
    assert t.year_day() == 127


def test_comparison_operators():
    a = Time.from_unix(100, 0)
    b = Time.from_unix(200, 0)
    assert a.before(b)
    assert b.after(a)
    assert not a.equal(b)
    assert a.equal(Time.from_unix(100, 0))


def test_add_and_sub_duration():
    a = Time.from_unix(1, 500000000)
    d = Duration(1_500_000_000)
    b = a.add(d)
    assert b.unix() == 3
    assert b.nanosecond() == 0
    assert b.sub(a).seconds() == 1.5


def test_is_zero_works():
    assert Time().is_zero()
    assert not Time.now().is_zero()


def test_string_format_not_empty():
    t = Time.date(2023, 5, 7, 12, 34, 56, 0)
    assert str(t) == "2023-05-07 12:34:56"
    assert t.format("2006-01-02 15:04:05") == "2023-05-07 12:34:56"
    assert len(str(Time.now())) == 19


def test_format_layouts_agree_with_default():
    t = Time.from_unix(1620000000, 0)
    full = str(t)
    assert t.format("2006-01-02 15:04:05") == full
    assert t.format("2006-01-02") == full[:10]
    assert t.format("15:04:05") == full[11:]
    assert t.format("unknown layout") == full


def test_truncate_rounds_down():
    t = Time.from_unix(1234, 987654321)
    truncated = t.truncate(Duration(Duration.SECOND))
    assert truncated.unix() == 1234
    assert truncated.nanosecond() == 0


def test_round_rounds_nearest():
    t = Time.from_unix(1234, 1_600_000_000)
    rounded = t.round(Duration(Duration.SECOND))
    assert rounded.unix() == 1236
    assert rounded.nanosecond() == 0