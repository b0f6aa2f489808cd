"""Wall-clock instants with nanosecond precision."""

from __future__ import annotations

import time

from .duration import Duration

_NS = 1_000_000_000
_DEFAULT_FORMAT = "%Y-%m-%d %H:%M:%S"
_LAYOUTS = {
    "2006-01-02 15:04:05": "%Y-%m-%d %H:%M:%S",
    "2006-01-02": "%Y-%m-%d",
    "15:04:05": "%H:%M:%S",
}


def _trunc_divmod(a: int, b: int) -> tuple[int, int]:
    """Quotient truncated toward zero, with a remainder carrying the sign of ``a``."""
    q = abs(a) // abs(b)
    if (a >= 0) != (b > 0):
        q = -q
    return q, a - q * b


class Time:
    """An instant as seconds and nanoseconds since the Unix epoch."""

    __slots__ = ("_sec", "_nsec")

    def __init__(self, sec: int = 0, nsec: int = 0) -> None:
        self._sec = sec
        self._nsec = nsec

    @staticmethod
    def now() -> Time:
        sec, nsec = divmod(time.time_ns(), _NS)
        return Time(sec, nsec)

    @staticmethod
    def from_unix(sec: int, nsec: int) -> Time:
        return Time(sec, nsec)

    @staticmethod
    def date(year: int, month: int, day: int, hour: int, minute: int, sec: int, nsec: int) -> Time:
        """Build a Time from local calendar fields."""
        seconds = int(time.mktime((year, month, day, hour, minute, sec, 0, 0, -1)))
        return Time(seconds, nsec)

    def unix(self) -> int:
        return self._sec

    def unix_nano(self) -> int:
        return self._sec * _NS + self._nsec

    def _local(self) -> time.struct_time:
        return time.localtime(self._sec)

    def __str__(self) -> str:
        return time.strftime(_DEFAULT_FORMAT, self._local())

    def __repr__(self) -> str:
        return f"Time({self._sec}, {self._nsec})"

    def format(self, layout: str) -> str:
        """Format using one of the reference layouts; unknown layouts use the default."""
        return time.strftime(_LAYOUTS.get(layout, _DEFAULT_FORMAT), self._local())

    def sub(self, other: Time) -> Duration:
        return Duration(self.unix_nano() - other.unix_nano())

    def add(self, d: Duration) -> Time:
        sec, nsec = _trunc_divmod(self.unix_nano() + d.nanoseconds(), _NS)
        return Time(sec, nsec)

    def before(self, other: Time) -> bool:
        return self.unix_nano() < other.unix_nano()

    def after(self, other: Time) -> bool:
        return self.unix_nano() > other.unix_nano()

    def equal(self, other: Time) -> bool:
        return self.unix_nano() == other.unix_nano()

    def truncate(self, d: Duration) -> Time:
        ns = self.unix_nano()
        _, mod = _trunc_divmod(ns, d.nanoseconds())
        return Time.from_unix(0, 0).add(Duration(ns - mod))

    def round(self, d: Duration) -> Time:
        step = d.nanoseconds()
        half, _ = _trunc_divmod(step, 2)
        quotient, _ = _trunc_divmod(self.unix_nano() + half, step)
        return Time.from_unix(0, 0).add(Duration(quotient * step))

    def year(self) -> int:
        return self._local().tm_year

    def month(self) -> int:
        return self._local().tm_mon

    def day(self) -> int:
        return self._local().tm_mday

    def hour(self) -> int:
        return self._local().tm_hour

    def minute(self) -> int:
        return self._local().tm_min

    def second(self) -> int:
        return self._local().tm_sec

    def nanosecond(self) -> int:
        return self._nsec

    def weekday(self) -> int:
        """Day of the week, 0 for Sunday."""
        return (self._local().tm_wday + 1) % 7

    def year_day(self) -> int:
        """Day of the year, starting at 1."""
        return self._local().tm_yday

    def is_zero(self) -> bool:
        return self._sec == 0 and self._nsec == 0


def sleep(d: Duration) -> None:
    """Pause the current thread for ``d``; non-positive durations return at once."""
    if d.nanoseconds() > 0:
        time.sleep(d.seconds())