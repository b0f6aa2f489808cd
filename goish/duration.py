"""A signed span of time counted in nanoseconds."""

from __future__ import annotations

import datetime
import operator


def _quo(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


class Duration:
    """Elapsed time in nanoseconds; division truncates toward zero."""

    __slots__ = ("_ns",)

    NANOSECOND = 1
    MICROSECOND = 1000 * NANOSECOND
    MILLISECOND = 1000 * MICROSECOND
    SECOND = 1000 * MILLISECOND
    MINUTE = 60 * SECOND
    HOUR = 60 * MINUTE

    def __init__(self, ns: int = 0) -> None:
        self._ns = operator.index(ns)

    def nanoseconds(self) -> int:
        return self._ns

    def microseconds(self) -> int:
        return _quo(self._ns, self.MICROSECOND)

    def milliseconds(self) -> int:
        return _quo(self._ns, self.MILLISECOND)

    def seconds(self) -> float:
        return self._ns / self.SECOND

    def minutes(self) -> float:
        return self.seconds() / 60.0

    def hours(self) -> float:
        return self.minutes() / 60.0

    def to_timedelta(self) -> datetime.timedelta:
        """Convert to a timedelta (microsecond precision)."""
        return datetime.timedelta(microseconds=self.microseconds())

    def __str__(self) -> str:
        return duration_to_string(self)

    def __repr__(self) -> str:
        return f"Duration({self._ns})"

    def __add__(self, other: Duration) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(self._ns + other._ns)

    def __sub__(self, other: Duration) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(self._ns - other._ns)

    def __mul__(self, n: int) -> Duration:
        if not isinstance(n, int):
            return NotImplemented
        return Duration(self._ns * n)

    __rmul__ = __mul__

    def __floordiv__(self, n: int) -> Duration:
        if not isinstance(n, int):
            return NotImplemented
        return Duration(_quo(self._ns, n))

    def __lt__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._ns < other._ns

    def __le__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._ns <= other._ns

    def __gt__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._ns > other._ns

    def __ge__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._ns >= other._ns

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._ns == other._ns

    def __hash__(self) -> int:
        return hash(self._ns)


def duration_to_string(d: Duration) -> str:
    """Render as e.g. ``1h2m3s4ms5us6ns``; seconds appear when hours and minutes are zero."""
    total = d.nanoseconds()
    negative = total < 0
    total = abs(total)

    hours, total = divmod(total, Duration.HOUR)
    minutes, total = divmod(total, Duration.MINUTE)
    seconds, total = divmod(total, Duration.SECOND)
    millis, total = divmod(total, Duration.MILLISECOND)
    micros, nanos = divmod(total, Duration.MICROSECOND)

    parts = ["-"] if negative else []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if seconds or (hours == 0 and minutes == 0):
        parts.append(f"{seconds}s")
    if millis:
        parts.append(f"{millis}ms")
    if micros:
        parts.append(f"{micros}us")
    if nanos:
        parts.append(f"{nanos}ns")
    return "".join(parts)