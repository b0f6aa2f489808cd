"""One-shot timers and periodic tickers that deliver Time values on a queue."""

from __future__ import annotations

import queue
import threading

from .clock import Time
from .duration import Duration

_POLL_SECONDS = 0.05


class Timer:
    """Puts the current Time on its queue once ``d`` has elapsed, unless stopped."""

    def __init__(self, d: Duration) -> None:
        self._lock = threading.Lock()
        self._start(d)

    def _start(self, d: Duration) -> None:
        self._duration = d
        self._stopped = False
        self._wake = threading.Event()
        self._channel: queue.Queue[Time] = queue.Queue(maxsize=1)
        self._thread = threading.Thread(
            target=self._run, args=(self._wake, self._channel, d), daemon=True
        )
        self._thread.start()

    @staticmethod
    def _run(wake: threading.Event, channel: queue.Queue, d: Duration) -> None:
        if wake.wait(max(d.seconds(), 0.0)):
            return
        if not wake.is_set():
            channel.put_nowait(Time.now())

    def stop(self) -> bool:
        """Stop the timer; return True if this call stopped it."""
        with self._lock:
            was_stopped = self._stopped
            self._stopped = True
        if not was_stopped:
            self._wake.set()
        return not was_stopped

    def reset(self, d: Duration) -> bool:
        """Restart the timer with a new duration and a fresh queue."""
        self.stop()
        self._thread.join()
        with self._lock:
            self._start(d)
        return True

    def c(self) -> queue.Queue:
        return self._channel


class Ticker:
    """Puts the current Time on its queue every ``d``; a tick waits until the last is taken."""

    def __init__(self, d: Duration) -> None:
        self._interval = d
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        self._stopped = False
        self._channel: queue.Queue[Time] = queue.Queue(maxsize=1)
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        interval = max(self._interval.seconds(), 0.0)
        while not self._stop_event.wait(interval):
            tick = Time.now()
            while not self._stop_event.is_set():
                try:
                    self._channel.put(tick, timeout=_POLL_SECONDS)
                    break
                except queue.Full:
                    continue

    def stop(self) -> None:
        """Stop ticking; further calls do nothing."""
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
        self._stop_event.set()
        if self._thread is not threading.current_thread():
            self._thread.join()

    def c(self) -> queue.Queue:
        return self._channel


def new_timer(d: Duration) -> Timer:
    return Timer(d)


def new_ticker(d: Duration) -> Ticker:
    return Ticker(d)