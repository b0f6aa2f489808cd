"""Go-flavoured streams, durations, time, timers, JSON codec and OS helpers."""

__version__ = "0.1.0"
__all__ = ["streams", "duration", "clock", "timers", "jsoncodec", "files", "system"]