"""Byte-stream interfaces, stream helpers and the errors they raise.

Readers return ``b""`` to signal the end of the stream.
"""

from __future__ import annotations

import abc
import enum
import threading

DEFAULT_COPY_SIZE = 32 * 1024


class Whence(enum.IntEnum):
    """Reference point for a seek."""

    START = 0
    CURRENT = 1
    END = 2


class StreamError(Exception):
    """Base class for stream errors; an optional message prefixes the default text."""

    default_message = "unknown I/O error"

    def __init__(self, message: str = "") -> None:
        text = f"{message}: {self.default_message}" if message else self.default_message
        super().__init__(text)


class UnexpectedEOF(StreamError, EOFError):
    default_message = "unexpected EOF"


class ShortWrite(StreamError):
    default_message = "short write"


class ShortBuffer(StreamError):
    default_message = "short buffer"


class NoProgress(StreamError):
    default_message = "multiple Read calls return no data"


class StreamTimeout(StreamError):
    default_message = "I/O timeout"


class Interrupted(StreamError):
    default_message = "I/O interrupted"


class BufferTooSmall(StreamError):
    default_message = "buffer too small"


class ClosedPipe(StreamError):
    default_message = "io: read/write on closed pipe"


class Reader(abc.ABC):
    @abc.abstractmethod
    def read(self, size: int) -> bytes:
        """Return up to ``size`` bytes; ``b""`` means end of stream."""


class Writer(abc.ABC):
    @abc.abstractmethod
    def write(self, data: bytes) -> int:
        """Write ``data`` and return the number of bytes written."""


class Closer(abc.ABC):
    @abc.abstractmethod
    def close(self) -> None:
        """Release the underlying resource."""


class ReaderAt(abc.ABC):
    @abc.abstractmethod
    def read_at(self, size: int, offset: int) -> bytes:
        """Read up to ``size`` bytes starting at ``offset``."""


class WriterAt(abc.ABC):
    @abc.abstractmethod
    def write_at(self, data: bytes, offset: int) -> int:
        """Write ``data`` at ``offset`` and return the number of bytes written."""


class Seeker(abc.ABC):
    @abc.abstractmethod
    def seek(self, offset: int, whence: Whence) -> int:
        """Move the position and return the new offset."""


class OffsetWriter(Writer, WriterAt, Seeker):
    """Writes to a WriterAt, shifting every position by a fixed base offset."""

    def __init__(self, target: WriterAt, offset: int) -> None:
        self._target = target
        self._base = offset
        self._current = offset

    def write(self, data: bytes) -> int:
        written = self._target.write_at(data, self._current)
        self._current += written
        return written

    def write_at(self, data: bytes, offset: int) -> int:
        if offset < 0:
            raise ValueError("negative offset")
        return self._target.write_at(data, self._base + offset)

    def seek(self, offset: int, whence: Whence) -> int:
        if whence == Whence.START:
            offset += self._base
        elif whence == Whence.CURRENT:
            offset += self._current
        else:
            raise ValueError("invalid whence")
        if offset < self._base:
            raise ValueError("invalid offset")
        self._current = offset
        return offset - self._base


class LimitedReader(Reader):
    """Reads from ``source`` but stops after ``limit`` bytes."""

    def __init__(self, source: Reader, limit: int) -> None:
        self._source = source
        self._remaining = limit

    @property
    def remaining(self) -> int:
        return self._remaining

    def read(self, size: int) -> bytes:
        if self._remaining <= 0:
            return b""
        data = self._source.read(min(size, self._remaining))
        self._remaining -= len(data)
        return data


class _PipeState:
    def __init__(self) -> None:
        self.cond = threading.Condition()
        self.write_lock = threading.Lock()
        self.pending = memoryview(b"")
        self.reader_closed = False
        self.writer_closed = False
        self.reader_error: BaseException | None = None
        self.writer_error: BaseException | None = None


class PipeReader(Reader):
    """Read half of a synchronous in-memory pipe."""

    def __init__(self, state: _PipeState) -> None:
        self._state = state

    def read(self, size: int) -> bytes:
        if size < 0:
            raise ValueError("negative read size")
        st = self._state
        with st.cond:
            while True:
                if st.reader_closed:
                    raise ClosedPipe()
                if size == 0:
                    return b""
                if len(st.pending):
                    chunk = bytes(st.pending[:size])
                    st.pending = st.pending[size:]
                    st.cond.notify_all()
                    return chunk
                if st.writer_closed:
                    if st.writer_error is not None:
                        raise st.writer_error
                    return b""
                st.cond.wait()

    def close(self) -> None:
        self.close_with_error(None)

    def close_with_error(self, err: BaseException | None) -> None:
        """Close the pipe; later writes raise ``err`` (or ClosedPipe when None)."""
        st = self._state
        with st.cond:
            if not st.reader_closed:
                st.reader_closed = True
                st.reader_error = err
            st.cond.notify_all()


class PipeWriter(Writer):
    """Write half of a synchronous in-memory pipe."""

    def __init__(self, state: _PipeState) -> None:
        self._state = state

    def _reader_failure(self) -> BaseException:
        err = self._state.reader_error
        return err if err is not None else ClosedPipe()

    def write(self, data: bytes) -> int:
        st = self._state
        payload = memoryview(bytes(data))
        with st.write_lock, st.cond:
            if st.writer_closed:
                raise ClosedPipe()
            if st.reader_closed:
                raise self._reader_failure()
            st.pending = payload
            st.cond.notify_all()
            while len(st.pending) and not st.reader_closed and not st.writer_closed:
                st.cond.wait()
            if len(st.pending):
                st.pending = memoryview(b"")
                if st.reader_closed:
                    raise self._reader_failure()
                raise ClosedPipe()
            return len(payload)

    def close(self) -> None:
        self.close_with_error(None)

    def close_with_error(self, err: BaseException | None) -> None:
        """Close the pipe; readers then get ``err`` or, when None, end of stream."""
        st = self._state
        with st.cond:
            if not st.writer_closed:
                st.writer_closed = True
                st.writer_error = err
            st.cond.notify_all()


def pipe() -> tuple[PipeReader, PipeWriter]:
    """Create a synchronous pipe; each write blocks until readers consume it."""
    state = _PipeState()
    return PipeReader(state), PipeWriter(state)


def copy_buffer(dst: Writer, src: Reader, size: int) -> int:
    """Copy ``src`` to ``dst`` in chunks of ``size`` bytes; return bytes copied."""
    if size <= 0:
        raise ValueError("empty buffer in copy_buffer")
    written = 0
    while True:
        chunk = src.read(size)
        if not chunk:
            return written
        count = dst.write(chunk)
        if count < 0 or count > len(chunk):
            raise StreamError("invalid write result")
        written += count
        if count != len(chunk):
            raise ShortWrite()


def copy(dst: Writer, src: Reader) -> int:
    """Copy ``src`` to ``dst`` until end of stream; return bytes copied."""
    return copy_buffer(dst, src, DEFAULT_COPY_SIZE)


def copy_n(dst: Writer, src: Reader, n: int) -> int:
    """Copy exactly ``n`` bytes; raise EOFError if the source ends early."""
    written = copy(dst, LimitedReader(src, n))
    if written < n:
        raise EOFError(f"EOF after {written} of {n} bytes")
    return written


def read_all(reader: Reader) -> bytes:
    """Read until end of stream and return everything read."""
    buf = bytearray()
    while chunk := reader.read(DEFAULT_COPY_SIZE):
        buf += chunk
    return bytes(buf)


def read_at_least(reader: Reader, size: int, minimum: int) -> bytes:
    """Read at least ``minimum`` and at most ``size`` bytes."""
    if size < minimum:
        raise ShortBuffer()
    buf = bytearray()
    while len(buf) < minimum:
        chunk = reader.read(size - len(buf))
        if not chunk:
            break
        buf += chunk
    if len(buf) >= minimum:
        return bytes(buf)
    if not buf:
        raise EOFError("EOF")
    raise UnexpectedEOF()


def read_full(reader: Reader, size: int) -> bytes:
    """Read exactly ``size`` bytes."""
    return read_at_least(reader, size, size)


def write_string(writer: Writer, text: str) -> int:
    """Write ``text`` encoded as UTF-8."""
    return writer.write(text.encode("utf-8"))