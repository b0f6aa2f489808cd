# goish

Small, dependency-free building blocks whose behaviour follows Go's standard
library, written as ordinary Python. Failures are raised as exceptions.

## Modules

- `goish.streams` – abstract `Reader`, `Writer`, `Closer`, `ReaderAt`,
  `WriterAt` and `Seeker` classes (readers return `b""` at end of stream),
  `Whence`, `LimitedReader`, `OffsetWriter`, and a synchronous in-memory
  `pipe()` whose writes block until the reader has taken the data. Helpers:
  `copy`, `copy_buffer`, `copy_n`, `read_all`, `read_at_least`, `read_full`
  and `write_string`. Errors derive from `StreamError` (`UnexpectedEOF`,
  `ShortWrite`, `ShortBuffer`, `ClosedPipe`, ...); `copy_n` and `read_full`
  raise `EOFError` when the source runs out.
- `goish.duration` – `Duration`, an integer count of nanoseconds with
  arithmetic and comparisons; it prints like Go (`1h2m3s`, `1s500ms`).
- `goish.clock` – `Time` with second/nanosecond precision: `Time.now()`,
  `Time.from_unix()`, `Time.date()` (local calendar fields), `add`, `sub`,
  `before`/`after`/`equal`, `truncate`, `round`, local calendar accessors
  (`year`, `month`, `day`, `weekday` with 0 for Sunday, ...), `format` for the
  layouts `"2006-01-02 15:04:05"`, `"2006-01-02"` and `"15:04:05"`, and
  `sleep(d)`.
- `goish.timers` – `Timer` (fires once, can be stopped or reset) and `Ticker`
  (fires repeatedly until stopped), both delivering the current `Time` on the
  `queue.Queue` returned by `c()`; `new_timer` and `new_ticker` build them.
- `goish.jsoncodec` – `marshal`/`marshal_string`, `unmarshal`/
  `unmarshal_string`, `valid`/`valid_string`, `compact` and `indent` (object
  keys are always written in sorted order), a streaming `Encoder` (one value
  per line, HTML characters escaped unless `set_escape_html(False)`) and
  `Decoder` (`decode`, `token`, `more`, `use_number`), type checks such as
  `is_int`, getters with defaults such as `get_int`, and `make_*`
  constructors. Errors are raised as `JSONError`.
- `goish.files` – `File` handles (usable as context managers) and path
  operations: `open_file` with `OpenFlag` bits, `create`, `open_read`, `stat`,
  `lstat`, `mkdir`, `mkdir_all`, `read_dir`, `remove`, `remove_all`, `rename`,
  `read_file`, `write_file`, `temp_dir`, `path_exists`, `file_size` and more.
  Errors derive from `FileError`; `PathError` wraps a cause such as `NotExist`
  or `PermissionDenied`, which `is_not_exist`, `is_exist` and `is_permission`
  detect.
- `goish.system` – environment access (`getenv`, `lookup_env`, `setenv`,
  `unsetenv`, `clearenv`, `environ`, `expand_env` for `$VAR` and `${VAR}`),
  process identity (`getpid`, `getuid`, `getgroups`, ...), `hostname`,
  `user_home_dir`, `user_cache_dir`, `user_config_dir`, `executable`,
  `Process` handles from `find_process` (`kill`, `signal`, `wait`,
  `release`), and `create_temp`/`mkdir_temp`, where the first `*` in the
  pattern becomes eight random characters. Failures raise `SystemError_`.

## Install

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from goish.duration import Duration
from goish.clock import Time
from goish import jsoncodec, streams

start = Time.from_unix(1, 500_000_000)
later = start.add(Duration(1_500_000_000))
print(later.unix(), later.sub(start))            # 3 1s500ms

text = jsoncodec.marshal_string({"name": "John", "age": 30})
print(text)                                      # {"age":30,"name":"John"}
print(jsoncodec.unmarshal_string(text)["age"])   # 30
```

## What it does not do

- There is no networking: no TCP or UDP sockets and no HTTP client or server.
- There are no channels, `select`, goroutine helpers or cancellation
  contexts; timers and tickers use a plain `queue.Queue`.
- Processes cannot be started; `Process` only acts on an existing pid.
- The package has no command-line program.