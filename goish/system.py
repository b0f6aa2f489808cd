"""Environment, process identity, user directories and process handles."""

from __future__ import annotations

import dataclasses
import datetime
import mmap
import os
import re
import secrets
import signal as _signal
import socket
import sys

from .files import OpenFlag, File, mkdir, open_file, stat, temp_dir

_WINDOWS = os.name == "nt"
_RANDOM_ALPHABET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
_EXPAND = re.compile(r"\$\{([^}]*)\}|\$([A-Za-z0-9_]+)")


class SystemError_(Exception):
    """An operating-system request failed."""


# ---------------------------------------------------------------- environment


def getenv(key: str) -> str:
    """Value of ``key`` in the environment, or ``""`` when unset."""
    return os.environ.get(key, "")


def lookup_env(key: str) -> tuple[str, bool]:
    """Return ``(value, True)`` if ``key`` is set, else ``("", False)``."""
    value = os.environ.get(key)
    if value is None:
        return "", False
    return value, True


def setenv(key: str, value: str) -> None:
    try:
        os.environ[key] = value
    except (ValueError, OSError) as exc:
        raise SystemError_("failed to set environment variable") from exc


def unsetenv(key: str) -> None:
    if not key or "=" in key:
        raise SystemError_("failed to unset environment variable")
    try:
        os.environ.pop(key, None)
    except (ValueError, OSError) as exc:
        raise SystemError_("failed to unset environment variable") from exc


def clearenv() -> None:
    try:
        os.environ.clear()
    except OSError as exc:
        raise SystemError_("failed to clear environment") from exc


def environ() -> list[str]:
    """The environment as ``KEY=value`` strings."""
    return [f"{key}={value}" for key, value in os.environ.items()]


def expand_env(s: str) -> str:
    """Replace ``$VAR`` and ``${VAR}`` with environment values; unset names become empty."""

    def substitute(match: re.Match) -> str:
        name = match.group(1) if match.group(1) is not None else match.group(2)
        return getenv(name)

    return _EXPAND.sub(substitute, s)


# ---------------------------------------------------------------- process identity


def args() -> list[str]:
    """Command-line arguments, starting with the program name."""
    return list(sys.argv)


def getpid() -> int:
    return os.getpid()


def getppid() -> int:
    return 0 if _WINDOWS else os.getppid()


def getpgrp() -> int:
    return 0 if _WINDOWS else os.getpgrp()


def getuid() -> int:
    return 0 if _WINDOWS else os.getuid()


def geteuid() -> int:
    return 0 if _WINDOWS else os.geteuid()


def getgid() -> int:
    return 0 if _WINDOWS else os.getgid()


def getegid() -> int:
    return 0 if _WINDOWS else os.getegid()


def getgroups() -> list[int]:
    """Supplementary group ids; empty where unsupported or on failure."""
    if _WINDOWS:
        return []
    try:
        return [int(gid) for gid in os.getgroups()]
    except OSError:
        return []


def hostname() -> str:
    try:
        return socket.gethostname()
    except OSError as exc:
        raise SystemError_("failed to get hostname") from exc


def getpagesize() -> int:
    return mmap.PAGESIZE


# ---------------------------------------------------------------- user directories


def user_home_dir() -> str:
    if _WINDOWS:
        home = getenv("USERPROFILE")
        if home:
            return home
        drive, path = getenv("HOMEDRIVE"), getenv("HOMEPATH")
        if drive and path:
            return drive + path
        raise SystemError_("unable to determine user home directory")
    home = getenv("HOME")
    if home:
        return home
    try:
        import pwd

        entry = pwd.getpwuid(os.getuid())
    except (ImportError, KeyError) as exc:
        raise SystemError_("unable to determine user home directory") from exc
    if entry.pw_dir:
        return entry.pw_dir
    raise SystemError_("unable to determine user home directory")


def user_cache_dir() -> str:
    if _WINDOWS:
        for key in ("LOCALAPPDATA", "APPDATA"):
            value = getenv(key)
            if value:
                return value
        raise SystemError_("unable to determine cache directory")
    cache = getenv("XDG_CACHE_HOME")
    if cache:
        return cache
    return user_home_dir() + "/.cache"


def user_config_dir() -> str:
    if _WINDOWS:
        value = getenv("APPDATA")
        if value:
            return value
        raise SystemError_("unable to determine config directory")
    config = getenv("XDG_CONFIG_HOME")
    if config:
        return config
    return user_home_dir() + "/.config"


def executable() -> str:
    """Absolute path of the running program."""
    if not _WINDOWS:
        try:
            return os.readlink("/proc/self/exe")
        except OSError:
            pass
    if sys.executable:
        return os.path.realpath(sys.executable)
    raise SystemError_("failed to get executable path")


def exit(code: int) -> None:
    """Terminate the program with status ``code``."""
    sys.exit(code)


# ---------------------------------------------------------------- signals and processes


@dataclasses.dataclass(frozen=True)
class Signal:
    """A signal number with a readable name."""

    code: int
    name: str

    def __str__(self) -> str:
        return self.name


if _WINDOWS:
    INTERRUPT = Signal(getattr(_signal, "CTRL_C_EVENT", 0), "interrupt")
    KILL = Signal(0, "kill")
else:
    INTERRUPT = Signal(_signal.SIGINT, "interrupt")
    KILL = Signal(_signal.SIGKILL, "killed")


@dataclasses.dataclass
class ProcessState:
    """How a waited-for process ended."""

    pid: int = 0
    exited: bool = False
    exit_code: int = 0
    user_time: datetime.datetime = dataclasses.field(default_factory=datetime.datetime.now)
    system_time: datetime.datetime = dataclasses.field(default_factory=datetime.datetime.now)


class Process:
    """A handle on a process identified by its pid."""

    def __init__(self, pid: int) -> None:
        self.pid = pid
        self.state: ProcessState | None = None

    def __repr__(self) -> str:
        return f"Process({self.pid})"

    def _check_live(self) -> None:
        if self.pid < 0:
            raise SystemError_("process already released")

    def kill(self) -> None:
        self._check_live()
        sig = getattr(_signal, "SIGKILL", _signal.SIGTERM)
        try:
            os.kill(self.pid, sig)
        except OSError as exc:
            raise SystemError_("failed to kill process") from exc

    def signal(self, sig: Signal) -> None:
        if _WINDOWS:
            raise SystemError_("signals not supported on Windows")
        self._check_live()
        try:
            os.kill(self.pid, sig.code)
        except OSError as exc:
            raise SystemError_("failed to send signal") from exc

    def wait(self) -> ProcessState:
        """Wait for the process to end and return its state."""
        self._check_live()
        try:
            _, status = os.waitpid(self.pid, 0)
        except OSError as exc:
            raise SystemError_("failed to wait for process") from exc
        if hasattr(os, "WIFEXITED"):
            exited = os.WIFEXITED(status)
            code = os.WEXITSTATUS(status)
        else:
            exited = True
            code = status >> 8
        now = datetime.datetime.now()
        state = ProcessState(
            pid=self.pid, exited=exited, exit_code=code, user_time=now, system_time=now
        )
        self.state = state
        return state

    def release(self) -> None:
        """Detach the handle from its process; later operations on it raise."""
        self.pid = -1


def find_process(pid: int) -> Process:
    """Return a handle on ``pid``, raising if no such process can be found."""
    if _WINDOWS:
        if pid <= 0:
            raise SystemError_("process not found")
        return Process(pid)
    try:
        os.kill(pid, 0)
    except (OSError, OverflowError) as exc:
        raise SystemError_("process not found") from exc
    return Process(pid)


# ---------------------------------------------------------------- utilities


def is_dir(path: str) -> bool:
    try:
        return stat(path).is_dir
    except Exception:
        return False


def _random_string(length: int) -> str:
    return "".join(secrets.choice(_RANDOM_ALPHABET) for _ in range(length))


def _temp_name(pattern: str) -> str:
    if "*" in pattern:
        return pattern.replace("*", _random_string(8), 1)
    return pattern + _random_string(8)


def create_temp(directory: str = "", pattern: str = "") -> File:
    """Create a new file in ``directory``; the first ``*`` in ``pattern`` becomes random text."""
    base = directory or temp_dir()
    path = f"{base}/{_temp_name(pattern)}"
    return open_file(path, OpenFlag.RDWR | OpenFlag.CREATE | OpenFlag.EXCL, 0o600)


def mkdir_temp(directory: str = "", pattern: str = "") -> str:
    """Create a new directory in ``directory`` and return its path."""
    base = directory or temp_dir()
    path = f"{base}/{_temp_name(pattern)}"
    mkdir(path, 0o700)
    return path