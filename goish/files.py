"""Files, directories and path queries, with errors that classify failures."""

from __future__ import annotations

import dataclasses
import datetime
import enum
import errno
import os
import stat as _stat

from .streams import Closer, Reader, ReaderAt, Seeker, Whence, Writer, WriterAt

_WINDOWS = os.name == "nt"

MODE_DIR = _stat.S_IFDIR
MODE_PERM = 0o777


# ---------------------------------------------------------------- errors


class FileError(Exception):
    """Base class for file errors."""

    default_message = "file error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)


class InvalidArgument(FileError):
    default_message = "invalid argument"


class PermissionDenied(FileError):
    default_message = "permission denied"


class AlreadyExists(FileError):
    default_message = "file already exists"


class NotExist(FileError):
    default_message = "file does not exist"


class FileClosed(FileError):
    default_message = "file already closed"


class NoDeadline(FileError):
    default_message = "file type does not support deadline"


class DeadlineExceeded(FileError):
    default_message = "deadline exceeded"


class PathError(FileError):
    """An operation on a path failed; ``err`` holds the underlying cause."""

    def __init__(self, op: str, path: str, err: BaseException) -> None:
        self.op = op
        self.path = path
        self.err = err
        super().__init__(f"{op} {path}: {err}")


class SyscallError(FileError):
    """A system call failed; ``err`` holds the underlying cause."""

    def __init__(self, syscall: str, err: BaseException) -> None:
        self.syscall = syscall
        self.err = err
        super().__init__(f"{syscall}: {err}")


def _errno_to_error(errnum: int | None) -> FileError:
    if errnum == errno.ENOENT:
        return NotExist()
    if errnum == errno.EEXIST:
        return AlreadyExists()
    if errnum == errno.EACCES or (not _WINDOWS and errnum == errno.EPERM):
        return PermissionDenied()
    if errnum == errno.EINVAL:
        return InvalidArgument()
    reason = os.strerror(errnum) if errnum is not None else "unknown error"
    return FileError(f"system error: {reason}")


def _path_error(op: str, path: str, exc: OSError) -> PathError:
    return PathError(op, path, _errno_to_error(exc.errno))


def _chain(err: BaseException | None):
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        yield err
        inner = getattr(err, "err", None)
        err = inner if isinstance(inner, BaseException) else err.__cause__


def _matches(err: BaseException | None, kind: type) -> bool:
    return any(isinstance(e, kind) for e in _chain(err))


# ---------------------------------------------------------------- flags and info


class OpenFlag(enum.IntFlag):
    """Flags for open_file; the low two bits select the access mode."""

    RDONLY = 0x0
    WRONLY = 0x1
    RDWR = 0x2
    CREATE = 0x40
    EXCL = 0x80
    TRUNC = 0x200
    APPEND = 0x400


def _native_flags(flag: int) -> int:
    access = flag & 0x3
    if access == OpenFlag.RDONLY:
        native = os.O_RDONLY
    elif access == OpenFlag.WRONLY:
        native = os.O_WRONLY
    elif access == OpenFlag.RDWR:
        native = os.O_RDWR
    else:
        return os.O_RDONLY
    if flag & OpenFlag.APPEND:
        native |= os.O_APPEND
    if flag & OpenFlag.CREATE:
        native |= os.O_CREAT
    if flag & OpenFlag.EXCL:
        native |= os.O_EXCL
    if flag & OpenFlag.TRUNC:
        native |= os.O_TRUNC
    return native


def _base_name(name: str) -> str:
    cut = max(name.rfind("/"), name.rfind("\\"))
    return name[cut + 1:]


@dataclasses.dataclass
class FileInfo:
    """Description of a file as reported by stat."""

    name: str = ""
    size: int = 0
    mode: int = 0
    mod_time: datetime.datetime = dataclasses.field(
        default_factory=lambda: datetime.datetime.fromtimestamp(0, datetime.timezone.utc)
    )
    is_dir: bool = False


def _info_from_stat(name: str, st: os.stat_result) -> FileInfo:
    return FileInfo(
        name=_base_name(name),
        size=st.st_size,
        mode=st.st_mode,
        mod_time=datetime.datetime.fromtimestamp(int(st.st_mtime), datetime.timezone.utc),
        is_dir=_stat.S_ISDIR(st.st_mode),
    )


@dataclasses.dataclass
class DirEntry:
    """An entry read from a directory."""

    name: str
    is_dir: bool = False
    mode: int = 0

    def info(self) -> FileInfo:
        return FileInfo(
            name=self.name,
            size=0,
            mode=self.mode,
            mod_time=datetime.datetime.now(datetime.timezone.utc),
            is_dir=self.is_dir,
        )


# ---------------------------------------------------------------- File


class File(Reader, Writer, Closer, ReaderAt, WriterAt, Seeker):
    """An open file descriptor with a name."""

    def __init__(self, fd: int, name: str) -> None:
        self._fd = fd
        self._name = name
        self._closed = False
        self._owned = True

    @classmethod
    def _borrowed(cls, fd: int, name: str) -> File:
        file = cls(fd, name)
        file._owned = False
        return file

    @property
    def name(self) -> str:
        return self._name

    @property
    def fd(self) -> int:
        return self._fd

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise FileClosed()

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; ``b""`` at end of file."""
        self._check_open()
        try:
            return os.read(self._fd, size)
        except OSError as exc:
            raise _path_error("read", self._name, exc) from exc

    def write(self, data: bytes) -> int:
        self._check_open()
        try:
            return os.write(self._fd, data)
        except OSError as exc:
            raise _path_error("write", self._name, exc) from exc

    def close(self) -> None:
        if not self._closed and self._fd >= 0:
            os.close(self._fd)
            self._closed = True

    def read_at(self, size: int, offset: int) -> bytes:
        self._check_open()
        try:
            os.lseek(self._fd, offset, os.SEEK_SET)
        except OSError as exc:
            raise _path_error("readAt-lseek", self._name, exc) from exc
        return self.read(size)

    def write_at(self, data: bytes, offset: int) -> int:
        self._check_open()
        try:
            os.lseek(self._fd, offset, os.SEEK_SET)
        except OSError as exc:
            raise _path_error("writeAt-lseek", self._name, exc) from exc
        return self.write(data)

    def seek(self, offset: int, whence: Whence) -> int:
        """Move the file position and return the new offset."""
        self._check_open()
        try:
            native = {
                Whence.START: os.SEEK_SET,
                Whence.CURRENT: os.SEEK_CUR,
                Whence.END: os.SEEK_END,
            }[Whence(whence)]
        except (ValueError, KeyError):
            raise InvalidArgument() from None
        try:
            return os.lseek(self._fd, offset, native)
        except OSError as exc:
            raise _path_error("seek", self._name, exc) from exc

    def chdir(self) -> None:
        self._check_open()
        if not hasattr(os, "fchdir"):
            raise FileError("fchdir not supported on this platform")
        try:
            os.fchdir(self._fd)
        except OSError as exc:
            raise _path_error("chdir", self._name, exc) from exc

    def chmod(self, mode: int) -> None:
        self._check_open()
        if not hasattr(os, "fchmod"):
            raise FileError("chmod not supported on this platform")
        try:
            os.fchmod(self._fd, mode)
        except OSError as exc:
            raise _path_error("chmod", self._name, exc) from exc

    def chown(self, uid: int, gid: int) -> None:
        self._check_open()
        if not hasattr(os, "fchown"):
            raise FileError("chown not supported on this platform")
        try:
            os.fchown(self._fd, uid, gid)
        except OSError as exc:
            raise _path_error("chown", self._name, exc) from exc

    def stat(self) -> FileInfo:
        self._check_open()
        try:
            st = os.fstat(self._fd)
        except OSError as exc:
            raise _path_error("stat", self._name, exc) from exc
        return _info_from_stat(self._name, st)

    def sync(self) -> None:
        self._check_open()
        try:
            os.fsync(self._fd)
        except OSError as exc:
            raise _path_error("sync", self._name, exc) from exc

    def truncate(self, size: int) -> None:
        self._check_open()
        try:
            os.ftruncate(self._fd, size)
        except OSError as exc:
            raise _path_error("truncate", self._name, exc) from exc

    def read_link(self) -> str:
        """Target of the symbolic link at the name this file was opened with."""
        self._check_open()
        try:
            return os.readlink(self._name)
        except OSError as exc:
            raise _path_error("readlink", self._name, exc) from exc

    def read_dir(self) -> list[DirEntry]:
        """List the entries of the directory this file was opened from."""
        self._check_open()
        return read_dir(self._name)

    def __enter__(self) -> File:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self) -> None:
        if getattr(self, "_owned", False) and not getattr(self, "_closed", True):
            try:
                self.close()
            except OSError:
                pass

    def __repr__(self) -> str:
        return f"File({self._fd}, {self._name!r})"


if _WINDOWS:
    STDIN = File._borrowed(0, "stdin")
    STDOUT = File._borrowed(1, "stdout")
    STDERR = File._borrowed(2, "stderr")
else:
    STDIN = File._borrowed(0, "/dev/stdin")
    STDOUT = File._borrowed(1, "/dev/stdout")
    STDERR = File._borrowed(2, "/dev/stderr")


# ---------------------------------------------------------------- operations


def open_file(name: str, flag: int, perm: int) -> File:
    """Open ``name`` with OpenFlag bits and permissions ``perm`` for new files."""
    native = _native_flags(flag) | getattr(os, "O_BINARY", 0)
    try:
        fd = os.open(name, native, perm)
    except OSError as exc:
        raise _path_error("open", name, exc) from exc
    return File(fd, name)


def create(name: str) -> File:
    """Create or truncate ``name`` for reading and writing."""
    return open_file(name, OpenFlag.RDWR | OpenFlag.CREATE | OpenFlag.TRUNC, 0o666)


def open_read(name: str) -> File:
    """Open ``name`` read-only."""
    return open_file(name, OpenFlag.RDONLY, 0)


def stat(name: str) -> FileInfo:
    try:
        st = os.stat(name)
    except OSError as exc:
        raise _path_error("stat", name, exc) from exc
    return _info_from_stat(name, st)


def lstat(name: str) -> FileInfo:
    """Like stat, but describes a symbolic link itself."""
    try:
        st = os.lstat(name)
    except OSError as exc:
        raise _path_error("lstat", name, exc) from exc
    return _info_from_stat(name, st)


def chdir(path: str) -> None:
    try:
        os.chdir(path)
    except OSError as exc:
        raise _path_error("chdir", path, exc) from exc


def getwd() -> str:
    try:
        return os.getcwd()
    except OSError as exc:
        raise SyscallError("getcwd", _errno_to_error(exc.errno)) from exc


def mkdir(name: str, perm: int = 0o777) -> None:
    try:
        os.mkdir(name, perm)
    except OSError as exc:
        raise _path_error("mkdir", name, exc) from exc


def mkdir_all(path: str, perm: int = 0o777) -> None:
    """Create ``path`` and any missing parents; an existing directory is fine."""
    if not path:
        raise InvalidArgument()
    try:
        st = os.stat(path)
    except OSError:
        pass
    else:
        if _stat.S_ISDIR(st.st_mode):
            return
        raise AlreadyExists()
    cut = max(path.rfind("/"), path.rfind("\\"))
    if cut >= 0:
        parent = path[:cut]
        if parent:
            mkdir_all(parent, perm)
    mkdir(path, perm)


def read_dir(name: str) -> list[DirEntry]:
    """List the entries of directory ``name``, without ``.`` and ``..``."""
    try:
        with os.scandir(name) as it:
            entries = []
            for entry in it:
                try:
                    is_directory_entry = entry.is_dir(follow_symlinks=False)
                except OSError:
                    is_directory_entry = False
                entries.append(DirEntry(name=entry.name, is_dir=is_directory_entry, mode=0))
            return entries
    except OSError as exc:
        raise _path_error("opendir", name, exc) from exc


def remove(name: str) -> None:
    """Remove a file, or an empty directory where the platform allows it."""
    try:
        if not _WINDOWS and os.path.isdir(name) and not os.path.islink(name):
            os.rmdir(name)
        else:
            os.remove(name)
    except OSError as exc:
        raise _path_error("remove", name, exc) from exc


def remove_all(path: str) -> None:
    """Remove ``path`` and everything under it; a missing path is not an error."""
    try:
        st = os.lstat(path)
    except FileNotFoundError:
        return
    except OSError as exc:
        raise _path_error("lstat", path, exc) from exc
    if not _stat.S_ISDIR(st.st_mode):
        remove(path)
        return
    for entry in read_dir(path):
        remove_all(f"{path}/{entry.name}")
    try:
        os.rmdir(path)
    except OSError as exc:
        raise _path_error("rmdir", path, exc) from exc


def rename(oldpath: str, newpath: str) -> None:
    try:
        os.rename(oldpath, newpath)
    except OSError as exc:
        raise _path_error("rename", oldpath, exc) from exc


def read_file(name: str) -> bytes:
    """Return the whole content of ``name``."""
    with open_read(name) as file:
        size = file.stat().size
        chunks = []
        while chunk := file.read(max(size, 4096)):
            chunks.append(chunk)
        return b"".join(chunks)


def write_file(name: str, data: bytes | str, perm: int = 0o666) -> None:
    """Write ``data`` (text is encoded as UTF-8) to ``name``, replacing its content."""
    payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    with open_file(name, OpenFlag.WRONLY | OpenFlag.CREATE | OpenFlag.TRUNC, perm) as file:
        view = memoryview(payload)
        while view:
            written = file.write(view)
            view = view[written:]


# ---------------------------------------------------------------- classification


def is_exist(err: BaseException | None) -> bool:
    return _matches(err, AlreadyExists)


def is_not_exist(err: BaseException | None) -> bool:
    return _matches(err, NotExist)


def is_permission(err: BaseException | None) -> bool:
    return _matches(err, PermissionDenied)


def is_timeout(err: BaseException | None) -> bool:
    return _matches(err, DeadlineExceeded)


def is_dir_mode(mode: int) -> bool:
    return (mode & MODE_DIR) != 0


def is_regular(mode: int) -> bool:
    return (mode & MODE_DIR) == 0


def mode_perm(mode: int) -> int:
    return mode & MODE_PERM


# ---------------------------------------------------------------- path helpers


def temp_dir() -> str:
    """Directory for temporary files, from the environment or a platform default."""
    if _WINDOWS:
        for key in ("TEMP", "TMP"):
            value = os.environ.get(key)
            if value is not None:
                return value
        return "C:\\temp"
    value = os.environ.get("TMPDIR")
    return value if value is not None else "/tmp"


def path_exists(path: str) -> bool:
    try:
        os.stat(path)
    except OSError:
        return False
    return True


def is_file(path: str) -> bool:
    try:
        return not _stat.S_ISDIR(os.stat(path).st_mode)
    except OSError:
        return False


def is_directory(path: str) -> bool:
    try:
        return _stat.S_ISDIR(os.stat(path).st_mode)
    except OSError:
        return False


def file_size(path: str) -> int:
    try:
        return os.stat(path).st_size
    except OSError as exc:
        raise _path_error("stat", path, exc) from exc