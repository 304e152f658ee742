"""The PID file that doubles as the service's single-instance lock."""

from __future__ import annotations

import os

__all__ = ["PidFileLockedError", "write_pid", "remove_pid"]

_FILE_MODE = 0o664


class PidFileLockedError(FileExistsError):
    """Raised when the PID file already exists and a lock was requested."""


def write_pid(path: str | os.PathLike, acquire_lock: bool = True) -> None:
    """Write this process's PID to `path`; with acquire_lock the file must not exist yet."""
    flags = os.O_CREAT | os.O_WRONLY | os.O_TRUNC
    if acquire_lock:
        flags |= os.O_EXCL
    try:
        fd = os.open(path, flags, _FILE_MODE)
    except FileExistsError as exc:
        raise PidFileLockedError(
            exc.errno, f"Failed to acquire lock file: {exc.strerror}", os.fspath(path)
        ) from exc
    with os.fdopen(fd, "w") as fh:
        fh.write(str(os.getpid()))


def remove_pid(path: str | os.PathLike) -> None:
    """Remove the PID file; a missing file is not an error."""
    try:
        os.unlink(path)
    except OSError:
        pass