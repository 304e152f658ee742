import os

import pytest

from nbfc.pidfile import PidFileLockedError, remove_pid, write_pid


def test_write_pid_contents(tmp_path):
    path = tmp_path / "nbfc.pid"
    write_pid(path, True)
    assert path.read_text() == str(os.getpid())


def test_lock_refuses_existing_file(tmp_path):
    path = tmp_path / "nbfc.pid"
    write_pid(path, True)
    with pytest.raises(PidFileLockedError, match="Failed to acquire lock file"):
        write_pid(path, True)


def test_locked_error_is_file_exists(tmp_path):
    path = tmp_path / "nbfc.pid"
    path.write_text("1")
    with pytest.raises(FileExistsError):
        write_pid(path, True)


def test_without_lock_overwrites(tmp_path):
    path = tmp_path / "nbfc.pid"
    path.write_text("999999999")
    write_pid(path, False)
    assert path.read_text() == str(os.getpid())


def test_remove_pid(tmp_path):
    path = tmp_path / "nbfc.pid"
    write_pid(path, True)
    remove_pid(path)
    assert not path.exists()


def test_remove_missing_is_quiet(tmp_path):
    path = tmp_path / "missing.pid"
    remove_pid(path)
    assert not path.exists()