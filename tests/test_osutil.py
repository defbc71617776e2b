import io
import os
import threading
import time

import pytest

from sinklog import osutil
from sinklog.common import LogError


def _native(path):
    return path.replace("/", os.sep)


@pytest.fixture
def in_tmp(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _try_create_dir(path, normalized_path):
    assert osutil.create_dir(path) is True
    return osutil.path_exists(normalized_path)


def test_create_dir(in_tmp):
    assert _try_create_dir("test_logs/dir1/dir1", "test_logs/dir1/dir1")
    assert _try_create_dir("test_logs/dir1/dir1", "test_logs/dir1/dir1")
    assert _try_create_dir("test_logs/dir1///dir2//", "test_logs/dir1/dir2")
    assert _try_create_dir("./test_logs/dir1/dir3", "test_logs/dir1/dir3")
    assert _try_create_dir("test_logs/../test_logs/dir1/dir4", "test_logs/dir1/dir4")
    assert (in_tmp / "test_logs" / "dir1" / "dir4").is_dir()


def test_create_invalid_dir():
    assert osutil.create_dir("") is False


def test_create_dir_under_regular_file_fails(in_tmp):
    (in_tmp / "plainfile").write_text("x")
    assert osutil.create_dir("plainfile/sub") is False
    assert osutil.path_exists("plainfile/sub") is False


@pytest.mark.parametrize(
    "path, expected",
    [
        ("", ""),
        ("dir", ""),
        ("dir/", "dir"),
        ("dir///", "dir//"),
        ("dir/file", "dir"),
        ("dir/file.txt", "dir"),
        ("dir/file.txt/", "dir/file.txt"),
        ("/dir/file.txt", "/dir"),
        ("//dir/file.txt", "//dir"),
        ("../file.txt", ".."),
        ("./file.txt", "."),
    ],
)
def test_dir_name(path, expected):
    assert osutil.dir_name(path) == _native(expected)


def test_path_exists(in_tmp):
    assert osutil.path_exists("missing.txt") is False
    (in_tmp / "present.txt").write_text("hi")
    assert osutil.path_exists("present.txt") is True
    assert osutil.path_exists(in_tmp) is True


def test_open_file_and_filesize(in_tmp):
    with osutil.open_file("out.log", "wb") as f:
        f.write(b"hello world\n")
        f.flush()
        assert osutil.filesize(f) == 12
    with osutil.open_file("out.log", "ab") as f:
        f.write(b"more")
        f.flush()
        assert osutil.filesize(f) == 16


def test_open_file_failure_raises(in_tmp):
    with pytest.raises(LogError) as info:
        osutil.open_file("no_such_dir/out.log", "wb")
    assert info.value.errno is not None
    assert "no_such_dir" in str(info.value)


def test_filesize_of_none_raises():
    with pytest.raises(LogError, match="fd is null"):
        osutil.filesize(None)


def test_remove_and_remove_if_exists(in_tmp):
    target = in_tmp / "gone.txt"
    target.write_text("x")
    osutil.remove("gone.txt")
    assert not target.exists()
    with pytest.raises(OSError):
        osutil.remove("gone.txt")
    osutil.remove_if_exists("gone.txt")
    target.write_text("y")
    osutil.remove_if_exists("gone.txt")
    assert not target.exists()


def test_rename(in_tmp):
    (in_tmp / "a.txt").write_text("content")
    osutil.rename("a.txt", "b.txt")
    assert not (in_tmp / "a.txt").exists()
    assert (in_tmp / "b.txt").read_text() == "content"
    with pytest.raises(OSError):
        osutil.rename("a.txt", "c.txt")


def test_now_is_nanoseconds():
    before = time.time_ns()
    value = osutil.now()
    after = time.time_ns()
    assert before <= value <= after


def test_utc_minutes_offset_of_utc_is_zero():
    assert osutil.utc_minutes_offset(osutil.gmtime(1_600_000_000)) == 0


def test_utc_minutes_offset_matches_gmtoff():
    tm = osutil.localtime(1_600_000_000)
    assert osutil.utc_minutes_offset(tm) * 60 == tm.tm_gmtoff


def test_utc_minutes_offset_without_gmtoff():
    built = time.struct_time((2020, 9, 13, 12, 26, 40, 6, 257, -1))
    ts = time.mktime(built)
    assert osutil.utc_minutes_offset(built) == osutil.utc_minutes_offset(osutil.localtime(ts))


def test_thread_id_differs_between_threads():
    ids = []
    worker = threading.Thread(target=lambda: ids.append(osutil.thread_id()))
    worker.start()
    worker.join()
    assert osutil.thread_id() == threading.get_native_id()
    assert ids[0] != osutil.thread_id()


def test_pid():
    assert osutil.pid() == os.getpid()


def test_is_color_terminal_known_term(monkeypatch):
    monkeypatch.setenv("TERM", "xterm-256color")
    assert osutil.is_color_terminal() is True


def test_is_color_terminal_unknown_term(monkeypatch):
    monkeypatch.setenv("TERM", "dumb")
    assert osutil.is_color_terminal() is (os.name == "nt")


def test_in_terminal_for_string_buffer():
    assert osutil.in_terminal(io.StringIO()) is False


def test_in_terminal_for_regular_file(in_tmp):
    with open("plain.txt", "w") as f:
        assert osutil.in_terminal(f) is False