"""Tests for the size-rotated agent line log."""

import io
import os

import pytest

from launch_agent.logging import (
    DEFAULT_MAX_LOG_SIZE,
    LogDestination,
    RotatingLineLogger,
)


def _make_logger(tmp_path, max_log_size=DEFAULT_MAX_LOG_SIZE):
    destination = LogDestination(directory=tmp_path / "cache" / "agent-id", file_name="agent.log")
    console = io.StringIO()
    return RotatingLineLogger(destination, max_log_size=max_log_size, console=console), console


def test_destination_for_agent_uses_library_caches_layout(monkeypatch, tmp_path):
    monkeypatch.delenv("LAUNCH_AGENT_LOG_DIR", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    destination = LogDestination.for_agent("me.example.agent", "worker")

    assert destination.directory == tmp_path / "Library" / "Caches" / "me.example.agent"
    assert destination.log_file == destination.directory / "worker.log"
    assert destination.backup_file == destination.directory / "worker.log.bak"


def test_destination_honors_log_dir_env(monkeypatch, tmp_path):
    monkeypatch.setenv("LAUNCH_AGENT_LOG_DIR", str(tmp_path / "override"))
    destination = LogDestination.for_agent()
    assert destination.log_file == tmp_path / "override" / "agent.log"


def test_init_creates_missing_directory(tmp_path):
    line_logger, _ = _make_logger(tmp_path)
    assert not line_logger.destination.directory.exists()

    assert line_logger.init_log_directory() is False

    assert line_logger.destination.directory.is_dir()
    assert not line_logger.log_file.exists()
    assert not line_logger.backup_file.exists()


def test_init_rotates_file_over_threshold(tmp_path):
    line_logger, _ = _make_logger(tmp_path, max_log_size=10)
    line_logger.destination.directory.mkdir(parents=True)
    line_logger.log_file.write_bytes(b"x" * 11)

    assert line_logger.init_log_directory() is True

    assert line_logger.backup_file.read_bytes() == b"x" * 11
    assert not line_logger.log_file.exists()


def test_init_keeps_file_at_or_under_threshold(tmp_path):
    line_logger, _ = _make_logger(tmp_path, max_log_size=10)
    line_logger.destination.directory.mkdir(parents=True)
    line_logger.log_file.write_bytes(b"y" * 10)
    line_logger.backup_file.write_bytes(b"older backup")

    assert line_logger.init_log_directory() is False

    assert line_logger.log_file.read_bytes() == b"y" * 10
    assert line_logger.backup_file.read_bytes() == b"older backup"


def test_rotation_replaces_existing_backup(tmp_path):
    line_logger, _ = _make_logger(tmp_path, max_log_size=4)
    line_logger.destination.directory.mkdir(parents=True)
    line_logger.backup_file.write_text("stale backup content that is long", encoding="utf-8")
    line_logger.log_file.write_text("fresh!", encoding="utf-8")

    line_logger.init_log_directory()

    assert line_logger.backup_file.read_text(encoding="utf-8") == "fresh!"


def test_threshold_override_applies_before_init(tmp_path):
    line_logger, _ = _make_logger(tmp_path)
    line_logger.destination.directory.mkdir(parents=True)
    line_logger.log_file.write_text("twelve bytes", encoding="utf-8")

    assert line_logger.init_log_directory() is False
    line_logger.max_log_size = 5
    assert line_logger.init_log_directory() is True


def test_init_is_idempotent(tmp_path):
    line_logger, _ = _make_logger(tmp_path, max_log_size=3)
    line_logger.destination.directory.mkdir(parents=True)
    line_logger.log_file.write_text("abcdef", encoding="utf-8")

    assert line_logger.init_log_directory() is True
    assert line_logger.init_log_directory() is False

    assert sorted(p.name for p in line_logger.destination.directory.iterdir()) == ["agent.log.bak"]
    assert line_logger.backup_file.read_text(encoding="utf-8") == "abcdef"


def test_writes_do_not_rotate(tmp_path):
    line_logger, _ = _make_logger(tmp_path, max_log_size=5)
    line_logger.init_log_directory()

    line_logger.write_line("well past the five byte threshold")

    assert not line_logger.backup_file.exists()
    assert "threshold" in line_logger.log_file.read_text(encoding="utf-8")


def test_write_appends_verbatim_to_both_sinks(tmp_path):
    line_logger, console = _make_logger(tmp_path)
    line_logger.init_log_directory()

    line_logger.write("partial")
    line_logger.write(" line")

    assert console.getvalue() == "partial line"
    assert line_logger.log_file.read_bytes() == b"partial line"


def test_write_grows_file_by_encoded_length(tmp_path):
    line_logger, _ = _make_logger(tmp_path)
    line_logger.init_log_directory()
    line_logger.write("abc")
    before = line_logger.log_file.stat().st_size

    line_logger.write("héllo")

    assert line_logger.log_file.stat().st_size - before == len("héllo".encode("utf-8"))


def test_write_line_sinks_match(tmp_path):
    line_logger, console = _make_logger(tmp_path)
    line_logger.init_log_directory()

    for message in ("first", "second", ""):
        line_logger.write_line(message)

    expected = "first\nsecond\n\n"
    assert console.getvalue() == expected
    assert line_logger.log_file.read_text(encoding="utf-8") == expected


def test_write_line_uses_platform_newline_on_disk(tmp_path):
    line_logger, _ = _make_logger(tmp_path)
    line_logger.init_log_directory()

    line_logger.write_line("entry")

    assert line_logger.log_file.read_bytes() == ("entry" + os.linesep).encode("utf-8")


def test_write_lines_preserves_order(tmp_path):
    line_logger, console = _make_logger(tmp_path)
    line_logger.init_log_directory()

    line_logger.write_lines(["a", "b", "c"])

    content = line_logger.log_file.read_text(encoding="utf-8")
    assert content == "a\nb\nc\n"
    assert content.index("a") < content.index("b") < content.index("c")
    assert console.getvalue() == content


def test_write_lines_accepts_generators(tmp_path):
    line_logger, _ = _make_logger(tmp_path)
    line_logger.init_log_directory()

    line_logger.write_lines(f"line {i}" for i in range(3))

    assert line_logger.log_file.read_text(encoding="utf-8").splitlines() == ["line 0", "line 1", "line 2"]


def test_write_lines_leaves_prefix_on_failure(tmp_path):
    line_logger, _ = _make_logger(tmp_path)
    line_logger.init_log_directory()

    def messages():
        yield "kept"
        raise RuntimeError("producer failed")

    with pytest.raises(RuntimeError):
        line_logger.write_lines(messages())

    assert line_logger.log_file.read_text(encoding="utf-8") == "kept\n"


def test_write_without_directory_raises_os_error(tmp_path):
    line_logger, _ = _make_logger(tmp_path)

    with pytest.raises(OSError):
        line_logger.write_line("no directory yet")


def test_init_fails_when_directory_path_is_a_file(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    destination = LogDestination(directory=blocker / "logs", file_name="agent.log")
    line_logger = RotatingLineLogger(destination, console=io.StringIO())

    with pytest.raises(OSError):
        line_logger.init_log_directory()


def test_failed_rotation_leaves_active_file(tmp_path, monkeypatch):
    line_logger, _ = _make_logger(tmp_path, max_log_size=1)
    line_logger.destination.directory.mkdir(parents=True)
    line_logger.log_file.write_text("active", encoding="utf-8")

    def _blocked(src, dst):
        raise PermissionError("backup in use")

    monkeypatch.setattr("launch_agent.logging.rotating.os.replace", _blocked)

    with pytest.raises(OSError):
        line_logger.init_log_directory()

    assert line_logger.log_file.read_text(encoding="utf-8") == "active"
    assert not line_logger.backup_file.exists()


def test_console_defaults_to_stdout(tmp_path, capsys):
    destination = LogDestination(directory=tmp_path, file_name="agent.log")
    line_logger = RotatingLineLogger(destination)

    line_logger.write_line("to stdout")

    assert capsys.readouterr().out == "to stdout\n"


class _FlushCountingConsole(io.StringIO):
    def __init__(self):
        super().__init__()
        self.flushes = 0

    def flush(self):
        self.flushes += 1
        super().flush()


def test_every_write_flushes_console(tmp_path):
    destination = LogDestination(directory=tmp_path, file_name="agent.log")
    console = _FlushCountingConsole()
    line_logger = RotatingLineLogger(destination, console=console)

    line_logger.write("a")
    line_logger.write_line("b")
    line_logger.write_lines(["c", "d"])

    assert console.flushes == 4
    assert console.getvalue() == "ab\nc\nd\n"


def test_rotation_creates_nothing_outside_destination(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("LAUNCH_AGENT_LOG_DIR", raising=False)
    destination = LogDestination(directory=tmp_path / "mine", file_name="agent.log")
    destination.directory.mkdir()
    destination.log_file.write_text("oversized", encoding="utf-8")
    line_logger = RotatingLineLogger(destination, max_log_size=1, console=io.StringIO())

    assert line_logger.init_log_directory() is True

    assert list(home.iterdir()) == []
    assert sorted(p.name for p in destination.directory.iterdir()) == ["agent.log.bak"]
