from __future__ import annotations

from pathlib import Path

import pytest

from todolist import cli


@pytest.fixture(autouse=True)
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setattr(cli, "setup_logging", lambda **_kwargs: None)
    monkeypatch.setenv("TODOLIST_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TODOLIST_FILE", "tasks.json")
    return tmp_path


def test_add_list_done_and_stats(data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["add", "Write report", "Work", "2026-11-01"]) == 0
    assert cli.main(["add", "Buy milk", "Home", "2026-10-20"]) == 0
    assert (data_dir / "tasks.json").is_file()

    assert cli.main(["done", "1"]) == 0
    capsys.readouterr()

    assert cli.main(["list"]) == 0
    out = capsys.readouterr().out
    assert "[ ] 0 2026-11-01 Work: Write report" in out
    assert "[x] 1 2026-10-20 Home: Buy milk" in out

    assert cli.main(["list", "--open"]) == 0
    assert "Buy milk" not in capsys.readouterr().out

    assert cli.main(["stats"]) == 0
    assert "total=2 done=1 open=1 rate=50.0%" in capsys.readouterr().out


def test_undo_and_remove(capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["add", "One", "P", "2026-11-01"])
    cli.main(["done", "0"])
    assert cli.main(["undo", "0"]) == 0
    assert cli.main(["remove", "0"]) == 0
    assert cli.main(["remove", "0"]) == 1
    assert "not found" in capsys.readouterr().out


def test_list_without_file_is_empty(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["list"]) == 0
    assert "no tasks" in capsys.readouterr().out


def test_stats_without_file_fails(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["stats"]) == 1
    assert "does not exist" in capsys.readouterr().err


def test_unsafe_file_option_is_rejected(data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["--file", "../escape.json", "add", "X", "P", "2026-11-01"]) == 1
    assert "parent directory" in capsys.readouterr().err
    assert not (data_dir.parent / "escape.json").exists()


def test_missing_filename_is_not_defaulted(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.delenv("TODOLIST_FILE")
    assert cli.main(["add", "X", "P", "2026-11-01"]) == 1
    assert "cannot be missing" in capsys.readouterr().err


def test_corrupt_file_is_reported(data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (data_dir / "tasks.json").write_text("{not json", encoding="utf-8")
    assert cli.main(["add", "X", "P", "2026-11-01"]) == 1
    assert "invalid data format" in capsys.readouterr().err
    assert (data_dir / "tasks.json").read_text(encoding="utf-8") == "{not json"


def test_bad_due_date_is_usage_error() -> None:
    with pytest.raises(SystemExit) as info:
        cli.main(["add", "X", "P", "tomorrow"])
    assert info.value.code == 2


def test_check_path(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["check-path", "./data//tasks.json"]) == 0
    assert capsys.readouterr().out.strip() == "data/tasks.json"

    assert cli.main(["check-path", "/etc/passwd"]) == 1
    assert "rejected: PathTraversal" in capsys.readouterr().out


def test_undecodable_title_is_reported(data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["add", "\udcff", "P", "2026-01-01"]) == 1
    assert "Error saving file" in capsys.readouterr().err
    assert not (data_dir / "tasks.json").exists()
