from __future__ import annotations

from pathlib import Path

import pytest

from todolist.reporting import CollectingReporter
from todolist.storage import TaskStore


@pytest.fixture()
def reporter() -> CollectingReporter:
    return CollectingReporter()


@pytest.fixture()
def store(tmp_path: Path, reporter: CollectingReporter) -> TaskStore:
    """Store rooted at a per-test data directory."""
    root = tmp_path / "data"
    root.mkdir()
    return TaskStore(root, reporter=reporter)
