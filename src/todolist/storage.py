from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from todolist import payload
from todolist.errors import PathRejected, PayloadError, Reason
from todolist.models import Task
from todolist.paths import PathValidator
from todolist.reporting import LoggingReporter, Reporter

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Result:
    ok: bool
    reason: Reason | None = None
    message: str = ""
    tasks: list[Task] | None = None

    def __bool__(self) -> bool:
        return self.ok


class TaskStore:
    """Filenames are validated and kept under ``root``; failures come back as a Result."""

    def __init__(
        self,
        root: str | Path = ".",
        reporter: Reporter | None = None,
        validator: PathValidator | None = None,
    ) -> None:
        self.root = Path(root)
        self.reporter = reporter or LoggingReporter()
        self.validator = validator or PathValidator()

    def save_tasks(self, tasks: Sequence[Task], filename: Any) -> Result:
        try:
            target = self._target(filename)
        except PathRejected as exc:
            return self._fail(exc.reason, f"Invalid file path {filename!r}: {exc.message}")

        try:
            data = payload.encode(tasks)
        except (TypeError, ValueError) as exc:
            return self._fail(Reason.IO_ERROR, f"Error saving file: {exc}")

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            handle = tempfile.NamedTemporaryFile(
                mode="wb",
                dir=target.parent,
                prefix=f".{target.name}.",
                suffix=".tmp",
                delete=False,
            )
        except OSError as exc:
            return self._fail(Reason.CANNOT_CREATE_FILE, f"Cannot create file: {filename} ({exc})")

        tmp_path = Path(handle.name)
        try:
            with handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
        except OSError as exc:
            self._discard(tmp_path)
            return self._fail(Reason.IO_ERROR, f"Error saving file: {exc}")

        try:
            os.replace(tmp_path, target)
        except OSError as exc:
            self._discard(tmp_path)
            return self._fail(Reason.CANNOT_CREATE_FILE, f"Cannot create file: {filename} ({exc})")

        logger.info("saved %d task(s) to %s", len(tasks), target)
        return Result(ok=True, message=f"saved {len(tasks)} task(s)")

    def load_tasks(self, filename: Any) -> Result:
        try:
            target = self._target(filename)
        except PathRejected as exc:
            return self._fail(exc.reason, f"Invalid file path {filename!r}: {exc.message}")

        if not target.exists():
            return self._fail(Reason.FILE_NOT_FOUND, f"The data file, i.e., {filename} does not exist")
        if not target.is_file() or not os.access(target, os.R_OK):
            return self._fail(Reason.NOT_READABLE, f"The data file, i.e., {filename} is not readable")

        try:
            with target.open("rb") as handle:
                data = handle.read()
        except FileNotFoundError:
            return self._fail(Reason.FILE_NOT_FOUND, f"The data file, i.e., {filename} does not exist")
        except PermissionError:
            return self._fail(Reason.NOT_READABLE, f"The data file, i.e., {filename} is not readable")
        except OSError as exc:
            return self._fail(Reason.IO_ERROR, f"Error reading file: {exc}")

        try:
            tasks = payload.load_tasks(data)
        except PayloadError as exc:
            return self._fail(exc.reason, f"{exc.message} (file: {filename})")

        logger.info("loaded %d task(s) from %s", len(tasks), target)
        return Result(ok=True, message=f"loaded {len(tasks)} task(s)", tasks=tasks)

    def _target(self, filename: Any) -> Path:
        validated = self.validator.validate(filename)
        target = validated.under(self.root)
        try:
            contained = target.resolve().is_relative_to(self.root.resolve())
        except (OSError, RuntimeError) as exc:
            raise PathRejected(Reason.PATH_TRAVERSAL, f"cannot resolve path: {exc}") from exc
        if not contained:
            raise PathRejected(Reason.PATH_TRAVERSAL, "path escapes the data directory")
        return target

    def _fail(self, reason: Reason, message: str) -> Result:
        logger.debug("%s failure: %s", reason.category, reason)
        self.reporter.show_message(message, True)
        return Result(ok=False, reason=reason, message=message)

    @staticmethod
    def _discard(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("could not remove temporary file %s: %s", path, exc)
