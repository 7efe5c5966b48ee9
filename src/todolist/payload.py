from __future__ import annotations

import json
import re
from collections.abc import Sequence
from datetime import date
from typing import Any

from todolist.errors import PayloadError, Reason
from todolist.models import Task

_ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
_FIELDS: dict[str, type] = {
    "title": str,
    "project": str,
    "due_date": str,
    "done": bool,
}


def shape_of(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def encode(tasks: Sequence[Task]) -> bytes:
    payload = []
    for index, task in enumerate(tasks):
        if not isinstance(task, Task):
            raise TypeError(f"item {index} is not a Task: {type(task).__name__}")
        try:
            record = task.to_dict()
        except AttributeError as exc:
            raise TypeError(f"item {index} cannot be encoded: {exc}") from exc
        # never write a record that load would refuse
        problem = _element_problem(record)
        if problem is not None:
            raise ValueError(f"item {index} cannot be encoded: {problem}")
        payload.append(record)
    return json.dumps(payload, ensure_ascii=False, indent=2).encode("utf-8")


def decode(data: bytes) -> Any:
    try:
        return json.loads(data.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise PayloadError(Reason.CORRUPT_DATA, f"invalid data format: not UTF-8 ({exc.reason})") from exc
    except json.JSONDecodeError as exc:
        raise PayloadError(Reason.CORRUPT_DATA, f"invalid data format: {exc.msg} at line {exc.lineno}") from exc
    except RecursionError as exc:
        raise PayloadError(Reason.CORRUPT_DATA, "invalid data format: nesting too deep") from exc


def _element_problem(item: Any) -> str | None:
    if not isinstance(item, dict):
        return f"expected object, got {shape_of(item)}"
    for name, expected in _FIELDS.items():
        if name not in item:
            return f"missing field {name!r}"
        value = item[name]
        if not isinstance(value, expected):
            return f"field {name!r} should be {shape_of(expected())}, got {shape_of(value)}"
    if not _ISO_DATE_RE.fullmatch(item["due_date"]):
        return f"field 'due_date' is not a YYYY-MM-DD date: {item['due_date']!r}"
    try:
        date.fromisoformat(item["due_date"])
    except ValueError:
        return f"field 'due_date' is not a valid date: {item['due_date']!r}"
    return None


def validate_payload(raw: Any) -> list[Task]:
    if not isinstance(raw, list):
        raise PayloadError(
            Reason.UNEXPECTED_SHAPE,
            f"invalid data format: expected a list of tasks, got {shape_of(raw)}",
        )

    tasks: list[Task] = []
    for index, item in enumerate(raw):
        if item is None:
            raise PayloadError(Reason.INVALID_ELEMENT, f"invalid data format: item {index} is absent (null)")
        problem = _element_problem(item)
        if problem is None:
            try:
                task = Task.from_dict(item)
            except (TypeError, ValueError) as exc:
                problem = str(exc)
        if problem is not None:
            raise PayloadError(
                Reason.INVALID_ELEMENT,
                f"invalid data format: item {index} has the wrong shape ({problem})",
            )
        tasks.append(task)
    return tasks


def load_tasks(data: bytes) -> list[Task]:
    return validate_payload(decode(data))
