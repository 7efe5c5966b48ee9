from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any


@dataclass(slots=True)
class Task:
    title: str
    project: str
    due_date: date
    done: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.title, str) or not isinstance(self.project, str):
            raise TypeError("title and project must be text")
        self.title = self.title.strip()
        self.project = self.project.strip()
        if not self.title:
            raise ValueError("title must not be empty")
        # datetime is a date subclass; only the calendar day is stored
        if isinstance(self.due_date, datetime):
            self.due_date = self.due_date.date()
        elif not isinstance(self.due_date, date):
            raise TypeError(f"due_date must be a date, got {type(self.due_date).__name__}")

    def mark_completed(self) -> None:
        self.done = True

    def mark_incomplete(self) -> None:
        self.done = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "project": self.project,
            "due_date": self.due_date.isoformat(),
            "done": self.done,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Task":
        return cls(
            title=raw["title"],
            project=raw["project"],
            due_date=date.fromisoformat(raw["due_date"]),
            done=raw["done"],
        )
