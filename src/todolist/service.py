from __future__ import annotations

from datetime import date
from typing import Any

from todolist.models import Task
from todolist.storage import Result, TaskStore


class TodoList:
    def __init__(self, store: TaskStore | None = None) -> None:
        self.store = store or TaskStore()
        self._tasks: list[Task] = []

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def add_task(self, title: str, project: str, due_date: date) -> Task:
        task = Task(title=title, project=project, due_date=due_date)
        self._tasks.append(task)
        return task

    def get(self, index: int) -> Task:
        return self._tasks[self._check_index(index)]

    def mark_completed(self, index: int) -> Task:
        task = self.get(index)
        task.mark_completed()
        return task

    def mark_incomplete(self, index: int) -> Task:
        task = self.get(index)
        task.mark_incomplete()
        return task

    def remove_task(self, index: int) -> Task:
        return self._tasks.pop(self._check_index(index))

    def list_tasks(self, include_done: bool = True, project: str | None = None) -> list[Task]:
        tasks = self.tasks
        if not include_done:
            tasks = [task for task in tasks if not task.done]
        if project:
            lowered = project.lower()
            tasks = [task for task in tasks if task.project.lower() == lowered]
        return tasks

    def completed_count(self) -> int:
        return sum(1 for task in self._tasks if task.done)

    def not_completed_count(self) -> int:
        return sum(1 for task in self._tasks if not task.done)

    def stats(self) -> dict[str, Any]:
        total = len(self._tasks)
        done = self.completed_count()
        completion_rate = round((done / total) * 100, 2) if total else 0.0
        return {
            "total": total,
            "done": done,
            "open": total - done,
            "completion_rate": completion_rate,
        }

    def save(self, filename: Any) -> Result:
        return self.store.save_tasks(self._tasks, filename)

    def load(self, filename: Any) -> Result:
        """Replace the whole list with the file's contents; untouched on failure."""
        result = self.store.load_tasks(filename)
        if result.ok and result.tasks is not None:
            self._tasks = result.tasks
        return result

    def save_to_file(self, filename: Any) -> bool:
        return self.save(filename).ok

    def read_from_file(self, filename: Any) -> bool:
        return self.load(filename).ok

    def _check_index(self, index: int) -> int:
        # positions are what the user sees; negative indexes are not positions
        if not 0 <= index < len(self._tasks):
            raise IndexError(f"no task at position {index}")
        return index
