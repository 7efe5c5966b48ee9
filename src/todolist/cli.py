from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from todolist.config import load_settings
from todolist.errors import PathRejected, Reason
from todolist.logging_setup import setup_logging
from todolist.paths import PathValidator
from todolist.reporting import CollectingReporter
from todolist.service import TodoList
from todolist.storage import TaskStore

logger = logging.getLogger(__name__)


def _due_date(raw: str) -> date:
    try:
        return date.fromisoformat(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a YYYY-MM-DD date: {raw!r}") from exc


def _print_errors(reporter: CollectingReporter) -> None:
    for text in reporter.errors:
        print(f"error: {text}", file=sys.stderr)


def open_todo_list(args: argparse.Namespace, allow_missing: bool) -> tuple[TodoList, CollectingReporter] | None:
    reporter = CollectingReporter()
    todo = TodoList(TaskStore(args.data_dir, reporter=reporter))
    result = todo.load(args.file)
    if result.ok:
        return todo, reporter
    if allow_missing and result.reason is Reason.FILE_NOT_FOUND:
        logger.info("starting a new task list in %s", args.file)
        reporter.messages.clear()
        return todo, reporter
    _print_errors(reporter)
    return None


def _save(todo: TodoList, reporter: CollectingReporter, filename: str | None) -> int:
    if todo.save(filename).ok:
        return 0
    _print_errors(reporter)
    return 1


def cmd_add(args: argparse.Namespace) -> int:
    opened = open_todo_list(args, allow_missing=True)
    if opened is None:
        return 1
    todo, reporter = opened
    task = todo.add_task(args.title, args.project, args.due)
    status = _save(todo, reporter, args.file)
    if status == 0:
        print(f"created: {len(todo.tasks) - 1} {task.title}")
    return status


def cmd_list(args: argparse.Namespace) -> int:
    opened = open_todo_list(args, allow_missing=True)
    if opened is None:
        return 1
    todo, _reporter = opened
    visible = {id(task) for task in todo.list_tasks(include_done=not args.open_only, project=args.project)}
    if not visible:
        print("no tasks")
        return 0

    for index, task in enumerate(todo.tasks):
        if id(task) not in visible:
            continue
        state = "x" if task.done else " "
        print(f"[{state}] {index} {task.due_date.isoformat()} {task.project}: {task.title}")
    return 0


def _change(args: argparse.Namespace, action: str) -> int:
    opened = open_todo_list(args, allow_missing=False)
    if opened is None:
        return 1
    todo, reporter = opened
    try:
        if action == "done":
            todo.mark_completed(args.index)
        elif action == "undo":
            todo.mark_incomplete(args.index)
        else:
            todo.remove_task(args.index)
    except IndexError:
        print("not found")
        return 1
    status = _save(todo, reporter, args.file)
    if status == 0:
        print(action)
    return status


def cmd_done(args: argparse.Namespace) -> int:
    return _change(args, "done")


def cmd_undo(args: argparse.Namespace) -> int:
    return _change(args, "undo")


def cmd_remove(args: argparse.Namespace) -> int:
    return _change(args, "removed")


def cmd_stats(args: argparse.Namespace) -> int:
    opened = open_todo_list(args, allow_missing=False)
    if opened is None:
        return 1
    todo, _reporter = opened
    base = todo.stats()
    print(f"total={base['total']} done={base['done']} open={base['open']} rate={base['completion_rate']}%")
    return 0


def cmd_check_path(args: argparse.Namespace) -> int:
    try:
        validated = PathValidator().validate(args.name)
    except PathRejected as exc:
        print(f"rejected: {exc.reason}: {exc.message}")
        return 1
    print(validated)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="todolist", description="Task list with safe file storage")
    parser.add_argument("-f", "--file", help="data file, relative to the data directory (env: TODOLIST_FILE)")
    parser.add_argument("--data-dir", help="directory holding data files (env: TODOLIST_DATA_DIR)")
    parser.add_argument("-v", "--verbose", action="store_true", help="log progress to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="add task")
    add.add_argument("title")
    add.add_argument("project")
    add.add_argument("due", type=_due_date, help="due date, YYYY-MM-DD")
    add.set_defaults(handler=cmd_add)

    show = sub.add_parser("list", help="list tasks")
    show.add_argument("--open", dest="open_only", action="store_true")
    show.add_argument("--project")
    show.set_defaults(handler=cmd_list)

    done = sub.add_parser("done", help="mark task as done")
    done.add_argument("index", type=int)
    done.set_defaults(handler=cmd_done)

    undo = sub.add_parser("undo", help="mark task as not done")
    undo.add_argument("index", type=int)
    undo.set_defaults(handler=cmd_undo)

    remove = sub.add_parser("remove", help="remove task")
    remove.add_argument("index", type=int)
    remove.set_defaults(handler=cmd_remove)

    stats = sub.add_parser("stats", help="show statistics")
    stats.set_defaults(handler=cmd_stats)

    check = sub.add_parser("check-path", help="validate a data file name")
    check.add_argument("name")
    check.set_defaults(handler=cmd_check_path)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_settings()
    setup_logging(level="INFO" if args.verbose else settings.log_level, log_file=settings.log_file)
    if args.file is None:
        args.file = settings.data_file
    args.data_dir = Path(args.data_dir) if args.data_dir else settings.data_dir

    handler = args.handler
    return int(handler(args))


if __name__ == "__main__":
    raise SystemExit(main())
