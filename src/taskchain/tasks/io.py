"""Load and save schedule files (YAML or JSON).

File shape::

    location: north-wall
    version: 1
    tasks:
      - id: form-1
        name: Form footings
        date: 2025-06-02
        order: 0
        dependentOnPrevious: false
        linkedGroupId: null

A bare list of tasks is accepted too.  ``taskId``, ``taskDate`` and
``linkedTaskGroup`` are read as aliases of ``id``, ``date`` and
``linkedGroupId``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from taskchain.errors import ScheduleFileError
from taskchain.tasks.model import Schedule, Task
from taskchain.workdays import format_date, parse_date

_YAML_SUFFIXES = (".yaml", ".yml")


def _first(raw: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


def _parse_order(value: Any, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"invalid order {value!r}") from None


def _parse_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ValueError(f"invalid boolean {value!r}")


def task_from_dict(raw: dict[str, Any], index: int = 0) -> tuple[float, Task]:
    """Parse one task record. Returns ``(raw_order, task)``; order is renumbered later."""
    task_id = _first(raw, "id", "taskId")
    if task_id is None or str(task_id).strip() == "":
        raise ValueError(f"task #{index} has no id")
    raw_date = _first(raw, "date", "taskDate")
    if raw_date is None:
        raise ValueError(f"task {task_id} has no date")

    group = _first(raw, "linkedGroupId", "linkedTaskGroup")
    task = Task.from_flags(
        id=str(task_id),
        date=parse_date(raw_date),
        dependent_on_previous=_parse_bool(raw.get("dependentOnPrevious"), True),
        linked_group_id=str(group) if group else None,
        name=str(raw.get("name") or ""),
    )
    return _parse_order(raw.get("order"), float(index)), task


def task_to_dict(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "name": task.name,
        "date": format_date(task.date),
        "order": task.order,
        "dependentOnPrevious": task.dependent_on_previous,
        "linkedGroupId": task.linked_group_id,
    }


def parse_schedule(data: Any) -> Schedule:
    """Build a :class:`Schedule` from decoded YAML/JSON data."""
    if isinstance(data, list):
        data = {"tasks": data}
    if not isinstance(data, dict):
        raise ValueError("expected a mapping with 'tasks' or a list of tasks")

    raw_tasks = data.get("tasks") or []
    if not isinstance(raw_tasks, list):
        raise ValueError("'tasks' must be a list")

    parsed: list[tuple[float, int, Task]] = []
    seen: set[str] = set()
    for i, raw in enumerate(raw_tasks):
        if not isinstance(raw, dict):
            raise ValueError(f"task #{i} is not a mapping")
        order, task = task_from_dict(raw, i)
        if task.id in seen:
            raise ValueError(f"duplicate task id {task.id}")
        seen.add(task.id)
        parsed.append((order, i, task))

    # Stored orders may be sparse or decimal; keep their relative order only.
    parsed.sort(key=lambda item: (item[0], item[1]))
    tasks = [task.with_order(n) for n, (_, _, task) in enumerate(parsed)]

    return Schedule(
        location=str(data.get("location") or ""),
        tasks=tasks,
        version=int(data.get("version") or 1),
    )


def load_schedule(path: Path) -> Schedule:
    """Read a schedule from *path* (format chosen by suffix)."""
    if not path.is_file():
        raise ScheduleFileError(path, "file not found")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ScheduleFileError(path, str(e)) from e

    try:
        if path.suffix.lower() in _YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ScheduleFileError(path, f"cannot parse: {e}") from e

    try:
        return parse_schedule(data)
    except ValueError as e:
        raise ScheduleFileError(path, str(e)) from e


def dump_schedule(schedule: Schedule) -> dict[str, Any]:
    return {
        "location": schedule.location,
        "version": schedule.version,
        "tasks": [task_to_dict(t) for t in schedule.ordered()],
    }


def save_schedule(schedule: Schedule, path: Path) -> None:
    """Write *schedule* to *path* (format chosen by suffix)."""
    data = dump_schedule(schedule)
    if path.suffix.lower() in _YAML_SUFFIXES:
        text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    else:
        text = json.dumps(data, indent=2) + "\n"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
