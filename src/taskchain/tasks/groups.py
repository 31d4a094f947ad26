"""Linked-group resolver: membership, anchor dates and date propagation."""

from __future__ import annotations

import secrets
import string
import time
from datetime import date

from taskchain import log
from taskchain.tasks.model import Manual, Sequential, Task, find_task

_GROUP_ALPHABET = string.ascii_lowercase + string.digits


def new_group_id(prefix: str = "group") -> str:
    """Return ``<prefix>_<epoch ms>_<9 base36 chars>``."""
    suffix = "".join(secrets.choice(_GROUP_ALPHABET) for _ in range(9))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


def group_members(tasks: list[Task], group_id: str) -> list[Task]:
    members = [t for t in tasks if t.linked_group_id == group_id]
    return sorted(members, key=lambda t: t.order)


def linked_groups(tasks: list[Task]) -> dict[str, list[Task]]:
    groups: dict[str, list[Task]] = {}
    for t in sorted(tasks, key=lambda t: t.order):
        gid = t.linked_group_id
        if gid:
            groups.setdefault(gid, []).append(t)
    return groups


def linked_tasks(tasks: list[Task], task_id: str) -> list[Task]:
    """Return the members of *task_id*'s group, ``[task]`` if unlinked, ``[]`` if unknown."""
    task = find_task(tasks, task_id)
    if task is None:
        return []
    if task.linked_group_id is None:
        return [task]
    return group_members(tasks, task.linked_group_id)


def anchor_date(tasks: list[Task], task: Task) -> date:
    """The date a dependent successor of *task* is derived from.

    For a linked task this is the latest date among its group members.
    """
    gid = task.linked_group_id
    if gid is None:
        return task.date
    return max((t.date for t in tasks if t.linked_group_id == gid), default=task.date)


def propagate_date(tasks: list[Task], group_id: str, new_date: date) -> list[Task]:
    """Return a copy of *tasks* with every member of *group_id* dated *new_date*."""
    return [
        t.with_date(new_date) if t.linked_group_id == group_id else t
        for t in tasks
    ]


def dissolve_singletons(tasks: list[Task]) -> list[Task]:
    """Clear the group of any task that is the last member of its group.

    A chained survivor keeps following its predecessor (Sequential); any
    other survivor keeps its date as a manual one.
    """
    counts: dict[str, int] = {}
    for t in tasks:
        gid = t.linked_group_id
        if gid:
            counts[gid] = counts.get(gid, 0) + 1

    result: list[Task] = []
    for t in tasks:
        gid = t.linked_group_id
        if gid and counts[gid] < 2:
            chained = t.dependent_on_previous
            log.debug(f"Task {t.id}: group {gid} dissolved (sole member)")
            t = t.with_derivation(Sequential() if chained else Manual())
        result.append(t)
    return result


def display_order(tasks: list[Task]) -> list[Task]:
    """Board ordering: units sorted by date, then by lowest ``order``.

    A unit is either a single unlinked task or a whole linked group, whose
    members stay together sorted by ``order``.
    """
    units: list[tuple[date, int, list[Task]]] = []
    for members in linked_groups(tasks).values():
        units.append((members[0].date, min(t.order for t in members), members))
    for t in tasks:
        if t.linked_group_id is None:
            units.append((t.date, t.order, [t]))

    units.sort(key=lambda u: (u[0], u[1]))
    ordered: list[Task] = []
    for _, _, members in units:
        ordered.extend(members)
    return ordered

