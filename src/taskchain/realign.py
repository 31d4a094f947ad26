"""Realignment: re-derive every sequential and linked date along ``order``.

The walk follows ``order``, never dates.  Manual dates are left alone and
only serve as the reference for the next task.  A sequential task takes the
next business day after its predecessor's anchor date (the latest date of
the predecessor's linked group, if it has one).  A linked group is walked
as one unit: its lowest-``order`` member derives the group date (from the
predecessor when any member is chained, otherwise the group's latest date)
and the date is propagated to every member wherever it sits in the list.
"""

from __future__ import annotations

from datetime import date

from taskchain import log
from taskchain.tasks.groups import anchor_date, propagate_date
from taskchain.tasks.model import Manual, Task, index_of, sort_by_order
from taskchain.workdays import format_date, next_business_day


def _group_is_chained(tasks: list[Task], group_id: str) -> bool:
    return any(t.dependent_on_previous for t in tasks if t.linked_group_id == group_id)


def _leads_group(tasks: list[Task], index: int) -> bool:
    gid = tasks[index].linked_group_id
    return all(tasks[j].linked_group_id != gid for j in range(index))


def derives_from_predecessor(tasks: list[Task], index: int) -> bool:
    """Whether the task at *index* (in an order-sorted list) takes its date from ``index - 1``."""
    if index <= 0:
        return False
    task = tasks[index]
    gid = task.linked_group_id
    if gid is None:
        return task.dependent_on_previous
    return _leads_group(tasks, index) and _group_is_chained(tasks, gid)


def expected_date(tasks: list[Task], index: int) -> date:
    """The date the walk assigns to the task at *index*, given the current list."""
    task = tasks[index]
    if derives_from_predecessor(tasks, index):
        return next_business_day(anchor_date(tasks, tasks[index - 1]))
    if task.linked_group_id is not None:
        return anchor_date(tasks, task)
    return task.date


def _enforce_first_task(tasks: list[Task]) -> list[Task]:
    first = tasks[0]
    if not first.dependent_on_previous and not (
        first.linked_group_id and _group_is_chained(tasks, first.linked_group_id)
    ):
        return tasks
    log.debug(f"Task {first.id}: first in order, no longer dependent on previous")
    gid = first.linked_group_id
    if gid is None:
        return [first.unchained()] + tasks[1:]
    return [t.unchained() if t.linked_group_id == gid else t for t in tasks]


def realign(tasks: list[Task], pivot_id: str | None = None) -> list[Task]:
    """Return *tasks* with every derived date recomputed.

    With *pivot_id* only the tasks after the pivot are walked (targeted
    realignment).  An unknown pivot leaves the schedule unchanged.
    """
    result = sort_by_order(tasks)
    if not result:
        return result

    start = 1
    if pivot_id is not None:
        pivot = index_of(result, pivot_id)
        if pivot is None:
            log.debug(f"realign: unknown pivot {pivot_id}, schedule unchanged")
            return list(tasks)
        start = pivot + 1

    result = _enforce_first_task(result)

    for i in range(max(start, 1), len(result)):
        task = result[i]
        if isinstance(task.derivation, Manual):
            continue

        new_date = expected_date(result, i)
        if new_date != task.date:
            log.debug(
                f"Task {task.id}: {format_date(task.date)} -> {format_date(new_date)}"
            )

        gid = task.linked_group_id
        if gid is None:
            result[i] = task.with_date(new_date)
        else:
            result = propagate_date(result, gid, new_date)

    return result
