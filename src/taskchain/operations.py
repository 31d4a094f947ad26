"""Schedule mutation operators: change date, reorder, link/unlink, delete, insert.

Every operator takes a list of tasks and returns a new, fully realigned
list; the input list and its tasks are left untouched.  An unknown task id
makes the call a no-op that returns the tasks unchanged.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date

from taskchain import log
from taskchain.config import DEFAULT_GROUP_PREFIX
from taskchain.realign import realign
from taskchain.tasks.groups import (
    dissolve_singletons,
    group_members,
    new_group_id,
    propagate_date,
)
from taskchain.tasks.model import (
    Linked,
    Manual,
    Sequential,
    Task,
    index_of,
    renumber,
    sort_by_order,
)
from taskchain.workdays import format_date


def _unknown(op: str, task_id: str, tasks: list[Task]) -> list[Task]:
    log.debug(f"{op}: unknown task {task_id}, schedule unchanged")
    return list(tasks)


# ── change date ──────────────────────────────────────────────────────

def change_date(tasks: list[Task], task_id: str, new_date: date) -> list[Task]:
    """Set *task_id*'s date and shift everything that depends on it.

    The edited date becomes authoritative: a sequential task turns manual
    and a chained group stops following its predecessor.  Linked members
    all take the new date.  Tasks ordered before the task (or before its
    group's first member) are not touched.
    """
    ordered = sort_by_order(tasks)
    idx = index_of(ordered, task_id)
    if idx is None:
        return _unknown("change_date", task_id, tasks)

    task = ordered[idx]
    gid = task.linked_group_id
    log.debug(f"Task {task_id}: date {format_date(task.date)} -> {format_date(new_date)}")

    if gid is None:
        ordered[idx] = task.with_date(new_date).unchained()
        pivot = task_id
    else:
        ordered = [t.unchained() if t.linked_group_id == gid else t for t in ordered]
        ordered = propagate_date(ordered, gid, new_date)
        pivot = group_members(ordered, gid)[0].id

    return realign(ordered, pivot_id=pivot)


# ── reorder ──────────────────────────────────────────────────────────

def reorder(tasks: list[Task], task_id: str, new_index: int) -> list[Task]:
    """Move *task_id* to *new_index* (clamped), renumber and realign everything."""
    ordered = sort_by_order(tasks)
    idx = index_of(ordered, task_id)
    if idx is None:
        return _unknown("reorder", task_id, tasks)

    task = ordered.pop(idx)
    position = max(0, min(new_index, len(ordered)))
    ordered.insert(position, task)
    log.debug(f"Task {task_id}: position {idx} -> {position}")
    return realign(renumber(ordered))


# ── link / unlink ────────────────────────────────────────────────────

def link(
    tasks: list[Task],
    task_ids: list[str],
    target_date: date,
    group_id: str | None = None,
    *,
    realign_after: bool = False,
    prefix: str = DEFAULT_GROUP_PREFIX,
) -> list[Task]:
    """Put *task_ids* in one linked group dated *target_date*.

    Needs at least two distinct known ids.  When *group_id* names an
    existing group its current members join the new date too.  Groups
    left with a single member by the move are dissolved.  Dependent tasks
    are only realigned when *realign_after* is set.
    """
    ordered = sort_by_order(tasks)
    known = {t.id for t in ordered}
    ids: list[str] = []
    for tid in task_ids:
        if tid in known and tid not in ids:
            ids.append(tid)
    if len(ids) < 2:
        log.debug(f"link: need at least 2 known tasks, got {len(ids)}; schedule unchanged")
        return list(tasks)

    gid = group_id or new_group_id(prefix)
    # The target date is authoritative for members already in the group.
    ordered = [t.unchained() if t.linked_group_id == gid else t for t in ordered]
    ordered = [
        t.with_date(target_date).with_derivation(Linked(gid)) if t.id in ids else t
        for t in ordered
    ]
    ordered = propagate_date(ordered, gid, target_date)
    ordered = dissolve_singletons(ordered)
    log.debug(f"Linked {', '.join(ids)} as {gid} on {format_date(target_date)}")

    if realign_after:
        return realign(ordered, pivot_id=group_members(ordered, gid)[0].id)
    return ordered


def unlink(tasks: list[Task], task_id: str) -> list[Task]:
    """Take *task_id* out of its group; it goes back to following its predecessor."""
    ordered = sort_by_order(tasks)
    idx = index_of(ordered, task_id)
    if idx is None:
        return _unknown("unlink", task_id, tasks)

    task = ordered[idx]
    if task.linked_group_id is None:
        log.debug(f"unlink: task {task_id} is not linked, schedule unchanged")
        return list(tasks)

    log.debug(f"Task {task_id}: linked -> sequential (left {task.linked_group_id})")
    ordered[idx] = task.with_derivation(Sequential())
    return realign(dissolve_singletons(ordered))


# ── delete ───────────────────────────────────────────────────────────

def delete_task(tasks: list[Task], task_id: str) -> list[Task]:
    """Remove *task_id*, repair its linked group, renumber and realign."""
    ordered = sort_by_order(tasks)
    idx = index_of(ordered, task_id)
    if idx is None:
        return _unknown("delete_task", task_id, tasks)

    deleted = ordered[idx]
    gid = deleted.linked_group_id
    if gid is not None:
        survivors = [t for t in group_members(ordered, gid) if t.id != task_id]
        if len(survivors) <= 1:
            for s in survivors:
                sequential = deleted.dependent_on_previous or s.dependent_on_previous
                log.debug(f"Task {s.id}: group {gid} dissolved after deleting {task_id}")
                ordered[index_of(ordered, s.id)] = s.with_derivation(
                    Sequential() if sequential else Manual()
                )
        elif deleted.dependent_on_previous:
            lead = survivors[0]
            log.debug(f"Task {lead.id}: now carries group {gid} from its predecessor")
            ordered[index_of(ordered, lead.id)] = lead.with_derivation(Linked(gid, chained=True))

    remaining = [t for t in ordered if t.id != task_id]
    return realign(renumber(remaining))


# ── insert ───────────────────────────────────────────────────────────

def insert_task(
    tasks: list[Task],
    task: Task,
    after_id: str | None = None,
    *,
    at_start: bool = False,
    link_to: str | None = None,
    prefix: str = DEFAULT_GROUP_PREFIX,
) -> list[Task]:
    """Add *task* to the schedule.

    Placement: right after the group of *link_to* (sharing its date), at
    the start, right after *after_id*, or at the end.  A new sequential
    task gets its date from its predecessor.
    """
    ordered = sort_by_order(tasks)
    if index_of(ordered, task.id) is not None:
        log.debug(f"insert_task: task {task.id} already exists, schedule unchanged")
        return list(tasks)

    if link_to is not None:
        partner_idx = index_of(ordered, link_to)
        if partner_idx is None:
            return _unknown("insert_task", link_to, tasks)
        partner = ordered[partner_idx]
        gid = partner.linked_group_id
        if gid is None:
            gid = new_group_id(prefix)
            ordered[partner_idx] = partner.with_derivation(
                Linked(gid, chained=partner.dependent_on_previous)
            )
        task = replace(task, date=partner.date, derivation=Linked(gid))
        position = max(i for i, t in enumerate(ordered) if t.linked_group_id == gid) + 1
    elif at_start:
        position = 0
    elif after_id is not None:
        after_idx = index_of(ordered, after_id)
        if after_idx is None:
            return _unknown("insert_task", after_id, tasks)
        position = after_idx + 1
    else:
        position = len(ordered)

    log.debug(f"Task {task.id}: inserted at position {position} ({task.status.value})")
    ordered.insert(position, task)
    return realign(renumber(ordered))


# ── bookkeeping ──────────────────────────────────────────────────────

def normalize_order(tasks: list[Task]) -> list[Task]:
    """Stable-sort by ``order`` and renumber densely from 0."""
    return renumber(sort_by_order(tasks))


def changed_tasks(before: list[Task], after: list[Task]) -> list[Task]:
    """Tasks in *after* that are new or differ from *before* in date, order or derivation."""
    old = {t.id: t for t in before}
    changed: list[Task] = []
    for t in after:
        prev = old.get(t.id)
        if (
            prev is None
            or prev.date != t.date
            or prev.order != t.order
            or prev.derivation != t.derivation
        ):
            changed.append(t)
    return changed
