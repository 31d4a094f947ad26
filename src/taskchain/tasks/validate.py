"""Schedule invariant checks."""

from __future__ import annotations

from taskchain import log
from taskchain.errors import InvariantViolation
from taskchain.realign import derives_from_predecessor, expected_date
from taskchain.tasks.groups import linked_groups
from taskchain.tasks.model import Task, sort_by_order
from taskchain.workdays import format_date, is_business_day


def validate(tasks: list[Task]) -> list[str]:
    """Return a list of invariant violations (empty when the schedule is consistent)."""
    errors: list[str] = []

    seen: set[str] = set()
    for t in tasks:
        if t.id in seen:
            errors.append(f"Duplicate task id: {t.id}")
        seen.add(t.id)

    orders = sorted(t.order for t in tasks)
    if orders != list(range(len(tasks))):
        errors.append(f"Order values are not a dense 0..{len(tasks) - 1} sequence: {orders}")

    ordered = sort_by_order(tasks)
    if ordered and ordered[0].dependent_on_previous:
        errors.append(f"First task {ordered[0].id} depends on a previous task")

    for gid, members in linked_groups(ordered).items():
        ids = ", ".join(t.id for t in members)
        if len(members) < 2:
            errors.append(f"Linked group {gid} has a single member: {ids}")
        if len({t.date for t in members}) > 1:
            errors.append(f"Linked group {gid} members have different dates: {ids}")

    for i, t in enumerate(ordered):
        if not derives_from_predecessor(ordered, i):
            continue
        want = expected_date(ordered, i)
        if t.date != want:
            errors.append(
                f"Task {t.id} is dated {format_date(t.date)}, expected {format_date(want)} "
                f"(after {ordered[i - 1].id})"
            )

    return errors


def weekend_dates(tasks: list[Task]) -> list[Task]:
    """Tasks scheduled on a Saturday or Sunday (only possible for manual dates)."""
    return [t for t in sort_by_order(tasks) if not is_business_day(t.date)]


def validate_and_report(tasks: list[Task]) -> bool:
    """Validate and print results. Return ``True`` if valid."""
    errors = validate(tasks)
    for t in weekend_dates(tasks):
        log.warn(f"Task {t.id} is scheduled on a weekend ({format_date(t.date)})")

    if errors:
        log.error("Schedule validation failed:")
        for err in errors:
            log.console.print(f"  - {err}")
        return False

    log.success(f"Schedule is consistent ({len(tasks)} tasks)")
    return True


def ensure_valid(tasks: list[Task]) -> None:
    """Raise :class:`InvariantViolation` if *tasks* breaks any invariant."""
    errors = validate(tasks)
    if errors:
        raise InvariantViolation(errors)
