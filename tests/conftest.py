"""Shared fixtures for taskchain tests.

Dates used across the suite (June 2025)::

    Mon 2   Tue 3   Wed 4   Thu 5   Fri 6   Sat 7   Sun 8
    Mon 9   Tue 10  Wed 11  Thu 12  Fri 13
"""

from __future__ import annotations

from datetime import date

import pytest

from taskchain import log
from taskchain.tasks.model import Task


def jun(day: int) -> date:
    return date(2025, 6, day)


def _make_task(
    id: str,
    day: int = 2,
    order: int = 0,
    dependent: bool = True,
    group: str | None = None,
    name: str = "",
) -> Task:
    return Task.from_flags(
        id=id,
        date=jun(day),
        order=order,
        dependent_on_previous=dependent,
        linked_group_id=group,
        name=name,
    )


def _make_chain(*rows: tuple) -> list[Task]:
    """Build a schedule from ``(id, day, dependent[, group])`` tuples, ordered as given."""
    tasks: list[Task] = []
    for i, row in enumerate(rows):
        tid, day, dependent, *rest = row
        group = rest[0] if rest else None
        tasks.append(_make_task(tid, day, i, dependent, group))
    return tasks


@pytest.fixture
def make_task():
    """Factory fixture that creates Task instances."""
    return _make_task


@pytest.fixture
def make_chain():
    """Factory fixture that creates an ordered list of tasks."""
    return _make_chain


@pytest.fixture(autouse=True)
def _quiet_log():
    """Reset verbose logging between tests."""
    log.set_verbose(False)
    yield
    log.set_verbose(False)
