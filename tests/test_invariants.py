"""Every operator leaves a consistent schedule behind."""

from __future__ import annotations

from datetime import date

import pytest

from taskchain.operations import (
    change_date,
    delete_task,
    insert_task,
    link,
    reorder,
    unlink,
)
from taskchain.realign import realign
from taskchain.tasks.model import Manual, Task
from taskchain.tasks.validate import validate
from taskchain.workdays import is_business_day


def jun(day: int) -> date:
    return date(2025, 6, day)


@pytest.fixture
def site(make_chain):
    """Two weeks of work with one manual break."""
    return make_chain(
        ("form-1", 2, False),
        ("pour-1", 3, True),
        ("pour-2", 4, True),
        ("cure", 12, False),
        ("strip-1", 13, True),
        ("strip-2", 16, True),
    )


STEPS = [
    lambda t: change_date(t, "pour-1", jun(5)),
    lambda t: link(t, ["pour-2", "strip-1"], jun(10), "g", realign_after=True),
    lambda t: reorder(t, "strip-2", 0),
    lambda t: insert_task(t, Task("rebar", jun(2)), "form-1"),
    lambda t: insert_task(t, Task("pour-3", jun(2)), link_to="pour-2"),
    lambda t: delete_task(t, "pour-2"),
    lambda t: unlink(t, "pour-3"),
    lambda t: change_date(t, "strip-1", jun(18)),
    lambda t: delete_task(t, "form-1"),
    lambda t: reorder(t, "cure", 99),
]


class TestOperatorSequences:
    def test_each_step_is_consistent(self, site):
        tasks = site
        for step in STEPS:
            tasks = step(tasks)
            assert validate(tasks) == [], [(t.id, t.order, t.date, t.derivation) for t in tasks]

    def test_each_step_is_a_fixed_point_of_realign(self, site):
        tasks = site
        for step in STEPS:
            tasks = step(tasks)
            assert realign(tasks) == tasks

    def test_derived_dates_are_business_days(self, site):
        tasks = site
        for step in STEPS:
            tasks = step(tasks)
            for t in tasks:
                if not isinstance(t.derivation, Manual):
                    assert is_business_day(t.date), t

    def test_input_never_mutated(self, site):
        tasks = site
        for step in STEPS:
            before = list(tasks)
            out = step(tasks)
            assert tasks == before
            tasks = out


class TestRelinkingGroups:
    def test_link_into_existing_group_then_delete_down_to_one(self, make_chain):
        tasks = make_chain(("a", 2, False), ("b", 3, True), ("c", 4, True), ("d", 5, True))
        tasks = link(tasks, ["b", "c"], jun(9), "g", realign_after=True)
        tasks = link(tasks, ["c", "d"], jun(11), "g", realign_after=True)
        assert {t.date for t in tasks if t.linked_group_id == "g"} == {jun(11)}
        tasks = delete_task(tasks, "b")
        tasks = delete_task(tasks, "c")
        assert tasks[-1].linked_group_id is None
        assert validate(tasks) == []

    def test_moving_group_member_to_front(self, make_chain):
        tasks = make_chain(("a", 2, False), ("g1", 4, True, "g"), ("g2", 4, False, "g"))
        tasks = reorder(tasks, "g2", 0)
        assert validate(tasks) == []
        assert not any(t.dependent_on_previous for t in tasks if t.linked_group_id == "g")
