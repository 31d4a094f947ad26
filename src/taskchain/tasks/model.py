"""Task and Schedule data models used across loading, realignment and the CLI.

A task's date is derived in one of three ways, carried as a tagged value:

* :class:`Manual` — the date is authoritative.
* :class:`Sequential` — the date is the next business day after the
  predecessor's anchor date.
* :class:`Linked` — the date is shared with every member of a linked group.
  ``chained=True`` marks the member that pulls the group's date from the
  predecessor chain.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum


class DerivationStatus(str, Enum):
    MANUAL = "manual"
    SEQUENTIAL = "sequential"
    LINKED = "linked"


@dataclass(frozen=True)
class Manual:
    pass


@dataclass(frozen=True)
class Sequential:
    pass


@dataclass(frozen=True)
class Linked:
    group_id: str
    chained: bool = False


Derivation = Manual | Sequential | Linked


@dataclass(frozen=True)
class Task:
    id: str
    date: date
    order: int = 0
    derivation: Derivation = field(default_factory=Sequential)
    name: str = ""

    @classmethod
    def from_flags(
        cls,
        id: str,
        date: date,
        order: int = 0,
        dependent_on_previous: bool = True,
        linked_group_id: str | None = None,
        name: str = "",
    ) -> Task:
        """Build a task from the wire-level ``dependentOnPrevious``/``linkedGroupId`` pair."""
        derivation: Derivation
        if linked_group_id:
            derivation = Linked(linked_group_id, chained=dependent_on_previous)
        elif dependent_on_previous:
            derivation = Sequential()
        else:
            derivation = Manual()
        return cls(id=id, date=date, order=order, derivation=derivation, name=name)

    # ── derived views ────────────────────────────────────────────

    @property
    def dependent_on_previous(self) -> bool:
        d = self.derivation
        if isinstance(d, Linked):
            return d.chained
        return isinstance(d, Sequential)

    @property
    def linked_group_id(self) -> str | None:
        d = self.derivation
        return d.group_id if isinstance(d, Linked) else None

    @property
    def status(self) -> DerivationStatus:
        d = self.derivation
        if isinstance(d, Linked):
            return DerivationStatus.LINKED
        if isinstance(d, Sequential):
            return DerivationStatus.SEQUENTIAL
        return DerivationStatus.MANUAL

    # ── copies ───────────────────────────────────────────────────

    def with_date(self, new_date: date) -> Task:
        return self if new_date == self.date else replace(self, date=new_date)

    def with_order(self, order: int) -> Task:
        return self if order == self.order else replace(self, order=order)

    def with_derivation(self, derivation: Derivation) -> Task:
        return self if derivation == self.derivation else replace(self, derivation=derivation)

    def unchained(self) -> Task:
        """Return a copy that does not depend on its predecessor."""
        d = self.derivation
        if isinstance(d, Sequential):
            return self.with_derivation(Manual())
        if isinstance(d, Linked) and d.chained:
            return self.with_derivation(Linked(d.group_id, chained=False))
        return self


def index_of(tasks: list[Task], task_id: str) -> int | None:
    for i, t in enumerate(tasks):
        if t.id == task_id:
            return i
    return None


def find_task(tasks: list[Task], task_id: str) -> Task | None:
    i = index_of(tasks, task_id)
    return tasks[i] if i is not None else None


def sort_by_order(tasks: list[Task]) -> list[Task]:
    return sorted(tasks, key=lambda t: t.order)


def renumber(tasks: list[Task]) -> list[Task]:
    """Assign ``order`` from list position (dense ``0..N-1``)."""
    return [t.with_order(i) for i, t in enumerate(tasks)]


@dataclass
class Schedule:
    location: str = ""
    tasks: list[Task] = field(default_factory=list)
    version: int = 1

    def ids(self) -> list[str]:
        return [t.id for t in self.tasks]

    def ordered(self) -> list[Task]:
        return sort_by_order(self.tasks)

    def get_task(self, task_id: str) -> Task | None:
        return find_task(self.tasks, task_id)
