"""Exception types for schedule loading and invariant checks.

The engine operators never raise these for recoverable input (unknown ids,
short link lists); they are for malformed files and for callers that ask
for a hard failure on a broken schedule.
"""

from __future__ import annotations

from pathlib import Path


class ScheduleError(Exception):
    """Base class for taskchain errors."""


class ScheduleFileError(ScheduleError):
    """A schedule file could not be read or does not describe a schedule."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class InvariantViolation(ScheduleError):
    """A schedule breaks one or more ordering/date invariants."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = list(problems)
        summary = "; ".join(self.problems[:3])
        if len(self.problems) > 3:
            summary += f" (+{len(self.problems) - 3} more)"
        super().__init__(summary)
