"""taskchain CLI — inspect and edit a schedule file from the terminal.

Installed as ``taskchain`` console_script via pipx / pip.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from datetime import date
from pathlib import Path

import click
from rich.table import Table

from taskchain import __version__
from taskchain import log
from taskchain.config import Config
from taskchain.errors import ScheduleError
from taskchain.operations import (
    change_date,
    changed_tasks,
    delete_task,
    insert_task,
    link,
    reorder,
    unlink,
)
from taskchain.realign import realign
from taskchain.tasks.groups import display_order
from taskchain.tasks.io import load_schedule, save_schedule
from taskchain.tasks.model import Manual, Schedule, Sequential, Task
from taskchain.tasks.validate import validate_and_report
from taskchain.workdays import format_date, parse_date, roll_forward


CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

_STATUS_STYLE = {
    "manual": "[yellow]manual[/yellow]",
    "sequential": "[cyan]sequential[/cyan]",
    "linked": "[magenta]linked[/magenta]",
}


class DateParam(click.ParamType):
    """Click parameter accepting ``YYYY-MM-DD``."""

    name = "date"

    def convert(
        self, value: object, param: click.Parameter | None, ctx: click.Context | None
    ) -> date:
        if isinstance(value, date):
            return value
        try:
            return parse_date(value)
        except ValueError:
            self.fail(f"{value!r} is not a YYYY-MM-DD date", param, ctx)


DATE = DateParam()


# ── helpers ──────────────────────────────────────────────────────────

def _load(cfg: Config) -> Schedule:
    try:
        return load_schedule(Path(cfg.schedule_file))
    except ScheduleError as e:
        log.error(str(e))
        sys.exit(1)


def _render(tasks: list[Task], title: str = "") -> None:
    table = Table(title=title or None, show_lines=False)
    table.add_column("#", justify="right")
    table.add_column("Task")
    table.add_column("Date")
    table.add_column("Day")
    table.add_column("Mode")
    table.add_column("Group", style="dim")
    for t in tasks:
        mode = _STATUS_STYLE[t.status.value]
        if t.linked_group_id and t.dependent_on_previous:
            mode += " [dim](chained)[/dim]"
        label = f"{t.id} [dim]{t.name}[/dim]" if t.name else t.id
        table.add_row(
            str(t.order),
            label,
            format_date(t.date),
            t.date.strftime("%a"),
            mode,
            t.linked_group_id or "",
        )
    log.console.print(table)


def _mutate(
    cfg: Config,
    action: str,
    op: Callable[[list[Task]], list[Task]],
    require: tuple[str, ...] = (),
) -> None:
    """Load, apply *op*, report the changed tasks and save."""
    schedule = _load(cfg)
    before = schedule.ordered()

    missing = [tid for tid in require if schedule.get_task(tid) is None]
    if missing:
        log.warn(f"Unknown task(s): {', '.join(missing)}. Nothing changed.")
        return

    after = op(before)
    changes = changed_tasks(before, after)
    removed = {t.id for t in before} - {t.id for t in after}

    if not changes and not removed:
        log.info(f"{action}: nothing to change")
        return

    for tid in sorted(removed):
        log.info(f"Removed {tid}")
    if changes:
        _render(changes, title=f"{action}: {len(changes)} task(s) changed")

    if cfg.dry_run:
        log.warn("Dry run: schedule not saved")
        return

    schedule.tasks = after
    save_schedule(schedule, Path(cfg.output_file))
    log.success(f"Saved {cfg.output_file}")


# ── main group ───────────────────────────────────────────────────────

@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("-f", "--file", "schedule_file", default="", help="Schedule file (YAML or JSON)")
@click.option("-o", "--output", "output_file", default="", help="Write the result here instead of --file")
@click.option("--group-prefix", default="", help="Prefix for generated linked-group ids")
@click.option("--dry-run", is_flag=True, help="Show changes without saving")
@click.option("-v", "--verbose", is_flag=True, help="Trace the realignment walk")
@click.version_option(__version__, prog_name="taskchain")
@click.pass_context
def main(
    ctx: click.Context,
    schedule_file: str,
    output_file: str,
    group_prefix: str,
    dry_run: bool,
    verbose: bool,
) -> None:
    """taskchain — keep a construction task schedule's dates consistent.

    Sequential tasks follow their predecessor by one business day, linked
    tasks share one date, manual dates stay where they are.

    \b
    EXAMPLES:
      taskchain show                              # Print the schedule
      taskchain set-date pour-2 2025-06-09        # Move a date, shift dependents
      taskchain move strip-1 0                    # Reorder and realign
      taskchain link pour-1 pour-2 --date 2025-06-04
      taskchain delete form-3
    """
    ctx.obj = cfg = Config(
        schedule_file=schedule_file,
        output_file=output_file,
        group_prefix=group_prefix,
        dry_run=dry_run,
        verbose=verbose,
    )
    log.set_verbose(cfg.verbose)


# ── read-only commands ───────────────────────────────────────────────

@main.command()
@click.option("--by-date", is_flag=True, help="Board order: by date, linked groups together")
@click.pass_obj
def show(cfg: Config, by_date: bool) -> None:
    """Print the schedule."""
    schedule = _load(cfg)
    tasks = display_order(schedule.tasks) if by_date else schedule.ordered()
    if not tasks:
        log.info("Schedule is empty")
        return
    _render(tasks, title=schedule.location)


@main.command()
@click.pass_obj
def check(cfg: Config) -> None:
    """Validate ordering, dependency and linked-group invariants."""
    schedule = _load(cfg)
    if not validate_and_report(schedule.ordered()):
        sys.exit(1)


# ── mutations ────────────────────────────────────────────────────────

@main.command("realign")
@click.option("--after", "pivot", default=None, help="Only realign tasks after this task")
@click.pass_obj
def realign_cmd(cfg: Config, pivot: str | None) -> None:
    """Recompute every sequential and linked date."""
    require = (pivot,) if pivot else ()
    _mutate(cfg, "realign", lambda tasks: realign(tasks, pivot), require)


@main.command("set-date")
@click.argument("task_id")
@click.argument("new_date", type=DATE)
@click.option("--snap", is_flag=True, help="Move a weekend date to the following Monday")
@click.pass_obj
def set_date(cfg: Config, task_id: str, new_date: date, snap: bool) -> None:
    """Change a task's date and shift the tasks that depend on it."""
    if snap:
        new_date = roll_forward(new_date)
    _mutate(cfg, "set-date", lambda tasks: change_date(tasks, task_id, new_date), (task_id,))


@main.command()
@click.argument("task_id")
@click.argument("index", type=int)
@click.pass_obj
def move(cfg: Config, task_id: str, index: int) -> None:
    """Move a task to position INDEX (0-based) and realign."""
    _mutate(cfg, "move", lambda tasks: reorder(tasks, task_id, index), (task_id,))


@main.command("link")
@click.argument("task_ids", nargs=-1, required=True)
@click.option("--date", "target_date", type=DATE, required=True, help="Shared date")
@click.option("--group", "group_id", default=None, help="Group id (generated if omitted)")
@click.option("--realign", "realign_after", is_flag=True, help="Realign the tasks after the group")
@click.pass_obj
def link_cmd(
    cfg: Config,
    task_ids: tuple[str, ...],
    target_date: date,
    group_id: str | None,
    realign_after: bool,
) -> None:
    """Link two or more tasks to one date."""
    if len(set(task_ids)) < 2:
        raise click.UsageError("link needs at least two different task ids.")
    _mutate(
        cfg,
        "link",
        lambda tasks: link(
            tasks,
            list(task_ids),
            target_date,
            group_id,
            realign_after=realign_after or cfg.realign_after_link,
            prefix=cfg.group_prefix,
        ),
        task_ids,
    )


@main.command("unlink")
@click.argument("task_id")
@click.pass_obj
def unlink_cmd(cfg: Config, task_id: str) -> None:
    """Remove a task from its linked group."""
    _mutate(cfg, "unlink", lambda tasks: unlink(tasks, task_id), (task_id,))


@main.command()
@click.argument("task_id")
@click.pass_obj
def delete(cfg: Config, task_id: str) -> None:
    """Delete a task, repairing its linked group."""
    _mutate(cfg, "delete", lambda tasks: delete_task(tasks, task_id), (task_id,))


@main.command()
@click.argument("task_id")
@click.option("--name", default="", help="Display name")
@click.option("--date", "task_date", type=DATE, default=None, help="Date (manual tasks, or first task)")
@click.option("--after", "after_id", default=None, help="Insert after this task")
@click.option("--start", "at_start", is_flag=True, help="Insert at the start")
@click.option("--manual", is_flag=True, help="Keep --date instead of following the previous task")
@click.option("--link-to", default=None, help="Share the date of this task's group")
@click.pass_obj
def add(
    cfg: Config,
    task_id: str,
    name: str,
    task_date: date | None,
    after_id: str | None,
    at_start: bool,
    manual: bool,
    link_to: str | None,
) -> None:
    """Add a new task."""
    if manual and task_date is None:
        raise click.UsageError("--manual needs --date.")
    if sum(1 for x in (after_id, link_to) if x) + int(at_start) > 1:
        raise click.UsageError("Use only one of --after, --start, --link-to.")

    task = Task(
        id=task_id,
        date=task_date or date.today(),
        derivation=Manual() if manual else Sequential(),
        name=name,
    )
    require = tuple(x for x in (after_id, link_to) if x)
    _mutate(
        cfg,
        "add",
        lambda tasks: insert_task(
            tasks,
            task,
            after_id,
            at_start=at_start,
            link_to=link_to,
            prefix=cfg.group_prefix,
        ),
        require,
    )
