"""Tests for taskchain.log and the realignment trace."""

from __future__ import annotations

import io
from datetime import date

import pytest
from rich.console import Console

from taskchain import log
from taskchain.operations import change_date
from taskchain.realign import realign


def jun(day: int) -> date:
    return date(2025, 6, day)


@pytest.fixture
def streams():
    out, err = io.StringIO(), io.StringIO()
    old_out, old_err = log.console, log._err_console
    log.set_console(
        Console(file=out, force_terminal=False, width=200),
        Console(file=err, force_terminal=False, width=200),
    )
    yield out, err
    log.set_console(old_out, old_err)


class TestLevels:
    def test_prefixes(self, streams):
        out, err = streams
        log.info("one")
        log.success("two")
        log.warn("three")
        log.error("four")
        text = out.getvalue()
        assert "[INFO] one" in text
        assert "[OK] two" in text
        assert "[WARN] three" in text
        assert "[ERROR] four" in err.getvalue()
        assert "four" not in text

    def test_debug_gated_by_verbose(self, streams):
        out, _ = streams
        log.debug("hidden")
        assert out.getvalue() == ""
        log.set_verbose(True)
        log.debug("shown")
        assert "[DEBUG] shown" in out.getvalue()

    def test_single_console_gets_errors(self):
        buf = io.StringIO()
        old_out, old_err = log.console, log._err_console
        log.set_console(Console(file=buf, force_terminal=False))
        try:
            log.error("boom")
        finally:
            log.set_console(old_out, old_err)
        assert "[ERROR] boom" in buf.getvalue()


class TestTrace:
    def test_realign_traces_date_changes(self, streams, make_chain):
        out, _ = streams
        log.set_verbose(True)
        realign(make_chain(("a", 6, False), ("b", 2, True)))
        assert "Task b: 2025-06-02 -> 2025-06-09" in out.getvalue()

    def test_quiet_unless_verbose(self, streams, make_chain):
        out, _ = streams
        change_date(make_chain(("a", 2, False), ("b", 3, True)), "a", jun(9))
        assert out.getvalue() == ""
