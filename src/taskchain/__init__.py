"""taskchain: task dependency and date-realignment engine for construction schedules."""

__version__ = "0.1.0"
