"""Configuration defaults, env vars, and runtime options for taskchain."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_SCHEDULE_FILE = "schedule.yaml"

DEFAULT_GROUP_PREFIX = "group"


@dataclass
class Config:
    """Runtime configuration — mirrors the CLI flags."""

    # Files
    schedule_file: str = ""
    output_file: str = ""

    # Linking
    group_prefix: str = ""
    realign_after_link: bool = False

    # Misc
    dry_run: bool = False
    verbose: bool = False

    def __post_init__(self) -> None:
        if not self.schedule_file:
            self.schedule_file = (
                os.environ.get("TASKCHAIN_SCHEDULE") or DEFAULT_SCHEDULE_FILE
            )
        if not self.group_prefix:
            self.group_prefix = (
                os.environ.get("TASKCHAIN_GROUP_PREFIX") or DEFAULT_GROUP_PREFIX
            )
        if not self.realign_after_link:
            self.realign_after_link = (
                os.environ.get("TASKCHAIN_REALIGN_AFTER_LINK", "").strip().lower()
                in ("1", "true", "yes")
            )
        if not self.output_file:
            self.output_file = self.schedule_file
