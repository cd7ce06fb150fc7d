"""Model for a parsed command line."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .version import FilterSpec


class Action(Enum):
    """Top-level subcommands."""

    LIST = "list"
    VERSIONS = "versions"
    CLEAN = "clean"
    BROWSE = "browse"


@dataclass(frozen=True)
class Invocation:
    """Everything needed to run one command.  Built once by the parser."""

    action: Action
    package_name: str | None = None
    version_id: str | None = None
    filter: FilterSpec = field(default_factory=FilterSpec)
    untagged: bool = False
    dry_run: bool = False
    debug: bool = False
    config_file: Path | None = None
