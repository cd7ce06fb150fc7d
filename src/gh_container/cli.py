"""CLI for gh-container."""

import argparse
import sys
from pathlib import Path

from .config import Config
from .exceptions import (
    GhContainerError,
    MissingArgumentError,
    UnknownActionError,
)
from .factory import Factory
from .models.invocation import Action, Invocation
from .models.version import FilterMode, FilterSpec
from .services.query import build_query
from .services.table import print_table

PROG = "gh-container"

USAGE = f"""\
Usage: {PROG} [-h] [-c FILE] [-d] <action> [options]

List, browse and clean up container package versions on GitHub Packages.

Actions:
  list                      List your container packages
  versions <name>           List the versions of a package
  clean <name> [<id>]       Delete a version, or all untagged versions
  browse <name>             Browse versions interactively with fzf

Global options:
  -h, --help                Show this help and exit
  -c, --config-file FILE    Read configuration from FILE
  -d, --debug               Enable debug logging

Run '{PROG} <action> --help' for the options of each action.
"""

_ACTIONS = {a.value: a for a in Action}


def _build_parser(action: Action) -> argparse.ArgumentParser:
    """Build the parser for one subcommand."""
    match action:
        case Action.LIST:
            parser = argparse.ArgumentParser(
                prog=f"{PROG} list",
                description="List container packages of the logged-in user.",
            )
        case Action.VERSIONS:
            parser = argparse.ArgumentParser(
                prog=f"{PROG} versions",
                description="List the versions of a container package.",
            )
            parser.add_argument("name", nargs="?", help="package name")
            group = parser.add_mutually_exclusive_group()
            group.add_argument(
                "-u",
                "--untagged",
                action="store_true",
                help="Only show versions without tags",
                default=False,
            )
            group.add_argument(
                "--tagged",
                action="store_true",
                help="Only show versions with at least one tag",
                default=False,
            )
            parser.add_argument(
                "--show-pkg-name",
                action="store_true",
                help="Prefix every row with the package name",
                default=False,
            )
        case Action.CLEAN:
            parser = argparse.ArgumentParser(
                prog=f"{PROG} clean",
                description=(
                    "Delete one version of a container package by ID, or"
                    " every untagged version with --untagged."
                ),
            )
            parser.add_argument("name", nargs="?", help="package name")
            parser.add_argument(
                "version_id", nargs="?", help="ID of the version to delete"
            )
            parser.add_argument(
                "-u",
                "--untagged",
                action="store_true",
                help="Delete every version without tags",
                default=False,
            )
            parser.add_argument(
                "-x",
                "--dry-run",
                action="store_true",
                help="Dry run only: show what would be deleted",
                default=False,
            )
        case Action.BROWSE:
            parser = argparse.ArgumentParser(
                prog=f"{PROG} browse",
                description=(
                    "Browse the versions of a container package in fzf."
                    "  Press ? for key bindings."
                ),
            )
            parser.add_argument("name", nargs="?", help="package name")
    return parser


def _split_global_args(
    argv: list[str],
) -> tuple[Action | None, list[str], Path | None, bool]:
    """Consume global options up to the first action keyword.

    Returns the action (if any), the arguments for its own parser, the
    config file and the debug flag.  Tokens that look like options but are
    not global ones are passed on to the action parser.
    """
    collected: list[str] = []
    config_file: Path | None = None
    debug = False
    idx = 0
    while idx < len(argv):
        token = argv[idx]
        if token in ("-h", "--help"):
            print(USAGE, end="")
            sys.exit(0)
        elif token in ("-d", "--debug"):
            debug = True
        elif token in ("-c", "--config-file"):
            idx += 1
            if idx == len(argv):
                raise MissingArgumentError(token, "FILE")
            config_file = Path(argv[idx])
        elif token.startswith("--config-file="):
            config_file = Path(token.split("=", 1)[1])
        elif token in _ACTIONS:
            rest = collected + argv[idx + 1 :]
            return _ACTIONS[token], rest, config_file, debug
        elif token.startswith("-"):
            collected.append(token)
        else:
            raise UnknownActionError(token)
        idx += 1
    if collected:
        raise UnknownActionError(collected[0])
    return None, [], config_file, debug


def parse_args(argv: list[str]) -> Invocation | None:
    """Parse the command line.

    Returns `None` if there was nothing to do but print the usage.
    """
    action, rest, config_file, debug = _split_global_args(argv)
    if action is None:
        print(USAGE, end="")
        return None
    args = _build_parser(action).parse_args(rest)
    name: str | None = getattr(args, "name", None)
    if action != Action.LIST and not name:
        raise MissingArgumentError(action.value, "name")

    filter_spec = FilterSpec()
    if action == Action.VERSIONS:
        mode = FilterMode.ALL
        if args.untagged:
            mode = FilterMode.UNTAGGED
        elif args.tagged:
            mode = FilterMode.TAGGED
        filter_spec = FilterSpec(
            mode=mode, show_package_name=args.show_pkg_name
        )

    return Invocation(
        action=action,
        package_name=name,
        version_id=getattr(args, "version_id", None),
        filter=filter_spec,
        untagged=getattr(args, "untagged", False),
        dry_run=getattr(args, "dry_run", False),
        debug=debug,
        config_file=config_file,
    )


def load_config(invocation: Invocation) -> Config:
    cfg = Config.load(invocation.config_file)

    # Command-line flags win over the config file
    if invocation.debug:
        cfg = cfg.model_copy(update={"debug": True})
    if invocation.dry_run:
        cfg = cfg.model_copy(update={"dry_run": True})
    return cfg


def execute(invocation: Invocation, factory: Factory) -> int:
    """Run a parsed command with components from the factory."""
    package_type = factory.config.package_type
    name = invocation.package_name or ""
    match invocation.action:
        case Action.LIST:
            client = factory.create_registry_client()
            for package in client.list_packages(package_type):
                print(package)
        case Action.VERSIONS:
            client = factory.create_registry_client()
            query = build_query(invocation.filter, name)
            rows = client.query_versions(package_type, name, query)
            print_table(query.headers, rows)
        case Action.CLEAN:
            cleaner = factory.create_cleaner(dry_run=invocation.dry_run)
            cleaner.clean(
                name, invocation.version_id, untagged=invocation.untagged
            )
        case Action.BROWSE:
            return factory.create_browser().browse(name)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point: parse, run, and turn errors into an exit status."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        invocation = parse_args(argv)
    except UnknownActionError:
        print("Error: Unknown action", file=sys.stderr)
        print(USAGE, end="", file=sys.stderr)
        return 1
    except MissingArgumentError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        action = _ACTIONS.get(exc.action)
        if action is not None:
            _build_parser(action).print_help(file=sys.stderr)
        return 1
    if invocation is None:
        return 0

    try:
        cfg = load_config(invocation)
        with Factory.standalone(cfg, invocation.config_file) as factory:
            return execute(invocation, factory)
    except GhContainerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def run() -> None:
    """Console script wrapper."""
    sys.exit(main())
