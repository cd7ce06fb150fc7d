"""Interactive browsing of package versions with fzf."""

import shlex
import shutil
import subprocess
import sys
from abc import abstractmethod
from collections.abc import Sequence

import structlog

from ..exceptions import BrowserNotFoundError
from ..models.package_type import PackageType
from ..models.version import FilterSpec
from ..storage.registry import RegistryClient
from .query import build_query
from .table import render_table

BROWSE_HELP = """\
Keys:
  ?       toggle this help
  ctrl-r  reload the version list
  ctrl-d  delete the selected version, then reload
  esc     quit"""

# fzf exits 1 when nothing matched and 130 when interrupted; both are a
# normal way to leave the browser.
FZF_OK_EXITS = (0, 1, 130)


class InteractiveSession:
    """Something that can run a fuzzy-finder over a list of lines."""

    @abstractmethod
    def run(self, args: Sequence[str], lines: Sequence[str]) -> int:
        """Run the finder with these options over these lines; return its
        exit status.
        """
        ...


class FzfSession(InteractiveSession):
    """Runs fzf as a subprocess attached to the terminal."""

    def __init__(self, command: str = "fzf") -> None:
        self._command = command

    def run(self, args: Sequence[str], lines: Sequence[str]) -> int:
        executable = shutil.which(self._command)
        if executable is None:
            raise BrowserNotFoundError(
                f"'{self._command}' not found on PATH; install fzf to browse"
            )
        proc = subprocess.run(
            [executable, *args],
            input="\n".join(lines) + "\n",
            text=True,
            check=False,
        )
        return proc.returncode


def self_command(
    config_file: str | None = None, *, debug: bool = False
) -> list[str]:
    """Command line that re-runs this tool with the same interpreter and
    global options.
    """
    cmd = [sys.executable, "-m", "gh_container"]
    if config_file:
        cmd.extend(["--config-file", config_file])
    if debug:
        cmd.append("--debug")
    return cmd


class Browser:
    """Wires the version list into an fzf session with reload and delete
    bindings.  All selection state lives in fzf.
    """

    def __init__(
        self,
        client: RegistryClient,
        session: InteractiveSession,
        package_type: PackageType = PackageType.CONTAINER,
        *,
        command: Sequence[str] | None = None,
    ) -> None:
        self._client = client
        self._session = session
        self._package_type = package_type
        self._command = list(command) if command else self_command()
        self._logger = structlog.get_logger(__name__)

    def fzf_args(self, package_name: str) -> list[str]:
        """Options for fzf: preview help, reload, and delete-then-reload."""
        list_cmd = shlex.join(
            [*self._command, "versions", package_name, "--show-pkg-name"]
        )
        # fzf substitutes and quotes {2}, the ID column, itself.
        clean_cmd = (
            shlex.join([*self._command, "clean", package_name]) + " {2}"
        )
        return [
            "--header-lines=1",
            "--layout=reverse",
            "--no-multi",
            "--preview",
            f"echo {shlex.quote(BROWSE_HELP)}",
            "--preview-window=hidden",
            "--bind",
            "?:toggle-preview",
            "--bind",
            f"ctrl-r:reload({list_cmd})",
            "--bind",
            f"ctrl-d:execute({clean_cmd})+reload({list_cmd})",
        ]

    def list_lines(self, package_name: str) -> list[str]:
        query = build_query(FilterSpec(show_package_name=True), package_name)
        rows = self._client.query_versions(
            self._package_type, package_name, query
        )
        return render_table(query.headers, rows)

    def browse(self, package_name: str) -> int:
        args = self.fzf_args(package_name)
        self._logger.debug(f"Starting fzf for {package_name}", args=args)
        status = self._session.run(args, self.list_lines(package_name))
        if status in FZF_OK_EXITS:
            return 0
        return status
