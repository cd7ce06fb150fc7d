"""Identity and token lookup through the GitHub CLI."""

import os
import re
import subprocess

import structlog

from ..exceptions import AuthLookupError, AuthNotFoundError

# "Logged in to github.com account octocat (keyring)" from current gh,
# "Logged in to github.com as octocat (oauth_token)" from older releases.
LOGGED_IN_RE = re.compile(
    r"Logged in (?:to \S+ )?(?:as|account) (?P<user>[A-Za-z0-9-]+)"
)

_logger = structlog.get_logger(__name__)


def parse_username(status_text: str) -> str:
    """Extract the account name from ``gh auth status`` output."""
    match = LOGGED_IN_RE.search(status_text)
    if match is None:
        raise AuthNotFoundError(
            "Could not determine GitHub user from 'gh auth status'"
        )
    return match.group("user")


def _run_gh(gh_command: str, *args: str) -> subprocess.CompletedProcess[str]:
    try:
        return subprocess.run(
            [gh_command, *args],
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as exc:
        raise AuthLookupError(
            f"GitHub CLI '{gh_command}' not found on PATH"
        ) from exc


def current_username(gh_command: str = "gh") -> str:
    """Return the login of the account ``gh`` is authenticated as."""
    proc = _run_gh(gh_command, "auth", "status")
    # Depending on the gh version, the status report goes to stdout or
    # stderr, and the exit code may be nonzero if any host is logged out.
    username = parse_username(proc.stdout + "\n" + proc.stderr)
    _logger.debug(f"Authenticated as {username}")
    return username


def gh_token(gh_command: str = "gh") -> str:
    """Return an API token from the environment or from ``gh``."""
    for var in ("GH_TOKEN", "GITHUB_TOKEN"):
        token = os.getenv(var)
        if token:
            _logger.debug(f"Using token from {var}")
            return token
    proc = _run_gh(gh_command, "auth", "token")
    token = proc.stdout.strip()
    if proc.returncode != 0 or not token:
        raise AuthNotFoundError(
            "No token available: set GH_TOKEN or run 'gh auth login'"
        )
    return token
