"""Exceptions for gh-container.

Everything the CLI reports to the user is a subclass of
`GhContainerError`.  The CLI entry point is the only place these are
caught.
"""


class GhContainerError(Exception):
    """Base class for gh-container errors."""


class UsageError(GhContainerError):
    """The command line could not be turned into an invocation."""


class UnknownActionError(UsageError):
    """The top-level subcommand is not one we know."""

    def __init__(self, action: str) -> None:
        super().__init__("Unknown action")
        self.action = action


class MissingArgumentError(UsageError):
    """A required positional argument was not supplied."""

    def __init__(self, action: str, argument: str) -> None:
        super().__init__(f"'{action}' requires argument <{argument}>")
        self.action = action
        self.argument = argument


class AuthLookupError(GhContainerError):
    """The authenticated identity could not be determined."""


class AuthNotFoundError(AuthLookupError):
    """`gh auth status` ran, but reported no logged-in account."""


class HttpError(GhContainerError):
    """A registry API call returned a non-success status."""

    def __init__(self, method: str, url: str, status_code: int) -> None:
        super().__init__(f"{method} {url} returned HTTP {status_code}")
        self.method = method
        self.url = url
        self.status_code = status_code


class BrowserNotFoundError(GhContainerError):
    """The fuzzy-finder executable could not be found."""


class ConfigError(GhContainerError):
    """The configuration file is missing or invalid."""


class RegistryConnectionError(GhContainerError):
    """A registry API call failed before any response arrived."""

    def __init__(self, method: str, url: str, reason: str) -> None:
        super().__init__(f"{method} {url} failed: {reason}")
        self.method = method
        self.url = url
