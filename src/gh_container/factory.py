"""Component factory."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import closing, contextmanager
from pathlib import Path
from typing import Self

import httpx
import structlog
from structlog.stdlib import BoundLogger

from .config import Config
from .services.browser import (
    Browser,
    FzfSession,
    InteractiveSession,
    self_command,
)
from .services.cleaner import VersionCleaner
from .storage.auth import gh_token
from .storage.github import GitHubPackagesClient
from .storage.registry import RegistryClient


def configure_logging(*, debug: bool) -> None:
    """Send log messages to stderr, so they never mix with table output."""
    log_level = logging.DEBUG if debug else logging.INFO
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


class Factory:
    """Build gh-container components.

    Parameters
    ----------
    config
        Tool configuration.
    logger
        Logger to use for messages.
    config_file
        Config file the tool was started with, if any.  Passed along when
        the browser re-invokes the tool.
    client
        Registry client to use instead of building one.  Intended for the
        test suite.
    transport
        httpx transport for the registry client.  Intended for the test
        suite.
    session
        Interactive session for the browser.  Intended for the test suite.
    """

    @classmethod
    @contextmanager
    def standalone(
        cls, config: Config, config_file: Path | None = None
    ) -> Iterator[Self]:
        """Context manager for gh-container components.

        Parameters
        ----------
        config
            Tool configuration.
        config_file
            Path the configuration was loaded from, if any.

        Yields
        ------
        Factory
            Newly-created factory.  The registry client is closed on exit.
        """
        configure_logging(debug=config.debug)
        logger = structlog.get_logger(__name__)
        factory = cls(config, logger, config_file=config_file)
        with closing(factory):
            yield factory

    def __init__(
        self,
        config: Config,
        logger: BoundLogger,
        *,
        config_file: Path | None = None,
        client: RegistryClient | None = None,
        transport: httpx.BaseTransport | None = None,
        session: InteractiveSession | None = None,
    ) -> None:
        self._config = config
        self._logger = logger
        self._config_file = config_file
        self._client = client
        self._transport = transport
        self._session = session

    @property
    def config(self) -> Config:
        return self._config

    def create_registry_client(self) -> RegistryClient:
        if self._client is None:
            if self._config.token is not None:
                token = self._config.token.get_secret_value()
            else:
                token = gh_token(self._config.gh_command)
            self._client = GitHubPackagesClient(
                self._config, token, transport=self._transport
            )
            self._logger.debug(
                f"Created registry client for {self._config.api_url}"
            )
        return self._client

    def create_cleaner(self, *, dry_run: bool = False) -> VersionCleaner:
        return VersionCleaner(
            self.create_registry_client(),
            self._config.package_type,
            dry_run=dry_run or self._config.dry_run,
        )

    def create_browser(self) -> Browser:
        session = self._session or FzfSession(self._config.fzf_command)
        config_file = str(self._config_file) if self._config_file else None
        return Browser(
            self.create_registry_client(),
            session,
            self._config.package_type,
            command=self_command(config_file, debug=self._config.debug),
        )

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
