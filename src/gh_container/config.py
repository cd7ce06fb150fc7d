"""Configuration for gh-container."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated, Self

import yaml
from pydantic import Field, HttpUrl, SecretStr, ValidationError
from safir.pydantic import CamelCaseModel

from .exceptions import ConfigError
from .models.package_type import PackageType


def default_config_path() -> Path:
    """Location of the config file when none is given on the command line."""
    base = os.getenv("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "gh-container" / "config.yaml"


class Config(CamelCaseModel):
    """Settings for talking to the GitHub Packages API."""

    api_url: Annotated[
        HttpUrl,
        Field(
            title="API URL",
            description="Base URL of the GitHub REST API",
            examples=[HttpUrl("https://api.github.com")],
        ),
    ] = HttpUrl("https://api.github.com")

    package_type: Annotated[
        PackageType,
        Field(
            title="Package type",
            description="Registry package type to operate on",
            examples=[PackageType.CONTAINER],
        ),
    ] = PackageType.CONTAINER

    token: Annotated[
        SecretStr | None,
        Field(
            title="Token",
            description=(
                "Token for API calls.  If unset, GH_TOKEN or GITHUB_TOKEN "
                "from the environment is used, and failing that, the output "
                "of 'gh auth token'."
            ),
        ),
    ] = None

    page_size: Annotated[
        int,
        Field(
            title="Page size",
            description="Number of items requested per API page",
            ge=1,
            le=100,
        ),
    ] = 100

    fzf_command: Annotated[
        str,
        Field(
            title="fzf command",
            description="Fuzzy-finder executable used by 'browse'",
            examples=["fzf"],
        ),
    ] = "fzf"

    gh_command: Annotated[
        str,
        Field(
            title="gh command",
            description="GitHub CLI executable used for identity lookup",
            examples=["gh"],
        ),
    ] = "gh"

    debug: Annotated[
        bool,
        Field(
            title="Debug",
            description="Much more verbose logging.",
        ),
    ] = False

    dry_run: Annotated[
        bool,
        Field(
            title="Dry run",
            description="Do not actually delete any package versions.",
        ),
    ] = False

    @classmethod
    def from_file(cls, path: Path) -> Self:
        if not path.is_file():
            raise ConfigError(f"Config file {path} not found")
        try:
            return cls.model_validate(yaml.safe_load(path.read_text()) or {})
        except (ValidationError, yaml.YAMLError) as exc:
            raise ConfigError(f"Config file {path} is invalid: {exc}") from exc

    @classmethod
    def load(cls, path: Path | None = None) -> Self:
        """Load the given file, or the default file if it exists.

        An explicitly-named file that does not exist is an error; a missing
        default file just means "use the defaults".
        """
        if path is not None:
            return cls.from_file(path)
        default = default_config_path()
        if default.is_file():
            return cls.from_file(default)
        return cls()
