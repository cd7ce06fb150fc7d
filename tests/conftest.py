"""Test fixtures for gh-container."""

import json
from pathlib import Path

import pytest
import structlog

from gh_container.config import Config
from gh_container.exceptions import HttpError
from gh_container.factory import Factory, configure_logging
from gh_container.models.package_type import PackageType
from gh_container.models.version import PackageVersion
from gh_container.storage.registry import RegistryClient


class FakeRegistryClient(RegistryClient):
    """In-memory registry that records every delete call."""

    def __init__(
        self, versions: list[PackageVersion], username: str = "octocat"
    ) -> None:
        self.versions = {"my-pkg": list(versions)}
        self.username = username
        self.delete_calls: list[tuple[str, str, str, str]] = []
        self.fail_ids: set[str] = set()
        self.closed = False

    def list_packages(self, package_type: PackageType) -> list[str]:
        return list(self.versions.keys())

    def list_versions(
        self, package_type: PackageType, package_name: str
    ) -> list[PackageVersion]:
        return list(self.versions.get(package_name, []))

    def delete_version(
        self,
        username: str,
        package_type: PackageType,
        package_name: str,
        version_id: str,
    ) -> None:
        self.delete_calls.append(
            (username, package_type.value, package_name, version_id)
        )
        url = (
            f"https://api.github.com/users/{username}/packages/"
            f"{package_type.value}/{package_name}/versions/{version_id}"
        )
        if version_id in self.fail_ids:
            raise HttpError("DELETE", url, 403)
        remaining = [
            v
            for v in self.versions.get(package_name, [])
            if str(v.id) != version_id
        ]
        if len(remaining) == len(self.versions.get(package_name, [])):
            raise HttpError("DELETE", url, 404)
        self.versions[package_name] = remaining

    def current_username(self) -> str:
        return self.username

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def _logging() -> None:
    """Keep log output on stderr, away from captured table output."""
    configure_logging(debug=True)


@pytest.fixture
def support_dir() -> Path:
    return Path(__file__).parent / "support"


@pytest.fixture
def versions_json(support_dir: Path) -> list[dict]:
    """Raw versions endpoint response for package 'my-pkg'."""
    return json.loads((support_dir / "versions.json").read_text())


@pytest.fixture
def versions(versions_json: list[dict]) -> list[PackageVersion]:
    """Two untagged versions (10, 11) and one tagged version (12)."""
    return [PackageVersion.from_api(v) for v in versions_json]


@pytest.fixture
def fake_client(versions: list[PackageVersion]) -> FakeRegistryClient:
    return FakeRegistryClient(versions)


@pytest.fixture
def config() -> Config:
    return Config(token="not-a-real-token")


@pytest.fixture
def factory(config: Config, fake_client: FakeRegistryClient) -> Factory:
    """Factory that hands out the fake registry client."""
    return Factory(
        config, structlog.get_logger("gh_container"), client=fake_client
    )
