"""Test the GitHub Packages storage driver against a mock transport."""

from typing import Any

import httpx
import pytest
import structlog

from gh_container.config import Config
from gh_container.exceptions import HttpError, RegistryConnectionError
from gh_container.factory import Factory
from gh_container.models.package_type import PackageType
from gh_container.models.version import FilterMode, FilterSpec
from gh_container.services.query import build_query
from gh_container.storage.github import GitHubPackagesClient

from conftest import FakeRegistryClient


class MockGitHub:
    """Serves canned pages and records requests."""

    def __init__(self, items: list[dict[str, Any]], page_size: int) -> None:
        self.items = items
        self.page_size = page_size
        self.requests: list[httpx.Request] = []
        self.delete_status = 204

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "DELETE":
            return httpx.Response(self.delete_status)
        page = int(request.url.params["page"])
        start = (page - 1) * self.page_size
        return httpx.Response(
            200, json=self.items[start : start + self.page_size]
        )


def _client(mock: MockGitHub) -> GitHubPackagesClient:
    cfg = Config(page_size=mock.page_size)
    return GitHubPackagesClient(
        cfg, "sekrit", transport=httpx.MockTransport(mock.handler)
    )


def test_list_versions_paginates(versions_json: list[dict]) -> None:
    mock = MockGitHub(versions_json, page_size=2)
    client = _client(mock)
    versions = client.list_versions(PackageType.CONTAINER, "my-pkg")
    assert [v.id for v in versions] == [10, 11, 12]
    assert versions[2].tags == ["latest", "v1.2.0"]
    assert len(mock.requests) == 2
    req = mock.requests[0]
    assert req.url.path == "/user/packages/container/my-pkg/versions"
    assert req.url.params["per_page"] == "2"
    assert req.headers["authorization"] == "Bearer sekrit"
    assert req.headers["accept"] == "application/vnd.github+json"
    assert req.headers["X-GitHub-Api-Version"] == "2022-11-28"


def test_list_versions_stops_on_empty_page(versions_json: list[dict]) -> None:
    mock = MockGitHub(versions_json, page_size=3)
    client = _client(mock)
    assert len(client.list_versions(PackageType.CONTAINER, "my-pkg")) == 3
    assert [r.url.params["page"] for r in mock.requests] == ["1", "2"]


def test_query_versions(versions_json: list[dict]) -> None:
    client = _client(MockGitHub(versions_json, page_size=100))
    query = build_query(FilterSpec(mode=FilterMode.UNTAGGED), "my-pkg")
    rows = client.query_versions(PackageType.CONTAINER, "my-pkg", query)
    assert [r[0] for r in rows] == ["10", "11"]


def test_list_packages() -> None:
    mock = MockGitHub([{"name": "one"}, {"name": "two"}], page_size=100)
    client = _client(mock)
    assert client.list_packages(PackageType.CONTAINER) == ["one", "two"]
    assert mock.requests[0].url.path == "/user/packages"
    assert mock.requests[0].url.params["package_type"] == "container"


def test_delete_version() -> None:
    mock = MockGitHub([], page_size=100)
    client = _client(mock)
    client.delete_version("octocat", PackageType.CONTAINER, "a/b", "10")
    req = mock.requests[0]
    assert req.method == "DELETE"
    assert req.url.raw_path == (
        b"/users/octocat/packages/container/a%2Fb/versions/10"
    )


def test_delete_failure() -> None:
    mock = MockGitHub([], page_size=100)
    mock.delete_status = 404
    client = _client(mock)
    with pytest.raises(HttpError) as excinfo:
        client.delete_version("octocat", PackageType.CONTAINER, "x", "10")
    assert excinfo.value.status_code == 404
    assert excinfo.value.method == "DELETE"
    assert excinfo.value.url.endswith("/container/x/versions/10")


def test_current_username_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []

    def fake_lookup(gh_command: str) -> str:
        calls.append(gh_command)
        return "octocat"

    monkeypatch.setattr(
        "gh_container.storage.github.current_username", fake_lookup
    )
    client = _client(MockGitHub([], page_size=100))
    assert client.current_username() == "octocat"
    assert client.current_username() == "octocat"
    assert calls == ["gh"]
    client.close()


def test_delete_version_id_is_one_segment() -> None:
    mock = MockGitHub([], page_size=100)
    client = _client(mock)
    client.delete_version(
        "octocat", PackageType.CONTAINER, "my-pkg", "../../other/versions/5"
    )
    req = mock.requests[0]
    assert req.url.raw_path == (
        b"/users/octocat/packages/container/my-pkg/versions/"
        b"..%2F..%2Fother%2Fversions%2F5"
    )


def test_connection_failure() -> None:
    def timeout(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    cfg = Config()
    client = GitHubPackagesClient(
        cfg, "sekrit", transport=httpx.MockTransport(timeout)
    )
    with pytest.raises(RegistryConnectionError) as excinfo:
        client.list_packages(PackageType.CONTAINER)
    assert excinfo.value.method == "GET"
    assert excinfo.value.url.endswith("/user/packages")
    assert "timed out" in str(excinfo.value)


def test_factory_builds_client(versions_json: list[dict]) -> None:
    mock = MockGitHub(versions_json, page_size=100)
    factory = Factory(
        Config(token="from-config"),
        structlog.get_logger("gh_container"),
        transport=httpx.MockTransport(mock.handler),
    )
    client = factory.create_registry_client()
    assert factory.create_registry_client() is client
    assert len(client.list_versions(PackageType.CONTAINER, "my-pkg")) == 3
    assert mock.requests[0].headers["authorization"] == "Bearer from-config"
    factory.close()


def test_factory_close(
    factory: Factory, fake_client: FakeRegistryClient
) -> None:
    assert not fake_client.closed
    factory.close()
    assert fake_client.closed
