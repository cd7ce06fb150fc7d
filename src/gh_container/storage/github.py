"""Storage driver for the GitHub Packages REST API."""

from typing import Any
from urllib.parse import quote

import httpx
import structlog

from ..config import Config
from ..exceptions import HttpError, RegistryConnectionError
from ..models.package_type import PackageType
from ..models.version import PackageVersion
from .auth import current_username
from .registry import RegistryClient


class GitHubPackagesClient(RegistryClient):
    """Client for the packages of the authenticated GitHub user."""

    def __init__(
        self,
        cfg: Config,
        token: str,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._logger = structlog.get_logger(__name__)
        self._url = str(cfg.api_url).rstrip("/")
        self._page_size = cfg.page_size
        self._gh_command = cfg.gh_command
        self._username: str | None = None
        self._http_client = httpx.Client(transport=transport)
        self._http_client.headers.update(
            {
                "accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "authorization": f"Bearer {token}",
            }
        )

    def close(self) -> None:
        self._http_client.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            r = self._http_client.request(method, url, **kwargs)
        except httpx.RequestError as exc:
            self._logger.debug(f"{method} {url} failed", error=str(exc))
            raise RegistryConnectionError(method, url, str(exc)) from exc
        try:
            r.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._logger.debug(
                f"{method} {url} failed", status=r.status_code, body=r.text
            )
            raise HttpError(method, url, r.status_code) from exc
        return r

    def _get_paginated(
        self, url: str, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        params = dict(params or {})
        params["per_page"] = self._page_size
        page = 1
        results: list[dict[str, Any]] = []
        while True:
            self._logger.debug(
                f"Requesting {url}: items "
                f"{(page - 1) * self._page_size + 1}-{page * self._page_size}"
            )
            params["page"] = page
            items = self._request("GET", url, params=params).json()
            if len(items) == 0:
                break
            results.extend(items)
            if len(items) < self._page_size:
                break
            page += 1
        return results

    def list_packages(self, package_type: PackageType) -> list[str]:
        url = f"{self._url}/user/packages"
        pkgs = self._get_paginated(
            url, params={"package_type": package_type.value}
        )
        self._logger.debug(f"Found {len(pkgs)} packages")
        return [p["name"] for p in pkgs]

    def list_versions(
        self, package_type: PackageType, package_name: str
    ) -> list[PackageVersion]:
        url = (
            f"{self._url}/user/packages/{package_type.value}"
            f"/{quote(package_name, safe='')}/versions"
        )
        versions = [
            PackageVersion.from_api(v) for v in self._get_paginated(url)
        ]
        self._logger.debug(
            f"Found {len(versions)} versions of {package_name}"
        )
        return versions

    def delete_version(
        self,
        username: str,
        package_type: PackageType,
        package_name: str,
        version_id: str,
    ) -> None:
        url = (
            f"{self._url}/users/{username}/packages/{package_type.value}"
            f"/{quote(package_name, safe='')}"
            f"/versions/{quote(version_id, safe='')}"
        )
        self._request("DELETE", url)
        self._logger.debug(f"Version {version_id} of {package_name} deleted")

    def current_username(self) -> str:
        if self._username is None:
            self._username = current_username(self._gh_command)
        return self._username
