"""Delete package versions."""

import structlog

from ..models.package_type import PackageType
from ..models.version import FilterMode, FilterSpec
from ..storage.registry import RegistryClient
from .query import build_query


class VersionCleaner:
    """Deletes explicitly-named versions, or every untagged version, of a
    package.

    Deletes are issued one at a time, in the order the registry listed the
    versions.  The first failure propagates and nothing after it is
    attempted.
    """

    def __init__(
        self,
        client: RegistryClient,
        package_type: PackageType = PackageType.CONTAINER,
        *,
        dry_run: bool = False,
    ) -> None:
        self._client = client
        self._package_type = package_type
        self._dry_run = dry_run
        self._logger = structlog.get_logger(__name__)

    def untagged_ids(self, package_name: str) -> list[str]:
        """IDs of every untagged version of a package."""
        query = build_query(FilterSpec(mode=FilterMode.UNTAGGED), package_name)
        self._logger.debug(f"Untagged query: {query.expression}")
        rows = self._client.query_versions(
            self._package_type, package_name, query
        )
        return [row[query.id_column] for row in rows]

    def clean(
        self,
        package_name: str,
        version_id: str | None = None,
        *,
        untagged: bool = False,
    ) -> list[str]:
        """Delete versions and return the IDs that were processed."""
        username = self._client.current_username()
        if untagged:
            victims = self.untagged_ids(package_name)
        elif version_id is not None:
            victims = [version_id]
        else:
            victims = []
        if not victims:
            if not untagged and version_id is None:
                self._logger.warning(
                    f"Nothing to clean for {package_name}: give a version ID"
                    " or --untagged"
                )
            return []

        dry = " (dry run)" if self._dry_run else ""
        for victim in victims:
            print(f"clean {package_name} {victim}{dry}")
            if not self._dry_run:
                self._client.delete_version(
                    username, self._package_type, package_name, victim
                )
        self._logger.debug(
            f"Deleted {len(victims)} version"
            f"{'s' if len(victims) != 1 else ''} of {package_name}{dry}"
        )
        return victims
