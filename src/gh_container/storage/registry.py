"""Abstract superclass for package registry clients."""

from abc import abstractmethod

from ..models.package_type import PackageType
from ..models.version import PackageVersion
from ..services.query import VersionQuery


class RegistryClient:
    """Collection of methods we expect any registry client to provide.

    These are synchronous.  Every command does one thing and then exits,
    and deletes are deliberately issued one at a time.
    """

    @abstractmethod
    def list_packages(self, package_type: PackageType) -> list[str]:
        """Names of the authenticated user's packages of this type."""
        ...

    @abstractmethod
    def list_versions(
        self, package_type: PackageType, package_name: str
    ) -> list[PackageVersion]:
        """All versions of one package, in registry order."""
        ...

    @abstractmethod
    def delete_version(
        self,
        username: str,
        package_type: PackageType,
        package_name: str,
        version_id: str,
    ) -> None:
        """Delete one version; raise `HttpError` on failure."""
        ...

    @abstractmethod
    def current_username(self) -> str: ...

    def query_versions(
        self,
        package_type: PackageType,
        package_name: str,
        query: VersionQuery,
    ) -> list[list[str]]:
        """Run a version query and return its projected rows."""
        return query.apply(self.list_versions(package_type, package_name))

    def close(self) -> None:
        """Release any resources held by the client."""
