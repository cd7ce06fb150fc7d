"""Build version queries: which versions to select, and how to lay them
out as table rows.
"""

from collections.abc import Callable
from dataclasses import dataclass

from ..models.version import FilterMode, FilterSpec, PackageVersion

HEADERS = ["ID", "SHA256", "LAST UPDATE", "TAGS"]
PACKAGE_HEADER = "PACKAGE"

type Predicate = Callable[[PackageVersion], bool]


def _untagged(version: PackageVersion) -> bool:
    return len(version.tags) == 0


def _tagged(version: PackageVersion) -> bool:
    return len(version.tags) != 0


_PREDICATES: dict[FilterMode, Predicate | None] = {
    FilterMode.ALL: None,
    FilterMode.UNTAGGED: _untagged,
    FilterMode.TAGGED: _tagged,
}

_JQ_SELECTORS: dict[FilterMode, str] = {
    FilterMode.ALL: "",
    FilterMode.UNTAGGED: "select(.metadata.container.tags | length == 0) | ",
    FilterMode.TAGGED: "select(.metadata.container.tags | length != 0) | ",
}


@dataclass(frozen=True)
class VersionQuery:
    """A filter and projection over a package's versions.

    The registry client runs the query; whatever reaches the table
    renderer has already been filtered.
    """

    package_name: str
    spec: FilterSpec
    headers: list[str]
    predicate: Predicate | None

    def matches(self, version: PackageVersion) -> bool:
        return self.predicate is None or self.predicate(version)

    def project(self, version: PackageVersion) -> list[str]:
        row = [
            str(version.id),
            version.digest_hex,
            version.last_update,
            " ".join(version.tags),
        ]
        if self.spec.show_package_name:
            row.insert(0, self.package_name)
        return row

    def apply(self, versions: list[PackageVersion]) -> list[list[str]]:
        return [self.project(v) for v in versions if self.matches(v)]

    @property
    def id_column(self) -> int:
        """Index of the version ID within a projected row."""
        return 1 if self.spec.show_package_name else 0

    @property
    def expression(self) -> str:
        """The same query written as a jq filter over the API response.

        Only used for debug logging, so a query can be replayed by hand with
        ``gh api --paginate ... --jq``.
        """
        fields = [
            ".id",
            '(.name | sub("^sha256:"; ""))',
            ".updated_at",
            '(.metadata.container.tags | join(" "))',
        ]
        if self.spec.show_package_name:
            fields.insert(0, f'"{self.package_name}"')
        return (
            f".[] | {_JQ_SELECTORS[self.spec.mode]}"
            f"[{', '.join(fields)}] | @tsv"
        )


def build_query(spec: FilterSpec, package_name: str) -> VersionQuery:
    """Turn a filter specification into a query for one package."""
    headers = list(HEADERS)
    if spec.show_package_name:
        headers.insert(0, PACKAGE_HEADER)
    return VersionQuery(
        package_name=package_name,
        spec=spec,
        headers=headers,
        predicate=_PREDICATES[spec.mode],
    )
