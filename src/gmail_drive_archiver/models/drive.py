"""Drive resource models.

A catalog is fetched once per session and never refreshed; name lookups are
exact and case-sensitive, returning an empty id when nothing matches.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from pydantic import BaseModel, Field

# Returned by ResourceCatalog.resolve when no entry matches.
MISSING_ID = ""


class RemoteResource(BaseModel):
    """A Drive folder or shared drive."""

    name: str = Field(description="Display name (not unique)")
    id: str = Field(description="Opaque Drive identifier")


class StoredFile(BaseModel):
    """A file or folder written to Drive."""

    id: str = Field(description="Drive file ID")
    name: str = Field(description="File name")
    url: str = Field(default="", description="Browser link to the file")


class ResourceCatalog:
    """Name-ordered collection of remote resources."""

    def __init__(self, resources: Iterable[RemoteResource] = ()) -> None:
        self._resources = sorted(resources, key=lambda r: r.name)

    def __len__(self) -> int:
        return len(self._resources)

    def __iter__(self) -> Iterator[RemoteResource]:
        return iter(self._resources)

    def resolve(self, name: str) -> str:
        """Return the id of the first resource named exactly ``name``.

        Args:
            name: Display name to look up.

        Returns:
            The resource id, or ``MISSING_ID`` when no entry matches.
        """

        for resource in self._resources:
            if resource.name == name:
                return resource.id
        return MISSING_ID

    def names(self) -> list[str]:
        return [r.name for r in self._resources]

    def suggest(self, fragment: str, limit: int = 20) -> list[str]:
        """Names containing ``fragment`` (case-insensitive), in catalog order."""

        needle = fragment.lower()
        matches = [r.name for r in self._resources if needle in r.name.lower()]
        return matches[:limit]
