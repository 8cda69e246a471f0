"""models.py — Pydantic v2 models for registry records, the bundled index and stats."""

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .constants import INDEX_SOURCE, SourceKey
from .utils import byte_size, utc_now


class Component(BaseModel):
    """One logo known to a provider.

    ``content`` is ``None`` while only metadata has been loaded.
    """

    name: str = Field(description="Canonical component name, unique per provider")
    title: str | None = Field(default=None, description="Human-readable display name")
    category: list[str] = Field(default_factory=list, description="Free-form tags")
    location: str = Field(description="URL or filesystem path of the raw SVG")
    content: str | None = Field(default=None, description="Raw SVG markup")
    size: int = Field(default=0, ge=0, description="UTF-8 byte length of content")
    source: SourceKey = Field(description="Provider that produced this record")
    dark_location: str | None = Field(
        default=None, description="Dark-theme variant location (never fetched automatically)"
    )
    brand_url: str | None = Field(default=None, description="Brand homepage")
    catalog_id: int | str | None = Field(default=None, description="Catalog record id")
    content_hash: str | None = Field(default=None, description="Hash reported by the listing")
    last_modified: datetime = Field(default_factory=utc_now)

    @property
    def is_lazy(self) -> bool:
        return self.content is None

    @property
    def has_themes(self) -> bool:
        return self.dark_location is not None

    def with_content(self, content: str) -> Component:
        """Return a fully-populated copy of this record."""
        return self.model_copy(
            update={"content": content, "size": byte_size(content), "last_modified": utc_now()}
        )


class CategoryCount(BaseModel):
    """A category tag and how many components carry it."""

    name: str
    count: int = Field(ge=0)


class RegistryStats(BaseModel):
    """Which source answered and how many components it knows."""

    total_components: int = Field(ge=0)
    source: str = Field(description="'bundled-index' or the provider key that answered")
    active_provider: SourceKey = Field(description="Configured source")
    total_size: int = Field(default=0, ge=0, description="Bytes of content loaded so far")
    unavailable: list[SourceKey] = Field(
        default_factory=list, description="Sources that failed since the last configure"
    )


class IndexEntry(BaseModel):
    """One component in the bundled index."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    size: int = Field(default=0, ge=0)
    download_location: str = Field(
        alias="downloadLocation",
        validation_alias=AliasChoices("downloadLocation", "downloadUrl", "download_url"),
    )
    content_hash: str | None = Field(
        default=None,
        alias="contentHash",
        validation_alias=AliasChoices("contentHash", "sha"),
    )


class IndexMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total: int = Field(ge=0)
    generated: datetime
    repository: str
    branch: str | None = None
    source: SourceKey = INDEX_SOURCE


class ComponentIndex(BaseModel):
    """Prebuilt manifest shipped with the package."""

    metadata: IndexMetadata
    components: list[IndexEntry] = Field(default_factory=list)

    def names(self) -> list[str]:
        return sorted(entry.name for entry in self.components)

    def entry(self, name: str) -> IndexEntry | None:
        for item in self.components:
            if item.name == name:
                return item
        return None

    def has(self, name: str) -> bool:
        return self.entry(name) is not None
