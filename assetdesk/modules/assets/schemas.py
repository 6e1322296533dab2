from datetime import datetime
from typing import Literal
from pydantic import AliasChoices, AliasGenerator, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

ThumbnailStatus = Literal["pending", "render_queued", "generating", "done", "error"]
AssetFileType = Literal["psd", "ai", "unknown"]
TagSource = Literal["ai", "manual", "proposed"]
SortBy = Literal["created_at", "updated_at", "file_name"]
SortDir = Literal["asc", "desc"]

THUMBNAIL_STATUSES: tuple[str, ...] = ("pending", "render_queued", "generating", "done", "error")
FILE_TYPES: tuple[str, ...] = ("psd", "ai", "unknown")

def _both_cases(name: str) -> AliasChoices:
    return AliasChoices(name, to_camel(name))

class RowModel(BaseModel):
    """Rows from the store arrive camelCase from RPCs and snake_case from tables."""
    model_config = ConfigDict(
        alias_generator=AliasGenerator(validation_alias=_both_cases),
        populate_by_name=True,
    )

def _none_to_list(v):
    return [] if v is None else v

# ---- Associations ----

class Tag(RowModel):
    value: str
    source: TagSource = "manual"
    confidence: float | None = Field(default=None, ge=0, le=1)

class CharacterRef(RowModel):
    character_id: str
    source: TagSource = "manual"
    confidence: float | None = Field(default=None, ge=0, le=1)

class PropertyRef(RowModel):
    property_id: str
    source: TagSource = "manual"
    confidence: float | None = Field(default=None, ge=0, le=1)

class AssetCharacterLink(CharacterRef):
    name: str = ""

class AssetPropertyLink(PropertyRef):
    name: str = ""
    studio: str = ""

    @field_validator("studio", mode="before")
    @classmethod
    def _studio(cls, v):
        return v or ""

# ---- Assets ----

class Asset(RowModel):
    id: str
    share_id: str | None = None
    relative_path: str = ""
    file_name: str = ""
    file_type: AssetFileType = "unknown"
    file_size_bytes: int = Field(default=0, ge=0)
    # kept as a plain string: statuses outside THUMBNAIL_STATUSES are rendered, not rejected
    thumbnail_status: str = "pending"
    thumbnail_key: str | None = None
    thumbnail_error: str | None = None
    is_deleted: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    tags: list[Tag] = []
    character_ids: list[str] = []
    property_ids: list[str] = []

    @field_validator("tags", "character_ids", "property_ids", mode="before")
    @classmethod
    def _lists(cls, v):
        return _none_to_list(v)

    @field_validator("file_type", mode="before")
    @classmethod
    def _file_type(cls, v):
        return v if v in FILE_TYPES else "unknown"

    @field_validator("file_size_bytes", mode="before")
    @classmethod
    def _size(cls, v):
        return 0 if v is None else v

    @field_validator("thumbnail_status", mode="before")
    @classmethod
    def _status(cls, v):
        return "" if v is None else str(v)

    @model_validator(mode="after")
    def _thumbnail_fields(self):
        # a key only belongs to a finished render, an error message only to a failed one
        if self.thumbnail_status != "done":
            self.thumbnail_key = None
        if self.thumbnail_status != "error":
            self.thumbnail_error = None
        return self

class AssetDetail(Asset):
    characters: list[AssetCharacterLink] = []
    properties: list[AssetPropertyLink] = []
    proposed_tags: list[Tag] = []

    @field_validator("characters", "properties", "proposed_tags", mode="before")
    @classmethod
    def _links(cls, v):
        return _none_to_list(v)

class AssetPage(BaseModel):
    rows: list[Asset]
    total: int = Field(ge=0)
    count_error: str | None = None

# ---- Filters and list parameters ----

class AssetFilter(BaseModel):
    """What the user picked in the filter bar. ``AssetFilter()`` means no restriction."""
    model_config = ConfigDict(frozen=True)

    search: str | None = None
    file_type: tuple[AssetFileType, ...] | None = None
    property_id: str | None = None
    character_id: str | None = None
    thumbnail_status: ThumbnailStatus | None = None
    needs_review: bool | None = None

class ListAssetsParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    search: str | None = None
    file_type: AssetFileType | None = None
    property_id: str | None = None
    character_id: str | None = None
    thumbnail_status: ThumbnailStatus | None = None
    needs_review: bool | None = None
    limit: int = Field(ge=0)
    offset: int = Field(ge=0)
    sort_by: SortBy = "created_at"
    sort_dir: SortDir = "desc"
