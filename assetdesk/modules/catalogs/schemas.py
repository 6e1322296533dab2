from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from assetdesk.modules.assets.schemas import RowModel

def split_aliases(text: str | None) -> list[str]:
    """``"Bats, the Bat ,,"`` -> ``["Bats", "the Bat"]``."""
    if not text:
        return []
    return [a.strip() for a in text.split(",") if a.strip()]

# ---- Properties ----

class Property(RowModel):
    id: str
    name: str
    studio: str = ""
    created_at: datetime | None = None

    @field_validator("studio", mode="before")
    @classmethod
    def _studio(cls, v):
        return v or ""

class PropertyCreate(BaseModel):
    name: str = Field(..., min_length=1)
    studio: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str):
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

    @field_validator("studio")
    @classmethod
    def _blank_studio(cls, v: str | None):
        return (v or "").strip() or None

class PropertyUpdate(PropertyCreate):
    pass

# ---- Characters ----

class Character(RowModel):
    id: str
    name: str
    aliases: list[str] = []
    property_id: str
    created_at: datetime | None = None

    @field_validator("aliases", mode="before")
    @classmethod
    def _aliases(cls, v):
        return [] if v is None else v

class CharacterUpdate(BaseModel):
    name: str = Field(..., min_length=1)
    aliases: list[str] = []

    @field_validator("name")
    @classmethod
    def _name(cls, v: str):
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

    @field_validator("aliases", mode="before")
    @classmethod
    def _aliases(cls, v):
        # the admin form sends one comma separated string
        if v is None:
            return []
        if isinstance(v, str):
            return split_aliases(v)
        return [a.strip() for a in v if a and a.strip()]

class CharacterCreate(CharacterUpdate):
    property_id: str = Field(..., min_length=1)
