from datetime import datetime
from typing import Literal
from pydantic import BaseModel
from assetdesk.modules.assets.schemas import RowModel

UserRole = Literal["admin", "editor", "viewer"]

class UserProfile(RowModel):
    id: str
    email: str
    role: UserRole = "viewer"
    created_at: datetime | None = None

class NavItem(BaseModel):
    page: str
    label: str
    icon: str
    admin: bool = False

class MeOut(BaseModel):
    profile: UserProfile
    is_admin: bool
    navigation: list[NavItem]
