from pydantic import BaseModel
from typing import Literal, Optional

class UserProfile(BaseModel):
    id: str
    full_name: str
    email: str
    phone: Optional[str] = None
    role: Literal["user", "agent", "admin", "superadmin"] = "user"
    status: Literal["active", "inactive", "suspended"] = "active"
    avatar_url: Optional[str] = None
    company: Optional[str] = None
    created_at: str
    updated_at: str

class UserNotification(BaseModel):
    id: str
    type: Literal["system", "property", "message", "payment"]
    title: str
    message: str
    is_read: bool = False
    created_at: str
    entity_id: Optional[str] = None
    entity_type: Optional[str] = None
    action_url: Optional[str] = None

class PropertySummary(BaseModel):
    title: str
    price: float
    price_unit: Literal["juta", "miliar"]
    image_url: Optional[str] = None
    location: Optional[str] = None

class UserFavorite(BaseModel):
    id: str
    user_id: str
    property_id: str
    created_at: str
    property: Optional[PropertySummary] = None

class Inquiry(BaseModel):
    id: str
    property_id: str
    user_id: Optional[str] = None
    name: str
    email: str
    phone: Optional[str] = None
    message: str
    status: str = "new"
    created_at: str
    property: Optional[PropertySummary] = None
