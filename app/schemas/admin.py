from pydantic import BaseModel
from typing import Dict, List, Optional

class QuickActionResponse(BaseModel):
    key: str
    label: str
    target: str
    icon: str
    color: str

class QuickActionsResponse(BaseModel):
    property_id: str
    current_status: str
    actions: List[QuickActionResponse]

class StatusBadgeResponse(BaseModel):
    label: str
    color: str
    icon: str
    icon_size: int

class StatCardResponse(BaseModel):
    title: str
    value: str
    icon: str
    color: str

class PropertyStatsResponse(BaseModel):
    total: int
    pending: int
    approved: int
    published: int
    rejected: int
    total_views: int
    total_inquiries: int
    cards: List[StatCardResponse]

class ModerationLogResponse(BaseModel):
    id: str
    admin_id: str
    action: str
    entity_id: Optional[str] = None
    previous_status: Optional[str] = None
    new_status: Optional[str] = None
    details: Optional[dict] = None
    created_at: Optional[str] = None

class FilterOptionsResponse(BaseModel):
    options: Dict[str, Dict[str, str]]
