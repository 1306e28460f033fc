from enum import Enum
from pydantic import BaseModel
from typing import List, Optional

class PropertyStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PUBLISHED = "published"
    UNPUBLISHED = "unpublished"

class PropertyLocation(BaseModel):
    city: Optional[str] = None
    province: Optional[str] = None
    address: Optional[str] = None

class PropertyAgent(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None

class PropertyResponse(BaseModel):
    id: str
    title: str
    type: Optional[str] = None
    purpose: Optional[str] = None
    status: PropertyStatus
    price: float
    price_unit: Optional[str] = None
    location: Optional[PropertyLocation] = None
    agent: Optional[PropertyAgent] = None
    views: int = 0
    inquiries: int = 0
    created_at: Optional[str] = None

class PropertyListResponse(BaseModel):
    total: int
    items: List[PropertyResponse]

class StatusChangeRequest(BaseModel):
    status: PropertyStatus
    reason: Optional[str] = None
