from sqlalchemy import Column, UUID, String, JSON, DateTime
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase
from datetime import datetime, timezone
import uuid

class Base(AsyncAttrs, DeclarativeBase):
    pass

class ModerationLog(Base):
    __tablename__ = "ModerationLogs"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    admin_id = Column(String(64), nullable=False)
    action = Column(String(64), nullable=False)
    entity_id = Column(String(64))
    previous_status = Column(String(32))
    new_status = Column(String(32))
    details = Column(JSON)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    def as_dict(self) -> dict:
        return {
            "id": str(self.id),
            "admin_id": self.admin_id,
            "action": self.action,
            "entity_id": self.entity_id,
            "previous_status": self.previous_status,
            "new_status": self.new_status,
            "details": self.details,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
