from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from typing import Optional
from app.scheduler import scheduler
from app.services.auth_errors import classify_error
from app.services.notifications import PopupRegistry
from structlog import get_logger

logger = get_logger()
router = APIRouter(prefix="/api/v1/popups", tags=["popups"])

# Popups without a classified error are login failures unless told otherwise
DEFAULT_POPUP_TITLE = "Login Failed"

popup_registry = PopupRegistry(scheduler)

def get_popup_registry() -> PopupRegistry:
    return popup_registry

class PopupRequest(BaseModel):
    message: Optional[str] = None
    error: Optional[str] = None
    title: Optional[str] = None
    duration: Optional[int] = Field(None, ge=1)

@router.post("", status_code=201)
async def open_popup(data: PopupRequest, registry: PopupRegistry = Depends(get_popup_registry)):
    """Open an auto-closing popup.

    A raw `error` is run through the error classifier; `message` is shown as is
    under `title`, which defaults to "Login Failed".
    """
    if data.error is not None:
        title, message = classify_error(data.error)
    elif data.message:
        title, message = data.title or DEFAULT_POPUP_TITLE, data.message
    else:
        raise HTTPException(status_code=422, detail="Either message or error is required")
    popup = registry.open(message, duration=data.duration)
    return {**popup.as_dict(), "title": title}

@router.get("")
async def list_popups(registry: PopupRegistry = Depends(get_popup_registry)):
    return [popup.as_dict() for popup in registry.list_open()]

@router.delete("/{popup_id}")
async def close_popup(popup_id: str, registry: PopupRegistry = Depends(get_popup_registry)):
    closed = registry.close(popup_id)
    return {"id": popup_id, "closed": closed}
