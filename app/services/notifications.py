from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional
import uuid
from apscheduler.jobstores.base import JobLookupError
from structlog import get_logger
from app.config import settings

logger = get_logger()

TOAST_TYPES = ("success", "error", "info", "warning")

@dataclass
class Toast:
    id: str
    type: str
    title: str
    message: str
    duration: int

class ToastCenter:
    """Collects toasts raised while handling one request."""

    def __init__(self, default_duration: int | None = None):
        self.default_duration = default_duration or settings.TOAST_DURATION_MS
        self.toasts: list[Toast] = []

    def show_toast(self, type: str, title: str, message: str, duration: int | None = None) -> Toast:
        if type not in TOAST_TYPES:
            raise ValueError(f"Unknown toast type: {type}")
        toast = Toast(
            id=f"toast-{uuid.uuid4().hex[:12]}",
            type=type,
            title=title,
            message=message,
            duration=duration or self.default_duration,
        )
        self.toasts.append(toast)
        return toast

    def hide(self, toast_id: str) -> None:
        self.toasts = [t for t in self.toasts if t.id != toast_id]

    def show_error(self, title: str, message: str, duration: int | None = None) -> Toast:
        return self.show_toast("error", title, message, duration)

    def show_success(self, title: str, message: str, duration: int | None = None) -> Toast:
        return self.show_toast("success", title, message, duration)

    def show_info(self, title: str, message: str, duration: int | None = None) -> Toast:
        return self.show_toast("info", title, message, duration)

    def show_warning(self, title: str, message: str, duration: int | None = None) -> Toast:
        return self.show_toast("warning", title, message, duration)

    def as_list(self) -> list[dict]:
        return [asdict(t) for t in self.toasts]

@dataclass
class Popup:
    id: str
    message: str
    duration: int
    closes_at: datetime
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "message": self.message,
            "duration": self.duration,
            "closes_at": self.closes_at.isoformat(),
            "created_at": self.created_at.isoformat(),
        }

class PopupRegistry:
    """Error popups that close themselves after a fixed delay.

    Closing is idempotent: the timer and a manual close may both fire and
    only the first one has any effect.
    """

    def __init__(self, scheduler, default_duration: int | None = None):
        self.scheduler = scheduler
        self.default_duration = default_duration or settings.ERROR_POPUP_DURATION_MS
        self._popups: dict[str, Popup] = {}

    @staticmethod
    def _job_id(popup_id: str) -> str:
        return f"popup-close:{popup_id}"

    def open(self, message: str, duration: int | None = None) -> Popup:
        duration = duration or self.default_duration
        popup_id = uuid.uuid4().hex
        closes_at = datetime.now(timezone.utc) + timedelta(milliseconds=duration)
        popup = Popup(id=popup_id, message=message, duration=duration, closes_at=closes_at)
        self._popups[popup_id] = popup
        self.scheduler.add_job(
            self.close,
            "date",
            run_date=closes_at,
            args=[popup_id],
            id=self._job_id(popup_id),
            replace_existing=True,
        )
        logger.info("Opened error popup", popup_id=popup_id, duration=duration)
        return popup

    def close(self, popup_id: str) -> bool:
        popup = self._popups.pop(popup_id, None)
        if popup is None:
            return False
        try:
            self.scheduler.remove_job(self._job_id(popup_id))
        except JobLookupError:
            # Already fired
            pass
        logger.info("Closed error popup", popup_id=popup_id)
        return True

    def get(self, popup_id: str) -> Optional[Popup]:
        return self._popups.get(popup_id)

    def list_open(self) -> list[Popup]:
        return list(self._popups.values())
