from dataclasses import dataclass
from typing import Callable, Optional
from structlog import get_logger
from app.exceptions import ActionNotAllowedError
from app.schemas.property import PropertyStatus

logger = get_logger()

@dataclass(frozen=True)
class QuickAction:
    key: str
    label: str
    target: PropertyStatus
    icon: str
    color: str
    show: Callable[[PropertyStatus], bool]

    def as_dict(self) -> dict:
        return {
            "key": self.key,
            "label": self.label,
            "target": self.target.value,
            "icon": self.icon,
            "color": self.color,
        }

# Order matters: it is the order buttons are rendered in and compact mode keeps the first two.
QUICK_ACTIONS = (
    QuickAction(
        key="approve",
        label="Setujui",
        target=PropertyStatus.APPROVED,
        icon="check-circle",
        color="blue",
        show=lambda s: s == PropertyStatus.PENDING,
    ),
    QuickAction(
        key="reject",
        label="Tolak",
        target=PropertyStatus.REJECTED,
        icon="x-circle",
        color="red",
        show=lambda s: s in (PropertyStatus.PENDING, PropertyStatus.APPROVED),
    ),
    QuickAction(
        key="publish",
        label="Publikasikan",
        target=PropertyStatus.PUBLISHED,
        icon="eye",
        color="green",
        show=lambda s: s in (PropertyStatus.APPROVED, PropertyStatus.UNPUBLISHED),
    ),
    QuickAction(
        key="unpublish",
        label="Batalkan Publikasi",
        target=PropertyStatus.UNPUBLISHED,
        icon="eye-off",
        color="gray",
        show=lambda s: s == PropertyStatus.PUBLISHED,
    ),
)

STATUS_BADGES = {
    PropertyStatus.PENDING: {"label": "Menunggu Review", "color": "yellow", "icon": "clock"},
    PropertyStatus.APPROVED: {"label": "Disetujui", "color": "blue", "icon": "check-circle"},
    PropertyStatus.REJECTED: {"label": "Ditolak", "color": "red", "icon": "x-circle"},
    PropertyStatus.PUBLISHED: {"label": "Dipublikasi", "color": "green", "icon": "eye"},
    PropertyStatus.UNPUBLISHED: {"label": "Tidak Dipublikasi", "color": "gray", "icon": "x-circle"},
}

BADGE_ICON_SIZES = {"sm": 10, "md": 12, "lg": 14}

def visible_actions(status: PropertyStatus | str) -> list[QuickAction]:
    status = PropertyStatus(status)
    return [action for action in QUICK_ACTIONS if action.show(status)]

def allowed_targets(status: PropertyStatus | str) -> set[PropertyStatus]:
    return {action.target for action in visible_actions(status)}

def ensure_transition(current: PropertyStatus | str, target: PropertyStatus | str) -> None:
    """Raise ActionNotAllowedError unless a visible action moves `current` to `target`."""
    current = PropertyStatus(current)
    target = PropertyStatus(target)
    if target not in allowed_targets(current):
        raise ActionNotAllowedError(current.value, target.value)

def badge_for(status: PropertyStatus | str, size: str = "md") -> dict:
    if size not in BADGE_ICON_SIZES:
        raise ValueError(f"Unknown badge size: {size}")
    config = STATUS_BADGES[PropertyStatus(status)]
    return {**config, "icon_size": BADGE_ICON_SIZES[size]}

class QuickActionsPanel:
    """Decides which moderation buttons a listing gets and dispatches their callbacks.

    The status mutation itself belongs to the caller through `on_status_change`.
    """

    def __init__(
        self,
        property_id: str,
        current_status: PropertyStatus | str,
        on_status_change: Callable[[str, PropertyStatus], object],
        on_edit: Optional[Callable[[str], object]] = None,
        on_delete: Optional[Callable[[str], object]] = None,
        compact: bool = False,
    ):
        self.property_id = property_id
        self.current_status = PropertyStatus(current_status)
        self.on_status_change = on_status_change
        self.on_edit = on_edit
        self.on_delete = on_delete
        self.compact = compact

    def actions(self) -> list[QuickAction]:
        actions = visible_actions(self.current_status)
        if self.compact:
            return actions[:2]
        return actions

    @property
    def can_edit(self) -> bool:
        return self.on_edit is not None

    @property
    def can_delete(self) -> bool:
        return self.on_delete is not None

    def trigger(self, key: str):
        for action in self.actions():
            if action.key == key:
                logger.info(
                    "Quick action triggered",
                    property_id=self.property_id,
                    action=key,
                    current_status=self.current_status.value,
                )
                return self.on_status_change(self.property_id, action.target)
        target = next((a.target.value for a in QUICK_ACTIONS if a.key == key), key)
        raise ActionNotAllowedError(self.current_status.value, target)

    def edit(self):
        if self.on_edit is None:
            return None
        return self.on_edit(self.property_id)

    def delete(self):
        if self.on_delete is None:
            return None
        return self.on_delete(self.property_id)
