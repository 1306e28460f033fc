from dataclasses import asdict, dataclass
from typing import Iterable
from app.schemas.property import PropertyStatus

@dataclass(frozen=True)
class PropertyStats:
    total: int = 0
    pending: int = 0
    approved: int = 0
    published: int = 0
    rejected: int = 0
    total_views: int = 0
    total_inquiries: int = 0

    @classmethod
    def from_listings(cls, listings: Iterable[dict]) -> "PropertyStats":
        """Aggregate counts over raw listing payloads."""
        counts = {status: 0 for status in PropertyStatus}
        total = views = inquiries = 0
        for item in listings:
            if not isinstance(item, dict):
                continue
            total += 1
            try:
                counts[PropertyStatus(str(item.get("status", "")).lower())] += 1
            except ValueError:
                pass
            views += int(item.get("views") or 0)
            inquiries += int(item.get("inquiries") or 0)
        return cls(
            total=total,
            pending=counts[PropertyStatus.PENDING],
            approved=counts[PropertyStatus.APPROVED],
            published=counts[PropertyStatus.PUBLISHED],
            rejected=counts[PropertyStatus.REJECTED],
            total_views=views,
            total_inquiries=inquiries,
        )

    def as_dict(self) -> dict:
        return asdict(self)

def format_count(value: int) -> str:
    return f"{value:,}"

_CARDS = (
    ("Total Properti", "total", "home", "blue"),
    ("Menunggu Review", "pending", "clock", "yellow"),
    ("Disetujui", "approved", "check-circle", "blue"),
    ("Dipublikasi", "published", "eye", "green"),
    ("Ditolak", "rejected", "x-circle", "red"),
    ("Total Views", "total_views", "trending-up", "primary"),
)

def stat_cards(stats: PropertyStats) -> list[dict]:
    return [
        {"title": title, "value": format_count(getattr(stats, field)), "icon": icon, "color": color}
        for title, field, icon, color in _CARDS
    ]
