from typing import Callable, Optional, Union
from pydantic import BaseModel, ConfigDict, Field
from structlog import get_logger
from app.exceptions import InvalidFilterError

logger = get_logger()

ALL = "all"

FILTER_OPTIONS = {
    "status": {
        "all": "Semua Status",
        "pending": "Menunggu Review",
        "approved": "Disetujui",
        "rejected": "Ditolak",
        "published": "Dipublikasi",
        "unpublished": "Tidak Dipublikasi",
    },
    "type": {
        "all": "Semua Tipe",
        "rumah": "Rumah",
        "apartemen": "Apartemen",
        "kondominium": "Kondominium",
        "ruko": "Ruko",
        "gedung-komersial": "Gedung Komersial",
        "ruang-industri": "Ruang Industri",
        "tanah": "Tanah",
        "lainnya": "Lainnya",
    },
    "purpose": {
        "all": "Semua Tujuan",
        "jual": "Dijual",
        "sewa": "Disewa",
    },
    "agent": {
        "all": "Semua Agen",
        "budi-santoso": "Budi Santoso",
        "sinta-dewi": "Sinta Dewi",
        "anton-wijaya": "Anton Wijaya",
        "diana-putri": "Diana Putri",
    },
    "date_range": {
        "all": "Semua Waktu",
        "today": "Hari Ini",
        "week": "7 Hari Terakhir",
        "month": "30 Hari Terakhir",
        "quarter": "3 Bulan Terakhir",
        "year": "1 Tahun Terakhir",
    },
}

# Clients send camelCase keys
_KEY_ALIASES = {"dateRange": "date_range"}

def normalize_key(key: str) -> str:
    key = _KEY_ALIASES.get(key, key)
    if key not in FILTER_OPTIONS:
        raise InvalidFilterError(f"Unknown filter: {key}")
    return key

def validate_filter(key: str, value: str) -> str:
    key = normalize_key(key)
    if value not in FILTER_OPTIONS[key]:
        raise InvalidFilterError(f"Unknown value '{value}' for filter '{key}'")
    return key

class PropertyFilters(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = ALL
    type: str = ALL
    purpose: str = ALL
    agent: str = ALL
    date_range: str = Field(default=ALL, alias="dateRange")

    @classmethod
    def reset(cls) -> "PropertyFilters":
        return cls()

    def with_value(self, key: str, value: str) -> "PropertyFilters":
        key = validate_filter(key, value)
        return self.model_copy(update={key: value})

    def is_neutral(self) -> bool:
        return not self.to_query()

    def to_query(self) -> dict:
        """Filters for the listing service, leaving out every neutral field."""
        return {k: v for k, v in self.model_dump().items() if v != ALL}

class FilterPanel:
    """Five independent filter dropdowns plus a reset button.

    The panel owns no state of its own; it validates a selection and hands
    it to whoever owns the filters.
    """

    def __init__(
        self,
        filters: Union[PropertyFilters, Callable[[], PropertyFilters]],
        on_filter_change: Callable[[str, str], object],
        on_reset: Callable[[], object],
    ):
        self._filters = filters
        self.on_filter_change = on_filter_change
        self.on_reset = on_reset

    @property
    def filters(self) -> PropertyFilters:
        """The owner's current record; a getter is read on every access."""
        if callable(self._filters):
            return self._filters()
        return self._filters

    def options(self, key: Optional[str] = None) -> dict:
        if key is None:
            return FILTER_OPTIONS
        return FILTER_OPTIONS[normalize_key(key)]

    def change(self, key: str, value: str):
        key = validate_filter(key, value)
        return self.on_filter_change(key, value)

    def reset(self):
        return self.on_reset()

class FilterState:
    """Owner of a PropertyFilters record, wired to a FilterPanel's callbacks."""

    def __init__(self, filters: Optional[PropertyFilters] = None):
        self.filters = filters or PropertyFilters()

    def panel(self) -> FilterPanel:
        return FilterPanel(lambda: self.filters, self.set_filter, self.reset)

    def set_filter(self, key: str, value: str) -> PropertyFilters:
        self.filters = self.filters.with_value(key, value)
        logger.debug("Filter changed", key=key, value=value)
        return self.filters

    def reset(self) -> PropertyFilters:
        self.filters = PropertyFilters.reset()
        logger.debug("Filters reset")
        return self.filters
