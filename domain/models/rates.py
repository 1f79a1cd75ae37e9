from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping

BASE_CURRENCY = "DKK"
BASE_RATE = Decimal("100")  # feed quotes base currency per 100 units
BASE_DESCRIPTION = "Danske kroner"
UNKNOWN_DESCRIPTION = "unknown currency"


@dataclass(frozen=True)
class RateEntry:
    code: str
    description: str
    rate: Decimal  # amount of base currency per 100 units of this currency


@dataclass(frozen=True)
class RateSet:
    entries: Mapping[str, RateEntry] = field(hash=False)
    fetched_at: datetime
    feed_date: str = ""
    base_currency: str = BASE_CURRENCY

    def __post_init__(self):
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def __contains__(self, code: str) -> bool:
        return code in self.entries

    def __len__(self) -> int:
        return len(self.entries)
