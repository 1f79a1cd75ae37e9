import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation

from domain.exceptions.rates import InvalidAmountError, UnknownCurrencyError
from domain.models.rates import BASE_RATE, UNKNOWN_DESCRIPTION, RateEntry, RateSet

logger = logging.getLogger(__name__)


class RateCache:
    """In-memory holder of the latest RateSet.

    Every read takes a single reference to the current snapshot, so a
    concurrent replace() is seen either entirely or not at all.
    """

    def __init__(self, rate_set: RateSet | None = None):
        self._current = rate_set

    def replace(self, rate_set: RateSet) -> None:
        self._current = rate_set
        logger.info(f"Rate cache replaced with {len(rate_set)} currencies")

    def is_loaded(self) -> bool:
        return self._current is not None

    @property
    def snapshot(self) -> RateSet | None:
        return self._current

    @property
    def fetched_at(self) -> datetime | None:
        current = self._current
        return current.fetched_at if current else None

    @property
    def feed_date(self) -> str | None:
        current = self._current
        return current.feed_date if current else None

    def __len__(self) -> int:
        current = self._current
        return len(current) if current else 0

    def list_currency_codes(self) -> list[str]:
        current = self._current
        if current is None:
            return []
        return sorted(current.entries)

    def list_rates(self) -> list[RateEntry]:
        current = self._current
        if current is None:
            return []
        return [
            current.entries[code]
            for code in sorted(current.entries)
            if code != current.base_currency
        ]

    def lookup_description(self, code: str) -> str:
        current = self._current
        if current is None or code not in current:
            return UNKNOWN_DESCRIPTION
        return current.entries[code].description

    def search(self, query: str | None) -> list[RateEntry]:
        """Entries whose code or description contains query, case-insensitively."""
        current = self._current
        if current is None:
            return []

        needle = (query or "").strip().lower()
        entries = [current.entries[code] for code in sorted(current.entries)]
        if not needle:
            return entries
        return [
            entry
            for entry in entries
            if needle in entry.code.lower() or needle in entry.description.lower()
        ]

    def convert(self, amount: Decimal | int | str, from_code: str, to_code: str) -> Decimal:
        current = self._current
        value = self._to_amount(amount)

        if current is None:
            raise UnknownCurrencyError("No exchange rates loaded")
        from_rate = self._usable_rate(current, from_code)
        to_rate = self._usable_rate(current, to_code)

        base = current.base_currency
        if from_code == base:
            base_amount = value
        else:
            base_amount = value * (from_rate / BASE_RATE)

        if to_code == base:
            return base_amount
        return base_amount * BASE_RATE / to_rate

    def exchange_rate(self, from_code: str, to_code: str) -> Decimal:
        """Units of to_code bought by one unit of from_code."""
        return self.convert(Decimal(1), from_code, to_code)

    @staticmethod
    def _to_amount(amount: Decimal | int | str) -> Decimal:
        if isinstance(amount, bool):
            raise InvalidAmountError(f"Invalid amount: {amount!r}")
        try:
            value = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
        except (InvalidOperation, ValueError) as e:
            raise InvalidAmountError(f"Invalid amount: {amount!r}") from e

        if not value.is_finite():
            raise InvalidAmountError(f"Amount must be finite, got {amount!r}")
        if value < 0:
            raise InvalidAmountError(f"Amount must not be negative, got {amount!r}")
        return value

    @staticmethod
    def _usable_rate(rate_set: RateSet, code: str) -> Decimal:
        entry = rate_set.entries.get(code)
        if entry is None:
            raise UnknownCurrencyError(f"Currency {code} is not supported")
        if entry.rate <= 0:
            raise UnknownCurrencyError(f"Currency {code} has no usable rate")
        return entry.rate
