from domain.models.rates import RateEntry
from infrastructure.cache.rate_cache import RateCache


def normalize_code(code: str) -> str:
	return code.strip().upper()


class CurrencyService:
	def __init__(self, cache: RateCache):
		self.cache = cache

	def list_codes(self, search: str | None = None) -> list[str]:
		if not search:
			return self.cache.list_currency_codes()
		return [entry.code for entry in self.cache.search(search)]

	def list_rates(self, search: str | None = None) -> list[RateEntry]:
		rates = self.cache.list_rates()
		if not search:
			return rates
		matching = {entry.code for entry in self.cache.search(search)}
		return [entry for entry in rates if entry.code in matching]

	def is_supported(self, code: str) -> bool:
		snapshot = self.cache.snapshot
		return snapshot is not None and normalize_code(code) in snapshot

	def get_description(self, code: str) -> str:
		return self.cache.lookup_description(normalize_code(code))
