from decimal import Decimal

from application.services.currency_service import normalize_code
from infrastructure.cache.rate_cache import RateCache


class ConversionService:
	def __init__(self, cache: RateCache):
		self.cache = cache

	def convert(self, amount: Decimal, from_currency: str, to_currency: str) -> dict:
		from_currency = normalize_code(from_currency)
		to_currency = normalize_code(to_currency)

		# Both figures come from the same snapshot
		snapshot = self.cache.snapshot
		view = RateCache(snapshot)
		converted_amount = view.convert(amount, from_currency, to_currency)
		exchange_rate = view.exchange_rate(from_currency, to_currency)

		return {
			'from_currency': from_currency,
			'to_currency': to_currency,
			'original_amount': amount,
			'converted_amount': converted_amount,
			'exchange_rate': exchange_rate,
			'fetched_at': snapshot.fetched_at,
			'feed_date': snapshot.feed_date,
		}

	def get_rate(self, from_currency: str, to_currency: str) -> dict:
		from_currency = normalize_code(from_currency)
		to_currency = normalize_code(to_currency)

		snapshot = self.cache.snapshot
		rate = RateCache(snapshot).exchange_rate(from_currency, to_currency)

		return {
			'from_currency': from_currency,
			'to_currency': to_currency,
			'rate': rate,
			'fetched_at': snapshot.fetched_at,
			'feed_date': snapshot.feed_date,
		}
