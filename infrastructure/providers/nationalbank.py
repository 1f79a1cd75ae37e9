import logging
import re
from datetime import datetime
from decimal import Decimal, InvalidOperation

import httpx
from lxml import etree

from domain.exceptions.rates import NetworkError, ParseError
from domain.models.rates import (
	BASE_CURRENCY,
	BASE_DESCRIPTION,
	BASE_RATE,
	UNKNOWN_DESCRIPTION,
	RateEntry,
	RateSet,
)

logger = logging.getLogger(__name__)

_RATE_PATTERN = re.compile(r'[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?', re.ASCII)
_XML_DECLARATION = re.compile(r'^\s*<\?xml[^>]*\?>')


def parse_rate(text: str | None) -> Decimal | None:
	"""Parse a feed rate such as '699,99' or '699.99'; None when unusable."""
	if text is None:
		return None
	text = text.strip().replace(',', '.')
	if not _RATE_PATTERN.fullmatch(text):
		return None
	try:
		value = Decimal(text)
	except InvalidOperation:
		return None
	if not value.is_finite():
		return None
	return value


def parse_rates(
	content: bytes | str,
	base_currency: str = BASE_CURRENCY,
	base_description: str = BASE_DESCRIPTION,
	fetched_at: datetime | None = None,
) -> RateSet:
	if isinstance(content, str):
		# Already decoded; a declared encoding would be applied a second time
		content = _XML_DECLARATION.sub('', content, count=1)

	try:
		parser = etree.XMLParser(resolve_entities=False, no_network=True)
		root = etree.fromstring(content, parser=parser)
	except (etree.XMLSyntaxError, ValueError) as e:
		raise ParseError(f'Nationalbank feed is not valid XML: {e}') from e

	daily_rates = next(root.iter('dailyrates'), None)
	feed_date = daily_rates.get('id', '') if daily_rates is not None else ''

	entries: dict[str, RateEntry] = {}
	for element in root.iter('currency'):
		code = (element.get('code') or '').strip().upper()
		raw_rate = element.get('rate')
		if not code or raw_rate is None:
			logger.debug(f'Skipping currency element without code or rate: {dict(element.attrib)}')
			continue

		rate = parse_rate(raw_rate)
		if rate is None:
			logger.debug(f'Skipping {code}: unparsable rate {raw_rate!r}')
			continue

		entries[code] = RateEntry(
			code=code,
			description=element.get('desc') or UNKNOWN_DESCRIPTION,
			rate=rate,
		)

	# Base currency always carries the identity rate, even if the feed lists it
	entries[base_currency] = RateEntry(code=base_currency, description=base_description, rate=BASE_RATE)

	return RateSet(
		entries=entries,
		fetched_at=fetched_at or datetime.now(),
		feed_date=feed_date,
		base_currency=base_currency,
	)


class NationalbankRateSource:
	BASE_URL = 'https://www.nationalbanken.dk/api/currencyratesxml?lang=da'

	def __init__(
		self,
		url: str | None = None,
		base_currency: str = BASE_CURRENCY,
		base_description: str = BASE_DESCRIPTION,
		client: httpx.AsyncClient | None = None,
		timeout: float = 10,
	):
		self.url = url or self.BASE_URL
		self.base_currency = base_currency
		self.base_description = base_description
		self._client = client or httpx.AsyncClient(timeout=timeout)

	@property
	def name(self) -> str:
		return 'nationalbanken'

	async def _request(self) -> bytes:
		try:
			response = await self._client.get(self.url)
			response.raise_for_status()
			return response.content

		except httpx.HTTPStatusError as e:
			raise NetworkError(
				f'Nationalbank HTTP error {e.response.status_code}: {e.response.text[:200]}',
				status_code=e.response.status_code,
			) from e
		except httpx.RequestError as e:
			raise NetworkError(f'Nationalbank request failed: {e.__class__.__name__}') from e

	async def fetch(self) -> RateSet:
		content = await self._request()
		rate_set = parse_rates(
			content,
			base_currency=self.base_currency,
			base_description=self.base_description,
		)
		logger.info(
			f'Fetched {len(rate_set)} rates from {self.name} (feed date {rate_set.feed_date or "n/a"})'
		)
		return rate_set

	async def close(self) -> None:
		await self._client.aclose()
