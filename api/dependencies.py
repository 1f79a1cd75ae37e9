import asyncio
import logging
from typing import Annotated

from fastapi import Depends

from application.services import ConversionService, CurrencyService, RateService
from config.settings import get_settings
from domain.exceptions.rates import FetchError
from infrastructure.cache.rate_cache import RateCache
from infrastructure.providers import NationalbankRateSource

logger = logging.getLogger(__name__)


class AppDependencies:
	"""Container for application-wide singleton dependencies."""

	cache: RateCache | None = None
	source: NationalbankRateSource | None = None
	refresh_lock: asyncio.Lock | None = None


deps = AppDependencies()


def init_dependencies() -> None:
	"""Initialize all singleton dependencies. Called at app startup."""
	logger.info('Initializing dependencies...')
	settings = get_settings()

	deps.cache = RateCache()
	deps.source = NationalbankRateSource(
		url=settings.FEED_URL,
		base_currency=settings.BASE_CURRENCY,
		base_description=settings.BASE_CURRENCY_DESCRIPTION,
		timeout=settings.REQUEST_TIMEOUT,
	)
	deps.refresh_lock = asyncio.Lock()
	logger.info('Dependencies initialized')


async def cleanup_dependencies() -> None:
	logger.info('Cleaning up dependencies...')

	if deps.source:
		await deps.source.close()

	logger.info('Cleanup complete')


async def bootstrap() -> None:
	"""Load the first RateSet. Called after init_dependencies() at startup."""
	logger.info('Bootstrapping application...')

	if deps.cache is None or deps.source is None:
		raise RuntimeError('Dependencies not initialized. Call init_dependencies() first.')

	try:
		await RateService(source=deps.source, cache=deps.cache).refresh()
	except FetchError as e:
		logger.warning(f'Starting without exchange rates: {e}')
		return

	logger.info('Bootstrap complete')


def get_rate_cache() -> RateCache:
	if deps.cache is None:
		raise RuntimeError('Rate cache not initialized')
	return deps.cache


def get_rate_source() -> NationalbankRateSource:
	if deps.source is None:
		raise RuntimeError('Rate source not initialized')
	return deps.source


def get_refresh_lock() -> asyncio.Lock:
	if deps.refresh_lock is None:
		raise RuntimeError('Refresh lock not initialized')
	return deps.refresh_lock


def get_rate_service(
	source: Annotated[NationalbankRateSource, Depends(get_rate_source)],
	cache: Annotated[RateCache, Depends(get_rate_cache)],
) -> RateService:
	return RateService(source=source, cache=cache)


def get_currency_service(
	cache: Annotated[RateCache, Depends(get_rate_cache)],
) -> CurrencyService:
	return CurrencyService(cache=cache)


def get_conversion_service(
	cache: Annotated[RateCache, Depends(get_rate_cache)],
) -> ConversionService:
	return ConversionService(cache=cache)
