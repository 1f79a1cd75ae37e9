import logging
from typing import Protocol

from domain.exceptions.rates import FetchError
from domain.models.rates import RateSet
from infrastructure.cache.rate_cache import RateCache

logger = logging.getLogger(__name__)


class RateSource(Protocol):
    @property
    def name(self) -> str: ...

    async def fetch(self) -> RateSet: ...


class RateService:
    def __init__(self, source: RateSource, cache: RateCache):
        self.source = source
        self.cache = cache

    async def refresh(self) -> RateSet:
        """Fetch a fresh RateSet and swap it into the cache.

        A failed fetch is logged and re-raised without touching the cache, so
        previously loaded rates stay available. Nothing is retried here.
        """
        logger.info(f"Refreshing exchange rates from {self.source.name}...")
        try:
            rate_set = await self.source.fetch()
        except FetchError as e:
            if self.cache.is_loaded():
                logger.error(f"Refresh failed, keeping rates fetched at {self.cache.fetched_at}: {e}")
            else:
                logger.error(f"Refresh failed and no rates are loaded: {e}")
            raise

        self.cache.replace(rate_set)
        logger.info(f"Loaded {len(rate_set)} currencies for feed date {rate_set.feed_date or 'n/a'}")
        return rate_set
