"""
Shared fixtures: a small Nationalbank feed and the RateSet/RateCache built from it.
"""

from datetime import datetime

import pytest

from infrastructure.cache.rate_cache import RateCache
from infrastructure.providers.nationalbank import parse_rates

FETCHED_AT = datetime(2025, 11, 5, 10, 30, 0)

SAMPLE_FEED = """<?xml version="1.0" encoding="utf-8"?>
<exchangerates type="Valutakurser" author="Danmarks Nationalbank" refcur="DKK" refamt="1">
  <dailyrates id="2025-11-05">
    <currency code="AUD" desc="Australske dollar" rate="421,43" />
    <currency code="EUR" desc="Euro" rate="746,13" />
    <currency code="USD" desc="Amerikanske dollar" rate="699,99" />
    <currency code="JPY" desc="Japanske yen" rate="4,5321" />
    <currency code="SEK" desc="Svenske kroner" rate="67,87" />
  </dailyrates>
</exchangerates>
"""


@pytest.fixture
def feed_xml() -> bytes:
    return SAMPLE_FEED.encode("utf-8")


@pytest.fixture
def rate_set(feed_xml):
    return parse_rates(feed_xml, base_currency="DKK", base_description="Danske kroner", fetched_at=FETCHED_AT)


@pytest.fixture
def rate_cache(rate_set):
    return RateCache(rate_set)
