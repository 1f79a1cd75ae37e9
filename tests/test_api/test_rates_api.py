import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_rate_cache, get_rate_service, get_refresh_lock
from api.main import app
from domain.exceptions.rates import NetworkError
from infrastructure.cache.rate_cache import RateCache
from infrastructure.providers.nationalbank import parse_rates


@pytest.fixture
def mock_rate_service(rate_set):
    mock_service = MagicMock()
    mock_service.refresh = AsyncMock(return_value=rate_set)
    return mock_service


@pytest.fixture
def refresh_lock():
    return asyncio.Lock()


@pytest.fixture
def client(rate_cache, mock_rate_service, refresh_lock):
    # Override the real dependencies; the lifespan (network bootstrap) is not run
    app.dependency_overrides[get_rate_cache] = lambda: rate_cache
    app.dependency_overrides[get_rate_service] = lambda: mock_rate_service
    app.dependency_overrides[get_refresh_lock] = lambda: refresh_lock
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def test_convert_base_to_foreign(client):
    response = client.get('/api/convert/DKK/USD/100')

    assert response.status_code == 200
    data = response.json()

    assert data['from_currency'] == 'DKK'
    assert data['to_currency'] == 'USD'
    assert Decimal(data['original_amount']) == Decimal('100')
    assert Decimal(data['converted_amount']).quantize(Decimal('0.0001')) == Decimal('14.2859')
    assert data['feed_date'] == '2025-11-05'
    assert 'fetched_at' in data


def test_convert_lowercase_currencies_normalized(client):
    response = client.get('/api/convert/usd/dkk/100')

    assert response.status_code == 200
    data = response.json()
    assert data['from_currency'] == 'USD'
    assert Decimal(data['converted_amount']) == Decimal('699.99')
    assert Decimal(data['exchange_rate']) == Decimal('6.9999')


def test_convert_unknown_currency_returns_404(client):
    response = client.get('/api/convert/XYZ/DKK/100')

    assert response.status_code == 404
    assert 'XYZ' in response.json()['detail']


@pytest.mark.parametrize('amount', ['0', '-5', 'abc'])
def test_convert_rejects_non_positive_or_garbage_amount(client, amount):
    response = client.get(f'/api/convert/DKK/USD/{amount}')

    assert response.status_code == 422


def test_convert_before_rates_loaded_returns_404(client):
    app.dependency_overrides[get_rate_cache] = lambda: RateCache()

    response = client.get('/api/convert/DKK/USD/100')

    assert response.status_code == 404


def test_get_exchange_rate(client):
    response = client.get('/api/rate/USD/DKK')

    assert response.status_code == 200
    assert Decimal(response.json()['rate']) == Decimal('6.9999')


def test_get_currencies_sorted(client):
    response = client.get('/api/currencies')

    assert response.status_code == 200
    assert response.json()['currencies'] == ['AUD', 'DKK', 'EUR', 'JPY', 'SEK', 'USD']


def test_get_currencies_with_search(client):
    response = client.get('/api/currencies', params={'search': 'kroner'})

    assert response.json()['currencies'] == ['DKK', 'SEK']


def test_get_currency_description(client):
    response = client.get('/api/currencies/eur')

    assert response.status_code == 200
    assert response.json() == {'code': 'EUR', 'description': 'Euro'}


def test_get_unknown_currency_returns_404(client):
    response = client.get('/api/currencies/XYZ')

    assert response.status_code == 404


def test_get_rates_excludes_base(client):
    response = client.get('/api/rates')

    assert response.status_code == 200
    data = response.json()
    assert data['base_currency'] == 'DKK'
    assert data['feed_date'] == '2025-11-05'
    assert [r['code'] for r in data['rates']] == ['AUD', 'EUR', 'JPY', 'SEK', 'USD']
    usd = data['rates'][-1]
    assert Decimal(usd['rate']) == Decimal('699.99')
    assert usd['description'] == 'Amerikanske dollar'
    assert Decimal(usd['base_unit_rate']) == Decimal('1') * Decimal('100') / Decimal('699.99')
    assert Decimal(usd['base_unit_rate']).quantize(Decimal('0.0001')) == Decimal('0.1429')


def test_get_rates_with_search(client):
    response = client.get('/api/rates', params={'search': 'dollar'})

    assert [r['code'] for r in response.json()['rates']] == ['AUD', 'USD']


def test_get_rates_before_loaded_is_empty(client):
    app.dependency_overrides[get_rate_cache] = lambda: RateCache()

    response = client.get('/api/rates')

    assert response.status_code == 200
    assert response.json()['rates'] == []
    assert response.json()['fetched_at'] is None


def test_refresh_success(client, mock_rate_service):
    response = client.post('/api/rates/refresh')

    assert response.status_code == 200
    data = response.json()
    assert data['currencies'] == 6
    assert data['feed_date'] == '2025-11-05'
    mock_rate_service.refresh.assert_awaited_once()


def test_refresh_failure_returns_503(client, mock_rate_service):
    mock_rate_service.refresh.side_effect = NetworkError('Nationalbank request failed: ConnectError')

    response = client.post('/api/rates/refresh')

    assert response.status_code == 503
    assert response.json()['detail'] == 'Exchange rate service unavailable'


def test_refresh_already_running_returns_409(client, mock_rate_service):
    busy_lock = MagicMock()
    busy_lock.locked.return_value = True
    app.dependency_overrides[get_refresh_lock] = lambda: busy_lock

    response = client.post('/api/rates/refresh')

    assert response.status_code == 409
    mock_rate_service.refresh.assert_not_called()


def test_get_rates_zero_rate_has_no_base_unit_rate(client):
    cache = RateCache(parse_rates(
        b'<exchangerates><dailyrates id="2025-11-05">'
        b'<currency code="ZZZ" desc="Broken" rate="0"/><currency code="EUR" desc="Euro" rate="746,13"/>'
        b'</dailyrates></exchangerates>'
    ))
    app.dependency_overrides[get_rate_cache] = lambda: cache

    response = client.get('/api/rates')

    assert response.status_code == 200
    rows = {r['code']: r for r in response.json()['rates']}
    assert rows['ZZZ']['base_unit_rate'] is None
    assert Decimal(rows['EUR']['base_unit_rate']) == Decimal('1') * Decimal('100') / Decimal('746.13')


def test_get_currency_description_when_not_loaded_returns_404(client):
    app.dependency_overrides[get_rate_cache] = lambda: RateCache()

    response = client.get('/api/currencies/EUR')

    assert response.status_code == 404
