import asyncio
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from api.dependencies import (
	get_conversion_service,
	get_currency_service,
	get_rate_cache,
	get_rate_service,
	get_refresh_lock,
)
from api.schemas import (
	ConversionResponse,
	CurrencyResponse,
	ExchangeRateResponse,
	RateEntryResponse,
	RatesResponse,
	RefreshResponse,
	SupportedCurrenciesResponse,
)
from application.services import ConversionService, CurrencyService, RateService
from application.services.currency_service import normalize_code
from domain.exceptions.rates import UnknownCurrencyError
from infrastructure.cache.rate_cache import RateCache

router = APIRouter(prefix='/api', tags=['rates'])

CurrencyCode = Annotated[str, Path(min_length=3, max_length=3)]
SearchQuery = Annotated[str | None, Query(max_length=50)]


def _base_unit_rate(view: RateCache, base_currency: str, code: str) -> Decimal | None:
	try:
		return view.exchange_rate(base_currency, code)
	except UnknownCurrencyError:
		return None


@router.get(
	'/convert/{from_currency}/{to_currency}/{amount}',
	response_model=ConversionResponse,
	status_code=status.HTTP_200_OK,
	summary='Convert currency amount',
)
async def convert_currency(
	from_currency: CurrencyCode,
	to_currency: CurrencyCode,
	amount: Annotated[Decimal, Path(gt=0)],
	service: Annotated[ConversionService, Depends(get_conversion_service)],
) -> ConversionResponse:
	result = service.convert(amount, from_currency, to_currency)
	return ConversionResponse(**result)


@router.get(
	'/rate/{from_currency}/{to_currency}',
	response_model=ExchangeRateResponse,
	status_code=status.HTTP_200_OK,
	summary='Get current exchange rate',
)
async def get_exchange_rate(
	from_currency: CurrencyCode,
	to_currency: CurrencyCode,
	service: Annotated[ConversionService, Depends(get_conversion_service)],
) -> ExchangeRateResponse:
	result = service.get_rate(from_currency, to_currency)
	return ExchangeRateResponse(**result)


@router.get(
	'/currencies',
	response_model=SupportedCurrenciesResponse,
	status_code=status.HTTP_200_OK,
	summary='List available currencies',
)
async def get_currencies(
	service: Annotated[CurrencyService, Depends(get_currency_service)],
	search: SearchQuery = None,
) -> SupportedCurrenciesResponse:
	return SupportedCurrenciesResponse(currencies=service.list_codes(search))


@router.get(
	'/currencies/{code}',
	response_model=CurrencyResponse,
	status_code=status.HTTP_200_OK,
	summary='Describe a currency',
)
async def get_currency(
	code: CurrencyCode,
	service: Annotated[CurrencyService, Depends(get_currency_service)],
) -> CurrencyResponse:
	code = normalize_code(code)
	if not service.is_supported(code):
		raise UnknownCurrencyError(f'Currency {code} is not supported')
	return CurrencyResponse(code=code, description=service.get_description(code))


@router.get(
	'/rates',
	response_model=RatesResponse,
	status_code=status.HTTP_200_OK,
	summary='List current rates',
)
async def get_rates(
	cache: Annotated[RateCache, Depends(get_rate_cache)],
	search: SearchQuery = None,
) -> RatesResponse:
	snapshot = cache.snapshot
	if snapshot is None:
		return RatesResponse()

	view = RateCache(snapshot)
	return RatesResponse(
		base_currency=snapshot.base_currency,
		fetched_at=snapshot.fetched_at,
		feed_date=snapshot.feed_date,
		rates=[
			RateEntryResponse(
				code=entry.code,
				description=entry.description,
				rate=entry.rate,
				base_unit_rate=_base_unit_rate(view, snapshot.base_currency, entry.code),
			)
			for entry in CurrencyService(view).list_rates(search)
		],
	)


@router.post(
	'/rates/refresh',
	response_model=RefreshResponse,
	status_code=status.HTTP_200_OK,
	summary='Fetch the latest rates',
)
async def refresh_rates(
	service: Annotated[RateService, Depends(get_rate_service)],
	lock: Annotated[asyncio.Lock, Depends(get_refresh_lock)],
) -> RefreshResponse:
	if lock.locked():
		raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail='Refresh already in progress')

	async with lock:
		rate_set = await service.refresh()

	return RefreshResponse(
		currencies=len(rate_set),
		fetched_at=rate_set.fetched_at,
		feed_date=rate_set.feed_date,
	)
