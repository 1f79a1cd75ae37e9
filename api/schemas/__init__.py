from .responses import (
	ConversionResponse,
	CurrencyResponse,
	ExchangeRateResponse,
	RateEntryResponse,
	RatesResponse,
	RefreshResponse,
	SupportedCurrenciesResponse,
)

__all__ = [
	'ConversionResponse',
	'CurrencyResponse',
	'ExchangeRateResponse',
	'RateEntryResponse',
	'RatesResponse',
	'RefreshResponse',
	'SupportedCurrenciesResponse',
]
