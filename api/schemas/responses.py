from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class ConversionResponse(BaseModel):
	from_currency: str = Field(..., description='Source currency code')
	to_currency: str = Field(..., description='Target currency code')
	original_amount: Decimal = Field(..., description='Original amount requested')
	converted_amount: Decimal = Field(..., description='Converted amount')
	exchange_rate: Decimal = Field(..., description='Units of target currency per unit of source')
	fetched_at: datetime = Field(..., description='When the rates were fetched')
	feed_date: str = Field(..., description='Effective date reported by the feed')

	class ConfigDict:
		json_schema_extra = {
			'example': {
				'from_currency': 'DKK',
				'to_currency': 'USD',
				'original_amount': 100.00,
				'converted_amount': 14.2859,
				'exchange_rate': 0.142859,
				'fetched_at': '2025-09-27T10:30:00',
				'feed_date': '2025-09-26',
			}
		}


class ExchangeRateResponse(BaseModel):
	from_currency: str = Field(..., description='Source currency code')
	to_currency: str = Field(..., description='Target currency code')
	rate: Decimal = Field(..., description='Units of target currency per unit of source')
	fetched_at: datetime = Field(..., description='When the rates were fetched')
	feed_date: str = Field(..., description='Effective date reported by the feed')


class SupportedCurrenciesResponse(BaseModel):
	currencies: list[str] = Field(description='List of currency codes')

	class ConfigDict:
		json_schema_extra = {'examples': [{'currencies': ['DKK', 'EUR', 'GBP', 'USD']}]}


class CurrencyResponse(BaseModel):
	code: str = Field(..., description='Currency code')
	description: str = Field(..., description='Human readable currency name')


class RateEntryResponse(BaseModel):
	code: str = Field(..., description='Currency code')
	description: str = Field(..., description='Human readable currency name')
	rate: Decimal = Field(..., description='Base currency per 100 units')
	base_unit_rate: Decimal | None = Field(None, description='Units of this currency per one unit of base currency')


class RatesResponse(BaseModel):
	base_currency: str | None = Field(None, description='Currency every rate is quoted in')
	fetched_at: datetime | None = Field(None, description='When the rates were fetched')
	feed_date: str | None = Field(None, description='Effective date reported by the feed')
	rates: list[RateEntryResponse] = Field(default_factory=list)


class RefreshResponse(BaseModel):
	currencies: int = Field(..., description='Number of currencies loaded')
	fetched_at: datetime = Field(..., description='When the rates were fetched')
	feed_date: str = Field(..., description='Effective date reported by the feed')
