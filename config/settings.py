from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	FEED_URL: str = 'https://www.nationalbanken.dk/api/currencyratesxml?lang=da'
	REQUEST_TIMEOUT: float = 10.0

	BASE_CURRENCY: str = 'DKK'
	BASE_CURRENCY_DESCRIPTION: str = 'Danske kroner'

	# Application
	APP_NAME: str = 'Nationalbank Rates API'
	DEBUG: bool = False
	LOG_LEVEL: str = 'INFO'

	model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')


@lru_cache
def get_settings() -> Settings:
	return Settings()
