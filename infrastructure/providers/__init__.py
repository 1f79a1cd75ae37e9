from .nationalbank import NationalbankRateSource, parse_rates

__all__ = ['NationalbankRateSource', 'parse_rates']
