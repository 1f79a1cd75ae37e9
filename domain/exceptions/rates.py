class RateException(Exception):
    pass


class FetchError(RateException):
    pass


class NetworkError(FetchError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ParseError(FetchError):
    pass


class ConversionError(RateException):
    pass


class UnknownCurrencyError(ConversionError):
    pass


class InvalidAmountError(ConversionError):
    pass
