"""Custom exceptions for the NBX order tool."""


class TradingBotError(Exception):
    """Base exception for the order tool."""

    pass


class ValidationError(TradingBotError):
    """Raised when command-line input fails validation."""

    pass


class ConfigurationError(TradingBotError):
    """Raised when configuration is missing or the client is used out of order."""

    pass


class ExchangeError(TradingBotError):
    """Raised when the exchange collaborator fails.

    ``stage`` names the dispatcher step that failed (authenticate, buy, sell,
    get_order) and is filled in by the dispatcher.
    """

    def __init__(self, message: str, stage: str | None = None):
        super().__init__(message)
        self.stage = stage


class ExchangeAPIError(ExchangeError):
    """Raised when the NBX API returns an error response."""

    def __init__(
        self,
        message: str,
        code: int | None = None,
        response: dict | None = None,
        stage: str | None = None,
    ):
        super().__init__(message, stage=stage)
        self.code = code
        self.response = response or {}


class NetworkError(ExchangeError):
    """Raised when a network/connection error occurs."""

    pass
