"""Exceptions raised by llm_connection.

Normalization and validation never raise for bad parameter data; they
report it as values. Exceptions are reserved for input that cannot be
tokenized at all and for explicit provider lookups.
"""


class LLMConnectionError(Exception):
    """Base class for all llm_connection errors."""


class InvalidConnectionStringError(LLMConnectionError, ValueError):
    """Raised when a connection string cannot be tokenized."""

    def __init__(self, message: str, connection_string: str | None = None) -> None:
        super().__init__(message)
        self.connection_string = connection_string


class UnsupportedProviderError(LLMConnectionError):
    """Raised when a provider name is not one of the known providers."""

    def __init__(self, provider_key: str, supported_providers: list[str]) -> None:
        self.provider_key = provider_key
        self.supported_providers = supported_providers
        message = f"'{provider_key}' is not a supported provider. Supported providers: {', '.join(supported_providers)}"
        super().__init__(message)
