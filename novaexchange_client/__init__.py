"""Python client for the NovaExchange v2 REST API."""

from .config import ClientConfig, load_config
from .api_client import (
    NovaExchangeAPI,
    RequestDescriptor,
    Transport,
    UrllibTransport,
    WalletStatus,
    generate_nonce,
    sign_message,
)
from .errors import (
    ERROR_CODES,
    ClientMisuseError,
    ExchangeAPIError,
    HTTPStatusError,
    NovaExchangeError,
    ResponseParseError,
    TransportError,
    map_error_message,
)

__all__ = [
    "ClientConfig",
    "load_config",
    "NovaExchangeAPI",
    "RequestDescriptor",
    "Transport",
    "UrllibTransport",
    "WalletStatus",
    "generate_nonce",
    "sign_message",
    "ERROR_CODES",
    "ClientMisuseError",
    "ExchangeAPIError",
    "HTTPStatusError",
    "NovaExchangeError",
    "ResponseParseError",
    "TransportError",
    "map_error_message",
]
