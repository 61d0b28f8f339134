"""Exceptions raised by the NovaExchange client and the exchange error-code table."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union


class NovaExchangeError(RuntimeError):
    """Base class for every failure surfaced by the client.

    ``code`` carries the machine readable tag for the failure: a transport
    error name, an HTTP status or an exchange error code, depending on the
    subclass. ``description`` names the request that failed (HTTP method,
    URL, API method and masked parameters) when one was built.
    """

    def __init__(
        self,
        message: str,
        code: Optional[Union[int, str]] = None,
        payload: Optional[Dict[str, Any]] = None,
        description: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.payload = payload or {}
        self.description = description


class ClientMisuseError(NovaExchangeError):
    """The caller invoked the client incorrectly (missing credentials, bad params)."""


class TransportError(NovaExchangeError):
    """The request never produced an HTTP response."""


class HTTPStatusError(NovaExchangeError):
    """The server answered with a status outside the 2xx range."""


class ResponseParseError(NovaExchangeError):
    """The response body was not valid JSON."""


class ExchangeAPIError(NovaExchangeError):
    """The exchange reported an ``error_code`` in an otherwise valid response."""


ERROR_CODES: Mapping[int, str] = MappingProxyType(
    {
        10000: "Required parameter can not be null",
        10001: "Requests are too frequent",
        10002: "System Error",
        10003: "Restricted list request, please try again later",
        10004: "IP restriction",
        10005: "Key does not exist",
        10006: "User does not exist",
        10007: "Signatures do not match",
        10008: "Illegal parameter",
        10009: "Order does not exist",
        10010: "Insufficient balance",
        10011: "Order is less than minimum trade amount",
        10012: "Unsupported symbol (not btc_usd or ltc_usd)",
        10013: "This interface only accepts https requests",
        10014: "Order price must be between 0 and 1,000,000",
        10015: "Order price differs from current market price too much",
        10016: "Insufficient coins balance",
        10017: "API authorization error",
        10026: "Loan (including reserved loan) and margin cannot be withdrawn",
        10027: "Cannot withdraw within 24 hrs of authentication information modification",
        10028: "Withdrawal amount exceeds daily limit",
        10029: "Account has unpaid loan, please cancel/pay off the loan before withdraw",
        10031: "Deposits can only be withdrawn after 6 confirmations",
        10032: "Please enabled phone/google authenticator",
        10033: "Fee higher than maximum network transaction fee",
        10034: "Fee lower than minimum network transaction fee",
        10035: "Insufficient BTC/LTC",
        10036: "Withdrawal amount too low",
        10037: "Trade password not set",
        10040: "Withdrawal cancellation fails",
        10041: "Withdrawal address not approved",
        10042: "Admin password error",
        10100: "User account frozen",
        10216: "Non-available API",
        503: "Too many requests (Http)",
    }
)


def map_error_message(error_code: Any) -> str:
    """Return the human readable message for an exchange ``error_code``.

    Codes may arrive as strings in the JSON body, so numeric strings are
    looked up as integers.
    """

    key: Optional[int] = None
    if isinstance(error_code, int) and not isinstance(error_code, bool):
        key = error_code
    elif isinstance(error_code, str) and error_code.isdecimal():
        key = int(error_code)
    message = ERROR_CODES.get(key) if key is not None else None
    if message is None:
        return f"Unknown NovaExchange error code: {error_code}"
    return message


__all__ = [
    "ERROR_CODES",
    "ClientMisuseError",
    "ExchangeAPIError",
    "HTTPStatusError",
    "NovaExchangeError",
    "ResponseParseError",
    "TransportError",
    "map_error_message",
]
