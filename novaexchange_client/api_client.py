"""HTTP client for interacting with the NovaExchange REST API."""

from __future__ import annotations

import base64
import errno
import hashlib
import hmac
import http.client
import json
import logging
import time
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Optional, Protocol, Tuple, Union

from .config import DEFAULT_SERVER, DEFAULT_USER_AGENT, ClientConfig
from .errors import (
    ClientMisuseError,
    ExchangeAPIError,
    HTTPStatusError,
    NovaExchangeError,
    ResponseParseError,
    TransportError,
    map_error_message,
)
from .utils import describe_request, format_amount, format_parameters

logger = logging.getLogger(__name__)

PRIVATE_API_PATH = "remote/v2/private"
MARKETS_API_PATH = "remote/v2/markets"
LISTING_METHOD = "markets"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class Transport(Protocol):
    """Protocol for pluggable HTTP transports.

    Network level failures are raised as :class:`OSError` (which covers
    :class:`urllib.error.URLError` and timeouts), :class:`http.client.HTTPException`
    or, for an unusable URL, :class:`ValueError`. Any HTTP response, whatever
    its status, is returned.
    """

    def request(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        data: Optional[bytes],
        timeout: float,
    ) -> Tuple[int, bytes]:
        """Perform an HTTP request and return a status code with a body."""


class UrllibTransport:
    """Default transport implementation built on top of :mod:`urllib`."""

    def request(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        data: Optional[bytes],
        timeout: float,
    ) -> Tuple[int, bytes]:
        request = urllib.request.Request(url=url, data=data, headers=headers, method=method)
        try:
            with urllib.request.urlopen(request, timeout=timeout) as response:
                return response.getcode(), response.read()
        except urllib.error.HTTPError as exc:  # pragma: no cover - network failure path
            return exc.code, exc.read()


class WalletStatus(IntEnum):
    """Wallet status numbers reported by ``walletstatus``."""

    OK = 0
    MAINTENANCE = 1
    NOT_IN_SYNC = 2
    NOT_AVAILABLE = 3
    OFFLINE = 4
    UNKNOWN = 5
    DELISTING = 6


@dataclass(frozen=True, slots=True)
class RequestDescriptor:
    """A fully signed request, ready to hand to a :class:`Transport`."""

    url: str
    api_method: str
    params: Dict[str, Any]
    headers: Dict[str, str]
    body: bytes
    http_method: str = "POST"

    @property
    def description(self) -> str:
        return describe_request(self.http_method, self.url, self.api_method, self.params)


def generate_nonce() -> int:
    """Whole seconds since the Unix epoch.

    Two calls inside the same second return the same value.
    """

    return int(time.time())


def sign_message(secret: str, message: str) -> str:
    """Base64 encoded HMAC-SHA512 of ``message`` keyed by ``secret``."""

    digest = hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha512).digest()
    return base64.b64encode(digest).decode("ascii")


def transport_error_code(exc: BaseException) -> str:
    """Symbolic tag for a transport failure, e.g. ``ECONNREFUSED`` or ``ETIMEDOUT``."""

    reason: Any = exc.reason if isinstance(exc, urllib.error.URLError) else exc
    if isinstance(reason, TimeoutError):
        return "ETIMEDOUT"
    if not isinstance(reason, BaseException):
        return type(exc).__name__
    code = getattr(reason, "errno", None)
    if code in errno.errorcode:
        return errno.errorcode[code]
    return type(reason).__name__


@dataclass(frozen=True, slots=True)
class NovaExchangeAPI:
    """Thin wrapper around NovaExchange's v2 REST endpoints.

    Every endpoint method returns a :class:`concurrent.futures.Future`
    that resolves once, either to the decoded JSON body or to a
    :class:`~novaexchange_client.errors.NovaExchangeError`. Requests run on a
    small thread pool owned by the instance; use the client as a context
    manager or call :meth:`close` to release it.
    """

    api_key: str = ""
    api_secret: str = ""
    server: str = DEFAULT_SERVER
    timeout: float = 20.0
    user_agent: str = DEFAULT_USER_AGENT
    verbose: bool = False
    sort_params: bool = False
    max_workers: int = 4
    transport: Transport = field(default_factory=UrllibTransport)
    _executor: ThreadPoolExecutor = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        executor = ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="novaexchange"
        )
        object.__setattr__(self, "_executor", executor)

    @classmethod
    def from_config(
        cls, config: ClientConfig, transport: Optional[Transport] = None
    ) -> "NovaExchangeAPI":
        extra: Dict[str, Any] = {"transport": transport} if transport is not None else {}
        return cls(
            api_key=config.api_key,
            api_secret=config.api_secret,
            server=config.server,
            timeout=config.timeout,
            user_agent=config.user_agent,
            verbose=config.verbose,
            sort_params=config.sort_params,
            max_workers=config.max_workers,
            **extra,
        )

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "NovaExchangeAPI":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Signing and request construction
    # ------------------------------------------------------------------
    def generate_nonce(self) -> int:
        return generate_nonce()

    def sign_message(self, message: str) -> str:
        return sign_message(self.api_secret, message)

    def private_url(self, method: str) -> str:
        return f"{self.server}/{PRIVATE_API_PATH}/{method}/?nonce={self.generate_nonce()}"

    def market_url(self, method: str) -> str:
        # The listing endpoint is the one market route the exchange serves without a nonce.
        if method == LISTING_METHOD or method.startswith(LISTING_METHOD + "/"):
            return f"{self.server}/{MARKETS_API_PATH}/{method}/"
        return f"{self.server}/{MARKETS_API_PATH}/{method}/?nonce={self.generate_nonce()}"

    def build_request(
        self, url: str, api_method: str, params: Mapping[str, Any]
    ) -> RequestDescriptor:
        """Sign ``url`` and attach the credentials to a copy of ``params``."""

        signed: Dict[str, Any] = dict(params)
        signed["apikey"] = self.api_key
        signed["signature"] = self.sign_message(url)
        if self.sort_params:
            body = format_parameters(signed)
        else:
            body = urllib.parse.urlencode(signed)
        headers = {
            "User-Agent": self.user_agent,
            "Content-Type": FORM_CONTENT_TYPE,
        }
        return RequestDescriptor(
            url=url,
            api_method=api_method,
            params=signed,
            headers=headers,
            body=body.encode("utf-8"),
        )

    def _check_usage(self, caller: str, params: Any) -> Optional[ClientMisuseError]:
        if not self.api_key or not self.api_secret:
            return ClientMisuseError(
                f"{caller} must provide api_key and api_secret to make this API request."
            )
        if not isinstance(params, Mapping):
            return ClientMisuseError(
                f"{caller} params {params!r} must be a mapping. "
                "If no params then pass an empty dict {}"
            )
        return None

    def _private_request(
        self, method: str, params: Optional[Mapping[str, Any]] = None
    ) -> "Future[Any]":
        params = {} if params is None else params
        problem = self._check_usage("NovaExchangeAPI._private_request()", params)
        if problem is not None:
            return _failed(problem)
        request = self.build_request(self.private_url(method), method, params)
        return self._dispatch(request)

    def _market_request(
        self, method: str, params: Optional[Mapping[str, Any]] = None
    ) -> "Future[Any]":
        params = {} if params is None else params
        problem = self._check_usage("NovaExchangeAPI._market_request()", params)
        if problem is not None:
            return _failed(problem)
        request = self.build_request(self.market_url(method), method, params)
        return self._dispatch(request)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------
    def _dispatch(self, request: RequestDescriptor) -> "Future[Any]":
        self._log("Dispatching %s", request.description)
        try:
            return self._executor.submit(self.execute_request, request)
        except RuntimeError as exc:
            error = ClientMisuseError(
                f"NovaExchangeAPI._dispatch() client is closed, cannot send {request.description}",
                description=request.description,
            )
            error.__cause__ = exc
            return _failed(error)

    def execute_request(self, request: RequestDescriptor) -> Any:
        """Send ``request`` once and return the decoded body, or raise."""

        try:
            status, body = self.transport.request(
                request.http_method, request.url, request.headers, request.body, self.timeout
            )
        except (OSError, http.client.HTTPException, ValueError) as exc:
            code = transport_error_code(exc)
            self._log("Transport failure %s for %s", code, request.description)
            raise TransportError(
                f"NovaExchangeAPI.execute_request() failed {request.description}: {exc}",
                code=code,
                description=request.description,
            ) from exc
        return self._parse_response(status, body, request)

    def _parse_response(self, status: int, body: bytes, request: RequestDescriptor) -> Any:
        text = body.decode("utf-8", errors="replace") if body else ""
        if not 200 <= status < 300:
            self._log("HTTP status %s from %s", status, request.description)
            raise HTTPStatusError(
                f"NovaExchangeAPI.execute_request() HTTP status code {status} "
                f"returned from {request.description}",
                code=status,
                payload={"body": text},
                description=request.description,
            )
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ResponseParseError(
                f"Could not parse response from server: {text}",
                payload={"body": text},
                description=request.description,
            ) from exc
        if isinstance(payload, dict) and "error_code" in payload:
            error_code = payload["error_code"]
            message = map_error_message(error_code)
            self._log(
                "%s returned error code %s, message: %r", request.description, error_code, message
            )
            raise ExchangeAPIError(
                message, code=error_code, payload=payload, description=request.description
            )
        self._log("Completed %s", request.description)
        return payload

    def _log(self, msg: str, *args: Any) -> None:
        logger.log(logging.INFO if self.verbose else logging.DEBUG, msg, *args)

    # ------------------------------------------------------------------
    # Market endpoints
    # ------------------------------------------------------------------
    def list_markets_summary(self, basecurrency: str = "") -> "Future[Any]":
        """List markets with cached ticker data, optionally for one base currency.

        The exchange limits this call to one request per minute.
        """

        method = f"{LISTING_METHOD}/{basecurrency}" if basecurrency else LISTING_METHOD
        return self._market_request(method)

    def get_market_summary(self, market: str) -> "Future[Any]":
        return self._market_request(f"info/{market}")

    def get_market_order_history(self, market: str) -> "Future[Any]":
        return self._market_request(f"orderhistory/{market}")

    def get_market_open_orders(self, market: str, side: str = "BOTH") -> "Future[Any]":
        """Open orders for ``market``; ``side`` is ``SELL``, ``BUY`` or ``BOTH``."""

        return self._market_request(f"openorders/{market}/{side}")

    # ------------------------------------------------------------------
    # Private endpoints
    # ------------------------------------------------------------------
    def get_balances(self) -> "Future[Any]":
        return self._private_request("getbalances")

    def get_balance(self, currency: str = "") -> "Future[Any]":
        suffix = f"/{currency}" if currency else ""
        return self._private_request(f"getbalance{suffix}")

    def get_deposits(self) -> "Future[Any]":
        return self._private_request("getdeposits")

    def get_withdrawals(self) -> "Future[Any]":
        return self._private_request("getwithdrawals")

    def get_new_deposit_address(self, currency: str) -> "Future[Any]":
        return self._private_request(f"getnewdepositaddress/{currency}")

    def get_deposit_address(self, currency: str) -> "Future[Any]":
        return self._private_request(f"getdepositaddress/{currency}")

    def get_open_orders(self, page: Union[int, str] = 1, market: str = "") -> "Future[Any]":
        """Account open orders, for one ``market`` or paginated across all markets."""

        if market:
            return self._private_request(f"myopenorders_market/{market}")
        return self._private_request("myopenorders", {"page": page or 1})

    def cancel_order(self, order_id: Union[int, str]) -> "Future[Any]":
        return self._private_request(f"cancelorder/{order_id}")

    def execute_withdrawal(
        self, currency: str, amount: Union[float, str], address: str
    ) -> "Future[Any]":
        try:
            params = {
                "currency": currency,
                "amount": format_amount(amount),
                "address": address,
            }
        except ValueError as exc:
            return _failed(_bad_amount("execute_withdrawal", exc))
        return self._private_request(f"withdraw/{currency}", params)

    def execute_trade(
        self,
        market: str,
        side: str,
        amount: Union[float, str],
        price: Union[float, str],
        base: int = 0,
    ) -> "Future[Any]":
        """Place an order on ``market``.

        ``base`` is 0 when ``amount`` is expressed in the market currency and
        1 when it is expressed in the base currency.
        """

        try:
            params = {
                "tradetype": side,
                "tradeamount": format_amount(amount),
                "tradeprice": format_amount(price),
                "tradebase": base,
            }
        except ValueError as exc:
            return _failed(_bad_amount("execute_trade", exc))
        return self._private_request(f"trade/{market}", params)

    def get_trade_history(self, page: Union[int, str] = 1) -> "Future[Any]":
        return self._private_request("tradehistory", {"page": page or 1})

    def get_deposit_history(self, page: Union[int, str] = 1) -> "Future[Any]":
        return self._private_request("getdeposithistory", {"page": page or 1})

    def get_withdrawal_history(self, page: Union[int, str] = 1) -> "Future[Any]":
        return self._private_request("getwithdrawalhistory", {"page": page or 1})

    def get_wallet_status(self, currency: str = "") -> "Future[Any]":
        """Coin info and wallet status; see :class:`WalletStatus` for the codes."""

        suffix = f"/{currency}" if currency else ""
        return self._private_request(f"walletstatus{suffix}")


def _failed(error: NovaExchangeError) -> "Future[Any]":
    future: "Future[Any]" = Future()
    future.set_exception(error)
    return future


def _bad_amount(caller: str, exc: ValueError) -> ClientMisuseError:
    error = ClientMisuseError(f"NovaExchangeAPI.{caller}() {exc}")
    error.__cause__ = exc
    return error


__all__ = [
    "NovaExchangeAPI",
    "RequestDescriptor",
    "Transport",
    "UrllibTransport",
    "WalletStatus",
    "generate_nonce",
    "sign_message",
    "transport_error_code",
]
