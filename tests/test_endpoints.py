"""URL and form construction for every endpoint method."""

from __future__ import annotations

import urllib.parse

import pytest

PRIVATE = "https://novaexchange.com/remote/v2/private/"
MARKETS = "https://novaexchange.com/remote/v2/markets/"


def _form(call) -> dict:
    form = urllib.parse.parse_qs(call["data"].decode())
    form.pop("apikey")
    form.pop("signature")
    return {key: values[0] for key, values in form.items()}


@pytest.mark.parametrize(
    ("name", "args", "url", "form"),
    [
        ("get_market_summary", ("BTC_XZC",), MARKETS + "info/BTC_XZC/?nonce=1700000000", {}),
        ("get_market_order_history", ("BTC_XZC",), MARKETS + "orderhistory/BTC_XZC/?nonce=1700000000", {}),
        ("get_market_open_orders", ("BTC_XZC", "SELL"), MARKETS + "openorders/BTC_XZC/SELL/?nonce=1700000000", {}),
        ("get_market_open_orders", ("BTC_XZC",), MARKETS + "openorders/BTC_XZC/BOTH/?nonce=1700000000", {}),
        ("get_balances", (), PRIVATE + "getbalances/?nonce=1700000000", {}),
        ("get_balance", ("BTC",), PRIVATE + "getbalance/BTC/?nonce=1700000000", {}),
        ("get_balance", (), PRIVATE + "getbalance/?nonce=1700000000", {}),
        ("get_deposits", (), PRIVATE + "getdeposits/?nonce=1700000000", {}),
        ("get_withdrawals", (), PRIVATE + "getwithdrawals/?nonce=1700000000", {}),
        ("get_new_deposit_address", ("XZC",), PRIVATE + "getnewdepositaddress/XZC/?nonce=1700000000", {}),
        ("get_deposit_address", ("XZC",), PRIVATE + "getdepositaddress/XZC/?nonce=1700000000", {}),
        ("get_open_orders", (), PRIVATE + "myopenorders/?nonce=1700000000", {"page": "1"}),
        ("get_open_orders", (3,), PRIVATE + "myopenorders/?nonce=1700000000", {"page": "3"}),
        ("get_open_orders", (1, "BTC_XZC"), PRIVATE + "myopenorders_market/BTC_XZC/?nonce=1700000000", {}),
        (
            "execute_withdrawal",
            ("BTC", 0.5, "1BoatSLRHtKNngkdXEeobR76b53LETtpyT"),
            PRIVATE + "withdraw/BTC/?nonce=1700000000",
            {"currency": "BTC", "amount": "0.5", "address": "1BoatSLRHtKNngkdXEeobR76b53LETtpyT"},
        ),
        (
            "execute_trade",
            ("BTC_XZC", "BUY", 8000.0, 0.00000008, 1),
            PRIVATE + "trade/BTC_XZC/?nonce=1700000000",
            {"tradetype": "BUY", "tradeamount": "8000", "tradeprice": "0.00000008", "tradebase": "1"},
        ),
        ("get_trade_history", (), PRIVATE + "tradehistory/?nonce=1700000000", {"page": "1"}),
        ("get_deposit_history", (2,), PRIVATE + "getdeposithistory/?nonce=1700000000", {"page": "2"}),
        ("get_withdrawal_history", (), PRIVATE + "getwithdrawalhistory/?nonce=1700000000", {"page": "1"}),
        ("get_wallet_status", (), PRIVATE + "walletstatus/?nonce=1700000000", {}),
        ("get_wallet_status", ("XZC",), PRIVATE + "walletstatus/XZC/?nonce=1700000000", {}),
    ],
)
def test_endpoint_request_shape(api, transport, frozen_time, name, args, url, form):
    getattr(api, name)(*args).result(timeout=5)

    call = transport.calls[0]
    assert call["url"] == url
    assert "nonce=" in urllib.parse.urlsplit(call["url"]).query
    assert _form(call) == form


@pytest.mark.parametrize(
    ("args", "url"),
    [
        ((), MARKETS + "markets/"),
        (("BTC",), MARKETS + "markets/BTC/"),
    ],
)
def test_market_listing_has_no_nonce(api, transport, args, url):
    api.list_markets_summary(*args).result(timeout=5)

    call = transport.calls[0]
    assert call["url"] == url
    assert "nonce" not in call["url"]
    assert set(urllib.parse.parse_qs(call["data"].decode())) == {"apikey", "signature"}


def test_cancel_order_targets_its_own_order_id(api, transport, frozen_time):
    api.cancel_order(4242).result(timeout=5)

    assert transport.calls[0]["url"] == PRIVATE + "cancelorder/4242/?nonce=1700000000"
    assert _form(transport.calls[0]) == {}


def test_string_amounts_pass_through(api, transport):
    api.execute_trade("BTC_XZC", "SELL", "8000.00000000", "0.00000008").result(timeout=5)

    form = _form(transport.calls[0])
    assert form["tradeamount"] == "8000.00000000"
    assert form["tradebase"] == "0"
