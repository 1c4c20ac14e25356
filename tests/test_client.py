"""End-to-end tests for PoloniexClient against a stub session."""
import logging
from urllib.parse import parse_qs

import pytest

from conftest import FakeResponse, FakeSession
from config import ClientConfig
from poloniex import (
    APIError,
    BalanceAccount,
    ChartDataPeriod,
    InvalidRequestError,
    Order,
    PoloniexClient,
    UnexpectedResponseError,
)


ORDER_BOOK = {
    "asks": [["0.02589999", 12.5], ["0.0259", 3.0]],
    "bids": [["0.0251", 1.0]],
    "isFrozen": "0",
    "seq": 18849,
}


@pytest.fixture
def session():
    """Create a stub session with a response for every command."""
    return FakeSession({
        "returnTicker": {"BTC_LTC": {"id": 50, "last": "0.0251"}},
        "return24hVolume": {"BTC_LTC": {"BTC": "2.23", "LTC": "87.10"}, "totalBTC": "81.89"},
        "returnOrderBook": ORDER_BOOK,
        "returnTradeHistory": [{
            "globalTradeID": 1, "tradeID": 2, "date": "2014-02-10 04:23:23",
            "type": "buy", "rate": "0.00007600", "amount": "140", "total": "0.01064",
        }],
        "returnChartData": [{"date": 1405699200, "high": 1, "low": 1, "open": 1, "close": 1,
                             "volume": 1, "quoteVolume": 1, "weightedAverage": 1}],
        "returnCurrencies": {"1CR": {"id": 1, "name": "1CRedit", "txFee": "0.01", "minConf": 3,
                                     "depositAddress": None, "disabled": 0, "delisted": 1,
                                     "frozen": 0}},
        "returnLoanOrders": {"offers": [{"rate": "0.0002", "amount": "64.6", "rangeMin": 2,
                                         "rangeMax": 8}], "demands": []},
        "returnBalances": {"BTC": "0.59098578", "LTC": "3.31117268"},
        "returnCompleteBalances": {"LTC": {"available": "5.015", "onOrders": "1.0025",
                                           "btcValue": "0.078"}},
    })


@pytest.fixture
def client(session):
    """Create a client with credentials on the stub session."""
    return PoloniexClient(api_key="key", api_secret="secret", session=session)


def sent_form(session):
    """Decode the form body of the last request."""
    return {k: v[0] for k, v in parse_qs(session.calls[-1]["data"]).items()}


class TestConstruction:
    """Tests for client construction."""

    def test_empty_credentials_warn(self, session, caplog):
        """Missing credentials should log a warning, not raise."""
        with caplog.at_level(logging.WARNING, logger="poloniex"):
            client = PoloniexClient(session=session)
        assert not client.has_credentials
        assert any("Only public calls" in r.message for r in caplog.records)

    def test_public_calls_work_without_credentials(self, session):
        """Public calls should succeed end to end without credentials."""
        client = PoloniexClient(session=session)
        tickers = client.get_tickers()
        assert tickers[0].currency == "BTC_LTC"

    def test_credentials_do_not_warn(self, session, caplog):
        with caplog.at_level(logging.WARNING, logger="poloniex"):
            PoloniexClient(api_key="k", api_secret="s", session=session)
        assert not caplog.records

    def test_from_config(self, session):
        """A client should be buildable from ClientConfig."""
        config = ClientConfig(api_key="k", api_secret="s", base_url="http://mirror", timeout=3.0)
        client = PoloniexClient.from_config(config, session=session)
        client.get_tickers()
        assert session.calls[0]["url"] == "http://mirror/public"
        assert session.calls[0]["timeout"] == 3.0

    def test_injected_session_not_closed(self, session):
        """The client should only close sessions it created."""
        with PoloniexClient(session=session):
            pass
        assert not session.closed


class TestOrderBook:
    """Tests for order book calls."""

    def test_pair_matches_input(self, client):
        """The returned pair should be the requested pair."""
        book = client.get_order_book("BTC_LTC", 2)
        assert book.pair == "BTC_LTC"
        assert book.asks[0] == Order(value=0.02589999, amount=12.5)
        assert book.seq == 18849

    def test_query_parameters(self, client, session):
        client.get_order_book("BTC_ETH", 5)
        assert session.calls[0]["params"] == {
            "command": "returnOrderBook", "currencyPair": "BTC_ETH", "depth": "5"
        }

    def test_all_rejected_before_network(self, client, session):
        """Pair 'all' should fail without sending anything."""
        with pytest.raises(InvalidRequestError, match="get_all_order_books"):
            client.get_order_book("all", 10)
        assert session.calls == []

    def test_negative_depth_rejected(self, client, session):
        with pytest.raises(InvalidRequestError):
            client.get_order_book("BTC_LTC", -1)
        assert session.calls == []

    def test_all_order_books(self, client, session):
        """All books should be keyed by pair."""
        session.routes["returnOrderBook"] = {"BTC_LTC": ORDER_BOOK, "BTC_ETH": ORDER_BOOK}
        books = client.get_all_order_books(1)
        assert [b.pair for b in books] == ["BTC_LTC", "BTC_ETH"]
        assert session.calls[0]["params"]["currencyPair"] == "all"


class TestMarketData:
    """Tests for the other public calls."""

    def test_24h_volume(self, client):
        volume = client.get_24h_volume()
        assert volume.primary_currencies_totals == {"totalBTC": "81.89"}
        assert volume.markets == {"BTC_LTC": {"BTC": "2.23", "LTC": "87.10"}}

    def test_trade_history_latest(self, client, session):
        """Without a range, only the pair should be sent."""
        trades = client.get_trade_history("BTC_NXT")
        assert trades[0].amount == 140.0
        assert "start" not in session.calls[0]["params"]

    def test_trade_history_range(self, client, session):
        client.get_trade_history("BTC_NXT", 1410158341, 1410499372)
        params = session.calls[0]["params"]
        assert params["start"] == "1410158341"
        assert params["end"] == "1410499372"

    def test_trade_history_half_range_rejected(self, client, session):
        """Start and end should be given together."""
        with pytest.raises(InvalidRequestError):
            client.get_trade_history("BTC_NXT", start=1410158341)
        assert session.calls == []

    def test_chart_data(self, client, session):
        candles = client.get_chart_data("BTC_XMR", 1405699200, 1406699200, ChartDataPeriod.PERIOD_14400)
        assert candles[0].date == 1405699200
        assert session.calls[0]["params"]["period"] == "14400"

    def test_chart_data_accepts_int_period(self, client, session):
        client.get_chart_data("BTC_XMR", 1, 2, 300)
        assert session.calls[0]["params"]["period"] == "300"

    def test_chart_data_invalid_period(self, client, session):
        with pytest.raises(InvalidRequestError):
            client.get_chart_data("BTC_XMR", 1, 2, 60)
        assert session.calls == []

    def test_currencies(self, client):
        currency = client.get_currencies()[0]
        assert currency.name == "1CR"
        assert currency.is_delisted

    def test_loan_orders(self, client, session):
        loans = client.get_loan_orders("BTC")
        assert loans.offers[0].range_max == 8
        assert session.calls[0]["params"]["currency"] == "BTC"


class TestPrivateCalls:
    """Tests for signed balance calls."""

    def test_balances(self, client, session):
        balances = client.get_balances()
        assert {b.currency: b.amount for b in balances} == {"BTC": 0.59098578, "LTC": 3.31117268}

        call = session.calls[0]
        assert call["method"] == "POST"
        assert call["url"].endswith("/tradingApi")
        assert call["headers"]["Key"] == "key"
        assert sent_form(session)["command"] == "returnBalances"

    def test_complete_balances_default_account(self, client, session):
        """The exchange account should not send an account field."""
        balances = client.get_complete_balances()
        assert balances[0].on_orders == 1.0025
        assert "account" not in sent_form(session)

    def test_complete_balances_all_accounts(self, client, session):
        client.get_complete_balances(BalanceAccount.ALL)
        assert sent_form(session)["account"] == "all"

    def test_complete_balances_string_account(self, client, session):
        client.get_complete_balances("all")
        assert sent_form(session)["account"] == "all"

    def test_complete_balances_invalid_account(self, client, session):
        with pytest.raises(InvalidRequestError):
            client.get_complete_balances("margin")
        assert session.calls == []

    def test_successive_nonces_increase(self, client, session):
        """Nonces of successive private calls should strictly increase."""
        client.get_balances()
        first = int(sent_form(session)["nonce"])
        client.get_balances()
        second = int(sent_form(session)["nonce"])
        assert second > first


class TestErrors:
    """Tests for error reporting."""

    def test_api_error_surfaces_message(self, client, session):
        """The upstream error envelope should become APIError."""
        session.routes["returnBalances"] = FakeResponse(
            {"error": "Invalid API key/secret pair."}, status_code=403
        )
        with pytest.raises(APIError) as exc_info:
            client.get_balances()
        assert exc_info.value.message == "Invalid API key/secret pair."

    def test_shape_mismatch(self, client, session):
        """A list where a map is expected should be an unexpected response."""
        session.routes["returnCurrencies"] = []
        with pytest.raises(UnexpectedResponseError):
            client.get_currencies()
