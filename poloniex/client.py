"""
Poloniex Client Implementation

Synchronous client for the Poloniex HTTP API built on requests. Covers the
public market data commands and the balance commands of the trading API.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

import requests

from .base import (
    URL,
    BasePoloniex,
    BalanceAccount,
    Balance,
    ChartData,
    ChartDataPeriod,
    CompleteBalance,
    Currency,
    InvalidRequestError,
    LoanOrders,
    OrderBook,
    Ticker,
    TradeHistory,
    Volume24h,
)
from .request import NonceGenerator, RequestBuilder
from .transport import send
from . import normalizer

logger = logging.getLogger(__name__)


class PoloniexClient(BasePoloniex):
    """
    Poloniex API client.

    Every call blocks until the HTTP roundtrip completes. There is no
    caching, rate limiting or retry: a failed request raises right away.

    Example:
        with PoloniexClient(api_key, api_secret) as client:
            book = client.get_order_book("BTC_LTC", depth=10)
            balances = client.get_balances()
    """

    def __init__(
        self,
        api_key: str = "",
        api_secret: str = "",
        session: Optional[requests.Session] = None,
        base_url: str = URL,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the Poloniex client.

        Args:
            api_key: Poloniex API key (only needed for private calls)
            api_secret: Poloniex API secret (only needed for private calls)
            session: HTTP session to send requests with; one is created if omitted
            base_url: Poloniex root URL
            timeout: Request timeout in seconds passed to the session (None keeps its default)
        """
        super().__init__(api_key=api_key, api_secret=api_secret)

        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()
        self.timeout = timeout
        self._requests = RequestBuilder(
            api_key=self.api_key,
            api_secret=self.api_secret,
            base_url=base_url,
            nonces=NonceGenerator(),
        )

    @classmethod
    def from_config(cls, config, session: Optional[requests.Session] = None) -> "PoloniexClient":
        """Create a client from a ClientConfig."""
        return cls(
            api_key=config.api_key,
            api_secret=config.api_secret,
            session=session,
            base_url=config.base_url,
            timeout=config.timeout,
        )

    @property
    def base_url(self) -> str:
        return self._requests.base_url

    # ========== Session Management ==========

    def close(self) -> None:
        """Close the HTTP session if the client created it."""
        if self._owns_session:
            self._session.close()
            logger.debug("Closed Poloniex HTTP session")

    def __enter__(self) -> "PoloniexClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ========== Calls ==========

    def _public_call(self, command: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        request = self._requests.public(command, params)
        return send(self._session, request, timeout=self.timeout)

    def _trade_call(self, command: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        request = self._requests.trade(command, params)
        return send(self._session, request, timeout=self.timeout)

    # ========== Market Data ==========

    def get_tickers(self) -> List[Ticker]:
        """Get the ticker of every market."""
        return normalizer.parse_tickers(self._public_call("returnTicker"))

    def get_24h_volume(self) -> Volume24h:
        """Get 24-hour volumes by market and primary currency totals."""
        return normalizer.parse_24h_volume(self._public_call("return24hVolume"))

    def get_order_book(self, currency_pair: str, depth: int) -> OrderBook:
        """Get the order book of a single market."""
        if currency_pair == "all":
            raise InvalidRequestError(
                "currency pair 'all' is not supported here, use get_all_order_books"
            )
        _check_depth(depth)

        payload = self._public_call(
            "returnOrderBook", {"currencyPair": currency_pair, "depth": depth}
        )
        return normalizer.parse_order_book(payload, currency_pair)

    def get_all_order_books(self, depth: int) -> List[OrderBook]:
        """Get the order book of every market."""
        _check_depth(depth)

        payload = self._public_call("returnOrderBook", {"currencyPair": "all", "depth": depth})
        return normalizer.parse_all_order_books(payload)

    def get_trade_history(
        self,
        currency_pair: str,
        start: Optional[int] = None,
        end: Optional[int] = None,
    ) -> List[TradeHistory]:
        """
        Get public trades of a market.

        Without start and end the last 200 trades are returned. With both,
        up to 50,000 trades in the range are returned.
        """
        params: Dict[str, Any] = {"currencyPair": currency_pair}
        if start and end:
            params["start"] = start
            params["end"] = end
        elif start or end:
            raise InvalidRequestError("start and end must be given together")

        return normalizer.parse_trade_history(self._public_call("returnTradeHistory", params))

    def get_chart_data(
        self,
        currency_pair: str,
        start: int,
        end: int,
        period: Union[ChartDataPeriod, int],
    ) -> List[ChartData]:
        """Get candlesticks of a market between two UNIX timestamps."""
        try:
            period = ChartDataPeriod(period)
        except ValueError:
            valid = ", ".join(str(p.value) for p in ChartDataPeriod)
            raise InvalidRequestError(f"invalid chart period {period!r}, expected one of {valid}")

        params = {
            "currencyPair": currency_pair,
            "start": start,
            "end": end,
            "period": period.value,
        }
        return normalizer.parse_chart_data(self._public_call("returnChartData", params))

    def get_currencies(self) -> List[Currency]:
        """Get information about every currency."""
        return normalizer.parse_currencies(self._public_call("returnCurrencies"))

    def get_loan_orders(self, currency: str) -> LoanOrders:
        """Get loan offers and demands of a currency."""
        payload = self._public_call("returnLoanOrders", {"currency": currency})
        return normalizer.parse_loan_orders(payload)

    # ========== Account & Balance ==========

    def get_balances(self) -> List[Balance]:
        """Get available balances."""
        return normalizer.parse_balances(self._trade_call("returnBalances"))

    def get_complete_balances(
        self, account: Union[BalanceAccount, str] = BalanceAccount.EXCHANGE_ONLY
    ) -> List[CompleteBalance]:
        """Get balances with funds on orders and BTC value, for the exchange account or all accounts."""
        try:
            account = BalanceAccount(account)
        except ValueError:
            raise InvalidRequestError(f"invalid account {account!r}, expected 'all' or ''")

        params = {}
        if account.value:
            params["account"] = account.value

        return normalizer.parse_complete_balances(
            self._trade_call("returnCompleteBalances", params)
        )


def _check_depth(depth: int) -> None:
    if isinstance(depth, bool) or not isinstance(depth, int) or depth < 0:
        raise InvalidRequestError(f"depth must be a non-negative integer, got {depth!r}")
