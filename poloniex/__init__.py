"""
Poloniex API Client

This package provides a synchronous client for the Poloniex HTTP API:

- PoloniexClient: public market data and account balances
- Typed, immutable records for every response
- DataFrame helpers for chart data, trades and order books

Usage:
    from poloniex import PoloniexClient, ChartDataPeriod, BalanceAccount

    with PoloniexClient(api_key="your_api_key", api_secret="your_api_secret") as client:
        # Public calls
        tickers = client.get_tickers()
        book = client.get_order_book("BTC_LTC", depth=20)
        candles = client.get_chart_data(
            "BTC_XMR", 1405699200, 1406699200, ChartDataPeriod.PERIOD_14400
        )

        # Private calls
        balances = client.get_complete_balances(BalanceAccount.ALL)
"""

from .base import (
    # Endpoints
    URL,
    PUBLIC_API,
    TRADE_API,
    # Enums
    ChartDataPeriod,
    BalanceAccount,
    # Data Classes
    Ticker,
    Volume24h,
    Order,
    OrderBook,
    TradeHistory,
    ChartData,
    Currency,
    Loan,
    LoanOrders,
    Balance,
    CompleteBalance,
    # Exceptions
    ExchangeError,
    InvalidRequestError,
    UnexpectedResponseError,
    APIError,
    # Base Class
    BasePoloniex,
)

from .client import PoloniexClient
from .request import ApiRequest, NonceGenerator, RequestBuilder
from .signer import sign

from .frames import (
    chart_data_to_frame,
    trade_history_to_frame,
    order_book_to_frame,
    fetch_chart_frame,
)

__all__ = [
    # Endpoints
    "URL",
    "PUBLIC_API",
    "TRADE_API",
    # Enums
    "ChartDataPeriod",
    "BalanceAccount",
    # Data Classes
    "Ticker",
    "Volume24h",
    "Order",
    "OrderBook",
    "TradeHistory",
    "ChartData",
    "Currency",
    "Loan",
    "LoanOrders",
    "Balance",
    "CompleteBalance",
    # Exceptions
    "ExchangeError",
    "InvalidRequestError",
    "UnexpectedResponseError",
    "APIError",
    # Client Classes
    "BasePoloniex",
    "PoloniexClient",
    "ApiRequest",
    "NonceGenerator",
    "RequestBuilder",
    "sign",
    # DataFrames
    "chart_data_to_frame",
    "trade_history_to_frame",
    "order_book_to_frame",
    "fetch_chart_frame",
]

__version__ = "1.0.0"
