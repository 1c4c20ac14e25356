"""
Data Model and Abstract Interface for the Poloniex API

Provides the typed records returned by the client, the exceptions it raises,
and the abstract interface every Poloniex client implementation follows.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, List, Optional, Tuple, Union
import logging

logger = logging.getLogger(__name__)


# Poloniex endpoints.
URL = "https://poloniex.com"
PUBLIC_API = URL + "/public"
TRADE_API = URL + "/tradingApi"


class ChartDataPeriod(IntEnum):
    """Candlestick periods accepted by returnChartData, in seconds."""
    PERIOD_300 = 300
    PERIOD_900 = 900
    PERIOD_1800 = 1800
    PERIOD_7200 = 7200
    PERIOD_14400 = 14400
    PERIOD_86400 = 86400


class BalanceAccount(Enum):
    """Account selector for returnCompleteBalances."""
    ALL = "all"
    EXCHANGE_ONLY = ""


@dataclass(frozen=True)
class Ticker:
    """Market ticker. Prices and volumes are kept as the strings Poloniex sends."""
    currency: str
    id: int = 0
    last: str = ""
    lowest_ask: str = ""
    highest_bid: str = ""
    percent_change: str = ""
    base_volume: str = ""
    quote_volume: str = ""
    is_frozen: str = ""
    high_24hr: str = ""
    low_24hr: str = ""


@dataclass(frozen=True)
class Volume24h:
    """
    Response of return24hVolume.

    primary_currencies_totals holds the totals of the primary currencies,
    e.g. {"totalBTC": "7364.48394883"}.

    markets holds the volume of every market by currency,
    e.g. {"BTC_LTC": {"BTC": "2.23248854", "LTC": "87.10381314"}}.
    """
    primary_currencies_totals: Dict[str, str] = field(default_factory=dict)
    markets: Dict[str, Dict[str, str]] = field(default_factory=dict)


@dataclass(frozen=True)
class Order:
    """A price level of an order book."""
    value: float
    amount: float

    @property
    def total(self) -> float:
        """Quote-currency value of the level."""
        return self.value * self.amount


@dataclass(frozen=True)
class OrderBook:
    """Order book of a market, sides kept in upstream order."""
    pair: str
    asks: Tuple[Order, ...] = ()
    bids: Tuple[Order, ...] = ()
    is_frozen: str = ""
    seq: int = 0

    @property
    def best_ask(self) -> Optional[Order]:
        return self.asks[0] if self.asks else None

    @property
    def best_bid(self) -> Optional[Order]:
        return self.bids[0] if self.bids else None

    @property
    def spread(self) -> Optional[float]:
        """Difference between best ask and best bid."""
        if not self.asks or not self.bids:
            return None
        return self.asks[0].value - self.bids[0].value


@dataclass(frozen=True)
class TradeHistory:
    """A public trade."""
    global_trade_id: int
    trade_id: int
    date: str
    type: str
    rate: float
    amount: float
    total: float


@dataclass(frozen=True)
class ChartData:
    """OHLCV candlestick."""
    date: int
    high: float
    low: float
    open: float
    close: float
    volume: float
    quote_volume: float
    weighted_average: float


@dataclass(frozen=True)
class Currency:
    """Currency information. The status flags are sent as 0/1 integers."""
    id: int
    name: str
    tx_fee: str = ""
    min_conf: int = 0
    deposit_address: str = ""
    disabled: int = 0
    delisted: int = 0
    frozen: int = 0

    @property
    def is_disabled(self) -> bool:
        return self.disabled != 0

    @property
    def is_delisted(self) -> bool:
        return self.delisted != 0

    @property
    def is_frozen(self) -> bool:
        return self.frozen != 0


@dataclass(frozen=True)
class Loan:
    """A loan offer or demand."""
    rate: float
    amount: float
    range_min: int = 0
    range_max: int = 0


@dataclass(frozen=True)
class LoanOrders:
    """Loan offers and demands of a currency."""
    offers: Tuple[Loan, ...] = ()
    demands: Tuple[Loan, ...] = ()


@dataclass(frozen=True)
class Balance:
    """Available balance of a currency."""
    currency: str
    amount: float


@dataclass(frozen=True)
class CompleteBalance:
    """Balance of a currency including funds on orders and its BTC estimate."""
    currency: str
    available: float
    on_orders: float
    btc_value: float

    @property
    def total(self) -> float:
        return self.available + self.on_orders


class ExchangeError(Exception):
    """Base exception for exchange errors."""
    pass


class InvalidRequestError(ExchangeError):
    """Invalid call parameters, detected before any request is sent."""
    pass


class UnexpectedResponseError(ExchangeError):
    """The response does not have the shape expected for the command."""
    pass


class APIError(ExchangeError):
    """Poloniex answered with an {"error": "..."} envelope."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (HTTP {self.status_code})"


class BasePoloniex(ABC):
    """
    Abstract interface to the Poloniex API.

    Public calls need no credentials. Private calls are signed with the
    API key and secret given at construction.
    """

    def __init__(self, api_key: str = "", api_secret: str = ""):
        """
        Initialize the client interface.

        Args:
            api_key: Poloniex API key
            api_secret: Poloniex API secret
        """
        self.api_key = api_key or ""
        self.api_secret = api_secret or ""

        if not self.api_key or not self.api_secret:
            logger.warning(
                "Poloniex API credentials are missing. Only public calls will work."
            )

    @property
    def has_credentials(self) -> bool:
        """Whether both key and secret are set."""
        return bool(self.api_key and self.api_secret)

    # ========== Public Calls ==========

    @abstractmethod
    def get_tickers(self) -> List[Ticker]:
        """Return the ticker of every market."""
        pass

    @abstractmethod
    def get_24h_volume(self) -> Volume24h:
        """Return the 24-hour volume of every market, plus primary currency totals."""
        pass

    @abstractmethod
    def get_order_book(self, currency_pair: str, depth: int) -> OrderBook:
        """
        Return the order book of a market, with its sequence number and frozen flag.

        Args:
            currency_pair: Market, e.g. "BTC_LTC". "all" is rejected.
            depth: Number of levels per side
        """
        pass

    @abstractmethod
    def get_all_order_books(self, depth: int) -> List[OrderBook]:
        """Return the order book of every market."""
        pass

    @abstractmethod
    def get_trade_history(
        self,
        currency_pair: str,
        start: Optional[int] = None,
        end: Optional[int] = None,
    ) -> List[TradeHistory]:
        """
        Return the past 200 trades of a market, or up to 50,000 trades
        between the UNIX timestamps start and end.
        """
        pass

    @abstractmethod
    def get_chart_data(
        self,
        currency_pair: str,
        start: int,
        end: int,
        period: Union[ChartDataPeriod, int],
    ) -> List[ChartData]:
        """Return candlesticks of a market between two UNIX timestamps."""
        pass

    @abstractmethod
    def get_currencies(self) -> List[Currency]:
        """Return information about every currency."""
        pass

    @abstractmethod
    def get_loan_orders(self, currency: str) -> LoanOrders:
        """Return the loan offers and demands of a currency."""
        pass

    # ========== Private Calls ==========

    @abstractmethod
    def get_balances(self) -> List[Balance]:
        """Return the available balances."""
        pass

    @abstractmethod
    def get_complete_balances(
        self, account: Union[BalanceAccount, str] = BalanceAccount.EXCHANGE_ONLY
    ) -> List[CompleteBalance]:
        """Return balances including funds on orders and their BTC value."""
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} credentials={self.has_credentials}>"
