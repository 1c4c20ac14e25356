"""
Response Normalizer

Converts the JSON returned by Poloniex into the typed records of base.py.

Poloniex is loose with its types: prices arrive as strings or numbers,
order book levels are untyped arrays, and return24hVolume mixes scalar
totals with per-market objects in a single map. Each command is first read
into a wire shape that keeps the literal field names, then converted.

A payload whose top-level shape does not match the command raises
UnexpectedResponseError. Inside a well-formed payload, a record whose
numeric strings cannot be parsed is dropped and decoding continues.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, TypeVar, Union

from .base import (
    Balance,
    ChartData,
    CompleteBalance,
    Currency,
    Loan,
    LoanOrders,
    Order,
    OrderBook,
    Ticker,
    TradeHistory,
    UnexpectedResponseError,
    Volume24h,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ========== Field Helpers ==========

def parse_float(value: Any) -> float:
    """
    Parse a decimal string (or JSON number) to float.

    Strings must be bare decimals: no surrounding whitespace and no digit
    underscores, even though float() would take both.

    Raises:
        ValueError: value is not a number nor a numeric string, or is out of float range
    """
    if value is None or isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, str) and (value != value.strip() or "_" in value):
        raise ValueError(f"not a number: {value!r}")
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"not a number: {value!r}")
    except OverflowError:
        raise ValueError(f"out of float range: {value!r}")

    if math.isinf(parsed) and not (isinstance(value, str) and "inf" in value.lower()):
        raise ValueError(f"out of float range: {value!r}")
    return parsed


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _expect_object(payload: Any, what: str) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise UnexpectedResponseError(
            f"unexpected response shape for {what}: expected an object, got {type(payload).__name__}"
        )
    return payload


def _expect_array(payload: Any, what: str) -> List[Any]:
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise UnexpectedResponseError(
            f"unexpected response shape for {what}: expected an array, got {type(payload).__name__}"
        )
    return payload


def _wire_str(raw: Dict[str, Any], key: str, what: str) -> str:
    value = raw.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise UnexpectedResponseError(f"{what}: field {key!r} should be a string, got {value!r}")
    return value


def _wire_int(raw: Dict[str, Any], key: str, what: str) -> int:
    value = raw.get(key)
    if value is None:
        return 0
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if not isinstance(value, int) or isinstance(value, bool):
        raise UnexpectedResponseError(f"{what}: field {key!r} should be an integer, got {value!r}")
    return value


def _wire_number(raw: Dict[str, Any], key: str, what: str) -> float:
    value = raw.get(key)
    if value is None:
        return 0.0
    if not _is_number(value):
        raise UnexpectedResponseError(f"{what}: field {key!r} should be a number, got {value!r}")
    try:
        return float(value)
    except OverflowError:
        raise UnexpectedResponseError(f"{what}: field {key!r} is out of float range")


def _keep_parsed(records: Iterable[Any], convert: Callable[[Any], T], what: str) -> List[T]:
    """Convert records one by one, dropping those that raise ValueError."""
    parsed = []
    for record in records:
        try:
            parsed.append(convert(record))
        except ValueError as e:
            logger.debug(f"Dropping malformed {what} record {record!r}: {e}")
    return parsed


# ========== returnTicker ==========

def parse_tickers(payload: Any) -> List[Ticker]:
    """Parse returnTicker. The currency comes from the map key."""
    tickers = []
    for pair, raw in _expect_object(payload, "returnTicker").items():
        what = f"returnTicker[{pair}]"
        raw = _expect_object(raw, what)
        tickers.append(
            Ticker(
                currency=pair,
                id=_wire_int(raw, "id", what),
                last=_wire_str(raw, "last", what),
                lowest_ask=_wire_str(raw, "lowestAsk", what),
                highest_bid=_wire_str(raw, "highestBid", what),
                percent_change=_wire_str(raw, "percentChange", what),
                base_volume=_wire_str(raw, "baseVolume", what),
                quote_volume=_wire_str(raw, "quoteVolume", what),
                is_frozen=_wire_str(raw, "isFrozen", what),
                high_24hr=_wire_str(raw, "high24hr", what),
                low_24hr=_wire_str(raw, "low24hr", what),
            )
        )
    return tickers


# ========== return24hVolume ==========

@dataclass(frozen=True)
class MarketVolume:
    """Volume of a market by currency."""
    volumes: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PrimaryTotal:
    """Total volume of a primary currency."""
    total: str


VolumeEntry = Union[MarketVolume, PrimaryTotal]


def probe_volume_entry(key: str, value: Any) -> VolumeEntry:
    """
    Tell a market volume from a primary currency total.

    An object of strings is a market volume, a bare string is a total.
    A null entry is an empty market volume. Anything else makes the whole
    response unusable.
    """
    if value is None:
        return MarketVolume()
    if isinstance(value, dict) and all(isinstance(v, str) for v in value.values()):
        return MarketVolume(volumes=dict(value))
    if isinstance(value, str):
        return PrimaryTotal(total=value)
    raise UnexpectedResponseError(
        f"return24hVolume[{key}]: expected an object of strings or a string, got {value!r}"
    )


def parse_24h_volume(payload: Any) -> Volume24h:
    """Parse return24hVolume into primary currency totals and market volumes."""
    totals: Dict[str, str] = {}
    markets: Dict[str, Dict[str, str]] = {}

    for key, value in _expect_object(payload, "return24hVolume").items():
        entry = probe_volume_entry(key, value)
        if isinstance(entry, MarketVolume):
            markets[key] = entry.volumes
        else:
            totals[key] = entry.total

    return Volume24h(primary_currencies_totals=totals, markets=markets)


# ========== returnOrderBook ==========

def parse_order_entry(entry: Any) -> Order:
    """
    Parse a [price, amount] order book level.

    The price comes as a string or a number, the amount as a number.

    Raises:
        ValueError: too few elements, unparsable price or non-numeric amount
    """
    if not isinstance(entry, (list, tuple)) or len(entry) < 2:
        raise ValueError(f"expected [price, amount], got {entry!r}")

    value = parse_float(entry[0])

    amount = entry[1]
    if not _is_number(amount):
        raise ValueError(f"amount should be a number, got {amount!r}")

    return Order(value=value, amount=parse_float(amount))


@dataclass
class _WireOrderBook:
    asks: List[Any]
    bids: List[Any]
    isFrozen: str
    seq: int

    @classmethod
    def from_json(cls, payload: Any, what: str) -> "_WireOrderBook":
        raw = _expect_object(payload, what)
        return cls(
            asks=_expect_array(raw.get("asks"), f"{what}.asks"),
            bids=_expect_array(raw.get("bids"), f"{what}.bids"),
            isFrozen=_wire_str(raw, "isFrozen", what),
            seq=_wire_int(raw, "seq", what),
        )

    def to_order_book(self, pair: str) -> OrderBook:
        return OrderBook(
            pair=pair,
            asks=tuple(_keep_parsed(self.asks, parse_order_entry, f"{pair} ask")),
            bids=tuple(_keep_parsed(self.bids, parse_order_entry, f"{pair} bid")),
            is_frozen=self.isFrozen,
            seq=self.seq,
        )


def parse_order_book(payload: Any, pair: str) -> OrderBook:
    """Parse returnOrderBook for a single market."""
    return _WireOrderBook.from_json(payload, "returnOrderBook").to_order_book(pair)


def parse_all_order_books(payload: Any) -> List[OrderBook]:
    """Parse returnOrderBook with currencyPair=all. Pairs come from the map keys."""
    return [
        _WireOrderBook.from_json(raw, f"returnOrderBook[{pair}]").to_order_book(pair)
        for pair, raw in _expect_object(payload, "returnOrderBook").items()
    ]


# ========== returnTradeHistory ==========

@dataclass
class _WireTrade:
    globalTradeID: int
    tradeID: int
    date: str
    type: str
    rate: Any
    amount: Any
    total: Any

    @classmethod
    def from_json(cls, payload: Any) -> "_WireTrade":
        what = "returnTradeHistory"
        raw = _expect_object(payload, what)
        return cls(
            globalTradeID=_wire_int(raw, "globalTradeID", what),
            tradeID=_wire_int(raw, "tradeID", what),
            date=_wire_str(raw, "date", what),
            type=_wire_str(raw, "type", what),
            rate=raw.get("rate"),
            amount=raw.get("amount"),
            total=raw.get("total"),
        )

    def to_trade(self) -> TradeHistory:
        rate = parse_float(self.rate)
        amount = parse_float(self.amount)
        total = parse_float(self.total)

        return TradeHistory(
            global_trade_id=self.globalTradeID,
            trade_id=self.tradeID,
            date=self.date,
            type=self.type,
            rate=rate,
            amount=amount,
            total=total,
        )


def parse_trade_history(payload: Any) -> List[TradeHistory]:
    """Parse returnTradeHistory, dropping trades with unparsable rate, amount or total."""
    wire = [_WireTrade.from_json(raw) for raw in _expect_array(payload, "returnTradeHistory")]
    return _keep_parsed(wire, _WireTrade.to_trade, "trade")


# ========== returnChartData ==========

def parse_chart_data(payload: Any) -> List[ChartData]:
    """Parse returnChartData. Every field is a JSON number."""
    candles = []
    what = "returnChartData"
    for raw in _expect_array(payload, what):
        raw = _expect_object(raw, what)
        candles.append(
            ChartData(
                date=_wire_int(raw, "date", what),
                high=_wire_number(raw, "high", what),
                low=_wire_number(raw, "low", what),
                open=_wire_number(raw, "open", what),
                close=_wire_number(raw, "close", what),
                volume=_wire_number(raw, "volume", what),
                quote_volume=_wire_number(raw, "quoteVolume", what),
                weighted_average=_wire_number(raw, "weightedAverage", what),
            )
        )
    return candles


# ========== returnCurrencies ==========

def parse_currencies(payload: Any) -> List[Currency]:
    """Parse returnCurrencies. The name comes from the map key."""
    currencies = []
    for name, raw in _expect_object(payload, "returnCurrencies").items():
        what = f"returnCurrencies[{name}]"
        raw = _expect_object(raw, what)
        currencies.append(
            Currency(
                id=_wire_int(raw, "id", what),
                name=name,
                tx_fee=_wire_str(raw, "txFee", what),
                min_conf=_wire_int(raw, "minConf", what),
                deposit_address=_wire_str(raw, "depositAddress", what),
                disabled=_wire_int(raw, "disabled", what),
                delisted=_wire_int(raw, "delisted", what),
                frozen=_wire_int(raw, "frozen", what),
            )
        )
    return currencies


# ========== returnLoanOrders ==========

@dataclass
class _WireLoan:
    rate: Any
    amount: Any
    rangeMin: int
    rangeMax: int

    @classmethod
    def from_json(cls, payload: Any, what: str) -> "_WireLoan":
        raw = _expect_object(payload, what)
        return cls(
            rate=raw.get("rate"),
            amount=raw.get("amount"),
            rangeMin=_wire_int(raw, "rangeMin", what),
            rangeMax=_wire_int(raw, "rangeMax", what),
        )

    def to_loan(self) -> Loan:
        rate = parse_float(self.rate)
        amount = parse_float(self.amount)
        return Loan(rate=rate, amount=amount, range_min=self.rangeMin, range_max=self.rangeMax)


def parse_loan_orders(payload: Any) -> LoanOrders:
    """Parse returnLoanOrders, dropping loans with unparsable rate or amount."""
    raw = _expect_object(payload, "returnLoanOrders")

    offers = [
        _WireLoan.from_json(o, "returnLoanOrders.offers")
        for o in _expect_array(raw.get("offers"), "returnLoanOrders.offers")
    ]
    demands = [
        _WireLoan.from_json(d, "returnLoanOrders.demands")
        for d in _expect_array(raw.get("demands"), "returnLoanOrders.demands")
    ]

    return LoanOrders(
        offers=tuple(_keep_parsed(offers, _WireLoan.to_loan, "loan offer")),
        demands=tuple(_keep_parsed(demands, _WireLoan.to_loan, "loan demand")),
    )


# ========== returnBalances ==========

def parse_balances(payload: Any) -> List[Balance]:
    """Parse returnBalances, dropping currencies with an unparsable amount."""
    return _keep_parsed(
        _expect_object(payload, "returnBalances").items(),
        lambda item: Balance(currency=item[0], amount=parse_float(item[1])),
        "balance",
    )


# ========== returnCompleteBalances ==========

@dataclass
class _WireCompleteBalance:
    currency: str
    available: Any
    onOrders: Any
    btcValue: Any

    @classmethod
    def from_json(cls, currency: str, payload: Any) -> "_WireCompleteBalance":
        raw = _expect_object(payload, f"returnCompleteBalances[{currency}]")
        return cls(
            currency=currency,
            available=raw.get("available"),
            onOrders=raw.get("onOrders"),
            btcValue=raw.get("btcValue"),
        )

    def to_complete_balance(self) -> CompleteBalance:
        available = parse_float(self.available)
        on_orders = parse_float(self.onOrders)
        btc_value = parse_float(self.btcValue)

        return CompleteBalance(
            currency=self.currency,
            available=available,
            on_orders=on_orders,
            btc_value=btc_value,
        )


def parse_complete_balances(payload: Any) -> List[CompleteBalance]:
    """Parse returnCompleteBalances, dropping currencies with any unparsable amount."""
    wire = [
        _WireCompleteBalance.from_json(currency, raw)
        for currency, raw in _expect_object(payload, "returnCompleteBalances").items()
    ]
    return _keep_parsed(wire, _WireCompleteBalance.to_complete_balance, "complete balance")
