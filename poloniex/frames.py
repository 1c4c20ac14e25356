"""
DataFrame Conversion for Poloniex Results

Turns chart data, trade history and order books into pandas DataFrames
for analysis.
"""

import logging
from typing import List, Union

import numpy as np
import pandas as pd

from .base import BasePoloniex, ChartData, ChartDataPeriod, OrderBook, TradeHistory

logger = logging.getLogger(__name__)

CHART_COLUMNS = ["open", "high", "low", "close", "volume", "quote_volume", "weighted_average"]
TRADE_COLUMNS = ["global_trade_id", "trade_id", "type", "rate", "amount", "total"]
ORDER_BOOK_COLUMNS = ["side", "price", "amount", "cumulative_amount"]


def chart_data_to_frame(candles: List[ChartData]) -> pd.DataFrame:
    """
    Convert candlesticks to a DataFrame indexed by UTC timestamp.

    Args:
        candles: Candles returned by get_chart_data

    Returns:
        DataFrame sorted by time
    """
    if not candles:
        df = pd.DataFrame(columns=CHART_COLUMNS)
        df.index = pd.DatetimeIndex([], tz="UTC", name="timestamp")
        return df

    data = [
        {
            "timestamp": pd.Timestamp(c.date, unit="s", tz="UTC"),
            "open": c.open,
            "high": c.high,
            "low": c.low,
            "close": c.close,
            "volume": c.volume,
            "quote_volume": c.quote_volume,
            "weighted_average": c.weighted_average,
        }
        for c in candles
    ]

    df = pd.DataFrame(data)
    df.set_index("timestamp", inplace=True)
    df.sort_index(inplace=True)

    return df


def trade_history_to_frame(trades: List[TradeHistory]) -> pd.DataFrame:
    """
    Convert trades to a DataFrame indexed by trade date (UTC).

    Args:
        trades: Trades returned by get_trade_history

    Returns:
        DataFrame sorted by time
    """
    if not trades:
        df = pd.DataFrame(columns=TRADE_COLUMNS)
        df.index = pd.DatetimeIndex([], tz="UTC", name="timestamp")
        return df

    data = [
        {
            "timestamp": pd.to_datetime(t.date, utc=True),
            "global_trade_id": t.global_trade_id,
            "trade_id": t.trade_id,
            "type": t.type,
            "rate": t.rate,
            "amount": t.amount,
            "total": t.total,
        }
        for t in trades
    ]

    df = pd.DataFrame(data)
    df.set_index("timestamp", inplace=True)
    df.sort_index(inplace=True, kind="stable")

    return df


def order_book_to_frame(book: OrderBook) -> pd.DataFrame:
    """
    Convert an order book to one row per level with cumulative depth.

    Asks come first, then bids, each side in the order Poloniex sent it.
    """
    frames = []
    for side, orders in (("ask", book.asks), ("bid", book.bids)):
        prices = np.array([o.value for o in orders], dtype=float)
        amounts = np.array([o.amount for o in orders], dtype=float)
        frames.append(
            pd.DataFrame(
                {
                    "side": [side] * len(orders),
                    "price": prices,
                    "amount": amounts,
                    "cumulative_amount": np.cumsum(amounts),
                }
            )
        )

    df = pd.concat(frames, ignore_index=True)
    return df[ORDER_BOOK_COLUMNS]


def fetch_chart_frame(
    client: BasePoloniex,
    currency_pair: str,
    start: int,
    end: int,
    period: Union[ChartDataPeriod, int] = ChartDataPeriod.PERIOD_14400,
) -> pd.DataFrame:
    """Fetch candlesticks of a market and return them as a DataFrame."""
    candles = client.get_chart_data(currency_pair, start, end, period)
    logger.info(f"Fetched {len(candles)} candles for {currency_pair}")
    return chart_data_to_frame(candles)
