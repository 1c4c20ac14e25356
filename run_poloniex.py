#!/usr/bin/env python3
"""
Command line runner for the Poloniex client

Examples:
    python run_poloniex.py tickers
    python run_poloniex.py orderbook BTC_LTC --depth 5
    python run_poloniex.py chart BTC_XMR 1405699200 1406699200 --period 14400
    POLONIEX_API_KEY=... POLONIEX_API_SECRET=... python run_poloniex.py complete-balances --all
"""
import argparse
import sys
from pprint import pprint

import requests

from config import ClientConfig
from poloniex import APIError, BalanceAccount, ExchangeError, PoloniexClient, chart_data_to_frame
from utils.logger import get_client_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Query the Poloniex API")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("tickers", help="ticker of every market")
    sub.add_parser("volume", help="24h volume")

    p = sub.add_parser("orderbook", help="order book of a market")
    p.add_argument("pair")
    p.add_argument("--depth", type=int, default=10)

    p = sub.add_parser("orderbooks", help="order book of every market")
    p.add_argument("--depth", type=int, default=1)

    p = sub.add_parser("trades", help="trade history of a market")
    p.add_argument("pair")
    p.add_argument("--start", type=int)
    p.add_argument("--end", type=int)

    p = sub.add_parser("chart", help="candlesticks of a market")
    p.add_argument("pair")
    p.add_argument("start", type=int)
    p.add_argument("end", type=int)
    p.add_argument("--period", type=int, default=14400)

    sub.add_parser("currencies", help="currency information")

    p = sub.add_parser("loans", help="loan offers and demands")
    p.add_argument("currency")

    sub.add_parser("balances", help="available balances (private)")

    p = sub.add_parser("complete-balances", help="complete balances (private)")
    p.add_argument("--all", action="store_true", help="include every account")

    return parser


def run(client: PoloniexClient, args: argparse.Namespace):
    """Execute the selected command and return its result"""
    if args.command == "tickers":
        return client.get_tickers()
    if args.command == "volume":
        return client.get_24h_volume()
    if args.command == "orderbook":
        return client.get_order_book(args.pair, args.depth)
    if args.command == "orderbooks":
        return client.get_all_order_books(args.depth)
    if args.command == "trades":
        return client.get_trade_history(args.pair, args.start, args.end)
    if args.command == "chart":
        candles = client.get_chart_data(args.pair, args.start, args.end, args.period)
        return chart_data_to_frame(candles)
    if args.command == "currencies":
        return client.get_currencies()
    if args.command == "loans":
        return client.get_loan_orders(args.currency)
    if args.command == "balances":
        return client.get_balances()
    if args.command == "complete-balances":
        account = BalanceAccount.ALL if args.all else BalanceAccount.EXCHANGE_ONLY
        return client.get_complete_balances(account)
    raise ValueError(f"unknown command {args.command}")


def main(argv=None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    logger = get_client_logger(verbose=args.verbose)

    config = ClientConfig.from_env()
    with PoloniexClient.from_config(config) as client:
        try:
            result = run(client, args)
        except APIError as e:
            logger.error(f"Poloniex refused {args.command}: {e}")
            return 1
        except ExchangeError as e:
            logger.error(f"{args.command} failed: {e}")
            return 1
        except requests.RequestException as e:
            logger.error(f"Could not reach Poloniex for {args.command}: {e}")
            return 1

    pprint(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
