#!/usr/bin/env python3
"""CLI entry point: place a single market order on NBX and print the result."""

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from nbx_trader.bot.client import NBXClient
from nbx_trader.bot.config import load_config
from nbx_trader.bot.exceptions import (
    ConfigurationError,
    ExchangeAPIError,
    NetworkError,
    ValidationError,
)
from nbx_trader.bot.logging_config import setup_logging
from nbx_trader.bot.orders import (
    STAGE_LABELS,
    execute_order,
    format_order_response,
    format_order_summary,
)
from nbx_trader.bot.validators import validate_max_quantity, validate_order_request

EPILOG = """\
Environment Variables:
  NBX_ACCOUNT_ID    Your NBX account ID
  NBX_KEY           Your NBX API key
  NBX_SECRET        Your NBX API secret
  NBX_PASSPHRASE    Your NBX API passphrase
  NBX_BASE_URL      API base URL (default: https://api.nbx.com)
  NBX_LOG_DIR       Directory for log files (default: logs)

Examples:
  %(prog)s --side=buy --market=BTC-NOK --fiatAmount=30000
  %(prog)s --side=sell --market=BTC-NOK --quantity=0.1
"""


class UsageErrorParser(argparse.ArgumentParser):
    """ArgumentParser that reports bad arguments as ValidationError instead of exiting 2."""

    def error(self, message: str):
        raise ValidationError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = UsageErrorParser(
        description="Place a market buy or sell order on NBX",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--side", default="", help="Order side: 'buy' or 'sell' (required)")
    parser.add_argument("--market", default="", help="Market symbol, e.g. BTC-NOK (required)")
    parser.add_argument(
        "--fiatAmount",
        dest="fiat_amount",
        type=float,
        default=None,
        help="Fiat amount to spend (required for 'buy')",
    )
    parser.add_argument(
        "--quantity",
        type=float,
        default=None,
        help="Exact amount to sell (required for 'sell')",
    )
    parser.add_argument(
        "--maxQuantity",
        dest="max_quantity",
        type=float,
        default=None,
        help="Ceiling on the quantity a buy may fill; 0 for unbounded "
        "(default: per-asset limit, unbounded for unknown assets)",
    )
    parser.add_argument("--no-log-console", action="store_true", help="Do not echo log lines to stdout")
    return parser


def print_usage_error(parser: argparse.ArgumentParser, err: Exception) -> int:
    print(f"Error: {err}\n")
    parser.print_help()
    return 1


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, validate, and place one order."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except ValidationError as e:
        return print_usage_error(parser, e)

    config = load_config()
    logger = setup_logging(
        log_dir=config.log_dir,
        console_output=not args.no_log_console,
        credentials=config.credentials,
    )

    try:
        request = validate_order_request(args.side, args.market, args.fiat_amount, args.quantity)
        max_quantity = validate_max_quantity(args.max_quantity)
    except ValidationError as e:
        logger.warning("Validation error: %s", e)
        return print_usage_error(parser, e)

    print(format_order_summary(request, max_quantity))

    try:
        with NBXClient(base_url=config.base_url) as client:
            order = execute_order(client, config, request, max_quantity)
    except ExchangeAPIError as e:
        print(f"\nFailed to {STAGE_LABELS.get(e.stage, 'complete order')}: {e}\n")
        return 1
    except NetworkError as e:
        print(f"\nNetwork Error: failed to {STAGE_LABELS.get(e.stage, 'complete order')}: {e}\n")
        return 1
    except ConfigurationError as e:
        print(f"\nConfiguration Error: {e}\n")
        logger.error("Configuration error: %s", e)
        return 1
    except Exception as e:
        print(f"\nUnexpected Error: {e}\n")
        logger.exception("Unexpected error")
        return 1

    print(format_order_response(order))
    print("\nSuccess: Order placed successfully.\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
