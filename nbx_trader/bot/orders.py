"""Order placement logic."""

import json
import logging
from typing import Any

from nbx_trader.bot.client import ExchangeClient
from nbx_trader.bot.config import AppConfig
from nbx_trader.bot.exceptions import ExchangeError
from nbx_trader.bot.validators import OrderRequest, Side

logger = logging.getLogger("nbx_trader.orders")

# Per-asset ceiling on the quantity a market buy may fill
MAX_BUY_QUANTITY = {
    "BTC": 1.0,
    "LTC": 100.0,
    "ATOM": 1000.0,
}

STAGE_LABELS = {
    "authenticate": "authenticate",
    "buy": "place buy order",
    "sell": "place sell order",
    "get_order": "retrieve order",
}


def resolve_max_quantity(market: str, override: float | None = None) -> float:
    """Buy ceiling for ``market``: explicit override, then per-asset table, else 0 (unbounded)."""
    if override is not None:
        return override
    asset = market.split("-", 1)[0].upper()
    return MAX_BUY_QUANTITY.get(asset, 0.0)


def execute_order(
    client: ExchangeClient,
    config: AppConfig,
    request: OrderRequest,
    max_quantity: float | None = None,
) -> dict[str, Any]:
    """
    Authenticate, place exactly one market order and fetch it back.
    Returns the order as reported by the exchange.
    """
    stage = "authenticate"
    try:
        client.authenticate(config.credentials, config.nonce_window)

        if request.side is Side.BUY:
            stage = "buy"
            ceiling = resolve_max_quantity(request.market, max_quantity)
            logger.info(
                "Market buy %s for %s (max quantity %s)",
                request.market,
                request.fiat_amount,
                ceiling or "unbounded",
            )
            order_id = client.market_buy(request.market, ceiling, request.fiat_amount)
        else:
            stage = "sell"
            logger.info("Market sell %s %s", request.quantity, request.market)
            order_id = client.market_sell(request.market, request.quantity)

        stage = "get_order"
        order = client.get_order(order_id)
    except ExchangeError as e:
        e.stage = stage
        logger.error("Failed to %s: %s", STAGE_LABELS[stage], e)
        raise

    logger.info("Order %s retrieved", order_id)
    return order


def format_order_summary(request: OrderRequest, max_quantity: float | None = None) -> str:
    """Format a human-readable order request summary."""
    lines = [
        "--- Order Request Summary ---",
        f"  Market:       {request.market}",
        f"  Side:         {request.side.value}",
        "  Type:         market",
    ]
    if request.side is Side.BUY:
        ceiling = resolve_max_quantity(request.market, max_quantity)
        lines.append(f"  Fiat Amount:  {request.fiat_amount}")
        lines.append(f"  Max Quantity: {ceiling or 'unbounded'}")
    else:
        lines.append(f"  Quantity:     {request.quantity}")
    lines.append("-----------------------------")
    return "\n".join(lines)


def format_order_response(order: dict[str, Any]) -> str:
    """Format the retrieved order for display."""
    lines = [
        "--- Order ---",
        f"  Order ID:  {order.get('id', 'N/A')}",
        f"  Market:    {order.get('market', 'N/A')}",
        f"  Side:      {order.get('side', 'N/A')}",
        f"  Quantity:  {order.get('quantity', 'N/A')}",
        f"  Status:    {order.get('status', 'N/A')}",
        "-------------",
        json.dumps(order, indent=2, default=str),
    ]
    return "\n".join(lines)
