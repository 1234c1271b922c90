"""Input validation for order parameters."""

import math
from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator

from nbx_trader.bot.exceptions import ValidationError


class Side(str, Enum):
    BUY = "buy"
    SELL = "sell"


class OrderRequest(BaseModel):
    """A validated market order, built once from CLI input."""

    model_config = ConfigDict(frozen=True)

    side: Side
    market: str
    fiat_amount: float | None = None
    quantity: float | None = None

    @model_validator(mode="after")
    def _check_amounts(self) -> "OrderRequest":
        if self.side is Side.BUY:
            if self.fiat_amount is None or self.quantity is not None:
                raise ValueError("a buy order takes fiat_amount only")
        elif self.quantity is None or self.fiat_amount is not None:
            raise ValueError("a sell order takes quantity only")
        return self


def _is_positive(value: float | None) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def validate_order_request(
    side: str | None,
    market: str | None,
    fiat_amount: float | None = None,
    quantity: float | None = None,
) -> OrderRequest:
    """
    Validate raw order parameters and build an OrderRequest.
    Rules are checked in order and the first failure is raised.
    """
    if not side or not market:
        raise ValidationError("arguments 'side' and 'market' are required")

    if side == Side.BUY.value and not _is_positive(fiat_amount):
        raise ValidationError(
            "argument 'fiatAmount' must be greater than zero for a buy order"
        )

    if side == Side.SELL.value and not _is_positive(quantity):
        raise ValidationError(
            "argument 'quantity' must be greater than zero for a sell order"
        )

    if side == Side.BUY.value:
        return OrderRequest(side=Side.BUY, market=market, fiat_amount=fiat_amount)
    if side == Side.SELL.value:
        return OrderRequest(side=Side.SELL, market=market, quantity=quantity)

    raise ValidationError(f"invalid side '{side}', must be 'buy' or 'sell'")


def validate_max_quantity(max_quantity: float | None) -> float | None:
    """Validate an optional buy ceiling. Zero means unbounded."""
    if max_quantity is None:
        return None
    if not math.isfinite(max_quantity) or max_quantity < 0:
        raise ValidationError("argument 'maxQuantity' must be a finite number, zero or greater")
    return max_quantity
