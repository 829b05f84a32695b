# /bridge_gas/core/units.py
# Pure numeric helpers: gwei clamping and gwei -> wei conversion.

from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Union

from pydantic import BaseModel, model_validator
from web3 import Web3

from bridge_gas.core.constants import (
    DEFAULT_MAX_GAS_PRICE,
    DEFAULT_MIN_GAS_PRICE,
    GAS_PRICE_DECIMALS,
)

Number = Union[int, float, str, Decimal]

_GAS_PRICE_QUANTUM = Decimal(1).scaleb(-GAS_PRICE_DECIMALS)
_WORKING_PRECISION = 100


class GasPriceBoundaries(BaseModel):
    """Inclusive [MIN, MAX] gas price range, in gwei."""
    MIN: Decimal
    MAX: Decimal

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _check_order(self) -> "GasPriceBoundaries":
        if self.MIN > self.MAX:
            raise ValueError(f"Gas price MIN ({self.MIN}) must not exceed MAX ({self.MAX})")
        return self


GAS_PRICE_BOUNDARIES = GasPriceBoundaries(MIN=DEFAULT_MIN_GAS_PRICE, MAX=DEFAULT_MAX_GAS_PRICE)


def to_decimal(value: Number) -> Decimal:
    # Floats go through str() so 0.1 stays 0.1 instead of its binary expansion.
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def gas_price_within_limits(gas_price, limits: GasPriceBoundaries | None = None):
    limits = limits or GAS_PRICE_BOUNDARIES
    if gas_price < limits.MIN:
        return limits.MIN
    if gas_price > limits.MAX:
        return limits.MAX
    return gas_price


def normalize_gas_price(oracle_gas_price: Number, factor: Number, limits: GasPriceBoundaries | None = None) -> str:
    """
    Scales an oracle gas price by ``factor`` and converts it to wei.

    The product is clamped to ``limits`` while still in gwei, so MIN/MAX bound
    the gwei magnitude regardless of the factor. The clamped value is rounded
    to two decimals before conversion.

    Returns:
        The gas price in wei as a decimal string.
    """
    with localcontext() as ctx:
        # room for any uint256 wei amount plus the two decimals
        ctx.prec = _WORKING_PRECISION
        gas_price = to_decimal(oracle_gas_price) * to_decimal(factor)
        gas_price = to_decimal(gas_price_within_limits(gas_price, limits))
        gas_price = gas_price.quantize(_GAS_PRICE_QUANTUM, rounding=ROUND_HALF_UP)
    return str(Web3.to_wei(gas_price, "gwei"))
