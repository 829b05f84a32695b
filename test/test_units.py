from decimal import Decimal

import pytest
from web3 import Web3

from bridge_gas.core.units import (
    GAS_PRICE_BOUNDARIES,
    GasPriceBoundaries,
    gas_price_within_limits,
    normalize_gas_price,
)


@pytest.mark.parametrize("gas_price", [1, 10, 250, Decimal("17.64")])
def test_gas_price_within_boundaries_is_unchanged(gas_price):
    assert gas_price_within_limits(gas_price) == gas_price


def test_gas_price_below_min_returns_min():
    assert gas_price_within_limits(0.5) == GAS_PRICE_BOUNDARIES.MIN


def test_gas_price_above_max_returns_max():
    assert gas_price_within_limits(260) == GAS_PRICE_BOUNDARIES.MAX


def test_custom_limits():
    limits = GasPriceBoundaries(MIN=5, MAX=50)
    assert gas_price_within_limits(4, limits) == 5
    assert gas_price_within_limits(51, limits) == 50
    assert gas_price_within_limits(20, limits) == 20


def test_boundaries_reject_min_above_max():
    with pytest.raises(ValueError):
        GasPriceBoundaries(MIN=10, MAX=1)


def test_normalize_gas_price_in_gwei():
    assert normalize_gas_price(20, 1) == "20000000000"


def test_normalize_gas_price_not_in_gwei():
    # 200 * 0.1 == 20 * 1
    assert normalize_gas_price(200, 0.1) == "20000000000"


def test_normalize_gas_price_increases_value():
    assert normalize_gas_price(20, 1.5) == "30000000000"


def test_normalize_gas_price_respects_max():
    max_in_wei = str(Web3.to_wei(GAS_PRICE_BOUNDARIES.MAX, "gwei"))
    assert normalize_gas_price(200, 4) == max_in_wei


def test_normalize_gas_price_respects_min():
    min_in_wei = str(Web3.to_wei(GAS_PRICE_BOUNDARIES.MIN, "gwei"))
    assert normalize_gas_price(1, 0.01) == min_in_wei


def test_normalize_gas_price_rounds_to_two_decimals():
    assert normalize_gas_price(Decimal("10.645"), 1) == "10650000000"
    assert normalize_gas_price(10.64, 1) == "10640000000"


def test_normalize_gas_price_clamps_with_custom_limits():
    limits = GasPriceBoundaries(MIN=2, MAX=3)
    assert normalize_gas_price(100, 1, limits) == "3000000000"
    assert normalize_gas_price(0, 1, limits) == "2000000000"


def test_normalize_gas_price_beyond_default_decimal_precision():
    limits = GasPriceBoundaries(MIN=1, MAX=Decimal("1e27"))
    assert normalize_gas_price(Decimal("1e27"), 1, limits) == str(10**36)
    assert normalize_gas_price(Decimal("1e28"), 1, limits) == str(10**36)
