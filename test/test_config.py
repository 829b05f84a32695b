from decimal import Decimal

import pytest
from pydantic import SecretStr

from bridge_gas.core.config import (
    ChainSide,
    gas_price_boundaries,
    get_update_interval,
    settings,
    side_rpc_urls,
)
from bridge_gas.core.config_validator import validate
from bridge_gas.core.constants import DEFAULT_UPDATE_INTERVAL


def test_update_interval_override(monkeypatch):
    monkeypatch.setattr(settings, "HOME_GAS_PRICE_UPDATE_INTERVAL", " 15000 ")
    monkeypatch.setattr(settings, "FOREIGN_GAS_PRICE_UPDATE_INTERVAL", None)
    assert get_update_interval(ChainSide.HOME) == 15000
    assert get_update_interval("foreign") == DEFAULT_UPDATE_INTERVAL


def test_update_interval_non_numeric_uses_default(monkeypatch):
    monkeypatch.setattr(settings, "HOME_GAS_PRICE_UPDATE_INTERVAL", "15s")
    assert get_update_interval("home") == DEFAULT_UPDATE_INTERVAL


def test_unknown_chain_side_is_rejected():
    with pytest.raises(ValueError):
        get_update_interval("sidechain")


def test_rpc_urls_are_comma_separated(monkeypatch):
    monkeypatch.setattr(settings, "HOME_RPC_URL", SecretStr("http://a.local, http://b.local,"))
    assert side_rpc_urls("home") == ["http://a.local", "http://b.local"]


def test_gas_price_boundaries_per_side(monkeypatch):
    monkeypatch.setattr(settings, "FOREIGN_GAS_PRICE_MIN", Decimal("0.5"))
    monkeypatch.setattr(settings, "FOREIGN_GAS_PRICE_MAX", Decimal("40"))
    limits = gas_price_boundaries("foreign")
    assert (limits.MIN, limits.MAX) == (Decimal("0.5"), Decimal("40"))


@pytest.fixture
def complete_config(monkeypatch):
    for side in ("HOME", "FOREIGN"):
        monkeypatch.setattr(settings, f"{side}_RPC_URL", SecretStr("http://rpc.local"))
        monkeypatch.setattr(settings, f"{side}_BRIDGE_ADDRESS", "0x" + "11" * 20)


def test_validate_passes_with_complete_config(complete_config):
    validate()


def test_validate_rejects_missing_bridge_address(complete_config, monkeypatch):
    monkeypatch.setattr(settings, "FOREIGN_BRIDGE_ADDRESS", None)
    with pytest.raises(ValueError):
        validate()


def test_validate_rejects_inverted_boundaries(complete_config, monkeypatch):
    monkeypatch.setattr(settings, "HOME_GAS_PRICE_MIN", Decimal("300"))
    with pytest.raises(ValueError):
        validate()


def test_validate_rejects_unknown_speed_type(complete_config, monkeypatch):
    monkeypatch.setattr(settings, "HOME_GAS_PRICE_SPEED_TYPE", "standart")
    with pytest.raises(ValueError):
        validate()
