# /bridge_gas/core/config.py
from decimal import Decimal
from enum import Enum
from typing import Any, List

from pydantic import SecretStr
from pydantic_settings import BaseSettings

from bridge_gas.core.constants import (
    DEFAULT_MAX_GAS_PRICE,
    DEFAULT_MIN_GAS_PRICE,
    DEFAULT_UPDATE_INTERVAL,
    OracleGasPriceSpeed,
)
from bridge_gas.core.units import GasPriceBoundaries


class ChainSide(str, Enum):
    HOME = "home"
    FOREIGN = "foreign"


class Settings(BaseSettings):
    # Home chain
    HOME_RPC_URL: SecretStr | None = None
    HOME_BRIDGE_ADDRESS: str | None = None
    HOME_GAS_PRICE_ORACLE_URL: str | None = None
    HOME_GAS_PRICE_SPEED_TYPE: str = OracleGasPriceSpeed.STANDARD
    HOME_GAS_PRICE_FACTOR: Decimal = Decimal("1")
    # Kept as raw text: a non-numeric override falls back to the default interval.
    HOME_GAS_PRICE_UPDATE_INTERVAL: str | None = None
    HOME_GAS_PRICE_MIN: Decimal = Decimal(DEFAULT_MIN_GAS_PRICE)
    HOME_GAS_PRICE_MAX: Decimal = Decimal(DEFAULT_MAX_GAS_PRICE)

    # Foreign chain
    FOREIGN_RPC_URL: SecretStr | None = None
    FOREIGN_BRIDGE_ADDRESS: str | None = None
    FOREIGN_GAS_PRICE_ORACLE_URL: str | None = None
    FOREIGN_GAS_PRICE_SPEED_TYPE: str = OracleGasPriceSpeed.STANDARD
    FOREIGN_GAS_PRICE_FACTOR: Decimal = Decimal("1")
    FOREIGN_GAS_PRICE_UPDATE_INTERVAL: str | None = None
    FOREIGN_GAS_PRICE_MIN: Decimal = Decimal(DEFAULT_MIN_GAS_PRICE)
    FOREIGN_GAS_PRICE_MAX: Decimal = Decimal(DEFAULT_MAX_GAS_PRICE)

    # Network timeouts (seconds)
    GAS_PRICE_ORACLE_TIMEOUT_SECONDS: float = 10
    RPC_TIMEOUT_SECONDS: float = 10

    # Operational Settings
    LOG_LEVEL: str = "INFO"
    SENTRY_DSN: SecretStr | None = None
    HEALTH_PORT: int = 8080
    CONTROL_API_TOKEN: str | None = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


def side_setting(chain_side: ChainSide | str, name: str, default: Any = None) -> Any:
    """Looks up ``<SIDE>_<name>`` on the global settings, e.g. ``HOME_GAS_PRICE_FACTOR``."""
    prefix = ChainSide(chain_side).value.upper()
    return getattr(settings, f"{prefix}_{name}", default)


def side_rpc_urls(chain_side: ChainSide | str) -> List[str]:
    raw = side_setting(chain_side, "RPC_URL")
    if raw is None:
        return []
    return [u.strip() for u in raw.get_secret_value().split(",") if u.strip()]


def gas_price_boundaries(chain_side: ChainSide | str) -> GasPriceBoundaries:
    return GasPriceBoundaries(
        MIN=side_setting(chain_side, "GAS_PRICE_MIN"),
        MAX=side_setting(chain_side, "GAS_PRICE_MAX"),
    )


def get_update_interval(chain_side: ChainSide | str) -> int:
    """
    Returns the update interval for a chain side in milliseconds.

    ``<SIDE>_GAS_PRICE_UPDATE_INTERVAL`` wins when it holds a positive integer;
    otherwise (unset, blank, non-numeric, zero or negative) the
    ``DEFAULT_UPDATE_INTERVAL`` is used.
    """
    raw = side_setting(chain_side, "GAS_PRICE_UPDATE_INTERVAL")
    if raw is None:
        return DEFAULT_UPDATE_INTERVAL
    try:
        interval = int(str(raw).strip())
    except ValueError:
        return DEFAULT_UPDATE_INTERVAL
    return interval if interval > 0 else DEFAULT_UPDATE_INTERVAL


try:
    settings = Settings()
except Exception as e:
    # Late import to avoid circular dependency only for logging the failure
    try:
        from bridge_gas.core.logger import get_logger, configure_logging
        configure_logging()
        log = get_logger("BridgeGas.Config")
        log.critical("FAILED_TO_LOAD_SETTINGS", error=str(e))
    except Exception:
        print("FAILED_TO_LOAD_SETTINGS", e)
    # In a container, a hard exit is often appropriate if config fails.
    raise SystemExit(1)
