# /bridge_gas/core/state.py
# Gas price data model and the per-chain-side cache.
from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel

from bridge_gas.core.constants import OracleGasPriceSpeed
from bridge_gas.core.logger import get_logger

log = get_logger(__name__)


class SpeedTable(BaseModel):
    """
    Speed-tiered gas prices reported by one oracle fetch, in gwei.

    A tier the oracle did not report is ``None`` and treated as unavailable.
    """
    slow: Decimal | None = None
    standard: Decimal | None = None
    fast: Decimal | None = None
    instant: Decimal | None = None
    block_time: Decimal | None = None
    block_number: int | None = None
    health: bool | None = None

    class Config:
        frozen = True

    def speed(self, name: str) -> Decimal | None:
        """Returns the price of tier ``name``, or None for unknown or absent tiers."""
        if name not in OracleGasPriceSpeed.ALL:
            return None
        return getattr(self, name)


class GasPriceResult(BaseModel):
    gas_price: str | None = None  # wei, decimal string
    oracle_gas_price_speeds: SpeedTable | None = None

    class Config:
        frozen = True

    @property
    def source(self) -> str:
        if self.oracle_gas_price_speeds is not None:
            return "oracle"
        if self.gas_price is not None:
            return "contract"
        return "none"


class GasPriceSnapshot(GasPriceResult):
    updated_at: datetime | None = None


class CachedGasState:
    """
    Latest resolved gas price for one chain side.

    Only the owning GasPriceService writes to it, replacing the snapshot as a
    whole each cycle; readers get an immutable snapshot that may be up to one
    update interval old.
    """
    def __init__(self, chain_side: str):
        self.chain_side = chain_side
        self._snapshot = GasPriceSnapshot()

    @property
    def snapshot(self) -> GasPriceSnapshot:
        return self._snapshot

    @property
    def gas_price(self) -> str | None:
        return self._snapshot.gas_price

    @property
    def oracle_gas_price_speeds(self) -> SpeedTable | None:
        return self._snapshot.oracle_gas_price_speeds

    def update(self, result: GasPriceResult) -> GasPriceSnapshot:
        self._snapshot = GasPriceSnapshot(
            gas_price=result.gas_price,
            oracle_gas_price_speeds=result.oracle_gas_price_speeds,
            updated_at=datetime.now(timezone.utc),
        )
        log.debug("GAS_PRICE_CACHE_UPDATED", chain_side=self.chain_side, gas_price=result.gas_price)
        return self._snapshot
