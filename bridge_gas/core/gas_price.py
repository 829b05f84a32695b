# /bridge_gas/core/gas_price.py
# Gas price resolution for one bridge chain side:
# oracle -> bridge contract -> nothing, refreshed on a fixed interval.

import contextlib
from decimal import Decimal
from typing import Awaitable, Callable, Mapping

from bridge_gas.adapters.gas_oracle import GasPriceOracleClient, OracleParseError
from bridge_gas.core.config import ChainSide, gas_price_boundaries, get_update_interval, side_setting
from bridge_gas.core.gas_price_options import (
    FixedGasPriceOption,
    SpeedGasPriceOption,
    is_wei_amount,
    parse_gas_price_option,
)
from bridge_gas.core.logger import (
    CURRENT_GAS_PRICE,
    GAS_PRICE_FETCH_FAILURES,
    GAS_PRICE_UPDATES,
    bind_chain_side,
    get_logger,
)
from bridge_gas.core.scheduler import PeriodicTask
from bridge_gas.core.state import CachedGasState, GasPriceResult, GasPriceSnapshot, SpeedTable
from bridge_gas.core.units import GasPriceBoundaries, normalize_gas_price

log = get_logger(__name__)

OracleFn = Callable[[], Awaitable[GasPriceResult]]


def oracle_gas_price_fn(
    oracle_client: GasPriceOracleClient,
    speed_type: str,
    factor: Decimal,
    limits: GasPriceBoundaries | None = None,
) -> OracleFn:
    """Builds the oracle step of the resolver: fetch, pick ``speed_type``, normalize."""
    async def fetch() -> GasPriceResult:
        speeds = await oracle_client.fetch_speed_table()
        oracle_gas_price = speeds.speed(speed_type)
        if oracle_gas_price is None:
            raise OracleParseError(f"Oracle response has no '{speed_type}' gas price")
        if speeds.health is False:
            log.warning("GAS_PRICE_ORACLE_UNHEALTHY", url=oracle_client.url, block_number=speeds.block_number)
        return GasPriceResult(
            gas_price=normalize_gas_price(oracle_gas_price, factor, limits),
            oracle_gas_price_speeds=speeds,
        )
    return fetch


async def fetch_gas_price(bridge_contract, oracle_fn: OracleFn | None, chain_side: str = "unknown") -> GasPriceResult:
    """
    Resolves the gas price, trying the oracle first and the bridge contract second.

    Args:
        bridge_contract: anything with an async ``gas_price()`` returning wei as a string.
        oracle_fn: the oracle step (see ``oracle_gas_price_fn``); None skips it.

    Returns:
        ``GasPriceResult`` with the oracle price and speed table, the contract
        price and no table, or nothing when both sources fail. Never raises.
    """
    if oracle_fn is not None:
        try:
            result = await oracle_fn()
            log.info("GAS_PRICE_FROM_ORACLE", chain_side=chain_side, gas_price=result.gas_price)
            return result
        except Exception as e:
            GAS_PRICE_FETCH_FAILURES.labels(chain_side, "oracle").inc()
            log.error("GAS_PRICE_ORACLE_FETCH_FAILED", chain_side=chain_side, stage="oracle", error=str(e))
    else:
        log.debug("GAS_PRICE_ORACLE_NOT_CONFIGURED", chain_side=chain_side)

    try:
        gas_price = await bridge_contract.gas_price()
        log.info("GAS_PRICE_FROM_CONTRACT", chain_side=chain_side, gas_price=gas_price)
        return GasPriceResult(gas_price=gas_price)
    except Exception as e:
        GAS_PRICE_FETCH_FAILURES.labels(chain_side, "contract").inc()
        log.error("GAS_PRICE_CONTRACT_FETCH_FAILED", chain_side=chain_side, stage="contract", error=str(e))
        return GasPriceResult()


def process_gas_price_options(
    options,
    cached_gas_price: str | None,
    cached_gas_price_oracle_speeds: SpeedTable | None,
    factor=1,
    limits: GasPriceBoundaries | None = None,
) -> str | None:
    """
    Picks the gas price for a single operation.

    ``options`` is None (use the cached price), a ``FixedGasPriceOption`` (its
    wei value, returned untouched) or a ``SpeedGasPriceOption`` (that tier from
    the cached oracle table, normalized). Loose ``{"type", "value"}`` mappings
    are accepted too. Anything unusable falls back to ``cached_gas_price``.
    """
    if isinstance(options, Mapping):
        options = parse_gas_price_option(options)

    if options is None:
        return cached_gas_price

    if isinstance(options, FixedGasPriceOption):
        if not is_wei_amount(options.value):
            log.debug("INVALID_FIXED_GAS_PRICE", value=options.value)
            return cached_gas_price
        return options.value if isinstance(options.value, str) else str(options.value)

    if isinstance(options, SpeedGasPriceOption):
        oracle_gas_price = None
        if cached_gas_price_oracle_speeds is not None:
            oracle_gas_price = cached_gas_price_oracle_speeds.speed(options.value)
        if oracle_gas_price is None:
            log.debug("GAS_PRICE_SPEED_UNAVAILABLE", speed=options.value)
            return cached_gas_price
        return normalize_gas_price(oracle_gas_price, factor, limits)

    log.debug("INVALID_GAS_PRICE_OPTION", option=repr(options))
    return cached_gas_price


class GasPriceService:
    """
    Keeps the gas price of one chain side fresh.

    Each service owns its CachedGasState, so home and foreign run independently.
    """
    def __init__(
        self,
        chain_side: ChainSide | str,
        bridge_contract,
        oracle_client: GasPriceOracleClient | None = None,
        task_factory: Callable[..., PeriodicTask] = PeriodicTask,
    ):
        self.chain_side = ChainSide(chain_side)
        self.bridge_contract = bridge_contract
        self.oracle_client = oracle_client
        self.speed_type = side_setting(self.chain_side, "GAS_PRICE_SPEED_TYPE")
        self.factor = side_setting(self.chain_side, "GAS_PRICE_FACTOR")
        self.limits = gas_price_boundaries(self.chain_side)
        self.state = CachedGasState(self.chain_side.value)
        self._task_factory = task_factory
        self._task: PeriodicTask | None = None

    @property
    def task(self) -> PeriodicTask | None:
        return self._task

    def _oracle_fn(self) -> OracleFn | None:
        if self.oracle_client is None:
            return None
        return oracle_gas_price_fn(self.oracle_client, self.speed_type, self.factor, self.limits)

    async def update(self) -> GasPriceSnapshot:
        """One resolution cycle. The result replaces the cache, even when empty."""
        side = self.chain_side.value
        bind_chain_side(side)
        result = await fetch_gas_price(self.bridge_contract, self._oracle_fn(), chain_side=side)
        snapshot = self.state.update(result)

        GAS_PRICE_UPDATES.labels(side, result.source).inc()
        if result.gas_price is not None:
            CURRENT_GAS_PRICE.labels(side).set(int(result.gas_price))
        else:
            # no price this cycle
            with contextlib.suppress(KeyError):
                CURRENT_GAS_PRICE.remove(side)
        return snapshot

    def start(self) -> PeriodicTask:
        if self._task is not None:
            log.warning("GAS_PRICE_SERVICE_ALREADY_STARTED", chain_side=self.chain_side.value)
            return self._task
        interval = get_update_interval(self.chain_side)
        log.info("GAS_PRICE_SERVICE_STARTING", chain_side=self.chain_side.value, interval_ms=interval)
        self._task = self._task_factory(self.update, interval / 1000, name=f"gas-price-{self.chain_side.value}")
        self._task.start()
        return self._task

    async def refresh(self) -> bool:
        """Runs a cycle now. Returns False when a scheduled cycle is already running."""
        if self._task is not None:
            return await self._task.run_now()
        await self.update()
        return True

    async def stop(self):
        if self._task is not None:
            await self._task.stop()
            self._task = None

    def snapshot(self) -> GasPriceSnapshot:
        return self.state.snapshot

    def gas_price_for(self, options=None) -> str | None:
        snapshot = self.state.snapshot
        return process_gas_price_options(
            options,
            snapshot.gas_price,
            snapshot.oracle_gas_price_speeds,
            factor=self.factor,
            limits=self.limits,
        )
