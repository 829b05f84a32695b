# /bridge_gas/adapters/mock.py
# In-memory stand-ins for the oracle and bridge adapters, for tests and
# dry runs without network access.

from bridge_gas.adapters.bridge import ContractCallFailure
from bridge_gas.adapters.gas_oracle import OracleNetworkError
from bridge_gas.core.logger import get_logger
from bridge_gas.core.state import SpeedTable

log = get_logger(__name__)


class MockGasPriceOracle:
    """
    A mock GasPriceOracleClient returning a configurable SpeedTable.
    """
    def __init__(self, speeds: SpeedTable | dict | None = None, url: str = "mock://gas-price-oracle"):
        self.url = url
        self.calls = 0
        self._error: Exception | None = None
        self.set_speeds(speeds if speeds is not None else SpeedTable())

    def set_speeds(self, speeds: SpeedTable | dict):
        self.speeds = speeds if isinstance(speeds, SpeedTable) else SpeedTable.model_validate(speeds)
        self._error = None

    def set_failure(self, error: Exception | None = None):
        """Make every following fetch raise ``error`` (an OracleNetworkError by default)."""
        self._error = error or OracleNetworkError("Forced oracle failure for testing.")

    async def fetch_speed_table(self) -> SpeedTable:
        self.calls += 1
        if self._error is not None:
            log.error("MOCK_ORACLE_FORCED_FAILURE", error=str(self._error))
            raise self._error
        return self.speeds

    async def close(self):
        pass


class MockBridgeContract:
    """
    A mock BridgeContractAdapter with a settable on-chain gas price.
    """
    def __init__(self, gas_price: int | str | None = 1000000000):
        self.calls = 0
        self._must_fail = False
        self.set_gas_price(gas_price)

    def set_gas_price(self, gas_price: int | str | None):
        self._gas_price = None if gas_price is None else str(gas_price)
        self._must_fail = False

    def set_failure(self, fail: bool = True):
        self._must_fail = fail

    async def gas_price(self) -> str:
        self.calls += 1
        if self._must_fail or self._gas_price is None:
            log.error("MOCK_BRIDGE_FORCED_FAILURE")
            raise ContractCallFailure("Forced gasPrice() failure for testing.")
        return self._gas_price
