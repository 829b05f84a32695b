import pytest
from web3 import AsyncHTTPProvider, AsyncWeb3

from bridge_gas.adapters.bridge import BridgeContractAdapter, ContractCallFailure

BRIDGE_ADDR = "0x4aa42145aa6ebf72e164c9bbc74fbd3788045016"


class DummyCall:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error

    async def call(self):
        if self.error is not None:
            raise self.error
        return self.result


class DummyFunctions:
    def __init__(self, call):
        self._call = call

    def gasPrice(self):  # noqa: N802 (contract method name)
        return self._call


@pytest.fixture
def adapter():
    # No network access happens until a call is made.
    w3 = AsyncWeb3(AsyncHTTPProvider("http://127.0.0.1:8545"))
    return BridgeContractAdapter(w3, BRIDGE_ADDR)


def test_address_is_checksummed(adapter):
    assert adapter.bridge_address == AsyncWeb3.to_checksum_address(BRIDGE_ADDR)


@pytest.mark.asyncio
async def test_gas_price_is_returned_as_string(adapter, monkeypatch):
    monkeypatch.setattr(adapter.bridge_contract, "functions", DummyFunctions(DummyCall(result=20000000000)))
    assert await adapter.gas_price() == "20000000000"


@pytest.mark.asyncio
async def test_gas_price_call_failure_is_wrapped(adapter, monkeypatch):
    monkeypatch.setattr(adapter.bridge_contract, "functions", DummyFunctions(DummyCall(error=ValueError("execution reverted"))))
    with pytest.raises(ContractCallFailure):
        await adapter.gas_price()
