# /bridge_gas/adapters/bridge.py
# Read-only access to the bridge contract's default gas price.
from web3 import AsyncWeb3, Web3
from web3.contract import AsyncContract

from bridge_gas.core.logger import get_logger

BRIDGE_GAS_PRICE_ABI = [{"inputs":[],"name":"gasPrice","outputs":[{"internalType":"uint256","name":"","type":"uint256"}],"stateMutability":"view","type":"function"}]
log = get_logger(__name__)


class ContractCallFailure(Exception):
    """A read call against the bridge contract reverted or errored."""


class BridgeContractAdapter:
    def __init__(self, w3: AsyncWeb3, bridge_address: str):
        self.w3 = w3
        self.bridge_address = Web3.to_checksum_address(bridge_address)
        self.bridge_contract: AsyncContract = self.w3.eth.contract(address=self.bridge_address, abi=BRIDGE_GAS_PRICE_ABI)

    async def gas_price(self) -> str:
        """Returns the bridge's on-chain default gas price in wei, as a decimal string."""
        try:
            value = await self.bridge_contract.functions.gasPrice().call()
        except Exception as e:
            raise ContractCallFailure(f"gasPrice() call on bridge {self.bridge_address} failed: {e!r}") from e
        log.debug("BRIDGE_GAS_PRICE_READ", bridge=self.bridge_address, gas_price=value)
        return str(value)
