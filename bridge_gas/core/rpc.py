# /bridge_gas/core/rpc.py
# Per-chain-side async Web3 provider with ordered RPC failover at startup.

from typing import List

import aiohttp
from web3 import AsyncHTTPProvider, AsyncWeb3

from bridge_gas.core.config import ChainSide, settings, side_rpc_urls
from bridge_gas.core.logger import get_logger
from bridge_gas.core.decorators import retriable_network_call

log = get_logger(__name__)


class ChainProvider:
    def __init__(self, chain_side: ChainSide | str, rpc_urls: List[str] | None = None):
        self.chain_side = ChainSide(chain_side)
        self.rpc_urls = rpc_urls if rpc_urls is not None else side_rpc_urls(self.chain_side)
        if len(self.rpc_urls) < 2:
            log.warning("RESILIENCE_DEGRADED_LT_2_RPCS", chain_side=self.chain_side.value, count=len(self.rpc_urls))
        self.w3: AsyncWeb3 | None = None

    def _build(self, url: str) -> AsyncWeb3:
        timeout = aiohttp.ClientTimeout(total=settings.RPC_TIMEOUT_SECONDS)
        return AsyncWeb3(AsyncHTTPProvider(url, request_kwargs={"timeout": timeout}))

    @retriable_network_call
    async def initialize(self) -> AsyncWeb3:
        """Connects to the first reachable RPC URL, in configured order."""
        for url in self.rpc_urls:
            w3 = self._build(url)
            try:
                connected = await w3.is_connected()
            except Exception as e:
                log.warning("RPC_NODE_CHECK_FAILED", chain_side=self.chain_side.value, error=str(e))
                connected = False
            if connected:
                self.w3 = w3
                log.info("CHAIN_PROVIDER_INITIALIZED", chain_side=self.chain_side.value, rpc_count=len(self.rpc_urls))
                return w3
            log.warning("RPC_NODE_UNREACHABLE", chain_side=self.chain_side.value)
        raise ConnectionError(f"All {self.chain_side.value} RPC nodes are unreachable.")

    def get_primary_provider(self) -> AsyncWeb3:
        if self.w3 is None:
            raise RuntimeError("ChainProvider.initialize() has not completed.")
        return self.w3
