# /main.py
# Runs the home and foreign gas price services side by side, each on its own
# schedule and cache, and serves their state over HTTP.
import asyncio

import uvicorn

from bridge_gas.core.config import ChainSide, settings, side_setting
from bridge_gas.core.config_validator import validate as validate_config
from bridge_gas.core.logger import configure_logging, get_logger
from bridge_gas.core.rpc import ChainProvider
from bridge_gas.core.gas_price import GasPriceService
from bridge_gas.core import control_api
from bridge_gas.adapters.bridge import BridgeContractAdapter
from bridge_gas.adapters.gas_oracle import GasPriceOracleClient


async def build_service(chain_side: ChainSide) -> GasPriceService:
    provider = ChainProvider(chain_side)
    await provider.initialize()
    w3 = provider.get_primary_provider()
    bridge = BridgeContractAdapter(w3, side_setting(chain_side, "BRIDGE_ADDRESS"))
    oracle_url = side_setting(chain_side, "GAS_PRICE_ORACLE_URL")
    oracle = GasPriceOracleClient(oracle_url) if oracle_url else None
    return GasPriceService(chain_side, bridge, oracle)


async def main():
    configure_logging()
    log = get_logger("BridgeGas.System")
    validate_config()
    log.info("GAS_PRICE_SERVICE_STARTING")

    services = [await build_service(side) for side in ChainSide]
    for service in services:
        control_api.register_service(service)
        service.start()

    server = uvicorn.Server(uvicorn.Config(control_api.app, host="0.0.0.0", port=settings.HEALTH_PORT or 8080, log_config=None))
    log.info("HTTP_SERVER_STARTING", port=settings.HEALTH_PORT or 8080)
    try:
        await server.serve()
    finally:
        for service in services:
            await service.stop()
            if service.oracle_client is not None:
                await service.oracle_client.close()
        log.warning("SYSTEM_SHUTDOWN_COMPLETE")

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
