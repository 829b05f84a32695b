# /bridge_gas/core/config_validator.py
# A script to be run at startup to validate all configs and secrets.
from bridge_gas.core.config import ChainSide, settings, side_setting, side_rpc_urls, gas_price_boundaries
from bridge_gas.core.constants import OracleGasPriceSpeed
from bridge_gas.core.logger import log

def validate():
    log.info("--- CONFIG VALIDATION START ---")
    errors = []

    for side in ChainSide:
        prefix = side.value.upper()
        if not side_rpc_urls(side):
            errors.append(f"Missing required configuration: {prefix}_RPC_URL")
        if not side_setting(side, "BRIDGE_ADDRESS"):
            errors.append(f"Missing required configuration: {prefix}_BRIDGE_ADDRESS")
        if side_setting(side, "GAS_PRICE_FACTOR") <= 0:
            errors.append(f"{prefix}_GAS_PRICE_FACTOR must be positive")
        speed_type = side_setting(side, "GAS_PRICE_SPEED_TYPE")
        if speed_type not in OracleGasPriceSpeed.ALL:
            errors.append(f"{prefix}_GAS_PRICE_SPEED_TYPE must be one of {', '.join(OracleGasPriceSpeed.ALL)}, got {speed_type!r}")
        try:
            gas_price_boundaries(side)
        except ValueError as e:
            errors.append(f"Invalid {prefix} gas price boundaries: {e}")
        if not side_setting(side, "GAS_PRICE_ORACLE_URL"):
            log.warning("GAS_PRICE_ORACLE_NOT_CONFIGURED", chain_side=side.value)

    if errors:
        for error in errors:
            log.critical(error)
        raise ValueError("System configuration is incomplete. Halting.")

    log.info("--- CONFIG VALIDATION PASSED ---", health_port=settings.HEALTH_PORT)

if __name__ == "__main__":
    validate()
