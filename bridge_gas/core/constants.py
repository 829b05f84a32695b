# /bridge_gas/core/constants.py
# Shared constants for gas price resolution.

# Milliseconds between gas price updates when no override is configured (10 min).
DEFAULT_UPDATE_INTERVAL = 600000

# Gas price boundaries in gwei.
DEFAULT_MIN_GAS_PRICE = 1
DEFAULT_MAX_GAS_PRICE = 250

GAS_PRICE_DECIMALS = 2


class OracleGasPriceSpeed:
    """Speed tiers reported by the gas price oracle."""
    SLOW = "slow"
    STANDARD = "standard"
    FAST = "fast"
    INSTANT = "instant"

    ALL = (SLOW, STANDARD, FAST, INSTANT)


class GasPriceOptionType:
    """Tags of the per-call gas price option descriptor."""
    GAS_PRICE = "gas_price"
    SPEED = "speed"


# Aliases kept close to the names used by bridge tooling.
ORACLE_GAS_PRICE_SPEEDS = OracleGasPriceSpeed
GAS_PRICE_OPTIONS = GasPriceOptionType
