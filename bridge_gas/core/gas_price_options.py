# /bridge_gas/core/gas_price_options.py
# Per-call gas price override descriptors.
from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import BaseModel, Field, StrictInt, StrictStr, TypeAdapter, ValidationError

from bridge_gas.core.constants import GasPriceOptionType
from bridge_gas.core.logger import get_logger

log = get_logger(__name__)


class FixedGasPriceOption(BaseModel):
    """Use ``value`` (wei) as is."""
    type: Literal["gas_price"] = GasPriceOptionType.GAS_PRICE
    value: Union[StrictInt, StrictStr]

    class Config:
        frozen = True


class SpeedGasPriceOption(BaseModel):
    """Use the cached oracle price of tier ``value``, e.g. "fast"."""
    type: Literal["speed"] = GasPriceOptionType.SPEED
    value: str

    class Config:
        frozen = True


# None stands for "no override".
GasPriceOption = Annotated[Union[FixedGasPriceOption, SpeedGasPriceOption], Field(discriminator="type")]

_option_adapter = TypeAdapter(GasPriceOption)


def parse_gas_price_option(raw: Mapping[str, Any] | None):
    """
    Parses a loose ``{"type": ..., "value": ...}`` descriptor.

    Returns None for an absent or empty descriptor and for one that cannot be
    parsed; an invalid override is treated the same as no override.
    """
    if not raw:
        return None
    try:
        return _option_adapter.validate_python(dict(raw))
    except ValidationError as e:
        log.debug("INVALID_GAS_PRICE_OPTION", option=dict(raw), error=str(e))
        return None


def is_wei_amount(value) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 0
    return isinstance(value, str) and value.isascii() and value.isdigit()
