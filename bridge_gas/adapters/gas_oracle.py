# /bridge_gas/adapters/gas_oracle.py
# HTTP client for speed-tiered gas price oracles (slow/standard/fast/instant).
import asyncio
import json
from decimal import Decimal

import aiohttp
from pydantic import ValidationError

from bridge_gas.core.config import settings
from bridge_gas.core.logger import get_logger
from bridge_gas.core.state import SpeedTable

log = get_logger(__name__)


class OracleError(Exception):
    """Base class for gas price oracle failures."""


class OracleNetworkError(OracleError):
    """The oracle was unreachable or answered with a non-success status."""


class OracleParseError(OracleError):
    """The oracle answered with a body that is not a usable speed table."""


def parse_speed_table(body: str) -> SpeedTable:
    try:
        data = json.loads(body, parse_float=Decimal)
    except ValueError as e:
        raise OracleParseError(f"Oracle response is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise OracleParseError(f"Oracle response must be a JSON object, got {type(data).__name__}")
    try:
        return SpeedTable.model_validate(data)
    except ValidationError as e:
        raise OracleParseError(f"Oracle response has invalid fields: {e}") from e


class GasPriceOracleClient:
    """
    Fetches a SpeedTable from a gas price oracle endpoint.

    One request per call and no retries; callers decide how to fall back.
    """
    def __init__(self, url: str, session: aiohttp.ClientSession | None = None, timeout: float | None = None):
        self.url = url
        self.timeout = aiohttp.ClientTimeout(total=timeout or settings.GAS_PRICE_ORACLE_TIMEOUT_SECONDS)
        self._session = session
        self._owns_session = session is None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def fetch_speed_table(self) -> SpeedTable:
        session = self._get_session()
        try:
            async with session.get(self.url) as resp:
                resp.raise_for_status()
                body = await resp.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise OracleNetworkError(f"Gas price oracle request to {self.url} failed: {e!r}") from e

        speeds = parse_speed_table(body)
        log.debug("GAS_PRICE_ORACLE_RESPONSE", url=self.url, block_number=speeds.block_number, health=speeds.health)
        return speeds

    async def close(self):
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None
