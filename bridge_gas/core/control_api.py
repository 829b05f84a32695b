from typing import Any, Dict

from fastapi import FastAPI, HTTPException, Header, Depends, Body, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from bridge_gas.core.config import settings
from bridge_gas.core.gas_price import GasPriceService
from bridge_gas.core.logger import get_logger

app = FastAPI(title="Bridge gas price service")
log = get_logger(__name__)

_services: Dict[str, GasPriceService] = {}


def register_service(service: GasPriceService):
    _services[service.chain_side.value] = service


def unregister_all():
    _services.clear()


def verify(authorization: str | None = Header(None)):
    token = settings.CONTROL_API_TOKEN
    if not token:
        raise HTTPException(status_code=500, detail="Control token not configured")
    if authorization != f"Bearer {token}":
        raise HTTPException(status_code=401, detail="Unauthorized")


def get_service(chain_side: str) -> GasPriceService:
    service = _services.get(chain_side)
    if service is None:
        raise HTTPException(status_code=404, detail=f"Unknown chain side: {chain_side}")
    return service


@app.get("/healthz")
async def healthz():
    return {"status": "ok", "chain_sides": sorted(_services)}


@app.get("/gas-price/{chain_side}")
async def current_gas_price(service: GasPriceService = Depends(get_service)):
    return {"chain_side": service.chain_side.value, **service.snapshot().model_dump()}


@app.post("/gas-price/{chain_side}")
async def gas_price_for_options(
    options: Dict[str, Any] | None = Body(None),
    service: GasPriceService = Depends(get_service),
):
    return {"chain_side": service.chain_side.value, "gas_price": service.gas_price_for(options)}


@app.post("/gas-price/{chain_side}/refresh")
async def refresh(service: GasPriceService = Depends(get_service), auth: None = Depends(verify)):
    refreshed = await service.refresh()
    log.warning("GAS_PRICE_MANUAL_REFRESH", chain_side=service.chain_side.value, refreshed=refreshed)
    return {"chain_side": service.chain_side.value, "refreshed": refreshed, **service.snapshot().model_dump()}


@app.get("/metrics")
async def metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
