"""Rate configuration endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from bopp.api.schemas import RateUpdateRequest
from bopp.api.serialize import to_jsonable
from bopp.models import RateUpdate
from bopp.rates.store import RateStore

log = structlog.get_logger(__name__)

router = APIRouter()


def _store(request: Request) -> RateStore:
    return request.app.state.rate_store


@router.get("/rates")
async def get_rates(request: Request) -> JSONResponse:
    rates = await _store(request).get_rates()
    return JSONResponse(content=to_jsonable(rates))


@router.put("/rates")
async def update_rates(request: Request, body: RateUpdateRequest) -> JSONResponse:
    """Merge the submitted rates and return the resulting set."""
    store = _store(request)
    updates = [RateUpdate(key=r.key, value=r.value, id=r.id) for r in body.rates]
    await store.update_rates(updates, body.actor_id, body.actor_name)
    log.info("rates_updated_via_api", actor_id=body.actor_id, count=len(updates))
    return JSONResponse(content={"success": True, "rates": to_jsonable(await store.get_rates())})


@router.get("/rates/history")
async def get_rate_history(
    request: Request, limit: int | None = Query(default=None, ge=0)
) -> JSONResponse:
    history = await _store(request).get_rate_history(limit)
    return JSONResponse(content=to_jsonable(history))
