"""Login and OTP endpoints. Results are returned as-is; no session is kept."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from bopp.api.schemas import LoginRequest, OTPVerifyRequest
from bopp.api.serialize import to_jsonable
from bopp.auth.store import UserStore

router = APIRouter()


def _store(request: Request) -> UserStore:
    return request.app.state.user_store


@router.post("/login")
async def login(request: Request, body: LoginRequest) -> JSONResponse:
    result = await _store(request).login_user(body.user_id, body.password)
    return JSONResponse(content=to_jsonable(result))


@router.post("/otp/{user_id}")
async def generate_otp(request: Request, user_id: str) -> JSONResponse:
    result = await _store(request).generate_and_store_otp(user_id)
    return JSONResponse(content=to_jsonable(result))


@router.post("/otp/{user_id}/verify")
async def verify_otp(request: Request, user_id: str, body: OTPVerifyRequest) -> JSONResponse:
    result = await _store(request).verify_otp(user_id, body.otp)
    return JSONResponse(content=to_jsonable(result))


@router.delete("/otp/{user_id}")
async def revoke_otp(request: Request, user_id: str) -> JSONResponse:
    result = await _store(request).revoke_otp(user_id)
    return JSONResponse(content=to_jsonable(result))
