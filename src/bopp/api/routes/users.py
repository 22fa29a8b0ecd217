"""User directory administration endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from bopp.api.schemas import AddUserRequest, AdminUpdateRequest
from bopp.api.serialize import to_jsonable, user_view
from bopp.auth.store import UserStore

router = APIRouter()


def _store(request: Request) -> UserStore:
    return request.app.state.user_store


@router.get("/users")
async def get_all_users(request: Request) -> JSONResponse:
    users = await _store(request).get_all_users()
    return JSONResponse(content=[user_view(u) for u in users])


@router.get("/users/{user_id}")
async def fetch_user_details(request: Request, user_id: str) -> JSONResponse:
    result = await _store(request).fetch_user_details(user_id)
    return JSONResponse(content=to_jsonable(result))


@router.post("/users")
async def add_user(request: Request, body: AddUserRequest) -> JSONResponse:
    result = await _store(request).add_user(body.id, body.name, body.password, body.role)
    return JSONResponse(content=to_jsonable(result))


@router.delete("/users/{user_id}")
async def delete_user(request: Request, user_id: str) -> JSONResponse:
    result = await _store(request).delete_user(user_id)
    return JSONResponse(content=to_jsonable(result))


@router.patch("/admins/{admin_id}")
async def update_admin_details(
    request: Request, admin_id: str, body: AdminUpdateRequest
) -> JSONResponse:
    result = await _store(request).update_admin_details(
        admin_id, name=body.name, new_password=body.new_password
    )
    return JSONResponse(content=to_jsonable(result))
