from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from buildview.api.dependencies import ServiceCall, get_service_call
from buildview.api.schemas import ErrorResponse

router = APIRouter(tags=["owners"], responses={404: {"model": ErrorResponse}, 401: {"model": ErrorResponse}})


@router.get("/user")
async def current_user(call: ServiceCall = Depends(get_service_call)) -> JSONResponse:
    return await call("user.current")


@router.get("/user/{user_id}")
async def user(user_id: str, call: ServiceCall = Depends(get_service_call)) -> JSONResponse:
    return await call("user.find", id=user_id)


@router.get("/org/{organization_id}")
async def organization(organization_id: str, call: ServiceCall = Depends(get_service_call)) -> JSONResponse:
    return await call("organization.find", id=organization_id)


@router.get("/owner/{login}")
async def owner(login: str, call: ServiceCall = Depends(get_service_call)) -> JSONResponse:
    return await call("owner.find", login=login)


@router.get("/broadcasts")
async def broadcasts(call: ServiceCall = Depends(get_service_call)) -> JSONResponse:
    return await call("broadcasts.for_current_user")


@router.get("/broadcast/{broadcast_id}")
async def broadcast(broadcast_id: str, call: ServiceCall = Depends(get_service_call)) -> JSONResponse:
    return await call("broadcast.find", id=broadcast_id)
