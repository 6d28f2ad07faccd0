from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from buildview.api.dependencies import ServiceCall, get_service_call
from buildview.api.schemas import ErrorResponse

router = APIRouter(tags=["repositories"], responses={404: {"model": ErrorResponse}})


@router.get("/repos")
async def repositories_for_current_user(call: ServiceCall = Depends(get_service_call)) -> JSONResponse:
    return await call("repositories.for_current_user")


@router.get("/owner/{login}/repos")
async def repositories_for_owner(login: str, call: ServiceCall = Depends(get_service_call)) -> JSONResponse:
    return await call("repositories.for_owner", login=login)


@router.get("/repo/{repository_id}/builds")
async def builds_for_repository(repository_id: str, call: ServiceCall = Depends(get_service_call)) -> JSONResponse:
    return await call("builds.for_repository", repository_id=repository_id)


@router.get("/repo/{repository_id}/branches")
async def branches_for_repository(repository_id: str, call: ServiceCall = Depends(get_service_call)) -> JSONResponse:
    return await call("branches.for_repository", repository_id=repository_id)


@router.get("/repo/{repository_id}/branch/{name:path}")
async def branch(repository_id: str, name: str, call: ServiceCall = Depends(get_service_call)) -> JSONResponse:
    return await call("branch.find", repository_id=repository_id, name=name)


@router.patch("/repo/{repository_id}")
async def update_repository(repository_id: str, call: ServiceCall = Depends(get_service_call)) -> JSONResponse:
    return await call("repository.update", id=repository_id)


@router.get("/repo/{repository:path}")
async def repository(repository: str, call: ServiceCall = Depends(get_service_call)) -> JSONResponse:
    """Look a repository up by numeric id or by ``owner/name`` slug."""
    if repository.isdigit():
        return await call("repository.find", id=repository)
    return await call("repository.find", slug=repository)
