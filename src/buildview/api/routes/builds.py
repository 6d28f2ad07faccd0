from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from buildview.api.dependencies import ServiceCall, get_service_call
from buildview.api.schemas import ErrorResponse

router = APIRouter(tags=["builds"], responses={404: {"model": ErrorResponse}})


@router.get("/build/{build_id}")
async def build(build_id: str, call: ServiceCall = Depends(get_service_call)) -> JSONResponse:
    return await call("build.find", id=build_id)


@router.get("/build/{build_id}/jobs")
async def jobs_for_build(build_id: str, call: ServiceCall = Depends(get_service_call)) -> JSONResponse:
    return await call("jobs.for_build", build_id=build_id)


@router.get("/job/{job_id}")
async def job(job_id: str, call: ServiceCall = Depends(get_service_call)) -> JSONResponse:
    return await call("job.find", id=job_id)


@router.post("/job/{job_id}/restart", status_code=202)
async def restart_job(job_id: str, call: ServiceCall = Depends(get_service_call)) -> JSONResponse:
    return await call("job.restart", id=job_id)


@router.post("/job/{job_id}/cancel", status_code=202)
async def cancel_job(job_id: str, call: ServiceCall = Depends(get_service_call)) -> JSONResponse:
    return await call("job.cancel", id=job_id)


@router.get("/commit/{commit_id}")
async def commit(commit_id: str, call: ServiceCall = Depends(get_service_call)) -> JSONResponse:
    return await call("commit.find", id=commit_id)
