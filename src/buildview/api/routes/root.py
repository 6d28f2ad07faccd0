from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from buildview.config import Settings, get_settings

router = APIRouter()


@router.get("/")
async def root(settings: Settings = Depends(get_settings)) -> dict[str, Any]:
    """Discovery document listing the v3 URI templates."""
    prefix = f"/{settings.api_version}"
    return {
        "@type": "home",
        "@href": "/",
        "meta": {
            "title": "Buildview API",
            "description": "Read API for repositories, builds, and jobs.",
            "version": "0.1.0",
        },
        "resources": {
            "repository": f"{prefix}/repo/{{repository.id}}",
            "repositories": f"{prefix}/owner/{{owner.login}}/repos",
            "build": f"{prefix}/build/{{build.id}}",
            "job": f"{prefix}/job/{{job.id}}",
            "branch": f"{prefix}/repo/{{repository.id}}/branch/{{branch.name}}",
            "user": f"{prefix}/user/{{user.id}}",
            "organization": f"{prefix}/org/{{organization.id}}",
            "broadcasts": f"{prefix}/broadcasts",
            "openapi": "/openapi.json",
            "docs": "/docs",
        },
    }
