from __future__ import annotations

import hashlib
import hmac
import logging
from collections.abc import AsyncIterator
from typing import Any

from fastapi import Depends, Request
from fastapi.responses import JSONResponse

from buildview.access import AccessControl, AnonymousAccess, ApplicationAccess, UserAccess
from buildview.config import Settings, get_settings
from buildview.core.errors import LoginRequired
from buildview.core.ports.store import Store
from buildview.core.service import Dispatcher
from buildview.db import InMemoryStore, seed_demo
from buildview.queries import QUERIES
from buildview.resources import REGISTRY
from buildview.services import SERVICES

logger = logging.getLogger(__name__)

_store: InMemoryStore | None = None


async def get_store() -> AsyncIterator[Store]:
    """Yield the process-wide store, creating and seeding it lazily on first call."""
    global _store  # noqa: PLW0603
    if _store is None:
        _store = seed_demo(InMemoryStore())
    yield _store


async def shutdown_store() -> None:
    global _store  # noqa: PLW0603
    _store = None


def get_dispatcher(settings: Settings = Depends(get_settings)) -> Dispatcher:
    return Dispatcher(
        REGISTRY,
        QUERIES,
        SERVICES,
        api_version=settings.api_version,
        max_depth=settings.max_render_depth,
    )


async def get_access(
    request: Request,
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> AccessControl:
    header = request.headers.get("authorization", "").strip()
    if not header:
        return AnonymousAccess(private_api=settings.private_api)
    scheme, _, credentials = header.partition(" ")
    scheme = scheme.lower()
    if scheme == "token":
        return await token_access(credentials.strip(), store, settings)
    if scheme == "signature":
        return _signature_access(credentials.strip(), settings)
    logger.info("Rejected authorization scheme %r", scheme)
    raise LoginRequired("unsupported authorization scheme")


async def token_access(token: str, store: Store, settings: Settings) -> UserAccess:
    record = await store.get("token", token)
    user = await store.get("user", record.user_id) if record is not None else None
    if user is None:
        raise LoginRequired("invalid access token")
    permissions = await store.select("permission", user_id=user.id)
    return UserAccess(user, permissions, private_api=settings.private_api)


def _signature_access(credentials: str, settings: Settings) -> ApplicationAccess:
    """Verify ``a=<app>[:s=<scope>]:<hex hmac-sha256 of the options>``."""
    sign_opts, _, signature = credentials.rpartition(":")
    options: dict[str, str] = {}
    for part in sign_opts.split(":"):
        key, _, value = part.partition("=")
        if key:
            options[key] = value
    application = settings.applications.get(options.get("a", ""))
    if application is None:
        raise LoginRequired("unknown application")
    expected = hmac.new(application.secret.encode(), sign_opts.encode(), hashlib.sha256).hexdigest()
    if not hmac.compare_digest(expected.encode(), signature.encode()):
        raise LoginRequired("invalid signature")
    return ApplicationAccess(
        application.name,
        full_access=application.full_access,
        scope=options.get("s") or None,
        private_api=settings.private_api,
    )


def query_params(request: Request) -> dict[str, Any]:
    """Flatten the query string; repeated keys become lists."""
    params: dict[str, Any] = {}
    for key, value in request.query_params.multi_items():
        if key in params:
            existing = params[key]
            params[key] = [*existing, value] if isinstance(existing, list) else [existing, value]
        else:
            params[key] = value
    return params


class ServiceCall:
    """Binds one request's access, store, and parameters to the dispatcher."""

    def __init__(self, request: Request, dispatcher: Dispatcher, access: AccessControl, store: Store) -> None:
        self.request = request
        self.dispatcher = dispatcher
        self.access = access
        self.store = store

    async def __call__(self, service_name: str, **lookup: Any) -> JSONResponse:
        status, document = await self.dispatcher.call(
            service_name,
            access=self.access,
            params=query_params(self.request),
            store=self.store,
            path=self.request.url.path,
            **lookup,
        )
        return JSONResponse(content=document, status_code=status)


async def get_service_call(
    request: Request,
    dispatcher: Dispatcher = Depends(get_dispatcher),
    access: AccessControl = Depends(get_access),
    store: Store = Depends(get_store),
) -> ServiceCall:
    return ServiceCall(request, dispatcher, access, store)
