import asyncio
import json
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from buildview.access import AccessControl, AnonymousAccess
from buildview.api.dependencies import token_access
from buildview.config import get_settings
from buildview.core.errors import ServiceError
from buildview.core.service import Dispatcher
from buildview.db import InMemoryStore, seed_demo
from buildview.queries import QUERIES
from buildview.resources import REGISTRY
from buildview.services import SERVICES

console = Console()


def _get_store() -> InMemoryStore:
    return seed_demo(InMemoryStore())


def _pairs(values: list[str], option: str) -> dict[str, Any]:
    pairs: dict[str, Any] = {}
    for value in values:
        key, sep, item = value.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected key=value, got {value!r}", param_hint=option)
        if key in pairs:
            existing = pairs[key]
            pairs[key] = [*existing, item] if isinstance(existing, list) else [existing, item]
        else:
            pairs[key] = item
    return pairs


def call(
    service: str = typer.Argument(..., help="Service name, e.g. repository.find."),
    arg: list[str] = typer.Option([], "--arg", "-a", help="Lookup argument as key=value (repeatable)."),
    param: list[str] = typer.Option([], "--param", "-p", help="Query parameter as key=value (repeatable)."),
    token: str | None = typer.Option(None, "--token", "-t", help="Access token of the calling user."),
    path: str | None = typer.Option(None, help="Path used for collection links."),
) -> None:
    """Call a service against the demo data and print the rendered document."""
    settings = get_settings()
    store = _get_store()
    lookup = _pairs(arg, "--arg")
    params = _pairs(param, "--param")
    dispatcher = Dispatcher(
        REGISTRY,
        QUERIES,
        SERVICES,
        api_version=settings.api_version,
        max_depth=settings.max_render_depth,
    )

    async def _run() -> tuple[int, dict[str, Any]]:
        access: AccessControl = AnonymousAccess(private_api=settings.private_api)
        if token:
            access = await token_access(token, store, settings)
        return await dispatcher.call(
            service,
            access=access,
            params=params,
            store=store,
            path=path or f"/{settings.api_version}/{service}",
            **lookup,
        )

    try:
        _, document = asyncio.run(_run())
    except ServiceError as exc:
        console.print_json(json.dumps(exc.to_document()))
        raise typer.Exit(code=1) from exc
    console.print_json(json.dumps(document))


def services() -> None:
    """List the declared services."""
    table = Table("service", "resource type", "paginated", "implemented")
    for name, definition in sorted(SERVICES.items()):
        table.add_row(
            name,
            definition.resource_type,
            "yes" if definition.paginated else "no",
            "yes" if definition.run is not None else "no",
        )
    console.print(table)
