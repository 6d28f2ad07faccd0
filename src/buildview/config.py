import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class ApplicationConfig:
    name: str
    secret: str
    full_access: bool = False


@dataclass(frozen=True)
class Settings:
    api_version: str = "v3"
    private_api: bool = False
    max_render_depth: int = 4
    log_level: str = "info"
    applications: Mapping[str, ApplicationConfig] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            api_version=env.get("BUILDVIEW_API_VERSION", "v3"),
            private_api=_parse_bool("BUILDVIEW_PRIVATE_API", env.get("BUILDVIEW_PRIVATE_API", "false")),
            max_render_depth=_parse_int("BUILDVIEW_MAX_RENDER_DEPTH", env.get("BUILDVIEW_MAX_RENDER_DEPTH", "4")),
            log_level=env.get("BUILDVIEW_LOG_LEVEL", "info").lower(),
            applications=_parse_applications(env.get("BUILDVIEW_APPLICATIONS", "")),
        )


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _parse_int(name: str, raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 1:
        raise ValueError(f"{name} must be at least 1, got {value}")
    return value


def _parse_applications(raw: str) -> Mapping[str, ApplicationConfig]:
    if not raw.strip():
        return MappingProxyType({})
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"BUILDVIEW_APPLICATIONS is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("BUILDVIEW_APPLICATIONS must be a JSON object")
    applications = {}
    for name, options in data.items():
        if not isinstance(options, dict) or "secret" not in options:
            raise ValueError(f"application {name!r} needs a secret")
        applications[name] = ApplicationConfig(
            name=name,
            secret=str(options["secret"]),
            full_access=bool(options.get("full_access", False)),
        )
    return MappingProxyType(applications)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
