from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Mapping

from .errors import ConfigError

ENV_BASE_URL = "PLATFORM_API_BASE_URL"
ENV_CLIENT_ID = "NYPL_OAUTH_ID"
ENV_CLIENT_SECRET = "NYPL_OAUTH_SECRET"
ENV_OAUTH_URL = "NYPL_OAUTH_URL"

# Checked in this order; the first missing one is reported.
REQUIRED_FIELDS: tuple[tuple[str, str], ...] = (
    ("base_url", ENV_BASE_URL),
    ("client_id", ENV_CLIENT_ID),
    ("client_secret", ENV_CLIENT_SECRET),
    ("oauth_url", ENV_OAUTH_URL),
)

LOG_LEVELS = ("debug", "info", "warn", "warning", "error", "fatal", "critical")
DEFAULT_LOG_LEVEL = "info"


@dataclass(frozen=True)
class ClientConfig:
    base_url: str
    client_id: str
    client_secret: str
    oauth_url: str
    log_level: str = DEFAULT_LOG_LEVEL
    timeout_s: float = 15.0


def resolve_config(
        overrides: Mapping[str, Any] | None = None,
        *,
        environ: Mapping[str, str] | None = None,
) -> ClientConfig:
    """Merge caller overrides over environment defaults and freeze the result.

    An override set to ``None`` is treated as not supplied. ``log_level`` and
    ``timeout_s`` never come from the environment.
    """
    env = os.environ if environ is None else environ
    known = {f.name for f in fields(ClientConfig)}
    supplied = {k: v for k, v in (overrides or {}).items() if v is not None}

    unknown = sorted(set(supplied) - known)
    if unknown:
        raise ConfigError(f"Unknown config option(s): {', '.join(unknown)}")

    values: dict[str, Any] = {name: env.get(var) for name, var in REQUIRED_FIELDS}
    values["log_level"] = DEFAULT_LOG_LEVEL
    values.update(supplied)

    for name, var in REQUIRED_FIELDS:
        if not values.get(name):
            raise ConfigError(
                f"Missing config: neither config.{name} nor ENV.{var} are set",
                field=name,
                env_var=var,
            )

    log_level = str(values["log_level"]).strip().lower()
    if log_level not in LOG_LEVELS:
        raise ConfigError(
            f"Invalid config: log_level {values['log_level']!r} is not one of {', '.join(LOG_LEVELS)}",
            field="log_level",
        )
    values["log_level"] = log_level

    return ClientConfig(**values)
