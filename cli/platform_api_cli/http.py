from __future__ import annotations

from dataclasses import dataclass

from platform_api_client import PlatformApiClient


@dataclass
class ClientOverrides:
    base_url: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    oauth_url: str | None = None
    log_level: str | None = None


def make_client(overrides: ClientOverrides) -> PlatformApiClient:
    # Unset fields fall back to the environment inside the client.
    return PlatformApiClient(
        base_url=overrides.base_url,
        client_id=overrides.client_id,
        client_secret=overrides.client_secret,
        oauth_url=overrides.oauth_url,
        log_level=overrides.log_level,
    )


def parse_headers(raw: list[str] | None) -> dict[str, str]:
    """Turn repeated ``Name: value`` options into a header mapping."""
    headers: dict[str, str] = {}
    for item in raw or []:
        name, sep, value = item.partition(":")
        name = name.strip()
        if not sep or not name:
            raise ValueError(f"invalid header {item!r}, expected 'Name: value'")
        headers[name] = value.strip()
    return headers
