from __future__ import annotations

import json
import logging
import threading
from dataclasses import asdict, dataclass, field
from typing import Any, Mapping

import httpx

from .config_types import ClientConfig, resolve_config
from .errors import ApiClientError, ApiClientTokenError
from .transport import Transport

log = logging.getLogger("platform_api_client")

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "critical": logging.CRITICAL,
}

# Among platform services these are the only statuses with useful JSON payloads.
_JSON_STATUSES = (200, 404)


@dataclass
class RequestOptions:
    authenticated: bool = True
    headers: dict[str, str] = field(default_factory=dict)


def parse_http_options(options: RequestOptions | Mapping[str, Any] | None = None) -> RequestOptions:
    """Apply per-call defaults: authenticated, no extra headers."""
    if isinstance(options, RequestOptions):
        options = asdict(options)
    options = options or {}
    headers = {str(k): v for k, v in (options.get("headers") or {}).items()}
    return RequestOptions(
        authenticated=bool(options.get("authenticated", True)),
        headers=headers,
    )


class _TokenCache:
    def __init__(self) -> None:
        self._token: str | None = None
        # Held across the whole authenticate round trip.
        self.lock = threading.RLock()

    def has_token(self) -> bool:
        with self.lock:
            return self._token is not None

    def get(self) -> str | None:
        with self.lock:
            return self._token

    def set(self, token: str) -> None:
        with self.lock:
            self._token = token

    def clear(self) -> None:
        with self.lock:
            self._token = None


def _find_header(headers: Mapping[str, str], name: str) -> str | None:
    lowered = name.lower()
    for key in headers:
        if key.lower() == lowered:
            return key
    return None


class PlatformApiClient:
    """Client for the platform API.

    Authenticates lazily with the OAuth2 client-credentials grant and keeps
    the access token in memory until the API answers 401.
    """

    def __init__(self, config: ClientConfig | Mapping[str, Any] | None = None, **overrides: Any):
        if isinstance(config, ClientConfig):
            # Explicit config objects are validated but never topped up from the environment.
            self._cfg = resolve_config({**asdict(config), **overrides}, environ={})
        else:
            self._cfg = resolve_config({**(config or {}), **overrides})
        self._level = _LOG_LEVELS[self._cfg.log_level]
        self._token = _TokenCache()
        self._t = Transport(self._cfg)

    @property
    def config(self) -> ClientConfig:
        return self._cfg

    def close(self) -> None:
        self._t.close()

    def __enter__(self) -> PlatformApiClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def fetch(self, path: str, options: RequestOptions | Mapping[str, Any] | None = None) -> Any:
        """GET ``base_url + path`` and return the decoded JSON body."""
        opts = parse_http_options(options)
        if opts.authenticated:
            self._authenticate()

        url = f"{self._cfg.base_url}{path}"
        self._log(logging.DEBUG, "Getting from platform api", uri=url)
        response = self._t.request("GET", url, headers=self._request_headers(opts, opts.headers))
        self._log(logging.DEBUG, "Got platform api response", code=response.status_code, body=response.text)
        return self._parse_json_response(response)

    def submit(
            self,
            path: str,
            body: Any,
            options: RequestOptions | Mapping[str, Any] | None = None,
    ) -> Any:
        """POST ``body`` to ``base_url + path`` and return the decoded JSON body.

        Bodies are JSON-encoded unless the caller sets its own Content-Type, in
        which case ``body`` must already be a ``str`` or ``bytes`` payload.
        """
        opts = parse_http_options(options)
        headers = dict(opts.headers)
        content: str | bytes
        if _find_header(headers, "Content-Type") is None:
            headers["Content-Type"] = "application/json"
            content = json.dumps(body)
        elif isinstance(body, (str, bytes)):
            content = body
        else:
            raise TypeError(
                f"body must be str or bytes when Content-Type is set by the caller, got {type(body).__name__}"
            )

        if opts.authenticated:
            self._authenticate()

        url = f"{self._cfg.base_url}{path}"
        self._log(logging.DEBUG, "Posting to platform api", uri=url, body=body)
        response = self._t.request("POST", url, headers=self._request_headers(opts, headers), content=content)
        self._log(logging.DEBUG, "Got platform api response", code=response.status_code, body=response.text)
        return self._parse_json_response(response)

    def _request_headers(self, opts: RequestOptions, headers: dict[str, str]) -> dict[str, str]:
        out = dict(headers)
        token = self._token.get() if opts.authenticated else None
        if token is not None:
            out["Authorization"] = f"Bearer {token}"
        return out

    def _parse_json_response(self, response: httpx.Response) -> Any:
        status = response.status_code
        body = response.text
        if status in _JSON_STATUSES:
            try:
                return response.json()
            except ValueError as e:
                raise ApiClientError(
                    f"Error parsing response ({status}): {body}",
                    status_code=status,
                    body=body,
                ) from e
        if status == 401:
            # Likely an expired token; the next authenticated call fetches a new one.
            self._token.clear()
            raise ApiClientTokenError(f"Got a 401: {body}", status_code=status, body=body)
        raise ApiClientError(
            f"Error interpreting response ({status}): {body}",
            status_code=status,
            body=body,
        )

    def _authenticate(self) -> None:
        with self._token.lock:
            if self._token.has_token():
                return

            self._log(logging.DEBUG, "Authenticating", client_id=self._cfg.client_id)
            response = self._t.request(
                "POST",
                f"{self._cfg.oauth_url}oauth/token",
                data={"grant_type": "client_credentials"},
                auth=(self._cfg.client_id, self._cfg.client_secret),
            )
            token = _extract_access_token(response)
            if token is None:
                # Not raised here: the API call that follows reports the 401.
                self._log(logging.WARNING, "Authentication failed, continuing without token",
                          code=response.status_code)
                return
            self._token.set(token)

    def _log(self, level: int, msg: str, **fields: Any) -> None:
        if level < self._level:
            return
        details = " ".join(f"{k}={v}" for k, v in fields.items())
        log.log(level, "PlatformApiClient: %s %s", msg, details, extra={"platform_api": fields})


def _extract_access_token(response: httpx.Response) -> str | None:
    if response.status_code != 200:
        return None
    try:
        data = response.json()
    except ValueError:
        return None
    token = data.get("access_token") if isinstance(data, dict) else None
    if isinstance(token, str) and token:
        return token
    return None
