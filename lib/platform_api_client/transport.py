from __future__ import annotations

from typing import Any

import httpx

from .config_types import ClientConfig
from .errors import NetworkError

USER_AGENT = "platform-api-client/0.1.0"


class Transport:
    def __init__(self, cfg: ClientConfig):
        self._cfg = cfg
        # 3xx responses are classified by the client, never followed.
        self._client = httpx.Client(
            timeout=cfg.timeout_s,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=False,
        )

    def close(self) -> None:
        self._client.close()

    def request(
            self,
            method: str,
            url: str,
            *,
            headers: dict[str, str] | None = None,
            content: str | bytes | None = None,
            data: dict[str, Any] | None = None,
            auth: tuple[str, str] | None = None,
    ) -> httpx.Response:
        try:
            return self._client.request(
                method,
                url,
                headers=headers,
                content=content,
                data=data,
                auth=auth,
            )
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise NetworkError(f"Failed to {method} {url}: {e}") from e
