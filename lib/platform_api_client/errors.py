from __future__ import annotations


class PlatformApiClientError(Exception):
    """Base client error."""


class ConfigError(PlatformApiClientError):
    def __init__(self, message: str, *, field: str | None = None, env_var: str | None = None):
        super().__init__(message)
        self.field = field
        self.env_var = env_var


class ApiClientError(PlatformApiClientError):
    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class NetworkError(ApiClientError):
    """Transport/network layer error."""


class ApiClientTokenError(ApiClientError):
    """Got a 401; the cached access token has been dropped."""
