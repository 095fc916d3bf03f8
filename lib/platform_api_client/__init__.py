from .client import PlatformApiClient, RequestOptions, parse_http_options
from .config_types import ClientConfig, resolve_config
from .errors import ApiClientError, ApiClientTokenError, ConfigError, NetworkError, PlatformApiClientError

__all__ = [
    "PlatformApiClient",
    "RequestOptions",
    "parse_http_options",
    "ClientConfig",
    "resolve_config",
    "ApiClientError",
    "ApiClientTokenError",
    "ConfigError",
    "NetworkError",
    "PlatformApiClientError",
]
