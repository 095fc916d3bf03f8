from __future__ import annotations

import logging

CLIENT_LOGGER = "platform_api_client"


def setup_logging(verbose: bool, log_level: str | None = None) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    # httpx is noisy at debug
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.DEBUG if verbose else logging.WARNING)

    # --log-level opens the client logger on its own, without -v.
    # Unknown names are left to the client, which rejects them.
    if log_level:
        client_level = logging.getLevelName(log_level.strip().upper())
        if isinstance(client_level, int):
            logging.getLogger(CLIENT_LOGGER).setLevel(client_level)
