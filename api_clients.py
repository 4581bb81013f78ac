"""Factory function for creating the HTTP client used against Canvas."""

import httpx

import config
from auth import CanvasCredentials
from utils.logger import get_logger

logger = get_logger()


def build_client(credentials: CanvasCredentials, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """Builds an async HTTP client bound to a Canvas instance.

    Requests made with a relative URL go to the Canvas API and carry the
    access token. Attachment URLs are absolute and may point at a file
    host, so redirects are followed.

    Args:
        credentials: Canvas base URL and access token.
        transport: Optional transport override, mainly for tests.

    Returns:
        httpx.AsyncClient: A client the caller is responsible for closing.
    """
    logger.debug(f"Building HTTP client for {credentials.base_url} (timeout {config.HTTP_TIMEOUT}s)...")
    return httpx.AsyncClient(
        base_url=credentials.api_url,
        headers={
            "Authorization": f"Bearer {credentials.access_token}",
            "Accept": "application/json",
        },
        timeout=config.HTTP_TIMEOUT,
        follow_redirects=True,
        transport=transport,
    )
