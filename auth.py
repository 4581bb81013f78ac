"""Loads the Canvas access token and instance URL."""

from dataclasses import dataclass
from typing import Optional

import config
from utils.logger import get_logger
from utils.error_handler import ConfigError

logger = get_logger()


@dataclass(frozen=True)
class CanvasCredentials:
    base_url: str
    access_token: str

    @property
    def api_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/api/v1"


def get_credentials(base_url: Optional[str] = None, access_token: Optional[str] = None) -> CanvasCredentials:
    """Gets the Canvas credentials from arguments or the environment.

    Values passed in take precedence over CANVAS_BASE_URL and
    CANVAS_ACCESS_TOKEN. The token is only checked for presence here;
    CanvasService.verify_credentials() checks it against the server.

    Returns:
        CanvasCredentials: Base URL and token.

    Raises:
        ConfigError: If either value is missing or the URL is not http(s).
    """
    base_url = base_url or config.CANVAS_BASE_URL
    access_token = access_token or config.CANVAS_ACCESS_TOKEN

    if not base_url:
        logger.critical("CANVAS_BASE_URL is not set.")
        raise ConfigError("Missing required environment variable: CANVAS_BASE_URL")
    if not access_token:
        logger.critical("CANVAS_ACCESS_TOKEN is not set.")
        raise ConfigError("Missing required environment variable: CANVAS_ACCESS_TOKEN")
    if not base_url.startswith(("http://", "https://")):
        raise ConfigError(f"CANVAS_BASE_URL must start with http:// or https://, got '{base_url}'")

    logger.info(f"Using Canvas instance at {base_url}")
    return CanvasCredentials(base_url=base_url, access_token=access_token)
