import logging
import os
from datetime import tzinfo
from functools import lru_cache
from typing import Any, AsyncGenerator, Dict, Optional

import pytz
from fastapi import Request

from ..client import WorkshopAPIClient

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


class NotAuthenticated(Exception):
    """Raised when a protected page is requested without a signed-in session."""


# --- Settings Dependency ---

@lru_cache()
def get_settings() -> Dict[str, Any]:
    """
    Returns application settings from environment variables.
    Cached to avoid reading env vars on every request.
    """
    return {
        "api_base_url": os.environ.get("WORKSHOP_API_URL", "http://localhost:8000"),
        "api_timeout": float(os.environ.get("WORKSHOP_API_TIMEOUT", "10")),
        "session_secret": os.environ.get("SESSION_SECRET", "dev-secret-change-me"),
        "display_timezone": os.environ.get("DISPLAY_TIMEZONE", ""),
        "log_level": os.environ.get("LOG_LEVEL", "INFO").upper(),
    }


def resolve_timezone(name: str) -> Optional[tzinfo]:
    """
    Resolves the configured display timezone.

    Returns:
        The pytz zone, or None (the server's local clock) when the name is
        empty or unknown.
    """
    if not name:
        return None
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        logger.warning(f"Unknown DISPLAY_TIMEZONE {name!r}; using the server's local clock")
        return None


def get_display_timezone() -> Optional[tzinfo]:
    return resolve_timezone(get_settings()["display_timezone"])


# --- API Client Dependency ---

async def get_api_client(request: Request) -> AsyncGenerator[WorkshopAPIClient, None]:
    """
    Dependency yielding a workshop API client for the current request.

    The signed-in user's token, if any, is attached as a bearer token. The
    client is closed once the response has been produced.
    """
    settings = get_settings()
    client = WorkshopAPIClient(
        base_url=settings["api_base_url"],
        token=request.session.get(TOKEN_KEY),
        timeout=settings["api_timeout"],
    )
    try:
        yield client
    finally:
        await client.aclose()


# --- Auth Dependency ---

async def require_user(request: Request) -> Dict[str, Any]:
    """
    Guard for protected pages.

    Returns:
        The signed-in user as stored in the session.

    Raises:
        NotAuthenticated: If the session holds no token.
    """
    if not request.session.get(TOKEN_KEY):
        raise NotAuthenticated()
    return request.session.get(USER_KEY) or {}
