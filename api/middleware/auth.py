"""
Authentication Middleware

API key validation for the admin endpoints. The webhook is not protected.
"""

import secrets
from typing import Optional

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

from api.config import get_settings

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def _unauthorized(code: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": {"code": code, "message": message}},
    )


async def verify_api_key(
    api_key: Optional[str] = Security(api_key_header)
) -> str:
    """
    Verify the X-API-Key header against API_KEYS.

    In debug mode with no keys configured, every request is let through.
    """
    settings = get_settings()
    valid_keys = settings.api_key_list

    if settings.debug and not valid_keys:
        return "debug-mode"

    if not api_key:
        raise _unauthorized("AUTH_REQUIRED", "API key required. Include X-API-Key header.")

    # Constant-time comparison against every configured key
    if not any(secrets.compare_digest(api_key, k) for k in valid_keys):
        raise _unauthorized("INVALID_API_KEY", "Invalid API key.")

    return api_key
