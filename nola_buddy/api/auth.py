"""Static API key verification."""
from __future__ import annotations

import os
import secrets

from fastapi import Header, HTTPException, status

DEV_BYPASS_ENV = "NOLA_DEV_AUTH_BYPASS"
API_KEY_ENV = "NOLA_API_KEY"
DEV_PRINCIPAL = "dev"
API_KEY_PRINCIPAL = "api-key"


class AuthError(HTTPException):
    def __init__(self, detail: str, code: int = status.HTTP_401_UNAUTHORIZED) -> None:
        super().__init__(status_code=code, detail=detail)


def require_api_key(
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> str:
    """Accept the configured key from ``X-API-Key`` or a Bearer header.

    During development/testing set NOLA_DEV_AUTH_BYPASS=1 to skip the check.
    """

    if os.getenv(DEV_BYPASS_ENV) == "1":
        return DEV_PRINCIPAL

    expected = (os.getenv(API_KEY_ENV) or "").strip()
    if not expected:
        raise AuthError(
            "Server missing NOLA_API_KEY.", code=status.HTTP_503_SERVICE_UNAVAILABLE
        )

    supplied = x_api_key
    if not supplied and authorization and authorization.startswith("Bearer "):
        supplied = authorization.split(" ", 1)[1]
    if not supplied:
        raise AuthError("Missing API key.")

    if not secrets.compare_digest(supplied.strip().encode("utf-8"), expected.encode("utf-8")):
        raise AuthError("Invalid API key.")
    return API_KEY_PRINCIPAL
