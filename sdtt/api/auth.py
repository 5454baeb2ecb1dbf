"""Authentication dependency for the sdtt API.

When SDTT_API_TOKEN is set every API request must carry it as a Bearer
token. When it is not set, authentication is disabled (development mode).
"""

from __future__ import annotations

import secrets

from fastapi import Depends, Header, HTTPException

from sdtt.config.settings import APIConfig


def _get_bearer_token(authorization: str = Header(default="")) -> str:
    """Extract bearer token from Authorization header."""
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer":
        return token.strip()
    return ""


async def require_api_auth(token: str = Depends(_get_bearer_token)) -> str:
    """Dependency that enforces API token authentication.

    The token is read at call time so tests can override the environment.
    """
    api_token = APIConfig().api_token
    if not api_token:
        return ""
    if not secrets.compare_digest(token, api_token):
        raise HTTPException(status_code=401, detail="Invalid or missing API token")
    return token
