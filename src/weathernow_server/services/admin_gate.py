"""
Admin gate for mutating announcement calls.

A single shared secret protects create/delete/clear. The comparison is a
plain string equality, not a constant-time compare. That is acceptable for a
kiosk on a trusted network but has to be revisited before the secret guards
anything more sensitive.
"""

import json
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status
from loguru import logger

ADMIN_HEADER = "x-admin-password"


class AdminGate:
    """Checks a supplied secret against the configured admin password."""

    def __init__(self, secret: str):
        self._secret = secret

    def authorize(self, supplied: Optional[str]) -> bool:
        if supplied is None:
            return False
        return supplied == self._secret


def get_admin_gate(request: Request) -> AdminGate:
    """FastAPI dependency returning the application's AdminGate."""
    return request.app.state.admin_gate


async def _password_from_body(request: Request) -> Optional[str]:
    """Read the optional ``password`` field of a JSON body."""
    if "application/json" not in request.headers.get("content-type", ""):
        return None
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if isinstance(body, dict) and isinstance(body.get("password"), str):
        return body["password"]
    return None


async def require_admin(
    request: Request,
    x_admin_password: Optional[str] = Header(None),
    gate: AdminGate = Depends(get_admin_gate),
) -> None:
    """
    FastAPI dependency that rejects requests without the admin secret.

    The secret is taken from the ``x-admin-password`` header, or from the
    ``password`` field of a JSON body when the header is absent. Resolved
    before the request body is validated, so a wrong secret always yields
    401 and never reaches the store.
    """
    supplied = x_admin_password
    if supplied is None:
        supplied = await _password_from_body(request)

    if not gate.authorize(supplied):
        logger.warning(f"🔒 Unauthorized {request.method} {request.url.path}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
