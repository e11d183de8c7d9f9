"""
FastAPI dependencies for authentication.
"""
from typing import Annotated
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import ValidationError

from app.features.users.auth import verify_jwt_token
from app.features.users.schemas import Principal
from app.utils import get_logger


log = get_logger(__name__)
security = HTTPBearer()


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
) -> Principal:
    """
    Get the current authenticated principal from the bearer JWT.

    The token carries `sub` (user ID), `role` and `workspace_id` claims.
    An unrecognised role does not fail authentication; it resolves to
    None and every permission check downstream denies.

    Usage:
        @router.get("/me")
        async def get_me(principal: Principal = Depends(get_current_principal)):
            return principal
    """
    payload = verify_jwt_token(credentials.credentials)

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    try:
        principal = Principal.from_claims(payload)
    except ValidationError:
        log.info(f"Rejected token for {user_id!r}: claims do not form a principal")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    if principal.role is None:
        log.info(f"User {principal.user_id} has no recognised role (claim={payload.get('role')!r})")
    return principal


def get_authorization_header(request) -> str:
    """
    Extract authorization header for rate limiting.
    Used with slowapi Limiter.
    """
    auth = request.headers.get("Authorization", "")
    return auth or "anonymous"
