"""
Authentication utilities for API endpoints
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import jwt
from fastapi import Depends, Header, HTTPException

from book_service.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

ANONYMOUS_USER = "anonymousUser"


@dataclass
class AuthContext:
    """Identity of the caller for the current request"""
    is_authenticated: bool
    user: str = ANONYMOUS_USER
    roles: List[str] = field(default_factory=list)


def decode_token(token: str, settings: Settings) -> dict:
    """
    Verify a bearer token and return its claims

    Raises:
        jwt.InvalidTokenError: If the signature, expiry or audience check fails
    """
    options = {"require": ["sub", "exp"]}
    if settings.jwt_audience:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=options,
        )
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        options={**options, "verify_aud": False},
    )


async def authenticate_api(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings)
) -> AuthContext:
    """
    FastAPI dependency for JWT Bearer token authentication.

    Returns:
        AuthContext for the caller (anonymous when auth is disabled)

    Raises:
        HTTPException: 401 if authentication fails
    """
    if not settings.enable_auth:
        return AuthContext(is_authenticated=False)

    if not authorization:
        logger.warning("AUTH: API request missing Authorization header")
        raise HTTPException(status_code=401, detail="Missing Authorization header")

    if not authorization.startswith("Bearer "):
        logger.warning("AUTH: Invalid Authorization header format")
        raise HTTPException(
            status_code=401,
            detail="Invalid authorization header format. Expected 'Bearer <token>'"
        )

    token = authorization[7:]  # Remove "Bearer " prefix

    try:
        claims = decode_token(token, settings)
    except jwt.InvalidTokenError as e:
        logger.warning(f"AUTH: Invalid JWT token: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid JWT token")

    roles = claims.get("roles") or claims.get("auth") or []
    if isinstance(roles, str):
        roles = [role.strip() for role in roles.split(",") if role.strip()]

    logger.debug(f"AUTH: Authenticated {claims['sub']}")
    return AuthContext(is_authenticated=True, user=claims["sub"], roles=list(roles))


class AuthConfig:
    """Centralized authentication configuration for the application"""

    @staticmethod
    def get_auth_dependency():
        """Get the auth dependency applied to every API endpoint"""
        return authenticate_api
