"""
Authentication Dependency for FastAPI.

Tokens are issued by the auth service; this service only verifies them.
The user id is the ``sub`` claim. REST requests carry the token in the
Authorization header (Bearer scheme). The WebSocket handshake may carry it
in the ``token`` query parameter instead, since browsers cannot set headers
on a WebSocket upgrade.

Config needed (from chatline.config.settings):
- SERVICE_AUTH_SECRET
- SERVICE_AUTH_ISSUER
- SERVICE_AUTH_AUDIENCE
"""

import jwt
from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, HTTPException, WebSocket, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from chatline.domain.value_objects.user_id import UserId
from chatline.config.settings import Config


@dataclass
class AuthUser:
    user_id: UserId
    name: Optional[str] = None


class InvalidTokenError(Exception):
    """Token missing, expired, or without a usable subject."""


security = HTTPBearer()


def decode_token(token: str) -> AuthUser:
    """
    Verify a service token and build the caller's identity.

    Raises:
        InvalidTokenError: If the token is invalid, expired, or missing required claims
    """
    if not token:
        raise InvalidTokenError("Missing token")
    try:
        claims = jwt.decode(
            token,
            Config.SERVICE_AUTH_SECRET,
            algorithms=["HS256"],
            audience=Config.SERVICE_AUTH_AUDIENCE,
            issuer=Config.SERVICE_AUTH_ISSUER,
            options={"require": ["exp", "iat", "aud", "iss", "sub"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise InvalidTokenError("Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError(f"Invalid token: {str(e)}") from e

    try:
        user_id = UserId(claims["sub"])
    except ValueError as e:
        raise InvalidTokenError("Invalid subject claim") from e

    return AuthUser(user_id=user_id, name=claims.get("name"))


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> AuthUser:
    """
    Extract and validate user from JWT token.

    Raises:
        HTTPException 401 if token is invalid, expired, or missing required claims
    """
    try:
        return decode_token(credentials.credentials)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        ) from e


def websocket_token(websocket: WebSocket) -> str:
    """Token from ``?token=`` or, failing that, the Authorization header."""
    token = websocket.query_params.get("token")
    if token:
        return token
    header = websocket.headers.get("authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer":
        return credentials.strip()
    return ""
