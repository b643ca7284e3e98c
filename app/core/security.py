"""Security utilities for issuing and verifying JWT tokens and resolving the caller identity."""

import logging
from typing import Optional
from datetime import datetime, timedelta, timezone
import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ConfigDict

from .config import settings
from app.constants.constants import UserRole

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class Identity(BaseModel):
    """Decoded caller identity: the id the token was issued for and its role."""

    model_config = ConfigDict(frozen=True)

    id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin.value


def create_jwt_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Creates a JWT (JSON Web Token) with the provided data and expiration time.

    Args:
        data (dict): The payload data to be encoded in the JWT.
        expires_delta (timedelta, optional): The time until the token expires.
            Defaults to ACCESS_TOKEN_EXPIRE_MINUTES.

    Returns:
        str: The encoded JWT string.

    Example:
        >>> token = create_jwt_token({"sub": "12", "role": "admin"})

    Note:
        The token includes standard JWT claims:
        - exp (expiration time)
        - iat (issued at time)
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    to_encode.update({
        "exp": now + expires_delta,
        "iat": now
    })
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_identity_token(identity_id: int, role: str, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a token whose claims decode back into an ``Identity``."""
    return create_jwt_token({"sub": str(identity_id), "role": role}, expires_delta)


def decode_jwt_token(token: str) -> dict:
    """Decodes and validates a JWT token.

    Args:
        token (str): The JWT token string to decode.

    Returns:
        dict: The decoded token payload containing the claims.

    Raises:
        jwt.InvalidTokenError: If the token is invalid, expired, or improperly formatted.
    """
    return jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[settings.ALGORITHM]
    )


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Identity:
    """
    Dependency to resolve the caller from the ``Authorization: Bearer`` header
    Raises 401 if not authenticated
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied. No token provided."
        )

    try:
        payload = decode_jwt_token(credentials.credentials)
        return Identity(id=int(payload["sub"]), role=payload["role"])
    except (jwt.InvalidTokenError, KeyError, TypeError, ValueError) as e:
        logger.info(f"Rejected token: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token."
        )


async def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    """Dependency that only lets admin callers through."""
    if not identity.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return identity
