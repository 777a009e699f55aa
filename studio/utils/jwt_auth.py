"""
JWT session tokens for the admin back-office.
Login exchanges the admin password for an expiring token; every CMS endpoint verifies it.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from fastapi import HTTPException, status, Header, Request
from studio.config import settings
from studio.utils.auth import verify_admin_password

ALGORITHM = "HS256"
COOKIE_NAME = "cms_token"


def _signing_key() -> str:
    """
    Return JWT_SECRET_KEY.

    Raises:
        HTTPException: 500 if no secret is configured; no token is issued or accepted then
    """
    if not settings.JWT_SECRET_KEY:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Authentication not configured", "message": "JWT_SECRET_KEY not configured"}
        )
    return settings.JWT_SECRET_KEY


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Dictionary of claims to include in token
        expires_delta: Optional custom expiration time (defaults to JWT_EXPIRE_MINUTES)

    Returns:
        str: Encoded JWT token
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)

    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)

    to_encode.update({
        "exp": now + expires_delta,
        "iat": now,
        "type": "access"
    })

    return jwt.encode(to_encode, _signing_key(), algorithm=ALGORITHM)


def verify_token(token: str) -> dict:
    """
    Verify and decode a JWT token. Expiry is enforced by python-jose.

    Raises:
        HTTPException: 401 if token is invalid, expired, or not an access token
        HTTPException: 500 if JWT_SECRET_KEY is not configured
    """
    key = _signing_key()
    try:
        payload = jwt.decode(token, key, algorithms=[ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "Invalid token", "message": "Authentication token is invalid or expired"},
            headers={"WWW-Authenticate": "Bearer"}
        )

    if payload.get("type") != "access" or payload.get("role") != "admin":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "Invalid token type", "message": "Token is not an admin access token"},
            headers={"WWW-Authenticate": "Bearer"}
        )

    return payload


def verify_cms_token(
    request: Request,
    authorization: Optional[str] = Header(None, description="Bearer token for authentication (fallback to cookie)")
) -> dict:
    """
    FastAPI dependency for JWT token authentication.
    Reads the token from the httpOnly cookie (preferred) or the Authorization header.

    Returns:
        dict: Decoded token payload

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired
    """
    token = request.cookies.get(COOKIE_NAME)

    if not token and authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            token = parts[1]

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "Missing token", "message": "Authentication required"},
            headers={"WWW-Authenticate": "Bearer"}
        )

    return verify_token(token)


def authenticate_admin(password: str) -> dict:
    """
    Check the admin password and return the claims for a new token.

    Raises:
        HTTPException: 401 if password is invalid, 500 if no password hash or JWT secret is configured
    """
    _signing_key()

    try:
        is_valid = verify_admin_password(password)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Authentication not configured", "message": str(e)}
        )

    if not is_valid:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "Invalid credentials", "message": "Incorrect password"}
        )

    return {
        "role": "admin",
        "sub": "cms_admin"
    }
