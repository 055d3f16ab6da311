# app/api/deps.py
from typing import Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError

from app.core.security import decode_token
from app.db.session import get_db  # noqa: F401  re-exported for endpoints
from app.schemas.token import Principal, TokenPayload

# Only used to pull the bearer token out of the Authorization header
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")
# Optional version that doesn't raise an error when token is missing
oauth2_scheme_optional = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


def _principal_from_token(token: str) -> Principal:
    payload = decode_token(token)
    token_data = TokenPayload(**payload)
    if token_data.type != "access" or token_data.email is None or token_data.role is None:
        raise ValueError("not an access token")
    return Principal(user_id=token_data.sub, email=token_data.email, role=token_data.role)


def get_current_user(token: str = Depends(oauth2_scheme)) -> Principal:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        return _principal_from_token(token)
    except (JWTError, ValueError):
        # Catches any error from jose or Pydantic validation
        raise credentials_exception


def get_current_user_optional(
    token: str | None = Depends(oauth2_scheme_optional),
) -> Principal | None:
    if token is None:
        return None
    try:
        return _principal_from_token(token)
    except (JWTError, ValueError):
        # Public endpoints treat a bad token as anonymous
        return None


def get_request_meta(request: Request) -> Dict[str, Optional[str]]:
    """Client details recorded alongside user activity."""
    forwarded = request.headers.get("x-forwarded-for")
    ip_address = forwarded.split(",")[0].strip() if forwarded else None
    if ip_address is None and request.client is not None:
        ip_address = request.client.host
    return {"ip_address": ip_address, "user_agent": request.headers.get("user-agent")}
