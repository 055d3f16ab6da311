# app/api/v1/endpoints/auth.py
from fastapi import APIRouter, Cookie, Depends, Request, Response, status
from sqlalchemy.orm import Session

from app.api import deps
from app.core.config import settings
from app.core.limiter import limiter
from app.db.session import get_db
from app.schemas.common import Message
from app.schemas.token import Token
from app.schemas.user import User, UserLogin, UserRegister, UserWithToken
from app.services import auth_service

router = APIRouter(prefix="/auth", tags=["Auth"])


def _set_refresh_cookie(response: Response, refresh_token: str) -> None:
    response.set_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        value=refresh_token,
        httponly=True,
        secure=settings.ENV == "prod",
        samesite="strict",
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
    )


@router.post("/register", response_model=UserWithToken, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def register(
    request: Request,
    response: Response,
    user_in: UserRegister,
    db: Session = Depends(get_db),
):
    """Create an account with the default user role and sign it in."""
    result = auth_service.register(
        db, user_in=user_in, request_meta=deps.get_request_meta(request)
    )
    _set_refresh_cookie(response, result.refresh_token)
    return UserWithToken(user=User.model_validate(result.user), access_token=result.access_token)


@router.post("/login", response_model=UserWithToken)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def login(
    request: Request,
    response: Response,
    credentials: UserLogin,
    db: Session = Depends(get_db),
):
    result = auth_service.login(
        db,
        email=credentials.email,
        password=credentials.password,
        request_meta=deps.get_request_meta(request),
    )
    _set_refresh_cookie(response, result.refresh_token)
    return UserWithToken(user=User.model_validate(result.user), access_token=result.access_token)


@router.post("/refresh", response_model=Token)
def refresh_token(
    refresh_token: str | None = Cookie(default=None, alias=settings.REFRESH_COOKIE_NAME),
    db: Session = Depends(get_db),
):
    return Token(access_token=auth_service.refresh(db, refresh_token=refresh_token))


@router.post("/logout", response_model=Message)
def logout(response: Response):
    response.delete_cookie(key=settings.REFRESH_COOKIE_NAME)
    return Message(message="Logged out")
