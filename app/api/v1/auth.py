"""Auth endpoints: register, login, refresh, logout, logout-all, profile."""

from fastapi import APIRouter, status

from app.api.deps import AppSettings, AuthenticatedUser, DbSession
from app.schemas.auth import (
    AuthResult,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenPair,
    UserOut,
)
from app.schemas.common import ApiResponse
from app.services import auth as auth_service

router = APIRouter()


@router.post(
    "/register",
    response_model=ApiResponse[AuthResult],
    status_code=status.HTTP_201_CREATED,
)
def register(body: RegisterRequest, db: DbSession, settings: AppSettings) -> ApiResponse[AuthResult]:
    """
    Create an account with role 'user' and return it with an access/refresh token pair.
    Fails with 409 if the email (case-insensitive) is already registered.
    """
    result = auth_service.register(
        db, settings, email=body.email, password=body.password, name=body.name
    )
    return ApiResponse(message="Registration successful", data=result)


@router.post("/login", response_model=ApiResponse[AuthResult])
def login(body: LoginRequest, db: DbSession, settings: AppSettings) -> ApiResponse[AuthResult]:
    """
    Authenticate with email and password; returns the user and a new token pair.
    Include the access token in the Authorization header as: Bearer <accessToken>
    """
    result = auth_service.login(db, settings, email=body.email, password=body.password)
    return ApiResponse(message="Login successful", data=result)


@router.post("/refresh", response_model=ApiResponse[TokenPair])
def refresh(body: RefreshTokenRequest, db: DbSession, settings: AppSettings) -> ApiResponse[TokenPair]:
    """Exchange a refresh token for a new pair. The presented refresh token stops working."""
    tokens = auth_service.refresh(db, settings, body.refresh_token)
    return ApiResponse(message="Tokens refreshed successfully", data=tokens)


@router.post("/logout", response_model=ApiResponse[None])
def logout(body: RefreshTokenRequest, db: DbSession) -> ApiResponse[None]:
    """Revoke a refresh token. Repeating the call, or passing an unknown token, still succeeds."""
    auth_service.logout(db, body.refresh_token)
    return ApiResponse(message="Logged out successfully")


@router.post("/logout-all", response_model=ApiResponse[None])
def logout_all(user: AuthenticatedUser, db: DbSession) -> ApiResponse[None]:
    """Revoke every refresh token of the caller (log out on all devices)."""
    auth_service.logout_all(db, user.id)
    return ApiResponse(message="Logged out from all devices")


@router.get("/profile", response_model=ApiResponse[UserOut])
def profile(user: AuthenticatedUser, db: DbSession) -> ApiResponse[UserOut]:
    """Return the caller's account."""
    return ApiResponse(data=auth_service.get_profile(db, user.id))
