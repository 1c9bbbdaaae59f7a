from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from qrmenu.api.dependencies import (
    get_password_hasher,
    get_session_store,
    get_user_repository,
    require_auth,
    secure_cookies,
    session_cookie_name,
    session_ttl_seconds,
)
from qrmenu.application.dto.requests import LoginRequest, RegisterRequest
from qrmenu.application.dto.responses import MessageResponse, RegisterResponse, SessionResponse
from qrmenu.application.ports.repositories import UserRepository
from qrmenu.application.ports.security import PasswordHasher
from qrmenu.application.ports.sessions import SessionStore
from qrmenu.application.use_cases.auth import GetSessionUser, Login, Logout, RegisterUser
from qrmenu.application.use_cases.context import AuthContext

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse)
def register(
    request_dto: RegisterRequest,
    users: UserRepository = Depends(get_user_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> RegisterResponse:
    return RegisterUser(user_repository=users, password_hasher=hasher).execute(request_dto)


@router.post("/login", response_model=SessionResponse)
def login(
    request_dto: LoginRequest,
    response: Response,
    users: UserRepository = Depends(get_user_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
    sessions: SessionStore = Depends(get_session_store),
) -> SessionResponse:
    ttl_seconds = session_ttl_seconds()
    result = Login(
        user_repository=users,
        password_hasher=hasher,
        sessions=sessions,
        ttl_seconds=ttl_seconds,
    ).execute(request_dto)

    response.set_cookie(
        key=session_cookie_name(),
        value=result.session_id,
        max_age=ttl_seconds,
        httponly=True,
        secure=secure_cookies(),
        samesite="lax",
        path="/",
    )
    return SessionResponse(user=result.user)


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    auth: AuthContext = Depends(require_auth),
    sessions: SessionStore = Depends(get_session_store),
) -> MessageResponse:
    Logout(sessions).execute(auth)
    response.delete_cookie(key=session_cookie_name(), path="/")
    return MessageResponse(message="logged out")


@router.get("/session", response_model=SessionResponse)
def current_session(
    auth: AuthContext = Depends(require_auth),
    users: UserRepository = Depends(get_user_repository),
) -> SessionResponse:
    return SessionResponse(user=GetSessionUser(users).execute(auth))
