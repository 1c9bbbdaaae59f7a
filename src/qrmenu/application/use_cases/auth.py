from __future__ import annotations

import logging
from dataclasses import dataclass

from qrmenu.application.dto.requests import LoginRequest, RegisterRequest
from qrmenu.application.dto.responses import RegisterResponse, UserResponse
from qrmenu.application.mappers.user_mapper import to_user_response
from qrmenu.application.metrics.menu_activity import record_login, record_user_registered
from qrmenu.application.ports.repositories import DuplicateEmailError, UserRepository
from qrmenu.application.ports.security import PasswordHasher
from qrmenu.application.ports.sessions import SessionStore
from qrmenu.application.use_cases.context import AuthContext
from qrmenu.domain.common.ids import UserId, new_id
from qrmenu.domain.user.entities import User

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_SECONDS = 30 * 24 * 60 * 60


class EmailAlreadyRegisteredError(Exception):
    pass


class InvalidCredentialsError(Exception):
    pass


class UnauthorizedError(Exception):
    pass


@dataclass(frozen=True)
class LoginResult:
    session_id: str
    user: UserResponse


class RegisterUser:
    def __init__(self, user_repository: UserRepository, password_hasher: PasswordHasher) -> None:
        self._user_repository = user_repository
        self._password_hasher = password_hasher

    def execute(self, request_dto: RegisterRequest) -> RegisterResponse:
        email = str(request_dto.email)
        if self._user_repository.get_by_email(email) is not None:
            raise EmailAlreadyRegisteredError("this email is already registered")

        user = User(
            user_id=UserId(new_id("usr")),
            email=email,
            name=request_dto.name,
            password_hash=self._password_hasher.hash(request_dto.password),
        )
        try:
            created = self._user_repository.add(user)
        except DuplicateEmailError as exc:
            raise EmailAlreadyRegisteredError("this email is already registered") from exc

        record_user_registered()
        logger.info("user_registered", extra={"user_id": str(created.user_id)})
        return RegisterResponse(message="registration successful", user=to_user_response(created))


class Login:
    def __init__(
        self,
        user_repository: UserRepository,
        password_hasher: PasswordHasher,
        sessions: SessionStore,
        ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS,
    ) -> None:
        self._user_repository = user_repository
        self._password_hasher = password_hasher
        self._sessions = sessions
        self._ttl_seconds = ttl_seconds

    def execute(self, request_dto: LoginRequest) -> LoginResult:
        user = self._user_repository.get_by_email(str(request_dto.email))
        if user is None or not self._password_hasher.verify(
            user.password_hash, request_dto.password
        ):
            record_login("rejected")
            raise InvalidCredentialsError("invalid email or password")

        session_id = self._sessions.create(user.user_id, ttl_seconds=self._ttl_seconds)
        record_login("accepted")
        logger.info("session_created", extra={"user_id": str(user.user_id)})
        return LoginResult(session_id=session_id, user=to_user_response(user))


class Logout:
    def __init__(self, sessions: SessionStore) -> None:
        self._sessions = sessions

    def execute(self, auth: AuthContext) -> None:
        self._sessions.revoke(auth.session_id)


class ResolveSession:
    """Turns a session id from the request cookie into an ``AuthContext``."""

    def __init__(self, sessions: SessionStore) -> None:
        self._sessions = sessions

    def execute(self, session_id: str | None) -> AuthContext:
        if not session_id:
            raise UnauthorizedError("authentication required")
        user_id = self._sessions.resolve(session_id)
        if user_id is None:
            raise UnauthorizedError("session expired or invalid")
        return AuthContext(user_id=user_id, session_id=session_id)


class GetSessionUser:
    def __init__(self, user_repository: UserRepository) -> None:
        self._user_repository = user_repository

    def execute(self, auth: AuthContext) -> UserResponse:
        user = self._user_repository.get(auth.user_id)
        if user is None:
            raise UnauthorizedError("session user no longer exists")
        return to_user_response(user)
