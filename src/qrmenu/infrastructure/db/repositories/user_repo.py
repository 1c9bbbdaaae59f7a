from __future__ import annotations

from sqlalchemy import Engine, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from qrmenu.application.ports.repositories import DuplicateEmailError, UserRepository
from qrmenu.domain.common.ids import UserId
from qrmenu.domain.user.entities import User
from qrmenu.infrastructure.db.models.user import UserModel
from qrmenu.infrastructure.db.repositories.converters import to_user
from qrmenu.infrastructure.db.session import get_engine


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def get(self, user_id: UserId) -> User | None:
        with Session(self._engine) as session:
            model = session.get(UserModel, str(user_id))
            return to_user(model) if model is not None else None

    def get_by_email(self, email: str) -> User | None:
        statement = select(UserModel).where(UserModel.email == email)
        with Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()
            return to_user(model) if model is not None else None

    def add(self, user: User) -> User:
        model = UserModel(
            id=str(user.user_id),
            email=user.email,
            name=user.name,
            password_hash=user.password_hash,
            created_at=user.created_at,
        )
        with Session(self._engine) as session:
            session.add(model)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateEmailError(f"email already registered: {user.email}") from exc
            return to_user(model)
