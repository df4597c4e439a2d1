"""
Сервис для работы с пользователями.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.models.user import User
from app.schemas.user import UserCreate
from app.core.exceptions import DuplicateError
from app.core.utils import sanitize_text

logger = logging.getLogger(__name__)


class UserService:
    """Сервис для управления пользователями и их токенами устройств."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Получить пользователя по ID."""
        return self.db.query(User).filter(User.id == user_id).first()

    def create(self, data: UserCreate) -> User:
        """Создать нового пользователя."""
        logger.info("Creating user: email=%s", data.email)
        user = User(
            name=sanitize_text(data.name, max_length=200),
            email=data.email,
            fcm_token=data.fcm_token,
        )
        self.db.add(user)
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            logger.warning("Duplicate user email: %s", data.email)
            raise DuplicateError(f"Пользователь с email {data.email} уже существует")
        self.db.refresh(user)
        logger.info("User created: id=%s", user.id)
        return user

    def set_fcm_token(self, user: User, fcm_token: str) -> User:
        """Сохранить токен устройства (перезаписывает предыдущий)."""
        logger.info("Registering FCM token for user %s", user.id)
        user.fcm_token = fcm_token.strip()
        self.db.flush()
        self.db.refresh(user)
        return user

    def clear_fcm_token(self, user: User) -> User:
        """Удалить токен (выход из приложения), напоминания перестанут приходить."""
        logger.info("Clearing FCM token for user %s", user.id)
        user.fcm_token = None
        self.db.flush()
        self.db.refresh(user)
        return user
