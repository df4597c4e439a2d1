"""
Pydantic схемы для пользователей.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserBase(BaseModel):
    """Базовая схема пользователя."""
    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[str] = None


class UserCreate(UserBase):
    """Схема создания пользователя."""
    fcm_token: Optional[str] = None


class FcmTokenUpdate(BaseModel):
    """Регистрация токена устройства из мобильного клиента."""
    fcm_token: str = Field(..., min_length=1, max_length=4096)


class UserResponse(UserBase):
    """Схема ответа с данными пользователя."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    has_fcm_token: bool = False
    created_at: datetime

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        # Сам токен наружу не отдаём
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            has_fcm_token=bool(user.fcm_token),
            created_at=user.created_at,
        )
