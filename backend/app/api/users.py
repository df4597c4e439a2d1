"""
API endpoints для пользователей и токенов устройств.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import verify_api_key
from app.models.user import User
from app.schemas.user import UserCreate, UserResponse, FcmTokenUpdate
from app.services.user_service import UserService

router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(verify_api_key)],
)


def _get_user_or_404(service: UserService, user_id: int) -> User:
    user = service.get_by_id(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Пользователь с ID {user_id} не найден",
        )
    return user


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(data: UserCreate, db: Session = Depends(get_db)):
    """Создать пользователя."""
    service = UserService(db)
    return UserResponse.from_user(service.create(data))


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db)):
    """Получить пользователя по ID."""
    service = UserService(db)
    return UserResponse.from_user(_get_user_or_404(service, user_id))


@router.put("/{user_id}/fcm-token", response_model=UserResponse)
def set_fcm_token(user_id: int, data: FcmTokenUpdate, db: Session = Depends(get_db)):
    """Зарегистрировать токен устройства для push-уведомлений."""
    service = UserService(db)
    user = _get_user_or_404(service, user_id)
    return UserResponse.from_user(service.set_fcm_token(user, data.fcm_token))


@router.delete("/{user_id}/fcm-token", response_model=UserResponse)
def clear_fcm_token(user_id: int, db: Session = Depends(get_db)):
    """Удалить токен устройства."""
    service = UserService(db)
    user = _get_user_or_404(service, user_id)
    return UserResponse.from_user(service.clear_fcm_token(user))
