"""
API endpoints.
"""
from fastapi import APIRouter

from app.api import users, assignments, reminders

# Главный роутер API
api_router = APIRouter(prefix="/api/v1")

# Подключаем все модули
api_router.include_router(users.router)
api_router.include_router(assignments.router)
api_router.include_router(reminders.router)

__all__ = ["api_router"]
