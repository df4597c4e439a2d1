"""
Модели SQLAlchemy: импортируем все для корректной регистрации relationship.
"""
from app.models.user import User  # noqa: F401
from app.models.assignment import Assignment  # noqa: F401
