"""
Pydantic схемы для заданий.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AssignmentBase(BaseModel):
    """Базовая схема задания."""
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    deadline: datetime


class AssignmentCreate(AssignmentBase):
    """Схема создания задания."""
    user_id: int


class AssignmentUpdate(BaseModel):
    """Схема обновления задания."""
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    deadline: Optional[datetime] = None
    is_done: Optional[bool] = None


class AssignmentResponse(AssignmentBase):
    """Схема ответа с данными задания."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[int] = None
    is_done: bool = False
    last_notification_type: Optional[str] = None
    created_at: datetime


class AssignmentListResponse(BaseModel):
    """Схема списка заданий."""
    items: list[AssignmentResponse]
    total: int
