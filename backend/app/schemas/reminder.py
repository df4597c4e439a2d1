"""
Pydantic схемы для проверки напоминаний.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ReminderCheckRequest(BaseModel):
    """Необязательный список окон для принудительного запуска."""
    windows: Optional[list[str]] = None


class ReminderFailureResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    window: str
    assignment_id: Optional[int] = None
    error: str
    reason: str


class ReminderRunResponse(BaseModel):
    """Итог проверки напоминаний."""
    model_config = ConfigDict(from_attributes=True)

    checked_at: datetime
    windows: list[str]
    sent: dict[str, int]
    skipped: dict[str, int]
    errors: list[ReminderFailureResponse]
    total_sent: int

    @classmethod
    def from_report(cls, report) -> "ReminderRunResponse":
        return cls(
            checked_at=report.checked_at,
            windows=list(report.windows),
            sent=dict(report.sent),
            skipped=dict(report.skipped),
            errors=[ReminderFailureResponse.model_validate(e) for e in report.errors],
            total_sent=report.total_sent,
        )


class ReminderWindowResponse(BaseModel):
    """Окно напоминаний из таблицы."""
    model_config = ConfigDict(from_attributes=True)

    key: str
    days_until_deadline: int
    trigger_hour: int
    title: str
    body_template: str


class ReminderWindowListResponse(BaseModel):
    items: list[ReminderWindowResponse]
    total: int
