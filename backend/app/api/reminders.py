"""
API endpoints для проверки напоминаний о дедлайнах.
Позволяет внешнему триггеру (cron-сервису) вызвать проверку по HTTP.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.exceptions import AppException, ConfigurationError
from app.core.security import verify_api_key
from app.core.utils import Clock, get_app_tz
from app.schemas.reminder import (
    ReminderCheckRequest,
    ReminderRunResponse,
    ReminderWindowListResponse,
    ReminderWindowResponse,
)
from app.services.push_gateway import PushGateway, build_gateway
from app.services.reminder_service import build_reminder_scheduler
from app.services.reminder_windows import REMINDER_WINDOWS

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/reminders",
    tags=["reminders"],
    dependencies=[Depends(verify_api_key)],
)


def get_push_gateway():
    """Шлюз push-уведомлений на время запроса."""
    try:
        gateway = build_gateway()
    except ConfigurationError as e:
        logger.error("Reminder check refused: %s", e.reason)
        raise AppException(503, e.reason, "CONFIGURATION_ERROR")
    try:
        yield gateway
    finally:
        gateway.close()


def get_clock() -> Clock:
    return Clock(get_app_tz())


@router.get("/windows", response_model=ReminderWindowListResponse)
def list_windows():
    """Таблица окон напоминаний."""
    return ReminderWindowListResponse(
        items=[ReminderWindowResponse.model_validate(w) for w in REMINDER_WINDOWS],
        total=len(REMINDER_WINDOWS),
    )


@router.post("/check", response_model=ReminderRunResponse)
def check_reminders(
    data: Optional[ReminderCheckRequest] = Body(None),
    db: Session = Depends(get_db),
    gateway: PushGateway = Depends(get_push_gateway),
    clock: Clock = Depends(get_clock),
):
    """Проверить и разослать напоминания прямо сейчас."""
    scheduler = build_reminder_scheduler(db, gateway, clock=clock)
    report = scheduler.run(force_windows=data.windows if data else None)
    return ReminderRunResponse.from_report(report)
