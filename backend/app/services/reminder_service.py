"""
Планировщик напоминаний о дедлайнах заданий.

Запускается внешним триггером (cron, CLI, HTTP) раз в несколько минут.
Защита от повторной отправки двухслойная:
  1. грубый фильтр по времени: окно срабатывает только в свой час, в первые минуты;
  2. точный маркер на задании (last_notification_type), проверяется в запросе
     и в условном UPDATE после успешной отправки.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Optional, Sequence
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from app.core.config import Settings, settings
from app.core.exceptions import DeliveryError, StoreError
from app.core.utils import Clock, get_app_tz, localize
from app.services.assignment_store import AssignmentStore, PendingReminder
from app.services.push_gateway import PushGateway
from app.services.reminder_windows import (
    DEFAULT_TRIGGER_TOLERANCE_MINUTES,
    REMINDER_MESSAGE_TYPE,
    REMINDER_WINDOWS,
    ReminderWindow,
    due_windows,
    get_window,
)

logger = logging.getLogger(__name__)


@dataclass
class ReminderFailure:
    """Ошибка по одному заданию (или по всему окну, если assignment_id is None)."""
    window: str
    assignment_id: Optional[int]
    error: str
    reason: str


@dataclass
class ReminderRunReport:
    """Итог одной проверки: сколько отправлено по каждому окну и что сломалось."""
    checked_at: datetime
    windows: list[str] = field(default_factory=list)
    sent: dict[str, int] = field(default_factory=dict)
    skipped: dict[str, int] = field(default_factory=dict)
    errors: list[ReminderFailure] = field(default_factory=list)

    @property
    def total_sent(self) -> int:
        return sum(self.sent.values())

    def add_failure(self, window: str, assignment_id: Optional[int], exc: Exception) -> None:
        reason = getattr(exc, "reason", None) or str(exc)
        self.errors.append(
            ReminderFailure(
                window=window,
                assignment_id=assignment_id,
                error=type(exc).__name__,
                reason=reason,
            )
        )


def build_reminder_data(pending: PendingReminder, window: ReminderWindow, tz: ZoneInfo) -> dict[str, str]:
    """data-часть push-сообщения: клиент по ней открывает нужное задание."""
    return {
        "type": REMINDER_MESSAGE_TYPE,
        "assignment_id": str(pending.assignment_id),
        "notification_type": window.key,
        "deadline": localize(pending.deadline, tz).isoformat(),
    }


class ReminderScheduler:
    """Проверка и рассылка напоминаний по таблице окон."""

    def __init__(
        self,
        store: AssignmentStore,
        gateway: PushGateway,
        clock: Clock,
        windows: Sequence[ReminderWindow] = REMINDER_WINDOWS,
        tolerance_minutes: int = DEFAULT_TRIGGER_TOLERANCE_MINUTES,
    ):
        self.store = store
        self.gateway = gateway
        self.clock = clock
        self.windows = windows
        self.tolerance_minutes = tolerance_minutes

    def run(self, force_windows: Optional[Iterable[str]] = None) -> ReminderRunReport:
        """
        Проверить напоминания прямо сейчас.

        Без ``force_windows`` выполняются окна, чей час совпадает с текущим
        временем. Переданные ключи выполняются в обход фильтра по времени
        (ручная досылка), маркер на заданиях при этом всё равно проверяется.
        """
        now = self.clock.now()
        today = now.date()
        report = ReminderRunReport(checked_at=now)

        if force_windows:
            windows = [get_window(key, self.windows) for key in force_windows]
        else:
            windows = due_windows(now, self.windows, self.tolerance_minutes)

        if not windows:
            logger.info("No reminder windows due at %s", now.isoformat())
            return report

        logger.info("Checking assignment reminders at %s: %s", now.isoformat(), [w.key for w in windows])
        for window in windows:
            report.windows.append(window.key)
            try:
                self.run_window(window, today, report)
            except StoreError as e:
                logger.error("Reminder pass %s aborted: %s", window.key, e.reason)
                report.add_failure(window.key, None, e)

        logger.info(
            "Assignment reminders checked: sent=%d, errors=%d", report.total_sent, len(report.errors)
        )
        return report

    def run_window(self, window: ReminderWindow, today: date, report: ReminderRunReport) -> int:
        """
        Один проход окна: выбрать задания с дедлайном в целевую дату, отправить,
        пометить. Ошибка доставки по одному заданию не останавливает остальные.
        Возвращает число отправленных уведомлений.
        """
        target_date = window.target_date(today)
        pending = self.store.find_pending_by_deadline_date(target_date, window.key)

        sent = 0
        skipped = 0
        for item in pending:
            # Нет владельца или токена: пропускаем, это не ошибка
            if item.user_id is None or not item.fcm_token:
                skipped += 1
                continue

            try:
                self.gateway.send(
                    item.fcm_token,
                    window.title,
                    window.render_body(item.title),
                    build_reminder_data(item, window, self.clock.tz),
                )
            except DeliveryError as e:
                logger.error(
                    "Failed to send notification for assignment %s (%s): %s",
                    item.assignment_id, window.key, e.reason,
                )
                report.add_failure(window.key, item.assignment_id, e)
                continue
            except Exception as e:
                logger.exception(
                    "Unexpected error sending notification for assignment %s (%s)",
                    item.assignment_id, window.key,
                )
                report.add_failure(window.key, item.assignment_id, e)
                continue

            sent += 1
            try:
                marked = self.store.mark_notified(item.assignment_id, window.key)
            except StoreError as e:
                logger.error(
                    "Notification sent but marker not saved for assignment %s (%s): %s",
                    item.assignment_id, window.key, e.reason,
                )
                report.add_failure(window.key, item.assignment_id, e)
                continue

            if not marked:
                logger.warning(
                    "Assignment %s was already marked %s by a concurrent run", item.assignment_id, window.key
                )

        report.sent[window.key] = sent
        report.skipped[window.key] = skipped
        logger.info(
            "Sent %d %s reminders (target date %s, skipped %d)", sent, window.key, target_date, skipped
        )
        return sent


def build_reminder_scheduler(
    db: Session,
    gateway: PushGateway,
    clock: Optional[Clock] = None,
    config: Settings = settings,
) -> ReminderScheduler:
    """Собирает планировщик с настройками приложения."""
    return ReminderScheduler(
        store=AssignmentStore(db),
        gateway=gateway,
        clock=clock or Clock(get_app_tz(config.APP_TIMEZONE)),
        tolerance_minutes=config.REMINDER_TRIGGER_TOLERANCE_MINUTES,
    )
