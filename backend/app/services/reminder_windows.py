"""
Окна напоминаний о дедлайнах.

Каждое окно задаёт смещение от дедлайна задания (за N дней, в день дедлайна,
через N дней после) и час, в который окно «срабатывает» по местному времени.
Таблица окон хранится как данные, одна общая процедура обходит её
при каждой проверке.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from app.core.exceptions import ValidationException

# Тип уведомления в data-части push-сообщения
REMINDER_MESSAGE_TYPE = "assignment_reminder"

DEFAULT_TRIGGER_TOLERANCE_MINUTES = 5


@dataclass(frozen=True)
class ReminderWindow:
    """Одно окно напоминаний."""
    key: str
    days_until_deadline: int  # 3 = дедлайн через 3 дня, -1 = просрочено на день
    trigger_hour: int
    title: str
    body_template: str

    def is_due(self, now: datetime, tolerance_minutes: int = DEFAULT_TRIGGER_TOLERANCE_MINUTES) -> bool:
        """Грубый фильтр по времени: нужный час и первые минуты этого часа."""
        return now.hour == self.trigger_hour and now.minute < tolerance_minutes

    def target_date(self, today: date) -> date:
        """Дата дедлайна, которую ищет окно при запуске в день ``today``."""
        return today + timedelta(days=self.days_until_deadline)

    def render_body(self, assignment_title: str) -> str:
        # Простая подстановка: фигурные скобки в названии не ломают шаблон
        return self.body_template.replace("{title}", assignment_title)


REMINDER_WINDOWS: tuple[ReminderWindow, ...] = (
    ReminderWindow(
        key="h_minus_3",
        days_until_deadline=3,
        trigger_hour=8,
        title="⏰ Assignment Due in 3 Days!",
        body_template="Don't forget: \"{title}\" is due in 3 days. Start working on it!",
    ),
    ReminderWindow(
        key="h_minus_2",
        days_until_deadline=2,
        trigger_hour=8,
        title="⏰ Assignment Due in 2 Days!",
        body_template="Don't forget: \"{title}\" is due in 2 days. Keep working on it!",
    ),
    ReminderWindow(
        key="h_minus_1",
        days_until_deadline=1,
        trigger_hour=8,
        title="⚠️ Assignment Due Tomorrow!",
        body_template="Reminder: \"{title}\" is due tomorrow! Make sure to complete it on time.",
    ),
    ReminderWindow(
        key="d_day",
        days_until_deadline=0,
        trigger_hour=8,
        title="🔥 Assignment Due Today!",
        body_template="Urgent: \"{title}\" is due today! Complete it before the deadline.",
    ),
    ReminderWindow(
        key="h_plus_1",
        days_until_deadline=-1,
        trigger_hour=9,
        title="❌ Assignment Overdue (1 Day)!",
        body_template="\"{title}\" is now 1 day overdue. Please submit as soon as possible!",
    ),
    ReminderWindow(
        key="h_plus_2",
        days_until_deadline=-2,
        trigger_hour=9,
        title="❌ Assignment Overdue (2 Days)!",
        body_template="\"{title}\" is now 2 days overdue. Please submit immediately!",
    ),
    ReminderWindow(
        key="h_plus_3",
        days_until_deadline=-3,
        trigger_hour=9,
        title="🚨 Assignment Overdue (3 Days)!",
        body_template="\"{title}\" is now 3 days overdue. Please contact your instructor!",
    ),
)

WINDOW_KEYS = tuple(w.key for w in REMINDER_WINDOWS)


def get_window(key: str, windows: Iterable[ReminderWindow] = REMINDER_WINDOWS) -> ReminderWindow:
    """Найти окно по ключу."""
    for window in windows:
        if window.key == key:
            return window
    raise ValidationException(f"Неизвестное окно напоминаний: {key}")


def due_windows(
    now: datetime,
    windows: Iterable[ReminderWindow] = REMINDER_WINDOWS,
    tolerance_minutes: Optional[int] = None,
) -> list[ReminderWindow]:
    """Окна, которые должны сработать в момент ``now`` (местное время)."""
    if tolerance_minutes is None:
        tolerance_minutes = DEFAULT_TRIGGER_TOLERANCE_MINUTES
    return [w for w in windows if w.is_due(now, tolerance_minutes)]
