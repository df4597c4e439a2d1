"""
Утилиты приложения.
"""
import re
from datetime import datetime, date, time, timedelta
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.core.config import settings
from app.core.exceptions import ConfigurationError


def get_app_tz(name: Optional[str] = None) -> ZoneInfo:
    """Часовой пояс приложения (IANA), по умолчанию из настроек."""
    name = name or settings.APP_TIMEZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"Unknown APP_TIMEZONE: {name}") from e


def now_local() -> datetime:
    """Текущее время в часовом поясе приложения."""
    return datetime.now(get_app_tz())


class Clock:
    """Источник текущего времени в заданном часовом поясе."""

    def __init__(self, tz: ZoneInfo):
        self.tz = tz

    def now(self) -> datetime:
        return datetime.now(self.tz)


class FixedClock(Clock):
    """Часы, застывшие в одном моменте. Для тестов и ручного перезапуска проверки."""

    def __init__(self, instant: datetime, tz: ZoneInfo):
        super().__init__(tz)
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=tz)
        self.instant = instant.astimezone(tz)

    def now(self) -> datetime:
        return self.instant


def to_local_naive(dt: Optional[datetime], tz: ZoneInfo) -> Optional[datetime]:
    """
    Приводит datetime к «настенному» времени часового пояса приложения без tzinfo.
    Наивные значения считаются уже заданными в этом поясе.
    """
    if dt is None or dt.tzinfo is None:
        return dt
    return dt.astimezone(tz).replace(tzinfo=None)


def localize(dt: datetime, tz: ZoneInfo) -> datetime:
    """Навешивает часовой пояс приложения на наивный datetime из БД."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Полуинтервал [начало суток, начало следующих суток) в наивном местном времени."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def sanitize_text(text: str | None, max_length: int = 1000) -> str | None:
    """Очистить текст от управляющих символов и ограничить длину."""
    if text is None:
        return None
    text = re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]', '', text)
    return text[:max_length].strip()
