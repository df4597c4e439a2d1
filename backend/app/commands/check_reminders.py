"""
Команда проверки напоминаний о дедлайнах.

Рассчитана на запуск cron-ом каждые несколько минут (не реже раза в 5 минут):

    python -m app.commands.check_reminders

Ручная досылка окна в обход фильтра по времени:

    python -m app.commands.check_reminders --window h_minus_3 --window d_day

Режим без cron, бесконечный цикл с паузой REMINDER_CHECK_INTERVAL секунд:

    python -m app.commands.check_reminders --loop
"""
import argparse
import logging
import sys
import time
from datetime import datetime
from typing import Optional

from app.core.config import settings
from app.core.database import SessionLocal
from app.core.exceptions import ConfigurationError, ValidationException
from app.core.utils import Clock, FixedClock, get_app_tz
from app.services.push_gateway import PushGateway, build_gateway
from app.services.reminder_service import ReminderRunReport, build_reminder_scheduler
from app import models  # noqa: F401

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERRORS = 1
EXIT_CONFIG = 2


def run_check(
    gateway: PushGateway,
    clock: Clock,
    force_windows: Optional[list[str]] = None,
) -> ReminderRunReport:
    """Одна проверка в отдельной сессии БД."""
    db = SessionLocal()
    try:
        scheduler = build_reminder_scheduler(db, gateway, clock=clock)
        return scheduler.run(force_windows=force_windows)
    finally:
        db.close()


def run_loop(gateway: PushGateway, clock: Clock, interval: int) -> None:
    """Запускает бесконечный цикл проверки напоминаний."""
    logger.info("Reminder loop started, interval=%ss", interval)
    while True:
        try:
            run_check(gateway, clock)
        except Exception as e:
            logger.exception("Error checking reminders: %s", e)
        time.sleep(interval)


def _parse_at(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Неверный формат даты: {value}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Check and send assignment deadline reminders")
    parser.add_argument(
        "--window",
        action="append",
        dest="windows",
        metavar="KEY",
        help="Принудительно выполнить окно (h_minus_3, ..., h_plus_3); можно повторять",
    )
    parser.add_argument(
        "--at",
        type=_parse_at,
        help="Выполнить проверку так, будто сейчас указанный момент (ISO 8601, местное время)",
    )
    parser.add_argument("--loop", action="store_true", help="Проверять в цикле")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.at and args.loop:
        # В цикле FixedClock вернул бы один и тот же момент на каждом проходе
        parser.error("--at cannot be combined with --loop")

    try:
        tz = get_app_tz()
        gateway = build_gateway()
    except ConfigurationError as e:
        logger.error("Configuration error, nothing was sent: %s", e.reason)
        return EXIT_CONFIG

    clock = FixedClock(args.at, tz) if args.at else Clock(tz)
    try:
        if args.loop:
            run_loop(gateway, clock, settings.REMINDER_CHECK_INTERVAL)
            return EXIT_OK
        report = run_check(gateway, clock, force_windows=args.windows)
    except ValidationException as e:
        logger.error(e.detail)
        return EXIT_CONFIG
    finally:
        gateway.close()

    for key in report.windows:
        logger.info("%s: sent %d, skipped %d", key, report.sent.get(key, 0), report.skipped.get(key, 0))
    for failure in report.errors:
        logger.error(
            "%s assignment=%s %s: %s", failure.window, failure.assignment_id, failure.error, failure.reason
        )
    return EXIT_ERRORS if report.errors else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
