"""
Хранилище заданий для проверки напоминаний.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from sqlalchemy import or_, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import StoreError
from app.core.utils import day_bounds
from app.models.assignment import Assignment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingReminder:
    """Задание вместе с токеном устройства владельца: всё, что нужно для отправки."""
    assignment_id: int
    title: str
    deadline: datetime
    user_id: Optional[int]
    fcm_token: Optional[str]

    @classmethod
    def from_assignment(cls, assignment: Assignment) -> "PendingReminder":
        user = assignment.user
        return cls(
            assignment_id=assignment.id,
            title=assignment.title,
            deadline=assignment.deadline,
            user_id=user.id if user else None,
            fcm_token=user.fcm_token if user else None,
        )


def _not_marked_with(window_key: str):
    return or_(
        Assignment.last_notification_type.is_(None),
        Assignment.last_notification_type != window_key,
    )


class AssignmentStore:
    """
    Доступ к заданиям для планировщика напоминаний.
    Все ошибки БД заворачиваются в StoreError.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_pending_by_deadline_date(self, deadline_date: date, excluded_window_key: str) -> list[PendingReminder]:
        """
        Незавершённые задания с дедлайном в указанную календарную дату,
        по которым окно ``excluded_window_key`` ещё не отправлялось.
        Пользователь подгружается сразу, чтобы не делать N+1 запросов.
        """
        start, end = day_bounds(deadline_date)
        try:
            assignments = (
                self.db.query(Assignment)
                .options(joinedload(Assignment.user))
                .filter(
                    Assignment.is_done == False,
                    Assignment.deadline >= start,
                    Assignment.deadline < end,
                    _not_marked_with(excluded_window_key),
                )
                .order_by(Assignment.id)
                .all()
            )
            return [PendingReminder.from_assignment(a) for a in assignments]
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"Failed to query assignments due {deadline_date}: {e}") from e

    def mark_notified(self, assignment_id: int, window_key: str) -> bool:
        """
        Записывает ключ окна в last_notification_type, только если он ещё другой
        (compare-and-swap). Коммитит сразу. Возвращает False, если строку уже
        пометил параллельный запуск.
        """
        stmt = (
            update(Assignment)
            .where(Assignment.id == assignment_id, _not_marked_with(window_key))
            .values(last_notification_type=window_key)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"Failed to mark assignment {assignment_id} as {window_key}: {e}") from e
        marked = result.rowcount == 1
        logger.debug("mark_notified assignment=%s window=%s changed=%s", assignment_id, window_key, marked)
        return marked
