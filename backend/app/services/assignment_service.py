"""
Сервис для работы с заданиями.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy import asc, or_

from app.models.assignment import Assignment
from app.schemas.assignment import AssignmentCreate, AssignmentUpdate
from app.core.exceptions import NotFoundException, ValidationException
from app.core.utils import get_app_tz, sanitize_text, to_local_naive
from app.models.user import User

logger = logging.getLogger(__name__)

# Значения фильтра status в списке заданий
STATUS_PENDING = "pending"
STATUS_DONE = "done"


def _clean_title(title: str) -> str:
    """Очищает название; пустое после очистки название недопустимо."""
    cleaned = sanitize_text(title, max_length=500)
    if not cleaned:
        raise ValidationException("Название задания не может быть пустым")
    return cleaned


class AssignmentService:
    """Сервис для управления заданиями."""

    def __init__(self, db: Session):
        self.db = db
        self.tz = get_app_tz()

    def get_by_id(self, assignment_id: int) -> Optional[Assignment]:
        """Получить задание по ID."""
        return self.db.query(Assignment).filter(Assignment.id == assignment_id).first()

    def get_for_user(
        self,
        user_id: int,
        include_done: bool = False,
        status: Optional[str] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Assignment]:
        """
        Задания пользователя, ближайшие дедлайны первыми.
        Фильтр status (pending | done) имеет приоритет над include_done,
        search ищет подстроку в названии и описании без учёта регистра.
        """
        query = self.db.query(Assignment).filter(Assignment.user_id == user_id)
        if status == STATUS_PENDING:
            query = query.filter(Assignment.is_done == False)
        elif status == STATUS_DONE:
            query = query.filter(Assignment.is_done == True)
        elif status is not None:
            raise ValidationException(f"Неизвестный статус задания: {status}")
        elif not include_done:
            query = query.filter(Assignment.is_done == False)

        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(Assignment.title.ilike(pattern), Assignment.description.ilike(pattern))
            )
        return query.order_by(asc(Assignment.deadline)).offset(skip).limit(limit).all()

    def create(self, data: AssignmentCreate) -> Assignment:
        """Создать задание. Дедлайн приводится к местному времени приложения."""
        if not self.db.query(User.id).filter(User.id == data.user_id).first():
            raise NotFoundException("Пользователь", data.user_id)

        assignment = Assignment(
            user_id=data.user_id,
            title=_clean_title(data.title),
            description=sanitize_text(data.description, max_length=5000),
            deadline=to_local_naive(data.deadline, self.tz),
        )
        self.db.add(assignment)
        self.db.flush()
        self.db.refresh(assignment)
        logger.info("Assignment created: id=%s, deadline=%s", assignment.id, assignment.deadline)
        return assignment

    def update(self, assignment: Assignment, data: AssignmentUpdate) -> Assignment:
        """
        Обновить задание.
        При смене дедлайна маркер напоминаний сбрасывается, чтобы окна
        отработали заново уже для новой даты.
        """
        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("title") is not None:
            update_data["title"] = _clean_title(update_data["title"])

        if "deadline" in update_data and update_data["deadline"] is not None:
            new_deadline = to_local_naive(update_data.pop("deadline"), self.tz)
            if new_deadline != assignment.deadline:
                logger.info(
                    "Deadline changed for assignment %s: %s -> %s",
                    assignment.id, assignment.deadline, new_deadline,
                )
                assignment.deadline = new_deadline
                assignment.last_notification_type = None
        else:
            update_data.pop("deadline", None)

        for field, value in update_data.items():
            if value is None and field in ("title", "is_done"):
                continue
            if field == "description" and isinstance(value, str):
                value = sanitize_text(value, max_length=5000)
            setattr(assignment, field, value)

        self.db.flush()
        self.db.refresh(assignment)
        return assignment

    def mark_done(self, assignment: Assignment) -> Assignment:
        """Отметить задание выполненным, напоминания по нему больше не придут."""
        logger.info("Marking assignment %s as done", assignment.id)
        assignment.is_done = True
        self.db.flush()
        self.db.refresh(assignment)
        return assignment

    def delete(self, assignment: Assignment) -> None:
        """Удалить задание."""
        logger.info("Deleting assignment %s", assignment.id)
        self.db.delete(assignment)
        self.db.flush()
