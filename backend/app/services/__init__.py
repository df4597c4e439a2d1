"""
Сервисный слой для бизнес-логики.
"""
from app.services.user_service import UserService
from app.services.assignment_service import AssignmentService
from app.services.assignment_store import AssignmentStore
from app.services.reminder_service import ReminderScheduler

__all__ = [
    "UserService",
    "AssignmentService",
    "AssignmentStore",
    "ReminderScheduler",
]
