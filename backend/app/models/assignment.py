"""
Модель задания (домашней работы) с дедлайном.
"""
from datetime import datetime
from sqlalchemy import Integer, String, Text, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.core.utils import now_local


class Assignment(Base):
    """Задание студента."""
    __tablename__ = "assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=True, index=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=True)
    # Местное время в APP_TIMEZONE, без tzinfo
    deadline: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    is_done: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # Ключ последнего отправленного окна напоминаний: h_minus_3 ... h_plus_3
    last_notification_type: Mapped[str] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now_local)

    user = relationship("User", back_populates="assignments")
