"""
Тестовая инфраструктура: фикстуры для SQLite in-memory, FastAPI TestClient
и фейкового push-шлюза.
"""
import os

# Должно быть ДО импорта app: Settings читает окружение при импорте
os.environ["API_KEY"] = "test-api-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_TIMEZONE"] = "Asia/Jakarta"
os.environ["PUSH_MODE"] = "log"

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from app.core.database import Base, get_db
from app.core.exceptions import DeliveryError
from app.core.utils import FixedClock
from app.main import app as fastapi_app
from app.models.assignment import Assignment
from app.models.user import User
from app.services.push_gateway import PushGateway

JAKARTA = ZoneInfo("Asia/Jakarta")


# SQLite in-memory с StaticPool: одна БД для всех connections
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Включаем поддержку FK в SQLite
@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(bind=engine)


class FakeGateway(PushGateway):
    """Запоминает отправленные сообщения; для токенов из failing_tokens поднимает DeliveryError."""

    def __init__(self, failing_tokens: set[str] | None = None):
        self.sent: list[dict] = []
        self.failing_tokens = failing_tokens or set()

    def send(self, device_token: str, title: str, body: str, data: dict[str, str]) -> None:
        if device_token in self.failing_tokens:
            raise DeliveryError(f"device {device_token} unreachable", code="UNAVAILABLE")
        self.sent.append({"token": device_token, "title": title, "body": body, "data": data})


def jakarta_clock(*args) -> FixedClock:
    """FixedClock на указанный момент по Джакарте: jakarta_clock(2024, 6, 7, 8, 2)."""
    return FixedClock(datetime(*args, tzinfo=JAKARTA), JAKARTA)


@pytest.fixture(autouse=True)
def setup_database():
    """Создаёт все таблицы перед каждым тестом и удаляет после."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session() -> Session:
    """Фикстура тестовой сессии БД."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def client_no_auth(db_session: Session) -> TestClient:
    """FastAPI TestClient БЕЗ API-ключа (для тестов безопасности)."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    fastapi_app.dependency_overrides[get_db] = override_get_db
    with TestClient(fastapi_app, raise_server_exceptions=False) as c:
        yield c
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(db_session: Session) -> TestClient:
    """FastAPI TestClient с подменённой БД и API-ключом."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    fastapi_app.dependency_overrides[get_db] = override_get_db
    with TestClient(
        fastapi_app,
        raise_server_exceptions=False,
        headers={"X-API-Key": "test-api-key"},
    ) as c:
        yield c
    fastapi_app.dependency_overrides.clear()


# --- Вспомогательные функции для создания тестовых данных ---

def add_user(db: Session, name: str = "Student", fcm_token: str | None = "token-1") -> User:
    """Создаёт пользователя напрямую в БД."""
    user = User(name=name, fcm_token=fcm_token)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def add_assignment(
    db: Session,
    user: User | None,
    deadline: datetime,
    title: str = "Essay 1",
    is_done: bool = False,
    last_notification_type: str | None = None,
) -> Assignment:
    """Создаёт задание напрямую в БД (дедлайн в местном времени без tzinfo)."""
    assignment = Assignment(
        user_id=user.id if user else None,
        title=title,
        deadline=deadline,
        is_done=is_done,
        last_notification_type=last_notification_type,
    )
    db.add(assignment)
    db.commit()
    db.refresh(assignment)
    return assignment


def create_user(c: TestClient, name: str = "Budi", email: str | None = None, fcm_token: str | None = None) -> dict:
    """Создаёт пользователя через API."""
    resp = c.post("/api/v1/users", json={"name": name, "email": email, "fcm_token": fcm_token})
    assert resp.status_code == 201
    return resp.json()


def create_assignment(c: TestClient, user_id: int, title: str = "Essay 1", deadline: str = "2024-06-10T23:59:00") -> dict:
    """Создаёт задание через API."""
    resp = c.post(
        "/api/v1/assignments",
        json={"user_id": user_id, "title": title, "deadline": deadline},
    )
    assert resp.status_code == 201
    return resp.json()
