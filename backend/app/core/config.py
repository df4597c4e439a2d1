"""
Конфигурация приложения.
"""
import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Настройки приложения."""

    # Database: без дефолта, приложение не запустится без БД
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    # Ограничение на время SQL-запроса (только PostgreSQL)
    STORE_STATEMENT_TIMEOUT_MS: int = int(os.getenv("STORE_STATEMENT_TIMEOUT_MS", "5000"))

    # FastAPI
    APP_TITLE: str = "Study Planner Backend"
    DEBUG: bool = False

    # API Security: без дефолтов
    API_KEY: str = os.getenv("API_KEY", "")

    # CORS: по умолчанию пустой (ничего не разрешено)
    ALLOWED_ORIGINS: str = os.getenv("ALLOWED_ORIGINS", "")

    # Часовой пояс, в котором считаются дедлайны и время отправки напоминаний
    APP_TIMEZONE: str = os.getenv("APP_TIMEZONE", "Asia/Jakarta")

    # Push-уведомления: fcm (реальная отправка) или log (только запись в лог)
    PUSH_MODE: str = os.getenv("PUSH_MODE", "fcm").strip().lower()
    FCM_PROJECT_ID: str = os.getenv("FCM_PROJECT_ID", "")
    FCM_SERVICE_ACCOUNT_JSON: str = os.getenv("FCM_SERVICE_ACCOUNT_JSON", "")
    FCM_SERVICE_ACCOUNT_PATH: str = os.getenv("FCM_SERVICE_ACCOUNT_PATH", "")
    PUSH_TIMEOUT_SECONDS: float = float(os.getenv("PUSH_TIMEOUT_SECONDS", "5"))

    # Напоминания о дедлайнах
    REMINDER_TRIGGER_TOLERANCE_MINUTES: int = int(os.getenv("REMINDER_TRIGGER_TOLERANCE_MINUTES", "5"))
    REMINDER_CHECK_INTERVAL: int = int(os.getenv("REMINDER_CHECK_INTERVAL", "60"))


settings = Settings()
