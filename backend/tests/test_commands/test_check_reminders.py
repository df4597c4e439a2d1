"""Тесты консольной команды проверки напоминаний."""
from datetime import datetime

import pytest
from sqlalchemy.orm import sessionmaker

from app.commands import check_reminders
from app.core.config import settings
from app.core.exceptions import ConfigurationError
from app.models.assignment import Assignment
from tests.conftest import FakeGateway, add_assignment, add_user


@pytest.fixture
def command_env(monkeypatch, db_session):
    """Команда работает с тестовой БД и фейковым шлюзом."""
    gateway = FakeGateway()
    monkeypatch.setattr(check_reminders, "SessionLocal", sessionmaker(bind=db_session.get_bind()))
    monkeypatch.setattr(check_reminders, "build_gateway", lambda: gateway)
    return gateway


def _marker(db_session, assignment_id):
    db_session.expire_all()
    return db_session.query(Assignment).filter(Assignment.id == assignment_id).one().last_notification_type


def test_run_at_given_instant(command_env, db_session):
    user = add_user(db_session)
    essay = add_assignment(db_session, user, datetime(2024, 6, 10, 23, 59))
    db_session.close()

    assert check_reminders.main(["--at", "2024-06-07T08:02:00"]) == check_reminders.EXIT_OK
    assert len(command_env.sent) == 1
    assert _marker(db_session, essay.id) == "h_minus_3"


def test_forced_window(command_env, db_session):
    user = add_user(db_session)
    late = add_assignment(db_session, user, datetime(2024, 6, 5, 10, 0))
    db_session.close()

    code = check_reminders.main(["--at", "2024-06-07T14:00:00", "--window", "h_plus_2"])
    assert code == check_reminders.EXIT_OK
    assert _marker(db_session, late.id) == "h_plus_2"


def test_outside_trigger_slice_sends_nothing(command_env, db_session):
    user = add_user(db_session)
    add_assignment(db_session, user, datetime(2024, 6, 10, 23, 59))
    db_session.close()

    assert check_reminders.main(["--at", "2024-06-07T12:00:00"]) == check_reminders.EXIT_OK
    assert command_env.sent == []


def test_delivery_errors_exit_code(command_env, db_session):
    command_env.failing_tokens.add("token-1")
    user = add_user(db_session, fcm_token="token-1")
    add_assignment(db_session, user, datetime(2024, 6, 10, 23, 59))
    db_session.close()

    assert check_reminders.main(["--at", "2024-06-07T08:00:00"]) == check_reminders.EXIT_ERRORS


def test_unknown_window(command_env):
    assert check_reminders.main(["--window", "h_minus_10"]) == check_reminders.EXIT_CONFIG


def test_configuration_error_stops_before_processing(monkeypatch, db_session):
    def broken_gateway():
        raise ConfigurationError("FCM_PROJECT_ID is not set")

    def no_session():
        raise AssertionError("no processing expected")

    monkeypatch.setattr(check_reminders, "build_gateway", broken_gateway)
    monkeypatch.setattr(check_reminders, "SessionLocal", no_session)

    assert check_reminders.main([]) == check_reminders.EXIT_CONFIG


def test_bad_at_argument():
    with pytest.raises(SystemExit):
        check_reminders.main(["--at", "tomorrow"])


def test_at_with_loop_rejected(command_env):
    with pytest.raises(SystemExit) as exc_info:
        check_reminders.main(["--loop", "--at", "2024-06-07T08:00:00"])
    assert exc_info.value.code == 2
    assert command_env.sent == []


def test_invalid_timezone_is_configuration_error(command_env, monkeypatch):
    monkeypatch.setattr(settings, "APP_TIMEZONE", "Mars/Olympus_Mons")

    assert check_reminders.main(["--at", "2024-06-07T08:00:00"]) == check_reminders.EXIT_CONFIG
    assert command_env.sent == []
