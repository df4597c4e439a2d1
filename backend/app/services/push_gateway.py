"""
Шлюз push-уведомлений (Firebase Cloud Messaging, HTTP v1 API).
"""
import json
import logging
import os
from functools import partial
from typing import Optional

import httpx
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import service_account

from app.core.config import Settings, settings as default_settings
from app.core.exceptions import ConfigurationError, DeliveryError

logger = logging.getLogger(__name__)

FCM_SCOPES = ["https://www.googleapis.com/auth/firebase.messaging"]
FCM_SEND_URL = "https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"


class PushGateway:
    """Интерфейс отправки push-уведомления на одно устройство."""

    def send(self, device_token: str, title: str, body: str, data: dict[str, str]) -> None:
        """Отправляет уведомление. При неудаче поднимает DeliveryError."""
        raise NotImplementedError

    def close(self) -> None:
        pass


class LogGateway(PushGateway):
    """Ничего не отправляет, только пишет в лог (PUSH_MODE=log)."""

    def send(self, device_token: str, title: str, body: str, data: dict[str, str]) -> None:
        logger.info("[dry-run] push to %s…: %s | %s | %s", device_token[:8], title, body, data)


class FCMGateway(PushGateway):
    """Отправка через FCM HTTP v1 с OAuth2-токеном сервисного аккаунта."""

    def __init__(
        self,
        project_id: str,
        credentials,
        timeout: float = 5.0,
        client: Optional[httpx.Client] = None,
    ):
        self.project_id = project_id
        self.credentials = credentials
        self.url = FCM_SEND_URL.format(project_id=project_id)
        self.timeout = timeout
        self._client = client or httpx.Client(timeout=timeout)
        # Запрос за OAuth2-токеном ограничен тем же таймаутом, что и отправка
        self._auth_transport = GoogleAuthRequest()
        self._auth_request = partial(self._auth_transport, timeout=timeout)

    def close(self) -> None:
        if not self._client.is_closed:
            self._client.close()
        self._auth_transport.session.close()

    def _access_token(self) -> str:
        """Получает (и при необходимости обновляет) OAuth2 access token."""
        if not self.credentials.valid:
            try:
                self.credentials.refresh(self._auth_request)
            except GoogleAuthError as e:
                raise DeliveryError(f"FCM auth failed: {e}", code="AUTH") from e
        return self.credentials.token

    def send(self, device_token: str, title: str, body: str, data: dict[str, str]) -> None:
        payload = {
            "message": {
                "token": device_token,
                "notification": {"title": title, "body": body},
                # FCM принимает в data только строки
                "data": {k: str(v) for k, v in (data or {}).items()},
            }
        }
        headers = {"Authorization": f"Bearer {self._access_token()}"}

        try:
            response = self._client.post(self.url, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise DeliveryError(f"FCM request timed out: {e}", code="TIMEOUT") from e
        except httpx.HTTPError as e:
            raise DeliveryError(f"FCM request failed: {e}", code="TRANSPORT") from e

        if response.is_success:
            logger.debug("FCM accepted message: %s", response.text)
            return

        code, message = self._parse_error(response)
        raise DeliveryError(f"FCM error {response.status_code}: {message}", code=code)

    @staticmethod
    def _parse_error(response: httpx.Response) -> tuple[Optional[str], str]:
        """Достаёт errorCode (UNREGISTERED, INVALID_ARGUMENT, …) и текст ошибки."""
        try:
            body = response.json()
        except ValueError:
            return None, response.text[:500]

        # Прокси и балансировщики отвечают в своём формате, не как FCM
        error = body.get("error") if isinstance(body, dict) else None
        if not isinstance(error, dict):
            return None, response.text[:500]

        code = error.get("status")
        details = error.get("details")
        for detail in details if isinstance(details, list) else []:
            if isinstance(detail, dict) and detail.get("errorCode"):
                code = detail["errorCode"]
                break
        return code, str(error.get("message", ""))[:500]


def load_service_account_info(config: Settings) -> dict:
    """Читает JSON сервисного аккаунта из переменной окружения или файла."""
    raw = config.FCM_SERVICE_ACCOUNT_JSON.strip()
    path = config.FCM_SERVICE_ACCOUNT_PATH.strip()
    try:
        if raw:
            return json.loads(raw)
        if path:
            if not os.path.exists(path):
                raise ConfigurationError(f"FCM service account file not found: {path}")
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"FCM service account JSON is invalid: {e}") from e
    raise ConfigurationError(
        "FCM credentials are not configured: set FCM_SERVICE_ACCOUNT_JSON or FCM_SERVICE_ACCOUNT_PATH"
    )


def build_gateway(config: Settings = default_settings) -> PushGateway:
    """
    Создаёт шлюз по настройкам. Вызывается до начала обработки:
    при неполной конфигурации поднимает ConfigurationError.
    """
    if config.PUSH_MODE == "log":
        logger.warning("PUSH_MODE=log: notifications will not be delivered")
        return LogGateway()
    if config.PUSH_MODE != "fcm":
        raise ConfigurationError(f"Unknown PUSH_MODE: {config.PUSH_MODE}")

    if not config.FCM_PROJECT_ID:
        raise ConfigurationError("FCM_PROJECT_ID is not set")
    info = load_service_account_info(config)
    try:
        credentials = service_account.Credentials.from_service_account_info(info, scopes=FCM_SCOPES)
    except (ValueError, KeyError) as e:
        raise ConfigurationError(f"FCM service account is malformed: {e}") from e

    return FCMGateway(config.FCM_PROJECT_ID, credentials, timeout=config.PUSH_TIMEOUT_SECONDS)
