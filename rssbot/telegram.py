"""Telegram Bot API client for RSS Telegram relay."""

from dataclasses import dataclass
from typing import Any

import requests

from .config import DEFAULT_API_BASE, DEFAULT_REQUEST_TIMEOUT
from .errors import APIError
from .logging_config import create_execution_logger


@dataclass
class APIResponse:
    """Envelope shared by every Bot API response."""

    ok: bool
    result: Any = None
    description: str | None = None
    error_code: int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "APIResponse":
        if not isinstance(data, dict):
            return cls(ok=False, description="response is not a JSON object")
        return cls(
            ok=data.get("ok") is True,
            result=data.get("result"),
            description=data.get("description"),
            error_code=data.get("error_code"),
        )


@dataclass
class Chat:
    """Subset of the Bot API ``Chat`` object used by the relay."""

    id: int | str
    type: str | None = None
    title: str | None = None
    description: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Chat":
        return cls(
            id=data.get("id"),
            type=data.get("type"),
            title=data.get("title"),
            description=data.get("description"),
        )


@dataclass
class Message:
    """Subset of the Bot API ``Message`` object returned by sendMessage."""

    message_id: int
    date: int | None = None
    text: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Message":
        return cls(
            message_id=data.get("message_id"),
            date=data.get("date"),
            text=data.get("text"),
        )


class TelegramClient:
    """Calls the Bot API on behalf of a single chat."""

    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        execution_id: str | None = None,
        session: requests.Session | None = None,
    ):
        """Initialize the client.

        Args:
            bot_token: Bot API token
            chat_id: Target chat ID or @channel username
            api_base: Bot API base URL
            timeout: HTTP request timeout in seconds
            execution_id: Execution ID for logging context
            session: Optional preconfigured requests session
        """
        self.chat_id = chat_id
        self.timeout = timeout
        self.base_url = f"{api_base.rstrip('/')}/bot{bot_token}"
        self.logger = create_execution_logger("telegram_client", execution_id)
        self.session = session or requests.Session()

    def call(self, method: str, params: dict[str, Any] | None = None) -> Any:
        """Invoke a Bot API method for the configured chat.

        Args:
            method: Bot API method name
            params: Extra JSON parameters besides ``chat_id``

        Returns:
            The ``result`` field of a successful response

        Raises:
            APIError: If the request fails or the API reports an error
        """
        payload = {"chat_id": self.chat_id, **(params or {})}
        url = f"{self.base_url}/{method}"

        self.logger.debug(f"Calling {method}", method=method)
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            # str(e) may contain the URL and thus the token
            self.logger.error(
                f"{method} request failed: {type(e).__name__}",
                method=method,
                error=type(e).__name__,
            )
            raise APIError(method, APIError.TRANSPORT, type(e).__name__) from e

        try:
            api_response = APIResponse.from_dict(response.json())
        except ValueError:
            api_response = APIResponse(ok=False, description="invalid JSON response")

        if response.status_code != 200 or not api_response.ok:
            if response.status_code == 200:
                reason = api_response.description or "response not OK"
                error_code = api_response.error_code
            else:
                reason = api_response.description or f"HTTP {response.status_code}"
                error_code = api_response.error_code or response.status_code
            self.logger.error(
                f"{method} returned error: {reason}",
                method=method,
                error=reason,
            )
            raise APIError(
                method,
                APIError.REMOTE,
                reason,
                description=api_response.description,
                error_code=error_code,
            )

        return api_response.result

    def send_message(self, text: str) -> Message:
        """Post a text message to the chat."""
        result = self.call("sendMessage", {"text": text})
        return Message.from_dict(result if isinstance(result, dict) else {})

    def set_description(self, description: str) -> bool:
        """Replace the chat description."""
        return bool(self.call("setChatDescription", {"description": description}))

    def get_chat(self) -> Chat:
        """Fetch chat metadata."""
        result = self.call("getChat")
        return Chat.from_dict(result if isinstance(result, dict) else {})

    def get_description(self) -> str:
        """Return the chat description, or an empty string if it has none."""
        return self.get_chat().description or ""

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
