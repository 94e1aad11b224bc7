"""Exceptions raised by RSS Telegram relay."""


class RSSBotError(Exception):
    """Base class for all relay failures."""


class ConfigError(RSSBotError):
    """Raised when required settings are missing or invalid."""


class FetchError(RSSBotError):
    """Raised when the feed cannot be downloaded."""


class ParseError(RSSBotError):
    """Raised when the downloaded document is not a usable feed."""


class APIError(RSSBotError):
    """Raised when a Telegram Bot API call fails.

    Args:
        method: Bot API method that failed (e.g. ``sendMessage``)
        kind: ``"transport"`` when no usable response arrived,
            ``"remote"`` when the API answered with a failure
        message: Human readable reason
        description: Telegram's own error description, if any
        error_code: Telegram's error code, if any
    """

    TRANSPORT = "transport"
    REMOTE = "remote"

    def __init__(
        self,
        method: str,
        kind: str,
        message: str,
        description: str | None = None,
        error_code: int | None = None,
    ):
        self.method = method
        self.kind = kind
        self.description = description
        self.error_code = error_code
        super().__init__(f"{method} failed ({kind}): {message}")
