"""Configuration management for RSS Telegram relay."""

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import ConfigError
from .logging_config import create_execution_logger

DEFAULT_API_BASE = "https://api.telegram.org"
DEFAULT_REQUEST_TIMEOUT = 5.0
# Telegram throttles bots after ~20 calls a minute and every item costs two
DEFAULT_MESSAGE_LIMIT = 10
DEFAULT_AWS_REGION = "us-east-1"

# Secret keys looked up, in order, when the secret is a JSON object
TOKEN_SECRET_KEYS = ("token", "bot_token", "telegram_token", "telegram_bot_token")


@dataclass(frozen=True)
class Config:
    """Settings for one relay run, built once at startup."""

    bot_token: str
    chat_id: str
    feed_url: str
    api_base: str = DEFAULT_API_BASE
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    message_limit: int = DEFAULT_MESSAGE_LIMIT
    aws_region: str = DEFAULT_AWS_REGION
    metrics_namespace: str | None = None

    def __repr__(self) -> str:
        # Keep the token out of tracebacks and logs
        return (
            f"Config(chat_id={self.chat_id!r}, feed_url={self.feed_url!r}, "
            f"api_base={self.api_base!r}, request_timeout={self.request_timeout}, "
            f"message_limit={self.message_limit})"
        )


def load_config(
    environ: Mapping[str, str] | None = None, execution_id: str | None = None
) -> Config:
    """Load configuration from environment variables.

    Args:
        environ: Mapping to read from, defaults to ``os.environ``
        execution_id: Execution ID for logging context

    Returns:
        Validated Config

    Raises:
        ConfigError: If a required variable is missing or a value is invalid
    """
    env = os.environ if environ is None else environ
    logger = create_execution_logger("config", execution_id)

    def get(name: str) -> str:
        return env.get(name, "").strip()

    aws_region = get("AWS_REGION") or get("AWS_DEFAULT_REGION") or DEFAULT_AWS_REGION

    bot_token = get("TELEGRAM_BOT_TOKEN")
    secret_name = get("TELEGRAM_SECRET_NAME")
    if not bot_token and secret_name:
        bot_token = get_telegram_token(secret_name, aws_region, execution_id)

    values = {
        "TELEGRAM_BOT_TOKEN": bot_token,
        "TELEGRAM_CHAT_ID": get("TELEGRAM_CHAT_ID"),
        "RSS_FEED_URL": get("RSS_FEED_URL"),
    }
    missing = [name for name, value in values.items() if not value]
    if missing:
        logger.error(f"Missing required settings: {', '.join(missing)}")
        raise ConfigError(
            f"Required environment variables not set: {', '.join(missing)}"
        )

    config = Config(
        bot_token=bot_token,
        chat_id=values["TELEGRAM_CHAT_ID"],
        feed_url=values["RSS_FEED_URL"],
        api_base=(get("TELEGRAM_API_BASE") or DEFAULT_API_BASE).rstrip("/"),
        request_timeout=_positive(
            env, "REQUEST_TIMEOUT", float, DEFAULT_REQUEST_TIMEOUT
        ),
        message_limit=_positive(env, "MESSAGE_LIMIT", int, DEFAULT_MESSAGE_LIMIT),
        aws_region=aws_region,
        metrics_namespace=get("CLOUDWATCH_NAMESPACE") or None,
    )

    logger.info(
        "Configuration loaded",
        feed_url=config.feed_url,
        message_limit=config.message_limit,
        metrics_enabled=config.metrics_namespace is not None,
    )
    return config


def _positive(env: Mapping[str, str], name: str, cast, default):
    """Read an optional positive number, falling back to ``default``."""
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def get_telegram_token(
    secret_name: str, aws_region: str, execution_id: str | None = None
) -> str:
    """Retrieve the Telegram bot token from AWS Secrets Manager.

    Both plain string secrets and JSON object secrets are supported. The
    secret value is never logged.

    Args:
        secret_name: Name of the secret in Secrets Manager
        aws_region: AWS region for the Secrets Manager client
        execution_id: Execution ID for logging context

    Returns:
        The bot token

    Raises:
        ConfigError: If the secret cannot be read or holds no token
    """
    secrets_logger = create_execution_logger("secrets_manager", execution_id)
    secrets_logger.info(
        f"Retrieving Telegram token from Secrets Manager: {secret_name}"
    )

    try:
        client = boto3.client("secretsmanager", region_name=aws_region)
        response = client.get_secret_value(SecretId=secret_name)
    except ClientError as e:
        error_code = e.response.get("Error", {}).get("Code", "Unknown")
        secrets_logger.error(
            f"AWS Secrets Manager error retrieving {secret_name}: {error_code}"
        )
        raise ConfigError(f"Failed to retrieve secret {secret_name}") from e
    except BotoCoreError as e:
        secrets_logger.error(
            f"AWS Secrets Manager unavailable: {type(e).__name__}"
        )
        raise ConfigError(f"Failed to retrieve secret {secret_name}") from e

    secret_value = (response.get("SecretString") or "").strip()
    if not secret_value:
        raise ConfigError(f"Secret {secret_name} contains no string value")

    try:
        secret_data = json.loads(secret_value)
    except json.JSONDecodeError:
        secrets_logger.info("Using plain text secret")
        return secret_value

    if not isinstance(secret_data, dict):
        raise ConfigError(f"JSON secret {secret_name} must be an object")

    for key in TOKEN_SECRET_KEYS:
        value = secret_data.get(key)
        if isinstance(value, str) and value.strip():
            secrets_logger.info(f"Using '{key}' from JSON secret")
            return value.strip()

    raise ConfigError(f"No token found in JSON secret {secret_name}")
