"""Entry points for RSS Telegram relay.

``lambda_handler`` serves AWS Lambda (EventBridge schedules or function
URLs); ``main`` is the ``rssbot`` console script for cron-style runs.
"""

import json
import os
import sys
from typing import Any

from .config import Config, load_config
from .errors import RSSBotError
from .logging_config import (
    create_execution_logger,
    new_execution_id,
    setup_structured_logging,
)
from .metrics import send_cloudwatch_metrics
from .models import PublishResult
from .publisher import Publisher
from .rss import FeedClient
from .telegram import TelegramClient

# Setup structured logging
setup_structured_logging(os.getenv("LOG_LEVEL", "INFO"))


def run(config: Config, execution_id: str | None = None) -> PublishResult:
    """Relay new items once.

    Args:
        config: Loaded configuration
        execution_id: Execution ID for logging context

    Returns:
        PublishResult of the run

    Raises:
        RSSBotError: If fetching, parsing or any Telegram call fails
    """
    feed_client = FeedClient(timeout=config.request_timeout, execution_id=execution_id)
    telegram = TelegramClient(
        config.bot_token,
        config.chat_id,
        api_base=config.api_base,
        timeout=config.request_timeout,
        execution_id=execution_id,
    )
    publisher = Publisher(config, feed_client, telegram, execution_id=execution_id)

    try:
        result = publisher.publish()
    except Exception:
        if config.metrics_namespace:
            send_cloudwatch_metrics(
                publisher.result,
                False,
                config.metrics_namespace,
                config.aws_region,
                execution_id,
            )
        raise
    finally:
        feed_client.close()
        telegram.close()

    if config.metrics_namespace:
        send_cloudwatch_metrics(
            result, True, config.metrics_namespace, config.aws_region, execution_id
        )
    return result


def execute(execution_id: str) -> tuple[bool, dict[str, Any]]:
    """Load configuration and run once, reporting instead of raising.

    Returns:
        ``(success, body)`` where body describes the result or the error
    """
    main_logger = create_execution_logger("main", execution_id)
    main_logger.log_execution_start()

    try:
        config = load_config(execution_id=execution_id)
        result = run(config, execution_id)
    except RSSBotError as e:
        error_msg = str(e)
        main_logger.error(f"Run aborted: {error_msg}", error=error_msg)
        main_logger.log_execution_end(success=False)
        return False, {
            "execution_id": execution_id,
            "error": error_msg,
            "error_type": type(e).__name__,
        }
    except Exception as e:
        error_msg = f"Unexpected error: {type(e).__name__}: {e}"
        main_logger.logger.exception(
            error_msg,
            extra={"execution_id": execution_id, "component": "main"},
        )
        main_logger.log_execution_end(success=False)
        return False, {
            "execution_id": execution_id,
            "error": error_msg,
            "error_type": type(e).__name__,
        }

    main_logger.log_metrics(result.as_dict())
    main_logger.log_execution_end(success=True)
    return True, {"execution_id": execution_id, "result": result.as_dict()}


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Lambda handler relaying new feed items to Telegram.

    Args:
        event: Lambda event data (unused, any trigger starts a run)
        context: Lambda context object

    Returns:
        Response dictionary with status 200 on success and 500 on failure
    """
    execution_id = new_execution_id("lambda")
    create_execution_logger("main", execution_id).info(
        "Lambda invoked",
        lambda_request_id=getattr(context, "aws_request_id", "unknown"),
    )

    success, body = execute(execution_id)
    body["message"] = (
        "RSS Telegram relay execution completed"
        if success
        else "RSS Telegram relay execution failed"
    )
    return {"statusCode": 200 if success else 500, "body": json.dumps(body)}


def main() -> int:
    """Console script entry point, returns the process exit code."""
    success, _ = execute(new_execution_id("cli"))
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
