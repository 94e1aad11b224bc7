"""Unit tests for the entry points."""

import json
from dataclasses import replace
from unittest.mock import Mock, patch

import pytest

from rssbot.errors import APIError, ConfigError, FetchError
from rssbot.lambda_handler import lambda_handler, main, run
from rssbot.models import PublishResult


class TestLambdaHandlerUnit:
    """Unit tests for lambda_handler and main."""

    def test_success_returns_200(self, config):
        result = PublishResult(found=3, pending=2, sent=2, marker="A")
        with (
            patch("rssbot.lambda_handler.load_config", return_value=config),
            patch("rssbot.lambda_handler.run", return_value=result) as mock_run,
        ):
            response = lambda_handler({}, Mock(aws_request_id="req-1"))

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["result"] == result.as_dict()
        assert body["execution_id"].startswith("lambda_")
        mock_run.assert_called_once_with(config, body["execution_id"])

    @pytest.mark.parametrize(
        "error",
        [
            FetchError("Failed to download feed"),
            APIError("sendMessage", APIError.REMOTE, "Response not OK"),
        ],
    )
    def test_run_failure_returns_500(self, config, error):
        with (
            patch("rssbot.lambda_handler.load_config", return_value=config),
            patch("rssbot.lambda_handler.run", side_effect=error),
        ):
            response = lambda_handler({}, Mock())

        assert response["statusCode"] == 500
        body = json.loads(response["body"])
        assert body["error_type"] == type(error).__name__
        assert body["error"] == str(error)

    def test_config_failure_returns_500(self):
        with (
            patch(
                "rssbot.lambda_handler.load_config",
                side_effect=ConfigError("TELEGRAM_BOT_TOKEN not set"),
            ),
            patch("rssbot.lambda_handler.run") as mock_run,
        ):
            response = lambda_handler({}, Mock())

        assert response["statusCode"] == 500
        assert json.loads(response["body"])["error_type"] == "ConfigError"
        mock_run.assert_not_called()

    def test_unexpected_error_returns_500(self, config):
        with (
            patch("rssbot.lambda_handler.load_config", return_value=config),
            patch("rssbot.lambda_handler.run", side_effect=KeyError("boom")),
        ):
            response = lambda_handler({}, Mock())

        assert response["statusCode"] == 500
        assert json.loads(response["body"])["error_type"] == "KeyError"

    def test_main_exit_codes(self, config):
        with (
            patch("rssbot.lambda_handler.load_config", return_value=config),
            patch("rssbot.lambda_handler.run", return_value=PublishResult()),
        ):
            assert main() == 0

        with patch(
            "rssbot.lambda_handler.load_config", side_effect=ConfigError("missing")
        ):
            assert main() == 1


class TestRunUnit:
    """Unit tests for run wiring."""

    def test_run_builds_clients_from_config(self, config):
        with (
            patch("rssbot.lambda_handler.FeedClient") as mock_feed_client_class,
            patch("rssbot.lambda_handler.TelegramClient") as mock_telegram_class,
            patch("rssbot.lambda_handler.Publisher") as mock_publisher_class,
            patch("rssbot.lambda_handler.send_cloudwatch_metrics") as mock_metrics,
        ):
            expected = PublishResult(found=1, pending=1, sent=1, marker="A")
            mock_publisher_class.return_value.publish.return_value = expected

            result = run(config, "exec-1")

        assert result is expected
        mock_feed_client_class.assert_called_once_with(
            timeout=config.request_timeout, execution_id="exec-1"
        )
        mock_telegram_class.assert_called_once_with(
            config.bot_token,
            config.chat_id,
            api_base=config.api_base,
            timeout=config.request_timeout,
            execution_id="exec-1",
        )
        mock_feed_client_class.return_value.close.assert_called_once()
        mock_telegram_class.return_value.close.assert_called_once()
        mock_metrics.assert_not_called()

    def test_run_sends_metrics_when_enabled(self, config):
        config = replace(config, metrics_namespace="RSS-Telegram-Relay")
        with (
            patch("rssbot.lambda_handler.FeedClient"),
            patch("rssbot.lambda_handler.TelegramClient"),
            patch("rssbot.lambda_handler.Publisher") as mock_publisher_class,
            patch("rssbot.lambda_handler.send_cloudwatch_metrics") as mock_metrics,
        ):
            expected = PublishResult()
            mock_publisher_class.return_value.publish.return_value = expected

            run(config, "exec-1")

        mock_metrics.assert_called_once_with(
            expected, True, "RSS-Telegram-Relay", config.aws_region, "exec-1"
        )

    def test_run_failure_sends_failure_metrics_and_closes(self, config):
        config = replace(config, metrics_namespace="RSS-Telegram-Relay")
        with (
            patch("rssbot.lambda_handler.FeedClient") as mock_feed_client_class,
            patch("rssbot.lambda_handler.TelegramClient") as mock_telegram_class,
            patch("rssbot.lambda_handler.Publisher") as mock_publisher_class,
            patch("rssbot.lambda_handler.send_cloudwatch_metrics") as mock_metrics,
        ):
            publisher = mock_publisher_class.return_value
            publisher.publish.side_effect = FetchError("down")

            with pytest.raises(FetchError):
                run(config, "exec-1")

        mock_metrics.assert_called_once_with(
            publisher.result, False, "RSS-Telegram-Relay", config.aws_region, "exec-1"
        )
        mock_feed_client_class.return_value.close.assert_called_once()
        mock_telegram_class.return_value.close.assert_called_once()
