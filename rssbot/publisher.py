"""Relays new feed items to a Telegram chat."""

from .config import Config
from .logging_config import create_execution_logger
from .models import FeedItem, PublishResult
from .rss import FeedClient
from .state import decode_marker, encode_marker
from .telegram import TelegramClient

# Telegram rejects sendMessage text longer than this
MAX_MESSAGE_LENGTH = 4096


def format_message(item: FeedItem) -> str:
    """Build the message text: category hashtag, description and link.

    The description is shortened when the whole text would exceed
    MAX_MESSAGE_LENGTH. The hashtag and the link are never cut.
    """
    head = [f"#{item.category}"] if item.category else []
    description = item.description
    if description:
        room = MAX_MESSAGE_LENGTH - len("\n".join(head + [item.link])) - 1
        if len(description) > room:
            description = (
                description[: room - 3].rstrip() + "..." if room > 3 else None
            )
    parts = head + ([description] if description else []) + [item.link]
    return "\n".join(parts)


class Publisher:
    """Runs fetch, diff, post and marker update for one feed and chat."""

    def __init__(
        self,
        config: Config,
        feed_client: FeedClient,
        telegram: TelegramClient,
        execution_id: str | None = None,
    ):
        self.config = config
        self.feed_client = feed_client
        self.telegram = telegram
        self.logger = create_execution_logger("publisher", execution_id)
        # Progress of the latest run, also available after a failure
        self.result = PublishResult()

    def publish(self) -> PublishResult:
        """Post every item newer than the stored marker, oldest first.

        Returns:
            PublishResult describing the run

        Raises:
            FetchError: If the feed cannot be downloaded
            ParseError: If the feed cannot be parsed
            APIError: If any Telegram call fails; posting stops at that item
        """
        self.result = result = PublishResult()
        feed = self.feed_client.fetch(self.config.feed_url)
        result.found = len(feed)

        marker = decode_marker(self.telegram.get_description())
        result.marker = marker
        self.logger.info(f"Current marker: {marker}", marker=marker)

        feed.remove_older_than(marker)
        feed.reverse()
        result.pending = len(feed)

        if not feed:
            self.logger.info("No new items to post")
            return result

        self.logger.info(f"{len(feed)} new items", feed_url=self.config.feed_url)

        budget = self.config.message_limit
        for item in feed:
            # Marker first: a crash before sending skips one item instead of
            # posting it twice on the next run
            marker = encode_marker(item.link)
            self.telegram.set_description(marker)
            result.marker = marker
            self.telegram.send_message(format_message(item))
            result.sent += 1
            self.logger.log_item_posted(item.link, result.sent, result.pending)

            budget -= 1
            if budget <= 0:
                break

        if result.remaining:
            self.logger.info(
                f"Message limit reached, {result.remaining} items left for next run"
            )
        return result
