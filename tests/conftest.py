"""Shared fixtures for RSS Telegram relay tests."""

from unittest.mock import Mock

import pytest

from rssbot.config import Config
from rssbot.models import Feed, FeedItem

FEED_XML = """
<?xml version="1.0" encoding="utf-8"?>
<rss xmlns:media="http://search.yahoo.com/mrss/" version="2.0">
    <channel>
        <title>news | TEST</title>
        <description>newsdescription</description>
        <link>http://www.example.com</link>
        <language>en</language>
        <item>
            <title><![CDATA[Example news title1]]></title>
            <link>https://example.com/news/item1</link>
            <description><![CDATA[<p>Example news description1 </p>]]></description>
            <guid isPermaLink="true">https://example.com/11111111</guid>
            <pubDate>Sun, 16 Aug 2020 13:30:00 +0300</pubDate>
            <category><![CDATA[Category1]]></category>
        </item>
        <item>
            <title><![CDATA[Example news title2]]></title>
            <link>https://example.com/news/item2</link>
            <description><![CDATA[Example news description2 ]]></description>
            <guid isPermaLink="true">https://example.com/222222222</guid>
            <pubDate>Sun, 16 Aug 2020 13:20:00 +0300</pubDate>
            <category><![CDATA[Category2]]></category>
        </item>
        <item>
            <title><![CDATA[Example news title3]]></title>
            <link>https://example.com/news/item3</link>
            <guid isPermaLink="true">https://example.com/333333333</guid>
            <pubDate>Sun, 16 Aug 2020 13:10:00 +0300</pubDate>
        </item>
    </channel>
</rss>"""


def make_feed(*links: str) -> Feed:
    """Build a feed of bare items, newest first."""
    return Feed(items=[FeedItem(link=link) for link in links])


class FakeChat:
    """In-memory stand-in for TelegramClient sharing one chat."""

    def __init__(self, description: str = ""):
        self.description = description
        self.messages: list[str] = []
        self.calls: list[tuple[str, str]] = []

    def get_description(self) -> str:
        self.calls.append(("getChat", ""))
        return self.description

    def set_description(self, description: str) -> bool:
        self.calls.append(("setChatDescription", description))
        self.description = description
        return True

    def send_message(self, text: str) -> Mock:
        self.calls.append(("sendMessage", text))
        self.messages.append(text)
        return Mock(message_id=len(self.messages))


@pytest.fixture
def feed_xml() -> str:
    """Return a three item RSS 2.0 document."""
    return FEED_XML


@pytest.fixture
def config() -> Config:
    """Return a configuration with test credentials."""
    return Config(
        bot_token="123456-aaaaaaa",
        chat_id="@test_chat",
        feed_url="https://example.com/rss",
    )


@pytest.fixture
def fake_chat() -> FakeChat:
    """Return an empty in-memory chat."""
    return FakeChat()
