"""Data models for RSS Telegram relay."""

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass
class FeedItem:
    """Represents a single RSS/Atom feed item. The link is its identity."""

    link: str
    title: str | None = None
    description: str | None = None
    category: str | None = None


@dataclass
class Feed:
    """Ordered feed items, newest first as delivered by the source."""

    items: list[FeedItem] = field(default_factory=list)

    @property
    def links(self) -> list[str]:
        """Links of all items in current order."""
        return [item.link for item in self.items]

    def remove_older_than(self, marker: str | None) -> None:
        """Drop the item matching ``marker`` and everything after it.

        The scan stops at the first match. When the marker is empty or not
        present in the feed every item is kept.

        Args:
            marker: Link of the last posted item
        """
        if not marker:
            return

        newer = []
        for item in self.items:
            if item.link == marker:
                break
            newer.append(item)
        self.items = newer

    def reverse(self) -> None:
        """Reverse in place so posting starts from the oldest item."""
        self.items.reverse()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[FeedItem]:
        return iter(self.items)

    def __getitem__(self, index: int) -> FeedItem:
        return self.items[index]


@dataclass
class PublishResult:
    """Outcome of one publishing run."""

    found: int = 0
    pending: int = 0
    sent: int = 0
    marker: str | None = None

    @property
    def remaining(self) -> int:
        """New items left for the next run."""
        return self.pending - self.sent

    def as_dict(self) -> dict:
        """Serializable view used in logs and handler responses."""
        return {
            "found": self.found,
            "pending": self.pending,
            "sent": self.sent,
            "remaining": self.remaining,
            "marker": self.marker,
        }
