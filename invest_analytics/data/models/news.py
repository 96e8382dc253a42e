"""News article model."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass
class NewsArticle:
    """A news headline with optional body summary."""

    title: str
    description: str | None = None
    url: str | None = None
    source: str | None = None
    published_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "source": self.source,
            "publishedAt": self.published_at.isoformat() if self.published_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NewsArticle":
        """Create instance from dictionary."""
        published = data.get("publishedAt", data.get("published_at"))
        if isinstance(published, str):
            published = datetime.fromisoformat(published.replace("Z", "+00:00"))
        return cls(
            title=data.get("title", ""),
            description=data.get("description"),
            url=data.get("url"),
            source=data.get("source"),
            published_at=published,
        )
