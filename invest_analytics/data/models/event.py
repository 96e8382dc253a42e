"""Corporate calendar event models.

Each event carries metadata specific to its kind. The metadata is a tagged
union: the ``kind`` field selects which metadata class a payload decodes to.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Union


class CalendarEventType(str, Enum):
    """Types of calendar events tracked per ticker."""

    EARNINGS = "earnings"
    DIVIDEND = "dividend"
    SPLIT = "split"
    ECONOMIC = "economic"


class EventImportance(str, Enum):
    """Expected market impact of an event."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class EarningsTime(str, Enum):
    """When an earnings report is released relative to the session."""

    BEFORE_OPEN = "BMO"
    AFTER_CLOSE = "AMC"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class EarningsMetadata:
    """Metadata for an earnings report."""

    earnings_time: EarningsTime = EarningsTime.UNKNOWN

    kind = "earnings"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "earningsTime": self.earnings_time.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EarningsMetadata":
        return cls(earnings_time=EarningsTime(data.get("earningsTime", "Unknown")))


@dataclass(frozen=True)
class DividendMetadata:
    """Metadata for a dividend payment or ex-dividend date."""

    amount: float | None = None
    ex_dividend_date: date | None = None

    kind = "dividend"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "amount": self.amount,
            "exDividendDate": self.ex_dividend_date.isoformat() if self.ex_dividend_date else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DividendMetadata":
        ex_date = data.get("exDividendDate")
        return cls(
            amount=data.get("amount"),
            ex_dividend_date=date.fromisoformat(ex_date) if ex_date else None,
        )


@dataclass(frozen=True)
class SplitMetadata:
    """Metadata for a stock split, e.g. ratio ``"4:1"``."""

    ratio: str

    kind = "split"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "ratio": self.ratio}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SplitMetadata":
        return cls(ratio=data["ratio"])


EventMetadata = Union[EarningsMetadata, DividendMetadata, SplitMetadata]

_METADATA_TYPES: dict[str, type] = {
    EarningsMetadata.kind: EarningsMetadata,
    DividendMetadata.kind: DividendMetadata,
    SplitMetadata.kind: SplitMetadata,
}


def metadata_from_dict(data: dict[str, Any] | None) -> EventMetadata | None:
    """Decode event metadata using its ``kind`` discriminant.

    Raises:
        ValueError: If the discriminant is missing or unknown.
    """
    if data is None:
        return None
    kind = data.get("kind")
    metadata_cls = _METADATA_TYPES.get(kind)
    if metadata_cls is None:
        raise ValueError(f"Unknown event metadata kind: {kind!r}")
    return metadata_cls.from_dict(data)


@dataclass
class CalendarEvent:
    """A dated corporate or economic event for a ticker.

    Attributes:
        id: Stable identifier, e.g. ``AAPL-earnings-2024-05-02``.
        ticker: Stock symbol.
        event_type: Kind of event.
        title: Short display title.
        event_date: Date of the event.
        importance: Expected market impact.
        description: Longer description.
        metadata: Kind-specific details.
    """

    id: str
    ticker: str
    event_type: CalendarEventType
    title: str
    event_date: date
    importance: EventImportance = EventImportance.MEDIUM
    description: str = ""
    metadata: EventMetadata | None = None

    def __post_init__(self) -> None:
        if self.metadata is not None and self.metadata.kind != self.event_type.value:
            raise ValueError(
                f"Metadata kind {self.metadata.kind!r} does not match event type "
                f"{self.event_type.value!r}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "ticker": self.ticker,
            "type": self.event_type.value,
            "title": self.title,
            "date": self.event_date.isoformat(),
            "importance": self.importance.value,
            "description": self.description,
            "metadata": self.metadata.to_dict() if self.metadata else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CalendarEvent":
        """Create instance from dictionary."""
        return cls(
            id=data["id"],
            ticker=data["ticker"],
            event_type=CalendarEventType(data["type"]),
            title=data["title"],
            event_date=date.fromisoformat(data["date"]),
            importance=EventImportance(data.get("importance", "medium")),
            description=data.get("description", ""),
            metadata=metadata_from_dict(data.get("metadata")),
        )


def sort_events(events: list[CalendarEvent]) -> list[CalendarEvent]:
    """Events ordered by date, earliest first."""
    return sorted(events, key=lambda e: e.event_date)


def filter_events_by_date_range(
    events: list[CalendarEvent],
    start_date: date,
    end_date: date,
) -> list[CalendarEvent]:
    """Events dated within ``[start_date, end_date]``, earliest first."""
    return sort_events([e for e in events if start_date <= e.event_date <= end_date])
