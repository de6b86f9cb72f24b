"""Static sample news shown alongside the dashboard."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta


@dataclass(frozen=True)
class NewsItem:
    id: str
    title: str
    summary: str
    url: str
    published_at: datetime
    source: str


_HEADLINES = (
    (
        2,
        "XRP Sees Strong Volume Growth as Regulatory Clarity Improves",
        "Trading volume for XRP has increased significantly following recent regulatory "
        "developments...",
        "CoinDesk",
    ),
    (
        4,
        "Indonesian Crypto Exchange INDODAX Reports Record Trading Activity",
        "INDODAX has seen unprecedented trading volumes across major cryptocurrencies "
        "including XRP...",
        "CoinTelegraph",
    ),
    (
        6,
        "Ripple Partners with Indonesian Banks for Cross-Border Payments",
        "New partnerships aim to facilitate faster and cheaper international transfers "
        "using XRP...",
        "Reuters",
    ),
    (
        8,
        "Market Analysis: XRP Price Action Shows Bullish Momentum",
        "Technical indicators suggest potential upward movement for XRP in the coming days...",
        "CryptoSlate",
    ),
    (
        12,
        "Indonesian Rupiah Strengthens Against Major Cryptocurrencies",
        "The IDR has shown resilience in crypto trading pairs, affecting XRP/IDR dynamics...",
        "Bloomberg",
    ),
)


def mock_news(now: datetime | None = None) -> list[NewsItem]:
    """Sample headlines published a few hours before `now`."""
    reference = now or datetime.now(tz=UTC)
    return [
        NewsItem(
            id=str(index),
            title=title,
            summary=summary,
            url="#",
            published_at=reference - timedelta(hours=hours_ago),
            source=source,
        )
        for index, (hours_ago, title, summary, source) in enumerate(_HEADLINES, start=1)
    ]


def format_time_ago(published_at: datetime, now: datetime | None = None) -> str:
    reference = now or datetime.now(tz=UTC)
    hours = int((reference - published_at).total_seconds() // 3600)
    if hours < 1:
        return "just now"
    if hours < 24:
        return _ago(hours, "hour")
    return _ago(hours // 24, "day")


def _ago(count: int, unit: str) -> str:
    suffix = "" if count == 1 else "s"
    return f"{count} {unit}{suffix} ago"
