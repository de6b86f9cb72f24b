from __future__ import annotations

from datetime import UTC, datetime, timedelta

import numpy as np
import pytest

from tickerdash.news import format_time_ago, mock_news
from tickerdash.prediction import HORIZONS, predict


def test_predictions_stay_within_horizon_bands() -> None:
    rng = np.random.default_rng(11)
    for _ in range(200):
        predictions = predict(10_000.0, rng=rng)
        assert [prediction.horizon for prediction in predictions] == [
            horizon.label for horizon in HORIZONS
        ]
        for prediction, horizon in zip(predictions, HORIZONS):
            assert abs(prediction.price / 10_000.0 - 1) <= horizon.spread / 2
            assert horizon.confidence_floor <= prediction.confidence
            assert prediction.confidence <= horizon.confidence_floor + horizon.confidence_width
            assert prediction.trend in {"up", "down"}


def test_prediction_requires_positive_price() -> None:
    with pytest.raises(ValueError):
        predict(0.0)


def test_mock_news_is_relative_to_now() -> None:
    now = datetime(2025, 6, 1, 12, tzinfo=UTC)
    items = mock_news(now)

    assert len(items) == 5
    assert [format_time_ago(item.published_at, now) for item in items] == [
        "2 hours ago",
        "4 hours ago",
        "6 hours ago",
        "8 hours ago",
        "12 hours ago",
    ]


def test_format_time_ago_buckets() -> None:
    now = datetime(2025, 6, 1, 12, tzinfo=UTC)
    assert format_time_ago(now - timedelta(minutes=30), now) == "just now"
    assert format_time_ago(now - timedelta(hours=50), now) == "2 days ago"


def test_format_time_ago_uses_singular_units() -> None:
    now = datetime(2025, 6, 1, 12, tzinfo=UTC)
    assert format_time_ago(now - timedelta(minutes=90), now) == "1 hour ago"
    assert format_time_ago(now - timedelta(hours=30), now) == "1 day ago"
