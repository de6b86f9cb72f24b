"""Simulated multi-horizon price prediction.

This is a random perturbation of the current price, not a model. Each
horizon draws a prediction within `current * (1 +/- spread / 2)` and a
confidence from a fixed band.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import numpy as np

Trend = Literal["up", "down"]


@dataclass(frozen=True)
class Horizon:
    label: str
    spread: float
    confidence_floor: float
    confidence_width: float = 20.0


HORIZONS = (
    Horizon("1 hour", 0.1, 65.0),
    Horizon("24 hours", 0.2, 55.0),
    Horizon("7 days", 0.3, 45.0),
)


@dataclass(frozen=True)
class Prediction:
    horizon: str
    price: float
    confidence: float
    trend: Trend


def predict(
    current_price: float,
    rng: np.random.Generator | None = None,
    horizons: tuple[Horizon, ...] = HORIZONS,
) -> list[Prediction]:
    if current_price <= 0:
        raise ValueError("current_price must be positive")
    generator = rng or np.random.default_rng()
    predictions: list[Prediction] = []
    for horizon in horizons:
        price = current_price * (1 + (generator.random() - 0.5) * horizon.spread)
        confidence = horizon.confidence_floor + generator.random() * horizon.confidence_width
        trend: Trend = "up" if generator.random() > 0.5 else "down"
        predictions.append(
            Prediction(
                horizon=horizon.label,
                price=float(price),
                confidence=float(confidence),
                trend=trend,
            )
        )
    return predictions
