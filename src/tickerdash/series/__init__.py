"""Rolling windows, candle aggregation and indicators."""

from .candles import CandleBuilder
from .indicators import RunningAverage, moving_average, moving_averages
from .window import RollingWindow

__all__ = [
    "CandleBuilder",
    "RollingWindow",
    "RunningAverage",
    "moving_average",
    "moving_averages",
]
