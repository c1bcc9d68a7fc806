"""Portfolio Tracker ORM Models 套件"""

from portfolio_tracker.models.holding import Holding
from portfolio_tracker.models.historical_price import HistoricalPrice

__all__ = [
    "Holding",
    "HistoricalPrice",
]
