"""
歷史價格模型

每個標的每日一筆收盤價（或基金淨值），供走勢圖使用。
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import String, Date, Integer, Numeric, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from portfolio_tracker.database import Base


class HistoricalPrice(Base):
    __tablename__ = "historical_prices"

    # 同一標的同一天只保留一筆
    __table_args__ = (
        UniqueConstraint("symbol", "price_date", name="uq_symbol_price_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    symbol: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=18, scale=4), nullable=False,
    )
    price_date: Mapped[date] = mapped_column(Date, nullable=False)

    def __repr__(self) -> str:
        return f"<HistoricalPrice {self.symbol} {self.price_date}={self.price}>"
