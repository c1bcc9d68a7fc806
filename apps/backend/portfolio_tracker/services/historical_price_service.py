"""
歷史價格服務層

讀取已儲存的歷史價格，或向報價來源抓取近一個月資料後寫入資料庫。
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_tracker.models.historical_price import HistoricalPrice
from portfolio_tracker.price.base import PricePoint
from portfolio_tracker.price.manager import PriceManager

logger = logging.getLogger(__name__)


class HistoricalPriceService:
    """歷史價格業務邏輯"""

    def __init__(self, db: AsyncSession, price_manager: PriceManager):
        self.db = db
        self.price_manager = price_manager

    async def get_historical_prices(self, symbol: str | None) -> list[HistoricalPrice]:
        """取得指定標的的歷史價格，依日期由舊到新"""
        if not symbol or not symbol.strip():
            return []
        stmt = (
            select(HistoricalPrice)
            .where(HistoricalPrice.symbol == symbol.strip())
            .order_by(HistoricalPrice.price_date.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def fetch_and_store(self, symbol: str, asset_type: str | None) -> list[PricePoint]:
        """
        抓取並儲存歷史價格

        資產類型不明時依序嘗試股票、基金來源。
        已存在的 (symbol, 日期) 不重複寫入。

        Returns:
            本次抓到的價格點（含已存在者）
        """
        symbol = symbol.strip()
        try:
            points = await self.price_manager.get_historical(symbol, asset_type)
        except Exception as e:
            logger.error("抓取 %s (%s) 歷史價格失敗: %s", symbol, asset_type, e)
            return []

        if not points:
            logger.warning("找不到 %s (%s) 的歷史價格", symbol, asset_type)
            return []

        stmt = select(HistoricalPrice.price_date).where(HistoricalPrice.symbol == symbol)
        result = await self.db.execute(stmt)
        existing_dates = set(result.scalars().all())

        new_points = []
        for point in points:
            if point.date in existing_dates:
                continue
            existing_dates.add(point.date)
            new_points.append(point)

        for point in new_points:
            self.db.add(HistoricalPrice(symbol=symbol, price=point.price, price_date=point.date))
        await self.db.flush()

        logger.info(
            "%s 歷史價格：抓取 %d 筆，新增 %d 筆", symbol, len(points), len(new_points)
        )
        return points
