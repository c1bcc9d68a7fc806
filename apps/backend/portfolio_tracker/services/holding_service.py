"""
持倉服務層

持倉的新增、查詢、更新與刪除。資產類型於每次寫入時正規化為大寫。
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_tracker.models.holding import Holding, normalize_asset_type
from portfolio_tracker.schemas.holding import HoldingCreate, HoldingUpdate

logger = logging.getLogger(__name__)


class HoldingService:
    """持倉業務邏輯"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_holdings(self) -> list[Holding]:
        """取得所有持倉（依建立時間排序）"""
        stmt = select(Holding).order_by(Holding.created_at, Holding.id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_by_asset_type(self, asset_type: str) -> list[Holding]:
        """取得指定資產類型的持倉"""
        stmt = (
            select(Holding)
            .where(Holding.asset_type == normalize_asset_type(asset_type))
            .order_by(Holding.created_at, Holding.id)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_holding(self, holding_id: str) -> Holding | None:
        return await self.db.get(Holding, holding_id)

    async def create_holding(self, data: HoldingCreate) -> Holding:
        """新增持倉"""
        holding = Holding(
            asset_type=normalize_asset_type(data.asset_type),
            symbol=data.symbol.strip(),
            quantity=data.quantity,
            purchase_price=data.purchase_price,
            purchase_date=data.purchase_date,
            category=data.category or None,
        )
        self.db.add(holding)
        await self.db.flush()
        await self.db.refresh(holding)
        logger.info("新增持倉 %s (%s)", holding.symbol, holding.asset_type)
        return holding

    async def update_holding(self, holding_id: str, data: HoldingUpdate) -> Holding | None:
        """以新值整筆取代可變欄位；id 與 created_at 不變"""
        holding = await self.db.get(Holding, holding_id)
        if holding is None:
            return None

        holding.asset_type = normalize_asset_type(data.asset_type)
        holding.symbol = data.symbol.strip()
        holding.quantity = data.quantity
        holding.purchase_price = data.purchase_price
        holding.purchase_date = data.purchase_date
        holding.category = data.category or None

        await self.db.flush()
        await self.db.refresh(holding)
        return holding

    async def delete_holding(self, holding_id: str) -> bool:
        """刪除持倉，不存在時回傳 False"""
        holding = await self.db.get(Holding, holding_id)
        if holding is None:
            return False
        await self.db.delete(holding)
        await self.db.flush()
        logger.info("刪除持倉 %s (%s)", holding.symbol, holding_id)
        return True

    async def distinct_symbols(self) -> list[tuple[str, str]]:
        """所有持倉中不重複的 (symbol, asset_type)"""
        stmt = select(Holding.symbol, Holding.asset_type).distinct()
        result = await self.db.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]
