"""
持倉相關 Schema

定義持倉 CRUD 的請求模型，以及含即時價格與損益的回應模型。
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class HoldingCreate(BaseModel):
    """新增持倉"""
    asset_type: str = Field(min_length=1, max_length=20)
    symbol: str = Field(min_length=1, max_length=50)
    quantity: Decimal
    purchase_price: Decimal
    purchase_date: date | None = None
    category: str | None = Field(default=None, max_length=100)


class HoldingUpdate(HoldingCreate):
    """更新持倉（整筆取代可變欄位）"""
    pass


class HoldingDetail(BaseModel):
    """持倉明細（含即時價格與損益）"""
    id: str | None = None
    asset_type: str
    symbol: str
    quantity: Decimal
    purchase_price: Decimal
    purchase_date: date | None = None
    category: str | None = None
    created_at: datetime | None = None

    current_price: Decimal = Decimal("0")
    current_value: Decimal = Decimal("0")
    profit_loss: Decimal = Decimal("0")
    profit_loss_percentage: Decimal = Decimal("0")  # 小數點後 4 位
    currency: str = ""
    currency_symbol: str = ""
    current_value_inr: Decimal = Decimal("0")
    profit_loss_inr: Decimal = Decimal("0")

    @property
    def purchase_value(self) -> Decimal:
        return self.purchase_price * self.quantity
