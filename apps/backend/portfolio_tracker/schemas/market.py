"""
市場資料相關 Schema

歷史價格、標的搜尋與標的詳情的回應模型。
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel


class HistoricalPriceResponse(BaseModel):
    """單日歷史價格"""
    symbol: str
    price: Decimal
    price_date: date

    model_config = {"from_attributes": True}


class SearchResultResponse(BaseModel):
    """標的搜尋結果"""
    symbol: str
    name: str
    exchange: str | None = None
    currency: str | None = None
    asset_type: str | None = None

    model_config = {"from_attributes": True}


class AssetDetailResponse(BaseModel):
    """標的詳情"""
    symbol: str
    name: str | None = None
    price: Decimal | None = None
    currency: str | None = None
    as_of: str | None = None
    extra: dict[str, str | Decimal | None] = {}

    model_config = {"from_attributes": True}


class ExchangeRateResponse(BaseModel):
    """匯率（1 USD 可兌換的 INR）"""
    base: str = "USD"
    target: str = "INR"
    rate: Decimal
