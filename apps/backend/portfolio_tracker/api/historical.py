"""
歷史價格 API 路由
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_tracker.database import get_db
from portfolio_tracker.price.manager import PriceManager, get_price_manager
from portfolio_tracker.schemas.common import ApiResponse
from portfolio_tracker.schemas.market import HistoricalPriceResponse
from portfolio_tracker.services.historical_price_service import HistoricalPriceService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/historical", tags=["歷史價格"])


@router.get("/{symbol}", response_model=ApiResponse[list[HistoricalPriceResponse]])
async def get_historical_prices(
    symbol: str,
    db: AsyncSession = Depends(get_db),
    price_manager: PriceManager = Depends(get_price_manager),
):
    """取得已儲存的歷史價格（由舊到新）"""
    prices = await HistoricalPriceService(db, price_manager).get_historical_prices(symbol)
    return ApiResponse(data=[HistoricalPriceResponse.model_validate(p) for p in prices])


@router.post("/fetch", response_model=ApiResponse[list[HistoricalPriceResponse]])
async def fetch_historical_prices(
    symbol: str,
    asset_type: str | None = None,
    db: AsyncSession = Depends(get_db),
    price_manager: PriceManager = Depends(get_price_manager),
):
    """
    抓取並儲存近一個月歷史價格

    未指定資產類型時，依序嘗試股票與基金來源。
    """
    points = await HistoricalPriceService(db, price_manager).fetch_and_store(symbol, asset_type)
    return ApiResponse(data=[
        HistoricalPriceResponse(symbol=p.symbol, price=p.price, price_date=p.date)
        for p in points
    ])
