"""
匯率 API 路由
"""

import logging

from fastapi import APIRouter, Depends

from portfolio_tracker.price.exchange_rate import ExchangeRateProvider, get_exchange_rate_provider
from portfolio_tracker.schemas.common import ApiResponse
from portfolio_tracker.schemas.market import ExchangeRateResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/exchange-rate", tags=["匯率"])


@router.get("", response_model=ApiResponse[ExchangeRateResponse])
async def get_exchange_rate(
    provider: ExchangeRateProvider = Depends(get_exchange_rate_provider),
):
    """
    取得目前 USD/INR 匯率

    即時匯率無法取得時回傳預設值，前端不需另外處理錯誤。
    """
    rate = await provider.get_usd_to_inr_rate()
    return ApiResponse(data=ExchangeRateResponse(rate=rate))
