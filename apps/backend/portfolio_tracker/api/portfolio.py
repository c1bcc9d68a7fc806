"""
投資組合 API 路由

投資組合摘要、最佳 / 最差持倉、分散度建議。
"""

import logging

from fastapi import APIRouter, Depends

from portfolio_tracker.api.holding import _get_portfolio_service
from portfolio_tracker.schemas.common import ApiResponse
from portfolio_tracker.schemas.holding import HoldingDetail
from portfolio_tracker.schemas.portfolio import PortfolioSummary, DiversificationSuggestion
from portfolio_tracker.services.portfolio_service import PortfolioService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/portfolio", tags=["投資組合"])


@router.get("/summary", response_model=ApiResponse[PortfolioSummary])
async def get_portfolio_summary(service: PortfolioService = Depends(_get_portfolio_service)):
    """
    計算投資組合摘要

    即時讀取持倉，呼叫報價引擎取得最新價格，
    回傳以 INR 表示的總值、總投入、損益與資產配置。
    """
    return ApiResponse(data=await service.get_summary())


@router.get("/best-performer", response_model=ApiResponse[HoldingDetail])
async def get_best_performer(service: PortfolioService = Depends(_get_portfolio_service)):
    """報酬率最高的持倉；無持倉時 data 為 null"""
    return ApiResponse(data=await service.get_best_performer())


@router.get("/worst-performer", response_model=ApiResponse[HoldingDetail])
async def get_worst_performer(service: PortfolioService = Depends(_get_portfolio_service)):
    """報酬率最低的持倉；無持倉時 data 為 null"""
    return ApiResponse(data=await service.get_worst_performer())


@router.get("/diversification", response_model=ApiResponse[DiversificationSuggestion])
async def get_diversification(service: PortfolioService = Depends(_get_portfolio_service)):
    """依產業集中度與資產配置產生分散度建議"""
    return ApiResponse(data=await service.get_diversification())
