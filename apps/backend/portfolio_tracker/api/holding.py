"""
持倉 API 路由

持倉 CRUD；回應一律包含即時價格與損益。
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_tracker.database import get_db
from portfolio_tracker.price.exchange_rate import ExchangeRateProvider, get_exchange_rate_provider
from portfolio_tracker.price.manager import PriceManager, get_price_manager
from portfolio_tracker.schemas.common import ApiResponse
from portfolio_tracker.schemas.holding import HoldingCreate, HoldingUpdate, HoldingDetail
from portfolio_tracker.services.holding_service import HoldingService
from portfolio_tracker.services.portfolio_service import PortfolioService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/holdings", tags=["持倉"])


def _get_portfolio_service(
    db: AsyncSession = Depends(get_db),
    price_manager: PriceManager = Depends(get_price_manager),
    rate_provider: ExchangeRateProvider = Depends(get_exchange_rate_provider),
) -> PortfolioService:
    """建立 PortfolioService 實例"""
    return PortfolioService(db, price_manager, rate_provider)


@router.get("", response_model=ApiResponse[list[HoldingDetail]])
async def list_holdings(service: PortfolioService = Depends(_get_portfolio_service)):
    """取得所有持倉"""
    details, _ = await service.list_details()
    return ApiResponse(data=details)


@router.get("/asset-type/{asset_type}", response_model=ApiResponse[list[HoldingDetail]])
async def list_holdings_by_asset_type(
    asset_type: str,
    service: PortfolioService = Depends(_get_portfolio_service),
):
    """取得指定資產類型的持倉（STOCK / MUTUAL_FUND）"""
    details, _ = await service.list_details(asset_type=asset_type)
    return ApiResponse(data=details)


@router.get("/{holding_id}", response_model=ApiResponse[HoldingDetail])
async def get_holding(
    holding_id: str,
    service: PortfolioService = Depends(_get_portfolio_service),
):
    """取得單筆持倉"""
    detail = await service.get_detail(holding_id)
    if detail is None:
        raise HTTPException(status_code=404, detail="持倉不存在")
    return ApiResponse(data=detail)


@router.post("", response_model=ApiResponse[HoldingDetail])
async def create_holding(
    data: HoldingCreate,
    db: AsyncSession = Depends(get_db),
    service: PortfolioService = Depends(_get_portfolio_service),
):
    """新增持倉"""
    holding = await HoldingService(db).create_holding(data)
    return ApiResponse(data=await service.enrich(holding), message="持倉已新增")


@router.put("/{holding_id}", response_model=ApiResponse[HoldingDetail])
async def update_holding(
    holding_id: str,
    data: HoldingUpdate,
    db: AsyncSession = Depends(get_db),
    service: PortfolioService = Depends(_get_portfolio_service),
):
    """更新持倉"""
    holding = await HoldingService(db).update_holding(holding_id, data)
    if holding is None:
        raise HTTPException(status_code=404, detail="持倉不存在")
    return ApiResponse(data=await service.enrich(holding))


@router.delete("/{holding_id}")
async def delete_holding(holding_id: str, db: AsyncSession = Depends(get_db)):
    """刪除持倉"""
    deleted = await HoldingService(db).delete_holding(holding_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="持倉不存在")
    return ApiResponse(message="持倉已刪除")
