"""
標的查詢 API 路由

股票與共同基金的搜尋、詳情。
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from portfolio_tracker.models.holding import AssetType
from portfolio_tracker.price.base import PriceNotFoundError, ProviderError
from portfolio_tracker.price.manager import PriceManager, get_price_manager
from portfolio_tracker.schemas.common import ApiResponse
from portfolio_tracker.schemas.market import SearchResultResponse, AssetDetailResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/lookup", tags=["標的查詢"])


async def _search(manager: PriceManager, query: str, asset_type: AssetType):
    results = await manager.search_symbol(query=query, asset_type=asset_type.value)
    return ApiResponse(data=[SearchResultResponse.model_validate(r) for r in results])


async def _details(manager: PriceManager, symbol: str, asset_type: AssetType):
    try:
        detail = await manager.get_details(symbol, asset_type.value)
    except PriceNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProviderError as e:
        logger.error("取得 %s 詳情失敗: %s", symbol, e)
        raise HTTPException(status_code=502, detail=f"報價來源錯誤: {e}")
    return ApiResponse(data=AssetDetailResponse.model_validate(detail))


@router.get("/stocks/search", response_model=ApiResponse[list[SearchResultResponse]])
async def search_stocks(q: str, manager: PriceManager = Depends(get_price_manager)):
    """依代碼或名稱搜尋股票"""
    return await _search(manager, q, AssetType.STOCK)


@router.get("/stocks/{symbol}", response_model=ApiResponse[AssetDetailResponse])
async def get_stock_details(symbol: str, manager: PriceManager = Depends(get_price_manager)):
    """取得股票當日行情"""
    return await _details(manager, symbol, AssetType.STOCK)


@router.get("/mutual-funds/search", response_model=ApiResponse[list[SearchResultResponse]])
async def search_mutual_funds(q: str, manager: PriceManager = Depends(get_price_manager)):
    """依名稱搜尋共同基金"""
    return await _search(manager, q, AssetType.MUTUAL_FUND)


@router.get("/mutual-funds/{scheme_code}", response_model=ApiResponse[AssetDetailResponse])
async def get_mutual_fund_details(
    scheme_code: str, manager: PriceManager = Depends(get_price_manager)
):
    """取得基金基本資料與最新淨值"""
    return await _details(manager, scheme_code, AssetType.MUTUAL_FUND)
