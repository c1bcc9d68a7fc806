"""
API 路由集中註冊
"""

from fastapi import APIRouter

from portfolio_tracker.api.exchange import router as exchange_router
from portfolio_tracker.api.historical import router as historical_router
from portfolio_tracker.api.holding import router as holding_router
from portfolio_tracker.api.lookup import router as lookup_router
from portfolio_tracker.api.portfolio import router as portfolio_router

api_router = APIRouter(prefix="/api")
api_router.include_router(holding_router)
api_router.include_router(portfolio_router)
api_router.include_router(historical_router)
api_router.include_router(lookup_router)
api_router.include_router(exchange_router)
