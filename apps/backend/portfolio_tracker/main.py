"""
Portfolio Tracker FastAPI 應用程式入口

包含 CORS 設定、全域錯誤處理中介軟體、
啟動事件（初始化資料庫與背景排程）。
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portfolio_tracker.config import get_settings
from portfolio_tracker.database import init_db, engine
from portfolio_tracker.api.router import api_router
from portfolio_tracker.schemas.common import ErrorResponse
from portfolio_tracker.worker import setup_worker, stop_worker

settings = get_settings()

# 設定日誌
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """應用程式生命週期管理"""
    # === 啟動時 ===
    logger.info("Portfolio Tracker API 啟動中...")
    logger.info("環境: %s", settings.app_env)

    # 初始化資料庫（開發模式自動建表）
    await init_db()
    logger.info("資料庫初始化完成")

    # 啟動歷史價格同步排程
    if settings.history_sync_enabled:
        setup_worker()

    yield

    # === 關閉時 ===
    logger.info("Portfolio Tracker API 關閉中...")
    stop_worker()
    await engine.dispose()
    logger.info("Portfolio Tracker API 已關閉")


# 建立 FastAPI 應用
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="股票與共同基金持倉追蹤 API",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# === CORS 中介軟體 ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# === 全域錯誤處理 ===

@app.middleware("http")
async def error_handling_middleware(request: Request, call_next):
    """
    全域錯誤處理與請求日誌中介軟體

    - 記錄每個請求的處理時間
    - 捕獲未預期的例外並回傳統一格式
    """
    start_time = time.time()

    try:
        response = await call_next(request)

        # 記錄請求日誌
        process_time = time.time() - start_time
        logger.info(
            "%s %s - %d (%.3fs)",
            request.method,
            request.url.path,
            response.status_code,
            process_time,
        )

        response.headers["X-Process-Time"] = f"{process_time:.3f}"
        return response

    except Exception as e:
        process_time = time.time() - start_time
        logger.exception(
            "%s %s - 500 (%.3fs) Error: %s",
            request.method,
            request.url.path,
            process_time,
            str(e),
        )
        error = ErrorResponse(
            error="Internal Server Error",
            detail=str(e) if settings.is_development else None,
        )
        return JSONResponse(status_code=500, content=error.model_dump())


# === 註冊路由 ===
app.include_router(api_router)


# === 健康檢查 ===

@app.get("/health", tags=["系統"])
async def health_check():
    """API 健康檢查"""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
    }
