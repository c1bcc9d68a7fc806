"""
資料庫連線

依 Settings.database_url 建立 SQLAlchemy async engine 與 session 工廠。
持倉與歷史價格存於同一個資料庫，預設為本機 SQLite 檔案 (aiosqlite)。
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from portfolio_tracker.config import get_settings


class Base(DeclarativeBase):
    """ORM Model 基礎類別"""


def build_engine(database_url: str, echo: bool = False, **engine_kwargs: Any) -> AsyncEngine:
    """建立 async engine；SQLite 連線允許在 aiosqlite 的背景執行緒間使用"""
    if database_url.startswith("sqlite"):
        engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
    return create_async_engine(database_url, echo=echo, **engine_kwargs)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # commit 後仍要讀取欄位做估值與序列化
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


settings = get_settings()
engine = build_engine(settings.database_url, echo=settings.database_echo)
async_session = build_session_factory(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI 依賴注入：每個請求一個 session，成功 commit、失敗 rollback"""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db(bind: AsyncEngine | None = None) -> None:
    """建立尚不存在的資料表（holdings、historical_prices）"""
    import portfolio_tracker.models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
