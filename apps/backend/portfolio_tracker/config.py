"""
Portfolio Tracker 後端設定模組

使用 Pydantic Settings 管理環境變數，自動驗證型別與預設值。
"""

from decimal import Decimal
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """應用程式設定，透過環境變數或 .env 載入"""

    # === 應用程式 ===
    app_env: Literal["development", "production", "testing"] = "development"
    app_name: str = "Portfolio Tracker API"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    # === 資料庫 ===
    database_url: str = "sqlite+aiosqlite:///./portfolio_tracker.db"
    database_echo: bool = False  # 記錄所有 SQL

    # === 匯率 ===
    default_usd_inr_rate: Decimal = Decimal("89.0")  # 即時匯率取得失敗時使用
    exchange_rate_url: str = "https://api.exchangerate-api.com/v4/latest/USD"

    # === 報價 API ===
    mfapi_base_url: str = "https://api.mfapi.in"
    yahoo_search_url: str = "https://query2.finance.yahoo.com/v1/finance/search"
    http_timeout: float = 10.0

    # === 背景排程 ===
    history_sync_enabled: bool = True
    history_sync_interval_hours: int = 24

    # === CORS ===
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:8080",
    ]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"


@lru_cache
def get_settings() -> Settings:
    """取得快取的設定實例"""
    return Settings()
