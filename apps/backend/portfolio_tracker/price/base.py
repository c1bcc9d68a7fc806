"""
報價提供者抽象基礎類別

定義所有報價來源必須實作的介面。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal


@dataclass
class PriceData:
    """報價資料"""
    symbol: str
    price: Decimal
    currency: str
    timestamp: datetime = field(default_factory=datetime.now)
    source: str = ""


@dataclass
class SearchResult:
    """搜尋結果資料"""
    symbol: str
    name: str
    exchange: str | None = None  # 例如 "NMS", "NYQ"
    currency: str | None = None
    asset_type: str | None = None


@dataclass
class PricePoint:
    """單日歷史價格（收盤價或基金淨值）"""
    symbol: str
    date: date
    price: Decimal


@dataclass
class AssetDetail:
    """標的詳情（股票行情或基金基本資料）"""
    symbol: str
    name: str | None = None
    price: Decimal | None = None
    currency: str | None = None
    as_of: str | None = None
    extra: dict[str, str | Decimal | None] = field(default_factory=dict)


class PriceProvider(ABC):
    """
    報價提供者抽象類別

    所有報價來源（Yahoo Finance、MFAPI 等）
    必須繼承此類別並實作以下方法。
    """

    @abstractmethod
    async def get_current_price(self, symbol: str) -> PriceData:
        """
        取得指定標的的即時報價。

        Args:
            symbol: 標的代碼（如 AAPL，或基金 scheme code 如 119551）

        Returns:
            PriceData 物件

        Raises:
            PriceNotFoundError: 找不到報價
            ProviderError: API 呼叫失敗
        """
        ...

    @abstractmethod
    async def get_historical_prices(self, symbol: str) -> list[PricePoint]:
        """
        取得近一個月的歷史價格，依日期由舊到新排序。

        Raises:
            PriceNotFoundError: 找不到歷史資料
        """
        ...

    @abstractmethod
    async def search_symbol(self, query: str) -> list[SearchResult]:
        """依代碼或名稱搜尋標的，失敗時回傳空列表"""
        ...

    @abstractmethod
    async def get_details(self, symbol: str) -> AssetDetail:
        """取得標的詳情"""
        ...

    async def close(self) -> None:
        """釋放資源（預設無動作）"""
        return None


class PriceNotFoundError(Exception):
    """找不到報價"""
    pass


class ProviderError(Exception):
    """報價提供者錯誤"""
    pass
