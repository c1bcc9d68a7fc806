"""
報價管理器

統一入口，根據資產類型自動路由到對應的 PriceProvider。
資產類型不明時，依序嘗試候選 Provider，取第一個有資料的結果。
"""

import logging
from collections.abc import AsyncGenerator
from decimal import Decimal

from portfolio_tracker.config import Settings, get_settings
from portfolio_tracker.models.holding import AssetType, normalize_asset_type
from portfolio_tracker.price.base import (
    PriceProvider, PriceData, PricePoint, AssetDetail,
    PriceNotFoundError, SearchResult,
)
from portfolio_tracker.price.mutual_fund import MutualFundProvider
from portfolio_tracker.price.us_stock import USStockProvider

logger = logging.getLogger(__name__)

# 資產類型對應 provider 名稱
ASSET_TYPE_PROVIDER_MAP: dict[str, str] = {
    AssetType.STOCK.value: "stock",
    AssetType.MUTUAL_FUND.value: "mutual_fund",
}

# 資產類型不明時的嘗試順序
FALLBACK_PROVIDER_ORDER: tuple[str, ...] = ("stock", "mutual_fund")


class PriceManager:
    """
    報價管理器

    使用方式：
        manager = PriceManager()
        price = await manager.get_price("AAPL", "STOCK")
    """

    def __init__(
        self,
        settings: Settings | None = None,
        providers: dict[str, PriceProvider] | None = None,
    ):
        settings = settings or get_settings()
        self._providers = providers or {
            "stock": USStockProvider(settings),
            "mutual_fund": MutualFundProvider(settings),
        }

    def candidate_providers(self, asset_type: str | None) -> list[PriceProvider]:
        """依資產類型回傳候選 Provider 清單（有序）"""
        provider = self._provider_for(asset_type)
        if provider is not None:
            return [provider]
        return [self._providers[name] for name in FALLBACK_PROVIDER_ORDER if name in self._providers]

    def _provider_for(self, asset_type: str | None) -> PriceProvider | None:
        """依資產類型取得單一 Provider；不支援時回傳 None"""
        provider_name = ASSET_TYPE_PROVIDER_MAP.get(normalize_asset_type(asset_type), "")
        return self._providers.get(provider_name)

    async def get_price(self, symbol: str, asset_type: str) -> PriceData:
        """
        取得即時報價

        Raises:
            PriceNotFoundError: 不支援的資產類型或找不到報價
            ProviderError: API 呼叫失敗
        """
        provider = self._provider_for(asset_type)
        if not provider:
            raise PriceNotFoundError(f"不支援的資產類型: {asset_type}")

        logger.debug("正在取得 %s (%s) 報價...", symbol, asset_type)
        return await provider.get_current_price(symbol)

    async def get_prices_batch(
        self, items: list[tuple[str, str]]
    ) -> dict[tuple[str, str], Decimal]:
        """
        批次取得報價

        Args:
            items: [(symbol, asset_type), ...] 列表

        Returns:
            {(symbol, asset_type): price, ...}；取得失敗的標的價格為 0
        """
        results: dict[tuple[str, str], Decimal] = {}
        for symbol, asset_type in items:
            key = (symbol, asset_type)
            if key in results:
                continue
            try:
                price = await self.get_price(symbol, asset_type)
                results[key] = price.price
            except Exception as e:
                logger.warning("取得 %s (%s) 報價失敗: %s", symbol, asset_type, e)
                results[key] = Decimal("0")
        return results

    async def get_historical(self, symbol: str, asset_type: str | None) -> list[PricePoint]:
        """依序嘗試候選 Provider 取得歷史價格，全部失敗時回傳空列表"""
        for provider in self.candidate_providers(asset_type):
            try:
                prices = await provider.get_historical_prices(symbol)
            except Exception as e:
                logger.warning(
                    "%s 取得 %s 歷史價格失敗: %s", type(provider).__name__, symbol, e
                )
                continue
            if prices:
                return prices
        return []

    async def get_details(self, symbol: str, asset_type: str) -> AssetDetail:
        """取得標的詳情"""
        provider = self._provider_for(asset_type)
        if not provider:
            raise PriceNotFoundError(f"不支援的資產類型: {asset_type}")
        return await provider.get_details(symbol)

    async def search_symbol(self, query: str, asset_type: str) -> list[SearchResult]:
        """
        搜尋標的

        Args:
            query: 搜尋關鍵字
            asset_type: 資產類型

        Returns:
            SearchResult 列表
        """
        provider = self._provider_for(asset_type)
        if not provider:
            return []
        return await provider.search_symbol(query)

    async def close(self):
        """關閉所有 Provider 的資源"""
        for provider in self._providers.values():
            await provider.close()


async def get_price_manager() -> AsyncGenerator[PriceManager, None]:
    """FastAPI 依賴注入：取得報價管理器，請求結束後釋放連線"""
    manager = PriceManager()
    try:
        yield manager
    finally:
        await manager.close()
