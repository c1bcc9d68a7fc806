"""
投資組合服務層

彙總所有持倉的總值、總投入、損益與資產配置，
並協調持倉讀取、報價、估值與分散度分析。
"""

import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_tracker.price.exchange_rate import ExchangeRateProvider
from portfolio_tracker.price.manager import PriceManager
from portfolio_tracker.schemas.holding import HoldingDetail
from portfolio_tracker.schemas.portfolio import PortfolioSummary, DiversificationSuggestion
from portfolio_tracker.services.diversification import advise
from portfolio_tracker.services.holding_service import HoldingService
from portfolio_tracker.services.valuation import (
    REPORTING_CURRENCY, REPORTING_CURRENCY_SYMBOL,
    enrich_holding, percentage, round_money, to_reporting_currency,
)

logger = logging.getLogger(__name__)


def summarize(holdings: list[HoldingDetail], rate: Decimal) -> PortfolioSummary:
    """
    計算投資組合摘要

    總損益 = 總現值 − 總投入，皆以加總後的 INR 金額相減，
    每筆投入成本獨立換算，不由單筆損益回推。
    """
    if not holdings:
        return PortfolioSummary(exchange_rate=rate)

    total_value = Decimal("0")
    total_investment = Decimal("0")
    by_asset_type: dict[str, Decimal] = {}
    by_category: dict[str, Decimal] = {}

    for h in holdings:
        total_value += h.current_value_inr
        total_investment += to_reporting_currency(h.purchase_value, h.asset_type, rate)

        by_asset_type[h.asset_type] = by_asset_type.get(h.asset_type, Decimal("0")) + h.current_value_inr

        # 未分類的持倉不列入類別配置
        if h.category:
            by_category[h.category] = by_category.get(h.category, Decimal("0")) + h.current_value_inr

    total_profit_loss = total_value - total_investment

    return PortfolioSummary(
        total_value=round_money(total_value),
        total_investment=round_money(total_investment),
        total_profit_loss=round_money(total_profit_loss),
        total_profit_loss_percentage=round_money(percentage(total_profit_loss, total_investment)),
        total_holdings=len(holdings),
        composition_by_asset_type={k: round_money(v) for k, v in by_asset_type.items()},
        composition_by_category={k: round_money(v) for k, v in by_category.items()},
        currency=REPORTING_CURRENCY,
        currency_symbol=REPORTING_CURRENCY_SYMBOL,
        exchange_rate=rate,
    )


def best_performer(holdings: list[HoldingDetail]) -> HoldingDetail | None:
    """報酬率最高的持倉"""
    if not holdings:
        return None
    return max(holdings, key=lambda h: h.profit_loss_percentage)


def worst_performer(holdings: list[HoldingDetail]) -> HoldingDetail | None:
    """報酬率最低的持倉"""
    if not holdings:
        return None
    return min(holdings, key=lambda h: h.profit_loss_percentage)


class PortfolioService:
    """投資組合業務邏輯"""

    def __init__(
        self,
        db: AsyncSession,
        price_manager: PriceManager,
        rate_provider: ExchangeRateProvider,
    ):
        self.db = db
        self.price_manager = price_manager
        self.rate_provider = rate_provider
        self.holding_service = HoldingService(db)

    async def list_details(self, asset_type: str | None = None) -> tuple[list[HoldingDetail], Decimal]:
        """
        讀取持倉並計算即時估值

        流程：
        1. 查詢持倉（可依資產類型篩選）
        2. 取得一次匯率、批次取得所有報價
        3. 逐筆估值

        Returns:
            (持倉明細列表, 本次使用的匯率)
        """
        if asset_type:
            holdings = await self.holding_service.list_by_asset_type(asset_type)
        else:
            holdings = await self.holding_service.list_holdings()

        rate = await self.rate_provider.get_usd_to_inr_rate()
        prices = await self.price_manager.get_prices_batch(
            [(h.symbol, h.asset_type) for h in holdings]
        )

        details = [
            enrich_holding(h, lambda s, t: prices.get((s, t)), lambda: rate)
            for h in holdings
        ]
        return details, rate

    async def get_detail(self, holding_id: str) -> HoldingDetail | None:
        """讀取單筆持倉並計算即時估值"""
        holding = await self.holding_service.get_holding(holding_id)
        if holding is None:
            return None
        return await self.enrich(holding)

    async def enrich(self, holding) -> HoldingDetail:
        """對單筆持倉即時報價並估值"""
        rate = await self.rate_provider.get_usd_to_inr_rate()
        prices = await self.price_manager.get_prices_batch([(holding.symbol, holding.asset_type)])
        return enrich_holding(holding, lambda s, t: prices.get((s, t)), lambda: rate)

    async def get_summary(self) -> PortfolioSummary:
        """計算投資組合摘要"""
        details, rate = await self.list_details()
        return summarize(details, rate)

    async def get_best_performer(self) -> HoldingDetail | None:
        details, _ = await self.list_details()
        return best_performer(details)

    async def get_worst_performer(self) -> HoldingDetail | None:
        details, _ = await self.list_details()
        return worst_performer(details)

    async def get_diversification(self) -> DiversificationSuggestion:
        """
        產生分散度建議

        摘要與建議使用同一批報價，避免兩次取價結果不一致。
        """
        details, rate = await self.list_details()
        summary = summarize(details, rate)
        suggestion = advise(details, summary)
        logger.info(
            "分散度分析完成: risk=%s, 建議 %d 則",
            suggestion.risk_level.value, len(suggestion.recommendations),
        )
        return suggestion
