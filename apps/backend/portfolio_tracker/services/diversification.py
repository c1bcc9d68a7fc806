"""
分散度分析

依股票持倉的產業類別集中度與資產類型配置，以門檻規則產生風險等級與建議。
純函式，不存取資料庫或外部 API。
"""

from decimal import Decimal

from portfolio_tracker.models.holding import AssetType
from portfolio_tracker.schemas.holding import HoldingDetail
from portfolio_tracker.schemas.portfolio import (
    DiversificationSuggestion, PortfolioSummary, RiskLevel,
)
from portfolio_tracker.services.valuation import percentage, round_money

# 單一類別集中度門檻（%）
HIGH_CONCENTRATION = Decimal("40")
MODERATE_CONCENTRATION = Decimal("30")

# 股票佔總資產比例門檻（%）
HIGH_STOCK_ALLOCATION = Decimal("80")
VERY_HIGH_STOCK_ALLOCATION = Decimal("90")

# 建議涵蓋的核心產業
REFERENCE_SECTORS: tuple[str, ...] = (
    "Technology",
    "Healthcare",
    "Finance",
    "Consumer Goods",
    "Energy",
)

WELL_DIVERSIFIED_SECTORS = "Good diversification across multiple sectors!"
WELL_DIVERSIFIED_FALLBACK = "Your portfolio is well diversified!"


def _stock_values_by_category(holdings: list[HoldingDetail]) -> dict[str, Decimal]:
    """有類別的股票持倉，依類別加總原幣現值"""
    values: dict[str, Decimal] = {}
    for h in holdings:
        if h.asset_type == AssetType.STOCK.value and h.category:
            values[h.category] = values.get(h.category, Decimal("0")) + h.current_value
    return values


def advise(holdings: list[HoldingDetail], summary: PortfolioSummary) -> DiversificationSuggestion:
    """
    產生分散度建議

    規則依序為：單一類別集中度、類別數量、缺少的核心產業、股票配置比例。
    以上皆無建議時，補上一則「分散良好」。
    """
    if not holdings:
        return DiversificationSuggestion(risk_level=RiskLevel.NOT_APPLICABLE)

    category_values = _stock_values_by_category(holdings)
    total_stock_value = sum(category_values.values(), Decimal("0"))
    if total_stock_value == 0:
        return DiversificationSuggestion(risk_level=RiskLevel.LOW)

    category_pct = {
        category: percentage(value, total_stock_value)
        for category, value in category_values.items()
    }

    needs_diversification = False
    risk_level = RiskLevel.MODERATE
    recommendations: list[str] = []

    for category, pct in category_pct.items():
        if pct > HIGH_CONCENTRATION:
            needs_diversification = True
            risk_level = RiskLevel.HIGH
            recommendations.append(
                f"High concentration in {category} ({round_money(pct)}%). "
                "Consider diversifying into other sectors."
            )
        elif pct > MODERATE_CONCENTRATION:
            recommendations.append(
                f"Moderate concentration in {category} ({round_money(pct)}%). "
                "Monitor and consider diversification if it increases."
            )

    category_count = len(category_values)
    if category_count == 1:
        risk_level = RiskLevel.VERY_HIGH
        needs_diversification = True
        recommendations.append(
            "Portfolio is concentrated in a single category. "
            "Consider diversifying into multiple sectors."
        )
    elif category_count == 2:
        risk_level = RiskLevel.HIGH
        recommendations.append(
            "Portfolio has limited category diversification. Consider adding more sectors."
        )
    elif category_count >= 5:
        risk_level = RiskLevel.LOW
        recommendations.append(WELL_DIVERSIFIED_SECTORS)

    missing_sectors = [s for s in REFERENCE_SECTORS if s not in category_values]
    if missing_sectors and category_count < 3:
        needs_diversification = True
        for sector in missing_sectors:
            recommendations.append(
                f"Consider adding holdings in the {sector} sector for better diversification."
            )

    stock_value = summary.composition_by_asset_type.get(AssetType.STOCK.value)
    if stock_value is not None and summary.total_value > 0:
        stock_pct = percentage(stock_value, summary.total_value)
        if stock_pct > HIGH_STOCK_ALLOCATION:
            recommendations.append(
                f"High allocation to stocks ({round_money(stock_pct)}%). "
                "Consider balancing with other asset types."
            )
            if stock_pct > VERY_HIGH_STOCK_ALLOCATION:
                risk_level = RiskLevel.VERY_HIGH
                needs_diversification = True
                recommendations.append(
                    f"Very high allocation to stocks ({round_money(stock_pct)}%). "
                    "This increases risk significantly."
                )

    if not recommendations:
        recommendations.append(WELL_DIVERSIFIED_FALLBACK)

    return DiversificationSuggestion(
        needs_diversification=needs_diversification,
        risk_level=risk_level,
        recommendations=recommendations,
        category_breakdown={k: round_money(v) for k, v in category_pct.items()},
    )
