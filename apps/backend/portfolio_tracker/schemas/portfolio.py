"""
投資組合相關 Schema

定義投資組合摘要、分散度建議的回應模型。
"""

import enum
from decimal import Decimal

from pydantic import BaseModel, Field


class RiskLevel(str, enum.Enum):
    """集中度風險等級"""
    NOT_APPLICABLE = "N/A"
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    VERY_HIGH = "Very High"


class PortfolioSummary(BaseModel):
    """投資組合摘要（金額皆以報告幣別 INR 表示）"""
    total_value: Decimal = Decimal("0")
    total_investment: Decimal = Decimal("0")
    total_profit_loss: Decimal = Decimal("0")
    total_profit_loss_percentage: Decimal = Decimal("0")
    total_holdings: int = 0
    composition_by_asset_type: dict[str, Decimal] = Field(default_factory=dict)
    composition_by_category: dict[str, Decimal] = Field(default_factory=dict)
    currency: str = "INR"
    currency_symbol: str = "₹"
    exchange_rate: Decimal


class DiversificationSuggestion(BaseModel):
    """分散度建議"""
    needs_diversification: bool = False
    risk_level: RiskLevel = RiskLevel.NOT_APPLICABLE
    recommendations: list[str] = Field(default_factory=list)
    category_breakdown: dict[str, Decimal] = Field(default_factory=dict)
