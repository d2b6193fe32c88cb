# Pydantic Schemas Package
from .order import Order, LineItem, ShippingBreakdown, PaymentMethod, OrderStatus, Variant
from .cost import CostField, CostValues, CostFieldType, CalculationType, PercentageType
from .ad_spend import AdSpendEntry
from .report import (
    ReportRequest, ClassificationPolicy, PnLReport, OrderPnL, DailyPnL, MonthlyPnL,
    GlobalStats, BreakevenMetrics, StatusBreakdown, HistoricalAverages,
    CostLine, Notice, NoticeCode, DeliveryStage,
)
from .projection import ProjectionRequest, ProjectionResult, HistoricalProjectionRequest, HistoricalProjection

__all__ = [
    "Order", "LineItem", "ShippingBreakdown", "PaymentMethod", "OrderStatus", "Variant",
    "CostField", "CostValues", "CostFieldType", "CalculationType", "PercentageType",
    "AdSpendEntry",
    "ReportRequest", "ClassificationPolicy", "PnLReport", "OrderPnL", "DailyPnL", "MonthlyPnL",
    "GlobalStats", "BreakevenMetrics", "StatusBreakdown", "HistoricalAverages",
    "CostLine", "Notice", "NoticeCode", "DeliveryStage",
    "ProjectionRequest", "ProjectionResult", "HistoricalProjectionRequest", "HistoricalProjection",
]
