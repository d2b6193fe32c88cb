"""
Profit Projection Schemas
"""
from pydantic import BaseModel
from typing import Optional, List
from datetime import date
from decimal import Decimal

from .report import ReportRequest, HistoricalAverages, Notice


class ProjectionRequest(BaseModel):
    target_monthly_profit: Decimal
    avg_profit_per_order: Decimal
    avg_revenue_per_order: Decimal = Decimal("0")
    roas: Optional[Decimal] = None
    working_days: Optional[int] = None


class ProjectionResult(BaseModel):
    feasible: bool
    reason: Optional[str] = None
    working_days: int
    roas: Optional[Decimal] = None

    monthly_profit_required: Optional[Decimal] = None
    monthly_orders_required: Optional[Decimal] = None
    monthly_revenue_required: Optional[Decimal] = None
    monthly_ad_spend_required: Optional[Decimal] = None

    daily_profit_required: Optional[Decimal] = None
    daily_orders_required: Optional[Decimal] = None
    daily_revenue_required: Optional[Decimal] = None
    daily_ad_spend_required: Optional[Decimal] = None

    notices: List[Notice] = []


class HistoricalProjectionRequest(ReportRequest):
    target_monthly_profit: Decimal
    window_start: Optional[date] = None
    window_end: Optional[date] = None
    as_of: Optional[date] = None
    working_days: Optional[int] = None


class HistoricalProjection(BaseModel):
    averages: HistoricalAverages
    projection: ProjectionResult
