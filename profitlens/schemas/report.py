"""
P&L Report Schemas
"""
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import date
from decimal import Decimal
from enum import Enum

from .order import Order, OrderStatus, PaymentMethod, Variant
from .cost import CostField, CostFieldType, CalculationType, PercentageType
from .ad_spend import AdSpendEntry


class NoticeCode(str, Enum):
    NO_COST_MODEL = "NO_COST_MODEL"
    NO_AD_SPEND = "NO_AD_SPEND"
    AD_SPEND_WITHOUT_ORDERS = "AD_SPEND_WITHOUT_ORDERS"
    VALUE_CLAMPED = "VALUE_CLAMPED"
    NO_FINAL_ORDERS = "NO_FINAL_ORDERS"
    ROAS_UNDEFINED = "ROAS_UNDEFINED"
    BREAKEVEN_UNDEFINED = "BREAKEVEN_UNDEFINED"
    NO_FEASIBLE_PROJECTION = "NO_FEASIBLE_PROJECTION"


class Notice(BaseModel):
    """A degraded or undefined computation the UI should render distinctly."""
    code: NoticeCode
    message: str
    subject: Optional[str] = None


class DeliveryStage(str, Enum):
    DELIVERED = "delivered"
    FAILED = "failed"
    OUT_FOR_DELIVERY = "out_for_delivery"
    ATTEMPTED_DELIVERY = "attempted_delivery"
    IN_TRANSIT = "in_transit"
    CONFIRMED = "confirmed"


class ClassificationPolicy(BaseModel):
    # Status substrings that keep a prepaid order out of the delivered shortcut
    prepaid_shortcut_exclusions: List[str] = []


class ReportRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    orders: List[Order] = []
    cost_fields: List[CostField] = []
    ad_spend: List[AdSpendEntry] = []
    rto_order_ids: List[str] = []
    discarded_order_ids: List[str] = []
    policy: ClassificationPolicy = ClassificationPolicy()
    discards_affect_baseline: bool = False

    @field_validator("rto_order_ids", "discarded_order_ids", mode="before")
    @classmethod
    def _ids_to_str(cls, v):
        return [str(i) for i in (v or [])]


class CostLine(BaseModel):
    field_id: str
    name: str
    type: CostFieldType
    calculation_type: CalculationType
    percentage_type: Optional[PercentageType] = None
    value: Decimal
    contribution: Decimal


class OrderPnL(BaseModel):
    order_id: str
    name: Optional[str] = None
    store_date: date
    status: OrderStatus
    is_terminal: bool
    delivery_stage: DeliveryStage
    variant: Variant
    payment_method: PaymentMethod
    order_value: Decimal
    revenue: Decimal
    allocated_cost: Decimal
    cost_lines: List[CostLine] = []
    ad_cost: Decimal
    shipping_cost: Decimal
    pnl: Decimal
    counted: bool
    discarded: bool = False


class DailyPnL(BaseModel):
    date: date
    order_count: int = 0
    counted_orders: int = 0
    pending_orders: int = 0
    order_value: Decimal = Decimal("0")
    revenue: Decimal = Decimal("0")
    ad_spend: Decimal = Decimal("0")
    ad_cost_per_order: Decimal = Decimal("0")
    pnl: Decimal = Decimal("0")
    estimated_pnl: Decimal = Decimal("0")
    expected_ndr: int = 0
    ad_spend_only: bool = False
    complete: bool = True


class MonthlyPnL(BaseModel):
    month: str
    days: int = 0
    order_count: int = 0
    counted_orders: int = 0
    pending_orders: int = 0
    order_value: Decimal = Decimal("0")
    revenue: Decimal = Decimal("0")
    ad_spend: Decimal = Decimal("0")
    pnl: Decimal = Decimal("0")
    estimated_pnl: Decimal = Decimal("0")
    expected_ndr: int = 0


class GlobalStats(BaseModel):
    order_count: int = 0
    delivered_count: int = 0
    failed_count: int = 0
    pending_count: int = 0
    ndr_rate: Decimal = Decimal("0")
    avg_pnl_per_final_order: Optional[Decimal] = None
    avg_revenue_per_final_order: Optional[Decimal] = None
    total_order_value: Decimal = Decimal("0")
    total_revenue: Decimal = Decimal("0")
    total_ad_spend: Decimal = Decimal("0")
    total_pnl: Decimal = Decimal("0")
    roas: Optional[Decimal] = None


class BreakevenMetrics(BaseModel):
    final_orders: int = 0
    aov: Optional[Decimal] = None
    avg_allocated_cost: Optional[Decimal] = None
    avg_shipping: Optional[Decimal] = None
    avg_total_cost: Optional[Decimal] = None
    contribution_margin: Optional[Decimal] = None
    breakeven_roas: Optional[Decimal] = None


class StatusBreakdown(BaseModel):
    prepaid: int = 0
    cod: int = 0
    delivered: int = 0
    failed: int = 0
    out_for_delivery: int = 0
    attempted_delivery: int = 0
    in_transit: int = 0
    confirmed: int = 0
    cod_delivered: int = 0
    cod_failed: int = 0


class PnLReport(BaseModel):
    timezone: str
    currency_code: str
    cost_model_configured: bool
    orders: List[OrderPnL] = []
    daily: List[DailyPnL] = []
    monthly: List[MonthlyPnL] = []
    stats: GlobalStats = GlobalStats()
    breakeven: BreakevenMetrics = BreakevenMetrics()
    status_breakdown: StatusBreakdown = StatusBreakdown()
    notices: List[Notice] = []


class HistoricalAverages(BaseModel):
    window_start: Optional[date] = None
    window_end: Optional[date] = None
    order_count: int = 0
    final_orders: int = 0
    avg_pnl_per_final_order: Optional[Decimal] = None
    avg_revenue_per_final_order: Optional[Decimal] = None
    order_value: Decimal = Decimal("0")
    ad_spend: Decimal = Decimal("0")
    roas: Optional[Decimal] = None
    notices: List[Notice] = []
