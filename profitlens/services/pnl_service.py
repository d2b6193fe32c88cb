"""
P&L Service - Per-order profit and daily / monthly aggregates

Two phases: every order is classified and costed first, then ad spend is
amortized once over the store-local day index and the per-day rows are
built. Nothing here touches I/O; the same request always yields the same
report.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional

from profitlens.core import settings
from profitlens.core.dates import resolve_timezone, store_date, ensure_utc, month_key
from profitlens.core.money import ZERO, HUNDRED, quantize
from profitlens.schemas.order import Order, OrderStatus, PaymentMethod, Variant
from profitlens.schemas.report import (
    ReportRequest, PnLReport, OrderPnL, DailyPnL, MonthlyPnL, GlobalStats,
    BreakevenMetrics, StatusBreakdown, HistoricalAverages, Notice, NoticeCode,
)
from profitlens.services.variant_service import VariantService
from profitlens.services.status_service import StatusService, Classification
from profitlens.services.cost_service import CostService, Allocation
from profitlens.services.ad_spend_service import AdSpendService, AdSpendAllocation

logger = logging.getLogger(__name__)


@dataclass
class OrderRow:
    order: Order
    day: date
    created_utc: datetime
    classification: Classification
    variant: Variant
    allocation: Allocation
    shipping: Decimal
    discarded: bool
    ad_cost: Decimal = ZERO
    pnl: Decimal = ZERO

    @property
    def status(self) -> OrderStatus:
        return self.classification.status

    @property
    def is_final(self) -> bool:
        return self.status in (OrderStatus.DELIVERED, OrderStatus.FAILED)

    @property
    def counted(self) -> bool:
        return PnLService.is_counted(self.status, self.order.payment_method)


@dataclass
class FinalOrderAverages:
    delivered: int = 0
    failed: int = 0
    avg_pnl: Optional[Decimal] = None
    avg_revenue: Optional[Decimal] = None

    @property
    def final(self) -> int:
        return self.delivered + self.failed


class PnLService:

    # ===================== PER ORDER =====================

    @staticmethod
    def is_counted(status: OrderStatus, payment_method: PaymentMethod) -> bool:
        """Delivered and failed orders are realized; prepaid money is realized even while pending."""
        return status != OrderStatus.PENDING or payment_method == PaymentMethod.PREPAID

    @staticmethod
    def shipping_cost(order: Order, status: OrderStatus) -> Decimal:
        """
        Courier cost for one order.

        COD freight is charged then reversed on a failed COD shipment, so it
        is left out in that case. Without a breakdown the flat charge is used.
        """
        breakdown = order.shipping_breakdown
        if breakdown is None:
            return quantize(order.shipping_charge or ZERO)

        total = breakdown.total
        if status == OrderStatus.FAILED and order.payment_method == PaymentMethod.COD:
            total -= breakdown.freight_cod
        return quantize(total)

    @staticmethod
    def evaluate_orders(request: ReportRequest, tz_name: Optional[str] = None) -> List[OrderRow]:
        """Classify, detect variant and cost every non-cancelled order."""
        rto_ids = set(request.rto_order_ids)
        discarded_ids = set(request.discarded_order_ids)

        rows = []
        for order in request.orders:
            if order.is_cancelled:
                continue
            classification = StatusService.classify(order, rto_ids, request.policy)
            variant = VariantService.detect_variant(order.line_items)
            allocation = CostService.allocate(order, classification.status, variant, request.cost_fields)
            rows.append(OrderRow(
                order=order,
                day=store_date(order.created_at, tz_name),
                created_utc=ensure_utc(order.created_at),
                classification=classification,
                variant=variant,
                allocation=allocation,
                shipping=PnLService.shipping_cost(order, classification.status),
                discarded=order.id in discarded_ids,
            ))

        rows.sort(key=lambda r: (r.day, r.created_utc, r.order.id))
        return rows

    @staticmethod
    def apply_ad_costs(rows: List[OrderRow], ad_spend: AdSpendAllocation) -> None:
        for row in rows:
            row.ad_cost = ad_spend.cost_for(row.day)
            row.pnl = quantize(row.allocation.revenue - row.allocation.total - row.ad_cost - row.shipping)

    @staticmethod
    def baseline(rows: List[OrderRow], discards_affect_baseline: bool) -> List[OrderRow]:
        if discards_affect_baseline:
            return [r for r in rows if not r.discarded]
        return list(rows)

    # ===================== GLOBAL =====================

    @staticmethod
    def final_order_averages(rows: List[OrderRow]) -> FinalOrderAverages:
        finals = [r for r in rows if r.is_final]
        result = FinalOrderAverages(
            delivered=sum(1 for r in finals if r.status == OrderStatus.DELIVERED),
            failed=sum(1 for r in finals if r.status == OrderStatus.FAILED),
        )
        if finals:
            result.avg_pnl = sum((r.pnl for r in finals), ZERO) / len(finals)
            result.avg_revenue = sum((r.allocation.revenue for r in finals), ZERO) / len(finals)
        return result

    @staticmethod
    def ndr_rate(delivered: int, failed: int) -> Decimal:
        final = delivered + failed
        if final == 0:
            return ZERO
        return quantize(Decimal(failed) * HUNDRED / Decimal(final))

    @staticmethod
    def expected_ndr(pending: int, averages: FinalOrderAverages) -> int:
        """ceil(pending x failed / final) without going through a rounded rate."""
        if averages.final == 0 or pending == 0:
            return 0
        return -((-pending * averages.failed) // averages.final)

    @staticmethod
    def roas(order_value: Decimal, ad_spend: Decimal) -> Optional[Decimal]:
        if ad_spend <= 0:
            return None
        return quantize(order_value / ad_spend)

    @staticmethod
    def _optional(value: Optional[Decimal]) -> Optional[Decimal]:
        return quantize(value) if value is not None else None

    @staticmethod
    def build_stats(
        baseline: List[OrderRow],
        averages: FinalOrderAverages,
        ad_spend: AdSpendAllocation,
        daily: List[DailyPnL],
    ) -> GlobalStats:
        total_order_value = sum((r.order.total_price for r in baseline), ZERO)
        total_spend = ad_spend.total_spend
        return GlobalStats(
            order_count=len(baseline),
            delivered_count=averages.delivered,
            failed_count=averages.failed,
            pending_count=sum(1 for r in baseline if r.status == OrderStatus.PENDING),
            ndr_rate=PnLService.ndr_rate(averages.delivered, averages.failed),
            avg_pnl_per_final_order=PnLService._optional(averages.avg_pnl),
            avg_revenue_per_final_order=PnLService._optional(averages.avg_revenue),
            total_order_value=quantize(total_order_value),
            total_revenue=quantize(sum((r.allocation.revenue for r in baseline), ZERO)),
            total_ad_spend=quantize(total_spend),
            total_pnl=quantize(sum((d.pnl for d in daily), ZERO)),
            roas=PnLService.roas(total_order_value, total_spend),
        )

    @staticmethod
    def build_breakeven(baseline: List[OrderRow]) -> BreakevenMetrics:
        """Unit economics of a final-status order and the ROAS needed to break even."""
        finals = [r for r in baseline if r.is_final]
        if not finals:
            return BreakevenMetrics()

        n = Decimal(len(finals))
        aov = sum((r.allocation.revenue for r in finals), ZERO) / n
        avg_cost = sum((r.allocation.total for r in finals), ZERO) / n
        avg_shipping = sum((r.shipping for r in finals), ZERO) / n
        avg_total = avg_cost + avg_shipping
        margin = aov - avg_total

        return BreakevenMetrics(
            final_orders=len(finals),
            aov=quantize(aov),
            avg_allocated_cost=quantize(avg_cost),
            avg_shipping=quantize(avg_shipping),
            avg_total_cost=quantize(avg_total),
            contribution_margin=quantize(margin),
            breakeven_roas=quantize(aov / margin) if margin > 0 else None,
        )

    @staticmethod
    def build_status_breakdown(rows: List[OrderRow]) -> StatusBreakdown:
        counts: Dict[str, int] = defaultdict(int)
        for row in rows:
            is_cod = row.order.payment_method == PaymentMethod.COD
            counts["cod" if is_cod else "prepaid"] += 1
            counts[row.classification.delivery_stage.value] += 1
            if is_cod and row.status == OrderStatus.DELIVERED:
                counts["cod_delivered"] += 1
            elif is_cod and row.status == OrderStatus.FAILED:
                counts["cod_failed"] += 1
        return StatusBreakdown(**counts)

    # ===================== DAILY / MONTHLY =====================

    @staticmethod
    def build_daily(
        rows: List[OrderRow],
        ad_spend: AdSpendAllocation,
        averages: FinalOrderAverages,
    ) -> List[DailyPnL]:
        by_day: Dict[date, List[OrderRow]] = defaultdict(list)
        for row in rows:
            by_day[row.day].append(row)

        pure_loss = set(ad_spend.unallocated_dates)
        days = sorted(set(by_day) | set(ad_spend.spend_by_date))

        daily = []
        for day in days:
            day_rows = by_day.get(day, [])
            counted = [r for r in day_rows if r.counted]
            pending = sum(1 for r in day_rows if r.status == OrderStatus.PENDING)
            spend = ad_spend.spend_by_date.get(day, ZERO)

            pnl = sum((r.pnl for r in counted), ZERO)
            if day in pure_loss:
                pnl -= spend

            estimated = pnl
            if averages.avg_pnl is not None:
                estimated += pending * averages.avg_pnl

            daily.append(DailyPnL(
                date=day,
                order_count=len(day_rows),
                counted_orders=len(counted),
                pending_orders=pending,
                order_value=quantize(sum((r.order.total_price for r in day_rows), ZERO)),
                revenue=quantize(sum((r.allocation.revenue for r in day_rows), ZERO)),
                ad_spend=quantize(spend),
                ad_cost_per_order=ad_spend.cost_for(day),
                pnl=quantize(pnl),
                estimated_pnl=quantize(estimated),
                expected_ndr=PnLService.expected_ndr(pending, averages),
                ad_spend_only=day in pure_loss,
                complete=all(r.classification.is_terminal for r in day_rows),
            ))
        return daily

    @staticmethod
    def build_monthly(daily: List[DailyPnL]) -> List[MonthlyPnL]:
        months: Dict[str, MonthlyPnL] = {}
        for day in daily:
            key = month_key(day.date)
            month = months.get(key)
            if month is None:
                month = months[key] = MonthlyPnL(month=key)
            month.days += 1
            month.order_count += day.order_count
            month.counted_orders += day.counted_orders
            month.pending_orders += day.pending_orders
            month.order_value += day.order_value
            month.revenue += day.revenue
            month.ad_spend += day.ad_spend
            month.pnl += day.pnl
            month.estimated_pnl += day.estimated_pnl
            month.expected_ndr += day.expected_ndr
        return [months[k] for k in sorted(months)]

    # ===================== NOTICES =====================

    @staticmethod
    def clamp_notices(request: ReportRequest) -> List[Notice]:
        notices = []
        for order in request.orders:
            fields = list(order.clamped_fields)
            if order.shipping_breakdown is not None:
                fields += [f"shipping_breakdown.{f}" for f in order.shipping_breakdown.clamped_fields]
            for name in fields:
                notices.append(Notice(
                    code=NoticeCode.VALUE_CLAMPED,
                    message=f"Order {order.id}: malformed {name} treated as 0",
                    subject=order.id,
                ))
        for cost_field in request.cost_fields:
            for name in cost_field.clamped_fields:
                notices.append(Notice(
                    code=NoticeCode.VALUE_CLAMPED,
                    message=f"Cost field {cost_field.name}: malformed {name} treated as 0",
                    subject=cost_field.id,
                ))
        for entry in request.ad_spend:
            for name in entry.clamped_fields:
                notices.append(Notice(
                    code=NoticeCode.VALUE_CLAMPED,
                    message=f"Ad spend on {entry.spend_date.isoformat()}: malformed {name} treated as 0",
                    subject=entry.spend_date.isoformat(),
                ))
        return notices

    # ===================== REPORT =====================

    @staticmethod
    def build_report(request: ReportRequest, tz_name: Optional[str] = None) -> PnLReport:
        tz_name = tz_name or settings.STORE_TIMEZONE
        resolve_timezone(tz_name)

        notices = PnLService.clamp_notices(request)
        if not request.cost_fields:
            notices.append(Notice(
                code=NoticeCode.NO_COST_MODEL,
                message="No cost fields configured; allocated cost is 0 for every order",
            ))
        if not request.ad_spend:
            notices.append(Notice(code=NoticeCode.NO_AD_SPEND, message="No ad spend records supplied"))

        # Phase 1: per order
        rows = PnLService.evaluate_orders(request, tz_name)
        baseline = PnLService.baseline(rows, request.discards_affect_baseline)

        # Phase 2: per date
        ad_spend = AdSpendService.amortize(request.ad_spend, [r.day for r in baseline], tz_name)
        PnLService.apply_ad_costs(rows, ad_spend)
        for day in ad_spend.unallocated_dates:
            notices.append(Notice(
                code=NoticeCode.AD_SPEND_WITHOUT_ORDERS,
                message=f"Ad spend of {quantize(ad_spend.spend_by_date[day])} on a day without orders",
                subject=day.isoformat(),
            ))

        averages = PnLService.final_order_averages(baseline)
        if averages.final == 0:
            notices.append(Notice(
                code=NoticeCode.NO_FINAL_ORDERS,
                message="No delivered or failed orders; NDR rate reported as 0 and averages undefined",
            ))

        sales_rows = [r for r in rows if not r.discarded]
        daily = PnLService.build_daily(sales_rows, ad_spend, averages)
        stats = PnLService.build_stats(baseline, averages, ad_spend, daily)
        if stats.roas is None:
            notices.append(Notice(code=NoticeCode.ROAS_UNDEFINED, message="ROAS undefined without ad spend"))

        breakeven = PnLService.build_breakeven(baseline)
        if breakeven.breakeven_roas is None:
            notices.append(Notice(
                code=NoticeCode.BREAKEVEN_UNDEFINED,
                message="Breakeven ROAS undefined: no final orders or non-positive contribution margin",
            ))

        logger.info(
            f"P&L report: {len(rows)} orders ({len(rows) - len(sales_rows)} discarded), "
            f"{len(daily)} days, {len(notices)} notices"
        )
        for notice in notices:
            if notice.code != NoticeCode.NO_AD_SPEND:
                logger.warning(f"{notice.code.value}: {notice.message}")

        return PnLReport(
            timezone=tz_name,
            currency_code=settings.CURRENCY_CODE,
            cost_model_configured=bool(request.cost_fields),
            orders=[PnLService.to_order_pnl(r) for r in rows],
            daily=daily,
            monthly=PnLService.build_monthly(daily),
            stats=stats,
            breakeven=breakeven,
            status_breakdown=PnLService.build_status_breakdown(sales_rows),
            notices=notices,
        )

    @staticmethod
    def to_order_pnl(row: OrderRow) -> OrderPnL:
        return OrderPnL(
            order_id=row.order.id,
            name=row.order.name,
            store_date=row.day,
            status=row.status,
            is_terminal=row.classification.is_terminal,
            delivery_stage=row.classification.delivery_stage,
            variant=row.variant,
            payment_method=row.order.payment_method,
            order_value=row.order.total_price,
            revenue=row.allocation.revenue,
            allocated_cost=row.allocation.total,
            cost_lines=row.allocation.lines,
            ad_cost=row.ad_cost,
            shipping_cost=row.shipping,
            pnl=row.pnl,
            counted=row.counted,
            discarded=row.discarded,
        )

    # ===================== HISTORY =====================

    @staticmethod
    def historical_averages(
        request: ReportRequest,
        window_start: Optional[date] = None,
        window_end: Optional[date] = None,
        tz_name: Optional[str] = None,
    ) -> HistoricalAverages:
        """
        Per-final-order averages and ROAS restricted to a store-local window.

        Both bounds are inclusive; either may be omitted.
        """
        tz_name = tz_name or settings.STORE_TIMEZONE

        def in_window(day: date) -> bool:
            if window_start and day < window_start:
                return False
            if window_end and day > window_end:
                return False
            return True

        rows = PnLService.evaluate_orders(request, tz_name)
        baseline = [r for r in PnLService.baseline(rows, request.discards_affect_baseline) if in_window(r.day)]
        entries = [e for e in request.ad_spend if in_window(e.store_day(tz_name))]

        ad_spend = AdSpendService.amortize(entries, [r.day for r in baseline], tz_name)
        PnLService.apply_ad_costs(baseline, ad_spend)
        averages = PnLService.final_order_averages(baseline)

        order_value = sum((r.order.total_price for r in baseline), ZERO)
        spend = ad_spend.total_spend
        roas = PnLService.roas(order_value, spend)

        notices = []
        if averages.final == 0:
            notices.append(Notice(
                code=NoticeCode.NO_FINAL_ORDERS,
                message="No delivered or failed orders in the window",
            ))
        if roas is None:
            notices.append(Notice(code=NoticeCode.ROAS_UNDEFINED, message="No ad spend in the window"))

        return HistoricalAverages(
            window_start=window_start,
            window_end=window_end,
            order_count=len(baseline),
            final_orders=averages.final,
            avg_pnl_per_final_order=PnLService._optional(averages.avg_pnl),
            avg_revenue_per_final_order=PnLService._optional(averages.avg_revenue),
            order_value=quantize(order_value),
            ad_spend=quantize(spend),
            roas=roas,
            notices=notices,
        )

    @staticmethod
    def latest_order_date(request: ReportRequest, tz_name: Optional[str] = None) -> Optional[date]:
        days = [store_date(o.created_at, tz_name) for o in request.orders if not o.is_cancelled]
        return max(days) if days else None

