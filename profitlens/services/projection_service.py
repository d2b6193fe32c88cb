"""
Projection Service - What it takes to reach a monthly profit target
"""
import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

from profitlens.core import settings
from profitlens.core.dates import resolve_timezone
from profitlens.core.money import ZERO, quantize
from profitlens.schemas.report import Notice, NoticeCode
from profitlens.schemas.projection import (
    ProjectionRequest, ProjectionResult, HistoricalProjectionRequest, HistoricalProjection,
)
from profitlens.services.pnl_service import PnLService

logger = logging.getLogger(__name__)

MIN_WORKING_DAYS = 1
MAX_WORKING_DAYS = 31


class ProjectionService:

    @staticmethod
    def working_days(value: Optional[int] = None) -> int:
        days = value if value is not None else settings.WORKING_DAYS_PER_MONTH
        return max(MIN_WORKING_DAYS, min(MAX_WORKING_DAYS, int(days)))

    @staticmethod
    def project(request: ProjectionRequest) -> ProjectionResult:
        """
        Invert per-order averages into required monthly and daily volume.

        orders = target / avg profit, revenue = orders x avg revenue,
        ad spend = revenue / ROAS, daily = monthly / working days.
        Intermediates stay unrounded; outputs are rounded to 2 places.
        """
        days = ProjectionService.working_days(request.working_days)
        target = request.target_monthly_profit

        if target <= 0 or request.avg_profit_per_order <= 0:
            reason = (
                "Target profit must be positive"
                if target <= 0 else
                "Average profit per order is not positive; no order volume reaches the target"
            )
            logger.info(f"No feasible projection: {reason}")
            return ProjectionResult(
                feasible=False,
                reason=reason,
                working_days=days,
                roas=request.roas,
                notices=[Notice(code=NoticeCode.NO_FEASIBLE_PROJECTION, message=reason)],
            )

        notices = []
        orders = target / request.avg_profit_per_order
        revenue = orders * request.avg_revenue_per_order

        ad_spend: Optional[Decimal] = None
        if request.roas is not None and request.roas > 0:
            ad_spend = revenue / request.roas
        else:
            notices.append(Notice(
                code=NoticeCode.ROAS_UNDEFINED,
                message="ROAS is missing or not positive; ad spend requirement undefined",
            ))

        n = Decimal(days)
        return ProjectionResult(
            feasible=True,
            working_days=days,
            roas=request.roas,
            monthly_profit_required=quantize(target),
            monthly_orders_required=quantize(orders),
            monthly_revenue_required=quantize(revenue),
            monthly_ad_spend_required=quantize(ad_spend) if ad_spend is not None else None,
            daily_profit_required=quantize(target / n),
            daily_orders_required=quantize(orders / n),
            daily_revenue_required=quantize(revenue / n),
            daily_ad_spend_required=quantize(ad_spend / n) if ad_spend is not None else None,
            notices=notices,
        )

    @staticmethod
    def default_window(as_of: date) -> date:
        """Trailing window start, never earlier than the configured cutover date."""
        start = as_of - timedelta(days=settings.PROJECTION_WINDOW_DAYS)
        cutover = settings.PROJECTION_CUTOVER_DATE
        if cutover and cutover > start:
            return cutover
        return start

    @staticmethod
    def from_history(request: HistoricalProjectionRequest, tz_name: Optional[str] = None) -> HistoricalProjection:
        tz_name = tz_name or settings.STORE_TIMEZONE
        as_of = (
            request.as_of
            or PnLService.latest_order_date(request, tz_name)
            or datetime.now(resolve_timezone(tz_name)).date()
        )
        window_end = request.window_end or as_of
        window_start = request.window_start or ProjectionService.default_window(as_of)

        averages = PnLService.historical_averages(request, window_start, window_end, tz_name)
        logger.info(
            f"Projection window {window_start} .. {window_end}: "
            f"{averages.final_orders} final orders, ROAS {averages.roas}"
        )

        projection = ProjectionService.project(ProjectionRequest(
            target_monthly_profit=request.target_monthly_profit,
            avg_profit_per_order=averages.avg_pnl_per_final_order or ZERO,
            avg_revenue_per_order=averages.avg_revenue_per_final_order or ZERO,
            roas=averages.roas,
            working_days=request.working_days,
        ))
        return HistoricalProjection(averages=averages, projection=projection)
