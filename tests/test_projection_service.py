from datetime import date
from decimal import Decimal

import pytest

from profitlens.schemas import HistoricalProjectionRequest, NoticeCode, ProjectionRequest
from profitlens.services import ProjectionService


def test_required_volume():
    result = ProjectionService.project(ProjectionRequest(
        target_monthly_profit=Decimal("100000"),
        avg_profit_per_order=Decimal("250"),
        avg_revenue_per_order=Decimal("800"),
        roas=Decimal("2.5"),
        working_days=30,
    ))

    assert result.feasible
    assert result.monthly_orders_required == Decimal("400.00")
    assert result.monthly_revenue_required == Decimal("320000.00")
    assert result.monthly_ad_spend_required == Decimal("128000.00")
    assert result.daily_orders_required == Decimal("13.33")
    assert result.daily_revenue_required == Decimal("10666.67")
    assert result.daily_ad_spend_required == Decimal("4266.67")
    assert result.daily_profit_required == Decimal("3333.33")
    assert result.notices == []


@pytest.mark.parametrize("avg_profit", ["0", "-12.50"])
def test_no_feasible_projection(avg_profit):
    result = ProjectionService.project(ProjectionRequest(
        target_monthly_profit=Decimal("100000"),
        avg_profit_per_order=Decimal(avg_profit),
        avg_revenue_per_order=Decimal("800"),
        roas=Decimal("2.5"),
    ))

    assert not result.feasible
    assert result.monthly_orders_required is None
    assert result.daily_orders_required is None
    assert [n.code for n in result.notices] == [NoticeCode.NO_FEASIBLE_PROJECTION]


def test_non_positive_target_is_infeasible():
    result = ProjectionService.project(ProjectionRequest(
        target_monthly_profit=Decimal("0"), avg_profit_per_order=Decimal("250"),
    ))
    assert not result.feasible
    assert "Target" in result.reason


@pytest.mark.parametrize("roas", [None, "0", "-1"])
def test_undefined_roas_leaves_ad_spend_undefined(roas):
    result = ProjectionService.project(ProjectionRequest(
        target_monthly_profit=Decimal("1000"),
        avg_profit_per_order=Decimal("100"),
        avg_revenue_per_order=Decimal("400"),
        roas=Decimal(roas) if roas is not None else None,
    ))

    assert result.feasible
    assert result.monthly_revenue_required == Decimal("4000.00")
    assert result.monthly_ad_spend_required is None
    assert result.daily_ad_spend_required is None
    assert [n.code for n in result.notices] == [NoticeCode.ROAS_UNDEFINED]


@pytest.mark.parametrize("given,expected", [(None, 30), (0, 1), (-4, 1), (22, 22), (45, 31)])
def test_working_days_are_clamped(given, expected):
    assert ProjectionService.working_days(given) == expected


def test_default_window_respects_cutover(monkeypatch):
    from profitlens.core.config import settings

    assert ProjectionService.default_window(date(2025, 6, 30)) == date(2025, 5, 31)
    monkeypatch.setattr(settings, "PROJECTION_CUTOVER_DATE", date(2025, 6, 15))
    assert ProjectionService.default_window(date(2025, 6, 30)) == date(2025, 6, 15)


@pytest.fixture()
def history(make_order, spend):
    return {
        "orders": [
            make_order("old", "2025-04-01T06:00:00Z", "1000", delivery_status="delivered"),
            make_order("new", "2025-06-10T06:00:00Z", "500", delivery_status="delivered"),
        ],
        "ad_spend": [spend("2025-04-01", "900"), spend("2025-06-10", "250")],
    }


def test_projection_from_window(history):
    request = HistoricalProjectionRequest(
        **history, target_monthly_profit=Decimal("10000"), window_start=date(2025, 6, 1), working_days=20,
    )
    result = ProjectionService.from_history(request)

    assert result.averages.window_start == date(2025, 6, 1)
    assert result.averages.window_end == date(2025, 6, 10)
    assert result.averages.avg_pnl_per_final_order == Decimal("250.00")
    assert result.averages.roas == Decimal("2.00")

    projection = result.projection
    assert projection.working_days == 20
    assert projection.monthly_orders_required == Decimal("40.00")
    assert projection.monthly_revenue_required == Decimal("20000.00")
    assert projection.monthly_ad_spend_required == Decimal("10000.00")
    assert projection.daily_orders_required == Decimal("2.00")
    assert projection.daily_ad_spend_required == Decimal("500.00")


def test_trailing_window_from_latest_order(history):
    request = HistoricalProjectionRequest(**history, target_monthly_profit=Decimal("10000"))
    result = ProjectionService.from_history(request)

    assert result.averages.window_end == date(2025, 6, 10)
    assert result.averages.window_start == date(2025, 5, 11)
    assert result.averages.order_count == 1
    assert result.projection.working_days == 30


def test_empty_history_is_infeasible():
    request = HistoricalProjectionRequest(target_monthly_profit=Decimal("10000"), as_of=date(2025, 6, 30))
    result = ProjectionService.from_history(request)

    assert result.averages.final_orders == 0
    assert not result.projection.feasible
