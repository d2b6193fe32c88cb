import itertools

import pytest
from fastapi.testclient import TestClient

from profitlens.schemas import Order, CostField, AdSpendEntry, ReportRequest


def _all_variants(value):
    return {"small_prepaid": value, "small_cod": value, "large_prepaid": value, "large_cod": value}


@pytest.fixture()
def make_order():
    ids = itertools.count(1001)

    def _make(order_id=None, created_at="2025-06-01T04:30:00Z", total_price="100", **fields):
        data = {
            "id": order_id or str(next(ids)),
            "created_at": created_at,
            "total_price": total_price,
            "payment_method": "cod",
        }
        data.update(fields)
        return Order.model_validate(data)

    return _make


@pytest.fixture()
def make_cost_field():
    def _make(field_id="cogs", name="Printing", value=0, **fields):
        data = {"id": field_id, "name": name, "values": _all_variants(value)}
        data.update(fields)
        return CostField.model_validate(data)

    return _make


@pytest.fixture()
def cost_model(make_cost_field):
    """Printing (COGS), GST embedded in price (both) and RTO handling (NDR)."""
    return [
        make_cost_field("print", "Printing", 200, type="cogs", calculation_type="fixed"),
        make_cost_field(
            "gst", "GST", 12, type="both",
            calculation_type="percentage", percentage_type="included",
        ),
        make_cost_field("rto", "RTO handling", 50, type="ndr", calculation_type="fixed"),
    ]


@pytest.fixture()
def spend():
    def _make(day, amount):
        return AdSpendEntry.model_validate({"date": day, "amount": amount})

    return _make


@pytest.fixture()
def report_request():
    def _make(orders, **fields):
        return ReportRequest(orders=orders, **fields)

    return _make


@pytest.fixture()
def client():
    from main import app

    with TestClient(app) as c:
        yield c
