def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_status(client):
    data = client.get("/api/status").json()
    assert data["status"] == "ok"
    assert data["timezone"] == "Asia/Kolkata"


def test_pnl_report_from_storefront_feed(client):
    payload = {
        "orders": [
            {
                "id": 5001,
                "name": "#PB5001S",
                "createdAt": "2025-06-01T04:30:00Z",
                "totalPrice": "100",
                "paymentMethod": "Prepaid",
                "deliveryStatus": "delivered",
                "lineItems": [{"title": "Pet Portrait", "variantTitle": "Small", "quantity": 1}],
            }
        ],
        "costFields": [
            {
                "id": "fee", "name": "Gateway fee", "type": "cogs",
                "calculationType": "percentage", "percentageType": "excluded",
                "smallPrepaidValue": 12, "smallCODValue": 12, "largePrepaidValue": 12, "largeCODValue": 12,
            }
        ],
        "adSpend": [{"date": "2025-06-01", "amount": "0"}],
    }
    response = client.post("/api/reports/pnl", json=payload)
    assert response.status_code == 200

    data = response.json()
    order = data["orders"][0]
    assert order["order_id"] == "5001"
    assert order["variant"] == "small"
    assert order["status"] == "Delivered"
    assert order["allocated_cost"] == "12.00"
    assert order["pnl"] == "88.00"
    assert data["cost_model_configured"] is True
    assert data["daily"][0]["date"] == "2025-06-01"
    assert "ROAS_UNDEFINED" in [n["code"] for n in data["notices"]]


def test_pnl_report_rejects_order_without_creation_time(client):
    response = client.post("/api/reports/pnl", json={"orders": [{"id": "1", "totalPrice": "100"}]})
    assert response.status_code == 422


def test_projection(client):
    response = client.post("/api/reports/projection", json={
        "target_monthly_profit": 100000,
        "avg_profit_per_order": 250,
        "avg_revenue_per_order": 800,
        "roas": "2.5",
        "working_days": 30,
    })
    assert response.status_code == 200

    data = response.json()
    assert data["feasible"] is True
    assert data["monthly_orders_required"] == "400.00"
    assert data["monthly_revenue_required"] == "320000.00"
    assert data["monthly_ad_spend_required"] == "128000.00"
    assert data["daily_orders_required"] == "13.33"


def test_projection_without_profit(client):
    data = client.post("/api/reports/projection", json={
        "target_monthly_profit": 100000, "avg_profit_per_order": 0,
    }).json()
    assert data["feasible"] is False
    assert data["notices"][0]["code"] == "NO_FEASIBLE_PROJECTION"


def test_projection_from_history(client):
    payload = {
        "orders": [
            {"id": "1", "createdAt": "2025-06-10T06:00:00Z", "totalPrice": "500", "deliveryStatus": "delivered"},
        ],
        "adSpend": [{"date": "2025-06-10", "amount": "250"}],
        "targetMonthlyProfit": 10000,
        "workingDays": 20,
    }
    response = client.post("/api/reports/projection/from-history", json=payload)
    assert response.status_code == 200

    data = response.json()
    assert data["averages"]["roas"] == "2.00"
    assert data["projection"]["monthly_orders_required"] == "40.00"
