from datetime import date

from conftest import register


def _create_budget(client, headers, category_id, amount, **extra):
    payload = {"category_id": category_id, "amount": amount, "start_date": "2026-10-01"}
    payload.update(extra)
    return client.post("/api/budgets", json=payload, headers=headers)


def test_requires_token(client):
    resp = client.get("/api/budgets")
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "Access token required"


def test_create_budget_defaults(client, auth_headers, category_id):
    resp = _create_budget(client, auth_headers, category_id("Food & Dining"), 600)
    assert resp.status_code == 201
    budget = resp.get_json()["data"]
    assert budget["name"] == "Food & Dining Monthly Budget"
    assert budget["period"] == "monthly"
    assert budget["alert_threshold"] == 80
    assert budget["is_active"] is True


def test_create_budget_validation(client, auth_headers, category_id):
    resp = _create_budget(client, auth_headers, category_id("Housing"), 0)
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"] == "Validation failed"
    assert body["details"][0]["field"] == "amount"

    resp = _create_budget(client, auth_headers, category_id("Housing"), 100, end_date="2026-09-01")
    assert resp.status_code == 400

    resp = _create_budget(client, auth_headers, 9999, 100)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Category not found"


def test_duplicate_active_budget_rejected(client, auth_headers, category_id):
    cid = category_id("Travel")
    first = _create_budget(client, auth_headers, cid, 300).get_json()["data"]
    resp = _create_budget(client, auth_headers, cid, 400)
    assert resp.status_code == 400
    assert resp.get_json()["existing_budget"]["id"] == first["id"]

    # a different period is allowed
    assert _create_budget(client, auth_headers, cid, 80, period="weekly").status_code == 201


def test_list_derives_status_from_recent_spend(client, auth_headers, category_id, add_expense):
    food = category_id("Food & Dining")
    shopping = category_id("Shopping")
    _create_budget(client, auth_headers, food, 600)
    _create_budget(client, auth_headers, shopping, 150, end_date="2026-10-25")

    add_expense(food, 485.50, date(2026, 10, 10))
    add_expense(food, 999, date(2026, 8, 1))  # outside the 30-day window
    add_expense(shopping, 285.60, date(2026, 10, 3))
    add_expense(shopping, 50, date(2026, 10, 4), ttype="income")

    resp = client.get("/api/budgets", headers=auth_headers)
    assert resp.status_code == 200
    rows = {r["category"]: r for r in resp.get_json()["data"]}

    assert rows["Food & Dining"]["spent"] == 485.5
    assert rows["Food & Dining"]["percentage_used"] == 80.92
    assert rows["Food & Dining"]["status"] == "warning"
    assert rows["Food & Dining"]["days_remaining"] is None
    assert rows["Food & Dining"]["transaction_count"] == 1

    assert rows["Shopping"]["status"] == "over_budget"
    assert rows["Shopping"]["remaining"] == 0
    assert rows["Shopping"]["percentage_used"] == 190.4
    assert rows["Shopping"]["days_remaining"] == 10


def test_analysis_health_score_and_trend(client, auth_headers, category_id, add_expense):
    food = category_id("Food & Dining")
    shopping = category_id("Shopping")
    _create_budget(client, auth_headers, food, 600)
    _create_budget(client, auth_headers, shopping, 150)
    add_expense(food, 485.50, date(2026, 10, 10))
    add_expense(shopping, 285.60, date(2026, 10, 3))
    add_expense(shopping, 40, date(2026, 8, 20))

    resp = client.get("/api/budgets/analysis", headers=auth_headers)
    assert resp.status_code == 200
    data = resp.get_json()["data"]

    current = data["current_period"]
    assert current["over_budget_count"] == 1
    assert current["warning_count"] == 1
    assert current["health_score"] == 70
    assert current["total_budgeted"] == 750

    trend = data["monthly_trend"]
    assert [t["month"] for t in trend] == ["2026-08", "2026-10"]
    assert trend[-1]["spent"] == 771.1
    assert trend[-1]["transactions"] == 2


def test_recommendations(client, auth_headers, category_id, add_expense):
    shopping = category_id("Shopping")
    travel = category_id("Travel")
    for month, amount in ((8, 195.50), (9, 180), (10, 210)):
        add_expense(shopping, amount, date(2026, month, 5))
    add_expense(travel, 100, date(2026, 9, 1))
    add_expense(travel, 140, date(2026, 10, 1))

    resp = client.get("/api/budgets/recommendations", headers=auth_headers)
    assert resp.status_code == 200
    data = resp.get_json()["data"]

    recs = {r["category"]: r for r in data["recommendations"]}
    assert recs["Shopping"]["recommendation_type"] == "create"
    assert recs["Shopping"]["confidence"] == "high"
    assert recs["Shopping"]["recommended_amount"] == 225
    assert recs["Travel"]["confidence"] == "medium"
    assert recs["Travel"]["recommended_amount"] == 150
    assert [r["category"] for r in data["recommendations"]] == ["Shopping", "Travel"]
    assert data["summary"]["create_new"] == 2


def test_recommendations_ignore_other_users(client, auth_headers, category_id, add_expense):
    add_expense(category_id("Housing"), 1200, date(2026, 10, 1))
    _, other_headers = register(client, email="other@example.com")

    resp = client.get("/api/budgets/recommendations", headers=other_headers)
    assert resp.get_json()["data"]["recommendations"] == []


def test_templates_and_apply(client, auth_headers, category_id):
    resp = client.get("/api/budgets/templates", headers=auth_headers)
    ids = [t["id"] for t in resp.get_json()["data"]]
    assert ids == ["basic-budget", "50-30-20-budget", "zero-based-budget", "student-budget"]

    _create_budget(client, auth_headers, category_id("Housing"), 900)

    resp = client.post(
        "/api/budgets/apply-template",
        json={"template_id": "basic-budget", "total_budget": 1000},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    created = resp.get_json()["data"]["created_budgets"]
    names = [c["category"] for c in created]
    # Housing already budgeted, "Savings" is not a category
    assert "Housing" not in names
    assert "Savings" not in names
    food = next(c for c in created if c["category"] == "Food & Dining")
    assert food["amount"] == 150


def test_apply_unknown_template(client, auth_headers):
    resp = client.post(
        "/api/budgets/apply-template",
        json={"template_id": "nope", "total_budget": 1000},
        headers=auth_headers,
    )
    assert resp.status_code == 404


def test_apply_template_requires_positive_total(client, auth_headers):
    resp = client.post(
        "/api/budgets/apply-template",
        json={"template_id": "basic-budget", "total_budget": 0},
        headers=auth_headers,
    )
    assert resp.status_code == 400


def test_budget_categories(client, auth_headers, category_id, add_expense):
    _create_budget(client, auth_headers, category_id("Healthcare"), 100)
    add_expense(category_id("Education"), 300, date(2026, 10, 2))

    resp = client.get("/api/budgets/categories", headers=auth_headers)
    rows = resp.get_json()["data"]
    assert rows[0]["name"] == "Healthcare"
    assert rows[0]["has_budget"] is True
    assert rows[1]["name"] == "Education"
    assert rows[1]["avg_monthly_spending"] == 300
    assert rows[1]["recent_transactions"] == 1
    assert all(r["type"] in ("expense", "both") for r in rows)


def test_performance(client, auth_headers, category_id, add_expense):
    food = category_id("Food & Dining")
    budget = _create_budget(client, auth_headers, food, 200, end_date="2026-10-31").get_json()["data"]
    add_expense(food, 50, date(2026, 10, 2))
    add_expense(food, 70, date(2026, 10, 2))
    add_expense(food, 40, date(2026, 10, 9))
    add_expense(food, 500, date(2026, 9, 20))  # before start_date

    resp = client.get(f"/api/budgets/{budget['id']}/performance", headers=auth_headers)
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    perf = data["performance"]
    assert perf["total_spent"] == 160
    assert perf["transaction_count"] == 3
    assert perf["avg_transaction"] == 53.33
    assert perf["status"] == "warning"
    assert perf["days_remaining"] == 16
    assert data["daily_breakdown"][0] == {"date": "2026-10-09", "spent": 40, "transactions": 1}
    assert data["daily_breakdown"][1]["spent"] == 120


def test_update_and_soft_delete(client, auth_headers, category_id):
    budget = _create_budget(client, auth_headers, category_id("Insurance"), 100).get_json()["data"]

    resp = client.put(f"/api/budgets/{budget['id']}", json={"amount": 250, "notes": "raised"}, headers=auth_headers)
    assert resp.status_code == 200
    updated = resp.get_json()["data"]
    assert updated["amount"] == 250
    assert updated["notes"] == "raised"
    assert updated["name"] == budget["name"]

    resp = client.put(f"/api/budgets/{budget['id']}", json={"end_date": "2026-01-01"}, headers=auth_headers)
    assert resp.status_code == 400

    resp = client.delete(f"/api/budgets/{budget['id']}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["id"] == budget["id"]

    active = client.get("/api/budgets?active=true", headers=auth_headers).get_json()["data"]
    assert active == []
    inactive = client.get("/api/budgets?active=false", headers=auth_headers).get_json()["data"]
    assert [b["id"] for b in inactive] == [budget["id"]]


def test_other_users_budget_is_not_found(client, auth_headers, category_id):
    budget = _create_budget(client, auth_headers, category_id("Insurance"), 100).get_json()["data"]
    _, other_headers = register(client, email="other@example.com")

    assert client.get(f"/api/budgets/{budget['id']}", headers=other_headers).status_code == 404
    assert client.put(f"/api/budgets/{budget['id']}", json={"amount": 1}, headers=other_headers).status_code == 404
    assert client.delete(f"/api/budgets/{budget['id']}", headers=other_headers).status_code == 404


def test_invalid_period_filter(client, auth_headers):
    resp = client.get("/api/budgets?period=daily", headers=auth_headers)
    assert resp.status_code == 400


def test_apply_template_accepts_camel_case_fields(client, auth_headers):
    resp = client.post(
        "/api/budgets/apply-template",
        json={"templateId": "student-budget", "totalBudget": 2000},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["template"] == "student-budget"
    housing = next(c for c in data["created_budgets"] if c["category"] == "Housing")
    assert housing["amount"] == 800


def test_update_cannot_create_duplicate_active_budget(client, auth_headers, category_id):
    travel = category_id("Travel")
    monthly = _create_budget(client, auth_headers, travel, 300).get_json()["data"]
    weekly = _create_budget(client, auth_headers, travel, 80, period="weekly").get_json()["data"]

    resp = client.put(f"/api/budgets/{weekly['id']}", json={"period": "monthly"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.get_json()["existing_budget"]["id"] == monthly["id"]
    assert client.get(f"/api/budgets/{weekly['id']}", headers=auth_headers).get_json()["data"]["period"] == "weekly"

    other = _create_budget(client, auth_headers, category_id("Education"), 50).get_json()["data"]
    resp = client.put(f"/api/budgets/{other['id']}", json={"category_id": travel}, headers=auth_headers)
    assert resp.status_code == 400

    # reactivating is blocked while another active budget covers the slot
    client.delete(f"/api/budgets/{weekly['id']}", headers=auth_headers)
    _create_budget(client, auth_headers, travel, 90, period="weekly")
    resp = client.put(f"/api/budgets/{weekly['id']}", json={"is_active": True}, headers=auth_headers)
    assert resp.status_code == 400

    # updating a budget in place is not a duplicate of itself
    resp = client.put(f"/api/budgets/{monthly['id']}", json={"amount": 350}, headers=auth_headers)
    assert resp.status_code == 200
