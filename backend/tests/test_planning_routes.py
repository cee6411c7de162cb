def test_accounts(client, auth_headers):
    resp = client.post(
        "/api/accounts", json={"name": "Checking", "type": "checking", "balance": 1250.75}, headers=auth_headers
    )
    assert resp.status_code == 201
    assert resp.get_json()["data"]["currency"] == "USD"

    client.post("/api/accounts", json={"name": "Amex", "type": "credit"}, headers=auth_headers)
    names = [a["name"] for a in client.get("/api/accounts", headers=auth_headers).get_json()["data"]]
    assert names == ["Amex", "Checking"]

    resp = client.post("/api/accounts", json={"name": "Vault", "type": "crypto"}, headers=auth_headers)
    assert resp.status_code == 400


def test_bills(client, auth_headers, category_id):
    resp = client.post(
        "/api/bills",
        json={"name": "Rent", "amount": 1500, "due_date": "2026-11-01", "category_id": category_id("Housing")},
        headers=auth_headers,
    )
    assert resp.status_code == 201
    assert "bill_id" in resp.get_json()["data"]

    client.post(
        "/api/bills", json={"name": "Phone", "amount": 45, "due_date": "2026-10-20"}, headers=auth_headers
    )
    bills = client.get("/api/bills", headers=auth_headers).get_json()["data"]
    assert [b["name"] for b in bills] == ["Phone", "Rent"]
    assert bills[1]["category_name"] == "Housing"
    assert bills[1]["frequency"] == "monthly"

    resp = client.post(
        "/api/bills", json={"name": "Gym", "amount": 30, "due_date": "2026-10-20", "category_id": 9999},
        headers=auth_headers,
    )
    assert resp.status_code == 400


def test_debts(client, auth_headers):
    for name, balance in (("Car", 8000), ("Visa", 2200)):
        resp = client.post(
            "/api/debts",
            json={"name": name, "type": "other", "balance": balance, "interest_rate": 19.9, "min_payment": 50},
            headers=auth_headers,
        )
        assert resp.status_code == 201

    debts = client.get("/api/debts", headers=auth_headers).get_json()["data"]
    assert [d["name"] for d in debts] == ["Car", "Visa"]

    resp = client.post(
        "/api/debts",
        json={"name": "Bad", "type": "other", "balance": 1, "interest_rate": 150, "min_payment": 1},
        headers=auth_headers,
    )
    assert resp.status_code == 400


def test_goals_ordered_by_priority(client, auth_headers):
    goals = [
        ("Trip", "vacation", "low", "2027-06-01"),
        ("Cushion", "emergency_fund", "high", "2027-12-01"),
        ("Course", "education", "medium", "2027-01-01"),
        ("House", "home_purchase", "high", "2027-03-01"),
    ]
    for name, category, priority, target_date in goals:
        resp = client.post(
            "/api/goals",
            json={
                "name": name,
                "category": category,
                "target_amount": 5000,
                "priority": priority,
                "target_date": target_date,
            },
            headers=auth_headers,
        )
        assert resp.status_code == 201
        assert "goal_id" in resp.get_json()["data"]

    listed = client.get("/api/goals", headers=auth_headers).get_json()["data"]
    assert [g["name"] for g in listed] == ["House", "Cushion", "Course", "Trip"]
    assert listed[0]["current_amount"] == 0
    assert listed[0]["achieved"] is False
