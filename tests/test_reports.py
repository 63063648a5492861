from __future__ import annotations

from datetime import datetime
from decimal import Decimal


def _at(frozen_now, when):
    frozen_now["now"] = when


def test_total_earnings_covers_four_months(client, seed, frozen_now, create_affiliation):
    _at(frozen_now, datetime(2024, 3, 5, 9, 0, 0))
    create_affiliation(identification="1", affiliation={"value": 50000, "paid": "Pagado"})
    _at(frozen_now, datetime(2024, 5, 5, 9, 0, 0))
    create_affiliation(identification="1", affiliation={"value": 70000, "paid": "Pagado"})
    create_affiliation(identification="2", affiliation={"value": 30000, "paid": "Pendiente"})
    _at(frozen_now, datetime(2024, 6, 15, 10, 0, 0))
    create_affiliation(identification="1", affiliation={"value": 80000, "paid": "Pagado"})

    response = client.get(
        "/api/reports/total-earnings",
        params={"officeId": seed["office_id"], "userId": seed["operator_id"]},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert set(data) == {"currentMonth", "monthMinus1", "monthMinus2", "monthMinus3"}
    assert (data["currentMonth"]["month"], data["currentMonth"]["year"]) == (6, 2024)
    assert Decimal(data["currentMonth"]["totalEarnings"]) == Decimal("80000")
    assert Decimal(data["monthMinus1"]["totalEarnings"]) == Decimal("70000")
    assert Decimal(data["monthMinus2"]["totalEarnings"]) == Decimal("0")
    assert Decimal(data["monthMinus3"]["totalEarnings"]) == Decimal("50000")


def test_total_earnings_wraps_the_year(client, seed):
    response = client.get(
        "/api/reports/total-earnings",
        params={"officeId": seed["office_id"], "userId": seed["operator_id"], "month": 2, "year": 2024},
    )
    data = response.json()["data"]
    assert (data["monthMinus3"]["month"], data["monthMinus3"]["year"]) == (11, 2023)


def test_user_performance(client, seed, create_affiliation):
    create_affiliation(identification="1", affiliation={"value": 100000, "paid": "Pagado"})
    create_affiliation(identification="2", affiliation={"value": 300000, "paid": "Pendiente"})
    create_affiliation(identification="3", userId=seed["admin_id"], affiliation={"value": 0})
    deleted = create_affiliation(identification="4", affiliation={"value": 999999, "paid": "Pagado"})
    client.request(
        "DELETE", "/api/affiliations", json={"affiliationId": deleted["affiliationId"], "userId": seed["admin_id"]}
    )

    rows = client.get("/api/reports/user-performance", params={"month": 6, "year": 2024}).json()
    by_user = {r["username"]: r for r in rows}

    operator = by_user["operador"]
    assert operator["totalAffiliationsRegistered"] == 2
    assert Decimal(operator["totalValueBrute"]) == Decimal("400000")
    assert Decimal(operator["totalValuePaid"]) == Decimal("100000")
    assert Decimal(operator["percentagePaid"]) == Decimal("25.00")

    admin = by_user["admin"]
    assert admin["totalAffiliationsRegistered"] == 1
    assert admin["percentagePaid"] is None


def test_monthly_income_trend(client, seed, frozen_now, create_affiliation):
    _at(frozen_now, datetime(2023, 12, 5, 9, 0, 0))
    create_affiliation(identification="1", affiliation={"value": 40000, "paid": "Pagado"})
    _at(frozen_now, datetime(2024, 1, 5, 9, 0, 0))
    create_affiliation(identification="1", affiliation={"value": 60000, "paid": "Pagado"})
    create_affiliation(identification="2", affiliation={"value": 10000, "paid": "Pagado"})

    rows = client.get("/api/reports/monthly-income-trend", params={"startYear": 2023, "endYear": 2024}).json()
    assert [(r["year"], r["month"], r["monthName"]) for r in rows] == [(2023, 12, "diciembre"), (2024, 1, "enero")]
    assert Decimal(rows[1]["totalValuePaid"]) == Decimal("70000")

    bad_range = client.get("/api/reports/monthly-income-trend", params={"startYear": 2024, "endYear": 2023})
    assert bad_range.status_code == 400


def test_monthly_income_trend_keeps_months_with_only_pending_rows(client, seed, frozen_now, create_affiliation):
    _at(frozen_now, datetime(2024, 1, 5, 9, 0, 0))
    create_affiliation(identification="1", affiliation={"value": 60000, "paid": "Pagado"})
    _at(frozen_now, datetime(2024, 2, 5, 9, 0, 0))
    create_affiliation(identification="1", affiliation={"value": 60000, "paid": "Pendiente"})
    create_affiliation(identification="2", affiliation={"value": 25000, "paid": "En Proceso"})

    rows = client.get("/api/reports/monthly-income-trend", params={"startYear": 2024, "endYear": 2024}).json()
    assert [(r["month"], Decimal(r["totalValuePaid"])) for r in rows] == [
        (1, Decimal("60000")),
        (2, Decimal("0")),
    ]
