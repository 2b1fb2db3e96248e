from __future__ import annotations

from datetime import date
from decimal import Decimal

from src.models.events import ActiveStatus, CallEvent, CallOutcome, InternRecord, PaidAccountEvent
from src.models.targets import BdTargetRecord, TargetRecord


def _seed_calls(repositories) -> None:
    for day in (date(2025, 3, 1), date(2025, 3, 2), date(2025, 3, 3)):
        repositories.targets.targets.append(TargetRecord(manager_id=1, target_date=day, calls=10))

    def call(day: int, outcome: CallOutcome) -> CallEvent:
        return CallEvent(manager_id=1, event_date=date(2025, 3, day), outcome=outcome, raw_response=outcome.value)

    repositories.events.calls.extend(
        [call(1, CallOutcome.CONNECTED)] * 5 + [call(3, CallOutcome.CONNECTED)] * 3 + [call(3, CallOutcome.BUSY)] * 2
    )


def test_daily_analysis_payload(client, repositories):
    _seed_calls(repositories)
    response = client.get("/api/v1/analysis/daily?teamManagerId=1&startDate=2025-03-01&endDate=2025-03-03")
    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True

    data = payload["data"]
    assert data["month"] == "March 2025"
    assert [row["date"] for row in data["days"]] == ["2025-03-01", "2025-03-02", "2025-03-03"]
    assert [row["achievedCalls"] for row in data["days"]] == [5, 0, 5]
    assert [Decimal(row["achievementPercent"]) for row in data["days"]] == [
        Decimal("50.00"),
        Decimal("0.00"),
        Decimal("50.00"),
    ]
    assert data["totals"]["plannedCalls"] == 30
    assert Decimal(data["totals"]["achievementPercent"]) == Decimal("33.33")

    meta = payload["meta"]
    assert meta["startDate"] == "2025-03-01"
    assert meta["endDate"] == "2025-03-03"
    assert meta["timezone"] == "Asia/Kolkata"
    assert meta["asOfDate"] == "2025-03-15"


def test_legacy_parameter_names_are_accepted(client, repositories):
    _seed_calls(repositories)
    response = client.get("/api/v1/analysis/calls?managerId=1&from=2025-03-01&to=2025-03-03")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["totalCalls"] == 10
    assert data["counts"]["connected"] == 8
    assert data["remainingCalls"] == 20


def test_missing_manager_is_bad_request(client):
    response = client.get("/api/v1/analysis/daily?month=2025-03")
    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["error"]["code"] == "bad_request"


def test_unknown_manager_is_not_found(client):
    response = client.get("/api/v1/mastersheet/metrics?teamManagerId=404")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "not_found"


def test_malformed_parameters_are_validation_errors(client):
    response = client.get("/api/v1/analysis/jds?teamManagerId=1&month=03-2025")
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "validation_error"

    response = client.get("/api/v1/analysis/jds?teamManagerId=1&startDate=yesterday&endDate=2025-03-03")
    assert response.status_code == 422


def test_out_of_range_month_is_bad_request(client):
    response = client.get("/api/v1/analysis/jds?teamManagerId=1&month=2025-13")
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "month must be formatted as YYYY-MM"


def test_storage_failure_is_unexpected_error(client, repositories):
    repositories.events.fail_with = RuntimeError("connection reset")
    response = client.get("/api/v1/analysis/daily?teamManagerId=1")
    assert response.status_code == 500
    payload = response.json()
    assert payload["success"] is False
    assert payload["error"]["code"] == "unexpected_error"


def test_resume_breakdown_period_is_validated(client):
    response = client.get("/api/v1/analysis/resumes/breakdown?teamManagerId=1&period=weekly")
    assert response.status_code == 422

    response = client.get("/api/v1/analysis/resumes/breakdown?teamManagerId=1&period=monthly&month=2025-03")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["granularity"] == "monthly"
    assert [row["period"] for row in data["rows"]] == ["2025-03"]


def test_bd_targets_round_trip(client, repositories):
    response = client.post(
        "/api/v1/bd-targets",
        json={
            "managerId": 1,
            "month": "2025-03",
            "targets": [{"date": "2025-03-02", "internsAllocated": 5, "accounts": 2}],
        },
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data["days"]) == 31
    assert data["days"][1] == {
        "date": "2025-03-02",
        "day": "Sunday",
        "internsAllocated": 5,
        "internsActive": 0,
        "accounts": 2,
    }
    assert repositories.targets.upserts == [
        [{"date": date(2025, 3, 2), "interns_allocated": 5, "interns_active": None, "accounts": 2}]
    ]

    response = client.get("/api/v1/bd-targets?teamManagerId=1&month=2025-03")
    assert response.json()["data"]["totals"]["internsAllocated"] == 5


def test_bd_dashboard_payload(client, repositories):
    repositories.targets.bd_targets.append(
        BdTargetRecord(manager_id=1, target_date=date(2025, 3, 4), interns_active=4, accounts=1)
    )
    repositories.events.interns.append(
        InternRecord(manager_id=1, event_date=date(2025, 3, 4), active_status=ActiveStatus.ACTIVE,
                     business_task_amount=Decimal("499.99"))
    )
    repositories.events.paid_accounts.append(PaidAccountEvent(manager_id=1, event_date=date(2025, 3, 4), user_id="7"))

    response = client.get("/api/v1/bd-dashboard?teamManagerId=1")
    assert response.status_code == 200
    row = response.json()["data"]["days"][3]
    assert row["targetInternsActive"] == 4
    assert row["internsActive"] == 1
    assert Decimal(row["activationPercent"]) == Decimal("25.00")
    assert Decimal(row["accountsPercent"]) == Decimal("100.00")
    assert Decimal(row["businessTaskAmount"]) == Decimal("499.99")


def test_leaderboard_payload(client, repositories):
    repositories.events.interns.append(
        InternRecord(manager_id=3, event_date=date(2025, 3, 4), active_status=ActiveStatus.ACTIVE)
    )
    response = client.get("/api/v1/leaderboard?month=2025-03")
    assert response.status_code == 200
    rankings = response.json()["data"]["rankings"]
    assert rankings[0]["name"] == "Meera"
    assert rankings[0]["rank"] == 1
    assert [row["rank"] for row in rankings] == [1, 2, 3]
