"""Integration tests for API endpoints"""

import httpx
import pytest
from datetime import date
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from murabaha_gateway.api.dependencies import get_horizon_client, get_notary_client
from murabaha_gateway.domain.exceptions import NotarizationError
from murabaha_gateway.domain.models import NotarizationReceipt
from murabaha_gateway.infrastructure.clients.horizon import HorizonClient
from murabaha_gateway.utils.date_utils import add_months

pytestmark = pytest.mark.integration

@pytest.fixture
def client_id(client: TestClient) -> int:
    """Registered client for contract tests"""
    response = client.post("/api/clients", json={"name": "Omar Haddad", "email": "omar@example.com"})
    return response.json()["id"]

@pytest.fixture
def contract(client: TestClient, client_id: int, deal_payload: dict) -> dict:
    response = client.post("/api/contracts", json={**deal_payload, "client_id": client_id, "asset_name": "Delivery Van"})
    assert response.status_code == 201
    return response.json()

def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "X-Request-ID" in response.headers

def test_metrics_endpoint(client: TestClient, deal_payload: dict):
    """Test Prometheus metrics endpoint"""
    client.post("/api/calculate", json=deal_payload)

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "murabaha_calculation_total" in response.text

def test_calculate_scenario_a(client: TestClient, deal_payload: dict):
    """Test POST /api/calculate returns summary and schedule"""
    response = client.post("/api/calculate", json=deal_payload)

    assert response.status_code == 200
    data = response.json()
    summary = data["summary"]
    assert summary["down_payment"] == 20000
    assert summary["financed_amount"] == 80000
    assert summary["total_profit"] == 4000
    assert summary["total_cost"] == 84000
    assert summary["monthly_installment"] == 7000

    schedule = data["schedule"]
    assert len(schedule) == 12
    assert schedule[0]["beginning_balance"] == 84000
    assert schedule[0]["due_date"] == add_months(date.today(), 1).isoformat()
    assert schedule[-1]["remaining_balance"] == 0
    assert sum(row["installment_amount"] for row in schedule) == pytest.approx(84000, abs=1e-6)

def test_calculate_accepts_percent_rate(client: TestClient, deal_payload: dict):
    response = client.post("/api/calculate", json={**deal_payload, "annual_profit_rate": 5})

    assert response.json()["summary"]["total_profit"] == 4000
    assert response.json()["summary"]["annual_profit_rate"] == 0.05

def test_calculate_rejects_negative_price(client: TestClient, deal_payload: dict):
    response = client.post("/api/calculate", json={**deal_payload, "asset_price": -5})

    assert response.status_code == 400
    assert response.json()["detail"]["field"] == "asset_price"

def test_calculate_rejects_missing_duration(client: TestClient, deal_payload: dict):
    body = dict(deal_payload)
    del body["duration_months"]

    response = client.post("/api/calculate", json=body)

    assert response.status_code == 400
    assert response.json()["detail"]["field"] == "duration_months"

def test_calculate_rejects_duration_beyond_cap(client: TestClient, deal_payload: dict):
    response = client.post("/api/calculate", json={**deal_payload, "duration_months": 120000})

    assert response.status_code == 400
    assert response.json()["detail"]["field"] == "duration_months"

@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"asset_price": "abc"}, "asset_price"),
        ({"duration_months": 12.5}, "duration_months"),
        ({"annual_profit_rate": "NaN"}, "annual_profit_rate"),
        ({"security_deposit": [100]}, "security_deposit"),
    ],
)
def test_calculate_type_errors_use_field_error_shape(client: TestClient, deal_payload: dict, overrides, field):
    response = client.post("/api/calculate", json={**deal_payload, **overrides})

    assert response.status_code == 400
    assert response.json()["detail"]["field"] == field
    assert response.json()["detail"]["error"]

def test_calculate_defaults_optional_upfront_payments(client: TestClient):
    response = client.post(
        "/api/calculate",
        json={"asset_price": 1200, "annual_profit_rate": 0, "duration_months": 12},
    )

    assert response.status_code == 200
    assert response.json()["summary"]["financed_amount"] == 1200
    assert response.json()["summary"]["monthly_installment"] == 100

def test_create_and_list_clients(client: TestClient):
    first = client.post("/api/clients", json={"name": "Layla"})
    second = client.post("/api/clients", json={"name": "Yusuf", "email": "y@example.com", "credit_score": 710})

    assert first.status_code == 201
    assert second.json()["credit_score"] == 710

    response = client.get("/api/clients")
    assert [c["name"] for c in response.json()] == ["Yusuf", "Layla"]

def test_create_client_requires_name(client: TestClient):
    response = client.post("/api/clients", json={"email": "nobody@example.com"})
    assert response.status_code == 422

def test_create_contract_without_notary(contract: dict):
    """Test contract is kept when ledger notarization is unavailable"""
    assert contract["status"] == "DRAFT"
    assert contract["client_name"] == "Omar Haddad"
    assert contract["total_cost"] == 84000
    assert contract["total_down_payment"] == 20000
    assert contract["stellar_hash"] is None
    assert contract["blockchain_warning"].startswith("Contract saved locally")
    assert len(contract["schedule"]) == 12

def test_create_contract_notarized(client: TestClient, client_id: int, deal_payload: dict):
    notary = AsyncMock()
    notary.notarize.return_value = NotarizationReceipt(
        transaction_hash="deadbeef",
        memo="Murabaha-1-84000.00",
        explorer_link="https://stellar.expert/explorer/testnet/tx/deadbeef",
    )
    client.app.dependency_overrides[get_notary_client] = lambda: notary

    response = client.post("/api/contracts", json={**deal_payload, "client_id": client_id, "asset_name": "Van"})

    assert response.status_code == 201
    data = response.json()
    assert data["stellar_hash"] == "deadbeef"
    assert data["explorer_link"].endswith("/tx/deadbeef")
    assert data["blockchain_warning"] is None
    notary.notarize.assert_awaited_once_with(data["id"], "Van", 84000.0)

    stored = client.get(f"/api/contracts/{data['id']}").json()
    assert stored["stellar_hash"] == "deadbeef"

def test_create_contract_notary_failure_keeps_contract(client: TestClient, client_id: int, deal_payload: dict):
    notary = AsyncMock()
    notary.notarize.side_effect = NotarizationError("timeout")
    client.app.dependency_overrides[get_notary_client] = lambda: notary

    response = client.post("/api/contracts", json={**deal_payload, "client_id": client_id, "asset_name": "Van"})

    assert response.status_code == 201
    assert "timeout" in response.json()["blockchain_warning"]
    assert len(client.get("/api/contracts").json()) == 1

def test_create_contract_keeps_contract_when_ledger_result_not_stored(
    client: TestClient, db: Session, client_id: int, deal_payload: dict, monkeypatch
):
    """Test a failed commit after notarization still returns the saved contract"""
    notary = AsyncMock()
    notary.notarize.return_value = NotarizationReceipt(
        transaction_hash="deadbeef",
        memo="Murabaha-1-84000.00",
        explorer_link="https://stellar.expert/explorer/testnet/tx/deadbeef",
    )
    client.app.dependency_overrides[get_notary_client] = lambda: notary

    real_commit = db.commit
    commits = {"count": 0}

    def flaky_commit():
        commits["count"] += 1
        if commits["count"] == 2:
            raise OperationalError("UPDATE contracts", {}, Exception("database is locked"))
        real_commit()

    monkeypatch.setattr(db, "commit", flaky_commit)

    response = client.post("/api/contracts", json={**deal_payload, "client_id": client_id, "asset_name": "Van"})

    assert response.status_code == 201
    data = response.json()
    assert data["stellar_hash"] is None
    assert "deadbeef" in data["blockchain_warning"]
    assert data["explorer_link"] is None
    assert client.get(f"/api/contracts/{data['id']}").json()["status"] == "DRAFT"


def test_create_contract_unknown_client(client: TestClient, deal_payload: dict):
    response = client.post("/api/contracts", json={**deal_payload, "client_id": 999, "asset_name": "Van"})
    assert response.status_code == 404

def test_create_contract_invalid_parameters(client: TestClient, client_id: int, deal_payload: dict):
    response = client.post(
        "/api/contracts",
        json={**deal_payload, "down_payment_percentage": 1.5, "client_id": client_id, "asset_name": "Van"},
    )

    assert response.status_code == 400
    assert response.json()["detail"]["field"] == "down_payment_percentage"
    assert client.get("/api/contracts").json() == []

def test_get_contract_not_found(client: TestClient):
    assert client.get("/api/contracts/12345").status_code == 404

def test_status_advances_one_step(client: TestClient, contract: dict):
    response = client.post("/api/update_status", json={"contract_id": contract["id"], "status": "PROMISE"})

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "PROMISE"
    assert data["contract"]["status"] == "PROMISE"
    assert data["contract"]["schedule"] == contract["schedule"]  # captured once, not recomputed

def test_full_lifecycle(client: TestClient, contract: dict):
    for status in ["PROMISE", "ASSET_OWNED", "SALE_SIGNED"]:
        response = client.post("/api/update_status", json={"contract_id": contract["id"], "status": status})
        assert response.status_code == 200

    assert client.get(f"/api/contracts/{contract['id']}").json()["status"] == "SALE_SIGNED"

def test_status_skip_rejected(client: TestClient, contract: dict):
    response = client.post("/api/update_status", json={"contract_id": contract["id"], "status": "SALE_SIGNED"})

    assert response.status_code == 409
    assert client.get(f"/api/contracts/{contract['id']}").json()["status"] == "DRAFT"

def test_status_unknown_value_rejected(client: TestClient, contract: dict):
    response = client.post("/api/update_status", json={"contract_id": contract["id"], "status": "ARCHIVED"})

    assert response.status_code == 400
    assert "DRAFT, PROMISE, ASSET_OWNED, SALE_SIGNED" in response.json()["detail"]

def test_status_unknown_contract(client: TestClient):
    response = client.post("/api/update_status", json={"contract_id": 404, "status": "PROMISE"})
    assert response.status_code == 404

def test_contract_documents(client: TestClient, contract: dict):
    promise = client.get(f"/api/contracts/{contract['id']}/documents/promise")
    sale = client.get(f"/api/contracts/{contract['id']}/documents/sale")

    assert promise.status_code == 200
    assert promise.json()["title"] == "UNDERTAKING TO PURCHASE (WA'D)"
    assert sale.status_code == 200
    assert "Omar Haddad (The Buyer)" in sale.json()["parties"]
    assert len(sale.json()["tables"][1]["rows"]) == 12

def test_contract_document_unknown_kind(client: TestClient, contract: dict):
    response = client.get(f"/api/contracts/{contract['id']}/documents/invoice")
    assert response.status_code == 404

def test_dashboard_kpis(client: TestClient, contract: dict):
    response = client.get("/api/dashboard")

    assert response.status_code == 200
    data = response.json()
    assert data["kpi"]["volume"] == 84000
    assert data["kpi"]["active_deals"] == 1
    assert data["kpi"]["profit_ytd"] == 4000
    assert len(data["chart_data"]) == 12
    this_month = data["chart_data"][date.today().month - 1]
    assert this_month["value"] == 84000

def test_dashboard_empty(client: TestClient):
    data = client.get("/api/dashboard").json()

    assert data["kpi"] == {"volume": 0, "active_deals": 0, "profit_ytd": 0}

def test_audit_logs_record_actions(client: TestClient, contract: dict):
    client.post("/api/update_status", json={"contract_id": contract["id"], "status": "PROMISE"})

    actions = [entry["user_action"] for entry in client.get("/api/audit_logs").json()]

    assert actions[0] == "STATUS_UPDATED"
    assert "CONTRACT_CREATED" in actions
    assert "NOTARIZATION_FAILED" in actions
    assert "CLIENT_CREATED" in actions

def _horizon_override(client: TestClient, handler) -> None:
    horizon = HorizonClient(base_url="http://horizon.test", transport=httpx.MockTransport(handler))
    client.app.dependency_overrides[get_horizon_client] = lambda: horizon

def test_blockchain_transactions(client: TestClient):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "_embedded": {
                    "records": [
                        {"hash": "h1", "created_at": "2024-01-01T00:00:00Z", "memo": "Murabaha-1-84000.00", "memo_type": "text"}
                    ]
                }
            },
        )

    _horizon_override(client, handler)
    response = client.get("/api/blockchain/transactions", params={"account_id": "GTREASURY"})

    assert response.status_code == 200
    data = response.json()
    assert data["account_id"] == "GTREASURY"
    assert data["transactions"][0]["memo"] == "Murabaha-1-84000.00"

def test_blockchain_transactions_requires_account(client: TestClient):
    response = client.get("/api/blockchain/transactions")
    assert response.status_code == 400

def test_blockchain_transaction_not_found(client: TestClient):
    _horizon_override(client, lambda request: httpx.Response(404))

    response = client.get("/api/blockchain/transactions/nope")
    assert response.status_code == 404

def test_blockchain_unavailable(client: TestClient):
    _horizon_override(client, lambda request: httpx.Response(502))

    response = client.get("/api/blockchain/transactions", params={"account_id": "GTREASURY"})
    assert response.status_code == 503
