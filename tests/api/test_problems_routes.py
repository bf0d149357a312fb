"""Tests for the problems REST API routes."""

from fastapi.testclient import TestClient

from reportaxial.main import app
from tests.conftest import make_token


def _create_problem(client: TestClient, headers: dict, **fields) -> dict:
    body = {"description": "Vidro lateral com defeito", **fields}
    resp = client.post("/api/problems", json=body, headers=headers)
    assert resp.status_code == 201
    return resp.json()


def test_health(client: TestClient):
    assert client.get("/health").json() == {"status": "ok"}


def test_create_problem_as_store(client: TestClient, store_user, store, auth_headers):
    resp = client.post(
        "/api/problems",
        json={
            "description": "Encomenda incompleta",
            "order_date": "2026-10-01",
            "supplier_order": "FO-123",
            "product": "Para-brisas",
            "eurocode": "2436AGNBLV",
            "priority": "high",
        },
        headers=auth_headers(store_user),
    )

    assert resp.status_code == 201
    data = resp.json()
    assert data["status"] == "pending"
    assert data["priority"] == "high"
    assert data["store_id"] == store.id
    assert data["viewed_by_store"] is True
    assert data["viewed_by_supplier"] is False


def test_missing_token_is_401(client: TestClient):
    resp = client.post("/api/problems", json={"description": "x"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "unauthorized"


def test_bad_token_is_401(client: TestClient):
    resp = client.get("/api/problems/store", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


def test_legacy_user_type_claim_accepted(client: TestClient, store_user, store):
    headers = {"Authorization": f"Bearer {make_token(store_user, claim='userType')}"}
    resp = client.get("/api/problems/store", headers=headers)
    assert resp.status_code == 200


def test_supplier_cannot_create_problem(client: TestClient, supplier_user, supplier, auth_headers):
    resp = client.post("/api/problems", json={"description": "x"}, headers=auth_headers(supplier_user))
    assert resp.status_code == 403
    assert resp.json()["error"] == "forbidden"


def test_malformed_date_is_400(client: TestClient, store_user, store, auth_headers):
    resp = client.post(
        "/api/problems",
        json={"description": "x", "order_date": "ontem"},
        headers=auth_headers(store_user),
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_input"


def test_missing_description_is_400(client: TestClient, store_user, store, auth_headers):
    resp = client.post("/api/problems", json={"product": "x"}, headers=auth_headers(store_user))
    assert resp.status_code == 400


def test_unknown_problem_is_404(client: TestClient, supplier_user, supplier, auth_headers):
    resp = client.get("/api/problems/999", headers=auth_headers(supplier_user))
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"


def test_store_cannot_read_other_store_problem(
    client: TestClient, store_user, store, other_store_user, other_store, auth_headers
):
    problem = _create_problem(client, auth_headers(other_store_user))

    resp = client.get(f"/api/problems/{problem['id']}", headers=auth_headers(store_user))
    assert resp.status_code == 403

    resp = client.post(
        f"/api/problems/{problem['id']}/messages",
        json={"text": "olá"},
        headers=auth_headers(store_user),
    )
    assert resp.status_code == 403


def test_admin_cannot_touch_problems(client: TestClient, store_user, store, admin_user, auth_headers):
    problem = _create_problem(client, auth_headers(store_user))

    assert client.get("/api/problems/supplier", headers=auth_headers(admin_user)).status_code == 403
    assert client.get(f"/api/problems/{problem['id']}", headers=auth_headers(admin_user)).status_code == 403


def test_store_cannot_resolve_or_respond(client: TestClient, store_user, store, auth_headers):
    headers = auth_headers(store_user)
    problem = _create_problem(client, headers)

    assert client.patch(f"/api/problems/{problem['id']}/resolve", headers=headers).status_code == 403
    resp = client.post(f"/api/problems/{problem['id']}/respond", json={"text": "x"}, headers=headers)
    assert resp.status_code == 403


def test_edit_observations_keeps_status(
    client: TestClient, store_user, store, supplier_user, supplier, auth_headers
):
    problem = _create_problem(client, auth_headers(store_user))
    client.patch(f"/api/problems/{problem['id']}/resolve", headers=auth_headers(supplier_user))

    resp = client.patch(
        f"/api/problems/{problem['id']}",
        json={"observations": "Cliente aceitou troca"},
        headers=auth_headers(store_user),
    )

    assert resp.status_code == 200
    assert resp.json()["observations"] == "Cliente aceitou troca"
    assert resp.json()["status"] == "resolved"


def test_supplier_cannot_edit(client: TestClient, store_user, store, supplier_user, supplier, auth_headers):
    problem = _create_problem(client, auth_headers(store_user))
    resp = client.patch(
        f"/api/problems/{problem['id']}",
        json={"observations": "x"},
        headers=auth_headers(supplier_user),
    )
    assert resp.status_code == 403


def test_mark_viewed_for_other_role_is_forbidden(
    client: TestClient, store_user, store, auth_headers
):
    problem = _create_problem(client, auth_headers(store_user))
    resp = client.patch(
        f"/api/problems/{problem['id']}/mark-viewed",
        json={"role": "supplier"},
        headers=auth_headers(store_user),
    )
    assert resp.status_code == 403


def test_mark_viewed_without_body_uses_caller_role(
    client: TestClient, store_user, store, supplier_user, supplier, auth_headers
):
    problem = _create_problem(client, auth_headers(store_user))
    resp = client.patch(
        f"/api/problems/{problem['id']}/mark-viewed",
        headers=auth_headers(supplier_user),
    )
    assert resp.status_code == 200
    assert resp.json()["viewed_by_supplier"] is True
    assert resp.json()["status"] == "in_progress"


def test_blank_message_is_400(client: TestClient, store_user, store, auth_headers):
    headers = auth_headers(store_user)
    problem = _create_problem(client, headers)

    resp = client.post(f"/api/problems/{problem['id']}/messages", json={"text": "  "}, headers=headers)

    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_input"
    assert client.get(f"/api/problems/{problem['id']}/messages", headers=headers).json() == []


def test_full_problem_lifecycle(
    client: TestClient, store_user, store, supplier_user, supplier, auth_headers
):
    store_h = auth_headers(store_user)
    supplier_h = auth_headers(supplier_user)

    problem = _create_problem(client, store_h)
    pid = problem["id"]
    assert problem["status"] == "pending"
    assert problem["viewed_by_supplier"] is False

    resp = client.patch(f"/api/problems/{pid}/mark-viewed", json={"role": "supplier"}, headers=supplier_h)
    assert resp.json()["status"] == "in_progress"
    assert resp.json()["viewed_by_supplier"] is True

    resp = client.post(f"/api/problems/{pid}/respond", json={"text": "fixed"}, headers=supplier_h)
    assert resp.status_code == 201
    assert resp.json()["response_text"] == "fixed"

    detail = client.get(f"/api/problems/{pid}", headers=supplier_h).json()
    assert detail["status"] == "in_progress"
    assert detail["response"]["supplier_name"] == "Vidros Norte"

    resp = client.patch(f"/api/problems/{pid}/resolve", headers=supplier_h)
    assert resp.json()["status"] == "resolved"

    resp = client.patch(f"/api/problems/{pid}/resolve", headers=supplier_h)
    assert resp.status_code == 200
    assert resp.json()["status"] == "resolved"

    resp = client.post(f"/api/problems/{pid}/messages", json={"text": "thanks"}, headers=store_h)
    assert resp.status_code == 201
    assert resp.json()["author_role"] == "store"

    detail = client.get(f"/api/problems/{pid}", headers=store_h).json()
    assert detail["viewed_by_supplier"] is False
    assert detail["status"] == "resolved"
    assert [m["text"] for m in detail["messages"]] == ["thanks"]

    store_list = client.get("/api/problems/store", headers=store_h).json()
    assert [p["id"] for p in store_list] == [pid]
    assert store_list[0]["response"]["response_text"] == "fixed"

    queue = client.get("/api/problems/supplier", headers=supplier_h).json()
    assert queue[0]["store_name"] == "Loja Porto"
    assert queue[0]["response_count"] == 1


def test_unexpected_error_is_opaque_500(test_db, store_user, store, auth_headers, monkeypatch):
    from reportaxial.api.v1 import problems as problems_api
    from reportaxial.db.session import get_db

    def boom(*args, **kwargs):
        raise RuntimeError("database exploded at /var/lib/secret")

    monkeypatch.setattr(problems_api, "store_view", boom)

    def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    try:
        with TestClient(app, raise_server_exceptions=False) as c:
            resp = c.get("/api/problems/store", headers=auth_headers(store_user))
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 500
    assert resp.json() == {"error": "internal", "detail": "Erro interno"}


def test_out_of_range_problem_id_is_400(client: TestClient, supplier_user, supplier, auth_headers):
    headers = auth_headers(supplier_user)

    resp = client.get("/api/problems/99999999999999999999", headers=headers)
    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_input"

    resp = client.post("/api/problems/99999999999999999999/messages", json={"text": "olá"}, headers=headers)
    assert resp.status_code == 400


def test_non_positive_problem_id_is_400(client: TestClient, supplier_user, supplier, auth_headers):
    resp = client.patch("/api/problems/0/resolve", headers=auth_headers(supplier_user))
    assert resp.status_code == 400
