"""Change tracking endpoint tests."""

from fastapi.testclient import TestClient
from sqlalchemy import text

from catalog_tracer.core.security import create_access_token
from catalog_tracer.main import app
from catalog_tracer.services.change_service import record_entity_mutation


def _auth_headers(user_id: str) -> dict[str, str]:
    token = create_access_token(data={"sub": user_id})
    return {"Authorization": f"Bearer {token}"}


def test_list_changes_for_brand(db, catalog) -> None:
    """List endpoint should return brand scoped changes."""
    record_entity_mutation(
        db, "produks", catalog.hydra_id, "UPDATE", {"name": "Hydra Serum"}, {"name": "Hydra Serum 50ml"}, "user-admin"
    )

    with TestClient(app) as client:
        response = client.get(
            "/api/v1/changes",
            params={"brand_id": catalog.brand_id},
            headers=_auth_headers(catalog.admin_id),
        )

    assert response.status_code == 200
    body = response.json()
    assert len(body) == 1
    assert body[0]["new_value_display"] == "Hydra Serum 50ml"
    assert body[0]["changed_by_display_name"] == "Alice Admin"
    assert [entry["value"] for entry in body[0]["ancestor_chain"]] == ["Serums", "Skincare", "Acme"]


def test_list_changes_requires_exactly_one_scope(catalog) -> None:
    """List endpoint should require exactly one scope."""
    headers = _auth_headers(catalog.admin_id)
    with TestClient(app) as client:
        missing = client.get("/api/v1/changes", headers=headers)
        doubled = client.get(
            "/api/v1/changes",
            params={"brand_id": catalog.brand_id, "sop_id": "sop-refund"},
            headers=headers,
        )

    assert missing.status_code == 400
    assert doubled.status_code == 400


def test_source_key_without_source_table_is_rejected(catalog) -> None:
    """List endpoint should reject source_key without source_table."""
    headers = _auth_headers(catalog.admin_id)
    with TestClient(app) as client:
        bare = client.get("/api/v1/changes", params={"source_key": "sop-refund"}, headers=headers)
        with_anchor = client.get(
            "/api/v1/changes",
            params={"brand_id": catalog.brand_id, "source_key": "sop-refund"},
            headers=headers,
        )

    assert bare.status_code == 400
    assert bare.json()["detail"] == "source_key requires source_table"
    assert with_anchor.status_code == 400


def test_list_changes_by_source_table_and_key(db, catalog) -> None:
    """List endpoint should filter by source table and key."""
    record_entity_mutation(db, "sops", "sop-refund", "UPDATE", {"name": "Refund"}, {"name": "Refunds"}, None)
    record_entity_mutation(db, "sops", "sop-other", "INSERT", None, {"name": "Exchange"}, None)

    with TestClient(app) as client:
        response = client.get(
            "/api/v1/changes",
            params={"source_table": "sops", "source_key": "sop-refund"},
            headers=_auth_headers(catalog.admin_id),
        )

    assert response.status_code == 200
    assert [item["source_key"] for item in response.json()] == ["sop-refund"]
    assert response.json()[0]["changed_by_display_name"] == "System"


def test_endpoints_require_admin_role(catalog) -> None:
    """Change endpoints should require an admin role."""
    with TestClient(app) as client:
        anonymous = client.get("/api/v1/changes", params={"brand_id": catalog.brand_id})
        plain_user = client.get(
            "/api/v1/changes",
            params={"brand_id": catalog.brand_id},
            headers=_auth_headers("user-plain"),
        )
        bad_token = client.get(
            "/api/v1/changes/recent",
            headers={"Authorization": "Bearer not-a-token"},
        )

    assert anonymous.status_code in {401, 403}
    assert plain_user.status_code == 403
    assert bad_token.status_code == 401


def test_create_change_records_current_user(catalog) -> None:
    """Create endpoint should record the caller as actor."""
    headers = _auth_headers(catalog.admin_id)
    with TestClient(app) as client:
        created = client.post(
            "/api/v1/changes",
            json={
                "source_table": "produks",
                "source_key": catalog.hydra_id,
                "field_name": "kapasitas",
                "old_value": "30",
                "new_value": "50",
                "action_type": "update",
            },
            headers=headers,
        )
        invalid_action = client.post(
            "/api/v1/changes",
            json={"source_table": "produks", "source_key": "p", "field_name": "name", "action_type": "UPSERT"},
            headers=headers,
        )
        missing_table = client.post(
            "/api/v1/changes",
            json={"source_key": "p", "field_name": "name", "action_type": "INSERT"},
            headers=headers,
        )

    assert created.status_code == 201
    assert created.json()["changed_by"] == catalog.admin_id
    assert created.json()["action_type"] == "UPDATE"
    assert invalid_action.status_code == 400
    assert missing_table.status_code == 422


def test_history_and_recent_endpoints(db, catalog) -> None:
    """History and recent endpoints should return enriched data."""
    record_entity_mutation(
        db, "brands", "brand-new", "INSERT", None, {"name": "Newco", "description": "New"}, "agent-bob"
    )
    record_entity_mutation(db, "brands", "brand-new", "UPDATE", {"name": "Newco"}, {"name": "Newco Ltd"}, "user-admin")
    headers = _auth_headers(catalog.admin_id)

    with TestClient(app) as client:
        history = client.get("/api/v1/changes/history/brands/brand-new", headers=headers)
        recent = client.get("/api/v1/changes/recent", params={"limit": 1}, headers=headers)

    assert history.status_code == 200
    events = history.json()
    assert [event["action_type"] for event in events] == ["INSERT", "UPDATE"]
    assert len(events[0]["changes"]) == 2
    assert events[0]["changed_by_display_name"] == "Bob Agent"
    assert recent.status_code == 200
    assert [item["new_value_display"] for item in recent.json()] == ["Newco Ltd"]


def test_unavailable_store_returns_503_with_empty_body(db, catalog) -> None:
    """Unavailable store should give 503 with an empty list."""
    with TestClient(app) as client:
        with db.get_bind().begin() as connection:
            connection.execute(text("DROP TABLE tracer_updates"))
        response = client.get(
            "/api/v1/changes",
            params={"brand_id": catalog.brand_id},
            headers=_auth_headers(catalog.admin_id),
        )

    assert response.status_code == 503
    assert response.json() == []


def test_me_returns_current_user(catalog) -> None:
    """Me endpoint should return the authenticated user."""
    with TestClient(app) as client:
        response = client.get("/api/v1/auth/me", headers=_auth_headers(catalog.admin_id))

    assert response.status_code == 200
    assert response.json()["email"] == "alice@example.com"
    assert response.json()["role"] == "ADMIN"
