"""API tests for roles, permissions, role assignments and audit resources."""

from falcon.testing import TestClient

from tests.api.conftest import auth


class TestRoles:
    def test_list_needs_role_read(self, client: TestClient) -> None:
        assert client.simulate_get("/v1/roles", headers=auth("alice")).status_code == 403
        r = client.simulate_get("/v1/roles", headers=auth("root"))
        assert r.status_code == 200
        assert [x["name"] for x in r.json["items"]] == ["admin", "editor"]

    def test_create_role_and_duplicate(self, client: TestClient) -> None:
        r = client.simulate_post("/v1/roles", json={"name": "reviewer"}, headers=auth("root"))
        assert r.status_code == 201
        r = client.simulate_post("/v1/roles", json={"name": "reviewer"}, headers=auth("root"))
        assert r.status_code == 409

    def test_create_role_forbidden(self, client: TestClient) -> None:
        r = client.simulate_post("/v1/roles", json={"name": "x"}, headers=auth("alice"))
        assert r.status_code == 403

    def test_role_permission_lifecycle(self, client: TestClient, roles) -> None:
        perm = client.simulate_post(
            "/v1/permissions",
            json={"name": "invoice:approve", "resource_type": "INVOICE", "action": "APPROVE"},
            headers=auth("root"),
        )
        assert perm.status_code == 201
        editor_id = str(roles["editor"].id)

        r = client.simulate_post(
            f"/v1/roles/{editor_id}/permissions",
            json={"permission_id": perm.json["id"]},
            headers=auth("root"),
        )
        assert r.status_code == 201

        r = client.simulate_post(
            "/v1/access/evaluate",
            json={"resource_type": "INVOICE", "action": "APPROVE"},
            headers=auth("alice"),
        )
        assert r.status_code == 200

        r = client.simulate_delete(
            f"/v1/roles/{editor_id}/permissions/{perm.json['id']}", headers=auth("root")
        )
        assert r.status_code == 204
        r = client.simulate_get(f"/v1/roles/{editor_id}/permissions", headers=auth("root"))
        assert "invoice:approve" not in [p["name"] for p in r.json["items"]]

    def test_unknown_resource_type_400(self, client: TestClient) -> None:
        r = client.simulate_post(
            "/v1/permissions",
            json={"name": "x", "resource_type": "SPACESHIP", "action": "FLY"},
            headers=auth("root"),
        )
        assert r.status_code == 400


class TestUserRoles:
    def test_assign_and_remove(self, client: TestClient, roles) -> None:
        editor_id = str(roles["editor"].id)
        r = client.simulate_post(
            "/v1/users/bob/roles", json={"role_id": editor_id}, headers=auth("root")
        )
        assert r.status_code == 201
        assert r.json["assigned_by"] == "root"

        r = client.simulate_get("/v1/users/bob/roles", headers=auth("bob"))
        assert [x["name"] for x in r.json["items"]] == ["editor"]

        r = client.simulate_delete(f"/v1/users/bob/roles/{editor_id}", headers=auth("root"))
        assert r.status_code == 204
        r = client.simulate_delete(f"/v1/users/bob/roles/{editor_id}", headers=auth("root"))
        assert r.status_code == 404

    def test_assign_forbidden_without_user_manage(self, client: TestClient, roles) -> None:
        r = client.simulate_post(
            "/v1/users/bob/roles",
            json={"role_id": str(roles["editor"].id)},
            headers=auth("alice"),
        )
        assert r.status_code == 403


class TestAudit:
    def test_logs_need_audit_read(self, client: TestClient) -> None:
        assert client.simulate_get("/v1/audit/logs", headers=auth("alice")).status_code == 403
        r = client.simulate_get(
            "/v1/audit/logs", params={"action": "access_denied"}, headers=auth("root")
        )
        assert r.status_code == 200
        assert [e["actor_id"] for e in r.json["items"]] == ["alice"]

    def test_own_trail(self, client: TestClient) -> None:
        client.simulate_post(
            "/v1/access/evaluate",
            json={"resource_type": "DOCUMENT", "action": "READ"},
            headers=auth("alice"),
        )
        r = client.simulate_get("/v1/audit/users/alice", headers=auth("alice"))
        assert r.status_code == 200
        assert [e["action"] for e in r.json["items"]] == ["ACCESS_APPROVED"]

    def test_get_entry(self, client: TestClient, uow) -> None:
        client.simulate_post(
            "/v1/access/evaluate",
            json={"resource_type": "DOCUMENT", "action": "READ"},
            headers=auth("alice"),
        )
        entry = uow.audit_logs.entries[0]
        r = client.simulate_get(f"/v1/audit/logs/{entry.id}", headers=auth("root"))
        assert r.status_code == 200
        assert r.json["id"] == str(entry.id)

    def test_invalid_filter_400(self, client: TestClient) -> None:
        r = client.simulate_get(
            "/v1/audit/logs", params={"result": "MAYBE"}, headers=auth("root")
        )
        assert r.status_code == 400

    def test_report_requires_range(self, client: TestClient) -> None:
        assert client.simulate_get("/v1/audit/report", headers=auth("root")).status_code == 400

    def test_report(self, client: TestClient) -> None:
        r = client.simulate_get(
            "/v1/audit/report",
            params={"start": "2026-01-01T00:00:00+00:00", "end": "2026-02-01T00:00:00"},
            headers=auth("root"),
        )
        assert r.status_code == 200
        # The guard check for this very request is inside the range.
        assert r.json["by_action"] == {"ACCESS_APPROVED": 1}

    def test_security_events(self, client: TestClient) -> None:
        client.simulate_post(
            "/v1/access/evaluate",
            json={"resource_type": "INVOICE", "action": "APPROVE"},
            headers=auth("alice"),
        )
        r = client.simulate_get("/v1/audit/security-events", headers=auth("root"))
        assert r.status_code == 200
        assert [e["action"] for e in r.json["items"]] == ["ACCESS_DENIED"]

    def test_project_logs(self, client: TestClient) -> None:
        r = client.simulate_get("/v1/audit/projects/apollo", headers=auth("root"))
        assert r.status_code == 200
        assert r.json["items"] == []


class TestUserProvisioning:
    def test_authenticated_user_can_be_given_a_role(self, client: TestClient, roles, uow) -> None:
        assert not uow.users._users.get("dave")
        assert client.simulate_get("/v1/delegations", headers=auth("dave")).status_code == 200
        assert uow.users._users["dave"].email == "dave@example.com"

        r = client.simulate_post(
            "/v1/users/dave/roles",
            json={"role_id": str(roles["editor"].id)},
            headers=auth("root"),
        )
        assert r.status_code == 201

        r = client.simulate_post(
            "/v1/access/evaluate",
            json={"resource_type": "DOCUMENT", "action": "WRITE"},
            headers=auth("dave"),
        )
        assert r.status_code == 200

    def test_authenticated_user_can_receive_a_delegation(self, client: TestClient, roles) -> None:
        client.simulate_get("/v1/access/permissions", headers=auth("erin"))
        r = client.simulate_post(
            "/v1/delegations",
            json={
                "delegatee_id": "erin",
                "role_id": str(roles["editor"].id),
                "ttl_seconds": 600,
            },
            headers=auth("alice"),
        )
        assert r.status_code == 201

    def test_non_object_body_is_400(self, client: TestClient) -> None:
        r = client.simulate_post("/v1/roles", json=["reviewer"], headers=auth("root"))
        assert r.status_code == 400
