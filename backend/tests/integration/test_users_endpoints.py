"""Integration tests for admin user management."""
from fastapi.testclient import TestClient

from tests.conftest import PASSWORD, bearer, seed_user


class TestListUsers:
    def test_admin_lists_users_without_hashes(self, test_client: TestClient, admin_headers, member):
        response = test_client.get("/users", headers=admin_headers)

        assert response.status_code == 200
        users = response.json()
        assert [user["username"] for user in users] == ["admin", "reader"]
        assert all("passwordHash" not in user for user in users)

    def test_non_admin_forbidden(self, test_client: TestClient, user_headers):
        response = test_client.get("/users", headers=user_headers)
        assert response.status_code == 403


class TestApproveUser:
    def test_admin_approves_user(self, test_client: TestClient, store, admin_headers):
        pending = seed_user(store, "newbie", "https://www.scribblehub.com/profile/50/newbie", approved=False)

        response = test_client.put(f"/users/{pending['id']}", json={"approved": True}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["approved"] is True
        login = test_client.post("/login", json={"username": "newbie", "password": PASSWORD})
        assert login.status_code == 200

    def test_approval_value_required(self, test_client: TestClient, admin_headers, member):
        response = test_client.put(f"/users/{member['id']}", json={}, headers=admin_headers)
        assert response.status_code == 400

    def test_unknown_user(self, test_client: TestClient, admin_headers):
        response = test_client.put("/users/404", json={"approved": True}, headers=admin_headers)
        assert response.status_code == 404

    def test_non_admin_forbidden(self, test_client: TestClient, user_headers, member):
        response = test_client.put(f"/users/{member['id']}", json={"approved": False}, headers=user_headers)
        assert response.status_code == 403


class TestDeleteUser:
    def test_admin_cannot_delete_self(self, test_client: TestClient, admin, admin_headers):
        response = test_client.delete(f"/users/{admin['id']}", headers=admin_headers)
        assert response.status_code == 400

    def test_admin_cannot_delete_other_admin(self, test_client: TestClient, store, admin_headers):
        other = seed_user(store, "root", "https://www.scribblehub.com/profile/8/root", role="admin")
        response = test_client.delete(f"/users/{other['id']}", headers=admin_headers)
        assert response.status_code == 403

    def test_non_admin_cannot_delete(self, test_client: TestClient, store, user_headers):
        victim = seed_user(store, "victim", "https://www.scribblehub.com/profile/9/victim")
        response = test_client.delete(f"/users/{victim['id']}", headers=user_headers)
        assert response.status_code == 403

    def test_delete_resolves_pending_request(self, test_client: TestClient, admin_headers, user_headers, member):
        requested = test_client.post("/user/profile/delete-request", json={"reason": "bye"}, headers=user_headers)
        assert requested.status_code == 200

        response = test_client.delete(f"/users/{member['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "deletedId": member["id"], "username": "reader"}
        requests = test_client.get("/users/deletion-requests", headers=admin_headers).json()
        assert [(r["userId"], r["status"]) for r in requests] == [(member["id"], "resolved")]

    def test_deleted_users_token_no_longer_resolves_profile(
        self, test_client: TestClient, token_service, admin_headers, member
    ):
        headers = bearer(token_service, member)
        test_client.delete(f"/users/{member['id']}", headers=admin_headers)

        response = test_client.get("/user/profile", headers=headers)
        assert response.status_code == 404
