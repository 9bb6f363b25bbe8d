"""
Authorization tests.

Verifies:
- Unauthenticated requests return 401
- Customer role denied back-office operations (403)
- Admin role can perform back-office operations
- Health and version endpoints are public
"""

import pytest


# =============================================================================
# UNAUTHENTICATED ACCESS - 401
# =============================================================================


class TestUnauthenticatedAccess:
    """All protected endpoints return 401 without a token."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/customer"),
            ("GET", "/api/customer/1"),
            ("GET", "/api/customer/1/history"),
            ("GET", "/api/customer/lookup/0771234567"),
            ("POST", "/api/customer/register"),
            ("PUT", "/api/customer/1"),
            ("GET", "/api/permissions"),
            ("GET", "/api/permissions/by-resource"),
            ("GET", "/api/permissions/1"),
            ("GET", "/api/permissions/my-permissions"),
            ("GET", "/api/wishlist"),
            ("POST", "/api/wishlist"),
            ("DELETE", "/api/wishlist/1"),
            ("GET", "/api/wishlist/check?productId=1"),
            ("GET", "/api/auth/me"),
        ],
    )
    def test_requires_auth(self, client, seed, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"
        assert resp.get_json() == {"error": "Authentication required"}

    def test_unknown_token(self, client, seed):
        resp = client.get("/api/wishlist", headers={"Authorization": "Bearer not-a-real-token"})

        assert resp.status_code == 401
        assert resp.get_json() == {"error": "Invalid or expired token"}

    def test_non_bearer_scheme(self, client, seed):
        resp = client.get("/api/wishlist", headers={"Authorization": "Basic dXNlcjpwYXNz"})
        assert resp.status_code == 401


# =============================================================================
# CUSTOMER ROLE DENIED BACK-OFFICE OPERATIONS - 403
# =============================================================================


class TestCustomerRoleDenied:
    """Customer role cannot use the back-office endpoints."""

    def test_cannot_lookup_customer(self, client, customer_headers):
        resp = client.get("/api/customer/lookup/0771234567", headers=customer_headers)
        assert resp.status_code == 403
        data = resp.get_json()
        assert data["error"] == "Permission denied"
        assert data["required_roles"] == ["Admin"]

    def test_cannot_register_customer(self, client, customer_headers):
        resp = client.post(
            "/api/customer/register",
            json={"full_name": "Sneaky", "phone_number": "0700000000"},
            headers=customer_headers,
        )
        assert resp.status_code == 403

    def test_cannot_update_customer(self, client, customer_headers):
        resp = client.put(
            "/api/customer/1",
            json={"full_name": "Sneaky", "phone_number": "0700000000"},
            headers=customer_headers,
        )
        assert resp.status_code == 403

    def test_cannot_list_permissions(self, client, customer_headers):
        resp = client.get("/api/permissions/by-resource", headers=customer_headers)
        assert resp.status_code == 403

    def test_superadmin_alone_cannot_use_customer_routes(self, client, superadmin_headers):
        resp = client.get("/api/customer", headers=superadmin_headers)
        assert resp.status_code == 403


# =============================================================================
# ADMIN CAN PERFORM BACK-OFFICE OPERATIONS - 200
# =============================================================================


class TestAdminAccess:
    """Admin role can perform back-office operations."""

    def test_can_list_customers(self, client, admin_headers):
        resp = client.get("/api/customer", headers=admin_headers)
        assert resp.status_code == 200

    def test_can_list_permissions(self, client, admin_headers):
        resp = client.get("/api/permissions", headers=admin_headers)
        assert resp.status_code == 200
        assert len(resp.get_json()) > 0

    def test_can_use_own_wishlist(self, client, admin_headers):
        resp = client.get("/api/wishlist", headers=admin_headers)
        assert resp.status_code == 200


# =============================================================================
# PUBLIC ENDPOINTS - NO AUTH REQUIRED
# =============================================================================


class TestPublicEndpoints:
    """System health and version endpoints are public."""

    def test_health(self, client, seed):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.get_json()["status"] == "healthy"

    def test_health_degraded_without_seed_data(self, client, db_session):
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["status"] == "degraded"
        assert data["checks"]["auth_reference_data"]["status"] == "degraded"

    def test_version(self, client, db_session):
        resp = client.get("/api/version")
        assert resp.status_code == 200
        assert resp.get_json()["api_version"] == "1.0.0"

    def test_cors_headers_for_allowed_origin(self, client, db_session):
        resp = client.get("/api/version", headers={"Origin": "http://localhost:3000"})
        assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:3000"

    def test_no_cors_headers_for_other_origin(self, client, db_session):
        resp = client.get("/api/version", headers={"Origin": "http://evil.example"})
        assert "Access-Control-Allow-Origin" not in resp.headers
