"""Tests for region endpoints."""

from fastapi.testclient import TestClient


def create_region(admin_client: TestClient, **fields) -> dict:
    """Create a region through the API and return it."""
    response = admin_client.post("/api/regions", json=fields)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestListRegions:
    """Tests for GET /api/regions."""

    def test_empty(self, client: TestClient) -> None:
        response = client.get("/api/regions")
        assert response.status_code == 200
        assert response.json() == {"ok": True, "data": []}

    def test_lists_active_regions_by_name(
        self, client: TestClient, admin_client: TestClient
    ) -> None:
        create_region(admin_client, name="West")
        create_region(admin_client, name="East")
        create_region(admin_client, name="Archived", active=False)

        data = client.get("/api/regions").json()["data"]
        assert [r["name"] for r in data] == ["East", "West"]


class TestCreateRegion:
    """Tests for POST /api/regions."""

    def test_create(self, admin_client: TestClient) -> None:
        region = create_region(
            admin_client,
            name="  North India ",
            description=" Hills ",
            imageUrl="/uploads/north.png",
        )
        assert region["name"] == "North India"
        assert region["slug"] == "north-india"
        assert region["description"] == "Hills"
        assert region["imageUrl"] == "/uploads/north.png"
        assert region["active"] is True
        assert "_id" in region
        assert region["createdAt"].endswith("Z")

    def test_requires_admin_key(self, client: TestClient) -> None:
        response = client.post("/api/regions", json={"name": "North"})
        assert response.status_code == 401
        assert response.json()["ok"] is False

    def test_missing_name(self, admin_client: TestClient) -> None:
        response = admin_client.post("/api/regions", json={})
        assert response.status_code == 400
        data = response.json()
        assert data["ok"] is False
        assert data["error_code"] == "VALIDATION_ERROR"
        assert data["message"] == "Missing name"

    def test_blank_name(self, admin_client: TestClient) -> None:
        response = admin_client.post("/api/regions", json={"name": "  "})
        assert response.status_code == 400
        assert response.json()["message"] == "Name cannot be empty"

    def test_duplicate_name_conflict(self, admin_client: TestClient) -> None:
        create_region(admin_client, name="North")
        response = admin_client.post("/api/regions", json={"name": "NORTH"})
        assert response.status_code == 409
        data = response.json()
        assert data["error_code"] == "DUPLICATE_REGION"
        assert data["message"] == "Region with this name already exists"
        assert "request_id" in data

    def test_duplicate_slug_conflict(self, admin_client: TestClient) -> None:
        create_region(admin_client, name="North", slug="hills")
        response = admin_client.post("/api/regions", json={"name": "South", "slug": "hills"})
        assert response.status_code == 409
        assert response.json()["message"] == "Region with this name or slug already exists"


class TestUpdateRegion:
    """Tests for PUT/PATCH /api/regions/{id}."""

    def test_patch_changes_supplied_fields(self, admin_client: TestClient) -> None:
        region = create_region(admin_client, name="North", description="Hills")
        response = admin_client.patch(f"/api/regions/{region['_id']}", json={"active": False})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["active"] is False
        assert data["description"] == "Hills"

    def test_put_renames(self, admin_client: TestClient) -> None:
        region = create_region(admin_client, name="North")
        response = admin_client.put(
            f"/api/regions/{region['_id']}", json={"name": "Far North", "slug": ""}
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Far North"
        assert data["slug"] == "far-north"

    def test_unknown_region(self, admin_client: TestClient) -> None:
        response = admin_client.patch("/api/regions/missing", json={"name": "x"})
        assert response.status_code == 404
        assert response.json()["error_code"] == "REGION_NOT_FOUND"


class TestDeleteRegion:
    """Tests for DELETE /api/regions/{id}."""

    def test_delete_returns_document(self, client: TestClient, admin_client: TestClient) -> None:
        region = create_region(admin_client, name="North")
        response = admin_client.delete(f"/api/regions/{region['_id']}")
        assert response.status_code == 200
        assert response.json()["data"]["_id"] == region["_id"]
        assert client.get("/api/regions").json()["data"] == []

    def test_delete_unknown(self, admin_client: TestClient) -> None:
        assert admin_client.delete("/api/regions/missing").status_code == 404
