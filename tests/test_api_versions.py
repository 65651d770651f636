"""End-to-end tests for the release API."""

from sqlalchemy import text

from conftest import release_data


def create_release(client, **overrides) -> int:
    response = client.post("/api/app-versions", json=release_data(**overrides))
    assert response.status_code == 201
    return response.json()["id"]


class TestSystemEndpoints:
    def test_healthz(self, client):
        response = client.get("/healthz")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "db": True}

    def test_version(self, client):
        response = client.get("/version")

        assert response.status_code == 200
        assert response.json()["version"]


class TestReleaseFlow:
    def test_draft_is_invisible_until_published(self, client):
        release_id = create_release(client, version="1.1.0")

        response = client.get("/api/app-versions/latest", params={"platform": "android"})
        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"

        response = client.get(
            "/api/check-update",
            params={"platform": "android", "current_version": "1.0.0"},
        )
        assert response.json() == {"has_update": False}

        response = client.post(f"/api/app-versions/{release_id}/publish")
        assert response.status_code == 200
        assert response.json() == {"message": "Release published"}

        response = client.get("/api/app-versions/latest", params={"platform": "android"})
        assert response.status_code == 200
        latest = response.json()["version"]
        assert latest["id"] == release_id
        assert latest["status"] == "published"
        assert latest["published_at"].endswith("Z")

        response = client.get(
            "/api/check-update",
            params={"platform": "android", "current_version": "1.0.0", "version_code": "100"},
        )
        data = response.json()
        assert data["has_update"] is True
        assert data["update_info"]["version"] == "1.1.0"
        assert data["update_info"]["version_code"] == "1.1.0"
        assert data["update_info"]["md5"] == "9e107d9d372bb6826bd81d3542a419d6"

    def test_deprecate_hides_release(self, client):
        release_id = create_release(client)
        client.post(f"/api/app-versions/{release_id}/publish")

        response = client.post(f"/api/app-versions/{release_id}/deprecate")
        assert response.json() == {"message": "Release deprecated"}

        response = client.get("/api/app-versions/latest", params={"platform": "android"})
        assert response.status_code == 404

    def test_latest_all_omits_platforms_without_release(self, client):
        android_id = create_release(client)
        ios_id = create_release(client, platform="ios", version="2.0.0")
        create_release(client, platform="macos")
        for release_id in (android_id, ios_id):
            client.post(f"/api/app-versions/{release_id}/publish")

        response = client.get("/api/app-versions/latest-all")

        assert response.status_code == 200
        versions = response.json()["versions"]
        assert set(versions) == {"android", "ios"}
        assert versions["ios"]["version"] == "2.0.0"

    def test_update_and_get(self, client):
        release_id = create_release(client)

        response = client.put(
            f"/api/app-versions/{release_id}",
            json={"release_notes": None, "version": "", "file_size": 2048},
        )
        assert response.status_code == 200
        assert response.json() == {"message": "Release updated"}

        release = client.get(f"/api/app-versions/{release_id}").json()["version"]
        assert release["release_notes"] is None
        assert release["version"] == "1.0.0"
        assert release["file_size"] == 2048

    def test_delete(self, client):
        release_id = create_release(client)

        response = client.delete(f"/api/app-versions/{release_id}")
        assert response.json() == {"message": "Release deleted"}

        response = client.get(f"/api/app-versions/{release_id}")
        assert response.status_code == 404

    def test_list(self, client):
        for i in range(3):
            create_release(client, version=f"1.0.{i}")
        create_release(client, platform="linux")

        response = client.get(
            "/api/app-versions", params={"platform": "android", "page": 1, "page_size": 2}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["page"] == 1
        assert data["page_size"] == 2
        assert [v["version"] for v in data["versions"]] == ["1.0.2", "1.0.1"]


class TestErrors:
    def test_create_missing_package_url(self, client):
        response = client.post(
            "/api/app-versions", json={"platform": "android", "version": "1.0.0"}
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "VALIDATION_ERROR"
        assert data["field"] == "package_url"
        assert data["message"]

    def test_create_negative_file_size(self, client):
        response = client.post("/api/app-versions", json=release_data(file_size=-1))

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_check_update_requires_platform(self, client):
        response = client.get("/api/check-update", params={"current_version": "1.0.0"})

        assert response.status_code == 400
        assert response.json()["field"] == "platform"

    def test_latest_requires_platform(self, client):
        response = client.get("/api/app-versions/latest")
        assert response.status_code == 400

    def test_unknown_release(self, client):
        for method, path in (
            ("GET", "/api/app-versions/999"),
            ("PUT", "/api/app-versions/999"),
            ("POST", "/api/app-versions/999/publish"),
            ("POST", "/api/app-versions/999/deprecate"),
            ("DELETE", "/api/app-versions/999"),
        ):
            kwargs = {"json": {}} if method == "PUT" else {}
            response = client.request(method, path, **kwargs)
            assert response.status_code == 404, path
            assert response.json() == {
                "error": "NOT_FOUND",
                "message": "Release not found",
                "release_id": 999,
            }

    def test_non_numeric_id(self, client):
        response = client.get("/api/app-versions/abc")

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_storage_failure(self, client, database):
        create_release(client)
        with database.engine.begin() as conn:
            conn.execute(text("DROP TABLE app_versions"))

        response = client.get("/api/app-versions")

        assert response.status_code == 500
        assert response.json()["error"] == "STORAGE_ERROR"

        database.create_all()
        response = client.get("/api/app-versions")
        assert response.status_code == 200
        assert response.json()["total"] == 0

    def test_invalid_page(self, client):
        response = client.get("/api/app-versions", params={"page": 0})
        assert response.status_code == 400
