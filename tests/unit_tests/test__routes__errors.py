from fastapi import status
from fastapi.testclient import TestClient

from uploads_api.main import create_app
from tests.consts import TEST_FILE_CONTENT
from tests.fixtures.fake_storage import InMemoryBackend

JSON = {"Accept": "application/json"}


def test_upload_without_files(client: TestClient):
    response = client.post("/upload")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "No file uploaded"}


def test_upload_with_empty_file_picker(client: TestClient):
    response = client.post("/upload", files={"file": ("", b"", "application/octet-stream")})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "error" in response.json()


def test_upload_too_large(local_settings):
    local_settings.max_upload_bytes = 8
    with TestClient(create_app(settings=local_settings)) as client:
        response = client.post("/upload", files={"file": ("big.bin", b"x" * 9, "application/octet-stream")})

    assert response.status_code == 413
    assert "big.bin" in response.json()["error"]


def test_upload_partial_success(local_settings):
    local_settings.max_upload_bytes = 8
    with TestClient(create_app(settings=local_settings)) as client:
        response = client.post(
            "/upload",
            files=[
                ("file", ("big.bin", b"x" * 9, "application/octet-stream")),
                ("file", ("ok.txt", b"ok", "text/plain")),
            ],
            headers=JSON,
        )
        listed = client.get("/files", headers=JSON).json()

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["uploaded_count"] == 1
    assert data["failed_count"] == 1
    big, ok = data["results"]
    assert big == {
        "original_name": "big.bin",
        "error": "'big.bin' exceeds the 8 B upload limit",
        "status_code": 413,
        "success": False,
    }
    assert ok["success"] is True
    assert listed["total_count"] == 1


def test_upload_every_file_fails_to_store(local_settings):
    storage = InMemoryBackend(failing_names={"a.txt", "b.txt"})
    with TestClient(create_app(settings=local_settings, storage=storage)) as client:
        response = client.post(
            "/upload",
            files=[("file", ("a.txt", b"a", "text/plain")), ("file", ("b.txt", b"b", "text/plain"))],
        )

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert "a.txt" in response.json()["error"]


def test_delete_missing_file(client: TestClient):
    response = client.post("/delete-file", json={"key": "1700000000000_missing.txt"})

    assert response.status_code == status.HTTP_404_NOT_FOUND
    body = response.json()
    assert body["success"] is False
    assert "not found" in body["error"]


def test_delete_without_key(client: TestClient):
    response = client.post("/delete-file", json={})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"success": False, "error": "No file key provided"}


def test_delete_with_malformed_body(client: TestClient):
    response = client.post(
        "/delete-file",
        content=b"not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "error" in response.json()


def test_listing_failure_renders_error_page(local_settings):
    storage = InMemoryBackend(list_error=True)
    with TestClient(create_app(settings=local_settings, storage=storage)) as client:
        html = client.get("/files")
        api = client.get("/files", headers=JSON)

    assert html.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert "Something went wrong" in html.text
    assert "backend unavailable" in html.text
    assert api.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert api.json() == {"error": "Failed to list files: backend unavailable"}


def test_unexpected_error_is_a_json_500(local_settings):
    class ExplodingBackend(InMemoryBackend):
        async def list(self):
            raise RuntimeError("boom")

    with TestClient(create_app(settings=local_settings, storage=ExplodingBackend())) as client:
        response = client.get("/files")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"error": "Internal server error"}


def test_serve_unknown_key(client: TestClient):
    response = client.get("/uploads/1700000000000_nope.txt")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_serve_rejects_traversal(client: TestClient, local_settings, tmp_path):
    (tmp_path / "secret.txt").write_bytes(TEST_FILE_CONTENT)

    response = client.get("/uploads/..%2Fsecret.txt")

    assert response.status_code == status.HTTP_404_NOT_FOUND
