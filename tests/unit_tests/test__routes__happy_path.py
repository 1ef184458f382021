from fastapi import status
from fastapi.testclient import TestClient

from tests.consts import TEST_FILE_CONTENT, TEST_PDF_CONTENT, TEST_PNG_CONTENT

JSON = {"Accept": "application/json"}


def upload(client: TestClient, *files, headers=JSON):
    return client.post(
        "/upload",
        files=[("file", file) for file in files],
        headers=headers,
    )


def test_upload_form(client: TestClient):
    response = client.get("/")
    assert response.status_code == status.HTTP_200_OK
    assert 'name="file"' in response.text
    assert "10.0 MB" in response.text


def test_upload_file__happy_path(client: TestClient):
    response = upload(client, ("report.pdf", TEST_PDF_CONTENT, "application/pdf"))

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["uploaded_count"] == 1
    assert data["failed_count"] == 0
    [result] = data["results"]
    assert result["original_name"] == "report.pdf"
    assert result["key"].endswith("_report.pdf")
    assert result["url"] == f"/uploads/{result['key']}"
    assert result["content_type"] == "application/pdf"
    assert result["is_image"] is False


def test_upload_renders_html_by_default(client: TestClient):
    response = upload(client, ("photo.png", TEST_PNG_CONTENT, "image/png"), headers={})

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"].startswith("text/html")
    assert "photo.png" in response.text
    assert "uploaded successfully" in response.text
    assert "<img" in response.text


def test_upload_same_name_twice_in_one_batch(client: TestClient):
    response = upload(
        client,
        ("same.txt", b"one", "text/plain"),
        ("same.txt", b"two", "text/plain"),
    )

    keys = [result["key"] for result in response.json()["results"]]
    assert len(set(keys)) == 2


def test_list_files(client: TestClient):
    for name in ("a.txt", "b.png", "c.zip"):
        upload(client, (name, TEST_FILE_CONTENT, "application/octet-stream"))

    response = client.get("/files", headers=JSON)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["total_count"] == 3
    assert sorted(entry["display_name"] for entry in data["files"]) == ["a.txt", "b.png", "c.zip"]
    categories = {entry["display_name"]: entry["category"] for entry in data["files"]}
    assert categories == {"a.txt": "text", "b.png": "image", "c.zip": "archive"}
    for entry in data["files"]:
        assert entry["download_url"] == f"/uploads/{entry['key']}?download=1"


def test_list_files_html(client: TestClient):
    upload(client, ("report.pdf", TEST_PDF_CONTENT, "application/pdf"))

    response = client.get("/files")

    assert response.status_code == status.HTTP_200_OK
    assert "report.pdf" in response.text
    assert "Show download URL" in response.text
    assert "Delete" in response.text


def test_list_files_empty(client: TestClient):
    response = client.get("/files")
    assert response.status_code == status.HTTP_200_OK
    assert "No files uploaded yet" in response.text


def test_preview_and_download_stored_file(client: TestClient):
    result = upload(client, ("report.pdf", TEST_PDF_CONTENT, "application/pdf")).json()["results"][0]

    preview = client.get(result["url"])
    assert preview.status_code == status.HTTP_200_OK
    assert preview.content == TEST_PDF_CONTENT
    assert preview.headers["content-type"] == "application/pdf"
    assert preview.headers["content-disposition"].startswith("inline")

    download = client.get(f"/uploads/{result['key']}?download=1")
    assert download.status_code == status.HTTP_200_OK
    disposition = download.headers["content-disposition"]
    assert disposition.startswith("attachment")
    assert "report.pdf" in disposition
    assert result["key"] not in disposition


def test_delete_file(client: TestClient):
    key = upload(client, ("gone.txt", b"bye", "text/plain")).json()["results"][0]["key"]

    response = client.post("/delete-file", json={"key": key})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True}
    assert client.get("/files", headers=JSON).json()["total_count"] == 0
    assert client.get(f"/uploads/{key}").status_code == status.HTTP_404_NOT_FOUND


def test_health(client: TestClient):
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["backend_mode"] == "local"
