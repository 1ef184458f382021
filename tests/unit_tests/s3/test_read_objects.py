import pytest
from botocore.exceptions import ClientError

from uploads_api.s3.delete_objects import delete_s3_object
from uploads_api.s3.read_objects import fetch_s3_objects_metadata, object_exists_in_s3
from uploads_api.s3.write_objects import upload_s3_object
from tests.consts import TEST_BUCKET_NAME


def put_objects(s3_client, count: int, prefix: str = "") -> None:
    for i in range(count):
        upload_s3_object(s3_client, TEST_BUCKET_NAME, f"{prefix}file{i}.txt", b"data", "text/plain")


def test_fetch_walks_every_page(s3_client):
    put_objects(s3_client, 5)

    objects, truncated = fetch_s3_objects_metadata(s3_client, TEST_BUCKET_NAME, page_size=2)

    assert len(objects) == 5
    assert not truncated


def test_fetch_reports_truncation(s3_client):
    put_objects(s3_client, 5)

    objects, truncated = fetch_s3_objects_metadata(s3_client, TEST_BUCKET_NAME, max_objects=3, page_size=2)

    assert len(objects) == 3
    assert truncated


def test_fetch_exactly_at_ceiling_is_not_truncated(s3_client):
    put_objects(s3_client, 3)

    objects, truncated = fetch_s3_objects_metadata(s3_client, TEST_BUCKET_NAME, max_objects=3)

    assert len(objects) == 3
    assert not truncated


def test_fetch_with_prefix(s3_client):
    put_objects(s3_client, 2, prefix="a/")
    put_objects(s3_client, 3, prefix="b/")

    objects, _ = fetch_s3_objects_metadata(s3_client, TEST_BUCKET_NAME, prefix="a/")

    assert sorted(obj["Key"] for obj in objects) == ["a/file0.txt", "a/file1.txt"]


def test_fetch_empty_bucket(s3_client):
    assert fetch_s3_objects_metadata(s3_client, TEST_BUCKET_NAME) == ([], False)


def test_fetch_missing_bucket_raises(s3_client):
    with pytest.raises(ClientError):
        fetch_s3_objects_metadata(s3_client, "does-not-exist")


def test_object_exists_in_s3(s3_client):
    put_objects(s3_client, 1)

    assert object_exists_in_s3(s3_client, TEST_BUCKET_NAME, "file0.txt")
    assert not object_exists_in_s3(s3_client, TEST_BUCKET_NAME, "nope.txt")

    delete_s3_object(s3_client, TEST_BUCKET_NAME, "file0.txt")
    assert not object_exists_in_s3(s3_client, TEST_BUCKET_NAME, "file0.txt")
