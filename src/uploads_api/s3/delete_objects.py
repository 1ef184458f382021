"""Functions for deleting objects from an S3 bucket--the "D" in CRUD."""

try:
    from mypy_boto3_s3 import S3Client
except ImportError:
    ...


def delete_s3_object(s3_client: "S3Client", bucket_name: str, object_key: str) -> None:
    """
    Delete an object from an S3 bucket.

    S3 reports success for missing keys; callers that care must check
    existence first with `object_exists_in_s3`.

    :param s3_client: The boto3 S3 client to use.
    :param bucket_name: The name of the S3 bucket.
    :param object_key: path to the object in the S3 bucket.
    """
    s3_client.delete_object(Bucket=bucket_name, Key=object_key)
