"""Functions for writing objects to an S3 bucket--the "C" and "U" in CRUD."""

from typing import BinaryIO, Optional, Union

try:
    from mypy_boto3_s3 import S3Client
except ImportError:
    ...

from uploads_api.file_types import DEFAULT_CONTENT_TYPE


def upload_s3_object(
    s3_client: "S3Client",
    bucket_name: str,
    object_key: str,
    file_content: Union[bytes, BinaryIO],
    content_type: Optional[str] = None,
    cache_control: Optional[str] = None,
) -> None:
    """
    Upload a file to an S3 bucket.

    :param s3_client: The boto3 S3 client to use.
    :param bucket_name: The name of the S3 bucket.
    :param object_key: path to the object in the S3 bucket.
    :param file_content: The content of the file to upload, as bytes or a readable binary stream.
    :param content_type: The MIME type of the file, e.g. "text/plain" for a text file.
    :param cache_control: Optional Cache-Control directive stored with the object.
    """
    extra_args = {"ContentType": content_type or DEFAULT_CONTENT_TYPE}
    if cache_control:
        extra_args["CacheControl"] = cache_control
    s3_client.put_object(
        Bucket=bucket_name,
        Key=object_key,
        Body=file_content,
        **extra_args,
    )
