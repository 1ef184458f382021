"""Functions for reading objects from an S3 bucket--the "R" in CRUD."""

import logging
from typing import Any, Dict, List, Optional, Tuple

from botocore.exceptions import ClientError

try:
    from mypy_boto3_s3 import S3Client
except ImportError:
    ...

logger = logging.getLogger(__name__)

# list_objects_v2 never returns more than this many keys per page
S3_MAX_PAGE_SIZE = 1000


def object_exists_in_s3(s3_client: "S3Client", bucket_name: str, object_key: str) -> bool:
    """
    Check if an object exists in the S3 bucket using head_object.

    :param s3_client: The boto3 S3 client to use.
    :param bucket_name: Name of the S3 bucket.
    :param object_key: Key of the object to check.

    :return: True if the object exists, False otherwise.
    """
    try:
        s3_client.head_object(Bucket=bucket_name, Key=object_key)
        return True
    except ClientError as err:
        error_code = err.response.get("Error", {}).get("Code")
        if error_code in ("404", "NoSuchKey", "NotFound"):
            return False
        raise


def fetch_s3_objects_metadata(
    s3_client: "S3Client",
    bucket_name: str,
    prefix: Optional[str] = None,
    max_objects: Optional[int] = None,
    page_size: int = S3_MAX_PAGE_SIZE,
) -> Tuple[List[Dict[str, Any]], bool]:
    """
    Fetch object metadata from an S3 bucket, walking every page of the listing.

    :param s3_client: The boto3 S3 client to use.
    :param bucket_name: Name of the S3 bucket.
    :param prefix: Only return keys starting with this prefix.
    :param max_objects: Stop after this many objects.
    :param page_size: Keys requested per list_objects_v2 call.

    :return: The list of object summaries (``Key``, ``Size``, ``LastModified``, ...)
        and whether the walk stopped at ``max_objects`` before the listing ended.
    """
    paginator = s3_client.get_paginator("list_objects_v2")
    params: Dict[str, Any] = {
        "Bucket": bucket_name,
        "PaginationConfig": {"PageSize": page_size},
    }
    if prefix:
        params["Prefix"] = prefix

    objects: List[Dict[str, Any]] = []
    for page in paginator.paginate(**params):
        for obj in page.get("Contents", []):
            if max_objects is not None and len(objects) >= max_objects:
                logger.warning(
                    "Listing of bucket %s truncated at %d objects", bucket_name, max_objects
                )
                return objects, True
            objects.append(obj)
    return objects, False


def generate_presigned_get_url(
    s3_client: "S3Client",
    bucket_name: str,
    object_key: str,
    expires_in: int,
    response_content_type: Optional[str] = None,
    response_content_disposition: Optional[str] = None,
) -> str:
    """
    Generate a time-limited GET URL for an object.

    :param expires_in: Lifetime of the URL in seconds.
    :param response_content_type: Content-Type S3 should answer with.
    :param response_content_disposition: Content-Disposition S3 should answer with.
    """
    params: Dict[str, Any] = {"Bucket": bucket_name, "Key": object_key}
    if response_content_type:
        params["ResponseContentType"] = response_content_type
    if response_content_disposition:
        params["ResponseContentDisposition"] = response_content_disposition
    return s3_client.generate_presigned_url(
        ClientMethod="get_object",
        Params=params,
        ExpiresIn=expires_in,
    )
