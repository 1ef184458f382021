"""Thin functions over a boto3 S3 client, one module per CRUD verb."""
