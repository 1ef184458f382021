"""
Adapter layer for the Uploads API.

Contains the storage abstraction and its local-disk and S3 implementations.
The implementation is chosen once at startup from the configured credentials.
"""
