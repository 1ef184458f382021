"""
Configuration management for the Uploads API.

Contains the Pydantic settings and the startup decision between the local-disk
and S3 storage backends.
"""
