"""Uploads API: store uploaded files on local disk or S3 and list them."""
