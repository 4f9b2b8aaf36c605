"""Paginated listing and cleanup of S3 multipart uploads."""

from s3_multipart.errors import DecodeError
from s3_multipart.errors import MultipartError
from s3_multipart.errors import RemoteListingError
from s3_multipart.errors import RemoteOpError
from s3_multipart.errors import TransportError
from s3_multipart.s3client import MultipartClient


__all__ = [
    "DecodeError",
    "MultipartClient",
    "MultipartError",
    "RemoteListingError",
    "RemoteOpError",
    "TransportError",
]
