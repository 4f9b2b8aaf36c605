"""XML decoding of ListMultipartUploads, ListParts and error responses.

Element names are matched without their namespace, so both the namespaced
documents AWS returns and the bare ones some S3-compatible servers return
are accepted.
"""

from botocore.utils import parse_timestamp
from s3_multipart.errors import DecodeError
from s3_multipart.interfaces import IResponseDecoder
from s3_multipart.models import Page
from s3_multipart.models import PartItem
from s3_multipart.models import UploadItem
from xml.etree import ElementTree
from zope.interface import implementer

import logging


logger = logging.getLogger(__name__)


def _local_name(tag):
    return tag.rsplit("}", 1)[-1]


def _parse_document(body, operation):
    """Parse the body of an ``operation`` listing.

    The root may be named ``<operation>Result`` (AWS) or ``<operation>Response``
    (moto and some other S3-compatible servers).
    """
    if not body:
        raise DecodeError(f"empty body where a {operation} result was expected")
    try:
        root = ElementTree.fromstring(body)
    except ElementTree.ParseError as e:
        raise DecodeError(f"malformed XML in {operation} result: {e}") from e
    if _local_name(root.tag) not in (f"{operation}Result", f"{operation}Response"):
        raise DecodeError(
            f"expected a {operation} result, got {_local_name(root.tag)}"
        )
    return root


def _children(element, name):
    return [child for child in element if _local_name(child.tag) == name]


def _text(element, name):
    """Return the stripped text of the first child called name, or None."""
    for child in element:
        if _local_name(child.tag) == name:
            text = (child.text or "").strip()
            return text or None
    return None


def _boolean(element, name):
    return (_text(element, name) or "false").lower() == "true"


def _integer(element, name):
    value = _text(element, name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError as e:
        raise DecodeError(f"{name} is not an integer: {value!r}") from e


def _timestamp(element, name):
    value = _text(element, name)
    if value is None:
        return None
    try:
        return parse_timestamp(value)
    except ValueError as e:
        raise DecodeError(f"{name} is not a timestamp: {value!r}") from e


def _display_name(element, name):
    for child in _children(element, name):
        return _text(child, "DisplayName") or _text(child, "ID")
    return None


@implementer(IResponseDecoder)
class XMLResponseDecoder:
    def parse_list_multipart_result(self, cursor, body):
        root = _parse_document(body, "ListMultipartUploads")
        uploads = []
        for element in _children(root, "Upload"):
            key = _text(element, "Key")
            upload_id = _text(element, "UploadId")
            if key is None or upload_id is None:
                raise DecodeError("Upload entry without Key or UploadId")
            uploads.append(
                UploadItem(
                    bucket=cursor.bucket,
                    key=key,
                    upload_id=upload_id,
                    initiated=_timestamp(element, "Initiated"),
                    storage_class=_text(element, "StorageClass"),
                    initiator=_display_name(element, "Initiator"),
                    owner=_display_name(element, "Owner"),
                )
            )

        if not _boolean(root, "IsTruncated"):
            return Page(items=uploads)

        key_marker = _text(root, "NextKeyMarker")
        upload_id_marker = _text(root, "NextUploadIdMarker")
        if key_marker is None:
            if not uploads:
                raise DecodeError(
                    "truncated upload listing without NextKeyMarker or uploads"
                )
            logger.debug("NextKeyMarker missing, continuing after last upload")
            key_marker = uploads[-1].key
            upload_id_marker = uploads[-1].upload_id
        return Page(
            items=uploads,
            is_truncated=True,
            next_cursor=cursor.advance(key_marker, upload_id_marker),
        )

    def parse_list_parts_result(self, cursor, body):
        root = _parse_document(body, "ListParts")
        parts = []
        for element in _children(root, "Part"):
            part_number = _integer(element, "PartNumber")
            if part_number is None:
                raise DecodeError("Part entry without PartNumber")
            etag = _text(element, "ETag")
            parts.append(
                PartItem(
                    part_number=part_number,
                    last_modified=_timestamp(element, "LastModified"),
                    etag=etag.strip('"') if etag else None,
                    size=_integer(element, "Size") or 0,
                )
            )

        if not _boolean(root, "IsTruncated"):
            return Page(items=parts)

        marker = _integer(root, "NextPartNumberMarker")
        if marker is None:
            if not parts:
                raise DecodeError(
                    "truncated part listing without NextPartNumberMarker or parts"
                )
            marker = parts[-1].part_number
        return Page(items=parts, is_truncated=True, next_cursor=cursor.advance(marker))

    def parse_error(self, status, body, error_class):
        """Describe a failed response.

        The status alone suffices when the body is empty or not XML.
        """
        fields = {}
        if body:
            try:
                root = ElementTree.fromstring(body)
            except ElementTree.ParseError:
                logger.debug("Error response with status %d is not XML", status)
            else:
                fields = {
                    "code": _text(root, "Code"),
                    "message": _text(root, "Message"),
                    "resource": _text(root, "Resource"),
                    "request_id": _text(root, "RequestId"),
                }
        return error_class(status, **fields)
