from botocore.utils import percent_encode
from s3_multipart.decoder import XMLResponseDecoder
from s3_multipart.errors import RemoteListingError
from s3_multipart.interfaces import IPageFetcher
from s3_multipart.models import MAX_UPLOADS
from zope.interface import implementer

import logging


logger = logging.getLogger(__name__)


def uri_escape(value):
    return percent_encode(str(value), safe="-._~")


def object_path(bucket, key=None):
    if key is None:
        return f"/{uri_escape(bucket)}"
    return f"/{uri_escape(bucket)}/{percent_encode(key, safe='/-._~')}"


def uploads_query(cursor):
    """Query string for one ListMultipartUploads page.

    ``uploads`` comes first, the remaining parameters are sorted by name.
    """
    params = {"max-uploads": MAX_UPLOADS}
    if cursor.prefix:
        params["prefix"] = cursor.prefix
    if cursor.key_marker:
        params["key-marker"] = cursor.key_marker
    if cursor.upload_id_marker:
        params["upload-id-marker"] = cursor.upload_id_marker
    queries = [f"{name}={uri_escape(params[name])}" for name in sorted(params)]
    return "?" + "&".join(["uploads", *queries])


def parts_query(cursor):
    queries = []
    if cursor.part_number_marker is not None:
        queries.append(f"part-number-marker={cursor.part_number_marker}")
    queries.append(f"uploadId={uri_escape(cursor.upload_id)}")
    return "?" + "&".join(queries)


@implementer(IPageFetcher)
class PageFetcher:
    """Issues a single listing request and decodes the page it returns."""

    def __init__(self, signed_transport, decoder=None):
        self._transport = signed_transport
        self._decoder = decoder if decoder is not None else XMLResponseDecoder()

    def _get(self, path):
        response = self._transport.issue("GET", path)
        if response.status_code != 200:
            error = self._decoder.parse_error(
                response.status_code, response.body, RemoteListingError
            )
            logger.debug("Listing %s failed: %s", path, error)
            raise error
        return response.body

    def fetch_uploads_page(self, cursor):
        body = self._get(object_path(cursor.bucket) + uploads_query(cursor))
        return self._decoder.parse_list_multipart_result(cursor, body)

    def fetch_parts_page(self, cursor):
        path = object_path(cursor.bucket, cursor.key) + parts_query(cursor)
        return self._decoder.parse_list_parts_result(cursor, self._get(path))
