from s3_multipart.decoder import XMLResponseDecoder
from s3_multipart.errors import RemoteOpError
from s3_multipart.fetcher import object_path
from s3_multipart.fetcher import uri_escape
from s3_multipart.interfaces import ISingleItemOps
from zope.interface import implementer

import logging


logger = logging.getLogger(__name__)

ABORT_SUCCESS_STATUS = 204


@implementer(ISingleItemOps)
class SingleItemOps:
    def __init__(self, signed_transport, decoder=None):
        self._transport = signed_transport
        self._decoder = decoder if decoder is not None else XMLResponseDecoder()

    def abort_upload(self, bucket, key, upload_id):
        path = f"{object_path(bucket, key)}?uploadId={uri_escape(upload_id)}"
        response = self._transport.issue("DELETE", path)
        if response.status_code != ABORT_SUCCESS_STATUS:
            raise self._decoder.parse_error(
                response.status_code, response.body, RemoteOpError
            )
        logger.debug("Aborted upload %s of %s/%s", upload_id, bucket, key)

    def abort_item(self, upload):
        """Abort the upload an UploadItem describes."""
        self.abort_upload(upload.bucket, upload.key, upload.upload_id)
