from s3_multipart.decoder import XMLResponseDecoder
from s3_multipart.fetcher import PageFetcher
from s3_multipart.interfaces import IMultipartClient
from s3_multipart.models import ListingCursor
from s3_multipart.models import PartsCursor
from s3_multipart.ops import SingleItemOps
from s3_multipart.pager import CursorIterator
from s3_multipart.pipeline import CascadePipeline
from s3_multipart.signer import SigV4Signer
from s3_multipart.transport import ConnectionParams
from s3_multipart.transport import SignedTransport
from s3_multipart.transport import URLLib3Transport
from urllib.parse import urlsplit
from zope.interface import implementer

import boto3
import logging


logger = logging.getLogger(__name__)


def _resolve_credentials(region_name, access_key, secret_key, session_token):
    if access_key and secret_key:
        return access_key, secret_key, session_token
    credentials = boto3.Session(region_name=region_name).get_credentials()
    if credentials is None:
        raise ValueError(
            "No S3 credentials: pass access/secret keys or configure the "
            "standard AWS credential chain"
        )
    frozen = credentials.get_frozen_credentials()
    return frozen.access_key, frozen.secret_key, frozen.token


def _parse_endpoint(endpoint_url, region_name, use_ssl):
    if not endpoint_url:
        scheme = "https" if use_ssl else "http"
        return scheme, f"s3.{region_name}.amazonaws.com", None
    parts = urlsplit(endpoint_url if "://" in endpoint_url else f"//{endpoint_url}")
    if not parts.hostname:
        raise ValueError(f"endpoint URL has no host: {endpoint_url!r}")
    if parts.path not in ("", "/"):
        raise ValueError(f"endpoint URL must not contain a path: {endpoint_url!r}")
    scheme = parts.scheme or ("https" if use_ssl else "http")
    if scheme not in ("http", "https"):
        raise ValueError(f"unsupported endpoint scheme: {scheme!r}")
    return scheme, parts.hostname, parts.port


@implementer(IMultipartClient)
class MultipartClient:
    """Housekeeping for incomplete multipart uploads on S3-compatible storage.

    Listings are lazy: ``list_all_*`` return iterables that request one page
    at a time as they are consumed.  ``drop_uploads`` aborts every upload a
    listing yields and stops at the first failure.
    """

    def __init__(
        self,
        endpoint_url=None,
        region_name="us-east-1",
        aws_access_key_id=None,
        aws_secret_access_key=None,
        aws_session_token=None,
        use_ssl=True,
        connect_timeout=60,
        read_timeout=60,
        transport=None,
        signer=None,
        decoder=None,
    ):
        self.region_name = region_name
        scheme, host, port = _parse_endpoint(endpoint_url, region_name, use_ssl)
        if scheme != "https":
            logger.warning(
                "S3 SSL is disabled; requests and signatures are sent in cleartext"
            )
        access_key, secret_key, token = _resolve_credentials(
            region_name, aws_access_key_id, aws_secret_access_key, aws_session_token
        )
        self.params = ConnectionParams(
            host=host,
            port=port,
            scheme=scheme,
            access_key=access_key,
            secret_key=secret_key,
            session_token=token,
        )
        if transport is None:
            transport = URLLib3Transport(
                connect_timeout=connect_timeout, read_timeout=read_timeout
            )
        if signer is None:
            signer = SigV4Signer(region_name=region_name)
        if decoder is None:
            decoder = XMLResponseDecoder()
        self._signed = SignedTransport(self.params, transport, signer)
        self.fetcher = PageFetcher(self._signed, decoder)
        self.ops = SingleItemOps(self._signed, decoder)

    def __repr__(self):
        return f"<MultipartClient {self.params.scheme}://{self.params.host}>"

    def list_multipart_uploads(
        self, bucket, prefix=None, key_marker=None, upload_id_marker=None
    ):
        cursor = ListingCursor(
            bucket=bucket,
            prefix=prefix,
            key_marker=key_marker,
            upload_id_marker=upload_id_marker,
        )
        return self.fetcher.fetch_uploads_page(cursor)

    def list_parts(self, bucket, key, upload_id, part_number_marker=None):
        cursor = PartsCursor(
            bucket=bucket,
            key=key,
            upload_id=upload_id,
            part_number_marker=part_number_marker,
        )
        return self.fetcher.fetch_parts_page(cursor)

    def list_all_incomplete_uploads(self, bucket, prefix=None):
        source = CursorIterator(
            self.fetcher.fetch_uploads_page, ListingCursor(bucket=bucket, prefix=prefix)
        )
        return CascadePipeline(source, name=f"list-uploads {bucket}")

    def list_all_parts(self, bucket, key, upload_id):
        source = CursorIterator(
            self.fetcher.fetch_parts_page,
            PartsCursor(bucket=bucket, key=key, upload_id=upload_id),
        )
        return CascadePipeline(source, name=f"list-parts {bucket}/{key}")

    def abort_multipart_upload(self, bucket, key, upload_id):
        self.ops.abort_upload(bucket, key, upload_id)

    def drop_uploads(self, bucket, key=None):
        """Abort every incomplete upload whose key starts with ``key``.

        Without ``key`` every incomplete upload in the bucket is aborted.
        Raises the first listing or abort error; uploads aborted before it
        stay aborted.
        """
        source = CursorIterator(
            self.fetcher.fetch_uploads_page, ListingCursor(bucket=bucket, prefix=key)
        )
        pipeline = CascadePipeline(
            source, action=self.ops.abort_item, name=f"drop-uploads {bucket}"
        )
        result = pipeline.run()
        logger.info(
            "Aborted %d incomplete upload(s) in %s over %d page(s)",
            result.processed,
            bucket,
            result.pages_fetched,
        )
        return result

    def close(self):
        self._signed.close()
