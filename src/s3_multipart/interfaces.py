from zope.interface import Attribute
from zope.interface import Interface


class ITransport(Interface):
    """Issues one HTTP request and returns the complete response."""

    def request(descriptor):
        """Send a RequestDescriptor, return a Response."""

    def close():
        """Release any held connections."""


class IRequestSigner(Interface):
    """Adds authentication headers to a request."""

    def sign(descriptor, payload_hash, access_key, secret_key, token=None):
        """Mutate descriptor headers in place and return the descriptor."""


class IResponseDecoder(Interface):
    """Turns response bodies into pages or errors."""

    def parse_list_multipart_result(cursor, body):
        """Decode a ListMultipartUploads body into a Page of UploadItem."""

    def parse_list_parts_result(cursor, body):
        """Decode a ListParts body into a Page of PartItem."""

    def parse_error(status, body, error_class):
        """Return an error_class instance describing a failed response."""


class IPageFetcher(Interface):
    """Fetches one page of a paginated listing."""

    def fetch_uploads_page(cursor):
        """Return the Page of incomplete uploads at a ListingCursor."""

    def fetch_parts_page(cursor):
        """Return the Page of parts at a PartsCursor."""


class ISingleItemOps(Interface):
    """Non-paginated operations on one upload."""

    def abort_upload(bucket, key, upload_id):
        """Abort one multipart upload."""


class IMultipartClient(Interface):
    """Entry point for multipart upload housekeeping."""

    region_name = Attribute("Signing region")

    def list_multipart_uploads(
        bucket, prefix=None, key_marker=None, upload_id_marker=None
    ):
        """Return a single page of incomplete uploads."""

    def list_parts(bucket, key, upload_id, part_number_marker=None):
        """Return a single page of parts."""

    def list_all_incomplete_uploads(bucket, prefix=None):
        """Iterate over every incomplete upload under prefix."""

    def list_all_parts(bucket, key, upload_id):
        """Iterate over every part of one upload."""

    def abort_multipart_upload(bucket, key, upload_id):
        """Abort one upload."""

    def drop_uploads(bucket, key=None):
        """Abort every incomplete upload under key; return a PipelineResult."""
