from s3_documents import error_response
from s3_documents import parts_response
from s3_documents import uploads_response
from s3_multipart.errors import DecodeError
from s3_multipart.errors import RemoteListingError
from s3_multipart.fetcher import PageFetcher
from s3_multipart.fetcher import object_path
from s3_multipart.fetcher import parts_query
from s3_multipart.fetcher import uploads_query
from s3_multipart.interfaces import IPageFetcher
from s3_multipart.models import ListingCursor
from s3_multipart.models import PartsCursor
from s3_multipart.transport import ConnectionParams
from s3_multipart.transport import Response
from s3_multipart.transport import SignedTransport

import pytest


@pytest.fixture
def fetcher(transport, signer):
    params = ConnectionParams(
        host="s3.example.com", access_key="AKIDEXAMPLE", secret_key="secret"
    )
    return PageFetcher(SignedTransport(params, transport, signer))


class TestUploadsQuery:
    def test_start_of_listing(self):
        assert uploads_query(ListingCursor("b")) == "?uploads&max-uploads=1000"

    def test_parameters_sorted_after_uploads(self):
        cursor = ListingCursor(
            "b", prefix="logs/", key_marker="logs/c", upload_id_marker="id"
        )
        assert uploads_query(cursor) == (
            "?uploads&key-marker=logs%2Fc&max-uploads=1000"
            "&prefix=logs%2F&upload-id-marker=id"
        )

    def test_values_escaped_individually(self):
        cursor = ListingCursor("b", prefix="a b&c=d")
        assert uploads_query(cursor) == "?uploads&max-uploads=1000&prefix=a%20b%26c%3Dd"

    def test_empty_prefix_omitted(self):
        assert "prefix" not in uploads_query(ListingCursor("b", prefix=""))


class TestPartsQuery:
    def test_start_of_listing(self):
        assert parts_query(PartsCursor("b", "k", "u1")) == "?uploadId=u1"

    def test_marker_first(self):
        cursor = PartsCursor("b", "k", "u1", part_number_marker=12)
        assert parts_query(cursor) == "?part-number-marker=12&uploadId=u1"

    def test_zero_marker_is_sent(self):
        cursor = PartsCursor("b", "k", "u1", part_number_marker=0)
        assert parts_query(cursor) == "?part-number-marker=0&uploadId=u1"


class TestObjectPath:
    def test_bucket_only(self):
        assert object_path("test-bucket") == "/test-bucket"

    def test_key_keeps_slashes(self):
        assert object_path("b", "dir/my file.bin") == "/b/dir/my%20file.bin"


class TestPageFetcher:
    def test_interface_provided(self, fetcher):
        assert IPageFetcher.providedBy(fetcher)

    def test_fetch_uploads_page(self, fetcher, transport, signer):
        transport.queue(uploads_response([("a", "id-a")]))
        page = fetcher.fetch_uploads_page(ListingCursor("test-bucket"))

        assert [u.key for u in page.items] == ["a"]
        assert transport.calls == [("GET", "/test-bucket?uploads&max-uploads=1000")]
        assert transport.requests[0].host == "s3.example.com"
        assert transport.requests[0].headers["Authorization"] == "test AKIDEXAMPLE"
        assert signer.signed == [
            ("/test-bucket?uploads&max-uploads=1000", "", "AKIDEXAMPLE", "secret")
        ]

    def test_fetch_parts_page(self, fetcher, transport):
        transport.queue(
            parts_response([(1, "e1", 10)], truncated=True, next_part_number_marker=1)
        )
        page = fetcher.fetch_parts_page(PartsCursor("test-bucket", "dir/k", "u1"))

        assert page.is_truncated
        assert page.next_cursor.part_number_marker == 1
        assert transport.calls == [("GET", "/test-bucket/dir/k?uploadId=u1")]

    def test_non_200_raises_listing_error(self, fetcher, transport):
        transport.queue(error_response(404, "NoSuchBucket", "No such bucket"))
        with pytest.raises(RemoteListingError) as excinfo:
            fetcher.fetch_uploads_page(ListingCursor("missing"))
        assert excinfo.value.code == "NoSuchBucket"
        assert excinfo.value.status == 404
        assert len(transport.requests) == 1

    def test_success_with_garbage_body(self, fetcher, transport):
        transport.queue(Response(200, b"not xml"))
        with pytest.raises(DecodeError):
            fetcher.fetch_parts_page(PartsCursor("b", "k", "u"))
