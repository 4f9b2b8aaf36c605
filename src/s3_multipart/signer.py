from botocore.auth import EMPTY_SHA256_HASH
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials
from s3_multipart.interfaces import IRequestSigner
from zope.interface import implementer


class _FixedPayloadSigV4Auth(SigV4Auth):
    """SigV4 with a caller-supplied payload hash and S3 path handling."""

    def __init__(self, credentials, service_name, region_name, payload_hash):
        super().__init__(credentials, service_name, region_name)
        self._payload_hash = payload_hash

    def payload(self, request):
        return self._payload_hash

    def _normalize_url_path(self, path):
        # S3 object keys may legitimately contain "//" or "/./"
        return path


@implementer(IRequestSigner)
class SigV4Signer:
    """Signs request descriptors with AWS Signature Version 4."""

    def __init__(self, region_name="us-east-1", service_name="s3"):
        self.region_name = region_name
        self.service_name = service_name

    def sign(self, descriptor, payload_hash, access_key, secret_key, token=None):
        payload_hash = payload_hash or EMPTY_SHA256_HASH
        aws_request = AWSRequest(
            method=descriptor.method,
            url=descriptor.url,
            headers=dict(descriptor.headers),
        )
        aws_request.headers["X-Amz-Content-SHA256"] = payload_hash
        auth = _FixedPayloadSigV4Auth(
            Credentials(access_key, secret_key, token),
            self.service_name,
            self.region_name,
            payload_hash,
        )
        auth.add_auth(aws_request)
        descriptor.headers.update(aws_request.headers.items())
        return descriptor
