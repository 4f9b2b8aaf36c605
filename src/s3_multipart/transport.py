from botocore.awsrequest import AWSRequest
from botocore.exceptions import BotoCoreError
from botocore.httpsession import URLLib3Session
from dataclasses import dataclass
from dataclasses import field
from s3_multipart.errors import TransportError
from s3_multipart.interfaces import ITransport
from zope.interface import implementer

import logging


logger = logging.getLogger(__name__)

_DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass
class RequestDescriptor:
    """Method, location and headers of one outgoing request.

    ``path`` is already escaped and includes the query string.
    """

    method: str
    host: str
    path: str
    port: int | None = None
    scheme: str = "https"
    headers: dict = field(default_factory=dict)

    @property
    def netloc(self):
        if self.port is None or self.port == _DEFAULT_PORTS.get(self.scheme):
            return self.host
        return f"{self.host}:{self.port}"

    @property
    def url(self):
        return f"{self.scheme}://{self.netloc}{self.path}"


@dataclass(frozen=True)
class Response:
    status_code: int
    body: bytes = b""
    headers: dict = field(default_factory=dict)


@dataclass(frozen=True)
class ConnectionParams:
    """Where to send requests and whose credentials to sign them with."""

    host: str
    port: int | None = None
    scheme: str = "https"
    access_key: str | None = field(default=None, repr=False)
    secret_key: str | None = field(default=None, repr=False)
    session_token: str | None = field(default=None, repr=False)


@implementer(ITransport)
class URLLib3Transport:
    """Sends requests through botocore's urllib3 session."""

    def __init__(self, verify=True, connect_timeout=60, read_timeout=60):
        self._session = URLLib3Session(
            verify=verify, timeout=(connect_timeout, read_timeout)
        )

    def request(self, descriptor):
        aws_request = AWSRequest(
            method=descriptor.method,
            url=descriptor.url,
            headers=descriptor.headers,
        )
        try:
            http_response = self._session.send(aws_request.prepare())
        except BotoCoreError as e:
            logger.debug("%s %s failed: %s", descriptor.method, descriptor.path, e)
            raise TransportError(
                f"{descriptor.method} {descriptor.host}{descriptor.path} failed: {e}"
            ) from e
        return Response(
            status_code=http_response.status_code,
            body=http_response.content,
            headers=dict(http_response.headers.items()),
        )

    def close(self):
        self._session.close()


class SignedTransport:
    """Builds, signs and sends bodiless requests against one endpoint."""

    def __init__(self, params, transport, signer):
        self.params = params
        self._transport = transport
        self._signer = signer

    def issue(self, method, path):
        descriptor = RequestDescriptor(
            method=method,
            host=self.params.host,
            port=self.params.port,
            scheme=self.params.scheme,
            path=path,
        )
        self._signer.sign(
            descriptor,
            "",
            self.params.access_key,
            self.params.secret_key,
            token=self.params.session_token,
        )
        logger.debug("%s %s", method, path)
        response = self._transport.request(descriptor)
        logger.debug("%s %s -> %d", method, path, response.status_code)
        return response

    def close(self):
        self._transport.close()
