class MultipartError(Exception):
    """Base class for everything raised by this package."""


class TransportError(MultipartError):
    """The HTTP exchange failed before a status code was received."""


class DecodeError(MultipartError):
    """A response body could not be turned into a page."""


class RemoteError(MultipartError):
    """Non-success status returned by the remote service."""

    def __init__(self, status, code=None, message=None, resource=None, request_id=None):
        self.status = status
        self.code = code or f"HTTP{status}"
        self.message = message or ""
        self.resource = resource
        self.request_id = request_id
        super().__init__(str(self))

    def __str__(self):
        text = f"{self.code} (status {self.status})"
        if self.message:
            text = f"{text}: {self.message}"
        return text


class RemoteListingError(RemoteError):
    """A listing request did not return 200."""


class RemoteOpError(RemoteError):
    """A single-item operation did not return its success status."""
