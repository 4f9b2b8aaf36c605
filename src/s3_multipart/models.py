"""Value types flowing through the listing pipeline.

Cursors, pages and items are frozen; a cursor is never advanced in place,
``advance()`` derives its successor.
"""

from dataclasses import dataclass
from dataclasses import replace
from datetime import datetime
from typing import ClassVar


MAX_UPLOADS = 1000


@dataclass(frozen=True)
class ListingCursor:
    """Position in the incomplete-upload listing of one bucket.

    ``None`` markers mean the start of the listing.
    """

    kind: ClassVar[str] = "uploads"

    bucket: str
    prefix: str | None = None
    key_marker: str | None = None
    upload_id_marker: str | None = None

    @property
    def at_start(self):
        return self.key_marker is None and self.upload_id_marker is None

    def advance(self, key_marker, upload_id_marker=None):
        return replace(self, key_marker=key_marker, upload_id_marker=upload_id_marker)


@dataclass(frozen=True)
class PartsCursor:
    """Position in the part listing of one upload.

    Only ``None`` marks the start; ``0`` is sent like any other marker.
    """

    kind: ClassVar[str] = "parts"

    bucket: str
    key: str
    upload_id: str
    part_number_marker: int | None = None

    @property
    def at_start(self):
        return self.part_number_marker is None

    def advance(self, part_number_marker):
        return replace(self, part_number_marker=part_number_marker)


@dataclass(frozen=True)
class UploadItem:
    bucket: str
    key: str
    upload_id: str
    initiated: datetime | None = None
    storage_class: str | None = None
    initiator: str | None = None
    owner: str | None = None


@dataclass(frozen=True)
class PartItem:
    part_number: int
    last_modified: datetime | None = None
    etag: str | None = None
    size: int = 0


@dataclass(frozen=True)
class Page:
    """One decoded listing response."""

    items: tuple = ()
    is_truncated: bool = False
    next_cursor: ListingCursor | PartsCursor | None = None

    def __post_init__(self):
        if self.is_truncated != (self.next_cursor is not None):
            raise ValueError(
                "a page carries a next cursor if and only if it is truncated "
                f"(is_truncated={self.is_truncated}, next_cursor={self.next_cursor!r})"
            )
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    def __len__(self):
        return len(self.items)


@dataclass(frozen=True)
class PipelineJob:
    """A single unit of pagination work: fetch the page at ``cursor``."""

    cursor: ListingCursor | PartsCursor
    sequence: int = 0

    @property
    def kind(self):
        return self.cursor.kind

    def successor(self, cursor):
        if type(cursor) is not type(self.cursor):
            raise TypeError(
                f"cannot continue a {self.kind} job with a {type(cursor).__name__}"
            )
        return PipelineJob(cursor=cursor, sequence=self.sequence + 1)


@dataclass(frozen=True)
class PipelineResult:
    processed: int = 0
    pages_fetched: int = 0
