"""Pull-driven iteration over a truncation-marker listing.

A ``CursorIterator`` holds at most one page in memory.  The request for page
N+1 is only issued when the consumer asks for an item after every item of
page N has been handed out, so a slow consumer throttles the listing.
"""

from collections import deque
from s3_multipart.errors import DecodeError
from s3_multipart.models import PipelineJob

import enum
import logging


logger = logging.getLogger(__name__)


class IteratorState(enum.Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    EMITTING = "emitting"
    EXHAUSTED = "exhausted"
    ERRORED = "errored"
    CLOSED = "closed"


TERMINAL_STATES = frozenset(
    {IteratorState.EXHAUSTED, IteratorState.ERRORED, IteratorState.CLOSED}
)


class CursorIterator:
    """Lazy, single-pass sequence of the items of a paginated listing.

    ``fetch_page`` is called with a cursor and must return a ``Page``.  The
    first exception it raises is latched in ``error``, raised from ``next()``
    once, and ends the sequence; no further pages are requested afterwards.
    """

    def __init__(self, fetch_page, cursor):
        self._fetch_page = fetch_page
        self._job = PipelineJob(cursor)
        self._page = None
        self._buffer = deque()
        self.state = IteratorState.IDLE
        self.error = None
        self.pages_fetched = 0

    def __repr__(self):
        return (
            f"<CursorIterator {self.state.value} pages={self.pages_fetched} "
            f"buffered={len(self._buffer)}>"
        )

    def __iter__(self):
        return self

    def __next__(self):
        while self.state not in TERMINAL_STATES:
            if self.state is IteratorState.EMITTING:
                if self._buffer:
                    return self._buffer.popleft()
                self._page_delivered()
            else:
                self._fetch()
        raise StopIteration

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def finished(self):
        return self.state in TERMINAL_STATES

    def close(self):
        """Stop the listing; no request is issued after this returns."""
        if self.state in TERMINAL_STATES:
            return
        logger.debug("Listing closed after %d page(s)", self.pages_fetched)
        self.state = IteratorState.CLOSED
        self._job = None
        self._page = None
        self._buffer.clear()

    def _fetch(self):
        job, self._job = self._job, None
        self.state = IteratorState.FETCHING
        try:
            page = self._fetch_page(job.cursor)
            if page.is_truncated and page.next_cursor == job.cursor:
                raise DecodeError(
                    f"listing did not advance past {job.cursor!r} "
                    f"on page {job.sequence}"
                )
        except Exception as e:
            if self.state is IteratorState.CLOSED:
                logger.debug(
                    "Discarding failure of page %d after close: %s", job.sequence, e
                )
                return
            self._latch(e, job)
            raise
        if self.state is IteratorState.CLOSED:
            # closed while the request was in flight
            logger.debug("Discarding page %d fetched after close", job.sequence)
            return
        self.pages_fetched += 1
        logger.debug(
            "Fetched %s page %d: %d item(s), truncated=%s",
            job.kind,
            job.sequence,
            len(page.items),
            page.is_truncated,
        )
        self._page = (job, page)
        self._buffer.extend(page.items)
        self.state = IteratorState.EMITTING

    def _page_delivered(self):
        job, page = self._page
        self._page = None
        if page.is_truncated:
            self._job = job.successor(page.next_cursor)
            self.state = IteratorState.FETCHING
        else:
            self.state = IteratorState.EXHAUSTED
            logger.debug(
                "%s listing exhausted after %d page(s)", job.kind, self.pages_fetched
            )

    def _latch(self, error, job):
        logger.debug("%s page %d failed: %s", job.kind, job.sequence, error)
        self.error = error
        self.state = IteratorState.ERRORED
        self._buffer.clear()
