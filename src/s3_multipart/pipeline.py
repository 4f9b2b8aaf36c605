"""List-then-act composition over a CursorIterator."""

from s3_multipart.models import PipelineResult

import enum
import logging


logger = logging.getLogger(__name__)


class PipelineState(enum.Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CLOSED = "closed"


class CascadePipeline:
    """Feeds every item of a listing through an optional per-item action.

    Iterating the pipeline yields each item after the action has succeeded
    for it.  The first error from either stage closes the listing, is stored
    in ``error`` and raised once; the pipeline is finished after that.
    Without an action the pipeline forwards the listing unchanged.

    Only one item is between the stages at a time: the source is pulled for
    the next item after the action has returned for the current one, and the
    listing fetches a page only when its previous page is used up.
    """

    def __init__(self, source, action=None, name=None):
        self._source = source
        self._action = action
        self.name = name or ("cascade" if action is not None else "listing")
        self.state = PipelineState.PENDING
        self.error = None
        self.processed = 0

    def __repr__(self):
        return (
            f"<CascadePipeline {self.name} {self.state.value} "
            f"processed={self.processed}>"
        )

    def __iter__(self):
        return self

    def __next__(self):
        if self.state not in (PipelineState.PENDING, PipelineState.RUNNING):
            raise StopIteration
        self.state = PipelineState.RUNNING

        try:
            item = next(self._source)
        except StopIteration:
            self.state = PipelineState.COMPLETED
            logger.debug("%s completed: %d item(s)", self.name, self.processed)
            raise
        except Exception as e:
            self._fail(e, "listing")
            raise

        if self._action is not None:
            try:
                self._action(item)
            except Exception as e:
                self._fail(e, "action")
                raise
        self.processed += 1
        return item

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def pages_fetched(self):
        return getattr(self._source, "pages_fetched", 0)

    def run(self):
        """Drive the pipeline to the end and return a PipelineResult.

        Raises the run's error if either stage failed.
        """
        for _item in self:
            pass
        return PipelineResult(
            processed=self.processed, pages_fetched=self.pages_fetched
        )

    def close(self):
        if self.state in (PipelineState.PENDING, PipelineState.RUNNING):
            self.state = PipelineState.CLOSED
        self._source.close()

    def _fail(self, error, stage):
        logger.debug(
            "%s stopped by %s error after %d item(s): %s",
            self.name,
            stage,
            self.processed,
            error,
        )
        self.error = error
        self.state = PipelineState.FAILED
        self._source.close()
