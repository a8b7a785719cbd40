from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable

from ..clients.base import CartContextProvider, SubmissionClient, ValidationClient
from ..models.upload import UploadedFile
from ..models.workflow_result import CompletionNotice, NoticeSeverity, WorkflowResult
from .orchestrator import run_workflow

"""Upload session: run tokens, processing flag and completion signal.

The session is the host-side owner of presentation state. Every call to
process() starts a new run with a fresh token; starting a run (or calling
cancel()) invalidates the previous token. When a stale run finishes, its
result is returned to its caller but is not published, does not raise the
completion notice and leaves the processing flag to the newer run.
"""

__all__ = [
    "Notifier",
    "UploadSession",
    "log_notifier",
]

logger = logging.getLogger(__name__)

Notifier = Callable[[CompletionNotice], None]

_SEVERITY_LEVELS = {
    NoticeSeverity.SUCCESS: logging.INFO,
    NoticeSeverity.WARNING: logging.WARNING,
    NoticeSeverity.ERROR: logging.ERROR,
}


def log_notifier(notice: CompletionNotice) -> None:
    """Default notifier: log the notice at a level matching its severity."""
    logger.log(_SEVERITY_LEVELS[notice.severity], f"{notice.title}: {notice.message}")


class UploadSession:
    """Runs uploads one at a time and publishes only the latest run's result."""

    def __init__(
        self,
        validation_client: ValidationClient,
        submission_client: SubmissionClient,
        cart_provider: CartContextProvider | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.validation_client = validation_client
        self.submission_client = submission_client
        self.cart_provider = cart_provider
        self.notifier = notifier or log_notifier
        self._lock = threading.Lock()
        self._tokens = itertools.count(1)
        self._active_token: int | None = None
        self._processing = False
        self._result: WorkflowResult | None = None

    @property
    def processing(self) -> bool:
        return self._processing

    @property
    def result(self) -> WorkflowResult | None:
        """Result of the most recent non-stale run."""
        return self._result

    def _begin(self) -> int:
        with self._lock:
            token = next(self._tokens)
            self._active_token = token
            self._processing = True
            self._result = None  # 前回結果は破棄して再構築
            return token

    def _finish(self, token: int, result: WorkflowResult) -> bool:
        with self._lock:
            if token != self._active_token:
                return False
            self._result = result
            self._processing = False
            self._active_token = None
            return True

    def cancel(self) -> None:
        """Invalidate the in-flight run, if any."""
        with self._lock:
            if self._active_token is not None:
                logger.info(f"run {self._active_token} cancelled")
            self._active_token = None
            self._processing = False

    def process(self, upload: UploadedFile) -> WorkflowResult:
        """Run the workflow for one upload and signal completion once."""
        token = self._begin()
        logger.debug(f"run {token} started: {upload.name}")
        try:
            result = run_workflow(
                upload,
                self.validation_client,
                self.submission_client,
                cart_provider=self.cart_provider,
            )
        except BaseException:
            # 想定外の例外でも processing フラグは必ず戻す
            with self._lock:
                if token == self._active_token:
                    self._processing = False
                    self._active_token = None
            raise

        if not self._finish(token, result):
            logger.warning(f"run {token} ({upload.name}) superseded; result not published")
            return result
        self.notifier(result.completion_notice())
        return result
