"""Delayed, cancellable verdict check for a fresh submission."""

import logging
import threading
from collections.abc import Callable
from typing import Optional

from cf.client import CodeforcesClient
from cf.exceptions import CodeforcesError
from cf.models import SubmissionStatus

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = 5.0
DEFAULT_TIMEOUT_SECONDS = 60.0


class ScheduledStatusCheck:
    """Runs one get_submission_status call after a delay on a timer thread.

    The check is best-effort: failures are logged and leave the result as
    None. cancel() before the delay elapses prevents any request.
    """

    def __init__(
        self,
        client: CodeforcesClient,
        submission_id: str,
        delay: float = DEFAULT_DELAY_SECONDS,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        on_result: Optional[Callable[[SubmissionStatus], None]] = None,
    ) -> None:
        self._client = client
        self._submission_id = submission_id
        self._delay = delay
        self._timeout = timeout
        self._on_result = on_result
        self._result: Optional[SubmissionStatus] = None
        self._finished = threading.Event()
        self._timer = threading.Timer(delay, self._run)
        self._timer.daemon = True
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._finished.is_set()

    @property
    def result(self) -> Optional[SubmissionStatus]:
        return self._result

    def start(self) -> "ScheduledStatusCheck":
        self._timer.start()
        return self

    def cancel(self) -> None:
        self._cancelled = True
        self._timer.cancel()
        self._finished.set()

    def wait(self, timeout: Optional[float] = None) -> Optional[SubmissionStatus]:
        """Block until the check finishes or timeout elapses.

        The default waits for the delay plus the check's own timeout.
        """
        if timeout is None:
            timeout = self._delay + self._timeout
        self._finished.wait(timeout)
        return self._result

    def _run(self) -> None:
        try:
            if self._cancelled:
                return
            self._result = self._client.get_submission_status(self._submission_id)
            if self._on_result is not None:
                self._on_result(self._result)
        except CodeforcesError as e:
            logger.warning("Failed to get submission status: %s", e.message)
        finally:
            self._finished.set()
