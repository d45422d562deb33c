"""Busy flags, cancellation and timeouts for slow collaborators.

Content generation, image generation, file reads and export run off the
UI thread. Each kind of call owns a BusyTask:

    task = BusyTask("Generate content", timeout_s=60)
    run_collaborator(task, lambda token: client.generate(prompt), apply_result)

- ``begin()`` refuses a second call while one is in flight (the trigger is
  disabled through ``task.busy``)
- results re-enter the editor on the UI thread and only for the live token,
  so a late or cancelled call can never overwrite newer edits
- every terminal path (success, failure, timeout, cancel) clears ``busy``
- a call object lives until its worker thread has finished, even past a
  timeout; ``shutdown()`` cancels it and waits for the thread
"""

import logging
import threading
from typing import Any, Callable, Optional

from PyQt5.QtCore import QObject, QThread, QTimer, pyqtSignal, pyqtSlot

from constants import COLLABORATOR_SHUTDOWN_WAIT_MS, DEFAULT_COLLABORATOR_TIMEOUT_S
from utils.logger import notify_error

logger = logging.getLogger(__name__)


class CollaboratorError(Exception):
    """A collaborator call failed"""


class CollaboratorTimeout(CollaboratorError):
    """A collaborator call did not finish within its timeout"""


class CollaboratorCancelled(CollaboratorError):
    """A collaborator call was cancelled before it finished"""


class CancelToken:
    """Thread-safe cancellation flag handed to the blocking call"""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self):
        if self._event.is_set():
            raise CollaboratorCancelled("Call was cancelled")


class BusyTask:
    """Busy flag plus the token of the call currently in flight"""

    def __init__(self, name: str, timeout_s: float = DEFAULT_COLLABORATOR_TIMEOUT_S):
        self.name = name
        self.timeout_s = float(timeout_s)
        self._token: Optional[CancelToken] = None

    @property
    def busy(self) -> bool:
        return self._token is not None

    def begin(self) -> Optional[CancelToken]:
        """Start a call. Returns None while another call is still in flight."""
        if self._token is not None:
            logger.debug("%s already running", self.name)
            return None
        self._token = CancelToken()
        return self._token

    def _finish(self, token: CancelToken) -> bool:
        if token is None or token is not self._token:
            logger.debug("%s: ignoring stale result", self.name)
            return False
        self._token = None
        return True

    def resolve(self, token: CancelToken, result: Any, on_success: Callable[[Any], None],
                on_error: Optional[Callable[[BaseException], None]] = None) -> bool:
        """Deliver a result. Stale or cancelled tokens are ignored.

        A result the editor rejects (CollaboratorError from ``on_success``)
        is reported like a failed call.
        """
        if not self._finish(token):
            return False
        try:
            on_success(result)
        except CollaboratorError as e:
            self._report(e, on_error)
        return True

    def fail(self, token: CancelToken, error: BaseException,
             on_error: Optional[Callable[[BaseException], None]] = None) -> bool:
        if not self._finish(token):
            return False
        self._report(error, on_error)
        return True

    def expire(self, token: CancelToken, on_error: Optional[Callable[[BaseException], None]] = None) -> bool:
        """Give up on a call that ran past its timeout"""
        if not self._finish(token):
            return False
        token.cancel()
        self._report(CollaboratorTimeout(f"{self.name} timed out after {self.timeout_s:g}s"), on_error)
        return True

    def cancel(self, token: Optional[CancelToken] = None) -> bool:
        """User cancel: clear busy, signal the call, report nothing

        With ``token``, only that call is cancelled, and only while it is
        still the one in flight.
        """
        current = self._token
        if current is None or (token is not None and token is not current):
            return False
        token = current
        token.cancel()
        self._token = None
        logger.info("%s cancelled", self.name)
        return True

    def _report(self, error: BaseException, on_error):
        logger.warning("%s failed: %s", self.name, error)
        if on_error is not None:
            on_error(error)
        else:
            notify_error(self.name, str(error))


class CollaboratorWorker(QThread):
    """Runs one blocking collaborator call off the UI thread"""

    succeeded = pyqtSignal(object)  # result
    failed = pyqtSignal(object)     # exception

    def __init__(self, fn: Callable[[CancelToken], Any], token: CancelToken, parent=None):
        super().__init__(parent)
        self.fn = fn
        self.token = token

    def run(self):
        try:
            result = self.fn(self.token)
        except Exception as e:
            self.failed.emit(e)
        else:
            self.succeeded.emit(result)


class CollaboratorCall(QObject):
    """UI-thread side of one call: worker, timeout timer and callbacks

    ``done`` fires once the worker thread has finished; the worker and the
    call are then scheduled for deletion.
    """

    done = pyqtSignal()

    def __init__(self, task: BusyTask, token: CancelToken, fn, on_success, on_error=None, parent=None):
        super().__init__(parent)
        self.task = task
        self.token = token
        self.on_success = on_success
        self.on_error = on_error

        self.worker = CollaboratorWorker(fn, token)
        self.worker.succeeded.connect(self._on_succeeded)
        self.worker.failed.connect(self._on_failed)
        self.worker.finished.connect(self._on_worker_finished)

        self.timer = QTimer(self)
        self.timer.setSingleShot(True)
        self.timer.timeout.connect(self._on_timeout)

    def start(self):
        self.timer.start(int(self.task.timeout_s * 1000))
        self.worker.start()

    @property
    def running(self) -> bool:
        return self.worker.isRunning()

    def wait(self, timeout_ms: int) -> bool:
        """Block until the worker thread ends. Returns False on timeout."""
        return self.worker.wait(timeout_ms)

    def shutdown(self, timeout_ms: int = COLLABORATOR_SHUTDOWN_WAIT_MS) -> bool:
        """Cancel the call and wait for its thread

        Returns:
            False if the blocking call ignored the cancel and is still running
        """
        self.timer.stop()
        self.token.cancel()
        self.task.cancel(self.token)
        self.worker.quit()
        if not self.worker.wait(timeout_ms):
            logger.warning("%s still running after %d ms", self.task.name, timeout_ms)
            return False
        return True

    @pyqtSlot(object)
    def _on_succeeded(self, result):
        self.timer.stop()
        self.task.resolve(self.token, result, self.on_success, self.on_error)

    @pyqtSlot(object)
    def _on_failed(self, error):
        self.timer.stop()
        self.task.fail(self.token, error, self.on_error)

    @pyqtSlot()
    def _on_timeout(self):
        self.task.expire(self.token, self.on_error)

    @pyqtSlot()
    def _on_worker_finished(self):
        self.timer.stop()
        self.done.emit()
        self.worker.deleteLater()
        self.deleteLater()


def run_collaborator(task: BusyTask, fn: Callable[[CancelToken], Any], on_success: Callable[[Any], None],
                     on_error: Optional[Callable[[BaseException], None]] = None,
                     parent: Optional[QObject] = None) -> Optional[CollaboratorCall]:
    """Start ``fn(token)`` on a worker thread with the task's timeout

    Returns:
        The running call (keep a reference), or None if the task is busy
    """
    token = task.begin()
    if token is None:
        return None
    call = CollaboratorCall(task, token, fn, on_success, on_error, parent)
    call.start()
    return call
