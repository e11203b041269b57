"""Background compute backend built on QThread."""

from PyQt6.QtCore import QObject, QThread, pyqtSignal, pyqtSlot

from models import GenerationRequest, GenerationResponse
from scheduler import ResponseCallback, handle_request


class GenerationThread(QThread):
    """Background thread running a single generation request."""

    completed = pyqtSignal(int, object)  # submission key, GenerationResponse

    def __init__(
        self,
        key: int,
        request: GenerationRequest,
        parent: QObject | None = None,
    ):
        super().__init__(parent)
        self.key = key
        self.request = request

    def run(self):
        """Execute the request in background."""
        self.completed.emit(self.key, handle_request(self.request))


class QtThreadBackend(QObject):
    """Runs each request on its own QThread.

    AIDEV-NOTE: Responses are delivered through a queued connection to this
    object, so callbacks always run on the thread that owns the backend (the
    Qt event loop thread). That keeps the scheduler's authoritative id
    single-writer without locks. An event loop must be running for responses
    to arrive.

    Sequence ids are only unique per scheduler, and several schedulers may
    share one backend, so in-flight work is keyed by a backend-local
    submission counter instead.
    """

    response_delivered = pyqtSignal(object)  # GenerationResponse

    def __init__(self, parent: QObject | None = None):
        super().__init__(parent)
        self._next_key = 0
        self._pending: dict[int, tuple[GenerationThread, ResponseCallback]] = {}

    @property
    def active_count(self) -> int:
        return len(self._pending)

    def submit(self, request: GenerationRequest, on_done: ResponseCallback) -> None:
        self._next_key += 1
        thread = GenerationThread(self._next_key, request)
        thread.completed.connect(self._on_completed)

        self._pending[thread.key] = (thread, on_done)
        thread.start()

    @pyqtSlot(int, object)
    def _on_completed(self, key: int, response: GenerationResponse) -> None:
        thread, on_done = self._pending.pop(key)

        # run() emits as its last step, so this returns almost immediately
        thread.wait()
        thread.deleteLater()

        on_done(response)
        self.response_delivered.emit(response)

    def wait_for_all(self) -> None:
        """Block until every started thread has finished running."""
        for thread, _ in list(self._pending.values()):
            thread.wait()
