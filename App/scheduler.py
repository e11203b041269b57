"""Generation scheduling with supersession of stale results.

AIDEV-NOTE: Only the most recently issued request is authoritative. Older
requests still run to completion on their backend, but their responses are
dropped when they arrive. Nothing is cancelled or preempted.
"""

from typing import Callable, Protocol

from errors import GenerationError
from models import (
    GenerationOptions,
    GenerationRequest,
    GenerationResponse,
    GenerationResult,
    PixelBuffer,
    RequestState,
)
from vectorizer import generate

ResponseCallback = Callable[[GenerationResponse], None]

# Number of most recent sequence ids whose state is remembered
STATE_HISTORY = 64


def handle_request(request: GenerationRequest) -> GenerationResponse:
    """Run one generation request and wrap the outcome in a response.

    AIDEV-NOTE: This is the message handler for compute backends. It never
    raises; failures travel back in the response's error field.
    """
    try:
        result = generate(request.image_data, request.options)
        return GenerationResponse(id=request.sequence_id, result=result)
    except GenerationError as e:
        return GenerationResponse(id=request.sequence_id, error=str(e))
    except Exception as e:
        message = str(e) or "Unknown error generating code"
        return GenerationResponse(id=request.sequence_id, error=message)


class ComputeBackend(Protocol):
    """Where generation requests are executed."""

    def submit(self, request: GenerationRequest, on_done: ResponseCallback) -> None:
        """Start computing a request and call on_done with its response."""
        ...


class InProcessBackend:
    """Runs each request to completion on the calling thread."""

    def submit(self, request: GenerationRequest, on_done: ResponseCallback) -> None:
        on_done(handle_request(request))


class GenerationScheduler:
    """Issues generation requests and keeps only the latest result.

    Args:
        backend: Compute backend, in-process when None
        on_result: Called with (sequence_id, result) when a request resolves
        on_error: Called with (sequence_id, message) when a request fails
        state_history: How many recent sequence ids state() can report on
    """

    def __init__(
        self,
        backend: ComputeBackend | None = None,
        on_result: Callable[[int, GenerationResult], None] | None = None,
        on_error: Callable[[int, str], None] | None = None,
        state_history: int = STATE_HISTORY,
    ):
        self.backend = backend or InProcessBackend()
        self.on_result = on_result
        self.on_error = on_error
        self.state_history = state_history

        self.result: GenerationResult | None = None
        self.error: str | None = None

        self._last_id = 0
        self._current_id: int | None = None
        self._states: dict[int, RequestState] = {}

    @property
    def current_id(self) -> int | None:
        """Sequence id of the outstanding authoritative request, if any."""
        return self._current_id

    @property
    def pending(self) -> bool:
        return self._current_id is not None

    def state(self, sequence_id: int) -> RequestState | None:
        """State of a recent request, None if unknown or already forgotten."""
        return self._states.get(sequence_id)

    def _set_state(self, sequence_id: int, state: RequestState) -> None:
        # Late responses for forgotten ids must not re-grow the map
        if sequence_id <= self._last_id - self.state_history:
            return
        self._states[sequence_id] = state
        # Ids are inserted in issue order, so the first key is the oldest
        while len(self._states) > self.state_history:
            del self._states[next(iter(self._states))]

    def generate(
        self,
        image_data: PixelBuffer,
        options: GenerationOptions | None = None,
    ) -> int:
        """Issue a new request, superseding any outstanding one.

        Args:
            image_data: Pixels to vectorize, copied before dispatch
            options: Generation options, defaults if None

        Returns:
            The request's sequence id
        """
        self._last_id += 1
        sequence_id = self._last_id
        self._current_id = sequence_id
        self._set_state(sequence_id, RequestState.ISSUED)

        request = GenerationRequest(
            sequence_id=sequence_id,
            image_data=image_data.copy(),
            options=options or GenerationOptions(),
        )

        self._set_state(sequence_id, RequestState.COMPUTING)
        self.backend.submit(request, self._on_response)
        return sequence_id

    def _on_response(self, response: GenerationResponse) -> None:
        """Apply a finished response if it is still authoritative."""
        if response.id != self._current_id:
            self._set_state(response.id, RequestState.SUPERSEDED)
            return

        self._current_id = None

        if response.error is not None:
            self._set_state(response.id, RequestState.FAILED)
            self.error = response.error
            if self.on_error:
                self.on_error(response.id, response.error)
            return

        self._set_state(response.id, RequestState.RESOLVED)
        self.result = response.result
        self.error = None
        if self.on_result:
            self.on_result(response.id, response.result)
