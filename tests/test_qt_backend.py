"""Tests for the QThread compute backend."""

import pytest
from PyQt6.QtCore import QThread

from models import GenerationOptions, PixelBuffer, RequestState
from qt_backend import QtThreadBackend
from scheduler import GenerationScheduler
from vectorizer import generate

TERMINAL = {RequestState.RESOLVED, RequestState.SUPERSEDED, RequestState.FAILED}


@pytest.fixture
def backend(qapp):
    backend = QtThreadBackend()
    yield backend
    backend.wait_for_all()


def test_request_resolves_on_background_thread(qtbot, backend, gradient_buffer):
    scheduler = GenerationScheduler(backend)

    with qtbot.waitSignal(backend.response_delivered, timeout=5000):
        sequence_id = scheduler.generate(gradient_buffer)

    assert scheduler.state(sequence_id) is RequestState.RESOLVED
    assert scheduler.result == generate(gradient_buffer)
    assert backend.active_count == 0


def test_overlapping_requests_keep_only_latest(qtbot, backend, uniform_buffer, gradient_buffer):
    scheduler = GenerationScheduler(backend)

    first = scheduler.generate(gradient_buffer, GenerationOptions(color_buckets=4))
    second = scheduler.generate(uniform_buffer)

    qtbot.waitUntil(
        lambda: scheduler.state(first) in TERMINAL and scheduler.state(second) in TERMINAL,
        timeout=5000,
    )

    # Both threads ran; only the second result was applied
    assert scheduler.state(first) is RequestState.SUPERSEDED
    assert scheduler.state(second) is RequestState.RESOLVED
    assert (scheduler.result.width, scheduler.result.height) == (7, 5)


def test_failure_travels_back_as_error(qtbot, backend):
    errors = []
    scheduler = GenerationScheduler(
        backend, on_error=lambda seq, message: errors.append((seq, message))
    )

    with qtbot.waitSignal(backend.response_delivered, timeout=5000) as blocker:
        sequence_id = scheduler.generate(PixelBuffer(3, 0, []))

    response = blocker.args[0]
    assert response.id == sequence_id
    assert response.result is None
    assert scheduler.state(sequence_id) is RequestState.FAILED
    assert errors == [(sequence_id, response.error)]
    assert scheduler.result is None


def test_callbacks_run_on_owner_thread(qtbot, backend, uniform_buffer):
    seen = []
    scheduler = GenerationScheduler(
        backend, on_result=lambda seq, result: seen.append(QThread.currentThread())
    )
    owner = QThread.currentThread()

    with qtbot.waitSignal(backend.response_delivered, timeout=5000):
        scheduler.generate(uniform_buffer)

    assert seen == [owner]


def test_schedulers_sharing_a_backend_get_their_own_results(
    qtbot, backend, uniform_buffer, gradient_buffer
):
    wide = GenerationScheduler(backend)
    square = GenerationScheduler(backend)

    # Both schedulers start counting at 1
    wide_id = wide.generate(uniform_buffer)
    square_id = square.generate(gradient_buffer)
    assert wide_id == square_id == 1
    assert backend.active_count == 2

    qtbot.waitUntil(
        lambda: wide.state(wide_id) in TERMINAL and square.state(square_id) in TERMINAL,
        timeout=5000,
    )

    assert wide.state(wide_id) is RequestState.RESOLVED
    assert square.state(square_id) is RequestState.RESOLVED
    assert (wide.result.width, wide.result.height) == (7, 5)
    assert square.result == generate(gradient_buffer)
    assert backend.active_count == 0
