"""Tests for ThreadedDispatcher (real worker threads, queued completion)."""

import threading
import time

from PySide6.QtCore import QCoreApplication

from plsync.sync import ThreadedDispatcher


def _drain(dispatcher, timeout_s=5.0):
    """Wait for workers and process queued completions on this thread."""
    deadline = time.monotonic() + timeout_s
    while dispatcher.in_flight and time.monotonic() < deadline:
        dispatcher.wait_all(100)
        QCoreApplication.processEvents()


def test_success_callback_runs_on_calling_thread(qapp):
    dispatcher = ThreadedDispatcher()
    results = []
    worker_threads = []

    def call():
        worker_threads.append(threading.get_ident())
        return 42

    call_id = dispatcher.dispatch(call, lambda r: results.append((r, threading.get_ident())), lambda e: results.append(e))
    assert call_id == 1
    _drain(dispatcher)

    assert results == [(42, threading.get_ident())]
    assert worker_threads[0] != threading.get_ident()
    assert dispatcher.in_flight == 0


def test_failure_callback_receives_exception(qapp):
    dispatcher = ThreadedDispatcher()
    failures = []

    def call():
        raise ConnectionError('server unreachable')

    dispatcher.dispatch(call, lambda r: failures.append('unexpected success'), failures.append)
    _drain(dispatcher)

    assert len(failures) == 1
    assert isinstance(failures[0], ConnectionError)


def test_calls_run_concurrently(qapp):
    """A slow call does not hold back a later one."""
    dispatcher = ThreadedDispatcher()
    release = threading.Event()
    order = []

    def slow():
        release.wait(5)
        return 'slow'

    dispatcher.dispatch(slow, order.append, order.append)
    dispatcher.dispatch(lambda: 'fast', order.append, order.append)
    assert dispatcher.in_flight == 2

    deadline = time.monotonic() + 5
    while not order and time.monotonic() < deadline:
        QCoreApplication.processEvents()
        time.sleep(0.01)
    assert order == ['fast']

    release.set()
    _drain(dispatcher)
    assert order == ['fast', 'slow']


def test_wait_all_with_no_workers(qapp):
    assert ThreadedDispatcher().wait_all(10) is True


def test_finished_workers_are_released(qapp):
    dispatcher = ThreadedDispatcher()
    results = []
    dispatcher.dispatch(lambda: 'ok', results.append, results.append)

    deadline = time.monotonic() + 5
    while (dispatcher.in_flight or dispatcher._workers) and time.monotonic() < deadline:
        dispatcher.wait_all(100)
        QCoreApplication.processEvents()

    assert results == ['ok']
    assert dispatcher._workers == {}
