import pytest
from unittest.mock import MagicMock
from welcome_gate.core.events import Signal

def test_signal_subscribe_emit():
    event = Signal("test_evt")
    results = []

    def callback(payload):
        results.append(payload)

    event.connect(callback)
    event.emit("hello")

    assert len(results) == 1
    assert results[0] == "hello"

def test_signal_disconnect():
    event = Signal("test_evt")
    mock_handler = MagicMock()

    event.connect(mock_handler)
    event.disconnect(mock_handler)
    event.emit()

    mock_handler.assert_not_called()

def test_duplicate_connect_is_noop():
    event = Signal("dup")
    mock_handler = MagicMock()

    event.connect(mock_handler)
    event.connect(mock_handler)
    event.emit(1)

    assert len(event) == 1
    mock_handler.assert_called_once_with(1)

def test_signal_error_safety():
    """Ensure error in one subscriber doesnt block others"""
    event = Signal("err_evt")
    results = []

    def buggy_callback():
        raise ValueError("Bug")

    def worker_callback():
        results.append("ok")

    event.connect(buggy_callback)
    event.connect(worker_callback)

    failures = event.emit()

    assert results == ["ok"]
    assert failures == 1

def test_subscriber_can_disconnect_itself_during_emit():
    event = Signal("reentrant")
    calls = []

    def one_shot():
        calls.append("one_shot")
        event.disconnect(one_shot)

    def steady():
        calls.append("steady")

    event.connect(one_shot)
    event.connect(steady)

    event.emit()
    event.emit()

    assert calls == ["one_shot", "steady", "steady"]
    assert not event.is_connected(one_shot)
