"""Unit tests for listeners module."""

import errno
import logging
from unittest.mock import Mock

from sftpguard.constants import ErrorKind
from sftpguard.exceptions import NormalizedError
from sftpguard.listeners import (
    CLOSE,
    END,
    ERROR,
    SessionEvents,
    attach_listeners,
    make_close_listener,
    make_end_listener,
    make_error_listener,
    remove_listeners,
)


class TestSessionEvents:
    """Test the observer registry."""

    def test_emit_calls_listeners_in_order(self):
        """Should call every listener with the event arguments"""
        events = SessionEvents()
        calls = []
        events.on("error", lambda err: calls.append(("first", err)))
        events.on("error", lambda err: calls.append(("second", err)))

        assert events.emit("error", "boom") is True
        assert calls == [("first", "boom"), ("second", "boom")]

    def test_emit_without_listeners(self):
        """Should report that nobody listened"""
        assert SessionEvents().emit("close") is False

    def test_remove_all_listeners_of_one_event(self):
        """Should only drop the named event"""
        events = SessionEvents()
        events.on("end", Mock())
        events.on("close", Mock())

        events.remove_all_listeners("end")
        assert events.event_names() == ["close"]

    def test_remove_all_listeners(self):
        """Should drop every event without a name"""
        events = SessionEvents()
        events.on("end", Mock())
        events.on("close", Mock())

        events.remove_all_listeners()
        assert events.event_names() == []


class TestRemoveListeners:
    """Test bulk deregistration."""

    def test_removes_everything(self):
        """Should leave no listeners behind"""
        events = SessionEvents()
        for name in ("error", "end", "close", "ready"):
            events.on(name, Mock())

        remove_listeners(events)
        assert events.event_names() == []

    def test_idempotent(self):
        """Should be safe on an empty registry"""
        events = SessionEvents()
        remove_listeners(events)
        remove_listeners(events)
        assert events.event_names() == []


class TestErrorListener:
    """Test the error listener."""

    def test_rejects_normalized_error(self, session_client):
        """Should reject with a normalized error and mark it handled"""
        rejected = []
        listener = make_error_listener(rejected.append, session_client)

        listener(ConnectionResetError(errno.ECONNRESET, "Connection reset by peer"))

        assert isinstance(rejected[0], NormalizedError)
        assert rejected[0].error_kind == "ECONNRESET"
        assert rejected[0].message.startswith("sftp: Remote host has reset the connection")
        assert session_client.error_handled is True

    def test_missing_error(self, session_client):
        """Should still reject when the event carries no error"""
        rejected = []
        make_error_listener(rejected.append, session_client)()

        assert rejected[0].error_kind == ErrorKind.GENERIC
        assert "Undefined error" in rejected[0].message


class TestEndListener:
    """Test the end listener."""

    def test_logs_unexpected_end(self, session_client, caplog):
        """Should log an end nobody asked for"""
        with caplog.at_level(logging.ERROR, logger="sftpguard.listeners"):
            make_end_listener(session_client)()

        assert "sftp Connection ended unexpectedly" in caplog.text

    def test_silent_on_requested_end(self, session_client, caplog):
        """Should not log an end the client asked for"""
        session_client.end_called = True
        with caplog.at_level(logging.ERROR, logger="sftpguard.listeners"):
            make_end_listener(session_client)()

        assert caplog.text == ""


class TestCloseListener:
    """Test the close listener."""

    def test_clears_session_and_logs(self, session_client, caplog):
        """Should drop the session handle and log an unexpected close"""
        with caplog.at_level(logging.ERROR, logger="sftpguard.listeners"):
            make_close_listener(session_client)()

        assert session_client.sftp is None
        assert "sftp: Connection closed unexpectedly" in caplog.text

    def test_requested_close(self, session_client, caplog):
        """Should drop the session handle quietly after a requested end"""
        session_client.end_called = True
        with caplog.at_level(logging.ERROR, logger="sftpguard.listeners"):
            make_close_listener(session_client)()

        assert session_client.sftp is None
        assert caplog.text == ""


class TestAttachListeners:
    """Test idempotent attachment."""

    def test_one_listener_per_event(self, session_client):
        """Should register exactly one observer for each event"""
        attach_listeners(session_client, Mock())

        for event in (ERROR, END, CLOSE):
            assert session_client.events.listener_count(event) == 1

    def test_repeated_attach(self, session_client):
        """Should not accumulate observers across retries"""
        session_client.events.on("ready", Mock())
        for _ in range(3):
            attach_listeners(session_client, Mock())

        assert sorted(session_client.events.event_names()) == sorted([ERROR, END, CLOSE])
        for event in (ERROR, END, CLOSE):
            assert session_client.events.listener_count(event) == 1

    def test_latest_reject_wins(self, session_client):
        """Should route errors to the most recent continuation"""
        stale, current = Mock(), Mock()
        attach_listeners(session_client, stale)
        attach_listeners(session_client, current)

        session_client.events.emit(ERROR, OSError(errno.EIO, "Input/output error"))

        stale.assert_not_called()
        current.assert_called_once()

    def test_close_event_disconnects(self, session_client):
        """Should leave the client without a session after close"""
        attach_listeners(session_client, Mock())
        session_client.events.emit(CLOSE)
        assert session_client.sftp is None
