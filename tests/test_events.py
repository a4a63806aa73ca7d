"""Tests for notification dispatch."""
import logging

import pytest

from docs_sync.events import FINISH, UPDATE, SyncEvents


class TestSyncEvents:
    """Test SyncEvents subscription and dispatch."""

    def test_handlers_called_in_order(self):
        events = SyncEvents()
        received = []

        events.subscribe(UPDATE, lambda payload: received.append(("first", payload)))
        events.subscribe(UPDATE, lambda payload: received.append(("second", payload)))

        assert events.fire(UPDATE, "payload") == 2
        assert received == [("first", "payload"), ("second", "payload")]

    def test_failing_handler_is_isolated(self, caplog):
        """Test an exception in one handler is logged and others still run."""
        events = SyncEvents()
        received = []

        def broken(payload):
            raise RuntimeError("subscriber bug")

        events.subscribe(FINISH, broken)
        events.subscribe(FINISH, received.append)

        with caplog.at_level(logging.ERROR, logger="docs_sync.events"):
            delivered = events.fire(FINISH, "done")

        assert delivered == 1
        assert received == ["done"]
        assert "subscriber bug" in caplog.text

    def test_decorator_and_unsubscribe(self):
        events = SyncEvents()
        received = []

        @events.on(UPDATE)
        def handler(payload):
            received.append(payload)

        events.fire(UPDATE, 1)
        events.unsubscribe(UPDATE, handler)
        events.fire(UPDATE, 2)

        assert received == [1]
        assert events.handlers(UPDATE) == []

    def test_instances_do_not_share_handlers(self):
        first, second = SyncEvents(), SyncEvents()
        first.subscribe(UPDATE, lambda payload: None)

        assert len(first.handlers(UPDATE)) == 1
        assert second.handlers(UPDATE) == []

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown event kind"):
            SyncEvents().subscribe("rename", lambda payload: None)
