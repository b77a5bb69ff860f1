"""Tests for the application lifespan."""

from datetime import date

from fastapi.testclient import TestClient

from procedural_memory.domain.events import ProcedureSaved, get_event_bus


def _saved_event():
    return ProcedureSaved(
        procedure_id="p1",
        title="Tie shoes",
        algorithm="motor",
        step_count=3,
        first_review_date=date(2024, 1, 1),
    )


class TestLifespan:
    def test_recorder_subscribed_once_across_restarts(self):
        from procedural_memory.main import app

        with TestClient(app):
            pass
        with TestClient(app):
            handlers = get_event_bus().handlers_for(_saved_event())

        assert len(handlers) == 1

    def test_shutdown_unsubscribes_recorder(self):
        from procedural_memory.main import app

        with TestClient(app):
            assert len(get_event_bus().handlers_for(_saved_event())) == 1

        assert get_event_bus().handlers_for(_saved_event()) == []
