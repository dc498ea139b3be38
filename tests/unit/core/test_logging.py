"""Tests for the structlog processors and context helpers."""

import structlog

from mailblocks.core.logging import (
    LoggingContext,
    add_correlation_id,
    bind_correlation_id,
    clear_context,
    rename_message_field,
)


def test_rename_message_field():
    event_dict = rename_message_field(None, "info", {"event": "Compiled", "level": "info"})
    assert event_dict == {"message": "Compiled", "level": "info"}


def test_correlation_id_is_generated_when_missing():
    event_dict = add_correlation_id(None, "info", {"event": "x"})
    assert event_dict["correlation_id"].startswith("cid_")


def test_bound_correlation_id_is_kept():
    event_dict = add_correlation_id(None, "info", {"event": "x", "correlation_id": "req-1"})
    assert event_dict["correlation_id"] == "req-1"


def test_bind_and_clear_context():
    bind_correlation_id("req-42")
    assert structlog.contextvars.get_contextvars()["correlation_id"] == "req-42"

    clear_context()
    assert structlog.contextvars.get_contextvars() == {}


def test_logging_context_unbinds_on_exit():
    clear_context()
    with LoggingContext(template_file="welcome.json", design_id=3):
        assert structlog.contextvars.get_contextvars() == {
            "template_file": "welcome.json",
            "design_id": 3,
        }
    assert structlog.contextvars.get_contextvars() == {}
