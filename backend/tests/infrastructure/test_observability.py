"""Structured Logging — verifies the JSON envelope and handler setup."""

import json
import logging

import pytest

from contractdesk.infrastructure.observability import JSONFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    handlers = list(logging.root.handlers)
    level = logging.root.level
    yield
    logging.root.handlers = handlers
    logging.root.setLevel(level)


def _record(**extra):
    record = logging.LogRecord(
        "contractdesk.test", logging.INFO, __file__, 1, "wallet %s", ("FAKE",), None,
    )
    record.__dict__.update(extra)
    return record


def test_json_has_base_fields():
    payload = json.loads(JSONFormatter().format(_record()))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "contractdesk.test"
    assert payload["message"] == "wallet FAKE"
    assert "timestamp" in payload


def test_json_surfaces_known_extras_only():
    payload = json.loads(JSONFormatter().format(_record(
        repo_full_name="acme/widgets", wallet_type="FAKE", unrelated="x",
    )))
    assert payload["repo_full_name"] == "acme/widgets"
    assert payload["wallet_type"] == "FAKE"
    assert "unrelated" not in payload
    assert "issue_id" not in payload


def test_setup_logging_does_not_stack_handlers(restore_root_logger):
    setup_logging("DEBUG", "json")
    setup_logging("WARNING", "text")
    ours = [
        h for h in logging.root.handlers
        if type(h).__name__ == "_ContractDeskHandler"
    ]
    assert len(ours) == 1
    assert not isinstance(ours[0].formatter, JSONFormatter)
    assert logging.root.level == logging.WARNING
