"""Unit tests for structured logging setup."""

import json

import pytest
import structlog

from cndl.logging_config import configure_logging, get_logger


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


class TestLogging:
    """Test logger creation and event rendering."""

    def test_debug_event_rendered_as_json(self, capsys: pytest.CaptureFixture) -> None:
        """Test that verbose mode emits debug events on stderr."""
        configure_logging(verbose=True)

        get_logger("cndl.test").debug("object_written", hash="abc", size=3)

        line = capsys.readouterr().err.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "object_written"
        assert event["level"] == "debug"
        assert event["size"] == 3

    def test_debug_suppressed_by_default(self, capsys: pytest.CaptureFixture) -> None:
        configure_logging(verbose=False)

        get_logger("cndl.test").debug("hidden")

        assert "hidden" not in capsys.readouterr().err

    def test_storage_logs_on_put(self, repo, capsys: pytest.CaptureFixture) -> None:
        """Test that module-level loggers pick up configuration made later."""
        import cndl.storage  # noqa: F401

        configure_logging(verbose=True)
        object_hash = repo.objects.put(b"logged")

        assert object_hash in capsys.readouterr().err
