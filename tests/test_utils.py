"""Tests for dual_db_sync.utils (hashing and logging)."""

import json
import logging

from dual_db_sync.utils.hashing import statement_fingerprint
from dual_db_sync.utils.logging import JsonFormatter, configure_root_logger


class TestStatementFingerprint:
    """Test statement fingerprints."""

    def test_stable(self):
        assert statement_fingerprint("SELECT 1") == statement_fingerprint("SELECT 1")

    def test_hex_digest(self):
        fp = statement_fingerprint("DELETE FROM t")
        assert len(fp) == 16
        int(fp, 16)

    def test_ignores_comments_and_whitespace(self):
        assert statement_fingerprint("-- c\n  SELECT 1  ") == statement_fingerprint("SELECT 1")

    def test_different_statements_differ(self):
        assert statement_fingerprint("SELECT 1") != statement_fingerprint("SELECT 2")

    def test_lone_surrogate(self):
        """Text decoded with surrogateescape still hashes."""
        fp = statement_fingerprint("SELECT '\udcff'")
        assert len(fp) == 16
        assert fp != statement_fingerprint("SELECT ''")


class TestJsonFormatter:
    """Test JSON log output."""

    def _record(self, **extra):
        record = logging.LogRecord(
            name="dual_db_sync.test", level=logging.INFO, pathname=__file__,
            lineno=1, msg="hello %s", args=("world",), exc_info=None,
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_basic_fields(self):
        data = json.loads(JsonFormatter().format(self._record()))
        assert data["level"] == "INFO"
        assert data["logger"] == "dual_db_sync.test"
        assert data["message"] == "hello world"
        assert data["timestamp"].endswith("Z")

    def test_extra_fields(self):
        data = json.loads(JsonFormatter().format(self._record(target="replica", fingerprint="abc")))
        assert data["target"] == "replica"
        assert data["fingerprint"] == "abc"

    def test_unserializable_extra_stringified(self):
        data = json.loads(JsonFormatter().format(self._record(conn=object())))
        assert isinstance(data["conn"], str)


class TestLoggerSetup:
    """Test logger helpers."""

    def test_configure_root_logger(self, tmp_path):
        root = logging.getLogger()
        saved_handlers = list(root.handlers)
        saved_level = root.level
        try:
            configure_root_logger(level="debug", json_output=True, log_file=tmp_path / "root.log")
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 2
            assert isinstance(root.handlers[0].formatter, JsonFormatter)
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    def test_configure_root_logger_text(self):
        root = logging.getLogger()
        saved_handlers = list(root.handlers)
        saved_level = root.level
        try:
            configure_root_logger(level="warning")
            assert root.level == logging.WARNING
            assert len(root.handlers) == 1
            assert not isinstance(root.handlers[0].formatter, JsonFormatter)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
