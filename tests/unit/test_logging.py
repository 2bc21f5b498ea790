"""
Unit tests for structured logging.

Tests cover:
- Component detection from module paths
- Routing of JSON records to per-component files
- Operation scopes with correlation IDs
- Execution logging decorator
"""

import json

import pytest

from guardian_memory.utils.logging import (
    SmartLogger, get_multi_file_logger, reset_multi_file_logger,
    log_execution, log_operation,
)
from guardian_memory.utils.logging.framework import component_for_module


@pytest.fixture
def log_dir(tmp_path, monkeypatch):
    """Point the global logger at a fresh directory for one test."""
    monkeypatch.setenv("LOG_DIR", str(tmp_path))
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    reset_multi_file_logger()
    yield tmp_path
    reset_multi_file_logger()


def read_records(path):
    if not path.exists():
        return []
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line]


class TestComponentDetection:
    """Test module path to component mapping."""

    @pytest.mark.parametrize("module,component", [
        ("guardian_memory.memory.storage.memory_file", "storage"),
        ("guardian_memory.memory.core.lexical_memory", "memory"),
        ("guardian_memory.memory.components.node_manager", "memory"),
        ("guardian_memory.utils.config.unified_config", "config"),
        ("guardian_memory.cli", "cli"),
        ("guardian_memory.utils.datetime_utils", "system"),
        ("some_other_package.memory", "system"),
    ])
    def test_component_from_module(self, module, component):
        """Test components resolve below the top-level package."""
        assert component_for_module(module) == component

    def test_auto_detected_component(self):
        """Test loggers created in unknown modules fall back to system."""
        assert SmartLogger().component == "system"


class TestRouting:
    """Test records land in the right files."""

    def test_component_files(self, log_dir):
        """Test each component writes JSON records to its own file."""
        SmartLogger("memory.nodes").info("nodes_ready", count=3)
        SmartLogger("storage").info("file_read", path="kb.txt")

        memory_records = read_records(log_dir / "memory.log")
        assert memory_records[-1]["message"] == "nodes_ready"
        assert memory_records[-1]["component"] == "memory.nodes"
        assert memory_records[-1]["count"] == 3
        assert memory_records[-1]["level"] == "INFO"
        assert memory_records[-1]["timestamp"].endswith("Z")

        assert read_records(log_dir / "storage.log")[-1]["path"] == "kb.txt"

    def test_errors_are_copied_to_error_log(self, log_dir):
        """Test ERROR records also reach errors.log."""
        SmartLogger("memory").error("query_failed", error="boom")

        assert read_records(log_dir / "errors.log")[-1]["message"] == "query_failed"
        assert read_records(log_dir / "memory.log")[-1]["message"] == "query_failed"

    def test_level_filtering(self, tmp_path, monkeypatch):
        """Test records below LOG_LEVEL are dropped."""
        monkeypatch.setenv("LOG_DIR", str(tmp_path))
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        reset_multi_file_logger()
        try:
            SmartLogger("memory").info("quiet")
            SmartLogger("memory").warning("loud")
        finally:
            reset_multi_file_logger()

        assert [r["message"] for r in read_records(tmp_path / "memory.log")] == ["loud"]

    def test_singleton(self, log_dir):
        """Test the global logger is shared until reset."""
        assert get_multi_file_logger() is get_multi_file_logger()


class TestLogOperation:
    """Test scoped operation logging."""

    def test_scope_adds_correlation_and_context(self, log_dir):
        """Test records inside a scope carry its correlation ID and context."""
        with log_operation("memory", "corpus_load", source="kb.txt") as correlation_id:
            SmartLogger("memory").info("inside")
        SmartLogger("memory").info("outside")

        records = {r["message"]: r for r in read_records(log_dir / "memory.log")}
        assert records["operation_start_corpus_load"]["correlation_id"] == correlation_id
        assert records["inside"]["correlation_id"] == correlation_id
        assert records["inside"]["source"] == "kb.txt"
        assert records["operation_complete_corpus_load"]["success"] is True
        assert "correlation_id" not in records["outside"]

    def test_scope_logs_and_reraises_errors(self, log_dir):
        """Test failures inside a scope are logged and propagated."""
        with pytest.raises(ValueError):
            with log_operation("memory", "corpus_load"):
                raise ValueError("bad corpus")

        error = read_records(log_dir / "errors.log")[-1]
        assert error["message"] == "operation_error_corpus_load"
        assert error["error_type"] == "ValueError"


class TestLogExecution:
    """Test the execution logging decorator."""

    def test_success_and_failure(self, log_dir):
        """Test start, completion and error records."""
        @log_execution("storage", "double")
        def double(value):
            if value < 0:
                raise ValueError("negative")
            return value * 2

        assert double(4) == 8
        with pytest.raises(ValueError):
            double(-1)

        messages = [r["message"] for r in read_records(log_dir / "storage.log")]
        assert messages == [
            "function_start_double", "function_complete_double",
            "function_start_double", "function_error_double",
        ]
