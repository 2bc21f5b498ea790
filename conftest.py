"""
Global pytest configuration and fixtures for the memory engine tests.

Fixtures are organized by purpose to support both unit and integration tests.
Every test run logs into a temporary directory instead of ./logs.
"""

import os
import random
import sys
from pathlib import Path

import pytest

# Add the project root to the Python path for imports
sys.path.insert(0, str(Path(__file__).parent))

from guardian_memory.memory.config.memory_config import MemoryConfig
from guardian_memory.memory.core.lexical_memory import LexicalMemory
from guardian_memory.utils.logging import reset_multi_file_logger


SAMPLE_CORPUS = """GUARDIAN SENTINEL
================
Guardian Sentinel makes precision parts for aerospace customers.
The quick brown fox jumps over the lazy dog.
Sentinel machining runs five axis mills around the clock.

SHIPPING POLICY
----------------
Orders ship within two business days from the Denver warehouse.
Expedited orders ship the same business day when placed before noon.
"""

SAMPLE_LINES = [
    "Guardian Sentinel makes precision parts for aerospace customers.",
    "The quick brown fox jumps over the lazy dog.",
    "Sentinel machining runs five axis mills around the clock.",
    "Orders ship within two business days from the Denver warehouse.",
    "Expedited orders ship the same business day when placed before noon.",
]


# ============================================================================
# Session-Level Fixtures
# ============================================================================

@pytest.fixture(scope="session", autouse=True)
def isolated_log_dir(tmp_path_factory):
    """Send structured logs to a temporary directory for the whole session."""
    log_dir = tmp_path_factory.mktemp("logs")
    previous = {key: os.environ.get(key) for key in ("LOG_DIR", "LOG_LEVEL")}

    os.environ["LOG_DIR"] = str(log_dir)
    os.environ["LOG_LEVEL"] = "DEBUG"
    reset_multi_file_logger()

    yield log_dir

    reset_multi_file_logger()
    for key, value in previous.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def memory_config():
    """Default engine configuration."""
    return MemoryConfig()


@pytest.fixture
def clean_memory_env(monkeypatch):
    """Remove memory environment overrides that would leak into config tests."""
    for key in ("MEMORY_PATH", "RENDER_MEMORY_PATH", "MEMORY_ASSOCIATION_WINDOW",
                "MEMORY_MATCH_THRESHOLD", "MEMORY_QUERY_LIMIT"):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


# ============================================================================
# Memory Fixtures
# ============================================================================

@pytest.fixture
def sample_corpus():
    """Small corpus with two sections."""
    return SAMPLE_CORPUS


@pytest.fixture
def sample_lines():
    """Content lines of the sample corpus, in load order."""
    return list(SAMPLE_LINES)


@pytest.fixture
def empty_memory(memory_config):
    """Engine with a seeded random source and nothing loaded."""
    return LexicalMemory(memory_config, rng=random.Random(42))


@pytest.fixture
def memory(empty_memory, sample_corpus):
    """Engine loaded with the sample corpus."""
    empty_memory.load(sample_corpus)
    return empty_memory


@pytest.fixture
def corpus_file(tmp_path, sample_corpus):
    """Sample corpus written to a temporary file."""
    path = tmp_path / "us-complete.txt"
    path.write_text(sample_corpus, encoding="utf-8")
    return path


# ============================================================================
# Utility Fixtures
# ============================================================================

@pytest.fixture
def time_machine():
    """Fixture to control time in tests."""
    from freezegun import freeze_time
    return freeze_time


# ============================================================================
# Markers
# ============================================================================

def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on test location."""
    for item in items:
        path = str(item.path)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)
        elif "integration" in path:
            item.add_marker(pytest.mark.integration)

        if "slow" in item.name:
            item.add_marker(pytest.mark.slow)
