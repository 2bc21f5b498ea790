"""Memory manager: wires the engine to its corpus file for learning and reloads."""

from dataclasses import dataclass
from typing import Optional

from .lexical_memory import LexicalMemory
from ..exceptions import InvalidInputError, StorageError
from ..storage.memory_file import MemoryFileStore
from ...utils.logging.framework import SmartLogger, log_operation

logger = SmartLogger("memory")


@dataclass
class LearnedLine:
    """Outcome of adding a line through the manager."""
    node_id: str
    line: str
    persisted: bool


class MemoryManager:
    """Owns one engine and, optionally, the file it was loaded from.

    Learned lines go into the live index first; writing them to the file is
    best effort and reported through `LearnedLine.persisted`.
    """

    def __init__(self, engine: Optional[LexicalMemory] = None,
                 store: Optional[MemoryFileStore] = None):
        self.engine = engine or LexicalMemory()
        self.store = store

    def reload(self) -> int:
        """Rebuild the engine from the store.

        Returns:
            Number of lines now in memory
        """
        if self.store is None:
            logger.warning("memory_reload_without_store")
            self.engine.load("")
            return 0

        with log_operation("memory", "memory_reload", path=str(self.store.path)):
            self.engine.load(self.store.read())
        return len(self.engine)

    def learn_correction(self, mistake: str, correction: str) -> LearnedLine:
        """Store a rule so the mistake is answered with the correction from now on.

        Raises:
            InvalidInputError: If either side is empty after sanitizing
        """
        line = self.engine.text_processor.format_correction(mistake, correction)
        if line is None:
            logger.warning("correction_rejected", reason="empty_after_sanitization")
            raise InvalidInputError("Invalid correction input provided")
        return self._learn(line, self.engine.config.CORRECTIONS_CATEGORY)

    def log_interaction(self, user_text: str, response_text: str) -> LearnedLine:
        """Store a user/response exchange.

        Raises:
            InvalidInputError: If either side is empty after sanitizing
        """
        line = self.engine.text_processor.format_interaction(user_text, response_text)
        if line is None:
            logger.warning("interaction_rejected", reason="empty_after_sanitization")
            raise InvalidInputError("Invalid interaction input provided")
        return self._learn(line, self.engine.config.INTERACTIONS_CATEGORY)

    def _learn(self, line: str, category: str) -> LearnedLine:
        node_id = self.engine.insert(line, category)

        persisted = False
        if self.store is not None:
            try:
                self.store.append(line)
                persisted = True
            except StorageError as e:
                logger.error("memory_persist_failed",
                             node_id=node_id,
                             path=e.path,
                             error=str(e),
                             error_type=type(e).__name__)

        logger.info("memory_line_learned",
                    node_id=node_id,
                    category=category,
                    persisted=persisted)
        return LearnedLine(node_id=node_id, line=line, persisted=persisted)
