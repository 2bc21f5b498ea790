"""Flat-file storage for the knowledge base corpus."""

from pathlib import Path
from typing import Iterable, Optional, Union

from ..exceptions import StorageError
from ...utils.logging.framework import SmartLogger, log_execution

logger = SmartLogger("storage")

ENCRYPTED_PREFIX = "ENCRYPTED:"


class MemoryFileStore:
    """Reads the newline-delimited corpus and appends learned lines to it."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    @classmethod
    def discover(cls, candidates: Iterable[Union[str, Path]]) -> Optional['MemoryFileStore']:
        """Return a store for the first candidate path that exists."""
        tried = []
        for candidate in candidates:
            if not candidate:
                continue
            path = Path(candidate)
            tried.append(str(path))
            if path.is_file():
                logger.info("memory_file_found", path=str(path))
                return cls(path)

        logger.warning("memory_file_not_found", tried=tried)
        return None

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> str:
        """Read the corpus text.

        A missing or unreadable file reads as empty; encrypted corpora are
        refused.
        """
        if not self.path.is_file():
            logger.warning("memory_file_missing", path=str(self.path))
            return ""

        try:
            content = self.path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            logger.error("memory_file_read_error",
                         path=str(self.path),
                         error=str(e),
                         error_type=type(e).__name__)
            return ""

        if content.startswith(ENCRYPTED_PREFIX):
            logger.error("memory_file_encrypted", path=str(self.path))
            raise StorageError(str(self.path), "Encrypted memory files are not supported")

        logger.info("memory_file_read", path=str(self.path), chars=len(content))
        return content

    @log_execution("storage", "append_line", include_result=False)
    def append(self, line: str):
        """Append one line, creating the file and its directory if needed."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'a', encoding='utf-8') as f:
                f.write(f"\n{line}")
        except OSError as e:
            raise StorageError(str(self.path), f"Failed to append to memory file ({e})") from e
