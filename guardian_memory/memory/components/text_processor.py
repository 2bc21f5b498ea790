"""Text processing utilities for the memory engine."""

import re
from typing import Iterator, List, Optional, Tuple

from ..config.memory_config import MEMORY_CONFIG
from ...utils.logging.framework import SmartLogger

logger = SmartLogger("memory.text")

_NON_ALNUM = re.compile(r'[^a-z0-9\s]')
_NON_ALPHA = re.compile(r'[^a-z\s]')
_NEWLINES = re.compile(r'[\r\n]+')
_UNSAFE_CHARS = re.compile(r'["\\\x00-\x1f\x7f]')


class TextProcessor:
    """Handles all text processing operations for the memory engine."""

    def __init__(self, config=None):
        self.config = config or MEMORY_CONFIG

    def tokenize(self, text: Optional[str]) -> List[str]:
        """Tokenize text into ordered, normalized tokens.

        Lowercases, replaces anything outside a-z, 0-9 and whitespace with a
        space, then drops short tokens and stop words. Order and repeats are
        kept.
        """
        if not text:
            return []

        cleaned = _NON_ALNUM.sub(' ', text.lower())
        return [t for t in cleaned.split()
                if len(t) >= self.config.MIN_TOKEN_LENGTH
                and t not in self.config.STOP_WORDS]

    def is_separator(self, line: str) -> bool:
        """Check for rule lines such as '=====' or '-----'."""
        if line.startswith('=') or self.config.SEPARATOR_RULE in line:
            return True
        return (len(line) >= self.config.SEPARATOR_MIN_LENGTH
                and all(ch in self.config.SEPARATOR_CHARS for ch in line))

    def is_category_header(self, line: str) -> bool:
        """Check whether a line names a new section.

        Any line unchanged by upper-casing counts, so short all-caps content
        such as "CNC 5AX" or digit-only lines are read as headers too.
        """
        return line.upper() == line and len(line) >= self.config.HEADER_MIN_LENGTH

    def normalize_category(self, header: str) -> str:
        """Turn a header line into a category name."""
        return _NON_ALPHA.sub('', header.lower()).strip() or self.config.DEFAULT_CATEGORY

    def iter_corpus(self, text: Optional[str]) -> Iterator[Tuple[str, str]]:
        """Yield (line, category) for every storable line of a corpus."""
        if not text or not isinstance(text, str):
            return

        category = self.config.DEFAULT_CATEGORY
        for raw_line in text.split('\n'):
            line = raw_line.strip()
            if not line or self.is_separator(line):
                continue

            if self.is_category_header(line):
                category = self.normalize_category(line)
                logger.debug("category_header", header=line, category=category)
                continue

            yield line, category

    def sanitize_input(self, text: Optional[str]) -> str:
        """Make free text safe to store as a single corpus line."""
        if not text:
            return ''
        text = _NEWLINES.sub(' ', text)
        text = _UNSAFE_CHARS.sub('', text)
        return text.strip()[:self.config.MAX_INPUT_LENGTH]

    def format_correction(self, mistake: str, correction: str) -> Optional[str]:
        """Build a correction rule line, or None if either side is empty."""
        safe_mistake = self.sanitize_input(mistake)
        safe_correction = self.sanitize_input(correction)
        if not safe_mistake or not safe_correction:
            return None
        return (f'RULE: If user mentions anything similar to "{safe_mistake}", '
                f'always reply with: "{safe_correction}"')

    def format_interaction(self, user_text: str, response_text: str) -> Optional[str]:
        """Build an interaction line, or None if either side is empty."""
        safe_user = self.sanitize_input(user_text)
        safe_response = self.sanitize_input(response_text)
        if not safe_user or not safe_response:
            return None
        return f"User: {safe_user} / Response: {safe_response}"
