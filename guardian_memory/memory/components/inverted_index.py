"""Inverted index from tokens to the nodes containing them."""

from typing import Dict, Iterable, Set
from collections import defaultdict


class InvertedIndex:
    """Manages the token -> node id index."""

    def __init__(self):
        self._inverted_index: Dict[str, Set[str]] = defaultdict(set)
        self._node_tokens: Dict[str, Set[str]] = {}

    def add_document(self, doc_id: str, tokens: Iterable[str]):
        """Add a document's tokens to the index, replacing any previous entry."""
        if doc_id in self._node_tokens:
            self.remove_document(doc_id)

        token_set = set(tokens)
        self._node_tokens[doc_id] = token_set
        for token in token_set:
            self._inverted_index[token].add(doc_id)

    def remove_document(self, doc_id: str):
        """Remove a document from the index."""
        tokens = self._node_tokens.pop(doc_id, None)
        if tokens is None:
            return

        for token in tokens:
            bucket = self._inverted_index.get(token)
            if bucket is None:
                continue
            bucket.discard(doc_id)
            if not bucket:
                del self._inverted_index[token]

    def as_dict(self) -> Dict[str, Set[str]]:
        """Copy of the full index, for comparison and export."""
        return {token: set(ids) for token, ids in self._inverted_index.items()}

    def get_statistics(self) -> Dict[str, float]:
        """Get index statistics."""
        return {
            'total_tokens': len(self._inverted_index),
            'total_documents': len(self._node_tokens),
            'avg_tokens_per_doc': sum(len(tokens) for tokens in self._node_tokens.values()) / max(1, len(self._node_tokens))
        }
