"""Memory node: one line of the knowledge base."""

from datetime import datetime
from typing import Dict, List, Optional
from dataclasses import dataclass, field

from ...utils.datetime_utils import utc_now, ensure_utc

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def generate_node_id(content: str) -> str:
    """Derive a stable id from line content.

    Signed 32-bit rolling hash (h * 31 + unit) over the UTF-16 code units of
    the text, rendered in base 36. Ids from earlier corpora stay valid.
    """
    data = content.encode('utf-16-le', 'surrogatepass')
    h = 0
    for i in range(0, len(data), 2):
        h = (h * 31 + (data[i] | (data[i + 1] << 8))) & 0xFFFFFFFF
    if h & 0x80000000:
        h -= 0x100000000
    return f"mem_{_to_base36(abs(h))}"


@dataclass
class MemoryNode:
    """A single line of memory with its tokens and associations."""

    node_id: str
    content: str
    tokens: List[str] = field(default_factory=list)
    category: str = 'general'

    # Reserved for decay; not used in scoring
    weight: float = 1.0

    # Neighbour node_id -> association strength in (0, 1]
    connections: Dict[str, float] = field(default_factory=dict)

    # Bookkeeping
    last_accessed: datetime = field(default_factory=utc_now)
    access_count: int = 0

    def access(self):
        """Mark this node as retrieved."""
        self.last_accessed = utc_now()
        self.access_count += 1

    def connect(self, other: 'MemoryNode', strength: float):
        """Record a symmetric association, overwriting any previous strength."""
        self.connections[other.node_id] = strength
        other.connections[self.node_id] = strength

    def disconnect_all(self, nodes: Dict[str, 'MemoryNode']):
        """Drop every edge touching this node, on both ends."""
        for neighbour_id in list(self.connections):
            neighbour = nodes.get(neighbour_id)
            if neighbour is not None:
                neighbour.connections.pop(self.node_id, None)
        self.connections.clear()

    def to_dict(self) -> Dict:
        """Serialize to dictionary."""
        return {
            'node_id': self.node_id,
            'content': self.content,
            'tokens': list(self.tokens),
            'category': self.category,
            'weight': self.weight,
            'connections': dict(self.connections),
            'last_accessed': ensure_utc(self.last_accessed).isoformat(),
            'access_count': self.access_count,
        }

    def __str__(self) -> str:
        preview = self.content if len(self.content) <= 40 else self.content[:37] + '...'
        return (f"MemoryNode({self.node_id}, category={self.category}, "
                f"connections={len(self.connections)}, content={preview!r})")

    def __repr__(self) -> str:
        return self.__str__()


def create_memory_node(content: str, tokens: List[str],
                       category: Optional[str] = None) -> MemoryNode:
    """Factory function building a node with its content-derived id."""
    return MemoryNode(
        node_id=generate_node_id(content),
        content=content,
        tokens=list(tokens),
        category=category or 'general',
    )
