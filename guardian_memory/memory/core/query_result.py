"""Query result returned to callers of the memory engine."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class QueryResult(BaseModel):
    """Best match for a query, plus the runner-up lines"""
    best_match: str = Field(description="Matched line, fallback line or the no-memory sentinel")
    found: bool = Field(default=False, description="Whether the best match cleared the threshold")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0, description="Score of the best match")
    alternatives: List[str] = Field(default_factory=list, description="Other matches, best first")
    node_id: Optional[str] = Field(default=None, description="Id of the matched node, if any")

    def to_response(self) -> Dict[str, Any]:
        """Shape consumed by the tool and HTTP layers."""
        return {
            "bestMatch": self.best_match,
            "found": self.found,
            "confidence": self.confidence,
            "alternatives": list(self.alternatives),
        }
