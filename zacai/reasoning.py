"""Reasoning trace and pathway result value types"""

from dataclasses import dataclass, field
from typing import Any, Iterator, List, Tuple


class ReasoningTrace:
    """Ordered, append-only list of human-readable reasoning steps for one query"""

    def __init__(self, steps=None):
        self._steps: List[str] = []
        for step in steps or ():
            self.add(step)

    def add(self, step: str) -> "ReasoningTrace":
        self._steps.append(str(step))
        return self

    def extend(self, steps) -> "ReasoningTrace":
        for step in steps:
            self.add(step)
        return self

    @property
    def steps(self) -> Tuple[str, ...]:
        return tuple(self._steps)

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._steps))

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self):
        return f"ReasoningTrace({len(self._steps)} steps)"


@dataclass
class PathwayResult:
    """What one pathway produced for one query"""
    pathway: str
    confidence: float
    data: Any = None
    trace: List[str] = field(default_factory=list)
    proposals: List[Any] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.confidence > 0 and self.data is not None
