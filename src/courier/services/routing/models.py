"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True)
class PathResult:
    path: List[str] = field(default_factory=list)
    distance: float = 0.0
    estimated_time: int = 0

    @property
    def reachable(self) -> bool:
        return bool(self.path)
