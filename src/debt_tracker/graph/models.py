"""Data models for the debt propagation graph."""

from dataclasses import dataclass
from enum import Enum


class EdgeKind(str, Enum):
    """How debt is assumed to travel along an edge."""

    CLONE = "clone"
    DEPENDENCY = "dependency"
    PATTERN = "pattern"
    IMPORT = "import"


@dataclass(frozen=True)
class PropagationEdge:
    """A weighted link between two analyzed files.

    Import edges point from the importing file to the imported one.
    Pattern edges are emitted once per unordered pair; source/target order
    carries no meaning for them.
    """

    source: str
    target: str
    weight: float
    kind: EdgeKind
