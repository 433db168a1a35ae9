"""
Graph instance data structure and parsers.

Nodes are stored under dense indices 0..n-1; the external id of each index is
kept in `node_ids` so that results can be reported back in the caller's ids.

Supported file formats:
- DIMACS .col: "c" comment lines, one "p edge <n> <m>" line, "e <u> <v>" edges (1-based)
- Plain edge list: one "u v" pair per line, "#" or "c" comment lines; labels
  can be arbitrary integers and are relabelled in sorted order
"""

import logging
import random
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Hashable, Iterable, Optional

logger = logging.getLogger(__name__)

_DIMACS_P_LINE = re.compile(r"^\s*p\s+(\w+)\s+(\d+)\s+(\d+)\s*$", re.IGNORECASE)
_DIMACS_E_LINE = re.compile(r"^\s*e\s+(\d+)\s+(\d+)\s*$", re.IGNORECASE)


@dataclass
class GraphInstance:
    """An undirected simple graph over dense node indices."""

    name: str
    num_vertices: int
    edges: list[tuple[int, int]]
    node_ids: list[Hashable] = field(default_factory=list)

    # Derived data, computed after loading
    adjacency: list[list[int]] = field(default_factory=list, repr=False)
    degree: list[int] = field(default_factory=list, repr=False)

    def __post_init__(self):
        """Normalize edges and build the symmetric adjacency."""
        if self.num_vertices < 0:
            raise ValueError(f"num_vertices must be non-negative, got {self.num_vertices}")
        if not self.node_ids:
            self.node_ids = list(range(self.num_vertices))
        if len(self.node_ids) != self.num_vertices:
            raise ValueError(f"Expected {self.num_vertices} node ids, got {len(self.node_ids)}")

        # Each neighbor list is an ordered set: insertion order, no duplicates, no self-loops
        self.adjacency = [[] for _ in range(self.num_vertices)]
        seen: set[tuple[int, int]] = set()
        normalized = []
        for u, v in self.edges:
            if not (0 <= u < self.num_vertices and 0 <= v < self.num_vertices):
                raise ValueError(f"Invalid vertex in edge ({u}, {v}) for n={self.num_vertices}")
            if u == v:
                continue
            key = (u, v) if u < v else (v, u)
            if key in seen:
                continue
            seen.add(key)
            normalized.append(key)
            self.adjacency[u].append(v)
            self.adjacency[v].append(u)

        self.edges = normalized
        self.degree = [len(neighbors) for neighbors in self.adjacency]

    @property
    def num_edges(self) -> int:
        return len(self.edges)

    @classmethod
    def from_external(
        cls,
        node_ids: Iterable[Hashable],
        edges: Iterable[Any],
        name: str = "graph",
    ) -> "GraphInstance":
        """
        Build an instance from a display-surface node/edge list.

        Args:
            node_ids: External node ids; their order defines the dense indices
            edges: Pairs (source_id, target_id), or mappings with "source" and
                   "target" keys (values may themselves be mappings with an "id")
            name: Instance name used in reports

        Returns:
            GraphInstance object. Edges naming an unknown id are dropped silently.
        """
        ids = list(node_ids)
        index_of = {node_id: i for i, node_id in enumerate(ids)}
        if len(index_of) != len(ids):
            raise ValueError("Duplicate node ids in graph")

        indexed = []
        dropped = 0
        for edge in edges:
            source, target = _edge_endpoints(edge)
            u = index_of.get(source)
            v = index_of.get(target)
            if u is None or v is None:
                dropped += 1
                continue
            indexed.append((u, v))

        if dropped:
            logger.debug(f"Dropped {dropped} edges with unknown endpoints in {name}")

        return cls(name=name, num_vertices=len(ids), edges=indexed, node_ids=ids)

    @classmethod
    def from_file(cls, filepath: str | Path) -> "GraphInstance":
        """
        Parse an instance from a DIMACS .col file or a plain edge list.

        Args:
            filepath: Path to the instance file

        Returns:
            GraphInstance object

        Raises:
            ValueError: If the file format is invalid
        """
        filepath = Path(filepath)

        with open(filepath, "r", encoding="utf-8", errors="ignore") as f:
            lines = [line.strip() for line in f.readlines()]

        if any(_DIMACS_P_LINE.match(line) for line in lines):
            return cls._parse_dimacs(lines, filepath)
        return cls._parse_edge_list(lines, filepath)

    @classmethod
    def _parse_dimacs(cls, lines: list[str], filepath: Path) -> "GraphInstance":
        n_decl: Optional[int] = None
        m_decl = 0
        edges = []
        for line_no, line in enumerate(lines, start=1):
            if not line or line.startswith("c"):
                continue
            mp = _DIMACS_P_LINE.match(line)
            if mp:
                n_decl, m_decl = int(mp.group(2)), int(mp.group(3))
                continue
            me = _DIMACS_E_LINE.match(line)
            if me:
                edges.append((int(me.group(1)) - 1, int(me.group(2)) - 1))
                continue
            raise ValueError(f"Invalid line {line_no} in {filepath}: {line!r}")

        if n_decl is None:
            raise ValueError(f"Missing problem line in {filepath}")
        if len(edges) != m_decl:
            logger.debug(f"Edge count mismatch in {filepath}: declared {m_decl}, read {len(edges)}")

        return cls(name=filepath.stem, num_vertices=n_decl, edges=edges)

    @classmethod
    def _parse_edge_list(cls, lines: list[str], filepath: Path) -> "GraphInstance":
        pairs = []
        for line_no, line in enumerate(lines, start=1):
            if not line or line.startswith("#") or line.startswith("c"):
                continue
            parts = line.split()
            if len(parts) < 2:
                raise ValueError(f"Invalid edge format on line {line_no} in {filepath}")
            try:
                pairs.append((int(parts[0]), int(parts[1])))
            except ValueError as e:
                raise ValueError(f"Invalid edge on line {line_no} in {filepath}: {e}")

        labels = sorted({label for pair in pairs for label in pair})
        return cls.from_external(labels, pairs, name=filepath.stem)

    @classmethod
    def random(cls, num_vertices: int, density: float, seed: Optional[int] = None) -> "GraphInstance":
        """Generate a G(n, p) random graph: each pair is an edge with probability `density`."""
        if not 0.0 <= density <= 1.0:
            raise ValueError(f"density must be in [0, 1], got {density}")
        rng = random.Random(seed)
        edges = [
            (u, v)
            for u in range(num_vertices)
            for v in range(u + 1, num_vertices)
            if rng.random() < density
        ]
        return cls(name=f"random_n{num_vertices}_p{density:g}", num_vertices=num_vertices, edges=edges)

    def __str__(self) -> str:
        return f"GraphInstance({self.name}: n={self.num_vertices}, m={self.num_edges})"


def _edge_endpoints(edge: Any) -> tuple[Hashable, Hashable]:
    """Extract (source, target) ids from a pair or a {"source", "target"} mapping."""
    if isinstance(edge, dict):
        source, target = edge.get("source"), edge.get("target")
        if isinstance(source, dict):
            source = source.get("id")
        if isinstance(target, dict):
            target = target.get("id")
        return source, target
    source, target = edge
    return source, target
