"""
Post-run verification and repair.

The auditor recomputes everything it reports from the graph and the final
coloring. Uncolored nodes are filled one at a time with the least conflicting
color of the current palette, or with a new color when every palette color
conflicts. The status string is derived from the repaired coloring only.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .coloring import count_colors, evaluate_conflicts, least_conflicting_color
from .errors import PostRunInvariantViolation
from .instance import GraphInstance

logger = logging.getLogger(__name__)

STATUS_COMPLETED = "Completed"
STATUS_AUTO_FILLED = "Completed (Auto-filled)"
STATUS_LIMIT_REACHED = "Limit Reached"


@dataclass
class AuditReport:
    """Ground truth about a final coloring."""

    status: str
    coloring: list[int]
    conflicts: int
    conflict_edges: list[tuple[int, int]]
    colors_used: int
    filled: list[int] = field(default_factory=list)  # nodes the auditor colored
    violation: Optional[PostRunInvariantViolation] = None

    @property
    def completed(self) -> bool:
        return self.conflicts == 0


class VerificationAuditor:
    """Recompute conflicts, fill uncolored nodes and derive the final status."""

    def audit(
        self,
        instance: GraphInstance,
        coloring: Sequence[int],
        timed_out: bool = False,
        claimed_solved: bool = False,
    ) -> AuditReport:
        """
        Audit a coloring.

        Args:
            instance: Graph the coloring belongs to
            coloring: Final coloring of the run (0 = uncolored)
            timed_out: Whether the run ended at its deadline
            claimed_solved: Whether the strategy reported zero conflicts

        Returns:
            AuditReport with a complete coloring (every entry positive)
        """
        if len(coloring) != instance.num_vertices:
            raise ValueError(f"Coloring has {len(coloring)} entries for {instance.num_vertices} nodes")

        colors = [c if c > 0 else 0 for c in coloring]
        uncolored = [u for u, c in enumerate(colors) if c == 0]
        palette = max(max(colors, default=0), 1)

        for u in uncolored:
            color = least_conflicting_color(instance, colors, u, palette)
            if any(colors[v] == color for v in instance.adjacency[u]):
                palette += 1
                color = palette
            colors[u] = color
        if uncolored:
            logger.info(f"Auto-filled {len(uncolored)} uncolored nodes (palette {palette})")

        report = evaluate_conflicts(instance, colors)
        if report.count == 0:
            status = STATUS_AUTO_FILLED if uncolored else STATUS_COMPLETED
        elif timed_out:
            status = STATUS_LIMIT_REACHED
        else:
            status = f"Failed: {report.count} conflicts"

        violation = None
        if claimed_solved and (uncolored or report.count > 0):
            violation = PostRunInvariantViolation(
                f"run claimed success but left {len(uncolored)} uncolored nodes and {report.count} conflicts"
            )
            logger.warning(str(violation))

        return AuditReport(
            status=status,
            coloring=colors,
            conflicts=report.count,
            conflict_edges=report.edges,
            colors_used=count_colors(colors),
            filled=uncolored,
            violation=violation,
        )
