"""
Error taxonomy for the coloring engine.

Only UnknownAlgorithm and WatchdogKilled ever reach the caller as Error events.
SolverInfeasible and ResultParseFailure are internal to the ILP bridge, and
PostRunInvariantViolation is recorded on the audit report.
"""


class ColoringError(Exception):
    """Base class for all engine errors."""


class UnknownAlgorithm(ColoringError, ValueError):
    """Raised when a run request names an algorithm the registry does not know."""

    def __init__(self, name: str, known: list[str] | None = None):
        self.name = name
        self.known = known or []
        message = f"Unknown algorithm: {name!r}"
        if self.known:
            message += f" (expected one of: {', '.join(self.known)})"
        super().__init__(message)


class SoftTimeExceeded(ColoringError):
    """The cooperative deadline check fired inside a search loop."""


class WatchdogKilled(ColoringError):
    """The worker did not report completion within time limit + grace and was terminated."""


class SolverInfeasible(ColoringError):
    """The integer-program collaborator could not prove feasibility for the requested k."""


class ResultParseFailure(ColoringError):
    """The integer-program collaborator returned an assignment that is not one color per node."""


class PostRunInvariantViolation(ColoringError):
    """A strategy claimed success but the audited coloring has conflicts or uncolored nodes."""
