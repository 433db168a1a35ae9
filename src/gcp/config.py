"""
Run configuration.

RunParams carries every tunable of a run. The external run request uses the
camelCase keys of the display surface (timeLimit in seconds, stagnationWindow
in milliseconds); from_dict translates them.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any, Optional

WATCHDOG_GRACE_SECONDS = 2.0


@dataclass
class RunParams:
    """Configuration of one run (shared by every attempt of that run)."""

    time_limit: float = 10.0  # global wall-clock budget in seconds
    stagnation_window: float = 5.0  # seconds between stagnation checks
    max_colors_hint: Optional[int] = None

    # Genetic algorithm
    population: int = 50
    generations: Optional[int] = None  # None = run until solved/stagnated/deadline
    mutation_rate: float = 0.05

    # Simulated annealing
    temperature: float = 1000.0
    cooling_rate: float = 0.9995
    min_temperature: float = 0.001

    # Tabu search
    tabu_tenure: int = 15

    # Ant colony
    alpha: float = 1.0  # pheromone importance
    beta: float = 2.0  # heuristic importance
    rho: float = 0.1  # evaporation rate
    q0: float = 0.9  # probability of the greedy (exploitation) choice
    initial_pheromone: float = 0.1
    num_ants: Optional[int] = None  # default: min(20, n // 2), at least 1

    # Exact family
    step_budget: int = 5000  # doubled before each attempt
    step_budget_cap: int = 1_000_000

    # ILP bridge
    ilp_backend: str = "SCIP"
    ilp_sub_time_limit: float = 2.0

    # Progress and supervision
    report_every: int = 200
    pacing_delay: float = 0.0  # display smoothing only; 0 disables it
    watchdog_grace: float = WATCHDOG_GRACE_SECONDS
    seed: Optional[int] = None

    def __post_init__(self):
        if self.time_limit <= 0:
            raise ValueError(f"time_limit must be positive, got {self.time_limit}")
        if self.stagnation_window <= 0:
            raise ValueError(f"stagnation_window must be positive, got {self.stagnation_window}")
        if self.population < 2:
            raise ValueError(f"population must be at least 2, got {self.population}")
        if self.max_colors_hint is not None and self.max_colors_hint < 1:
            raise ValueError(f"max_colors_hint must be >= 1, got {self.max_colors_hint}")
        if self.report_every < 1:
            raise ValueError(f"report_every must be >= 1, got {self.report_every}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RunParams":
        """
        Build parameters from an external request payload.

        Accepts the display surface keys (timeLimit, stagnationWindow in ms,
        population, generations, temperature, maxColorsHint, seed, tabuTenure)
        as well as the snake_case field names. Unknown keys are ignored.
        """
        external = {
            "timeLimit": ("time_limit", float),
            "stagnationWindow": ("stagnation_window", lambda ms: float(ms) / 1000.0),
            "maxColorsHint": ("max_colors_hint", int),
            "tabuTenure": ("tabu_tenure", int),
            "population": ("population", int),
            "generations": ("generations", int),
            "temperature": ("temperature", float),
            "seed": ("seed", int),
        }
        known = {f.name for f in fields(cls)}

        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            if value is None:
                continue
            if key in external:
                name, convert = external[key]
                kwargs[name] = convert(value)
            elif key in known:
                kwargs[key] = value
        return cls(**kwargs)

    def get_params(self) -> dict:
        """Get parameters as a JSON-ready dictionary."""
        return asdict(self)
