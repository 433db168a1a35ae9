"""Algorithm identifiers and their strategies."""

from .aco_solver import AntColony
from .annealing import SimulatedAnnealing
from .errors import UnknownAlgorithm
from .exact import Backtracking, BranchAndBound, BruteForce
from .genetic import GeneticAlgorithm
from .greedy import RLF, BasicGreedy, DSatur, WelshPowell
from .ilp_solver import ILPApprox
from .strategy import ColoringStrategy
from .tabu_search import TabuSearch

STRATEGIES: dict[str, type[ColoringStrategy]] = {
    cls.name: cls
    for cls in (
        BasicGreedy,
        WelshPowell,
        DSatur,
        RLF,
        Backtracking,
        BranchAndBound,
        BruteForce,
        ILPApprox,
        SimulatedAnnealing,
        GeneticAlgorithm,
        TabuSearch,
        AntColony,
    )
}

ALIASES = {"aco": AntColony.name}


def algorithm_names() -> list[str]:
    """The twelve identifiers in benchmark order."""
    return list(STRATEGIES)


def create_strategy(name: str) -> ColoringStrategy:
    """
    Instantiate the strategy for an algorithm identifier.

    Raises:
        UnknownAlgorithm: if the identifier is neither known nor an alias
    """
    key = ALIASES.get(name, name)
    try:
        cls = STRATEGIES[key]
    except KeyError:
        raise UnknownAlgorithm(name, algorithm_names()) from None
    return cls()
