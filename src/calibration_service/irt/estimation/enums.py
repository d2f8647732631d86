from enum import Enum


class ConvergenceStatus(str, Enum):
    CONVERGED = "converged"
    MAX_ITERATIONS = "max_iterations"


class EstimatorState(str, Enum):
    INITIALIZING = "initializing"
    ITERATING = "iterating"
    CONVERGED = "converged"
    MAX_ITERATIONS_REACHED = "max_iterations_reached"
