"""
Core utility functions shared across calibration service modules.
"""

import numpy as np
from numpy.random import Generator


def get_rng(seed: int | None = None) -> Generator:
    """
    Create a numpy random Generator with optional seed.

    Args:
        seed: Random seed for reproducibility. If None, uses entropy.

    Returns:
        A numpy random Generator instance.
    """
    return np.random.default_rng(seed)


def dichotomize(score: float, threshold: float) -> bool:
    """Convert a normalized score to a correct/incorrect outcome."""
    return score >= threshold
