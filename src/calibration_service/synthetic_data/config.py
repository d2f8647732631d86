from dataclasses import dataclass, field
from enum import Enum

from omegaconf import MISSING


class ScoreMode(str, Enum):
    BINARY = "binary"
    GRADED = "graded"


@dataclass
class DistributionConfig:
    """Configuration for a single parameter's marginal distribution.

    Attributes:
        distribution: Distribution type ("normal", "truncated_normal", "uniform")
        params: Distribution parameters (mean, std, lower, upper, low, high)
    """

    distribution: str = MISSING
    params: dict[str, float | None] = MISSING


def _default_ability() -> DistributionConfig:
    return DistributionConfig(
        distribution="normal", params={"mean": 0.0, "std": 1.0}
    )


def _default_discrimination() -> DistributionConfig:
    """Default distribution for 2PL discriminations (a)."""
    return DistributionConfig(
        distribution="truncated_normal",
        params={"mean": 1.2, "std": 0.4, "lower": 0.4, "upper": 2.5},
    )


def _default_difficulty() -> DistributionConfig:
    """Default distribution for 2PL difficulties (b)."""
    return DistributionConfig(
        distribution="uniform", params={"low": -2.0, "high": 2.0}
    )


@dataclass
class GenerationConfig:
    """Complete configuration for generating a synthetic 2PL dataset.

    Attributes:
        n_respondents: Number of simulated respondents.
        n_items: Number of simulated items.
        random_seed: Seed for the generator.
        ability: True ability distribution.
        discrimination: True discrimination distribution.
        difficulty: True difficulty distribution.
        missing_rate: Probability that any response is not administered (MCAR).
        score_mode: "binary" emits 0/1 scores; "graded" emits continuous
            scores in [0, 1] that dichotomize to the sampled outcome.
    """

    n_respondents: int
    n_items: int

    # Reproducibility
    random_seed: int = MISSING

    ability: DistributionConfig = field(default_factory=_default_ability)
    discrimination: DistributionConfig = field(
        default_factory=_default_discrimination
    )
    difficulty: DistributionConfig = field(default_factory=_default_difficulty)

    missing_rate: float = 0.0
    score_mode: str = ScoreMode.BINARY.value

    def __post_init__(self) -> None:
        if self.n_respondents <= 0:
            raise ValueError("Must have at least 1 respondent")
        if self.n_items <= 0:
            raise ValueError("Must have at least 1 item")
        if not (0.0 <= self.missing_rate < 1.0):
            raise ValueError(
                f"missing_rate must be in [0, 1), got {self.missing_rate}"
            )
        valid_modes = [mode.value for mode in ScoreMode]
        if self.score_mode not in valid_modes:
            raise ValueError(
                f"score_mode must be one of {valid_modes}, got {self.score_mode}"
            )
