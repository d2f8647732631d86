"""
Configuration dataclasses for 2PL JMLE calibration.

This module defines the tunable constants for:
- Parameter bounds for discrimination, difficulty and ability
- Newton-Raphson inner loops (iterations, tolerance, damping)
- JMLE outer loop convergence
- Item filtering and dichotomization
- Minimum data requirements
"""

from dataclasses import dataclass, field
from importlib.metadata import PackageNotFoundError, version

import toml
from pydantic_settings import BaseSettings

from calibration_service.core.paths import (
    PYPROJECT_FILENAME,
    ProjectRootNotFound,
    get_project_root_dir,
)

PROJECT_NAME = "calibration-service"
CALIBRATION_ENV_PREFIX = "CALIBRATION_"

# Default parameter bounds
DEFAULT_DISCRIMINATION_BOUNDS = (0.1, 4.0)
DEFAULT_DIFFICULTY_BOUNDS = (-4.0, 4.0)
DEFAULT_THETA_BOUNDS = (-4.0, 4.0)

# Default Newton-Raphson settings for the inner loops
DEFAULT_NR_MAX_ITERATIONS = 20
DEFAULT_NR_TOLERANCE = 1e-4
DEFAULT_HESSIAN_EPSILON = 1e-10
# Halved steps on a and b; the two are coupled through P and oscillate
# when updated with full Newton steps
DEFAULT_NR_DAMPING = 0.5

# Default JMLE convergence settings
DEFAULT_MAX_ITERATIONS = 100
DEFAULT_CONVERGENCE_THRESHOLD = 0.01

# Default item filtering settings
DEFAULT_MIN_P_VALUE = 0.05
DEFAULT_MAX_P_VALUE = 0.95
DEFAULT_DICHOTOMIZE_THRESHOLD = 0.5

# Default data requirements
DEFAULT_MIN_RESPONDENTS = 200
DEFAULT_MIN_ITEMS = 3

# Proportions are clipped before the logit transform at initialization
DEFAULT_PROPORTION_CLIP = (0.01, 0.99)


def _get_project_version() -> str:
    try:
        root_dir = get_project_root_dir()
        with open(root_dir / PYPROJECT_FILENAME) as f:
            data = toml.load(f)
    except ProjectRootNotFound:
        data = {}

    project = data.get("project", {})
    if project.get("name") == PROJECT_NAME and project.get("version"):
        project_version = project["version"]
        assert isinstance(project_version, str)
        return project_version

    # Installed without the source tree; fall back to package metadata
    try:
        return version(PROJECT_NAME)
    except PackageNotFoundError as e:
        raise ValueError("Version not found in pyproject.toml") from e


@dataclass(frozen=True)
class ParameterBounds:
    """
    Bounds applied after every parameter update.

    Attributes:
        discrimination: (min, max) bounds for discrimination (a).
        difficulty: (min, max) bounds for difficulty (b).
        theta: (min, max) bounds for ability (theta).
    """

    discrimination: tuple[float, float] = DEFAULT_DISCRIMINATION_BOUNDS
    difficulty: tuple[float, float] = DEFAULT_DIFFICULTY_BOUNDS
    theta: tuple[float, float] = DEFAULT_THETA_BOUNDS

    def __post_init__(self) -> None:
        for name in ("discrimination", "difficulty", "theta"):
            lower, upper = getattr(self, name)
            if lower >= upper:
                raise ValueError(
                    f"{name} bounds must satisfy lower < upper, "
                    f"got ({lower}, {upper})"
                )
        if self.discrimination[0] <= 0:
            raise ValueError("discrimination lower bound must be positive")


@dataclass(frozen=True)
class NewtonRaphsonConfig:
    """
    Settings shared by the ability, difficulty and discrimination solvers.

    Attributes:
        max_iterations: Maximum Newton-Raphson steps per solve.
        tolerance: A solve stops once |step| falls below this value.
        hessian_epsilon: A solve stops when |second derivative| is below this
            value (flat likelihood).
        damping: Multiplier on the item parameter steps, in (0, 1].
            Ability steps are never damped.
    """

    max_iterations: int = DEFAULT_NR_MAX_ITERATIONS
    tolerance: float = DEFAULT_NR_TOLERANCE
    hessian_epsilon: float = DEFAULT_HESSIAN_EPSILON
    damping: float = DEFAULT_NR_DAMPING

    def __post_init__(self) -> None:
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be >= 1")
        if not (0.0 < self.damping <= 1.0):
            raise ValueError(f"damping must be in (0, 1], got {self.damping}")


@dataclass(frozen=True)
class ConvergenceConfig:
    """
    Configuration for the JMLE outer loop.

    Attributes:
        max_iterations: Maximum number of E-step/M-step rounds.
        threshold: The run converges when the largest absolute change of any
            a or b in a round is below this value.
    """

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    threshold: float = DEFAULT_CONVERGENCE_THRESHOLD

    def __post_init__(self) -> None:
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be >= 1")


@dataclass(frozen=True)
class ItemFilterConfig:
    """
    Configuration for dichotomization and extreme item exclusion.

    Attributes:
        min_p_value: Items with proportion correct below this are excluded.
        max_p_value: Items with proportion correct above this are excluded.
        dichotomize_threshold: Scores >= this value count as correct.
    """

    min_p_value: float = DEFAULT_MIN_P_VALUE
    max_p_value: float = DEFAULT_MAX_P_VALUE
    dichotomize_threshold: float = DEFAULT_DICHOTOMIZE_THRESHOLD

    def __post_init__(self) -> None:
        if not (0.0 <= self.min_p_value <= self.max_p_value <= 1.0):
            raise ValueError(
                "p-value limits must satisfy 0 <= min <= max <= 1, "
                f"got ({self.min_p_value}, {self.max_p_value})"
            )


@dataclass(frozen=True)
class DataRequirements:
    """
    Minimum data needed before calibration starts.

    Attributes:
        min_respondents: Minimum retained respondents.
        min_items: Minimum retained items.
    """

    min_respondents: int = DEFAULT_MIN_RESPONDENTS
    min_items: int = DEFAULT_MIN_ITEMS


@dataclass(frozen=True)
class CalibrationConfig:
    """
    Master configuration for 2PL calibration.

    Attributes:
        bounds: Parameter bounds.
        newton_raphson: Inner-loop solver settings.
        convergence: Outer-loop convergence criteria.
        item_filter: Dichotomization and p-value filtering.
        requirements: Minimum data requirements.
        proportion_clip: (low, high) clip applied to proportions before
            the logit transform used for starting values.
        model_version: Version string for reproducibility tracking.
    """

    bounds: ParameterBounds = ParameterBounds()
    newton_raphson: NewtonRaphsonConfig = NewtonRaphsonConfig()
    convergence: ConvergenceConfig = ConvergenceConfig()
    item_filter: ItemFilterConfig = ItemFilterConfig()
    requirements: DataRequirements = DataRequirements()
    proportion_clip: tuple[float, float] = DEFAULT_PROPORTION_CLIP
    model_version: str = field(default_factory=_get_project_version)


def default_config() -> CalibrationConfig:
    """Create a default calibration configuration."""
    return CalibrationConfig()


class CalibrationSettings(BaseSettings):
    """
    Deployment overrides for the calibration constants.

    Every field can be set through an environment variable with the
    CALIBRATION_ prefix, e.g. CALIBRATION_MAX_ITERATIONS=200.
    """

    model_config = {"env_prefix": CALIBRATION_ENV_PREFIX}

    min_discrimination: float = DEFAULT_DISCRIMINATION_BOUNDS[0]
    max_discrimination: float = DEFAULT_DISCRIMINATION_BOUNDS[1]
    min_difficulty: float = DEFAULT_DIFFICULTY_BOUNDS[0]
    max_difficulty: float = DEFAULT_DIFFICULTY_BOUNDS[1]
    min_theta: float = DEFAULT_THETA_BOUNDS[0]
    max_theta: float = DEFAULT_THETA_BOUNDS[1]

    nr_max_iterations: int = DEFAULT_NR_MAX_ITERATIONS
    nr_tolerance: float = DEFAULT_NR_TOLERANCE
    hessian_epsilon: float = DEFAULT_HESSIAN_EPSILON
    damping: float = DEFAULT_NR_DAMPING

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    convergence_threshold: float = DEFAULT_CONVERGENCE_THRESHOLD

    min_p_value: float = DEFAULT_MIN_P_VALUE
    max_p_value: float = DEFAULT_MAX_P_VALUE
    dichotomize_threshold: float = DEFAULT_DICHOTOMIZE_THRESHOLD

    min_respondents: int = DEFAULT_MIN_RESPONDENTS
    min_items: int = DEFAULT_MIN_ITEMS

    def to_config(self) -> CalibrationConfig:
        """Build the immutable estimation configuration."""
        return CalibrationConfig(
            bounds=ParameterBounds(
                discrimination=(
                    self.min_discrimination,
                    self.max_discrimination,
                ),
                difficulty=(self.min_difficulty, self.max_difficulty),
                theta=(self.min_theta, self.max_theta),
            ),
            newton_raphson=NewtonRaphsonConfig(
                max_iterations=self.nr_max_iterations,
                tolerance=self.nr_tolerance,
                hessian_epsilon=self.hessian_epsilon,
                damping=self.damping,
            ),
            convergence=ConvergenceConfig(
                max_iterations=self.max_iterations,
                threshold=self.convergence_threshold,
            ),
            item_filter=ItemFilterConfig(
                min_p_value=self.min_p_value,
                max_p_value=self.max_p_value,
                dichotomize_threshold=self.dichotomize_threshold,
            ),
            requirements=DataRequirements(
                min_respondents=self.min_respondents,
                min_items=self.min_items,
            ),
        )
