from collections.abc import Hashable
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict

from calibration_service.irt.estimation.enums import ConvergenceStatus
from calibration_service.irt.estimation.parameters import ItemParameters


@dataclass(frozen=True)
class IterationProgress:
    """
    Snapshot reported after each JMLE round.

    Attributes:
        iteration: 1-based round number.
        max_parameter_change: Largest absolute change of any a or b this round.
        mean_theta: Mean ability after centering (zero up to rounding).
    """

    iteration: int
    max_parameter_change: float
    mean_theta: float


class ItemCalibration(BaseModel):
    """
    Calibrated 2PL parameters and standard errors for one item.

    Standard errors are NaN when the item carries (almost) no information.
    """

    model_config = ConfigDict(frozen=True)

    item_id: Hashable
    discrimination: float
    difficulty: float
    se_discrimination: float
    se_difficulty: float

    def to_parameters(self) -> ItemParameters:
        return ItemParameters(
            discrimination=self.discrimination, difficulty=self.difficulty
        )


class CalibrationResult(BaseModel):
    """
    Result of a 2PL JMLE calibration run.

    Attributes:
        competency_id: Identifier of the calibrated competency, if any.
        n_items: Number of calibrated items.
        n_respondents: Number of respondents used.
        n_iterations: JMLE rounds performed.
        convergence_status: How the run terminated.
        max_parameter_change: Largest parameter change in the final round.
        item_calibrations: One entry per calibrated item, in matrix order.
        respondent_ids: Respondent identifiers, in matrix order.
        abilities: Final centered ability estimates, aligned with
            respondent_ids. Each solve is clamped to the theta bounds, but a
            value may exceed them by the final centering shift.
        model_version: Version string for reproducibility tracking.
    """

    model_config = ConfigDict(frozen=True)

    competency_id: Hashable | None
    n_items: int
    n_respondents: int
    n_iterations: int
    convergence_status: ConvergenceStatus
    max_parameter_change: float
    item_calibrations: tuple[ItemCalibration, ...]
    respondent_ids: tuple[Hashable, ...]
    abilities: tuple[float, ...]
    model_version: str

    @property
    def converged(self) -> bool:
        """Whether the run met the convergence threshold."""
        return self.convergence_status == ConvergenceStatus.CONVERGED

    @property
    def item_ids(self) -> tuple[Hashable, ...]:
        return tuple(cal.item_id for cal in self.item_calibrations)

    def item_parameters(self) -> dict[Hashable, ItemParameters]:
        """Calibrated parameters keyed by item id, ready for scoring."""
        return {
            cal.item_id: cal.to_parameters() for cal in self.item_calibrations
        }
