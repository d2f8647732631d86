"""
2PL estimator using Joint Maximum Likelihood (JMLE).

Alternates between estimating abilities with item parameters fixed
(E-step) and item parameters with abilities fixed (M-step). Abilities are
centered to zero mean between the two steps.
"""

import logging
from collections.abc import Callable, Hashable

import numpy as np
from numpy.typing import NDArray

from calibration_service.core.data_models import ResponseMatrix
from calibration_service.irt.estimation.abilities import (
    center_abilities,
    run_e_step,
)
from calibration_service.irt.estimation.config import CalibrationConfig
from calibration_service.irt.estimation.data_models import (
    CalibrationResult,
    ItemCalibration,
    IterationProgress,
)
from calibration_service.irt.estimation.enums import (
    ConvergenceStatus,
    EstimatorState,
)
from calibration_service.irt.estimation.newton import update_item_parameters
from calibration_service.irt.estimation.standard_errors import (
    compute_standard_errors,
)
from calibration_service.irt.estimation.starting_values import (
    initial_abilities,
    initial_difficulties,
    initial_discriminations,
)

logger = logging.getLogger(__name__)

IterationCallback = Callable[[IterationProgress], None]


class JMLEEstimator:
    """
    Two-parameter logistic model estimator using JMLE.

    The 2PL probability model:
        P(correct | θ) = 1 / (1 + exp(-a * (θ - b)))

    Identification: mean ability fixed at zero after every E-step.

    Each round solves every respondent's θ by undamped Newton-Raphson, then
    every item's b followed by a by damped Newton-Raphson. The run
    converges once no a or b moves by more than the threshold in a round.
    """

    def __init__(self, config: CalibrationConfig | None = None):
        self.config = config or CalibrationConfig()
        self._state = EstimatorState.INITIALIZING

    @property
    def state(self) -> EstimatorState:
        """Lifecycle state of the most recent fit."""
        return self._state

    def _transition(self, state: EstimatorState) -> None:
        logger.debug(f"Estimator state: {self._state.value} -> {state.value}")
        self._state = state

    def _m_step(
        self,
        responses: NDArray[np.int8],
        thetas: NDArray[np.float64],
        discriminations: NDArray[np.float64],
        difficulties: NDArray[np.float64],
    ) -> tuple[NDArray[np.float64], NDArray[np.float64], float]:
        """
        M-step: update every item's b, then a, given the abilities.

        Returns:
            Tuple of (discriminations, difficulties, max parameter change).
        """
        nr = self.config.newton_raphson
        a_min, a_max = self.config.bounds.discrimination
        b_min, b_max = self.config.bounds.difficulty

        new_a, new_b, changes = update_item_parameters(
            responses,
            thetas,
            discriminations,
            difficulties,
            a_min,
            a_max,
            b_min,
            b_max,
            nr.max_iterations,
            nr.tolerance,
            nr.hessian_epsilon,
            nr.damping,
        )
        max_change = float(np.max(changes)) if changes.size else 0.0
        return new_a, new_b, max_change

    def fit(
        self,
        data: ResponseMatrix,
        competency_id: Hashable | None = None,
        on_iteration: IterationCallback | None = None,
    ) -> CalibrationResult:
        """
        Fit the 2PL model to a binary response matrix.

        Minimum data requirements are not checked here; see
        validate_minimum_data.

        Args:
            data: Filtered response matrix.
            competency_id: Identifier stored on the result.
            on_iteration: Called after every round. Exceptions raised by
                the callback abort the run and propagate.

        Returns:
            CalibrationResult. Hitting the iteration limit is reported
            through convergence_status, not raised.
        """
        self._state = EstimatorState.INITIALIZING
        convergence = self.config.convergence
        responses = np.ascontiguousarray(data.responses, dtype=np.int8)

        discriminations = initial_discriminations(data.n_items)
        difficulties = initial_difficulties(data.item_p_values, self.config)
        thetas = initial_abilities(data, self.config)

        self._transition(EstimatorState.ITERATING)

        n_iterations = 0
        max_change = np.inf
        convergence_status = ConvergenceStatus.MAX_ITERATIONS

        while n_iterations < convergence.max_iterations:
            n_iterations += 1

            thetas = run_e_step(
                responses,
                discriminations,
                difficulties,
                thetas,
                self.config,
            )
            thetas, difficulties, mean_theta = center_abilities(
                thetas, difficulties
            )
            discriminations, difficulties, max_change = self._m_step(
                responses, thetas, discriminations, difficulties
            )

            logger.debug(
                f"Iteration {n_iterations}: "
                f"max change = {max_change:.6f}, "
                f"mean theta before centering = {mean_theta:.4f}"
            )

            if on_iteration is not None:
                on_iteration(
                    IterationProgress(
                        iteration=n_iterations,
                        max_parameter_change=max_change,
                        mean_theta=float(np.mean(thetas)),
                    )
                )

            if max_change < convergence.threshold:
                convergence_status = ConvergenceStatus.CONVERGED
                break

        if convergence_status == ConvergenceStatus.CONVERGED:
            self._transition(EstimatorState.CONVERGED)
        else:
            self._transition(EstimatorState.MAX_ITERATIONS_REACHED)
            logger.warning(
                f"JMLE did not converge after {n_iterations} iterations "
                f"(max change = {max_change:.6f})"
            )

        se_a, se_b = compute_standard_errors(
            data,
            discriminations,
            difficulties,
            thetas,
            self.config.newton_raphson.hessian_epsilon,
        )

        item_calibrations = tuple(
            ItemCalibration(
                item_id=item_id,
                discrimination=float(discriminations[i]),
                difficulty=float(difficulties[i]),
                se_discrimination=float(se_a[i]),
                se_difficulty=float(se_b[i]),
            )
            for i, item_id in enumerate(data.item_ids)
        )

        return CalibrationResult(
            competency_id=competency_id,
            n_items=data.n_items,
            n_respondents=data.n_respondents,
            n_iterations=n_iterations,
            convergence_status=convergence_status,
            max_parameter_change=float(max_change),
            item_calibrations=item_calibrations,
            respondent_ids=data.respondent_ids,
            abilities=tuple(float(t) for t in thetas),
            model_version=self.config.model_version,
        )
