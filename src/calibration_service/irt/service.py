"""
Calibration service.

Ties score storage to the estimation code: looks up a competency's
scored answers, builds the response matrix, checks minimum data, and runs
JMLE. Also scores single respondents against stored item parameters.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Collection, Hashable, Iterable, Mapping

from calibration_service.core.data_models import ScoreRow
from calibration_service.irt.estimation.abilities import (
    NEUTRAL_ABILITY,
    estimate_ability,
)
from calibration_service.irt.estimation.config import CalibrationConfig
from calibration_service.irt.estimation.data_models import CalibrationResult
from calibration_service.irt.estimation.estimator import (
    IterationCallback,
    JMLEEstimator,
)
from calibration_service.irt.estimation.exceptions import (
    CompetencyNotFoundError,
)
from calibration_service.irt.estimation.matrix_builder import (
    build_response_matrix,
    validate_minimum_data,
)
from calibration_service.irt.estimation.parameters import ItemParameters

logger = logging.getLogger(__name__)


class ScoreRepository(ABC):
    @abstractmethod
    def competency_exists(self, competency_id: Hashable) -> bool: ...

    @abstractmethod
    def stream_scores(self, competency_id: Hashable) -> Iterable[ScoreRow]:
        """Scored answers whose item belongs to the competency."""
        ...

    @abstractmethod
    def find_item_parameters(
        self, item_ids: Collection[Hashable]
    ) -> Mapping[Hashable, ItemParameters]:
        """Calibrated parameters for the requested items that have them."""
        ...


class InMemoryScoreRepository(ScoreRepository):
    """
    Dict-backed repository.

    Scores are grouped by competency; item parameters are shared across
    competencies and can be written back from a calibration result.
    """

    def __init__(
        self,
        scores: Mapping[Hashable, Iterable[tuple[Hashable, Hashable, float]]]
        | None = None,
        item_parameters: Mapping[Hashable, ItemParameters] | None = None,
    ) -> None:
        self._scores: dict[Hashable, list[ScoreRow]] = {}
        for competency_id, rows in (scores or {}).items():
            self.add_scores(competency_id, rows)
        self._item_parameters: dict[Hashable, ItemParameters] = dict(
            item_parameters or {}
        )

    def add_scores(
        self,
        competency_id: Hashable,
        rows: Iterable[tuple[Hashable, Hashable, float]],
    ) -> None:
        self._scores.setdefault(competency_id, []).extend(
            ScoreRow(*row) for row in rows
        )

    def store_calibration(self, result: CalibrationResult) -> None:
        """Save the item parameters of a calibration result."""
        self._item_parameters.update(result.item_parameters())

    def competency_exists(self, competency_id: Hashable) -> bool:
        return competency_id in self._scores

    def stream_scores(self, competency_id: Hashable) -> Iterable[ScoreRow]:
        return iter(self._scores.get(competency_id, []))

    def find_item_parameters(
        self, item_ids: Collection[Hashable]
    ) -> Mapping[Hashable, ItemParameters]:
        return {
            item_id: self._item_parameters[item_id]
            for item_id in item_ids
            if item_id in self._item_parameters
        }


class CalibrationService:
    """
    Calibrate competencies and score respondents.

    Each calibrate call is an independent run; nothing is cached between
    runs.
    """

    def __init__(
        self,
        repository: ScoreRepository,
        config: CalibrationConfig | None = None,
    ) -> None:
        self.repository = repository
        self.config = config or CalibrationConfig()

    def calibrate(
        self,
        competency_id: Hashable,
        on_iteration: IterationCallback | None = None,
    ) -> CalibrationResult:
        """
        Calibrate every item of a competency.

        Args:
            competency_id: Competency whose items are calibrated.
            on_iteration: Forwarded to JMLEEstimator.fit. Raising from it
                aborts the run.

        Returns:
            CalibrationResult for the retained items.

        Raises:
            CompetencyNotFoundError: Unknown competency.
            InsufficientRespondentsError: Too few respondents after filtering.
            InsufficientItemsError: Too few items after filtering.
        """
        if not self.repository.competency_exists(competency_id):
            raise CompetencyNotFoundError(competency_id)

        logger.debug(f"Building response matrix for competency {competency_id}")
        data = build_response_matrix(
            self.repository.stream_scores(competency_id), self.config
        )
        validate_minimum_data(data, self.config.requirements)

        estimator = JMLEEstimator(self.config)
        result = estimator.fit(
            data, competency_id=competency_id, on_iteration=on_iteration
        )

        logger.info(
            f"IRT calibration complete for competency {competency_id}: "
            f"{result.n_items} items, {result.n_respondents} respondents, "
            f"{result.n_iterations} iterations, converged={result.converged}"
        )
        return result

    def estimate_ability(
        self, scores: Mapping[Hashable, float | None] | None
    ) -> float:
        """
        Ability of one respondent from their normalized item scores.

        Returns 0.0 when no scored item has calibrated parameters.
        """
        if not scores:
            return NEUTRAL_ABILITY

        item_parameters = self.repository.find_item_parameters(list(scores))
        return estimate_ability(scores, item_parameters, self.config)
