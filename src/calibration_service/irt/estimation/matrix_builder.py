"""
Build the binary response matrix used for calibration.

Raw scored answers are dichotomized, items with extreme classical
difficulty are excluded, and respondents left without any retained item
are dropped.
"""

import logging
import math
from collections.abc import Hashable, Iterable

import numpy as np

from calibration_service.core.constants import (
    CORRECT,
    INCORRECT,
    MISSING_VALUE,
)
from calibration_service.core.data_models import ResponseMatrix
from calibration_service.core.utils import dichotomize
from calibration_service.irt.estimation.config import (
    CalibrationConfig,
    DataRequirements,
)
from calibration_service.irt.estimation.exceptions import (
    InsufficientItemsError,
    InsufficientRespondentsError,
)

logger = logging.getLogger(__name__)


def _accumulate_scores(
    rows: Iterable[tuple[Hashable, Hashable, float]],
) -> tuple[dict[Hashable, dict[Hashable, float]], list[Hashable]]:
    """Group scores by respondent, keeping first-seen order."""
    respondent_scores: dict[Hashable, dict[Hashable, float]] = {}
    seen_items: dict[Hashable, None] = {}

    for respondent_id, item_id, normalized_score in rows:
        score = float(normalized_score)
        if not math.isfinite(score):
            raise ValueError(
                f"Score for respondent {respondent_id}, item {item_id} "
                f"is not finite: {normalized_score}"
            )
        respondent_scores.setdefault(respondent_id, {})[item_id] = score
        seen_items.setdefault(item_id, None)

    return respondent_scores, list(seen_items)


def build_response_matrix(
    rows: Iterable[tuple[Hashable, Hashable, float]],
    config: CalibrationConfig | None = None,
) -> ResponseMatrix:
    """
    Turn (respondent_id, item_id, normalized_score) rows into a filtered
    binary response matrix.

    A repeated (respondent, item) pair keeps its last score.

    Args:
        rows: Scored answers for one competency. Consumed once.
        config: Calibration configuration. Uses defaults if None.

    Returns:
        ResponseMatrix with items ordered by first appearance and
        respondents ordered by first appearance.
    """
    if config is None:
        config = CalibrationConfig()
    item_filter = config.item_filter
    threshold = item_filter.dichotomize_threshold

    respondent_scores, all_items = _accumulate_scores(rows)

    retained_items: list[Hashable] = []
    retained_p_values: list[float] = []

    for item_id in all_items:
        n_correct = 0
        n_attempts = 0
        for scores in respondent_scores.values():
            score = scores.get(item_id)
            if score is None:
                continue
            n_attempts += 1
            if dichotomize(score, threshold):
                n_correct += 1

        if n_attempts == 0:
            continue

        p_value = n_correct / n_attempts
        if item_filter.min_p_value <= p_value <= item_filter.max_p_value:
            retained_items.append(item_id)
            retained_p_values.append(p_value)
        else:
            logger.debug(
                f"Excluding item {item_id} with extreme p-value: {p_value:.4f}"
            )

    retained_respondents = [
        respondent_id
        for respondent_id, scores in respondent_scores.items()
        if any(item_id in scores for item_id in retained_items)
    ]

    responses = np.full(
        (len(retained_respondents), len(retained_items)),
        MISSING_VALUE,
        dtype=np.int8,
    )
    for j, respondent_id in enumerate(retained_respondents):
        scores = respondent_scores[respondent_id]
        for i, item_id in enumerate(retained_items):
            score = scores.get(item_id)
            if score is not None:
                responses[j, i] = (
                    CORRECT if dichotomize(score, threshold) else INCORRECT
                )

    logger.debug(
        f"Built response matrix: {len(retained_respondents)} respondents, "
        f"{len(retained_items)} of {len(all_items)} items retained"
    )

    return ResponseMatrix(
        item_ids=tuple(retained_items),
        respondent_ids=tuple(retained_respondents),
        item_p_values=np.array(retained_p_values, dtype=np.float64),
        responses=responses,
    )


def validate_minimum_data(
    data: ResponseMatrix,
    requirements: DataRequirements | None = None,
) -> None:
    """
    Reject matrices too small for stable 2PL estimates.

    Raises:
        InsufficientRespondentsError: Too few retained respondents.
        InsufficientItemsError: Too few retained items.
    """
    if requirements is None:
        requirements = DataRequirements()

    if data.n_respondents < requirements.min_respondents:
        raise InsufficientRespondentsError(
            data.n_respondents, requirements.min_respondents
        )
    if data.n_items < requirements.min_items:
        raise InsufficientItemsError(data.n_items, requirements.min_items)
