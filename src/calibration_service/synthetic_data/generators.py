"""
Orchestration layer for synthetic 2PL data generation.

This module ties together abilities, item parameters, responses, and
missingness to produce scored answers in the shape the calibration service
consumes.
"""

import numpy as np
import pandas as pd
from numpy.random import Generator
from numpy.typing import NDArray

from calibration_service.core.constants import CORRECT, MISSING_VALUE
from calibration_service.core.data import score_rows_to_frame
from calibration_service.core.data_models import ScoreRow
from calibration_service.core.utils import get_rng
from calibration_service.irt.estimation.config import (
    DEFAULT_DICHOTOMIZE_THRESHOLD,
)
from calibration_service.irt.response_function import probabilities
from calibration_service.synthetic_data.config import (
    GenerationConfig,
    ScoreMode,
)
from calibration_service.synthetic_data.data_models import GeneratedData
from calibration_service.synthetic_data.sampling import draw_sample


def sample_binary_responses(
    abilities: NDArray[np.float64],
    discriminations: NDArray[np.float64],
    difficulties: NDArray[np.float64],
    rng: Generator,
) -> NDArray[np.int8]:
    """
    Sample 2PL correct/incorrect outcomes.

    Returns:
        Array of shape (n_respondents, n_items) with CORRECT or INCORRECT.
    """
    p = probabilities(
        abilities[:, np.newaxis], discriminations, difficulties
    )
    draws = rng.random(p.shape)
    result: NDArray[np.int8] = (draws < p).astype(np.int8)
    return result


def apply_mcar(
    responses: NDArray[np.int8],
    missing_rate: float,
    rng: Generator,
) -> NDArray[np.int8]:
    """Mark each response missing independently with probability missing_rate."""
    if missing_rate <= 0.0:
        return responses
    result = responses.copy()
    result[rng.random(responses.shape) < missing_rate] = MISSING_VALUE
    return result


def responses_to_scores(
    responses: NDArray[np.int8],
    score_mode: ScoreMode | str,
    rng: Generator,
    threshold: float = DEFAULT_DICHOTOMIZE_THRESHOLD,
) -> NDArray[np.float64]:
    """
    Turn outcomes into normalized scores; missing entries become NaN.

    Graded scores are uniform on [threshold, 1] for correct outcomes and
    on [0, threshold) for incorrect ones.
    """
    correct = responses == CORRECT
    if score_mode == ScoreMode.BINARY:
        scores = correct.astype(np.float64)
    else:
        u = rng.random(responses.shape)
        scores = np.where(
            correct,
            threshold + u * (1.0 - threshold),
            u * threshold,
        )
    scores[responses == MISSING_VALUE] = np.nan
    return scores


def generate_score_rows(config: GenerationConfig) -> GeneratedData:
    """
    Generate synthetic scored answers from a 2PL model.

    Steps:
        1. Sample respondent abilities
        2. Sample item discriminations and difficulties
        3. Sample correct/incorrect outcomes
        4. Apply MCAR missingness
        5. Convert outcomes to normalized scores

    Args:
        config: Complete generation configuration.

    Returns:
        GeneratedData with one ScoreRow per administered response.
    """
    rng = get_rng(config.random_seed)

    abilities = draw_sample(
        n=config.n_respondents,
        distribution_name=config.ability.distribution,
        distribution_params=config.ability.params,
        rng=rng,
    )
    discriminations = draw_sample(
        n=config.n_items,
        distribution_name=config.discrimination.distribution,
        distribution_params=config.discrimination.params,
        rng=rng,
    )
    difficulties = draw_sample(
        n=config.n_items,
        distribution_name=config.difficulty.distribution,
        distribution_params=config.difficulty.params,
        rng=rng,
    )

    responses = sample_binary_responses(
        abilities, discriminations, difficulties, rng
    )
    responses = apply_mcar(responses, config.missing_rate, rng)
    scores = responses_to_scores(responses, config.score_mode, rng)

    respondent_ids = [f"respondent_{j:05d}" for j in range(config.n_respondents)]
    item_ids = [f"item_{i:03d}" for i in range(config.n_items)]

    rows = [
        ScoreRow(respondent_ids[j], item_ids[i], float(scores[j, i]))
        for j, i in zip(*np.nonzero(responses != MISSING_VALUE), strict=True)
    ]

    return GeneratedData(
        rows=rows,
        respondent_ids=respondent_ids,
        item_ids=item_ids,
        abilities=abilities,
        discriminations=discriminations,
        difficulties=difficulties,
        config=config,
    )


def to_dataframe(data: GeneratedData) -> pd.DataFrame:
    """
    Convert GeneratedData to a pandas DataFrame.

    Returns:
        DataFrame with columns: respondent_id, item_id, normalized_score.
    """
    return score_rows_to_frame(data.rows)


def to_csv(data: GeneratedData, path: str) -> None:
    """Write the scored answers of GeneratedData to a CSV file."""
    df = to_dataframe(data)
    df.to_csv(path, index=False)
