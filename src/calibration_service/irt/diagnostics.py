"""
Diagnostic utilities for 2PL calibration.

Compares observed proportion correct against the proportion the fitted
model predicts for the same respondents.
"""

from collections.abc import Hashable, Mapping
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from calibration_service.core.data_models import ResponseMatrix
from calibration_service.irt.estimation.data_models import CalibrationResult
from calibration_service.irt.estimation.parameters import ItemParameters


@dataclass
class ItemFitComparison:
    """Observed vs model proportion correct per item."""

    item_id: tuple[Hashable, ...]
    n_responses: NDArray[np.int64]
    observed_prob: NDArray[np.float64]
    model_prob: NDArray[np.float64]
    difference: NDArray[np.float64]

    @property
    def max_abs_difference(self) -> float:
        if self.difference.size == 0:
            return 0.0
        return float(np.max(np.abs(self.difference)))


def compute_item_fit(
    data: ResponseMatrix,
    model: CalibrationResult | Mapping[Hashable, ItemParameters],
    abilities: NDArray[np.float64],
) -> ItemFitComparison:
    """Compare observed vs model proportion correct.

    Only respondents who answered an item contribute to that item's
    observed and model proportions.

    Args:
        data: Response matrix with observed responses
        model: Calibration result, or calibrated parameters keyed by item id
        abilities: Ability estimates aligned with data.respondent_ids

    Returns:
        ItemFitComparison with one entry per item in data.item_ids
    """
    if isinstance(model, CalibrationResult):
        item_parameters = model.item_parameters()
    else:
        item_parameters = dict(model)

    n_responses: list[int] = []
    observed_probs: list[float] = []
    model_probs: list[float] = []

    valid = data.valid_mask
    correct = data.correct_mask

    for item_idx, item_id in enumerate(data.item_ids):
        params = item_parameters[item_id]
        answered = valid[:, item_idx]
        n_answered = int(answered.sum())

        observed = correct[answered, item_idx].sum() / n_answered
        probs = params.compute_probabilities(abilities[answered])

        n_responses.append(n_answered)
        observed_probs.append(float(observed))
        model_probs.append(float(np.mean(probs)))

    observed_arr = np.array(observed_probs, dtype=np.float64)
    model_arr = np.array(model_probs, dtype=np.float64)

    return ItemFitComparison(
        item_id=data.item_ids,
        n_responses=np.array(n_responses, dtype=np.int64),
        observed_prob=observed_arr,
        model_prob=model_arr,
        difference=observed_arr - model_arr,
    )
