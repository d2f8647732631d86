"""
Data models for IRT calibration input.

This module defines the data structures for:
- ScoreRow: One raw (respondent, item, normalized score) observation
- ResponseMatrix: Dichotomized respondent-by-item input for calibration
"""

from collections.abc import Hashable
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np
from numpy.typing import NDArray

from calibration_service.core.constants import (
    CORRECT,
    MISSING_VALUE,
    VALID_RESPONSE_CODES,
)


class ScoreRow(NamedTuple):
    """
    A single scored answer.

    Attributes:
        respondent_id: Identifier of the test session / respondent.
        item_id: Identifier of the answered item.
        normalized_score: Score scaled to [0, 1].
    """

    respondent_id: Hashable
    item_id: Hashable
    normalized_score: float


@dataclass(frozen=True)
class ResponseMatrix:
    """
    Binary response data for 2PL calibration.

    Attributes:
        item_ids: Item identifiers, one per column.
        respondent_ids: Respondent identifiers, one per row.
        item_p_values: Classical difficulty (proportion correct) per item,
            shape (n_items,).
        responses: Array of shape (n_respondents, n_items) holding CORRECT,
            INCORRECT, or MISSING_VALUE for items that were not administered.
    """

    item_ids: tuple[Hashable, ...]
    respondent_ids: tuple[Hashable, ...]
    item_p_values: NDArray[np.float64]
    responses: NDArray[np.int8]

    def __post_init__(self) -> None:
        """Validate response matrix."""
        if self.responses.ndim != 2:
            raise ValueError(
                f"responses must be 2D, got shape {self.responses.shape}"
            )
        n_respondents, n_items = self.responses.shape
        if len(self.item_ids) != n_items:
            raise ValueError(
                f"Expected {n_items} item ids, got {len(self.item_ids)}"
            )
        if len(set(self.item_ids)) != len(self.item_ids):
            raise ValueError("item_ids must be unique")
        if len(self.respondent_ids) != n_respondents:
            raise ValueError(
                f"Expected {n_respondents} respondent ids, "
                f"got {len(self.respondent_ids)}"
            )
        if self.item_p_values.shape != (n_items,):
            raise ValueError(
                f"item_p_values must have shape ({n_items},), "
                f"got {self.item_p_values.shape}"
            )
        if not np.isin(self.responses, VALID_RESPONSE_CODES).all():
            raise ValueError(
                f"Response codes must be one of {VALID_RESPONSE_CODES}"
            )

        valid = self.valid_mask
        if n_items > 0 and not valid.any(axis=0).all():
            raise ValueError("Every item must have at least one response")
        if n_respondents > 0 and not valid.any(axis=1).all():
            raise ValueError(
                "Every respondent must have at least one response"
            )

    @property
    def n_respondents(self) -> int:
        """Number of respondents (rows)."""
        return self.responses.shape[0]

    @property
    def n_items(self) -> int:
        """Number of items (columns)."""
        return self.responses.shape[1]

    @property
    def missing_mask(self) -> NDArray[np.bool_]:
        """Boolean mask where True indicates a missing response."""
        result: NDArray[np.bool_] = self.responses == MISSING_VALUE
        return result

    @property
    def valid_mask(self) -> NDArray[np.bool_]:
        """Boolean mask where True indicates an observed response."""
        result: NDArray[np.bool_] = self.responses != MISSING_VALUE
        return result

    @property
    def correct_mask(self) -> NDArray[np.bool_]:
        """Boolean mask where True indicates a correct response."""
        result: NDArray[np.bool_] = self.responses == CORRECT
        return result

    def item_response_count(self, item_idx: int) -> int:
        """Number of respondents with an observed response to an item."""
        return int(self.valid_mask[:, item_idx].sum())

    def respondent_response_count(self, respondent_idx: int) -> int:
        """Number of items a respondent has an observed response to."""
        return int(self.valid_mask[respondent_idx, :].sum())

    def respondent_proportion_correct(self) -> NDArray[np.float64]:
        """
        Proportion correct for each respondent over answered items.

        Returns:
            Array of shape (n_respondents,). Respondents without responses
            get 0.0.
        """
        answered = self.valid_mask.sum(axis=1)
        correct = self.correct_mask.sum(axis=1)
        proportions = np.zeros(self.n_respondents, dtype=np.float64)
        np.divide(correct, answered, out=proportions, where=answered > 0)
        return proportions
