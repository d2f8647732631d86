"""
2PL item parameter representation.

    P(correct | θ) = 1 / (1 + exp(-a * (θ - b)))

Calibrated parameters are handed to callers (and read back for scoring) as
ItemParameters. Inside a JMLE run the same values live in plain arrays.
"""

import math
from typing import Self

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict, model_validator

from calibration_service.irt.response_function import probabilities


class ItemParameters(BaseModel):
    """
    Calibrated parameters for one item.

    Attributes:
        discrimination: Slope parameter (a). Must be positive.
        difficulty: Location parameter (b).
    """

    model_config = ConfigDict(frozen=True)

    discrimination: float
    difficulty: float

    @model_validator(mode="after")
    def _validate_finite(self) -> Self:
        if not (
            math.isfinite(self.discrimination)
            and math.isfinite(self.difficulty)
        ):
            raise ValueError(
                f"Item parameters must be finite, got "
                f"a={self.discrimination}, b={self.difficulty}"
            )
        return self

    @model_validator(mode="after")
    def _validate_positive_discrimination(self) -> Self:
        if self.discrimination <= 0:
            raise ValueError(
                f"discrimination must be positive, got {self.discrimination}"
            )
        return self

    def compute_probabilities(
        self, theta: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        """
        Probability of a correct response at each ability value.

        Args:
            theta: Ability values, shape (n_theta,).

        Returns:
            Probabilities, shape (n_theta,).
        """
        return probabilities(theta, self.discrimination, self.difficulty)
