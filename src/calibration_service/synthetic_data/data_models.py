"""
Data structures for synthetic 2PL data generation.

Only contracts are defined here; generation logic lives in generators.py.
"""

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict

from calibration_service.core.data_models import ScoreRow
from calibration_service.irt.estimation.parameters import ItemParameters
from calibration_service.synthetic_data.config import GenerationConfig


class GeneratedData(BaseModel):
    """
    Complete output from synthetic data generation.

    Contains the scored answers plus the true parameters they were drawn
    from, for recovery checks.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    # Primary output
    rows: list[ScoreRow]

    # True values (for validation)
    respondent_ids: list[str]
    item_ids: list[str]
    abilities: NDArray[np.float64]
    discriminations: NDArray[np.float64]
    difficulties: NDArray[np.float64]

    # Generation metadata
    config: GenerationConfig

    @property
    def n_rows(self) -> int:
        return len(self.rows)

    @property
    def actual_missing_rate(self) -> float:
        """Fraction of respondent-item pairs without a score."""
        n_total = len(self.respondent_ids) * len(self.item_ids)
        return 1.0 - self.n_rows / n_total if n_total > 0 else 0.0

    def true_item_parameters(self) -> dict[str, ItemParameters]:
        return {
            item_id: ItemParameters(discrimination=float(a), difficulty=float(b))
            for item_id, a, b in zip(
                self.item_ids,
                self.discriminations,
                self.difficulties,
                strict=True,
            )
        }
