"""
Tests for calibration result models.
"""

import json
import math

import pytest
from pydantic import ValidationError

from calibration_service.irt.estimation.data_models import (
    CalibrationResult,
    ItemCalibration,
)
from calibration_service.irt.estimation.enums import ConvergenceStatus
from calibration_service.irt.estimation.parameters import ItemParameters


def _result(status: ConvergenceStatus) -> CalibrationResult:
    return CalibrationResult(
        competency_id="c1",
        n_items=2,
        n_respondents=3,
        n_iterations=7,
        convergence_status=status,
        max_parameter_change=0.004,
        item_calibrations=(
            ItemCalibration(
                item_id="q1",
                discrimination=1.1,
                difficulty=-0.3,
                se_discrimination=0.2,
                se_difficulty=0.1,
            ),
            ItemCalibration(
                item_id="q2",
                discrimination=0.7,
                difficulty=0.9,
                se_discrimination=float("nan"),
                se_difficulty=0.3,
            ),
        ),
        respondent_ids=("r1", "r2", "r3"),
        abilities=(-0.5, 0.0, 0.5),
        model_version="0.3.0",
    )


class TestCalibrationResult:
    def test_converged_flag(self) -> None:
        assert _result(ConvergenceStatus.CONVERGED).converged
        assert not _result(ConvergenceStatus.MAX_ITERATIONS).converged

    def test_item_ids(self) -> None:
        assert _result(ConvergenceStatus.CONVERGED).item_ids == ("q1", "q2")

    def test_item_parameters_for_scoring(self) -> None:
        params = _result(ConvergenceStatus.CONVERGED).item_parameters()

        assert params == {
            "q1": ItemParameters(discrimination=1.1, difficulty=-0.3),
            "q2": ItemParameters(discrimination=0.7, difficulty=0.9),
        }

    def test_nan_standard_error_is_kept(self) -> None:
        result = _result(ConvergenceStatus.CONVERGED)
        assert math.isnan(result.item_calibrations[1].se_discrimination)

    def test_json_dump(self) -> None:
        dumped = json.loads(
            _result(ConvergenceStatus.CONVERGED).model_dump_json()
        )

        assert dumped["convergence_status"] == "converged"
        assert dumped["item_calibrations"][0]["item_id"] == "q1"
        assert dumped["abilities"] == [-0.5, 0.0, 0.5]

    def test_frozen(self) -> None:
        result = _result(ConvergenceStatus.CONVERGED)
        with pytest.raises(ValidationError):
            result.n_iterations = 3  # type: ignore[misc]
