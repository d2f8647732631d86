"""
Tests for ability estimation helpers and standalone scoring.
"""

import numpy as np

from calibration_service.irt.estimation.abilities import (
    center_abilities,
    estimate_ability,
    estimate_theta_from_responses,
)
from calibration_service.irt.estimation.config import CalibrationConfig
from calibration_service.irt.estimation.parameters import ItemParameters

ITEMS = {
    "q1": ItemParameters(discrimination=1.2, difficulty=-1.0),
    "q2": ItemParameters(discrimination=0.8, difficulty=0.0),
    "q3": ItemParameters(discrimination=1.5, difficulty=0.5),
    "q4": ItemParameters(discrimination=1.0, difficulty=1.5),
}


class TestEstimateAbility:
    def test_empty_scores_give_zero(self) -> None:
        assert estimate_ability({}, ITEMS) == 0.0
        assert estimate_ability(None, ITEMS) == 0.0

    def test_no_calibrated_items_give_zero(self) -> None:
        assert estimate_ability({"unknown": 1.0}, ITEMS) == 0.0
        assert estimate_ability({"q1": 1.0}, {"q1": None}) == 0.0

    def test_items_without_score_are_dropped(self) -> None:
        with_none = estimate_ability({"q1": 1.0, "q2": 0.0, "q3": None}, ITEMS)
        without = estimate_ability({"q1": 1.0, "q2": 0.0}, ITEMS)
        assert with_none == without

    def test_scores_are_dichotomized(self) -> None:
        graded = estimate_ability(
            {"q1": 0.9, "q2": 0.5, "q3": 0.3, "q4": 0.1}, ITEMS
        )
        binary = estimate_ability(
            {"q1": 1.0, "q2": 1.0, "q3": 0.0, "q4": 0.0}, ITEMS
        )
        assert graded == binary

    def test_more_correct_scores_higher(self) -> None:
        low = estimate_ability({"q1": 1.0, "q2": 0.0, "q3": 0.0}, ITEMS)
        high = estimate_ability({"q1": 1.0, "q2": 1.0, "q3": 0.0}, ITEMS)
        assert high > low

    def test_deterministic(self) -> None:
        scores = {"q1": 1.0, "q2": 0.0, "q3": 1.0, "q4": 0.0}
        results = {estimate_ability(scores, ITEMS) for _ in range(5)}
        assert len(results) == 1

    def test_within_bounds(self) -> None:
        theta = estimate_ability({k: 1.0 for k in ITEMS}, ITEMS)
        assert theta == 4.0

    def test_respects_configured_bounds(self) -> None:
        from calibration_service.irt.estimation.config import ParameterBounds

        config = CalibrationConfig(bounds=ParameterBounds(theta=(-2.0, 2.0)))
        theta = estimate_ability({k: 0.0 for k in ITEMS}, ITEMS, config)
        assert theta == -2.0


def test_estimate_theta_from_responses_accepts_lists() -> None:
    theta = estimate_theta_from_responses(
        np.array([1, 0]), [1.0, 1.0], [0.0, 0.0], CalibrationConfig()
    )
    assert theta == 0.0


def test_center_abilities_shifts_both() -> None:
    thetas = np.array([1.0, 2.0, 3.0])
    difficulties = np.array([0.0, 4.0])

    centered, shifted, mean = center_abilities(thetas, difficulties)

    assert mean == 2.0
    np.testing.assert_array_equal(centered, [-1.0, 0.0, 1.0])
    np.testing.assert_array_equal(shifted, [-2.0, 2.0])
    # Differences θ - b are unchanged
    np.testing.assert_array_equal(
        centered[:, None] - shifted[None, :],
        thetas[:, None] - difficulties[None, :],
    )
