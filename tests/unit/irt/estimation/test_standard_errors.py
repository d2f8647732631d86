import numpy as np

from calibration_service.core.constants import MISSING_VALUE
from calibration_service.core.data_models import ResponseMatrix
from calibration_service.irt.estimation.standard_errors import (
    compute_standard_errors,
)


def _matrix(responses: list[list[int]]) -> ResponseMatrix:
    arr = np.array(responses, dtype=np.int8)
    return ResponseMatrix(
        item_ids=tuple(range(arr.shape[1])),
        respondent_ids=tuple(range(arr.shape[0])),
        item_p_values=np.full(arr.shape[1], 0.5),
        responses=arr,
    )


def test_matches_closed_form() -> None:
    data = _matrix([[1], [0], [1]])
    thetas = np.array([-1.0, 0.5, 2.0])
    a = np.array([1.5])
    b = np.array([0.2])

    se_a, se_b = compute_standard_errors(data, a, b, thetas, 1e-10)

    p = 1.0 / (1.0 + np.exp(-a[0] * (thetas - b[0])))
    pq = p * (1.0 - p)
    np.testing.assert_allclose(
        se_a, [1.0 / np.sqrt(np.sum((thetas - b[0]) ** 2 * pq))]
    )
    np.testing.assert_allclose(se_b, [1.0 / np.sqrt(a[0] ** 2 * np.sum(pq))])


def test_missing_respondents_are_excluded() -> None:
    full = _matrix([[1], [0]])
    with_missing = _matrix([[1, 1], [0, MISSING_VALUE], [1, 0]])
    a = np.array([1.0, 1.0])
    b = np.array([0.0, 0.0])

    se_a_full, se_b_full = compute_standard_errors(
        full, a[:1], b[:1], np.array([-1.0, 1.0]), 1e-10
    )
    se_a, se_b = compute_standard_errors(
        with_missing, a, b, np.array([-1.0, 5.0, 1.0]), 1e-10
    )

    # Item 1 is answered by respondents 0 and 2 only
    np.testing.assert_allclose(se_a[1], se_a_full[0])
    np.testing.assert_allclose(se_b[1], se_b_full[0])


def test_zero_information_gives_nan() -> None:
    """Every respondent at the item's difficulty carries no information on a."""
    data = _matrix([[1], [0]])
    thetas = np.array([0.3, 0.3])

    se_a, se_b = compute_standard_errors(
        data, np.array([1.0]), np.array([0.3]), thetas, 1e-10
    )

    assert np.isnan(se_a[0])
    np.testing.assert_allclose(se_b, [1.0 / np.sqrt(0.5)])
