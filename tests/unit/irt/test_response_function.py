"""
Tests for the 2PL item response function.
"""

import numpy as np

from calibration_service.irt.response_function import (
    EXPONENT_LIMIT,
    probabilities,
    probability,
)


class TestProbability:
    def test_half_at_difficulty(self) -> None:
        """P = 0.5 when ability equals difficulty."""
        assert probability(0.7, 1.3, 0.7) == 0.5

    def test_monotonic_in_theta(self) -> None:
        """Higher ability never lowers the probability."""
        thetas = np.linspace(-4.0, 4.0, 81)
        probs = [probability(float(t), 1.5, 0.3) for t in thetas]
        assert all(p2 >= p1 for p1, p2 in zip(probs, probs[1:], strict=False))

    def test_symmetric_around_difficulty(self) -> None:
        for d in (0.1, 0.8, 2.5):
            upper = probability(0.5 + d, 1.2, 0.5)
            lower = probability(0.5 - d, 1.2, 0.5)
            assert abs(upper + lower - 1.0) < 1e-12

    def test_overflow_returns_exact_bounds(self) -> None:
        """Exponents beyond the limit short-circuit to exactly 0 or 1."""
        assert probability(-100.0, 4.0, 100.0) == 0.0
        assert probability(100.0, 4.0, -100.0) == 1.0

    def test_never_nan(self) -> None:
        for theta in (-1e6, -50.0, 0.0, 50.0, 1e6):
            p = probability(theta, 4.0, 0.0)
            assert not np.isnan(p)
            assert 0.0 <= p <= 1.0


class TestProbabilities:
    def test_matches_scalar_kernel(self) -> None:
        thetas = np.array([-3.0, -0.5, 0.0, 1.2, 3.9])
        expected = [probability(float(t), 0.8, -0.4) for t in thetas]
        np.testing.assert_allclose(
            probabilities(thetas, 0.8, -0.4), expected, rtol=1e-12
        )

    def test_broadcasts_to_matrix(self) -> None:
        thetas = np.array([-1.0, 0.0, 1.0])
        a = np.array([1.0, 2.0])
        b = np.array([0.0, 0.5])

        probs = probabilities(thetas[:, np.newaxis], a, b)

        assert probs.shape == (3, 2)
        assert probs[1, 0] == 0.5

    def test_thresholds_match_scalar_kernel(self) -> None:
        theta = np.array([-(EXPONENT_LIMIT + 1.0), EXPONENT_LIMIT + 1.0])
        np.testing.assert_array_equal(probabilities(theta, 1.0, 0.0), [0.0, 1.0])
