import numpy as np
import pytest

from calibration_service.core.utils import get_rng
from calibration_service.synthetic_data.sampling import draw_sample, registry


def test_registered_samplers() -> None:
    assert registry.names == ["normal", "truncated_normal", "uniform"]


def test_unknown_sampler_raises() -> None:
    with pytest.raises(ValueError, match="not registered"):
        registry.get_sampler("cauchy", {})


def test_uniform_within_limits() -> None:
    values = draw_sample(
        1000, "uniform", {"low": -2.0, "high": 2.0}, rng=get_rng(0)
    )
    assert values.shape == (1000,)
    assert values.min() >= -2.0
    assert values.max() <= 2.0


def test_truncated_normal_within_limits() -> None:
    values = draw_sample(
        1000,
        "truncated_normal",
        {"mean": 1.0, "std": 1.0, "lower": 0.2, "upper": 2.5},
        rng=get_rng(0),
    )
    assert values.min() >= 0.2
    assert values.max() <= 2.5


def test_normal_moments() -> None:
    values = draw_sample(
        20000, "normal", {"mean": 1.0, "std": 2.0}, rng=get_rng(0)
    )
    assert abs(values.mean() - 1.0) < 0.1
    assert abs(values.std() - 2.0) < 0.1


def test_seeded_sampling_is_reproducible() -> None:
    first = draw_sample(10, rng=get_rng(3))
    second = draw_sample(10, rng=get_rng(3))
    np.testing.assert_array_equal(first, second)
