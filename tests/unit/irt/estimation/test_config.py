import pytest

from calibration_service.irt.estimation.config import (
    CalibrationConfig,
    CalibrationSettings,
    ItemFilterConfig,
    NewtonRaphsonConfig,
    ParameterBounds,
    default_config,
)


def test_default_constants() -> None:
    config = default_config()

    assert config.bounds.discrimination == (0.1, 4.0)
    assert config.bounds.difficulty == (-4.0, 4.0)
    assert config.bounds.theta == (-4.0, 4.0)
    assert config.newton_raphson.max_iterations == 20
    assert config.newton_raphson.tolerance == 1e-4
    assert config.newton_raphson.hessian_epsilon == 1e-10
    assert config.newton_raphson.damping == 0.5
    assert config.convergence.max_iterations == 100
    assert config.convergence.threshold == 0.01
    assert config.item_filter.min_p_value == 0.05
    assert config.item_filter.max_p_value == 0.95
    assert config.item_filter.dichotomize_threshold == 0.5
    assert config.requirements.min_respondents == 200
    assert config.requirements.min_items == 3
    assert config.proportion_clip == (0.01, 0.99)


def test_model_version_read_from_project() -> None:
    assert CalibrationConfig().model_version == "0.3.0"


def test_invalid_bounds_raise() -> None:
    with pytest.raises(ValueError, match="lower < upper"):
        ParameterBounds(theta=(2.0, -2.0))
    with pytest.raises(ValueError, match="positive"):
        ParameterBounds(discrimination=(0.0, 4.0))


def test_invalid_damping_raises() -> None:
    with pytest.raises(ValueError, match="damping"):
        NewtonRaphsonConfig(damping=1.5)


def test_invalid_p_value_limits_raise() -> None:
    with pytest.raises(ValueError, match="p-value limits"):
        ItemFilterConfig(min_p_value=0.9, max_p_value=0.1)


class TestCalibrationSettings:
    def test_defaults_match_config(self) -> None:
        config = CalibrationSettings().to_config()
        expected = default_config()

        assert config.bounds == expected.bounds
        assert config.newton_raphson == expected.newton_raphson
        assert config.convergence == expected.convergence
        assert config.item_filter == expected.item_filter
        assert config.requirements == expected.requirements

    def test_environment_override(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("CALIBRATION_MAX_ITERATIONS", "250")
        monkeypatch.setenv("CALIBRATION_MIN_RESPONDENTS", "50")
        monkeypatch.setenv("CALIBRATION_DAMPING", "0.25")

        config = CalibrationSettings().to_config()

        assert config.convergence.max_iterations == 250
        assert config.requirements.min_respondents == 50
        assert config.newton_raphson.damping == 0.25
