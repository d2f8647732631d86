"""
Preset parameter profiles for common calibration scenarios.

These presets provide realistic starting points for exercising the
calibration pipeline end to end.
"""

from pathlib import Path

from omegaconf import OmegaConf

from calibration_service.synthetic_data.config import GenerationConfig

PARAMS_DIR = Path(__file__).parent / "params"


def load_config(yaml_path: Path) -> GenerationConfig:
    """Load and validate a generation config from YAML.

    Args:
        yaml_path: Path to YAML config file

    Returns:
        Validated GenerationConfig

    Raises:
        FileNotFoundError: If yaml_path doesn't exist
    """
    if not yaml_path.exists():
        raise FileNotFoundError(f"Config file not found: {yaml_path}")

    schema = OmegaConf.structured(GenerationConfig)
    config = OmegaConf.merge(schema, OmegaConf.load(yaml_path))

    result = OmegaConf.to_object(config)
    assert isinstance(result, GenerationConfig)

    return result


def get_available_presets() -> list[str]:
    return sorted(x.stem for x in PARAMS_DIR.glob("*.yaml"))


def get_preset(name: str) -> GenerationConfig:
    """Get a preset configuration by name."""
    config_path = PARAMS_DIR / f"{name}.yaml"
    if not config_path.exists():
        available_presets = get_available_presets()
        raise ValueError(
            f"Unknown preset: {name}. Available presets: {available_presets}"
        )
    return load_config(config_path)
