#!/usr/bin/env python
"""
Generate synthetic scored answer CSV files from parameter presets.

Output files are written to data/synthetic/{preset_name}.csv.
"""

import logging
from pathlib import Path

import typer

from calibration_service.synthetic_data.generators import (
    generate_score_rows,
    to_csv,
)
from calibration_service.synthetic_data.presets import (
    get_available_presets,
    get_preset,
)

SYNTHETIC_DATA_DIR = Path(__file__).parent.parent / "data" / "synthetic"

logger = logging.getLogger("generate_synthetic_data")


def main(preset: str | None = None) -> int:
    """Generate CSV files for one preset, or for all of them."""
    SYNTHETIC_DATA_DIR.mkdir(parents=True, exist_ok=True)

    if preset is None:
        presets = get_available_presets()
        if not presets:
            raise FileNotFoundError("No preset configurations found")
        logger.info("Found %d presets: %s", len(presets), presets)
    else:
        presets = [preset]

    for preset_name in presets:
        output_path = SYNTHETIC_DATA_DIR / f"{preset_name}.csv"
        logger.info("Generating %s -> %s", preset_name, output_path)

        config = get_preset(preset_name)
        data = generate_score_rows(config)
        to_csv(data, str(output_path))

        logger.info(
            "  Generated %d scores for %d respondents, %d items "
            "(missing rate %.3f)",
            data.n_rows,
            config.n_respondents,
            config.n_items,
            data.actual_missing_rate,
        )

    logger.info(
        "Done. Generated %d CSV files in %s", len(presets), SYNTHETIC_DATA_DIR
    )
    return 0


if __name__ == "__main__":
    typer.run(main)
