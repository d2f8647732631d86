"""
CSV loading utilities for scored answer data.
"""

from pathlib import Path

import pandas as pd

from calibration_service.core.data_models import ScoreRow

REQUIRED_COLUMNS = ("respondent_id", "item_id", "normalized_score")


def load_csv_to_score_rows(path: Path) -> list[ScoreRow]:
    """Load a CSV file of scored answers into ScoreRow tuples.

    Expected CSV columns:
        - respondent_id: identifier of the respondent (session)
        - item_id: identifier of the item
        - normalized_score: score in [0, 1]

    Ids are read as strings so that numeric-looking ids keep their form.

    Raises:
        ValueError: If a column is missing or a score is not numeric.
    """
    df = pd.read_csv(
        path, dtype={"respondent_id": str, "item_id": str}
    )

    for column in REQUIRED_COLUMNS:
        if column not in df.columns:
            raise ValueError(f"CSV must have '{column}' column")

    scores = pd.to_numeric(df["normalized_score"], errors="coerce")
    bad_rows = scores.isna()
    if bad_rows.any():
        first_bad = int(bad_rows.idxmax())
        raise ValueError(
            f"Non-numeric normalized_score in {int(bad_rows.sum())} row(s), "
            f"first at row {first_bad}"
        )

    return [
        ScoreRow(respondent_id, item_id, float(score))
        for respondent_id, item_id, score in zip(
            df["respondent_id"], df["item_id"], scores, strict=True
        )
    ]


def score_rows_to_frame(rows: list[ScoreRow]) -> pd.DataFrame:
    """Convert score rows to a DataFrame with the CSV column layout."""
    return pd.DataFrame(rows, columns=list(REQUIRED_COLUMNS))
