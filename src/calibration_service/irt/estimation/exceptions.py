"""
Errors raised before a calibration run starts iterating.

Numerical degeneracies during iteration never raise; they are handled by
skipping the affected update for that round.
"""

from collections.abc import Hashable


class CalibrationError(Exception):
    pass


class CompetencyNotFoundError(CalibrationError):
    def __init__(self, competency_id: Hashable) -> None:
        self.competency_id = competency_id
        super().__init__(f"Competency not found: {competency_id}")


class InsufficientDataError(CalibrationError):
    pass


class InsufficientRespondentsError(InsufficientDataError):
    def __init__(self, n_respondents: int, minimum: int) -> None:
        self.n_respondents = n_respondents
        self.minimum = minimum
        super().__init__(
            f"Insufficient respondents for IRT calibration: {n_respondents} "
            f"(minimum {minimum} required)"
        )


class InsufficientItemsError(InsufficientDataError):
    def __init__(self, n_items: int, minimum: int) -> None:
        self.n_items = n_items
        self.minimum = minimum
        super().__init__(
            f"Insufficient items for IRT calibration: {n_items} "
            f"(minimum {minimum} required)"
        )
