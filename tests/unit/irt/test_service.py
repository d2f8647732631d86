"""
Tests for the calibration service facade.
"""

import logging
from collections.abc import Collection, Hashable, Iterable, Mapping

import pytest

from calibration_service.core.data_models import ScoreRow
from calibration_service.irt.estimation.exceptions import (
    CompetencyNotFoundError,
    InsufficientItemsError,
    InsufficientRespondentsError,
)
from calibration_service.irt.estimation.parameters import ItemParameters
from calibration_service.irt.service import (
    CalibrationService,
    InMemoryScoreRepository,
    ScoreRepository,
)
from calibration_service.synthetic_data.config import (
    DistributionConfig,
    GenerationConfig,
)
from calibration_service.synthetic_data.generators import generate_score_rows


class RecordingRepository(ScoreRepository):
    """Repository that records which lookups were made."""

    def __init__(self, inner: InMemoryScoreRepository) -> None:
        self.inner = inner
        self.streamed: list[Hashable] = []
        self.parameter_lookups: list[Collection[Hashable]] = []

    def competency_exists(self, competency_id: Hashable) -> bool:
        return self.inner.competency_exists(competency_id)

    def stream_scores(self, competency_id: Hashable) -> Iterable[ScoreRow]:
        self.streamed.append(competency_id)
        return self.inner.stream_scores(competency_id)

    def find_item_parameters(
        self, item_ids: Collection[Hashable]
    ) -> Mapping[Hashable, ItemParameters]:
        self.parameter_lookups.append(item_ids)
        return self.inner.find_item_parameters(item_ids)


def _generated_rows(n_respondents: int, n_items: int) -> list[ScoreRow]:
    config = GenerationConfig(
        n_respondents=n_respondents,
        n_items=n_items,
        random_seed=11,
        difficulty=DistributionConfig(
            distribution="uniform", params={"low": -1.5, "high": 1.5}
        ),
    )
    return generate_score_rows(config).rows


class TestCalibrate:
    def test_unknown_competency_raises_before_streaming(self) -> None:
        repository = RecordingRepository(InMemoryScoreRepository())
        service = CalibrationService(repository)

        with pytest.raises(CompetencyNotFoundError) as exc_info:
            service.calibrate("missing")

        assert exc_info.value.competency_id == "missing"
        assert repository.streamed == []

    def test_too_few_respondents(self) -> None:
        repository = InMemoryScoreRepository(
            {"c1": _generated_rows(n_respondents=150, n_items=6)}
        )
        service = CalibrationService(repository)

        with pytest.raises(InsufficientRespondentsError, match="150"):
            service.calibrate("c1")

    def test_too_few_items(self) -> None:
        repository = InMemoryScoreRepository(
            {"c1": _generated_rows(n_respondents=250, n_items=2)}
        )
        service = CalibrationService(repository)

        with pytest.raises(InsufficientItemsError) as exc_info:
            service.calibrate("c1")

        assert exc_info.value.n_items <= 2
        assert exc_info.value.minimum == 3

    def test_calibrate_returns_result_and_logs_summary(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        repository = InMemoryScoreRepository(
            {"c1": _generated_rows(n_respondents=300, n_items=8)}
        )
        service = CalibrationService(repository)

        with caplog.at_level(logging.INFO):
            result = service.calibrate("c1")

        assert result.competency_id == "c1"
        assert result.n_respondents == 300
        assert result.n_items == 8
        assert len(result.abilities) == 300
        assert "IRT calibration complete for competency c1" in caplog.text

    def test_item_everyone_answers_correctly_is_not_calibrated(self) -> None:
        rows = _generated_rows(n_respondents=300, n_items=8)
        respondent_ids = dict.fromkeys(row.respondent_id for row in rows)
        rows += [
            ScoreRow(respondent_id, "always_correct", 1.0)
            for respondent_id in respondent_ids
        ]
        service = CalibrationService(InMemoryScoreRepository({"c1": rows}))

        result = service.calibrate("c1")

        assert "always_correct" not in result.item_ids
        assert result.n_items == 8


class TestEstimateAbility:
    def test_empty_scores_skip_repository(self) -> None:
        repository = RecordingRepository(InMemoryScoreRepository())
        service = CalibrationService(repository)

        assert service.estimate_ability({}) == 0.0
        assert service.estimate_ability(None) == 0.0
        assert repository.parameter_lookups == []

    def test_uses_stored_parameters(self) -> None:
        inner = InMemoryScoreRepository(
            item_parameters={
                "q1": ItemParameters(discrimination=1.0, difficulty=-1.0),
                "q2": ItemParameters(discrimination=1.0, difficulty=0.0),
                "q3": ItemParameters(discrimination=1.0, difficulty=1.0),
            }
        )
        repository = RecordingRepository(inner)
        service = CalibrationService(repository)

        high = service.estimate_ability({"q1": 1.0, "q2": 1.0, "q3": 0.0})
        low = service.estimate_ability({"q1": 1.0, "q2": 0.0, "q3": 0.0})

        assert high > low
        assert len(repository.parameter_lookups) == 2

    def test_unknown_items_give_neutral_ability(self) -> None:
        service = CalibrationService(InMemoryScoreRepository())
        assert service.estimate_ability({"q9": 1.0}) == 0.0

    def test_store_calibration_feeds_scoring(self) -> None:
        repository = InMemoryScoreRepository(
            {"c1": _generated_rows(n_respondents=250, n_items=6)}
        )
        service = CalibrationService(repository)
        result = service.calibrate("c1")
        repository.store_calibration(result)

        all_correct = {item_id: 1.0 for item_id in result.item_ids}
        all_wrong = {item_id: 0.0 for item_id in result.item_ids}

        assert service.estimate_ability(all_correct) > service.estimate_ability(
            all_wrong
        )
