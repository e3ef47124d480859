"""Tests for Score invariants and request models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from venue_pulse.domain.enums import DataSource, VibeLevel
from venue_pulse.domain.score import Score, default_score
from venue_pulse.models import PingRequest, VibeReportRequest

from tests.helpers import FRIDAY_NIGHT


class TestScore:
    def test_value_is_clamped(self) -> None:
        assert Score(value=12.4, confidence=0.5, source=DataSource.ESTIMATED).value == 10.0
        assert Score(value=-3, confidence=0.5, source=DataSource.ESTIMATED).value == 0.0

    def test_value_is_rounded_to_one_decimal(self) -> None:
        assert Score(value=6.21, confidence=0.5, source=DataSource.ESTIMATED).value == 6.2
        assert Score(value=4.34, confidence=0.5, source=DataSource.ESTIMATED).value == 4.3

    def test_confidence_is_clamped(self) -> None:
        assert Score(value=5, confidence=0.0, source=DataSource.ESTIMATED).confidence == 0.1
        assert Score(value=5, confidence=1.7, source=DataSource.ESTIMATED).confidence == 1.0

    def test_frozen(self) -> None:
        score = Score(value=5, confidence=0.5, source=DataSource.ESTIMATED)
        with pytest.raises(ValidationError):
            score.value = 9.0

    def test_naive_timestamp_becomes_utc(self) -> None:
        naive = FRIDAY_NIGHT.replace(tzinfo=None)
        score = Score(value=5, confidence=0.5, source=DataSource.ESTIMATED, computed_at=naive)
        assert score.computed_at == FRIDAY_NIGHT

    def test_default_score(self) -> None:
        score = default_score(FRIDAY_NIGHT)
        assert (score.value, score.confidence, score.source) == (5.0, 0.3, DataSource.ESTIMATED)
        assert score.computed_at == FRIDAY_NIGHT


class TestRequests:
    def test_report_request_maps_to_report(self) -> None:
        body = VibeReportRequest(participant_id="u1", vibe_level="busy", wait_minutes=20)
        report = body.to_report(7)
        assert report.venue_id == 7
        assert report.vibe_level == VibeLevel.BUSY
        assert report.wait_minutes == 20

    @pytest.mark.parametrize("wait", [-1, 181])
    def test_wait_minutes_bounds(self, wait: int) -> None:
        with pytest.raises(ValidationError):
            VibeReportRequest(participant_id="u1", vibe_level="busy", wait_minutes=wait)

    def test_unknown_vibe_rejected(self) -> None:
        with pytest.raises(ValidationError):
            VibeReportRequest(participant_id="u1", vibe_level="lit")

    def test_ping_request(self) -> None:
        ping = PingRequest(device_id="abc").to_ping(3)
        assert (ping.venue_id, ping.device_id) == (3, "abc")
