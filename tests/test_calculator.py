"""Tests for the pure score calculation functions."""

from __future__ import annotations

import pytest

from venue_pulse.core.calculator import (
    activity_component,
    compose_score,
    confidence,
    convert_external_scale,
    momentum_boost,
    time_of_day_multiplier,
    vibe_boost,
    wait_time_boost,
)
from venue_pulse.domain.enums import CheckInTrend, DataSource

from tests.helpers import metrics

SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = range(7)


class TestActivityComponent:
    @pytest.mark.parametrize(
        "count, expected",
        [(0, 3.0), (1, 4.0), (2, 4.5), (5, 5.0), (10, 5.5), (12, 5.5), (15, 6.0),
         (20, 6.5), (30, 7.0), (50, 8.0), (75, 8.5), (100, 9.0), (500, 9.0)],
    )
    def test_step_values(self, count: int, expected: float) -> None:
        assert activity_component(count) == expected

    def test_monotone_non_decreasing(self) -> None:
        values = [activity_component(n) for n in range(0, 150)]
        assert values == sorted(values)
        assert min(values) == 3.0
        assert max(values) == 9.0


class TestBoosts:
    def test_momentum_table(self) -> None:
        assert momentum_boost(CheckInTrend.SURGING) == 1.0
        assert momentum_boost(CheckInTrend.INCREASING) == 0.5
        assert momentum_boost(CheckInTrend.STABLE) == 0.0
        assert momentum_boost(CheckInTrend.DECREASING) == -0.5

    def test_vibe_boost_sentiment_only(self) -> None:
        assert vibe_boost(0.8, 0) == 0.5
        assert vibe_boost(0.5, 0) == 0.3
        assert vibe_boost(0.1, 0) == 0.1
        assert vibe_boost(0.0, 0) == 0.0
        assert vibe_boost(-0.9, 0) == 0.0

    def test_vibe_boost_artifacts_only(self) -> None:
        assert vibe_boost(0.0, 10) == 0.5
        assert vibe_boost(0.0, 6) == 0.3
        assert vibe_boost(0.0, 2) == 0.2
        assert vibe_boost(0.0, 1) == 0.1

    def test_vibe_boost_capped_at_one(self) -> None:
        assert vibe_boost(0.9, 50) == 1.0
        assert 0.0 <= vibe_boost(0.8, 6) <= 1.0

    @pytest.mark.parametrize(
        "minutes, expected",
        [(None, 0.0), (0, 0.0), (3, 0.0), (5, 0.5), (10, 0.7), (20, 1.0),
         (30, 1.5), (35, 1.5), (45, 2.0), (120, 2.0)],
    )
    def test_wait_time_boost(self, minutes, expected: float) -> None:
        assert wait_time_boost(minutes) == expected


class TestTimeOfDayMultiplier:
    def test_weekend_night(self) -> None:
        assert time_of_day_multiplier(23, FRIDAY) == 1.15
        assert time_of_day_multiplier(1, SATURDAY) == 1.15
        assert time_of_day_multiplier(22, THURSDAY) == 1.15
        assert time_of_day_multiplier(2, SUNDAY) == 1.15

    def test_general_evening(self) -> None:
        assert time_of_day_multiplier(20, MONDAY) == 1.10
        assert time_of_day_multiplier(21, FRIDAY) == 1.10
        assert time_of_day_multiplier(0, TUESDAY) == 1.10

    def test_weekday_happy_hour(self) -> None:
        assert time_of_day_multiplier(17, MONDAY) == 1.05
        assert time_of_day_multiplier(19, FRIDAY) == 1.05

    def test_happy_hour_excludes_weekend(self) -> None:
        assert time_of_day_multiplier(18, SATURDAY) == 1.0

    def test_early_week_late_night(self) -> None:
        # 23:00 is already claimed by the evening window; 1am is not
        assert time_of_day_multiplier(1, TUESDAY) == 0.90
        assert time_of_day_multiplier(23, TUESDAY) == 1.10

    def test_daytime_and_early_morning(self) -> None:
        assert time_of_day_multiplier(6, WEDNESDAY) == 0.70
        assert time_of_day_multiplier(16, SATURDAY) == 0.70
        assert time_of_day_multiplier(3, MONDAY) == 0.50
        assert time_of_day_multiplier(5, FRIDAY) == 0.50

    def test_uncovered_hours_fall_through(self) -> None:
        assert time_of_day_multiplier(2, TUESDAY) == 1.0
        assert time_of_day_multiplier(2, THURSDAY) == 1.15  # weekend-night covers Thu
        assert time_of_day_multiplier(1, THURSDAY) == 1.15
        assert time_of_day_multiplier(2, MONDAY) == 1.0


class TestComposeScore:
    def test_quiet_venue(self) -> None:
        # 3.0 base at 9pm on a Wednesday evening
        assert compose_score(metrics(day_of_week=WEDNESDAY, hour_of_day=21)) == 3.3

    def test_busy_friday_night_clamps_to_ten(self) -> None:
        m = metrics(
            active_check_ins=12,
            check_in_trend=CheckInTrend.SURGING,
            recent_sentiment=0.8,
            vibe_photo_count=6,
            reported_wait_minutes=35,
            day_of_week=FRIDAY,
            hour_of_day=23,
            is_special_event=False,
        )
        assert compose_score(m) == 10.0

    def test_special_event_multiplier(self) -> None:
        plain = compose_score(metrics(active_check_ins=30, day_of_week=MONDAY, hour_of_day=12))
        event = compose_score(
            metrics(active_check_ins=30, day_of_week=MONDAY, hour_of_day=12, is_special_event=True)
        )
        assert plain == 4.9  # 7.0 * 0.7
        assert event == 5.9  # 4.9 * 1.2 = 5.88

    def test_decreasing_trend_in_early_morning(self) -> None:
        m = metrics(
            active_check_ins=2,
            check_in_trend=CheckInTrend.DECREASING,
            day_of_week=MONDAY,
            hour_of_day=4,
        )
        assert compose_score(m) == 2.0  # (4.5 - 0.5) * 0.5

    @pytest.mark.parametrize("trend", list(CheckInTrend))
    @pytest.mark.parametrize("hour", [0, 4, 12, 18, 21, 23])
    @pytest.mark.parametrize("active", [0, 7, 40, 200])
    def test_always_bounded_and_one_decimal(self, trend, hour: int, active: int) -> None:
        m = metrics(
            active_check_ins=active,
            check_in_trend=trend,
            recent_sentiment=0.9,
            vibe_photo_count=12,
            reported_wait_minutes=60,
            hour_of_day=hour,
            day_of_week=SATURDAY,
            is_special_event=True,
        )
        value = compose_score(m)
        assert 0.0 <= value <= 10.0
        assert round(value, 1) == value

    def test_deterministic(self) -> None:
        m = metrics(active_check_ins=33, reported_wait_minutes=22, recent_sentiment=0.4)
        assert compose_score(m) == compose_score(m)


class TestConvertExternalScale:
    def test_zero_floors_at_three(self) -> None:
        assert convert_external_scale(0) == 3.0

    @pytest.mark.parametrize(
        "level, expected",
        [(5, 3.5), (10, 4.0), (20, 5.0), (30, 5.5), (40, 6.0), (50, 6.5),
         (60, 7.0), (70, 7.5), (80, 8.5), (90, 9.5), (100, 9.5)],
    )
    def test_band_edges(self, level: int, expected: float) -> None:
        assert convert_external_scale(level) == pytest.approx(expected)

    def test_monotone_non_decreasing(self) -> None:
        values = [convert_external_scale(level / 2) for level in range(0, 201)]
        assert all(b >= a for a, b in zip(values, values[1:]))

    def test_out_of_range_is_clamped(self) -> None:
        assert convert_external_scale(-20) == 3.0
        assert convert_external_scale(250) == 9.5


class TestConfidence:
    def test_source_bases_for_fresh_mid_volume(self) -> None:
        assert confidence(5, 30, DataSource.RICH_TELEMETRY) == pytest.approx(0.9)
        assert confidence(5, 30, DataSource.COMMUNITY) == pytest.approx(0.7)
        assert confidence(5, 30, DataSource.EXTERNAL) == pytest.approx(0.6)

    def test_volume_and_freshness_bonuses(self) -> None:
        assert confidence(25, 5, DataSource.COMMUNITY) == pytest.approx(0.85)
        assert confidence(12, 5, DataSource.EXTERNAL) == pytest.approx(0.7)

    def test_low_volume_penalty(self) -> None:
        assert confidence(1, 30, DataSource.EXTERNAL) == pytest.approx(0.4)

    def test_stale_penalties_stack(self) -> None:
        assert confidence(5, 90, DataSource.COMMUNITY) == pytest.approx(0.6)
        assert confidence(5, 150, DataSource.COMMUNITY) == pytest.approx(0.4)

    def test_capped_at_one(self) -> None:
        assert confidence(100, 0, DataSource.RICH_TELEMETRY) == 1.0

    @pytest.mark.parametrize("count", [0, 2, 3, 9, 10, 19, 20, 100])
    @pytest.mark.parametrize("age", [0, 14, 15, 60, 61, 120, 121, 1000])
    def test_bounded_and_rich_at_least_external(self, count: int, age: int) -> None:
        for source in DataSource:
            assert 0.1 <= confidence(count, age, source) <= 1.0
        assert confidence(count, age, DataSource.RICH_TELEMETRY) >= confidence(
            count, age, DataSource.EXTERNAL
        )
