"""Tests for temporal rule matching and evaluation."""

from datetime import datetime

import pytest

from fare_engine.core.exceptions import ValidationError
from fare_engine.models import DateRange, GeoScope, RuleType
from fare_engine.settings import PricingSettings
from fare_engine.temporal import TemporalRuleMatcher, parse_moment
from fare_engine.temporal.matcher import day_of_week, localize, time_in_range

# 2024-01-15 is a Monday, 2024-01-13 a Saturday, 2024-01-14 a Sunday


@pytest.fixture
def late_night(rule_store, factory):
    return rule_store.add(
        factory.rule(
            name="Late Night Hours",
            rule_type=RuleType.TIME_RANGE,
            start_time="22:00",
            end_time="06:00",
            multiplier=1.6,
            priority=15,
        )
    )


@pytest.fixture
def morning_peak(rule_store, factory):
    return rule_store.add(
        factory.rule(
            name="Morning Peak Hours",
            rule_type=RuleType.TIME_RANGE,
            start_time="07:00",
            end_time="09:00",
            days_of_week=[1, 2, 3, 4, 5],
            multiplier=1.4,
            priority=20,
        )
    )


@pytest.mark.unit
class TestTimeHelpers:
    @pytest.mark.parametrize(
        ("time", "expected"),
        [("23:00", True), ("01:00", True), ("22:00", True), ("06:00", True), ("12:00", False)],
    )
    def test_overnight_window(self, time, expected):
        assert time_in_range(time, "22:00", "06:00") is expected

    @pytest.mark.parametrize(
        ("time", "expected"),
        [("07:00", True), ("09:00", True), ("09:01", False), ("06:59", False)],
    )
    def test_same_day_window_is_inclusive(self, time, expected):
        assert time_in_range(time, "07:00", "09:00") is expected

    def test_missing_bound_matches(self):
        assert time_in_range("12:00", None, "09:00") is True

    def test_day_of_week_sunday_is_zero(self):
        assert day_of_week(datetime(2024, 1, 14)) == 0
        assert day_of_week(datetime(2024, 1, 15)) == 1
        assert day_of_week(datetime(2024, 1, 13)) == 6

    def test_parse_moment(self):
        assert parse_moment("2024-01-15T08:30:00Z").hour == 8
        moment = datetime(2024, 1, 15, 8, 30)
        assert parse_moment(moment) is moment

    def test_parse_moment_rejects_garbage(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_moment("yesterday")
        assert exc_info.value.violations[0].field == "date_time"

    def test_localize_converts_aware_to_utc(self):
        local = localize(parse_moment("2024-01-15T05:30:00-03:00"), "UTC")
        assert (local.hour, local.minute) == (8, 30)

    def test_localize_keeps_naive(self):
        moment = datetime(2024, 1, 15, 8, 30)
        assert localize(moment, "UTC") is moment


@pytest.mark.unit
class TestRuleMatching:
    @pytest.mark.parametrize(
        ("moment", "expected"),
        [
            ("2024-01-15T23:00:00Z", True),
            ("2024-01-16T01:00:00Z", True),
            ("2024-01-15T12:00:00Z", False),
        ],
    )
    def test_overnight_rule(self, matcher, late_night, moment, expected):
        applicable = matcher.find_applicable_rules(moment)
        assert (late_night in applicable) is expected

    def test_days_of_week_filter(self, matcher, morning_peak):
        assert matcher.find_applicable_rules("2024-01-15T08:30:00Z") == [morning_peak]
        assert matcher.find_applicable_rules("2024-01-13T08:30:00Z") == []

    def test_day_of_week_rule(self, matcher, rule_store, factory):
        weekend = rule_store.add(
            factory.rule(rule_type=RuleType.DAY_OF_WEEK, days_of_week=[0, 6], multiplier=1.2)
        )

        assert matcher.find_applicable_rules("2024-01-14T15:00:00Z") == [weekend]
        assert matcher.find_applicable_rules("2024-01-15T15:00:00Z") == []

    def test_date_specific_rule(self, matcher, rule_store, factory):
        christmas = rule_store.add(
            factory.rule(
                rule_type=RuleType.DATE_SPECIFIC, specific_dates=["2024-12-25"], multiplier=2.0
            )
        )

        assert matcher.find_applicable_rules("2024-12-25T10:00:00Z") == [christmas]
        assert matcher.find_applicable_rules("2024-12-26T10:00:00Z") == []

    def test_seasonal_rule(self, matcher, rule_store, factory):
        summer = rule_store.add(
            factory.rule(
                rule_type=RuleType.SEASONAL,
                date_ranges=[DateRange(start="2024-06-01", end="2024-08-31")],
                multiplier=1.3,
            )
        )

        assert matcher.find_applicable_rules("2024-08-31T23:59:00Z") == [summer]
        assert matcher.find_applicable_rules("2024-09-01T00:00:00Z") == []

    def test_inactive_and_manual_rules_are_not_automatic(self, matcher, rule_store, factory):
        rule_store.add(factory.rule(is_active=False))
        rule_store.add(factory.rule(auto_apply=False))

        assert matcher.find_applicable_rules("2024-01-15T08:30:00Z") == []

    def test_aware_input_is_converted(self, matcher, morning_peak):
        assert matcher.find_applicable_rules("2024-01-15T05:30:00-03:00") == [morning_peak]

    def test_naive_input_is_used_as_is(self, matcher, morning_peak):
        assert matcher.find_applicable_rules(datetime(2024, 1, 15, 8, 30)) == [morning_peak]


@pytest.mark.unit
class TestScope:
    def test_global_rule_applies_everywhere(self, matcher, rule_store, factory):
        rule = rule_store.add(factory.rule())

        assert matcher.find_applicable_rules("2024-01-15T08:30:00Z") == [rule]
        assert matcher.find_applicable_rules(
            "2024-01-15T08:30:00Z", GeoScope(country_id=1, city_id=1)
        ) == [rule]

    def test_country_rule_applies_to_request_naming_a_city(self, matcher, rule_store, factory):
        rule = rule_store.add(factory.rule(country_id=1))

        applicable = matcher.find_applicable_rules(
            "2024-01-15T08:30:00Z", GeoScope(country_id=1, city_id=5)
        )
        assert applicable == [rule]

    def test_scoped_rule_needs_matching_id(self, matcher, rule_store, factory):
        rule_store.add(factory.rule(city_id=2))

        assert matcher.find_applicable_rules("2024-01-15T08:30:00Z", GeoScope(city_id=1)) == []
        assert matcher.find_applicable_rules("2024-01-15T08:30:00Z") == []


@pytest.mark.unit
class TestEvaluate:
    def test_priority_selection(self, matcher, rule_store, factory):
        rule_store.add(factory.rule(multiplier=1.4, priority=20))
        rule_store.add(factory.rule(multiplier=1.8, priority=50))

        result = matcher.evaluate("2024-01-15T08:30:00Z")

        assert result.applied_rule.multiplier == 1.8
        assert result.combined_multiplier == 1.8
        assert [r.priority for r in result.applicable_rules] == [50, 20]

    def test_no_applicable_rule(self, matcher, morning_peak):
        result = matcher.evaluate("2024-01-15T12:00:00Z")

        assert result.combined_multiplier == 1.0
        assert result.applied_rule is None
        assert result.applicable_rules == []

    def test_idempotent(self, matcher, morning_peak, late_night):
        first = matcher.evaluate("2024-01-15T08:30:00Z", GeoScope(city_id=1))
        second = matcher.evaluate("2024-01-15T08:30:00Z", GeoScope(city_id=1))

        assert first.combined_multiplier == second.combined_multiplier
        assert first.applied_rule == second.applied_rule

    def test_result_fields(self, matcher, morning_peak):
        result = matcher.evaluate(
            "2024-01-15T08:30:00Z", GeoScope(country_id=1, city_id=1, zone_id=99)
        )

        assert result.evaluated_at == "2024-01-15T08:30:00Z"
        assert result.day_of_week == 1
        assert result.time == "08:30"
        assert result.scope.country == "Brazil"
        assert result.scope.city == "Sao Paulo City"
        assert result.scope.state is None
        assert result.scope.zone is None

    def test_datetime_input_is_echoed_in_iso_format(self, matcher):
        result = matcher.evaluate(datetime(2024, 1, 15, 8, 30))
        assert result.evaluated_at == "2024-01-15T08:30:00"

    def test_store_is_read_on_every_call(self, matcher, rule_store, factory):
        matcher.evaluate("2024-01-15T08:30:00Z")
        rule_store.add(factory.rule(multiplier=1.5))

        assert matcher.evaluate("2024-01-15T08:30:00Z").combined_multiplier == 1.5
        assert rule_store.candidate_calls == 2

    def test_unknown_timezone(self, rule_store, geography):
        matcher = TemporalRuleMatcher(
            rule_store, geography, PricingSettings(timezone="Mars/Olympus_Mons")
        )
        with pytest.raises(ValidationError):
            matcher.evaluate("2024-01-15T08:30:00Z")


@pytest.mark.unit
class TestEvaluateSpecificRules:
    def test_calendar_is_ignored(self, matcher, morning_peak):
        result = matcher.evaluate_specific_rules([morning_peak.id], "2024-01-13T23:00:00Z")

        assert result.applied_rule.id == morning_peak.id
        assert result.combined_multiplier == 1.4

    def test_inactive_rules_excluded(self, matcher, rule_store, factory):
        inactive = rule_store.add(factory.rule(is_active=False, multiplier=3.0))

        result = matcher.evaluate_specific_rules([inactive.id], "2024-01-15T08:30:00Z")

        assert result.applied_rule is None
        assert result.combined_multiplier == 1.0

    def test_manual_only_rules_can_be_forced(self, matcher, rule_store, factory):
        manual = rule_store.add(factory.rule(auto_apply=False, multiplier=2.5))

        result = matcher.evaluate_specific_rules([manual.id], "2024-01-15T08:30:00Z")

        assert result.combined_multiplier == 2.5
