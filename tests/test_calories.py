"""Tests for goal normalization and calorie targets."""

import logging

import pytest

from fatfit.tracker.calories import (
    Goal,
    Profile,
    Sex,
    calculate_calories,
    convert_goal,
    parse_number,
    round_half_up,
)

MALE = Profile(age=30, height_cm=180, weight_kg=80, sex=Sex.male)
FEMALE = Profile(age=25, height_cm=165, weight_kg=60, sex=Sex.other)


class TestConvertGoal:
    def test_lose(self):
        assert convert_goal("Lose weight") is Goal.lose

    def test_gain(self):
        assert convert_goal("Gain muscle") is Goal.gain

    def test_maintain(self):
        assert convert_goal("Maintain current weight") is Goal.keep

    def test_unknown_phrase_keeps(self):
        assert convert_goal("anything else") is Goal.keep

    def test_case_sensitive(self):
        assert convert_goal("lose weight") is Goal.keep

    @pytest.mark.parametrize("raw", [42, None, ["Lose weight"], 1.5])
    def test_non_string_keeps(self, raw):
        assert convert_goal(raw) is Goal.keep

    def test_non_string_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="fatfit.tracker.calories"):
            convert_goal(42)
        assert "non-string" in caplog.text


class TestCalculateCalories:
    def test_male_keep(self):
        # 800 + 1125 - 150 + 5
        assert calculate_calories(MALE, Goal.keep) == 1780

    def test_male_lose(self):
        assert calculate_calories(MALE, Goal.lose) == 1424

    def test_male_gain(self):
        assert calculate_calories(MALE, Goal.gain) == 2136

    def test_female_keep_rounds(self):
        # 600 + 1031.25 - 125 - 161 = 1345.25
        assert calculate_calories(FEMALE, Goal.keep) == 1345

    def test_string_biometrics_parse(self):
        profile = Profile(age="30", height_cm="180", weight_kg="80", sex="Male")
        assert calculate_calories(profile, Goal.keep) == 1780

    def test_unit_suffixed_biometrics(self):
        profile = Profile(age="30 years", height_cm="180cm", weight_kg="80 kg", sex=Sex.male)
        assert calculate_calories(profile, Goal.keep) == 1780

    def test_raw_goal_phrase_accepted(self):
        assert calculate_calories(MALE, "Lose weight") == 1424
        assert calculate_calories(MALE, "whatever") == 1780

    def test_age_integer_part(self):
        profile = Profile(age="30.9", height_cm=180, weight_kg=80, sex=Sex.male)
        assert calculate_calories(profile, Goal.keep) == 1780

    def test_non_numeric_weight_returns_zero(self, caplog):
        profile = Profile(age=30, height_cm=180, weight_kg="heavy", sex=Sex.male)
        with caplog.at_level(logging.WARNING, logger="fatfit.tracker.calories"):
            assert calculate_calories(profile, Goal.keep) == 0
        assert "non-numeric" in caplog.text

    @pytest.mark.parametrize("field", ["age", "height_cm", "weight_kg"])
    def test_missing_biometric_returns_zero(self, field):
        values = {"age": 30, "height_cm": 180, "weight_kg": 80}
        values[field] = None
        assert calculate_calories(Profile(sex=Sex.male, **values), Goal.gain) == 0

    def test_nan_is_not_a_number(self):
        profile = Profile(age=30, height_cm=180, weight_kg="nan", sex=Sex.male)
        assert calculate_calories(profile, Goal.keep) == 0

    def test_deterministic(self):
        assert calculate_calories(FEMALE, Goal.lose) == calculate_calories(FEMALE, Goal.lose)


class TestHelpers:
    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(1345.49) == 1345

    def test_parse_number(self):
        assert parse_number(" 72.5 ") == 72.5
        assert parse_number(True) is None
        assert parse_number("inf") is None
        assert parse_number("") is None
        assert parse_number("80 kg") == 80.0
        assert parse_number("1.75m") == 1.75
        assert parse_number("kg 80") is None

    def test_sex_from_text(self):
        assert Sex.from_text("MALE") is Sex.male
        assert Sex.from_text("female") is Sex.other
        assert Sex.from_text(None) is Sex.other
