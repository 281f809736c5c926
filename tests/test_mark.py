"""
Test: Mark derivation and updates.
"""
import math
import random

import pytest

from marktrack.core.entities import Mark
from marktrack.core.exceptions import InvalidInputError


class TestCreateMark:
    def test_derived_fields(self):
        mark = Mark("Quiz", 80, 100, 20, entity_id="m1")
        assert mark.id == "m1"
        assert mark.percentage == 80
        assert mark.weighted == 16

    def test_percentage_formula(self):
        mark = Mark("Quiz", 7, 9, 12)
        assert mark.percentage == 7 / 9 * 100
        assert mark.weighted == 12 * (7 / 9 * 100) / 100

    def test_zero_max_score_rejected(self):
        with pytest.raises(InvalidInputError) as exc:
            Mark("Quiz", 5, 0, 10)
        assert exc.value.error_code == "INVALID_INPUT"

    @pytest.mark.parametrize("value", [math.nan, math.inf, "80", None, True])
    def test_non_numeric_score_rejected(self, value):
        with pytest.raises(InvalidInputError):
            Mark("Quiz", value, 100, 10)

    def test_values_are_not_rounded(self):
        mark = Mark("Quiz", 1, 3, 10)
        assert mark.percentage == pytest.approx(33.333333333, rel=1e-9)
        assert mark.percentage != 33.33

    def test_generated_id_when_omitted(self):
        mark = Mark("Quiz", 1, 2, 3)
        assert len(mark.id) == 4

    def test_validate_values(self):
        assert Mark.validate_values(1, 2, 3) == (1.0, 2.0, 3.0)
        with pytest.raises(InvalidInputError):
            Mark.validate_values(1, 0, 3)
        with pytest.raises(InvalidInputError):
            Mark.validate_values(1, 2, math.inf)


class TestUpdateMark:
    def test_scenario(self):
        mark = Mark("Quiz", 80, 100, 20)
        mark.update_weightage(30)
        assert mark.percentage == 80
        assert mark.weighted == 24
        mark.update_max_score(160)
        assert mark.percentage == 50
        assert mark.weighted == 15

    def test_update_score(self):
        mark = Mark("Quiz", 80, 100, 20)
        mark.update_score(90)
        assert mark.score == 90
        assert mark.percentage == 90
        assert mark.weighted == 18

    def test_update_name_has_no_derived_effect(self):
        mark = Mark("Quiz", 80, 100, 20)
        mark.update_name("Quiz 1")
        assert mark.name == "Quiz 1"
        assert mark.percentage == 80
        assert mark.weighted == 16

    def test_zero_max_score_leaves_state_unchanged(self):
        mark = Mark("Quiz", 80, 100, 20)
        version = mark.version
        with pytest.raises(InvalidInputError):
            mark.update_max_score(0)
        assert mark.max_score == 100
        assert mark.percentage == 80
        assert mark.weighted == 16
        assert mark.version == version

    def test_update_score_with_zero_max_score(self):
        mark = Mark("Quiz", 80, 100, 20)
        mark._max_score = 0.0
        with pytest.raises(InvalidInputError):
            mark.update_score(50)
        assert mark.score == 80

    def test_weightage_update_keeps_percentage(self):
        mark = Mark("Quiz", 80, 100, 20)
        mark.update_weightage(0)
        assert mark.weighted == 0
        assert mark.percentage == 80

    def test_weighted_follows_latest_inputs(self):
        mark = Mark("Quiz", 10, 20, 5)
        mark.update_score(15)
        mark.update_weightage(40)
        mark.update_max_score(30)
        mark.update_weightage(25)
        assert mark.percentage == pytest.approx(15 / 30 * 100)
        assert mark.weighted == pytest.approx(25 * mark.percentage / 100)

    def test_updates_bump_version(self):
        mark = Mark("Quiz", 80, 100, 20)
        mark.update_score(70)
        mark.update_weightage(10)
        assert mark.version == 3
        assert mark.updated_at >= mark.created_at


class TestSeedMark:
    def test_seeded_values_in_range(self):
        rng = random.Random(42)
        for _ in range(200):
            mark = Mark.seed_random(rng=rng)
            assert 0 <= mark.score < mark.max_score
            assert 0 <= mark.weightage < 50
            assert len(mark.id) == 4
            assert len(mark.name) == 6
            assert mark.percentage == mark.score / mark.max_score * 100
            assert mark.weighted == mark.weightage * mark.percentage / 100

    def test_to_dict(self):
        mark = Mark("Quiz", 80, 100, 20, entity_id="m1")
        data = mark.to_dict()
        assert data['id'] == "m1"
        assert data['weighted'] == 16
        assert data['version'] == 1
