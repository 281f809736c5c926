"""
Test: Course totals and mark management.
"""
import random
import re

import pytest

from marktrack.core.entities import Course, Mark
from marktrack.core.exceptions import DuplicateEntityError, InvalidInputError, NotFoundError


class TestCourseTotals:
    def test_new_course_is_empty(self):
        course = Course("CS 101", "Programming")
        assert course.marks == []
        assert course.total_weightage == 0
        assert course.total_weighted == 0

    def test_add_mark_updates_totals(self, sample_course):
        assert sample_course.total_weighted == pytest.approx(25)
        assert sample_course.total_weightage == pytest.approx(30)
        sample_course.add_mark(Mark("Essay", 60, 100, 10, entity_id="essay"))
        assert sample_course.total_weighted == pytest.approx(31)
        assert sample_course.total_weightage == pytest.approx(40)

    def test_marks_keep_insertion_order(self, sample_course):
        sample_course.add_mark(Mark("Essay", 60, 100, 10, entity_id="essay"))
        assert [mark.id for mark in sample_course.marks] == ["quiz", "lab", "essay"]

    def test_duplicate_mark_rejected(self, sample_course):
        with pytest.raises(DuplicateEntityError):
            sample_course.add_mark(Mark("Again", 1, 2, 3, entity_id="quiz"))
        assert len(sample_course.marks) == 2

    def test_recalculate_after_direct_mutation(self, sample_course):
        sample_course.find_mark("quiz").update_weightage(40)
        assert sample_course.total_weighted == pytest.approx(25)
        sample_course.recalculate_totals()
        assert sample_course.total_weighted == pytest.approx(41)
        assert sample_course.total_weightage == pytest.approx(50)

    def test_recalculate_is_idempotent(self, sample_course):
        sample_course.recalculate_totals()
        first = (sample_course.total_weightage, sample_course.total_weighted)
        sample_course.recalculate_totals()
        assert (sample_course.total_weightage, sample_course.total_weighted) == first

    def test_totals_match_sums(self):
        course = Course.seed_random(rng=random.Random(5))
        assert course.total_weightage == sum(mark.weightage for mark in course.marks)
        assert course.total_weighted == sum(mark.weighted for mark in course.marks)


class TestCourseMarks:
    def test_find_mark(self, sample_course):
        assert sample_course.find_mark("lab").name == "Lab"

    def test_find_unknown_mark(self, sample_course):
        with pytest.raises(NotFoundError) as exc:
            sample_course.find_mark("nope")
        assert exc.value.error_code == "NOT_FOUND"
        assert len(sample_course.marks) == 2

    def test_remove_mark(self, sample_course):
        removed = sample_course.remove_mark("lab")
        assert removed.id == "lab"
        assert [mark.id for mark in sample_course.marks] == ["quiz"]
        assert sample_course.total_weighted == pytest.approx(16)

    def test_remove_unknown_mark(self, sample_course):
        with pytest.raises(NotFoundError):
            sample_course.remove_mark("nope")
        assert sample_course.total_weighted == pytest.approx(25)

    def test_update_mark_recalculates(self, sample_course):
        mark = sample_course.update_mark("quiz", name="Quiz 1", weightage=30)
        assert mark.name == "Quiz 1"
        assert mark.weighted == pytest.approx(24)
        assert sample_course.total_weighted == pytest.approx(33)

    def test_update_mark_is_all_or_nothing(self, sample_course):
        with pytest.raises(InvalidInputError):
            sample_course.update_mark("quiz", name="Renamed", score=50, max_score=0)
        mark = sample_course.find_mark("quiz")
        assert mark.name == "Quiz"
        assert mark.score == 80
        assert sample_course.total_weighted == pytest.approx(25)

    def test_marks_property_is_a_copy(self, sample_course):
        sample_course.marks.clear()
        assert len(sample_course.marks) == 2

    def test_update_code_and_name(self, sample_course):
        sample_course.update_code("CS 102")
        sample_course.update_name("Data Structures")
        assert sample_course.code == "CS 102"
        assert sample_course.name == "Data Structures"
        assert sample_course.total_weighted == pytest.approx(25)


class TestSeedCourse:
    def test_seeded_course(self):
        course = Course.seed_random(rng=random.Random(3))
        assert re.fullmatch(r"[A-Z]{2} [0-9]{3}", course.code)
        assert len(course.name) == 6
        assert len(course.marks) == 3
        assert len({mark.id for mark in course.marks}) == 3

    def test_to_dict_includes_marks(self, sample_course):
        data = sample_course.to_dict()
        assert data['code'] == "CS 101"
        assert [mark['id'] for mark in data['marks']] == ["quiz", "lab"]
        assert data['total_weighted'] == pytest.approx(25)
