#!/usr/bin/env python3
"""
Demo scenario for MarkTrack.
"""

import sys
import os

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from marktrack.config import Settings
from marktrack.core.entities import Course, Mark
from marktrack.core.exceptions import InvalidInputError, NotFoundError
from marktrack.main import MarkTrackApp


def run_demo():
    """Walk through mark revisions and course totals."""
    print("=" * 60)
    print("MARKTRACK - DEMO")
    print("=" * 60)

    settings = Settings(database_path=":memory:", random_seed=7)
    app = MarkTrackApp(settings)

    print("\n1. Revising a single mark...")
    demonstrate_mark_updates()

    print("\n2. Keeping course totals current...")
    demonstrate_course_totals()

    print("\n3. Working through the catalog service...")
    demonstrate_service(app)

    print("\n4. Rejected input...")
    demonstrate_errors(app)

    print("\n5. Catalog statistics...")
    stats = app.service.get_statistics()
    print(f"    Courses: {stats['total_courses']}")
    print(f"    Marks: {stats['total_marks']}")
    print(f"    Operations: {stats['operations']}")

    print("\n" + "=" * 60)
    print("DEMO COMPLETED SUCCESSFULLY!")
    print("=" * 60)


def describe(mark):
    return (f"score {mark.score:g}/{mark.max_score:g} -> {mark.percentage:g}%, "
            f"weightage {mark.weightage:g} -> weighted {mark.weighted:g}")


def demonstrate_mark_updates():
    mark = Mark("Quiz 1", 80, 100, 20, entity_id="quiz")
    print(f"    Created:              {describe(mark)}")
    mark.update_weightage(30)
    print(f"    Weightage set to 30:  {describe(mark)}")
    mark.update_max_score(160)
    print(f"    Max score set to 160: {describe(mark)}")


def demonstrate_course_totals():
    course = Course("CS 101", "Introduction to Programming", entity_id="cs101")
    course.add_mark(Mark("Quiz", 80, 100, 20, entity_id="q1"))
    course.add_mark(Mark("Lab", 45, 50, 10, entity_id="l1"))
    print(f"    Two marks:   total weighted {course.total_weighted:g}")
    course.add_mark(Mark("Essay", 60, 100, 10, entity_id="e1"))
    print(f"    Three marks: total weighted {course.total_weighted:g}")
    course.remove_mark("l1")
    print(f"    Lab removed: total weighted {course.total_weighted:g}")


def demonstrate_service(app):
    service = app.service
    courses = service.seed_courses(2)
    course = courses[0]
    print(f"    Seeded {len(courses)} courses; first is {course.code} with {len(course.marks)} marks")
    mark = course.marks[0]
    before = service.get_totals(course.id)
    service.update_mark(course.id, mark.id, score="", weightage="25")
    after = service.get_totals(course.id)
    print(f"    Weightage of {mark.name} set to 25: weighted total "
          f"{before.total_weighted_display} -> {after.total_weighted_display}")


def demonstrate_errors(app):
    service = app.service
    course = service.list_courses()[0]
    mark = course.marks[0]
    for label, call in [
        ("max score of zero", lambda: service.update_mark(course.id, mark.id, max_score="0")),
        ("unparseable score", lambda: service.update_mark(course.id, mark.id, score="eighty")),
        ("unknown course", lambda: service.get_course("missing")),
    ]:
        try:
            call()
        except (InvalidInputError, NotFoundError) as e:
            print(f"    {label}: {e.error_code} - {e.message}")


if __name__ == "__main__":
    run_demo()
