"""
Catalog service: the request-facing collaborator around a CourseCatalog.
"""

import logging
import math
import threading
from collections import Counter
from contextlib import contextmanager
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterator, List, Optional, Union

from ..core.entities import Course, CourseCatalog, Mark
from ..core.exceptions import InvalidInputError


logger = logging.getLogger(__name__)

FormValue = Optional[Union[str, int, float]]

MAX_SEED_COUNT = 100


@dataclass
class CourseTotals:
    """Totals of a course, raw and formatted to two decimals."""
    course_id: str
    total_weightage: float
    total_weighted: float
    total_weightage_display: str
    total_weighted_display: str

    @classmethod
    def from_course(cls, course: Course) -> 'CourseTotals':
        return cls(
            course_id=course.id,
            total_weightage=course.total_weightage,
            total_weighted=course.total_weighted,
            total_weightage_display=f"{course.total_weightage:.2f}",
            total_weighted_display=f"{course.total_weighted:.2f}"
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def is_provided(value: FormValue) -> bool:
    """An absent or empty-string form field means "no change requested"."""
    return value is not None and value != ""


def parse_float(value: Union[str, int, float], field_name: str) -> float:
    """Parse a form value to a finite float."""
    if isinstance(value, bool):
        raise InvalidInputError(f"Invalid {field_name}: {value!r}", details={"field": field_name})
    try:
        parsed = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"Invalid {field_name}: {value!r} is not a number",
                                details={"field": field_name, "value": value})
    if not math.isfinite(parsed):
        raise InvalidInputError(f"Invalid {field_name}: {value!r} is not finite",
                                details={"field": field_name, "value": value})
    return parsed


def _optional_float(value: FormValue, field_name: str) -> Optional[float]:
    return parse_float(value, field_name) if is_provided(value) else None


class CatalogService:
    """Serializes access to one CourseCatalog and maps form input onto it.

    Every public method holds the service lock for its whole duration, so a
    mark update and the course total recalculation that follows it are never
    observed half-done by another thread. Methods return live entities;
    callers that read them afterwards do so inside ``locked()``.
    """

    def __init__(self, catalog: Optional[CourseCatalog] = None):
        self._catalog = catalog if catalog is not None else CourseCatalog()
        self._lock = threading.RLock()
        self._operations: Counter = Counter()

    @property
    def catalog(self) -> CourseCatalog:
        return self._catalog

    @contextmanager
    def locked(self) -> Iterator['CatalogService']:
        """Hold the service lock across several calls and the reads that follow them."""
        with self._lock:
            yield self

    # Courses

    def list_courses(self) -> List[Course]:
        """Get all courses in insertion order."""
        with self._lock:
            return self._catalog.courses

    def get_course(self, course_id: str) -> Course:
        with self._lock:
            return self._catalog.find_course(course_id)

    def seed_courses(self, count: int = 3) -> List[Course]:
        """Add ``count`` random courses."""
        if count < 0:
            raise InvalidInputError(f"Cannot seed a negative number of courses: {count}")
        if count > MAX_SEED_COUNT:
            raise InvalidInputError(f"Cannot seed more than {MAX_SEED_COUNT} courses at once: {count}",
                                    details={"count": count, "max": MAX_SEED_COUNT})
        with self._lock:
            seeded = self._catalog.seed_random(count)
            self._operations['seed_courses'] += 1
            logger.info("Seeded %d courses (catalog size %d)", len(seeded), len(self._catalog))
            return seeded

    def add_random_course(self) -> Course:
        with self._lock:
            course = Course.seed_random(id_generator=self._catalog.id_generator)
            self._catalog.add_course(course)
            self._operations['add_course'] += 1
            logger.info("Added random course %s (%s)", course.id, course.code)
            return course

    def add_course(self, code: str, name: str) -> Course:
        """Add an empty course with a generated id."""
        with self._lock:
            course = Course(code, name, entity_id=self._catalog.id_generator.next_code())
            self._catalog.add_course(course)
            self._operations['add_course'] += 1
            logger.info("Added course %s (%s)", course.id, course.code)
            return course

    def update_course(self, course_id: str, code: FormValue = "", name: FormValue = "") -> Course:
        """Apply every non-empty field to the course."""
        with self._lock:
            course = self._catalog.find_course(course_id)
            if is_provided(code):
                course.update_code(str(code))
            if is_provided(name):
                course.update_name(str(name))
            self._operations['update_course'] += 1
            logger.info("Updated course %s", course_id)
            return course

    def remove_course(self, course_id: str) -> Course:
        with self._lock:
            course = self._catalog.remove_course(course_id)
            self._operations['remove_course'] += 1
            logger.info("Removed course %s", course_id)
            return course

    # Marks

    def get_mark(self, course_id: str, mark_id: str) -> Mark:
        with self._lock:
            return self._catalog.find_course(course_id).find_mark(mark_id)

    def add_random_mark(self, course_id: str) -> Mark:
        """Add a random mark to a course; the course totals include it."""
        with self._lock:
            mark = self._catalog.add_random_mark(course_id)
            self._operations['add_mark'] += 1
            logger.info("Added random mark %s to course %s", mark.id, course_id)
            return mark

    def add_mark(self, course_id: str, name: str, score: Union[str, float],
                 max_score: Union[str, float], weightage: Union[str, float]) -> Mark:
        """Add a mark built from raw form values.

        The values are checked before an id is drawn, so a rejected mark
        leaves the identifier generator untouched.
        """
        with self._lock:
            self._catalog.find_course(course_id)
            values = Mark.validate_values(
                parse_float(score, "score"),
                parse_float(max_score, "max_score"),
                parse_float(weightage, "weightage")
            )
            mark = Mark(name, *values, entity_id=self._catalog.id_generator.next_code())
            self._catalog.add_mark(course_id, mark)
            self._operations['add_mark'] += 1
            logger.info("Added mark %s to course %s", mark.id, course_id)
            return mark

    def update_mark(self, course_id: str, mark_id: str, name: FormValue = "",
                    score: FormValue = "", max_score: FormValue = "",
                    weightage: FormValue = "") -> Mark:
        """Apply every non-empty field to the mark and refresh the course totals.

        Numeric fields are parsed before anything changes; a bad value
        raises InvalidInputError and leaves the mark as it was.
        """
        with self._lock:
            course = self._catalog.find_course(course_id)
            mark = course.update_mark(
                mark_id,
                name=str(name) if is_provided(name) else None,
                score=_optional_float(score, "score"),
                max_score=_optional_float(max_score, "max_score"),
                weightage=_optional_float(weightage, "weightage")
            )
            self._operations['update_mark'] += 1
            logger.info("Updated mark %s in course %s", mark_id, course_id)
            return mark

    def remove_mark(self, course_id: str, mark_id: str) -> Mark:
        with self._lock:
            mark = self._catalog.find_course(course_id).remove_mark(mark_id)
            self._operations['remove_mark'] += 1
            logger.info("Removed mark %s from course %s", mark_id, course_id)
            return mark

    def get_totals(self, course_id: str) -> CourseTotals:
        with self._lock:
            return CourseTotals.from_course(self._catalog.find_course(course_id))

    def get_statistics(self) -> Dict[str, Any]:
        """Get catalog statistics."""
        with self._lock:
            courses = self._catalog.courses
            return {
                'total_courses': len(courses),
                'total_marks': sum(len(course.marks) for course in courses),
                'issued_identifiers': self._catalog.id_generator.issued_count,
                'operations': dict(self._operations)
            }
