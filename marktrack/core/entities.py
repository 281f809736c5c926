"""
Core entities for MarkTrack: marks, courses and the course catalog.

A Mark derives its percentage and weighted contribution from its score,
max score and weightage. A Course derives its totals from its marks. None
of these classes lock; callers sharing a catalog across threads must
serialize access themselves (see ``marktrack.services.CatalogService``).
"""

import math
import random
from abc import ABC
from datetime import datetime, timezone
from numbers import Real
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import DuplicateEntityError, InvalidInputError, NotFoundError
from .identifiers import (
    DEFAULT_ID_LENGTH, DEFAULT_NAME_LENGTH, UniqueCodeGenerator,
    generate_code, generate_course_code, resolve_rng
)


def _require_number(value: Any, field_name: str) -> float:
    """Coerce a numeric input to float, rejecting booleans and non-finite values."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInputError(
            f"{field_name} must be a number, got {type(value).__name__}",
            details={"field": field_name}
        )
    value = float(value)
    if not math.isfinite(value):
        raise InvalidInputError(f"{field_name} must be finite, got {value}", details={"field": field_name})
    return value


def _require_max_score(value: Any) -> float:
    max_score = _require_number(value, "max_score")
    if max_score == 0:
        raise InvalidInputError("max_score must be non-zero", details={"field": "max_score"})
    return max_score


def compute_percentage(score: float, max_score: float) -> float:
    """Percentage of ``max_score`` achieved by ``score``."""
    if max_score == 0:
        raise InvalidInputError("Cannot compute a percentage with max_score of zero",
                                details={"field": "max_score"})
    return score / max_score * 100


def compute_weighted(weightage: float, percentage: float) -> float:
    """Contribution of a mark to its course total."""
    return weightage * percentage / 100


class AbstractEntity(ABC):
    """Base abstract entity with identifier, timestamps and versioning."""

    def __init__(self, entity_id: Optional[str] = None):
        self._id = entity_id if entity_id is not None else generate_code(DEFAULT_ID_LENGTH)
        self._created_at = datetime.now(timezone.utc)
        self._updated_at = self._created_at
        self._version = 1

    @property
    def id(self) -> str:
        """Get the entity ID."""
        return self._id

    @property
    def created_at(self) -> datetime:
        """Get creation timestamp."""
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        """Get last update timestamp."""
        return self._updated_at

    @property
    def version(self) -> int:
        """Get current version."""
        return self._version

    def touch(self) -> None:
        """Record a mutation."""
        self._updated_at = datetime.now(timezone.utc)
        self._version += 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert entity to dictionary."""
        return {
            'id': self._id,
            'created_at': self._created_at.isoformat(),
            'updated_at': self._updated_at.isoformat(),
            'version': self._version,
        }

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(id={self._id})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self._id}, version={self._version})"


class Mark(AbstractEntity):
    """A single graded assessment item.

    ``percentage`` and ``weighted`` are derived and read-only. Score and max
    score updates recompute both; a weightage update recomputes only
    ``weighted``, reusing the current ``percentage``.
    """

    def __init__(self, name: str, score: float, max_score: float, weightage: float,
                 entity_id: Optional[str] = None):
        score, max_score, weightage = self.validate_values(score, max_score, weightage)
        super().__init__(entity_id)
        self._name = name
        self._score = score
        self._max_score = max_score
        self._weightage = weightage
        self._percentage = compute_percentage(score, max_score)
        self._weighted = compute_weighted(weightage, self._percentage)

    @staticmethod
    def validate_values(score: Any, max_score: Any, weightage: Any) -> Tuple[float, float, float]:
        """Check the numeric fields of a mark without building one."""
        return (_require_number(score, "score"),
                _require_max_score(max_score),
                _require_number(weightage, "weightage"))

    @classmethod
    def seed_random(cls, rng: Optional[random.Random] = None,
                    id_generator: Optional[UniqueCodeGenerator] = None) -> 'Mark':
        """Create a mark with random demo values where ``max_score > score >= 0``."""
        source = resolve_rng(rng)
        entity_id = id_generator.next_code() if id_generator else generate_code(DEFAULT_ID_LENGTH, rng)
        score = source.random() * 100
        max_score = score + source.uniform(1, 10)
        weightage = source.random() * 50
        return cls(generate_code(DEFAULT_NAME_LENGTH, rng), score, max_score, weightage,
                   entity_id=entity_id)

    @property
    def name(self) -> str:
        return self._name

    @property
    def score(self) -> float:
        return self._score

    @property
    def max_score(self) -> float:
        return self._max_score

    @property
    def weightage(self) -> float:
        return self._weightage

    @property
    def percentage(self) -> float:
        return self._percentage

    @property
    def weighted(self) -> float:
        return self._weighted

    def update_name(self, name: str) -> None:
        """Rename the mark."""
        self._name = name
        self.touch()

    def update_score(self, score: float) -> None:
        """Set the score and recompute percentage and weighted."""
        score = _require_number(score, "score")
        percentage = compute_percentage(score, self._max_score)
        self._score = score
        self._percentage = percentage
        self._weighted = compute_weighted(self._weightage, percentage)
        self.touch()

    def update_max_score(self, max_score: float) -> None:
        """Set the max score and recompute percentage and weighted from the current score."""
        max_score = _require_max_score(max_score)
        percentage = compute_percentage(self._score, max_score)
        self._max_score = max_score
        self._percentage = percentage
        self._weighted = compute_weighted(self._weightage, percentage)
        self.touch()

    def update_weightage(self, weightage: float) -> None:
        """Set the weightage and recompute weighted from the current percentage."""
        weightage = _require_number(weightage, "weightage")
        self._weightage = weightage
        self._weighted = compute_weighted(weightage, self._percentage)
        self.touch()

    def to_dict(self) -> Dict[str, Any]:
        """Convert mark to dictionary."""
        base_dict = super().to_dict()
        base_dict.update({
            'name': self._name,
            'score': self._score,
            'max_score': self._max_score,
            'percentage': self._percentage,
            'weightage': self._weightage,
            'weighted': self._weighted,
        })
        return base_dict


class Course(AbstractEntity):
    """A course owning an ordered list of marks and their totals."""

    def __init__(self, code: str, name: str, entity_id: Optional[str] = None):
        super().__init__(entity_id)
        self._code = code
        self._name = name
        self._marks: List[Mark] = []
        self._total_weightage = 0.0
        self._total_weighted = 0.0

    @classmethod
    def seed_random(cls, rng: Optional[random.Random] = None,
                    id_generator: Optional[UniqueCodeGenerator] = None,
                    mark_count: int = 3) -> 'Course':
        """Create a course with a random code, name and ``mark_count`` random marks."""
        entity_id = id_generator.next_code() if id_generator else generate_code(DEFAULT_ID_LENGTH, rng)
        course = cls(generate_course_code(rng), generate_code(DEFAULT_NAME_LENGTH, rng),
                     entity_id=entity_id)
        for _ in range(mark_count):
            mark = Mark.seed_random(rng=rng, id_generator=id_generator)
            while course._contains_mark(mark.id):
                mark = Mark.seed_random(rng=rng, id_generator=id_generator)
            course._marks.append(mark)
        course.recalculate_totals()
        return course

    @property
    def code(self) -> str:
        return self._code

    @property
    def name(self) -> str:
        return self._name

    @property
    def marks(self) -> List[Mark]:
        return self._marks.copy()

    @property
    def total_weightage(self) -> float:
        return self._total_weightage

    @property
    def total_weighted(self) -> float:
        return self._total_weighted

    def update_code(self, code: str) -> None:
        self._code = code
        self.touch()

    def update_name(self, name: str) -> None:
        self._name = name
        self.touch()

    def _contains_mark(self, mark_id: str) -> bool:
        return any(mark.id == mark_id for mark in self._marks)

    def add_mark(self, mark: Mark) -> None:
        """Append a mark and recompute totals.

        The mark id is not reserved with any catalog generator; go through
        ``CourseCatalog.add_mark`` for courses held by a catalog.
        """
        if self._contains_mark(mark.id):
            raise DuplicateEntityError(f"Mark {mark.id} already exists in course {self._id}",
                                       details={"course_id": self._id, "mark_id": mark.id})
        self._marks.append(mark)
        self.recalculate_totals()
        self.touch()

    def remove_mark(self, mark_id: str) -> Mark:
        """Remove a mark by id, recompute totals and return the removed mark."""
        mark = self.find_mark(mark_id)
        self._marks.remove(mark)
        self.recalculate_totals()
        self.touch()
        return mark

    def find_mark(self, mark_id: str) -> Mark:
        """Return the mark with ``mark_id``; raises NotFoundError if absent."""
        for mark in self._marks:
            if mark.id == mark_id:
                return mark
        raise NotFoundError(f"Mark {mark_id} not found in course {self._id}",
                            details={"course_id": self._id, "mark_id": mark_id})

    def update_mark(self, mark_id: str, name: Optional[str] = None, score: Optional[float] = None,
                    max_score: Optional[float] = None, weightage: Optional[float] = None) -> Mark:
        """Apply the given field changes to a mark, then recompute totals.

        Every supplied value is validated before any is applied, so a bad
        value leaves the mark untouched. Fields are applied in the order
        name, score, max_score, weightage.
        """
        mark = self.find_mark(mark_id)
        if score is not None:
            _require_number(score, "score")
        if max_score is not None:
            _require_max_score(max_score)
        if weightage is not None:
            _require_number(weightage, "weightage")

        if name is not None:
            mark.update_name(name)
        if score is not None:
            mark.update_score(score)
        if max_score is not None:
            mark.update_max_score(max_score)
        if weightage is not None:
            mark.update_weightage(weightage)
        self.recalculate_totals()
        return mark

    def recalculate_totals(self) -> None:
        """Re-derive both totals from the current marks."""
        self._total_weightage = sum(mark.weightage for mark in self._marks)
        self._total_weighted = sum(mark.weighted for mark in self._marks)

    def to_dict(self) -> Dict[str, Any]:
        """Convert course to dictionary."""
        base_dict = super().to_dict()
        base_dict.update({
            'code': self._code,
            'name': self._name,
            'marks': [mark.to_dict() for mark in self._marks],
            'total_weightage': self._total_weightage,
            'total_weighted': self._total_weighted,
        })
        return base_dict


class CourseCatalog:
    """Root collection of tracked courses, in insertion order."""

    def __init__(self, id_generator: Optional[UniqueCodeGenerator] = None,
                 rng: Optional[random.Random] = None):
        self._courses: List[Course] = []
        self._rng = rng
        self._id_generator = id_generator or UniqueCodeGenerator(rng=rng)

    @property
    def courses(self) -> List[Course]:
        return self._courses.copy()

    @property
    def id_generator(self) -> UniqueCodeGenerator:
        return self._id_generator

    def __len__(self) -> int:
        return len(self._courses)

    def add_course(self, course: Course) -> None:
        """Append a course."""
        if any(existing.id == course.id for existing in self._courses):
            raise DuplicateEntityError(f"Course {course.id} already exists",
                                       details={"course_id": course.id})
        self._id_generator.reserve([course.id] + [mark.id for mark in course.marks])
        self._courses.append(course)

    def remove_course(self, course_id: str) -> Course:
        """Remove a course by id and return it."""
        course = self.find_course(course_id)
        self._courses.remove(course)
        return course

    def find_course(self, course_id: str) -> Course:
        """Return the course with ``course_id``; raises NotFoundError if absent."""
        for course in self._courses:
            if course.id == course_id:
                return course
        raise NotFoundError(f"Course {course_id} not found", details={"course_id": course_id})

    def add_mark(self, course_id: str, mark: Mark) -> Mark:
        """Add a mark to a course and reserve its id."""
        course = self.find_course(course_id)
        course.add_mark(mark)
        self._id_generator.reserve([mark.id])
        return mark

    def add_random_mark(self, course_id: str) -> Mark:
        """Seed a mark with an id no mark of the course already carries."""
        course = self.find_course(course_id)
        # Marks added through Course.add_mark directly never reached the generator.
        self._id_generator.reserve(mark.id for mark in course.marks)
        return self.add_mark(course_id, Mark.seed_random(rng=self._rng, id_generator=self._id_generator))

    def seed_random(self, n: int = 3) -> List[Course]:
        """Seed ``n`` random courses, add them and return them."""
        seeded = []
        for _ in range(n):
            course = Course.seed_random(rng=self._rng, id_generator=self._id_generator)
            self.add_course(course)
            seeded.append(course)
        return seeded

    def to_dict(self) -> Dict[str, Any]:
        return {'courses': [course.to_dict() for course in self._courses]}
