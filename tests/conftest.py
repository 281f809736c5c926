"""
Shared test fixtures for MarkTrack.
Seeded random generators keep seeded courses reproducible; the database
always lives in memory or under tmp_path.
"""
import random

import pytest

from marktrack.core.entities import Course, CourseCatalog, Mark
from marktrack.core.identifiers import UniqueCodeGenerator
from marktrack.services import CatalogService


@pytest.fixture
def rng():
    """A deterministic random generator."""
    return random.Random(1234)


@pytest.fixture
def catalog(rng):
    """An empty catalog with deterministic identifiers."""
    return CourseCatalog(id_generator=UniqueCodeGenerator(rng=rng), rng=rng)


@pytest.fixture
def sample_course():
    """A course holding two marks weighted 16 and 9."""
    course = Course("CS 101", "Programming", entity_id="cs101")
    course.add_mark(Mark("Quiz", 80, 100, 20, entity_id="quiz"))
    course.add_mark(Mark("Lab", 45, 50, 10, entity_id="lab"))
    return course


@pytest.fixture
def service(catalog, sample_course):
    """A service over a catalog holding ``sample_course``."""
    catalog.add_course(sample_course)
    return CatalogService(catalog)
