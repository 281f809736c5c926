"""
Test: identifier and course-code generation.
"""
import random
import re

import pytest

from marktrack.core.exceptions import IdentifierExhaustedError, InvalidInputError
from marktrack.core.identifiers import (
    ALPHABET, UniqueCodeGenerator, generate_code, generate_course_code
)


class TestGenerateCode:
    def test_alphabet(self):
        assert len(ALPHABET) == 62
        assert len(set(ALPHABET)) == 62

    @pytest.mark.parametrize("length", [0, 1, 4, 6, 32])
    def test_length(self, length):
        code = generate_code(length)
        assert len(code) == length
        assert all(ch in ALPHABET for ch in code)

    def test_negative_length(self):
        with pytest.raises(InvalidInputError):
            generate_code(-1)

    def test_reproducible_with_rng(self):
        assert generate_code(8, random.Random(9)) == generate_code(8, random.Random(9))


class TestGenerateCourseCode:
    def test_format(self):
        rng = random.Random(11)
        for _ in range(500):
            assert re.fullmatch(r"[A-Z]{2} [0-9]{3}", generate_course_code(rng))

    def test_number_range(self):
        rng = random.Random(12)
        numbers = {int(generate_course_code(rng)[3:]) for _ in range(2000)}
        assert min(numbers) >= 100
        assert max(numbers) <= 999


class TestUniqueCodeGenerator:
    def test_codes_do_not_repeat(self):
        generator = UniqueCodeGenerator(length=2, rng=random.Random(1))
        codes = [generator.next_code() for _ in range(500)]
        assert len(set(codes)) == 500
        assert generator.issued_count == 500

    def test_reserved_codes_are_skipped(self):
        first = UniqueCodeGenerator(length=4, rng=random.Random(2)).next_code()
        generator = UniqueCodeGenerator(length=4, rng=random.Random(2))
        generator.reserve([first])
        assert generator.next_code() != first

    def test_exhausted(self):
        generator = UniqueCodeGenerator(length=1, max_attempts=5, rng=random.Random(3))
        generator.reserve(ALPHABET)
        with pytest.raises(IdentifierExhaustedError):
            generator.next_code()

    @pytest.mark.parametrize("kwargs", [{"length": 0}, {"max_attempts": 0}])
    def test_invalid_arguments(self, kwargs):
        with pytest.raises(InvalidInputError):
            UniqueCodeGenerator(**kwargs)
