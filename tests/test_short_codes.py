from __future__ import annotations

import pytest

from saasdb.core.short_codes import ALPHABET, generate_short_code, normalize_code


def test_generate_short_code_length_and_charset() -> None:
    code = generate_short_code(8)
    assert len(code) == 8
    assert set(code).issubset(set(ALPHABET))


def test_generate_short_code_prefix_is_uppercased() -> None:
    code = generate_short_code(6, prefix=" spring- ")
    assert code.startswith("SPRING-")
    assert len(code) == len("SPRING-") + 6


def test_generate_short_code_rejects_non_positive_length() -> None:
    with pytest.raises(ValueError):
        generate_short_code(0)


def test_alphabet_skips_ambiguous_characters() -> None:
    assert not set("01IO") & set(ALPHABET)


def test_normalize_code_strips_whitespace_and_uppercases() -> None:
    assert normalize_code("  sum mer\t24 ") == "SUMMER24"
