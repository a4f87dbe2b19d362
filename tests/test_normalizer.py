#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
    tests.test_normalizer
    ~~~~~~~~~~~~~~~~~~~~~

    Keyboard layout normalization of scanned tokens.
"""

import pytest
from meeple.core.normalizer import (
    LATIN_LAYOUT,
    THAI_LAYOUT,
    latin_to_thai,
    normalize,
    thai_to_latin,
)


def test_layouts_are_aligned():
    assert len(LATIN_LAYOUT) == len(THAI_LAYOUT)
    assert len(set(LATIN_LAYOUT)) == len(LATIN_LAYOUT)
    assert len(set(THAI_LAYOUT)) == len(THAI_LAYOUT)


def test_thai_layout_scan_of_latin_name():
    assert latin_to_thai("Catan") == "ฉฟะฟื"
    assert thai_to_latin("ฉฟะฟื") == "Catan"


def test_thai_layout_scan_of_digits():
    # "007" typed with the Thai layout active
    assert thai_to_latin("จจึ") == "007"


@pytest.mark.parametrize("text", ["catan", "Ticket to Ride", "a-b_c;d'e,f.g/h", LATIN_LAYOUT])
def test_round_trip_is_lossless(text):
    assert thai_to_latin(latin_to_thai(text)) == text


@pytest.mark.parametrize("text", ["", " ", "é", "日本", "\t"])
def test_unmapped_characters_pass_through(text):
    result = normalize(text)
    assert result.as_typed == text
    assert result.latin_to_thai == text
    assert result.thai_to_latin == text


def test_spaces_survive_both_directions():
    assert latin_to_thai("to ride") == "ะน พรกำ"
    assert thai_to_latin("ะน พรกำ") == "to ride"


def test_normalize_returns_all_variants():
    result = normalize("ฉฟะฟื")
    assert result.as_typed == "ฉฟะฟื"
    assert result.thai_to_latin == "Catan"
    assert list(result.variants())[:2] == ["ฉฟะฟื", "Catan"]


def test_legacy_thai_digits():
    assert normalize("๐๐๗").legacy == "007"


def test_variants_are_distinct():
    assert list(normalize("   ").variants()) == ["   "]
