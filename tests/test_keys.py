import sys
import os
import re

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from kvwiki.core.diacritics import strip_diacritics
from kvwiki.core.keys import (
    Keys,
    build_storage_key,
    generate_random_key,
    normalize_key,
    parse_shorthand,
)
from kvwiki.errors import InvalidKeyError, KeyLengthError


SAMPLES = [
    "Hello World",
    "  Ångström Café!  ",
    "Straße",
    "a/b\\c",
    "éte",
    "Tab\tand\nnewline",
    "a+b~c-d_e",
    "日本語",
    "100% legit",
    "ŁÓDŹ",
    "___",
]


def test_basic():
    assert normalize_key("Hello World") == "hello_world"


def test_blank_is_empty():
    assert normalize_key("") == ""
    assert normalize_key("   ") == ""
    assert normalize_key("\t\n") == ""


def test_punctuation_removed():
    assert normalize_key("Hello, World!") == "hello_world"
    assert normalize_key("it's \"quoted\"; ok: yes.") == "its_quoted_ok_yes"


def test_diacritics():
    assert normalize_key("  Ångström Café!  ") == "angstrom_cafe"
    assert normalize_key("Straße") == "strase"
    assert normalize_key("ŁÓDŹ") == "lodz"
    assert normalize_key("éte") == normalize_key("éte") == "ete"


def test_allowed_symbols_kept():
    assert normalize_key("a+b~c-d_e") == "a+b~c-d_e"


def test_other_chars_become_underscore():
    assert normalize_key("a/b\\c") == "a_b_c"
    assert normalize_key("日本語") == "___"


def test_only_punctuation_is_invalid():
    with pytest.raises(InvalidKeyError):
        normalize_key("?!")
    with pytest.raises(InvalidKeyError):
        normalize_key("...")


@pytest.mark.parametrize("text", SAMPLES)
def test_alphabet_and_idempotence(text):
    key = normalize_key(text)
    assert re.fullmatch(r"[a-z0-9+~_-]*", key)
    assert key == key.lower()
    assert normalize_key(key) == key


def test_strip_diacritics_keeps_plain_text():
    assert strip_diacritics("plain-text_123") == "plain-text_123"
    assert strip_diacritics("æøœ") == "aeooe"


def test_shorthand_forms():
    assert parse_shorthand("a/b") == Keys("a", "b")
    assert parse_shorthand("c") == Keys("", "c")
    assert parse_shorthand("d/") == Keys("d", "")
    assert parse_shorthand("/e") == Keys("", "e")


def test_shorthand_is_cleaned():
    assert parse_shorthand("  Notes/Today ") == Keys("notes", "today")
    assert parse_shorthand("PAGE") == Keys("", "page")


def test_shorthand_garbage_degrades_to_empty():
    assert parse_shorthand("a/b/c") == Keys()
    assert parse_shorthand("x.y") == Keys()
    assert parse_shorthand("a:b") == Keys()
    assert parse_shorthand("") == Keys()
    assert parse_shorthand(None) == Keys()


def test_random_key_default_length():
    for _ in range(20):
        key = generate_random_key()
        assert re.fullmatch(r"[0-9a-f]{8}", key)


def test_random_key_lengths():
    assert len(generate_random_key(16)) == 16
    assert len(generate_random_key(2.5)) == 3
    assert len(generate_random_key(-4)) == 4
    assert generate_random_key(0) == ""


def test_random_keys_differ():
    keys = {generate_random_key(16) for _ in range(50)}
    assert len(keys) == 50


def test_storage_key_concatenates():
    assert build_storage_key("Home") == "5310okvvikihome"
    assert build_storage_key("page", "nb", prefix="") == "nbpage"


def test_storage_key_split_collision():
    # no separator between notebook and page key
    assert build_storage_key("page", "nb") == build_storage_key("age", "nbp")


def test_storage_key_too_long():
    with pytest.raises(KeyLengthError):
        build_storage_key("x" * 129, prefix="")
    with pytest.raises(KeyLengthError):
        build_storage_key("x" * 129)
    assert build_storage_key("x" * 128, prefix="") == "x" * 128


def test_storage_key_empty():
    with pytest.raises(KeyLengthError):
        build_storage_key("", prefix="")


def test_compatibility_capitals_are_lowercased():
    assert normalize_key("ℍello") == "hello"
    assert normalize_key("ⒶB") == "ab"
