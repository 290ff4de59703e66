import pytest

from minishell.wildcard import (
    clean_empty_strs,
    contains_asterisk,
    glob_word,
    glob_words,
    match_star,
)


@pytest.mark.parametrize(
    "pattern, text, expected",
    [
        ("*.c", "main.c", True),
        ("*.c", "main.h", False),
        ("a*b*c", "aXXbYYc", True),
        ("a*b*c", "aXXbYY", False),
        ("abc", "abc", True),
        ("abc", "abd", False),
        ("*", "anything", True),
        ("*", "", True),
        ("", "", True),
        ("", "x", False),
        ("**x", "abx", True),
    ],
)
def test_match_star(pattern, text, expected):
    assert match_star(pattern, text) is expected


def test_match_star_backtracks():
    assert match_star("*ab", "aab") is True
    assert match_star("*ab", "aba") is False


def test_clean_empty_strs_keeps_lone_pair():
    assert clean_empty_strs("''") == "''"
    assert clean_empty_strs('""') == '""'


def test_clean_empty_strs_removes_inner_pairs():
    assert clean_empty_strs('a""b') == "ab"
    assert clean_empty_strs("x''y''z") == "xyz"


def test_clean_empty_strs_leaves_nonempty_quotes():
    assert clean_empty_strs("'a'") == "'a'"


def test_contains_asterisk():
    assert contains_asterisk("a*b") is True
    assert contains_asterisk("abc") is False


@pytest.fixture
def populated(tmp_path):
    for name in ("a.c", "b.c", "c.h", ".hidden.c"):
        (tmp_path / name).write_text("")
    return tmp_path


def test_glob_word_matches_visible_files(populated):
    assert glob_word("*.c", populated) == ["a.c", "b.c"]


def test_glob_word_hidden_only_with_dot_pattern(populated):
    result = glob_word(".*", populated)
    assert ".hidden.c" in result
    assert "a.c" not in result


def test_glob_word_no_match_returns_word(populated):
    assert glob_word("*.zzz", populated) == ["*.zzz"]


def test_glob_word_without_star(populated):
    assert glob_word("plain", populated) == ["plain"]


def test_glob_word_quoted_star_stays_literal(populated):
    assert glob_word('"*"', populated) == ['"*"']


def test_glob_words_joins_in_order(populated):
    assert glob_words(["first", "*.h", "last"], populated) == ["first", "c.h", "last"]