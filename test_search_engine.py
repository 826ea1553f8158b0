#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
查找引擎测试
"""

import multiprocessing as mp

import pytest

from dataform.search_result import Match
from logic.search_engine import (find, find_with_options, measure_search, compile_pattern,
                                 SearchOptions, InvalidPatternError,
                                 check_query, run_search_process)

SAMPLE = "the cat sat on the mat"


def assert_well_formed(document, matches):
    """每个匹配都对应原文，且按顺序互不重叠"""
    for match in matches:
        assert document[match.offset:match.end] == match.text
    for current, following in zip(matches, matches[1:]):
        assert following.offset >= current.end


def test_literal_search():
    matches = find(SAMPLE, "at", False)
    assert [m.offset for m in matches] == [5, 9, 20]
    assert all(m.text == "at" for m in matches)
    assert_well_formed(SAMPLE, matches)


def test_literal_matches_do_not_overlap():
    matches = find("aaaa", "aa", False)
    assert matches == (Match(0, "aa"), Match(2, "aa"))

    matches = find("aaa", "aa", False)
    assert matches == (Match(0, "aa"),)


def test_literal_treats_regex_characters_as_text():
    matches = find("a.b axb a.b", "a.b", False)
    assert [m.offset for m in matches] == [0, 8]


def test_regex_search():
    matches = find("abc123def456", r"\d+", True)
    assert matches == (Match(3, "123"), Match(9, "456"))


def test_regex_offsets_are_absolute_when_text_recurs():
    # 匹配文本在前面已经出现过，偏移量仍需指向真正的位置
    document = "xab ab"
    matches = find(document, r"(?<= )ab", True)
    assert matches == (Match(4, "ab"),)


def test_regex_anchor_only_matches_real_line_start():
    document = "abab"
    assert find(document, "^ab", True) == (Match(0, "ab"),)
    assert [m.offset for m in find("ab\nab", "(?m)^ab", True)] == [0, 3]


@pytest.mark.parametrize("use_regex", [False, True])
def test_empty_query_never_matches(use_regex):
    assert find(SAMPLE, "", use_regex) == ()
    assert find("", "", use_regex) == ()


def test_empty_document():
    assert find("", "a", False) == ()
    assert find("", "a", True) == ()


def test_zero_width_pattern_terminates():
    assert find("aaa", "a*", True) == (Match(0, "aaa"),)

    matches = find("baa", "a*", True)
    assert matches == (Match(0, ""), Match(1, "aa"))
    assert_well_formed("baa", matches)


def test_pure_zero_width_pattern():
    matches = find("abc", r"\b", True)
    assert [m.offset for m in matches] == [0, 3]
    assert all(m.text == "" for m in matches)

    matches = find("ab", "", True)
    assert matches == ()

    matches = find("ab", "x?", True)
    assert [m.offset for m in matches] == [0, 1, 2]


def test_invalid_pattern_raises():
    with pytest.raises(InvalidPatternError) as exc_info:
        find(SAMPLE, "(unclosed", True)
    assert exc_info.value.pattern == "(unclosed"
    assert isinstance(exc_info.value, ValueError)


def test_invalid_pattern_is_fine_in_literal_mode():
    assert find("f(unclosed", "(unclosed", False) == (Match(1, "(unclosed"),)


def test_find_is_idempotent():
    first = find(SAMPLE, r"\w+at", True)
    second = find(SAMPLE, r"\w+at", True)
    assert first == second
    assert [m.text for m in first] == ["cat", "sat", "mat"]


def test_ignore_case():
    document = "Error error ERROR"
    assert len(find(document, "error", False)) == 1
    matches = find(document, "error", False, ignore_case=True)
    assert [m.text for m in matches] == ["Error", "error", "ERROR"]


def test_whole_word():
    document = "cat concat cat's"
    matches = find(document, "cat", False, whole_word=True)
    assert [m.offset for m in matches] == [0, 11]

    matches = find(document, "cat|con", True, whole_word=True)
    assert [m.offset for m in matches] == [0, 11]


def test_find_with_options():
    options = SearchOptions(use_regex=True, ignore_case=True)
    matches = find_with_options("A1 b2 C3", r"[a-c]\d", options)
    assert [m.text for m in matches] == ["A1", "b2", "C3"]


def test_check_query_rejects_bad_regex():
    with pytest.raises(InvalidPatternError):
        check_query("(unclosed", SearchOptions(use_regex=True))
    check_query("(unclosed", SearchOptions())
    check_query("", SearchOptions(use_regex=True))


def test_search_process_sends_matches():
    receiver, sender = mp.Pipe(duplex=False)
    run_search_process(sender, SAMPLE, "at", SearchOptions())
    status, matches = receiver.recv()
    assert status == "ok"
    assert [m.offset for m in matches] == [5, 9, 20]


def test_search_process_reports_invalid_pattern():
    receiver, sender = mp.Pipe(duplex=False)
    run_search_process(sender, SAMPLE, "[a-", SearchOptions(use_regex=True))
    status, message = receiver.recv()
    assert status == "invalid"
    assert "[a-" in message


def test_compiled_patterns_are_cached():
    compile_pattern.cache_clear()
    compile_pattern("x+", True)
    compile_pattern("x+", True)
    assert compile_pattern.cache_info().hits == 1


def test_match_span():
    match = Match(4, "abc")
    assert match.end == 7
    assert match.span() == (4, 7)


def test_measure_search():
    stats = measure_search(SAMPLE * 10, "at", SearchOptions())
    assert stats.match_count == 30
    assert stats.document_length == len(SAMPLE) * 10
    assert stats.memory_usage > 0
    assert "30个匹配" in stats.summary()
