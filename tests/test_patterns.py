import dataclasses
import re

import pytest
from pathspec.patterns.gitignore import GitIgnorePatternError

from codedigest.patterns import compile_pattern, translate


# --- Lines that are not patterns ---

@pytest.mark.parametrize("line", ["", "   ", "\t", "# comment", "#", "foo\\", "!", "/", "!/"])
def test_rejected_lines(line):
    assert compile_pattern(line) is None


def test_non_string_is_rejected():
    assert compile_pattern(None) is None


def test_double_backslash_at_end_is_a_pattern():
    rule = compile_pattern("foo\\\\")
    assert rule is not None
    assert rule.matches("foo\\")


# --- Flags ---

def test_plain_pattern_flags():
    rule = compile_pattern("*.log")
    assert rule.source == "*.log"
    assert not rule.negative
    assert not rule.directory_only
    assert not rule.anchored


def test_negation_flag_keeps_source():
    rule = compile_pattern("!keep.log")
    assert rule.negative
    assert rule.source == "!keep.log"
    assert rule.matches("keep.log")


def test_directory_only_flag():
    rule = compile_pattern("logs/")
    assert rule.directory_only
    assert not rule.anchored


@pytest.mark.parametrize("line", ["/build", "doc/frotz", "a/**/b", "**/foo"])
def test_inner_or_leading_slash_anchors(line):
    assert compile_pattern(line).anchored


def test_escaped_hash_and_bang_are_literal():
    hash_rule = compile_pattern("\\#file")
    bang_rule = compile_pattern("\\!important")
    assert hash_rule.matches("#file")
    assert not bang_rule.negative
    assert bang_rule.matches("!important")


def test_rules_are_immutable():
    rule = compile_pattern("*.log")
    with pytest.raises(dataclasses.FrozenInstanceError):
        rule.negative = True


# --- Matching ---

def test_star_matches_at_any_depth():
    rule = compile_pattern("*.log")
    assert rule.matches("error.log")
    assert rule.matches("src/app.log")
    assert not rule.matches("error.log.txt")
    assert not rule.matches("log")


def test_leading_slash_anchors_to_root():
    rule = compile_pattern("/build")
    assert rule.matches("build")
    assert rule.matches("build", is_dir=True)
    assert not rule.matches("src/build")


def test_trailing_slash_only_matches_directories():
    rule = compile_pattern("logs/")
    assert rule.matches("logs", is_dir=True)
    assert rule.matches("logs/")
    assert rule.matches("src/logs", is_dir=True)
    assert not rule.matches("logs")
    assert not rule.matches("src/logs")


def test_pattern_without_slash_matches_file_and_directory():
    rule = compile_pattern("build")
    assert rule.matches("build")
    assert rule.matches("build", is_dir=True)
    assert rule.matches("src/build", is_dir=True)
    assert not rule.matches("builder")


def test_inner_slash_is_relative_to_root():
    rule = compile_pattern("doc/frotz")
    assert rule.matches("doc/frotz")
    assert not rule.matches("a/doc/frotz")


def test_star_does_not_cross_directories():
    rule = compile_pattern("doc/*.txt")
    assert rule.matches("doc/notes.txt")
    assert not rule.matches("doc/sub/notes.txt")


def test_trailing_star_after_slash_needs_a_name():
    rule = compile_pattern("foo/*")
    assert rule.matches("foo/bar")
    assert rule.matches("foo/bar", is_dir=True)
    assert not rule.matches("foo", is_dir=True)
    # everything below foo/bar is covered along with it
    assert rule.matches("foo/bar/baz")


def test_question_mark_is_one_character():
    rule = compile_pattern("?.txt")
    assert rule.matches("a.txt")
    assert rule.matches("src/b.txt")
    assert not rule.matches("ab.txt")


def test_leading_double_star():
    rule = compile_pattern("**/foo")
    assert rule.matches("foo")
    assert rule.matches("a/foo")
    assert rule.matches("a/b/foo", is_dir=True)


def test_inner_double_star():
    rule = compile_pattern("a/**/b")
    assert rule.matches("a/b")
    assert rule.matches("a/x/b")
    assert rule.matches("a/x/y/b")
    assert not rule.matches("a/xb")
    assert not rule.matches("c/a/b")


def test_trailing_double_star():
    rule = compile_pattern("abc/**")
    assert rule.matches("abc/x")
    assert rule.matches("abc/x/y")
    assert not rule.matches("abc", is_dir=True)


def test_character_class():
    rule = compile_pattern("[abc].py")
    assert rule.matches("a.py")
    assert rule.matches("pkg/c.py")
    assert not rule.matches("d.py")


def test_character_class_range():
    rule = compile_pattern("file[0-9].txt")
    assert rule.matches("file7.txt")
    assert not rule.matches("fileA.txt")


def test_negated_character_class():
    rule = compile_pattern("[!a].py")
    assert rule.matches("b.py")
    assert not rule.matches("a.py")


@pytest.mark.parametrize("line", ["[z-a].py", "[bz-a].py", "file[.txt"])
def test_invalid_bracket_expression_is_dropped(line):
    assert compile_pattern(line) is None


def test_escaped_star_is_literal():
    rule = compile_pattern("\\*.txt")
    assert rule.matches("*.txt")
    assert not rule.matches("a.txt")


def test_regex_metacharacters_are_literal():
    rule = compile_pattern("a+b(1).txt")
    assert rule.matches("a+b(1).txt")
    assert not rule.matches("aab1.txt")


def test_trailing_whitespace_is_stripped():
    rule = compile_pattern("foo   ")
    assert rule.matches("foo")
    assert not rule.matches("foo ")


def test_escaped_trailing_space_is_kept():
    rule = compile_pattern("foo\\ ")
    assert rule.matches("foo ")
    assert not rule.matches("foo")


def test_byte_order_mark_is_dropped():
    rule = compile_pattern("\ufeff*.log")
    assert rule.matches("a.log")


def test_ignore_case_is_the_default():
    assert compile_pattern("*.LOG").matches("error.log")
    assert not compile_pattern("*.LOG", ignore_case=False).matches("error.log")


# --- Translation ---

@pytest.mark.parametrize("line", ["", "# comment", "/"])
def test_translate_returns_none_for_non_patterns(line):
    assert translate(line) is None


def test_translate_rejects_trailing_backslash():
    with pytest.raises(GitIgnorePatternError):
        translate("foo\\")


def test_translated_regex_is_case_sensitive_until_compiled():
    source = translate("*.log")
    assert re.search(source, "src/app.log")
    assert not re.search(source, "src/app.LOG")


def test_directory_contents_rule_does_not_match_the_directory():
    rule = compile_pattern("build/**")
    assert not rule.matches("build", is_dir=True)
    assert rule.matches("build/out", is_dir=True)
