# tests/core/path/test_parser.py
"""
Testes do parser de paths (parse_path).

Os testes asseguram que:
- um path com N segmentos produz exatamente N PathParts
- '.' e '/' produzem a mesma sequência
- cada forma de seletor é classificada no MatchType correto
- entradas malformadas falham com PathParseError
"""

import pytest

from docpatch.core.exceptions import PathParseError
from docpatch.core.path import (
    MatchType,
    PathPart,
    detect_delimiter,
    format_path,
    parse_path,
)


def test_field_and_key_selector_segments():
    parts = parse_path("spec.containers[name=main].image")

    assert parts == [
        PathPart(field="spec"),
        PathPart(field="containers", match_type=MatchType.KEY, match_value="name=main"),
        PathPart(field="image"),
    ]


@pytest.mark.parametrize(
    "path, expected",
    [
        ("a", 1),
        ("a.b", 2),
        ("a.b.c.d", 4),
        ("a[0].b[k=v].c", 3),
        ("a/b/c", 3),
    ],
)
def test_segment_count_matches_path(path, expected):
    assert len(parse_path(path)) == expected


def test_slash_and_dot_are_equivalent():
    assert parse_path("spec/containers[name=main]/image") == parse_path("spec.containers[name=main].image")


def test_dots_inside_brackets_do_not_split():
    parts = parse_path("items[name=a.b].value")

    assert len(parts) == 2
    assert parts[0].match_value == "name=a.b"
    assert detect_delimiter("items[x.y]/value") == "/"


def test_leading_and_trailing_delimiters_are_ignored():
    assert parse_path(".a.b.") == parse_path("a.b")


@pytest.mark.parametrize(
    "selector, match_type, match_value",
    [
        ("[-]", MatchType.APPEND, ""),
        ("[-=0]", MatchType.INSERT_BEFORE, "0"),
        ("[+=0]", MatchType.INSERT_AFTER, "0"),
        ("[-=name=main]", MatchType.INSERT_BEFORE, "name=main"),
        ("[+=name=main]", MatchType.INSERT_AFTER, "name=main"),
        ("[delete]", MatchType.DELETE, ""),
        ("[delete=app]", MatchType.DELETE, "app"),
        ("[delete=name=main]", MatchType.DELETE, "name=main"),
        ("[delete=1]", MatchType.DELETE, "1"),
        ("[2]", MatchType.INDEX, "2"),
        ("[-1]", MatchType.INDEX, "-1"),
        ("[port=80]", MatchType.KEY, "port=80"),
    ],
)
def test_selector_classification(selector, match_type, match_value):
    last = parse_path(f"spec.items{selector}")[-1]

    assert last.field == "items"
    assert last.match_type is match_type
    assert last.match_value == match_value


def test_key_selector_splits_on_first_equals():
    part = parse_path("env[value=a=b]")[0]

    assert part.key_selector() == ("value", "a=b")


@pytest.mark.parametrize(
    "path",
    [
        "",
        "   ",
        "a[0",
        "a]",
        "a[[0]]",
        "a..b",
        "a.b/c",
        "a[foo]",
        "a[]",
        "a[0]x",
        "a[-=]",
        "a[+=foo]",
        "a[delete=]",
        "[delete]",
    ],
)
def test_malformed_paths_raise(path):
    with pytest.raises(PathParseError):
        parse_path(path)


def test_mixed_delimiters_error_carries_path():
    with pytest.raises(PathParseError) as exc:
        parse_path("metadata.labels/app")

    assert "mixed delimiters" in str(exc.value)
    assert exc.value.details["path"] == "metadata.labels/app"


def test_delete_marker_converts_last_segment():
    field_part = parse_path("data.key", delete=True)[-1]
    index_part = parse_path("items[0]", delete=True)[-1]
    key_part = parse_path("items[name=a]", delete=True)[-1]

    assert field_part == PathPart(field="key", match_type=MatchType.DELETE)
    assert index_part == PathPart(field="items", match_type=MatchType.DELETE, match_value="0")
    assert key_part == PathPart(field="items", match_type=MatchType.DELETE, match_value="name=a")


def test_delete_marker_rejects_list_operators():
    with pytest.raises(PathParseError):
        parse_path("items[-]", delete=True)


def test_format_path_renders_canonical_text():
    parts = parse_path("spec/containers[name=main]/ports[+=0]")

    assert format_path(parts) == "spec.containers[name=main].ports[+=0]"
    assert format_path(parts, "/") == "spec/containers[name=main]/ports[+=0]"
