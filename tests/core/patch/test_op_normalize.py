# tests/core/patch/test_op_normalize.py
"""
Testes do normalizador (normalize_path) e da inferência de operação.

A operação é derivada exclusivamente do MatchType do último segmento;
operadores de lista em segmentos intermediários são rejeitados.
"""

import pytest

from docpatch.core.exceptions import NormalizationError, PathParseError
from docpatch.core.patch.op import Op, PatchOp, normalize_path, parse_patch_line
from docpatch.core.path import MatchType


@pytest.mark.parametrize(
    "path, expected",
    [
        ("data.key", Op.REPLACE),
        ("spec.items[0]", Op.REPLACE),
        ("spec.items[name=a]", Op.REPLACE),
        ("spec.items[-]", Op.APPEND),
        ("spec.items[-=0]", Op.INSERT_BEFORE),
        ("spec.items[+=name=a]", Op.INSERT_AFTER),
        ("metadata.labels[delete]", Op.DELETE),
        ("metadata.labels[delete=app]", Op.DELETE),
    ],
)
def test_op_is_inferred_from_last_segment(path, expected):
    assert normalize_path(PatchOp(path=path, value=1)).op is expected


@pytest.mark.parametrize(
    "path",
    [
        "spec.items[-].name",
        "spec.items[+=0].name",
        "spec.items[delete=0].name",
    ],
)
def test_list_operator_on_intermediate_segment_is_rejected(path):
    with pytest.raises(NormalizationError) as exc:
        normalize_path(PatchOp(path=path, value="x"))

    assert exc.value.details["path"] == path
    assert exc.value.details["position"] == 1


def test_delete_marker_wins_and_drops_value():
    op = normalize_path(PatchOp(path="data.key", value="ignored", op="delete"))

    assert op.op is Op.DELETE
    assert op.value is None
    assert op.last.match_type is MatchType.DELETE
    assert op.last.field == "key"


def test_normalize_returns_new_instance():
    original = PatchOp(path="data.key", value="v")

    normalized = normalize_path(original)

    assert normalized is not original
    assert original.parsed_path == []
    assert original.op is None
    assert normalized.normalized


def test_invalid_path_is_reported_with_original_text():
    with pytest.raises(PathParseError) as exc:
        normalize_path(PatchOp(path="spec.items[0", value=1))

    assert "spec.items[0" in str(exc.value)
    assert exc.value.details["path"] == "spec.items[0"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("insertBefore", Op.INSERT_BEFORE),
        ("insert_after", Op.INSERT_AFTER),
        ("REPLACE", Op.REPLACE),
        (Op.APPEND, Op.APPEND),
        (None, None),
    ],
)
def test_op_coerce(raw, expected):
    assert Op.coerce(raw) is expected


def test_unknown_op_marker_raises():
    with pytest.raises(NormalizationError):
        normalize_path(PatchOp(path="data.key", value=1, op="merge"))


def test_parse_patch_line_keeps_target():
    op = parse_patch_line("data.key", "new", target="demo")

    assert op.target == "demo"
    assert op.value == "new"
    assert op.describe() == "replace demo:data.key"
