# tests/core/engine/test_engine_fail_fast.py
"""
Testes do PatchEngine em modo fail-fast (default).

Cenário:
    0: demo.data.key                       → aplica
    1: web.spec.containers[name=ghost]...  → falha (seletor sem correspondência)
    2: web.spec.replicas                   → SKIPPED (após a falha)
    3: demo.data.other                     → aplica (documento `demo` vem antes)

Patches são agrupados por documento (ordem de carga) e aplicados em ordem
de instrução dentro de cada documento.
"""

import pytest

from docpatch.core.engine import PatchEngine, PatchStatus
from docpatch.core.exceptions import (
    AggregateParseError,
    AggregateResolutionError,
    SelectorNotFoundError,
)
from docpatch.core.patch.op import PatchOp


def _patches():
    return [
        PatchOp(path="demo.data.key", value="new"),
        PatchOp(path="web.spec.containers[name=ghost].image", value="x"),
        PatchOp(path="web.spec.replicas", value=3),
        PatchOp(path="demo.data.other", value="y"),
    ]


def test_first_failure_skips_remaining(configmap_doc, deployment_doc):
    result = PatchEngine([configmap_doc, deployment_doc], _patches()).run()

    assert [r.status for r in result.results] == [
        PatchStatus.APPLIED,
        PatchStatus.FAILED,
        PatchStatus.SKIPPED,
        PatchStatus.APPLIED,
    ]
    assert result.stopped is True
    assert result.ok is False
    assert configmap_doc["data"] == {"key": "new", "other": "y"}
    assert deployment_doc["spec"]["replicas"] == 1


def test_results_carry_identity(configmap_doc, deployment_doc):
    result = PatchEngine([configmap_doc, deployment_doc], _patches()).run()

    first = result.results[0]
    assert (first.index, first.target, first.path, first.op) == (0, "configmap.demo", "data.key", "replace")
    assert first.changed is True
    assert result.results[2].summary == "skipped due to earlier failure"


def test_failure_payload_is_structured(configmap_doc, deployment_doc):
    result = PatchEngine([configmap_doc, deployment_doc], _patches()).run()

    error = result.results[1].payload["error"]
    assert error["type"] == "SELECTOR_NOT_FOUND"
    assert error["details"]["path"] == "spec.containers[name=ghost].image"
    assert error["details"]["segment"] == "containers[name=ghost]"
    assert error["hint"]


def test_raise_for_errors_raises_original_failure(configmap_doc, deployment_doc):
    result = PatchEngine([configmap_doc, deployment_doc], _patches()).run()

    with pytest.raises(SelectorNotFoundError):
        result.raise_for_errors()


def test_parse_errors_abort_before_any_mutation(configmap_doc, deployment_doc):
    patches = [
        PatchOp(path="demo.data.key", value="new"),
        PatchOp(path="web.spec.containers[0", value="x"),
        PatchOp(path="web.spec.containers[-].name", value="x"),
    ]

    with pytest.raises(AggregateParseError) as exc:
        PatchEngine([configmap_doc, deployment_doc], patches).run()

    assert len(exc.value.errors) == 2
    assert configmap_doc["data"] == {"key": "old"}


def test_resolution_errors_abort_before_any_mutation(configmap_doc, deployment_doc):
    patches = [
        PatchOp(path="demo.data.key", value="new"),
        PatchOp(path="ghost.data.key", value="x"),
        PatchOp(path="data.key", value="x", target="nobody"),
    ]

    with pytest.raises(AggregateResolutionError) as exc:
        PatchEngine([configmap_doc, deployment_doc], patches).run()

    assert len(exc.value.errors) == 2
    assert configmap_doc["data"] == {"key": "old"}


def test_plan_does_not_mutate(configmap_doc):
    engine = PatchEngine([configmap_doc], [PatchOp(path="demo.data.key", value="new")])

    resolved = engine.plan()

    assert [r.document_id for r in resolved] == ["configmap.demo"]
    assert configmap_doc["data"] == {"key": "old"}
