# tests/core/patch/test_resolver.py
"""
Testes da resolução de documento alvo.

Cobertura:
- identidade de Document (id, name, kind.name)
- resolução pelo primeiro segmento (name, kind.name, case-insensitive)
- target explícito (id, name, kind.name) e alvo desconhecido
- remoção dos segmentos que nomeiam o documento
"""

import pytest

from docpatch.core.exceptions import TargetResolutionError
from docpatch.core.patch.op import parse_patch_line
from docpatch.core.patch.resolver import (
    Document,
    documents_from_nodes,
    resolve_patch,
    resolve_target,
)


@pytest.fixture
def documents(configmap_doc, deployment_doc):
    return documents_from_nodes([configmap_doc, deployment_doc])


def test_document_identity_from_metadata(configmap_doc):
    doc = Document.from_node(configmap_doc)

    assert doc.id == "configmap.demo"
    assert doc.name == "demo"
    assert doc.kind == "ConfigMap"
    assert doc.node is configmap_doc


def test_document_without_name_gets_positional_id():
    docs = documents_from_nodes([{"a": 1}, {"b": 2}])

    assert [d.id for d in docs] == ["document-0", "document-1"]


def test_duplicate_ids_get_suffix(configmap_doc):
    docs = documents_from_nodes([configmap_doc, dict(configmap_doc)])

    assert [d.id for d in docs] == ["configmap.demo", "configmap.demo#1"]


@pytest.mark.parametrize(
    "path, expected",
    [
        ("demo.data.key", "configmap.demo"),
        ("DEMO.data.key", "configmap.demo"),
        ("web.spec.replicas", "deployment.web"),
        ("web/spec/replicas", "deployment.web"),
        ("deployment.web.spec.replicas", "deployment.web"),
        ("Deployment.web.spec.replicas", "deployment.web"),
    ],
)
def test_resolve_target_by_first_segments(documents, path, expected):
    assert resolve_target(path, documents) == expected


def test_unknown_target_raises(documents):
    with pytest.raises(TargetResolutionError) as exc:
        resolve_target("missing.data.key", documents)

    assert exc.value.details["lookup"] == "missing"


def test_resolve_patch_trims_document_segment(documents):
    resolved = resolve_patch(parse_patch_line("web.spec.replicas", 3), documents)

    assert resolved.document_id == "deployment.web"
    assert resolved.document_index == 1
    assert resolved.explicit is False
    assert resolved.patch.path == "spec.replicas"
    assert resolved.patch.target == "deployment.web"
    assert [p.field for p in resolved.patch.parsed_path] == ["spec", "replicas"]


def test_resolve_patch_trims_composite_name(documents):
    resolved = resolve_patch(parse_patch_line("configmap.demo.data.key", "v"), documents)

    assert resolved.document_id == "configmap.demo"
    assert resolved.patch.path == "data.key"


@pytest.mark.parametrize("target", ["demo", "configmap.demo", "ConfigMap.demo"])
def test_explicit_target_keeps_path(documents, target):
    resolved = resolve_patch(parse_patch_line("data.key", "v", target=target), documents)

    assert resolved.explicit is True
    assert resolved.document_id == "configmap.demo"
    assert resolved.patch.path == "data.key"


def test_explicit_target_must_exist(documents):
    with pytest.raises(TargetResolutionError) as exc:
        resolve_patch(parse_patch_line("data.key", "v", target="ghost"), documents)

    assert exc.value.details["target"] == "ghost"


def test_path_naming_only_the_document_is_rejected(documents):
    with pytest.raises(TargetResolutionError):
        resolve_patch(parse_patch_line("demo", "v"), documents)


def test_duplicate_names_resolve_to_first_loaded(configmap_doc, deployment_doc):
    other = dict(deployment_doc, metadata={"name": "demo"})
    docs = documents_from_nodes([other, configmap_doc])

    assert resolve_target("demo.spec.replicas", docs) == "deployment.demo"
