# src/docpatch/core/patch/loader.py
"""Loader canônico de fontes de patch e de documentos (YAML).

Formatos de patch aceitos:
- mapa simples `{path: valor}` → PatchOps sem target (resolvidos pelo path)
- lista de registros `{target: <nome>, patch: {path: valor}}` → PatchOps com target

Notas:
- Todas as linhas são parseadas e normalizadas antes de retornar.
- Falhas são coletadas e levantadas juntas em AggregateParseError.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import IO, Any, Dict, List, Optional, Union

import yaml

from docpatch.core.document import validate_node
from docpatch.core.exceptions import (
    AggregateParseError,
    ParseError,
    PatchSourceError,
    UnsupportedNodeError,
)

from .op import PatchOp, parse_patch_line
from .resolver import Document, documents_from_nodes
from .variables import VariableContext, substitute_variables


Source = Union[str, bytes, IO[str], IO[bytes]]


@dataclass(frozen=True)
class TargetedPatchRecord:
    """Grupo de instruções `path: valor` destinado a um alvo explícito."""

    target: str
    patches: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, entry: Any, index: int) -> "TargetedPatchRecord":
        if not isinstance(entry, dict):
            raise PatchSourceError(
                f"patch list entry {index} must be a mapping",
                details={"index": index},
            )
        target = entry.get("target")
        if not isinstance(target, str) or not target.strip():
            raise PatchSourceError(
                f"patch list entry {index} requires a non-empty 'target'",
                details={"index": index},
            )
        patches = entry.get("patch")
        if patches is None:
            patches = {}
        if not isinstance(patches, dict):
            raise PatchSourceError(
                f"patch list entry {index} ('{target}') must define 'patch' as a mapping",
                details={"index": index, "target": target},
            )
        return cls(target=target.strip(), patches=dict(patches))


def _read(source: Source) -> Union[str, bytes]:
    # bytes seguem crus: o PyYAML detecta BOM/encoding e falha com ReaderError
    return source.read() if hasattr(source, "read") else source


def _records(data: Any, errors: List[ParseError]) -> List[TargetedPatchRecord]:
    """Normaliza os dois formatos em registros; target vazio = sem alvo explícito."""
    if isinstance(data, dict):
        return [TargetedPatchRecord(target="", patches=dict(data))]
    if not isinstance(data, list):
        raise PatchSourceError(
            f"unrecognized patch format: root is {type(data).__name__}",
            details={"root": type(data).__name__},
        )

    records: List[TargetedPatchRecord] = []
    for index, entry in enumerate(data):
        try:
            records.append(TargetedPatchRecord.from_dict(entry, index))
        except PatchSourceError as e:
            errors.append(e)
    return records


def parse_patch_source(
    source: Source,
    *,
    variables: Optional[VariableContext] = None,
) -> List[PatchOp]:
    """
    Carrega e normaliza todas as instruções de uma fonte de patches YAML.

    Args:
        source: texto YAML ou objeto file-like.
        variables: contexto opcional para `${values.*}` / `${features.*}`.

    Returns:
        List[PatchOp]: instruções normalizadas, em ordem do arquivo.

    Raises:
        PatchSourceError: YAML inválido ou estrutura raiz não reconhecida.
        AggregateParseError: uma ou mais instruções inválidas.
    """
    try:
        data = yaml.safe_load(_read(source))
    except yaml.YAMLError as e:
        raise PatchSourceError(f"failed to read patch input: {e}") from e

    if data is None:
        return []

    ops: List[PatchOp] = []
    errors: List[ParseError] = []

    for record in _records(data, errors):
        for key, value in record.patches.items():
            if not isinstance(key, str):
                errors.append(
                    PatchSourceError(f"patch path must be a string, got {key!r}", details={"path": repr(key)})
                )
                continue
            try:
                op = parse_patch_line(key, value, target=record.target or None)
            except ParseError as e:
                errors.append(e)
                continue
            if variables is not None:
                op = replace(op, value=substitute_variables(op.value, variables, op.last.field or key))
            ops.append(op)

    if errors:
        raise AggregateParseError(errors)
    return ops


def load_documents(source: Source) -> List[Document]:
    """Carrega um stream YAML multi-documento como Documents candidatos.

    Documentos vazios são ignorados; raízes que não são mapas, ou que contêm
    chaves não-string, são rejeitadas.
    """
    try:
        nodes = [doc for doc in yaml.safe_load_all(_read(source)) if doc is not None]
    except yaml.YAMLError as e:
        raise PatchSourceError(f"failed to decode resource document: {e}") from e

    for index, node in enumerate(nodes):
        if not isinstance(node, dict):
            raise PatchSourceError(
                f"resource document {index} must be a mapping, got {type(node).__name__}",
                details={"index": index},
            )
        try:
            validate_node(node)
        except UnsupportedNodeError as e:
            raise PatchSourceError(
                f"resource document {index} is not a valid document: {e.message}",
                details={"index": index, **e.details},
            ) from e
    return documents_from_nodes(nodes)
