# src/docpatch/core/patch/resolver.py
"""
Resolução de alvo de patches.

Este módulo associa cada PatchOp ao documento carregado que ele deve
mutar.

Política de resolução (v1):
    - `target` explícito é usado diretamente: deve corresponder ao `id`,
      ao `name` ou ao composto `kind.name` de um candidato
    - sem target, o primeiro segmento do path nomeia o documento e é
      comparado (case-insensitive) com `name` e com `kind.name`
    - em paths com '.', os dois primeiros segmentos juntos também são
      comparados com `kind.name`
    - empates resolvem para o primeiro candidato em ordem de carga

Limites explícitos:
    - Não tenta inferir o alvo pela estrutura do documento
    - Não aplica patches
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from docpatch.core.exceptions import TargetResolutionError
from docpatch.core.path.parser import MatchType, PathPart, format_path, parse_path

from .op import PatchOp, normalize_path


@dataclass(frozen=True)
class Document:
    """Documento candidato: identidade + árvore mutável."""

    id: str
    name: str
    kind: str = ""
    node: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def composite(self) -> str:
        return f"{self.kind.lower()}.{self.name}" if self.kind else self.name

    @classmethod
    def from_node(cls, node: Dict[str, Any], index: int = 0) -> "Document":
        metadata = node.get("metadata")
        raw_name = metadata.get("name") if isinstance(metadata, dict) else None
        if raw_name is None:
            raw_name = node.get("name")
        name = "" if raw_name is None else str(raw_name)
        kind = str(node.get("kind") or "")

        if name:
            doc_id = f"{kind.lower()}.{name}" if kind else name
        else:
            doc_id = f"document-{index}"
        return cls(id=doc_id, name=name, kind=kind, node=node)


def documents_from_nodes(nodes: Iterable[Any]) -> List[Document]:
    """Envolve nós em Documents com ids únicos (sufixo `#<n>` em colisões)."""
    docs: List[Document] = []
    seen: Dict[str, int] = {}
    for index, node in enumerate(nodes):
        if isinstance(node, Document):
            doc = node
        else:
            doc = Document.from_node(node, index)
        if doc.id in seen:
            doc = replace(doc, id=f"{doc.id}#{index}")
        seen[doc.id] = index
        docs.append(doc)
    return docs


@dataclass(frozen=True)
class ResolvedPatch:
    """Patch associado ao seu documento, com o path relativo ao documento."""

    document_id: str
    document_index: int
    patch: PatchOp
    explicit: bool = False


def _is_plain(part: PathPart) -> bool:
    return part.match_type is MatchType.NONE and bool(part.field)


def match_document(parts: Sequence[PathPart], documents: Sequence[Document]) -> Optional[Tuple[int, int]]:
    """Retorna (índice do documento, segmentos consumidos) ou None."""
    if not parts or not _is_plain(parts[0]):
        return None

    first = parts[0].field.lower()
    pair = None
    if len(parts) > 1 and _is_plain(parts[1]):
        pair = f"{parts[0].field}.{parts[1].field}".lower()

    for index, doc in enumerate(documents):
        name = doc.name.lower()
        composite = doc.composite.lower()
        if first == name or first == composite:
            return index, 1
        if pair is not None and pair == composite:
            return index, 2
    return None


def find_explicit_target(target: str, documents: Sequence[Document]) -> Optional[int]:
    lowered = target.lower()
    for index, doc in enumerate(documents):
        if target == doc.id or target == doc.name or lowered == doc.composite.lower():
            return index
    return None


def resolve_target(path: str, documents: Sequence[Document]) -> str:
    """
    Determina o documento alvo a partir do primeiro segmento do path.

    Returns:
        str: `id` do documento.

    Raises:
        PathParseError: path inválido.
        TargetResolutionError: nenhum candidato corresponde.
    """
    parts = parse_path(path)
    found = match_document(parts, documents)
    if found is None:
        raise TargetResolutionError(
            f"could not determine target document for patch path: {path}",
            details={"path": path, "lookup": parts[0].field},
        )
    return documents[found[0]].id


def resolve_patch(op: PatchOp, documents: Sequence[Document]) -> ResolvedPatch:
    """
    Resolve o documento de um PatchOp.

    Com target explícito o path é mantido; sem target, os segmentos que
    nomeiam o documento são removidos do path.

    Raises:
        TargetResolutionError: alvo explícito desconhecido, nenhum candidato
            corresponde, ou o path apenas nomeia o documento.
    """
    patch = op if op.normalized else normalize_path(op)

    if patch.target:
        index = find_explicit_target(patch.target, documents)
        if index is None:
            raise TargetResolutionError(
                f"explicit target not found: {patch.target}",
                details={"target": patch.target, "path": patch.path},
            )
        return ResolvedPatch(
            document_id=documents[index].id,
            document_index=index,
            patch=patch,
            explicit=True,
        )

    found = match_document(patch.parsed_path, documents)
    if found is None:
        raise TargetResolutionError(
            f"could not determine target document for patch path: {patch.path}",
            details={"path": patch.path, "lookup": patch.parsed_path[0].field},
        )

    index, consumed = found
    remaining = patch.parsed_path[consumed:]
    if not remaining:
        raise TargetResolutionError(
            f"patch path {patch.path!r} names document {documents[index].id!r} but no field inside it",
            details={"path": patch.path, "target": documents[index].id},
        )

    doc = documents[index]
    trimmed = replace(patch, path=format_path(remaining), parsed_path=list(remaining), target=doc.id)
    return ResolvedPatch(document_id=doc.id, document_index=index, patch=trimmed)
