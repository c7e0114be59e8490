# src/docpatch/core/patch/applier.py
"""
Applier — motor de mutação de documentos.

Este módulo percorre um documento segmento a segmento e executa a
operação classificada de um PatchOp, sempre in-place.

Navegação (segmentos intermediários):
    - `field` exige um Map e uma chave existente
    - INDEX/KEY exigem uma List e um elemento correspondente
    - nenhuma estrutura intermediária é criada implicitamente

Despacho (último segmento):
    - REPLACE       → define/cria o campo, ou sobrescreve o elemento selecionado
    - DELETE        → remove campo, chave ou elemento; alvo ausente é no-op
    - APPEND        → adiciona ao fim de uma List existente
    - INSERT_BEFORE → insere antes da âncora (índice ou chave)
    - INSERT_AFTER  → insere depois da âncora

Invariantes:
    - Campos irmãos e a ordem de listas fora do ponto tocado são preservados
    - Valores escritos são cópias (sem aliasing entre documentos)
    - Reaplicar um REPLACE produz o mesmo documento
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterable, Iterator

from docpatch.core import document as dm
from docpatch.core.exceptions import (
    DocPatchError,
    PathNotFoundError,
    SelectorNotFoundError,
    TypeMismatchError,
)
from docpatch.core.path.parser import MatchType, PathPart

from .op import Op, PatchOp, normalize_path


_MISSING = object()


@contextmanager
def _segment(op: PatchOp, part: PathPart, depth: int) -> Iterator[None]:
    """Enriquece falhas com o path e o segmento em que ocorreram."""
    try:
        yield
    except DocPatchError as exc:
        exc.details.setdefault("path", op.path)
        exc.details.setdefault("segment", str(part))
        exc.details.setdefault("depth", depth)
        raise


def _field_of(container: Any, part: PathPart, *, required: bool = True) -> Any:
    if not dm.has_field(container, part.field):
        if not required:
            return _MISSING
        raise PathNotFoundError(f"field '{part.field}' not found")
    return dm.get_field(container, part.field)


def _locate(items: Any, selector: str) -> int:
    """Posição de um elemento por índice (aceita negativo) ou `chave=valor`."""
    if dm.parse_index(selector) is not None:
        return dm.resolve_index(items, selector)
    key, eq, value = selector.partition("=")
    if not eq:
        raise SelectorNotFoundError(f"invalid list selector: {selector}", details={"selector": selector})
    return dm.find_by_key(items, key, value)


def _descend(container: Any, part: PathPart) -> Any:
    node = container
    if part.field:
        node = _field_of(node, part)
    if part.match_type in (MatchType.INDEX, MatchType.KEY):
        node = node[_locate(node, part.match_value)]
    return node


def _target_list(container: Any, part: PathPart) -> Any:
    node = _field_of(container, part) if part.field else container
    if not isinstance(node, list):
        raise TypeMismatchError(
            f"'{part.field or '.'}' is a {dm.node_kind(node).value}, expected list",
            details={"expected": dm.NodeKind.LIST.value, "actual": dm.node_kind(node).value},
        )
    return node


def _delete(container: Any, part: PathPart) -> None:
    if not part.match_value:
        dm.delete_field(container, part.field)
        return

    node = _field_of(container, part, required=False) if part.field else container
    if node is _MISSING:
        return

    selector = part.match_value
    if isinstance(node, dict):
        if dm.parse_index(selector) is not None or "=" in selector:
            raise TypeMismatchError(
                f"cannot apply list selector [{selector}] to map",
                details={"selector": selector, "expected": dm.NodeKind.LIST.value, "actual": dm.NodeKind.MAP.value},
            )
        dm.delete_field(node, selector)
        return

    if not isinstance(node, list):
        raise TypeMismatchError(
            f"cannot delete [{selector}] from {dm.node_kind(node).value}",
            details={"selector": selector, "actual": dm.node_kind(node).value},
        )

    if dm.parse_index(selector) is None and "=" not in selector:
        raise TypeMismatchError(
            f"map key selector [{selector}] used on list",
            details={"selector": selector, "expected": dm.NodeKind.MAP.value, "actual": dm.NodeKind.LIST.value},
        )

    try:
        position = _locate(node, selector)
    except SelectorNotFoundError:
        return
    dm.delete_item(node, position)


def _dispatch(container: Any, part: PathPart, op: PatchOp) -> None:
    kind = op.op

    if kind is Op.REPLACE or kind is Op.ADD:
        if not part.has_selector:
            dm.set_field(container, part.field, op.value)
            return
        items = _target_list(container, part)
        dm.set_item(items, _locate(items, part.match_value), op.value)
        return

    if kind is Op.DELETE:
        _delete(container, part)
        return

    if kind is Op.APPEND:
        dm.append_item(_target_list(container, part), op.value)
        return

    if kind is Op.INSERT_BEFORE or kind is Op.INSERT_AFTER:
        items = _target_list(container, part)
        position = _locate(items, part.match_value)
        if kind is Op.INSERT_AFTER:
            position += 1
        dm.insert_item(items, position, op.value)
        return

    raise TypeMismatchError(f"unsupported op: {kind}", details={"op": str(kind)})


def apply(doc: Any, op: PatchOp) -> Any:
    """
    Aplica um PatchOp sobre `doc` (in-place) e retorna o próprio `doc`.

    Raises:
        TypeMismatchError: campo em não-Map ou seletor em não-List.
        SelectorNotFoundError: índice/chave sem correspondência
            (exceto DELETE, que é no-op).
        PathNotFoundError: campo intermediário ou lista alvo ausente.
        ParseError: se `op` ainda não estiver normalizado e o path for inválido.
    """
    patch = op if op.normalized else normalize_path(op)
    parts = patch.parsed_path
    container = doc

    for depth, part in enumerate(parts[:-1]):
        with _segment(patch, part, depth):
            container = _descend(container, part)

    last = parts[-1]
    with _segment(patch, last, len(parts) - 1):
        _dispatch(container, last, patch)
    return doc


def apply_all(doc: Any, ops: Iterable[PatchOp]) -> Any:
    """Aplica uma sequência de patches em ordem de instrução."""
    for op in ops:
        apply(doc, op)
    return doc
