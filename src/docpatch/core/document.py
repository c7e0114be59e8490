# src/docpatch/core/document.py
"""
Modelo de documento do docpatch.

Um documento é uma árvore genérica de dados estruturados, representada
diretamente por valores Python puros:

    - Map    → dict (chaves str, ordem de inserção preservada)
    - List   → list (sequência ordenada)
    - Scalar → str | int | float | bool | None

Este módulo oferece as operações explícitas de leitura e mutação usadas
pelo applier. Cada operação valida o formato do nó e levanta uma exceção
tipada em vez de retornar `None` silenciosamente.

Invariantes:
    - Um nó pertence a um único documento (valores escritos são copiados)
    - Ordem de chaves e de elementos fora do ponto tocado é preservada
    - Nenhuma estrutura intermediária é criada implicitamente

Limites explícitos:
    - Não conhece schemas de recursos
    - Não serializa nem carrega documentos
"""

from __future__ import annotations

from copy import deepcopy
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from .exceptions import (
    SelectorNotFoundError,
    TypeMismatchError,
    UnsupportedNodeError,
)


class NodeKind(str, Enum):
    """Classificação de um nó do documento."""

    MAP = "map"
    LIST = "list"
    SCALAR = "scalar"


# date cobre timestamps nativos do YAML (datetime herda de date)
_SCALAR_TYPES = (str, int, float, bool, type(None), date)


def node_kind(node: Any) -> NodeKind:
    """Classifica `node` como Map, List ou Scalar.

    Raises:
        UnsupportedNodeError: se o valor não pertence ao modelo.
    """
    if isinstance(node, dict):
        return NodeKind.MAP
    if isinstance(node, list):
        return NodeKind.LIST
    if isinstance(node, _SCALAR_TYPES):
        return NodeKind.SCALAR
    raise UnsupportedNodeError(
        f"unsupported node type: {type(node).__name__}",
        details={"type": type(node).__name__},
    )


def validate_node(node: Any) -> None:
    """Valida recursivamente que `node` pertence ao modelo Map / List / Scalar."""
    kind = node_kind(node)
    if kind is NodeKind.MAP:
        for key, value in node.items():
            if not isinstance(key, str):
                raise UnsupportedNodeError(
                    f"map keys must be strings, got {type(key).__name__}",
                    details={"key": repr(key)},
                )
            validate_node(value)
    elif kind is NodeKind.LIST:
        for item in node:
            validate_node(item)


def copy_node(node: Any) -> Any:
    """Cópia profunda validada de um nó."""
    validate_node(node)
    return deepcopy(node)


def scalar_text(value: Any) -> str:
    """Texto canônico de um valor para comparação em seletores `chave=valor`."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# -----------------------------
# Map
# -----------------------------
def _expect_map(node: Any, key: str) -> Dict[str, Any]:
    if not isinstance(node, dict):
        raise TypeMismatchError(
            f"cannot access field '{key}' on {node_kind(node).value}",
            details={"field": key, "expected": NodeKind.MAP.value, "actual": node_kind(node).value},
        )
    return node


def has_field(node: Any, key: str) -> bool:
    return key in _expect_map(node, key)


def get_field(node: Any, key: str, default: Any = None) -> Any:
    return _expect_map(node, key).get(key, default)


def set_field(node: Any, key: str, value: Any) -> None:
    """Define (ou cria) `node[key]` com uma cópia de `value`."""
    _expect_map(node, key)[key] = copy_node(value)


def delete_field(node: Any, key: str) -> bool:
    """Remove `node[key]`. Retorna False quando a chave não existe."""
    mapping = _expect_map(node, key)
    if key not in mapping:
        return False
    del mapping[key]
    return True


# -----------------------------
# List
# -----------------------------
def _expect_list(node: Any, selector: str) -> List[Any]:
    if not isinstance(node, list):
        raise TypeMismatchError(
            f"cannot apply selector [{selector}] to {node_kind(node).value}",
            details={"selector": selector, "expected": NodeKind.LIST.value, "actual": node_kind(node).value},
        )
    return node


def parse_index(raw: str) -> Optional[int]:
    """Converte texto em índice inteiro (aceita sinal). Retorna None se não numérico."""
    text = raw.strip()
    if text.startswith(("-", "+")):
        digits = text[1:]
    else:
        digits = text
    if not digits.isdigit():
        return None
    return int(text)


def resolve_index(items: Any, raw: str) -> int:
    """Resolve um índice textual (negativo conta do fim) para posição absoluta.

    Raises:
        TypeMismatchError: se `items` não for List.
        SelectorNotFoundError: se o índice estiver fora dos limites.
    """
    seq = _expect_list(items, raw)
    index = parse_index(raw)
    if index is None:
        raise SelectorNotFoundError(
            f"invalid list index: {raw}",
            details={"selector": raw},
        )
    position = index + len(seq) if index < 0 else index
    if position < 0 or position >= len(seq):
        raise SelectorNotFoundError(
            f"index {raw} out of range for list of length {len(seq)}",
            details={"selector": raw, "length": len(seq)},
        )
    return position


def find_by_key(items: Any, key: str, value: str) -> int:
    """Posição do primeiro elemento Map com `elem[key] == value`.

    Duplicatas resolvem sempre para a primeira ocorrência em ordem.

    Raises:
        TypeMismatchError: se `items` não for List.
        SelectorNotFoundError: se nenhum elemento corresponder.
    """
    selector = f"{key}={value}"
    seq = _expect_list(items, selector)
    for position, item in enumerate(seq):
        if isinstance(item, dict) and key in item and scalar_text(item[key]) == value:
            return position
    raise SelectorNotFoundError(
        f"no list element matches {selector}",
        details={"selector": selector, "length": len(seq)},
    )


def get_item(items: Any, position: int) -> Any:
    return _expect_list(items, str(position))[position]


def set_item(items: Any, position: int, value: Any) -> None:
    _expect_list(items, str(position))[position] = copy_node(value)


def delete_item(items: Any, position: int) -> None:
    del _expect_list(items, str(position))[position]


def insert_item(items: Any, position: int, value: Any) -> None:
    """Insere uma cópia de `value` antes da posição `position`."""
    _expect_list(items, str(position)).insert(position, copy_node(value))


def append_item(items: Any, value: Any) -> None:
    _expect_list(items, "-").append(copy_node(value))
