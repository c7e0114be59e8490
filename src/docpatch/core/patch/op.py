# src/docpatch/core/patch/op.py
"""
Operações de patch e normalização.

Este módulo define o `PatchOp` (uma instrução completa de patch) e o
normalizador que parseia o path e infere a operação.

Política de inferência (v1): a operação é derivada **exclusivamente** do
MatchType do último segmento:

    NONE / INDEX / KEY → REPLACE   (cria o campo se ausente)
    APPEND             → APPEND
    INSERT_BEFORE      → INSERT_BEFORE
    INSERT_AFTER       → INSERT_AFTER
    DELETE             → DELETE

Segmentos intermediários aceitam apenas NONE, INDEX e KEY.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, List, Optional, Union

from docpatch.core.exceptions import NormalizationError, PathParseError
from docpatch.core.path.parser import (
    MatchType,
    NAVIGATION_MATCH_TYPES,
    PathPart,
    parse_path,
)


class Op(str, Enum):
    """Operações de mutação suportadas."""

    REPLACE = "replace"
    ADD = "add"
    DELETE = "delete"
    INSERT_BEFORE = "insertbefore"
    INSERT_AFTER = "insertafter"
    APPEND = "append"

    @classmethod
    def coerce(cls, value: Union["Op", str, None]) -> Optional["Op"]:
        """Aceita `Op`, texto (case-insensitive, ex.: 'insertBefore') ou None."""
        if value is None or isinstance(value, Op):
            return value
        text = str(value).strip().lower().replace("_", "").replace("-", "")
        for op in cls:
            if op.value == text:
                return op
        raise NormalizationError(f"unsupported op: {value}", details={"op": str(value)})


_OP_BY_MATCH_TYPE = {
    MatchType.NONE: Op.REPLACE,
    MatchType.INDEX: Op.REPLACE,
    MatchType.KEY: Op.REPLACE,
    MatchType.APPEND: Op.APPEND,
    MatchType.INSERT_BEFORE: Op.INSERT_BEFORE,
    MatchType.INSERT_AFTER: Op.INSERT_AFTER,
    MatchType.DELETE: Op.DELETE,
}


def infer_op(match_type: MatchType) -> Op:
    return _OP_BY_MATCH_TYPE[match_type]


@dataclass
class PatchOp:
    """
    Instrução de patch.

    Campos:
        - path: texto original (mantido para diagnóstico)
        - value: payload a escrever (None para DELETE)
        - op: operação; inferida na normalização. Um `Op.DELETE` externo
          atua como marcador de delete sobre o último segmento.
        - target: identificador explícito do documento (opcional)
        - parsed_path: segmentos parseados (preenchido na normalização)
    """

    path: str
    value: Any = None
    op: Optional[Op] = None
    target: Optional[str] = None
    parsed_path: List[PathPart] = field(default_factory=list)

    @property
    def normalized(self) -> bool:
        return bool(self.parsed_path)

    @property
    def last(self) -> PathPart:
        if not self.parsed_path:
            raise NormalizationError(f"patch {self.path!r} is not normalized", details={"path": self.path})
        return self.parsed_path[-1]

    def describe(self) -> str:
        op = self.op.value if self.op else "?"
        target = f"{self.target}:" if self.target else ""
        return f"{op} {target}{self.path}"


def normalize_path(op: PatchOp) -> PatchOp:
    """
    Parseia `op.path`, valida os segmentos e infere a operação.

    Retorna uma nova instância; `op` não é mutado.

    Raises:
        PathParseError: gramática de path inválida.
        NormalizationError: operador de lista em segmento intermediário ou
            marcador de operação desconhecido.
    """
    marker = Op.coerce(op.op)

    try:
        parsed = parse_path(op.path, delete=marker is Op.DELETE)
    except PathParseError as exc:
        details = dict(exc.details)
        details.setdefault("path", op.path)
        raise PathParseError(f"invalid patch path {op.path!r}: {exc}", details=details) from exc

    for position, part in enumerate(parsed[:-1]):
        if part.match_type not in NAVIGATION_MATCH_TYPES:
            raise NormalizationError(
                f"operator [{part.selector_text()}] is only valid on the last segment of {op.path!r}",
                details={"path": op.path, "segment": str(part), "position": position},
            )

    inferred = infer_op(parsed[-1].match_type)
    value = None if inferred is Op.DELETE else op.value
    return replace(op, op=inferred, value=value, parsed_path=parsed)


def parse_patch_line(key: str, value: Any, *, target: Optional[str] = None) -> PatchOp:
    """Constrói e normaliza um PatchOp a partir de uma linha `path: valor`."""
    return normalize_path(PatchOp(path=key, value=value, target=target))
