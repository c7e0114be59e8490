# src/docpatch/core/path/parser.py
"""
Parser de paths de patch.

Este módulo converte um path textual em uma sequência ordenada de
`PathPart` tipados, que o normalizador e o applier consomem.

Sintaxe:
    spec.containers[name=main].image
    spec/containers[name=main]/image      (forma equivalente com '/')

Cada segmento é `campo` ou `campo[seletor]`, com no máximo um seletor.
O conteúdo entre colchetes é opaco para a tokenização (um único nível,
sem aninhamento).

Gramática do seletor:
    -                    → APPEND
    -=<N> | -=<k>=<v>    → INSERT_BEFORE
    +=<N> | +=<k>=<v>    → INSERT_AFTER
    delete[=<sel>]       → DELETE (<sel>: índice, k=v ou chave de mapa)
    <N>                  → INDEX (negativo conta do fim)
    <k>=<v>              → KEY

Invariantes:
    - Um path válido com N segmentos produz exatamente N PathParts
    - '.' e '/' produzem a mesma sequência para o mesmo path
    - Delimitadores misturados são rejeitados, nunca normalizados

Limites explícitos:
    - Não infere a operação (responsabilidade do normalizador)
    - Não conhece documentos
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Sequence, Tuple

from docpatch.core.document import parse_index
from docpatch.core.exceptions import PathParseError


DELIMITERS = (".", "/")


class MatchType(str, Enum):
    """Como um segmento seleciona dentro de uma lista (ou NONE para campo puro)."""

    NONE = "none"
    INDEX = "index"
    KEY = "key"
    APPEND = "append"
    INSERT_BEFORE = "insertbefore"
    INSERT_AFTER = "insertafter"
    DELETE = "delete"


# Seletores permitidos em segmentos intermediários.
NAVIGATION_MATCH_TYPES = frozenset({MatchType.NONE, MatchType.INDEX, MatchType.KEY})


@dataclass(frozen=True)
class PathPart:
    """
    Segmento de um path parseado.

    Campos:
        - field: chave de mapa a navegar (vazio quando o seletor endereça
          a própria lista corrente, ex.: `[0]`)
        - match_type: tipo de seleção do segmento
        - match_value: operando do seletor (índice ou `chave=valor`)
    """

    field: str = ""
    match_type: MatchType = MatchType.NONE
    match_value: str = ""

    @property
    def has_selector(self) -> bool:
        return self.match_type is not MatchType.NONE

    def key_selector(self) -> Tuple[str, str]:
        """Separa `chave=valor` no primeiro '='."""
        key, _, value = self.match_value.partition("=")
        return key, value

    def selector_text(self) -> str:
        mt = self.match_type
        if mt is MatchType.NONE:
            return ""
        if mt is MatchType.APPEND:
            return "-"
        if mt is MatchType.INSERT_BEFORE:
            return f"-={self.match_value}"
        if mt is MatchType.INSERT_AFTER:
            return f"+={self.match_value}"
        if mt is MatchType.DELETE:
            return f"delete={self.match_value}" if self.match_value else "delete"
        return self.match_value

    def __str__(self) -> str:
        if not self.has_selector:
            return self.field
        return f"{self.field}[{self.selector_text()}]"


def format_path(parts: Sequence[PathPart], delimiter: str = ".") -> str:
    """Renderiza PathParts de volta para texto."""
    if delimiter not in DELIMITERS:
        raise ValueError(f"unsupported delimiter: {delimiter!r}")
    return delimiter.join(str(p) for p in parts)


def detect_delimiter(path: str) -> str:
    """Retorna o delimitador ativo do path ('.' por padrão).

    Raises:
        PathParseError: se '.' e '/' aparecem fora de colchetes.
    """
    seen = set()
    depth = 0
    for ch in path:
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
        elif depth == 0 and ch in DELIMITERS:
            seen.add(ch)
    if len(seen) > 1:
        raise PathParseError(
            f"mixed delimiters in path {path!r}",
            details={"path": path},
        )
    return seen.pop() if seen else "."


def _split_segments(path: str, delimiter: str) -> List[str]:
    segments: List[str] = []
    current: List[str] = []
    in_bracket = False

    for ch in path:
        if ch == "[":
            if in_bracket:
                raise PathParseError(
                    f"nested brackets are not supported in {path!r}",
                    details={"path": path},
                )
            in_bracket = True
        elif ch == "]":
            if not in_bracket:
                raise PathParseError(
                    f"unexpected ']' in {path!r}",
                    details={"path": path},
                )
            in_bracket = False
        elif ch == delimiter and not in_bracket:
            segments.append("".join(current))
            current = []
            continue
        current.append(ch)

    if in_bracket:
        raise PathParseError(
            f"unterminated bracket in {path!r}",
            details={"path": path},
        )
    segments.append("".join(current))
    return segments


def _is_anchor(sel: str) -> bool:
    if parse_index(sel) is not None:
        return True
    key, eq, _ = sel.partition("=")
    return bool(eq) and bool(key)


def classify_selector(body: str, *, segment: str = "") -> Tuple[MatchType, str]:
    """Classifica o conteúdo de um seletor `[...]` em (MatchType, operando)."""
    details = {"segment": segment or f"[{body}]", "selector": body}

    if body == "":
        raise PathParseError(f"empty selector in segment {details['segment']!r}", details=details)

    if body == "-":
        return MatchType.APPEND, ""

    if body.startswith("-=") or body.startswith("+="):
        anchor = body[2:]
        if not _is_anchor(anchor):
            raise PathParseError(
                f"invalid insert anchor {anchor!r} in segment {details['segment']!r}",
                details=details,
            )
        mt = MatchType.INSERT_BEFORE if body[0] == "-" else MatchType.INSERT_AFTER
        return mt, anchor

    if body == "delete":
        return MatchType.DELETE, ""

    if body.startswith("delete="):
        sel = body[len("delete="):]
        if not sel or (sel.startswith("=")):
            raise PathParseError(
                f"invalid delete selector in segment {details['segment']!r}",
                details=details,
            )
        return MatchType.DELETE, sel

    if parse_index(body) is not None:
        return MatchType.INDEX, body.strip()

    key, eq, _ = body.partition("=")
    if eq and key:
        return MatchType.KEY, body

    raise PathParseError(
        f"unknown selector {body!r} in segment {details['segment']!r}",
        details=details,
    )


def _parse_segment(segment: str, path: str) -> PathPart:
    if segment == "":
        raise PathParseError(
            f"invalid empty segment in {path!r}",
            details={"path": path},
        )

    start = segment.find("[")
    if start == -1:
        return PathPart(field=segment)

    end = segment.find("]", start)
    if end != len(segment) - 1:
        raise PathParseError(
            f"malformed selector in segment {segment!r}",
            details={"path": path, "segment": segment},
        )

    field = segment[:start]
    match_type, match_value = classify_selector(segment[start + 1 : end], segment=segment)
    if field == "" and match_type is MatchType.DELETE and match_value == "":
        raise PathParseError(
            f"segment {segment!r} deletes nothing",
            details={"path": path, "segment": segment},
        )
    return PathPart(field=field, match_type=match_type, match_value=match_value)


def parse_path(path: str, *, delete: bool = False) -> List[PathPart]:
    """
    Converte um path textual em PathParts tipados.

    Args:
        path: path com segmentos separados por '.' ou '/'.
        delete: marcador externo de delete; converte o último segmento
            (campo, índice ou chave) em DELETE preservando o operando.

    Returns:
        List[PathPart]: pelo menos um segmento.

    Raises:
        PathParseError: path vazio, segmento vazio, colchete não fechado,
            aninhado ou seguido de texto, seletor desconhecido ou
            delimitadores misturados.
    """
    if not isinstance(path, str) or not path.strip():
        raise PathParseError("empty path", details={"path": path})

    delimiter = detect_delimiter(path)
    clean = path.strip().strip(delimiter)
    if clean == "":
        raise PathParseError("empty path", details={"path": path})

    parts = [_parse_segment(seg, path) for seg in _split_segments(clean, delimiter)]

    if delete:
        last = parts[-1]
        if last.match_type not in NAVIGATION_MATCH_TYPES and last.match_type is not MatchType.DELETE:
            raise PathParseError(
                f"delete marker conflicts with selector [{last.selector_text()}] in {path!r}",
                details={"path": path, "segment": str(last)},
            )
        parts[-1] = replace(last, match_type=MatchType.DELETE)

    return parts
