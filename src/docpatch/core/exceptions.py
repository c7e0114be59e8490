# src/docpatch/core/exceptions.py
"""
docpatch — Canonical Exceptions (v1)

Este módulo define a hierarquia de exceções tipadas do motor de patches.

Objetivo:
- Permitir que parser, resolver e applier levantem falhas semânticas tipadas
- Facilitar o mapeamento determinístico para PatchErrorPayload
- Evitar ValueError/KeyError genéricos durante a navegação de documentos

Famílias:
- ParseError      → gramática de path inválida, normalização, fonte de patches
- ResolutionError → nenhum documento candidato corresponde ao patch
- ApplyError      → falha ao mutar o documento (tipo, seletor, caminho)

Regras:
- Exceções carregam apenas dados estruturados (serializáveis) em `details`.
- A mensagem é curta e humana; o contexto fica em `details`.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence


class DocPatchError(Exception):
    """Base class para exceções internas do docpatch.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - `code` é o identificador estável usado em payloads de erro
    """

    code = "DOCPATCH_ERROR"

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})
        self.hint = hint

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Parse
# ---------------------------------------------------------------------------


class ParseError(DocPatchError):
    """Instrução de patch sintaticamente inválida."""

    code = "PARSE_ERROR"


class PathParseError(ParseError):
    """Path com gramática inválida (colchetes, delimitadores, seletores)."""

    code = "PATH_PARSE_ERROR"


class NormalizationError(ParseError):
    """Path válido, mas operação inconsistente (ex.: append em segmento intermediário)."""

    code = "NORMALIZATION_ERROR"


class PatchSourceError(ParseError):
    """Fonte de patches (YAML) com estrutura não reconhecida."""

    code = "PATCH_SOURCE_ERROR"


class AggregateParseError(ParseError):
    """Agrega múltiplos ParseError de um mesmo lote.

    Instruções válidas não ficam mascaradas por uma linha ruim: todas as
    falhas são reportadas juntas.
    """

    code = "AGGREGATE_PARSE_ERROR"

    def __init__(self, errors: Sequence[ParseError]) -> None:
        self.errors: List[ParseError] = list(errors)
        super().__init__(
            _aggregate_message("patch instruction(s) failed to parse", self.errors),
            details={"count": len(self.errors), "errors": [str(e) for e in self.errors]},
        )


# ---------------------------------------------------------------------------
# Resolução de alvo
# ---------------------------------------------------------------------------


class ResolutionError(DocPatchError):
    """Falha ao determinar o documento alvo de um patch."""

    code = "RESOLUTION_ERROR"


class TargetResolutionError(ResolutionError):
    """Nenhum documento candidato corresponde ao alvo (explícito ou inferido)."""

    code = "TARGET_NOT_FOUND"


class AggregateResolutionError(ResolutionError):
    """Agrega múltiplos ResolutionError de um mesmo lote."""

    code = "AGGREGATE_RESOLUTION_ERROR"

    def __init__(self, errors: Sequence[ResolutionError]) -> None:
        self.errors: List[ResolutionError] = list(errors)
        super().__init__(
            _aggregate_message("patch target(s) could not be resolved", self.errors),
            details={"count": len(self.errors), "errors": [str(e) for e in self.errors]},
        )


# ---------------------------------------------------------------------------
# Aplicação
# ---------------------------------------------------------------------------


class ApplyError(DocPatchError):
    """Falha ao aplicar um patch sobre um documento."""

    code = "APPLY_ERROR"


class TypeMismatchError(ApplyError):
    """Campo navegado em não-Map, ou seletor aplicado em não-List."""

    code = "TYPE_MISMATCH"


class SelectorNotFoundError(ApplyError):
    """Seletor de índice/chave sem elemento correspondente."""

    code = "SELECTOR_NOT_FOUND"


class PathNotFoundError(ApplyError):
    """Campo intermediário (ou lista alvo) ausente no documento."""

    code = "PATH_NOT_FOUND"


class UnsupportedNodeError(ApplyError, TypeError):
    """Valor Python que não pertence ao modelo Map / List / Scalar."""

    code = "UNSUPPORTED_NODE"


class AggregateApplyError(ApplyError):
    """Agrega as falhas de aplicação coletadas em modo graceful."""

    code = "AGGREGATE_APPLY_ERROR"

    def __init__(self, errors: Sequence[ApplyError]) -> None:
        self.errors: List[ApplyError] = list(errors)
        super().__init__(
            _aggregate_message("patch(es) failed to apply", self.errors),
            details={"count": len(self.errors), "errors": [str(e) for e in self.errors]},
        )


def _aggregate_message(what: str, errors: Sequence[Exception]) -> str:
    if not errors:
        return f"0 {what}"
    return f"{len(errors)} {what}; first: {errors[0]}"
