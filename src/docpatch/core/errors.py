# src/docpatch/core/errors.py
"""
docpatch — Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros reportados pelo motor de patches.

Erros são artefatos do resultado de um lote e devem ser:
- explícitos
- serializáveis
- rastreáveis (path, alvo, segmento)
- acionáveis (hint)

Nenhuma falha é silenciada, exceto o delete de alvo inexistente (no-op
documentado).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from .exceptions import DocPatchError


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PatchErrorPayload:
    """
    Payload canônico de erro do docpatch.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao autor do patch
    """

    type: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Parse / Normalização
PATH_PARSE_ERROR = "PATH_PARSE_ERROR"
NORMALIZATION_ERROR = "NORMALIZATION_ERROR"
PATCH_SOURCE_ERROR = "PATCH_SOURCE_ERROR"

# Resolução de alvo
TARGET_NOT_FOUND = "TARGET_NOT_FOUND"

# Aplicação
TYPE_MISMATCH = "TYPE_MISMATCH"
SELECTOR_NOT_FOUND = "SELECTOR_NOT_FOUND"
PATH_NOT_FOUND = "PATH_NOT_FOUND"

# Engine / Execução
ENGINE_EXECUTION_ERROR = "ENGINE_EXECUTION_ERROR"


_DEFAULT_HINTS: Dict[str, str] = {
    PATH_PARSE_ERROR: "Revise a sintaxe do path: campos separados por '.' ou '/', um seletor [..] por segmento.",
    NORMALIZATION_ERROR: "Operadores [-], [-=..], [+=..] e [delete..] só são válidos no último segmento.",
    PATCH_SOURCE_ERROR: "Use um mapa {path: valor} ou uma lista de {target, patch}.",
    TARGET_NOT_FOUND: "Declare `target:` explicitamente ou inicie o path com o nome do documento.",
    TYPE_MISMATCH: "Confira o formato do documento: campos navegam mapas, seletores navegam listas.",
    SELECTOR_NOT_FOUND: "Ajuste o índice ou o par chave=valor para um elemento existente da lista.",
    PATH_NOT_FOUND: "Crie o campo intermediário com um patch anterior; estrutura não é criada implicitamente.",
}


def error_payload_from_exception(exc: BaseException) -> PatchErrorPayload:
    """Converte exceções em PatchErrorPayload (serializável, acionável).

    Regras:
    - DocPatchError: usa `code`, `details` e `hint` da própria exceção.
    - Outras exceções: encapsular como ENGINE_EXECUTION_ERROR sem stack trace.
    """
    if isinstance(exc, DocPatchError):
        return PatchErrorPayload(
            type=exc.code,
            message=exc.message or "Erro de patch",
            details=dict(exc.details),
            hint=exc.hint or _DEFAULT_HINTS.get(exc.code),
        )

    return PatchErrorPayload(
        type=ENGINE_EXECUTION_ERROR,
        message=str(exc) or "Erro inesperado durante aplicação de patches",
        details={"exception_class": exc.__class__.__name__},
        hint="Verifique os eventos do run e o documento de entrada",
    )
