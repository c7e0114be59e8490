# src/docpatch/__init__.py
"""
docpatch — motor declarativo de patches estruturais.

Aplica instruções `path: valor` sobre documentos em árvore
(Map / List / Scalar), como manifests YAML multi-documento.

Arquitetura em alto nível:
    - core.path    → gramática de paths (campos, seletores, operadores)
    - core.patch   → normalização, resolução de alvo, aplicação, loaders
    - core.engine  → execução em lote (fail-fast ou graceful)
    - core.config  → configuração (defaults + overrides, deep-merge)

Limites explícitos:
    - Não cria estrutura intermediária implicitamente
    - Não conhece schemas de documentos
"""

from .core.engine import (  # noqa: F401
    BatchResult,
    PatchContext,
    PatchEngine,
    PatchResult,
    PatchStatus,
    apply_patches,
    patch_documents,
)
from .core.patch import (  # noqa: F401
    Document,
    Op,
    PatchOp,
    VariableContext,
    apply,
    load_documents,
    normalize_path,
    parse_patch_source,
    resolve_target,
)
from .core.path import MatchType, PathPart, parse_path  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "BatchResult",
    "Document",
    "MatchType",
    "Op",
    "PatchContext",
    "PatchEngine",
    "PatchOp",
    "PatchResult",
    "PatchStatus",
    "PathPart",
    "VariableContext",
    "apply",
    "apply_patches",
    "load_documents",
    "normalize_path",
    "parse_path",
    "parse_patch_source",
    "patch_documents",
    "resolve_target",
]
