# src/docpatch/core/engine/__init__.py
"""
Engine de patches do docpatch.

Componentes principais:
    - context → PatchContext (eventos estruturados e warnings do run)
    - engine  → PatchEngine (plan + run), PatchResult e BatchResult

Invariantes:
    - Nenhum documento é mutado se o lote tiver erro de parse ou resolução
    - Cada patch é aplicado no máximo uma vez por run
"""

from .context import PatchContext  # noqa: F401
from .engine import (  # noqa: F401
    BatchResult,
    PatchEngine,
    PatchResult,
    PatchStatus,
    apply_patches,
    patch_documents,
)
