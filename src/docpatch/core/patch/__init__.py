# src/docpatch/core/patch/__init__.py
"""
Patches: instrução, normalização, resolução de alvo e aplicação.

Componentes:
    - op        → PatchOp, Op e normalização (path → operação)
    - resolver  → Document e resolução do documento alvo
    - applier   → mutação in-place de um documento
    - loader    → leitura de fontes YAML de patches e de documentos
    - variables → substituição de `${values.*}` / `${features.*}`
"""

from .applier import apply, apply_all  # noqa: F401
from .loader import TargetedPatchRecord, load_documents, parse_patch_source  # noqa: F401
from .op import Op, PatchOp, infer_op, normalize_path, parse_patch_line  # noqa: F401
from .resolver import (  # noqa: F401
    Document,
    ResolvedPatch,
    documents_from_nodes,
    find_explicit_target,
    match_document,
    resolve_patch,
    resolve_target,
)
from .variables import VariableContext, infer_value_type, substitute_variables  # noqa: F401
