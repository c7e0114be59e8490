# src/docpatch/core/config/hashing.py
"""
Hashing canônico (SHA-256 sobre JSON canônico).

Usado para identificar a configuração efetiva de uma execução
(`PatchContext.config_hash`).

Invariantes:
    - Estruturas equivalentes produzem o mesmo hash, independente da
      ordem das chaves
    - O valor é sempre uma string hexadecimal de 64 caracteres
"""

import hashlib
import json
from typing import Any, Dict


def _canonical_digest(value: Any) -> str:
    canonical_json = json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )
    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    Gera um hash determinístico da configuração efetiva.

    Raises:
        TypeError: Se o objeto fornecido não for um dicionário.
    """
    if not isinstance(config, dict):
        raise TypeError(
            f"config to hash must be a dict, got: {type(config).__name__}"
        )
    return _canonical_digest(config)

