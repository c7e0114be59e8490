# tests/core/config/test_hashing.py
"""
Testes do hashing canônico (configuração e nós de documento).

Os testes asseguram que:
- o hash é determinístico e independente da ordem das chaves
- o algoritmo corresponde ao SHA-256 do JSON canônico
- alterações produzem hashes diferentes
- nós com escalares não-JSON (datas do YAML) são aceitos

Invariantes:
    - O hash retornado possui 64 caracteres
"""

import json
import hashlib

import pytest

try:
    from docpatch.core.config.hashing import compute_config_hash
except Exception as e:  # noqa: BLE001
    compute_config_hash = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _canonical_json_bytes(obj: dict) -> bytes:
    """Referência explícita de "JSON canônico" usada apenas nos testes."""
    s = json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return s.encode("utf-8")


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing config hashing module. Implement:\n"
            "- src/docpatch/core/config/hashing.py (SHA-256 over canonical JSON)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_hash_is_deterministic():
    """
    Verifica que dicionários equivalentes, com chaves em ordens diferentes,
    produzem o mesmo hash hexadecimal de 64 caracteres.
    """
    _require_imports()
    a = {"engine": {"fail_fast": True, "graceful": False}, "variables": {"values": {}}}
    b = {"variables": {"values": {}}, "engine": {"graceful": False, "fail_fast": True}}

    h1 = compute_config_hash(a)
    h2 = compute_config_hash(b)

    assert h1 == h2
    assert isinstance(h1, str)
    assert len(h1) == 64


def test_hash_matches_sha256_of_canonical_json():
    _require_imports()
    cfg = {"engine": {"fail_fast": True}, "variables": {"values": {"image": "nginx"}}}

    expected = hashlib.sha256(_canonical_json_bytes(cfg)).hexdigest()

    assert compute_config_hash(cfg) == expected


def test_hash_changes_on_override():
    _require_imports()
    base = {"engine": {"fail_fast": True}}
    changed = {"engine": {"fail_fast": False}}

    assert compute_config_hash(base) != compute_config_hash(changed)


def test_config_hash_requires_dict():
    _require_imports()
    with pytest.raises(TypeError):
        compute_config_hash(["not", "a", "dict"])

