# src/docpatch/core/config/settings.py
"""
Leitura tipada da configuração efetiva.

Seções reconhecidas (v1):

    engine:
      fail_fast: true        # primeira falha interrompe o lote
      graceful: false        # registra falhas e continua (sobrepõe fail_fast)
      copy_documents: false  # aplica sobre cópias em vez de mutar os documentos
      debug: false           # eventos DEBUG de load/resolve
    variables:
      values: {}
      features: {}

Chaves desconhecidas são preservadas e ignoradas.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from docpatch.core.patch.variables import VariableContext

from .errors import InvalidConfigValueError


DEFAULT_CONFIG: Dict[str, Any] = {
    "engine": {
        "fail_fast": True,
        "graceful": False,
        "copy_documents": False,
        "debug": False,
    },
    "variables": {
        "values": {},
        "features": {},
    },
}


@dataclass(frozen=True)
class EngineSettings:
    """Políticas de execução do PatchEngine."""

    fail_fast: bool = True
    graceful: bool = False
    copy_documents: bool = False
    debug: bool = False

    @property
    def stop_on_failure(self) -> bool:
        return self.fail_fast and not self.graceful


def _section(config: Optional[Dict[str, Any]], name: str) -> Dict[str, Any]:
    section = (config or {}).get(name, {}) or {}
    if not isinstance(section, dict):
        raise InvalidConfigValueError(
            f"config section '{name}' must be a mapping, got {type(section).__name__}"
        )
    return section


def _flag(section: Dict[str, Any], key: str, default: bool, *, scope: str) -> bool:
    value = section.get(key, default)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise InvalidConfigValueError(
            f"config key '{scope}.{key}' must be a boolean, got {type(value).__name__}"
        )
    return value


def resolve_engine_settings(config: Optional[Dict[str, Any]]) -> EngineSettings:
    """
    Lê a seção `engine` da configuração.

    Raises:
        InvalidConfigValueError: seção não-mapa ou flag não-booleana.
    """
    engine_cfg = _section(config, "engine")
    defaults = DEFAULT_CONFIG["engine"]
    return EngineSettings(
        fail_fast=_flag(engine_cfg, "fail_fast", defaults["fail_fast"], scope="engine"),
        graceful=_flag(engine_cfg, "graceful", defaults["graceful"], scope="engine"),
        copy_documents=_flag(engine_cfg, "copy_documents", defaults["copy_documents"], scope="engine"),
        debug=_flag(engine_cfg, "debug", defaults["debug"], scope="engine"),
    )


def variables_from_config(config: Optional[Dict[str, Any]]) -> VariableContext:
    """Constrói o VariableContext a partir da seção `variables`."""
    variables_cfg = _section(config, "variables")
    values = _section(variables_cfg, "values")
    features = _section(variables_cfg, "features")
    return VariableContext(values=dict(values), features=dict(features))
