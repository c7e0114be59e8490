# src/docpatch/core/engine/context.py
"""
PatchContext — contexto de execução de um lote de patches.

O PatchContext é o único meio de registro do que aconteceu em um run:
    - eventos estruturados (`log`) com `run_id`, `step_id` e timestamp UTC
    - warnings não fatais agrupados por `step_id`

Convenção de `step_id`:
    - "plan"           → normalização e resolução do lote
    - "patch.<n>"      → aplicação do n-ésimo patch (ordem de instrução)

Eventos DEBUG só são registrados quando `debug` está ativo
(config `engine.debug` ou variável de ambiente `DOCPATCH_DEBUG=1`).

Limites explícitos:
    - Não aplica patches
    - Não persiste eventos
"""

from __future__ import annotations

import os
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from docpatch.core.config import compute_config_hash, resolve_engine_settings


DEBUG_ENV_VAR = "DOCPATCH_DEBUG"


@dataclass
class PatchContext:
    """
    Contexto compartilhado de um run do PatchEngine.

    Campos canônicos:
    - run_id: identificador único da execução
    - created_at: timestamp UTC de criação do contexto
    - config: configuração efetiva
    - config_hash: SHA-256 canônico de `config`
    - meta: metadados livres do chamador (ex.: nomes de arquivos de entrada)
    - debug: habilita eventos DEBUG
    - events: log estruturado de eventos
    - warnings: warnings por step_id
    """

    run_id: str
    created_at: datetime
    config: Dict[str, Any]
    config_hash: str = ""
    meta: Dict[str, Any] = field(default_factory=dict)
    debug: bool = False

    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    @classmethod
    def create(
        cls,
        config: Optional[Dict[str, Any]] = None,
        *,
        run_id: Optional[str] = None,
        meta: Optional[Dict[str, Any]] = None,
    ) -> "PatchContext":
        config = dict(config or {})
        settings = resolve_engine_settings(config)
        debug = settings.debug or os.environ.get(DEBUG_ENV_VAR, "") == "1"
        return cls(
            run_id=run_id or uuid.uuid4().hex,
            created_at=datetime.now(timezone.utc),
            config=config,
            config_hash=compute_config_hash(config),
            meta=dict(meta or {}),
            debug=debug,
        )

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, step_id: str, level: str, message: str, **extra: Any) -> None:
        if level == "DEBUG" and not self.debug:
            return
        event = {
            "run_id": self.run_id,
            "step_id": step_id,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, step_id: str, message: str) -> None:
        if step_id not in self.warnings:
            self.warnings[step_id] = []
        self.warnings[step_id].append(message)

    def events_for(self, step_id: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e.get("step_id") == step_id]
