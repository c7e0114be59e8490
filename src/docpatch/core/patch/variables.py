# src/docpatch/core/patch/variables.py
"""
Substituição de variáveis em valores de patch.

Valores textuais podem referenciar variáveis declaradas fora do arquivo de
patch:

    ${values.<chave>}     → valor (chaves pontuadas navegam mapas aninhados)
    ${features.<flag>}    → flag booleana

Política (v1):
    - texto que é exatamente uma referência recebe o valor bruto (tipo preservado)
    - referências embutidas em texto são renderizadas como texto
    - referências desconhecidas permanecem intactas
    - texto resultante de substituição passa por inferência de tipo
      (`true`/`false` → bool, inteiros em campos numéricos → int)
"""

from __future__ import annotations

import re
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from docpatch.core.document import scalar_text


_VAR_PATTERN = re.compile(r"\$\{(values|features)\.([^}]+)\}")

_INTEGER_FIELDS = (
    "port", "targetport", "nodeport", "containerport",
    "replicas", "maxunavailable", "maxsurge",
    "initialdelayseconds", "timeoutseconds", "periodseconds",
    "successthreshold", "failurethreshold",
    "terminationgraceperiodseconds", "activedeadlineseconds",
    "runasuser", "runasgroup", "fsgroup",
    "weight", "priority", "number",
)


@dataclass
class VariableContext:
    """Variáveis disponíveis para substituição."""

    values: Dict[str, Any] = field(default_factory=dict)
    features: Dict[str, bool] = field(default_factory=dict)

    def lookup(self, scope: str, key: str) -> Tuple[bool, Any]:
        source = self.values if scope == "values" else self.features
        if key in source:
            return True, source[key]
        if scope != "values":
            return False, None

        node: Any = source
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return False, None
            node = node[part]
        return True, node


def _is_integer_text(value: str) -> bool:
    text = value[1:] if value.startswith("-") else value
    return text.isdigit()


def _is_likely_integer(key: str, number: int) -> bool:
    if "port" in key and 1 <= number <= 65535:
        return True
    if "replica" in key and 0 <= number <= 100:
        return True
    if any(word in key for word in ("delay", "timeout", "period")) and 0 <= number <= 3600:
        return True
    return False


def infer_value_type(key: str, value: str) -> Any:
    """Converte texto em bool/int quando o campo indica esse tipo."""
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False

    if not _is_integer_text(value):
        return value

    key_lower = key.lower()
    number = int(value)
    if any(name in key_lower for name in _INTEGER_FIELDS):
        return number
    if _is_likely_integer(key_lower, number):
        return number
    return value


def _substitute_text(value: str, ctx: VariableContext, key: str) -> Any:
    whole = _VAR_PATTERN.fullmatch(value)
    if whole:
        found, raw = ctx.lookup(whole.group(1), whole.group(2))
        if not found:
            return value
        if isinstance(raw, str):
            return infer_value_type(key, raw)
        return deepcopy(raw)

    def _render(match: "re.Match[str]") -> str:
        found, raw = ctx.lookup(match.group(1), match.group(2))
        return scalar_text(raw) if found else match.group(0)

    result = _VAR_PATTERN.sub(_render, value)
    if result == value:
        return value
    return infer_value_type(key, result)


def substitute_variables(value: Any, ctx: Optional[VariableContext], key: str = "") -> Any:
    """Substitui referências em `value` (recursivo em mapas e listas)."""
    if ctx is None:
        return value
    if isinstance(value, dict):
        return {k: substitute_variables(v, ctx, str(k)) for k, v in value.items()}
    if isinstance(value, list):
        return [substitute_variables(item, ctx, key) for item in value]
    if isinstance(value, str):
        return _substitute_text(value, ctx, key)
    return value
