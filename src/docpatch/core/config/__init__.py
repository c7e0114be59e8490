# src/docpatch/core/config/__init__.py

"""
Camada de configuração do docpatch.

Este pacote carrega, mescla e identifica a configuração efetiva de uma
execução do PatchEngine.

Responsabilidades do pacote:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Resolução via deep-merge determinístico sobre `DEFAULT_CONFIG`
    - Leitura tipada das seções `engine` e `variables`
    - Hash canônico para rastreabilidade

Invariantes:
    - A configuração final é um dicionário puro (dict)
    - Conflitos estruturais são tratados como erro

Limites explícitos:
    - Não aplica patches
    - Não interage com documentos
"""

from .errors import (  # noqa: F401
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    InvalidConfigValueError,
    UnsupportedConfigFormatError,
)
from .hashing import compute_config_hash  # noqa: F401
from .loader import load_config  # noqa: F401
from .merge import deep_merge  # noqa: F401
from .settings import (  # noqa: F401
    DEFAULT_CONFIG,
    EngineSettings,
    resolve_engine_settings,
    variables_from_config,
)
