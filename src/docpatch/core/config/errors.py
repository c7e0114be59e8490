# src/docpatch/core/config/errors.py
"""
Exceções canônicas da camada de configuração do docpatch.

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção representa falha de aplicação de patch
"""


class ConfigError(Exception):
    """
    Exceção base para erros de configuração.

    Limites explícitos:
        - Não representa erro de parse, resolução ou aplicação de patch
    """


class DefaultsNotFoundError(ConfigError):
    """
    Arquivo de configuração informado explicitamente não existe.

    Decisões arquiteturais:
        - Um `defaults_path` informado é obrigatório
        - O override local ausente é ignorado (opcional por definição)
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Formato de arquivo de configuração não suportado.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """Conteúdo raiz da configuração não é um dicionário (`dict`)."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"engine": {"fail_fast": true}}
        - override: {"engine": "strict"}

    Invariantes:
        - Nenhum merge parcial é produzido em caso de conflito
    """


class InvalidConfigValueError(ConfigError):
    """Valor de configuração com tipo inválido para a chave lida pelo engine."""
