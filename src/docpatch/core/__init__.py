# src/docpatch/core/__init__.py
"""
Core do docpatch.

Componentes principais:
    - document   → modelo de nós (Map / List / Scalar) e acessores tipados
    - path       → parser de paths
    - patch      → PatchOp, normalização, resolução e aplicação
    - engine     → execução em lote e contexto de run
    - config     → resolução de configuração
    - exceptions → hierarquia de exceções (parse / resolução / aplicação)
    - errors     → payloads de erro serializáveis

Limites explícitos:
    - Sem I/O além da leitura de fontes YAML fornecidas pelo chamador
"""
