# tests/conftest.py
"""
Fixtures compartilhados para testes do docpatch.

Este módulo define fixtures reutilizáveis que fornecem:
- documentos mínimos e determinísticos (ConfigMap, Deployment)
- streams YAML multi-documento equivalentes
- YAMLs de configuração (defaults + override local)

Decisões arquiteturais:
    - Cada fixture retorna uma estrutura nova (sem estado compartilhado)
    - Documentos são dicionários puros, como após `yaml.safe_load`

Invariantes:
    - Nenhuma fixture realiza I/O
    - Nenhuma fixture aplica patches

Limites explícitos:
    - Não substituir testes de integração (tests/e2e)
"""

import pytest


# =====================================================
# Documentos
# =====================================================

@pytest.fixture
def configmap_doc() -> dict:
    """ConfigMap `demo` com um label e uma chave de dados."""
    return {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {
            "name": "demo",
            "labels": {"app": "demo"},
        },
        "data": {"key": "old"},
    }


@pytest.fixture
def deployment_doc() -> dict:
    """Deployment `web` com dois containers (`main` e `sidecar`)."""
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {"name": "web"},
        "spec": {
            "replicas": 1,
            "containers": [
                {
                    "name": "main",
                    "image": "nginx:1.0",
                    "ports": [{"containerPort": 80}],
                },
                {
                    "name": "sidecar",
                    "image": "envoy:1.0",
                },
            ],
        },
    }


@pytest.fixture
def resources_yaml() -> str:
    """Stream multi-documento com o ConfigMap e o Deployment das fixtures acima."""
    return (
        "apiVersion: v1\n"
        "kind: ConfigMap\n"
        "metadata:\n"
        "  name: demo\n"
        "  labels:\n"
        "    app: demo\n"
        "data:\n"
        "  key: old\n"
        "---\n"
        "apiVersion: apps/v1\n"
        "kind: Deployment\n"
        "metadata:\n"
        "  name: web\n"
        "spec:\n"
        "  replicas: 1\n"
        "  containers:\n"
        "    - name: main\n"
        "      image: nginx:1.0\n"
        "      ports:\n"
        "        - containerPort: 80\n"
        "    - name: sidecar\n"
        "      image: envoy:1.0\n"
    )


# =====================================================
# Configuração
# =====================================================

@pytest.fixture
def config_defaults_yaml() -> str:
    """Defaults de projeto: fail-fast ativo e uma variável declarada."""
    return (
        "engine:\n"
        "  fail_fast: true\n"
        "  copy_documents: false\n"
        "variables:\n"
        "  values:\n"
        "    image: nginx:1.0\n"
        "  features:\n"
        "    metrics: false\n"
    )


@pytest.fixture
def config_local_yaml() -> str:
    """Override local: modo graceful e nova imagem."""
    return (
        "engine:\n"
        "  graceful: true\n"
        "variables:\n"
        "  values:\n"
        "    image: nginx:2.0\n"
    )
