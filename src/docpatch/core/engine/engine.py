# src/docpatch/core/engine/engine.py
"""
PatchEngine — planejamento e execução de lotes de patches.

Fluxo de um run:
    1. plan(): normaliza e resolve TODOS os patches antes de qualquer
       mutação. Erros de parse são agregados em AggregateParseError e erros
       de resolução em AggregateResolutionError.
    2. run(): aplica os patches agrupados por documento (ordem de carga dos
       documentos) e, dentro de cada documento, em ordem de instrução.

Política de falhas:
    - fail_fast (default): a primeira falha interrompe o lote; os patches
      restantes são marcados SKIPPED.
    - graceful (ou fail_fast=false): falhas são registradas e os demais
      patches são aplicados.
    - Exceções viram PatchErrorPayload em `PatchResult.payload["error"]`.

Invariantes:
    - Um patch que falha não deixa mutação parcial no documento
    - `BatchResult.results` segue a ordem de instrução
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import IO, Any, Dict, Iterable, List, Optional, Sequence, Union

from docpatch.core.config import (
    DEFAULT_CONFIG,
    deep_merge,
    resolve_engine_settings,
    variables_from_config,
)
from docpatch.core.document import copy_node
from docpatch.core.errors import error_payload_from_exception
from docpatch.core.exceptions import (
    AggregateApplyError,
    AggregateParseError,
    AggregateResolutionError,
    ParseError,
    ResolutionError,
)
from docpatch.core.patch.applier import apply
from docpatch.core.patch.loader import load_documents, parse_patch_source
from docpatch.core.patch.op import Op, PatchOp, normalize_path
from docpatch.core.patch.resolver import Document, ResolvedPatch, documents_from_nodes, resolve_patch
from docpatch.core.patch.variables import VariableContext

from .context import PatchContext


PLAN_STEP_ID = "plan"


class PatchStatus(str, Enum):
    APPLIED = "applied"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class PatchResult:
    """Resultado da aplicação de um patch (ordem de instrução em `index`)."""

    index: int
    target: str
    path: str
    op: str
    status: PatchStatus
    summary: str
    changed: bool = False
    warnings: List[str] = field(default_factory=list)
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BatchResult:
    """
    Resultado agregado de um run.

    Campos:
    - documents: documentos (mutados) na ordem de carga
    - results: um PatchResult por patch, em ordem de instrução
    - errors: exceções das falhas de aplicação, em ordem de ocorrência
    - stopped: True se o lote foi interrompido pela primeira falha
    """

    documents: List[Document] = field(default_factory=list)
    results: List[PatchResult] = field(default_factory=list)
    errors: List[Exception] = field(default_factory=list)
    stopped: bool = False

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def nodes(self) -> List[Dict[str, Any]]:
        return [doc.node for doc in self.documents]

    def raise_for_errors(self) -> None:
        """Fail-fast levanta a falha original; graceful levanta AggregateApplyError."""
        if not self.errors:
            return
        if self.stopped:
            raise self.errors[0]
        raise AggregateApplyError(self.errors)


class PatchEngine:
    """Engine de patches (plan + run) sobre um conjunto de documentos."""

    def __init__(
        self,
        documents: Sequence[Union[Document, Dict[str, Any]]],
        patches: Iterable[PatchOp],
        ctx: Optional[PatchContext] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        if config is None:
            config = ctx.config if ctx is not None else deep_merge(DEFAULT_CONFIG, {})
        self.config: Dict[str, Any] = config
        self.ctx: PatchContext = ctx or PatchContext.create(config)
        self.settings = resolve_engine_settings(config)
        self.documents: List[Document] = documents_from_nodes(documents)
        self.patches: List[PatchOp] = list(patches)

    # ------------------------------------------------------------------
    # Plan
    # ------------------------------------------------------------------

    def plan(self) -> List[ResolvedPatch]:
        """
        Normaliza e resolve todo o lote, sem mutar documentos.

        Raises:
            AggregateParseError: um ou mais patches com path inválido.
            AggregateResolutionError: um ou mais patches sem documento alvo.
        """
        normalized: List[PatchOp] = []
        parse_errors: List[ParseError] = []
        for op in self.patches:
            try:
                normalized.append(op if op.normalized else normalize_path(op))
            except ParseError as e:
                parse_errors.append(e)

        if parse_errors:
            self.ctx.log(step_id=PLAN_STEP_ID, level="ERROR", message="patch batch failed to parse", count=len(parse_errors))
            raise AggregateParseError(parse_errors)

        resolved: List[ResolvedPatch] = []
        resolution_errors: List[ResolutionError] = []
        for op in normalized:
            try:
                item = resolve_patch(op, self.documents)
            except ResolutionError as e:
                resolution_errors.append(e)
                continue
            resolved.append(item)
            self.ctx.log(
                step_id=PLAN_STEP_ID,
                level="DEBUG",
                message="patch resolved",
                target=item.document_id,
                path=item.patch.path,
                op=item.patch.op.value,
                explicit=item.explicit,
            )

        if resolution_errors:
            self.ctx.log(
                step_id=PLAN_STEP_ID,
                level="ERROR",
                message="patch targets could not be resolved",
                count=len(resolution_errors),
            )
            raise AggregateResolutionError(resolution_errors)

        self._warn_ambiguous_names(resolved)
        self.ctx.log(
            step_id=PLAN_STEP_ID,
            level="INFO",
            message="patch batch planned",
            patches=len(resolved),
            documents=len(self.documents),
        )
        return resolved

    def _warn_ambiguous_names(self, resolved: Sequence[ResolvedPatch]) -> None:
        counts: Dict[str, int] = {}
        for doc in self.documents:
            if doc.name:
                counts[doc.name.lower()] = counts.get(doc.name.lower(), 0) + 1

        warned = set()
        for item in resolved:
            doc = self.documents[item.document_index]
            key = doc.name.lower()
            if item.explicit or counts.get(key, 0) < 2 or key in warned:
                continue
            warned.add(key)
            self.ctx.add_warning(
                step_id=PLAN_STEP_ID,
                message=f"{counts[key]} documents named '{doc.name}'; patches resolved to the first one ({doc.id})",
            )

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def _working_documents(self) -> List[Document]:
        if not self.settings.copy_documents:
            return list(self.documents)
        return [replace(doc, node=copy_node(doc.node)) for doc in self.documents]

    def _result(self, index: int, item: ResolvedPatch, status: PatchStatus, summary: str, **kwargs: Any) -> PatchResult:
        return PatchResult(
            index=index,
            target=item.document_id,
            path=item.patch.path,
            op=item.patch.op.value,
            status=status,
            summary=summary,
            **kwargs,
        )

    def _apply_one(self, index: int, item: ResolvedPatch, doc: Document) -> PatchResult:
        step_id = f"patch.{index}"
        patch = item.patch
        before = deepcopy(doc.node)

        apply(doc.node, patch)

        changed = doc.node != before
        if patch.op is Op.DELETE and not changed:
            self.ctx.add_warning(step_id=step_id, message=f"delete target not present: {patch.path}")

        self.ctx.log(
            step_id=step_id,
            level="INFO",
            message="patch applied",
            target=item.document_id,
            path=patch.path,
            op=patch.op.value,
            changed=changed,
        )
        return self._result(
            index,
            item,
            PatchStatus.APPLIED,
            patch.describe(),
            changed=changed,
            warnings=list(self.ctx.warnings.get(step_id, [])),
        )

    def run(self) -> BatchResult:
        """
        Planeja e aplica o lote.

        Raises:
            AggregateParseError / AggregateResolutionError: ver `plan()`.
        """
        resolved = self.plan()
        documents = self._working_documents()
        stop_on_failure = self.settings.stop_on_failure

        order = sorted(range(len(resolved)), key=lambda i: (resolved[i].document_index, i))
        results: Dict[int, PatchResult] = {}
        errors: List[Exception] = []
        stopped = False

        for index in order:
            item = resolved[index]

            if stopped:
                results[index] = self._result(index, item, PatchStatus.SKIPPED, "skipped due to earlier failure")
                continue

            try:
                results[index] = self._apply_one(index, item, documents[item.document_index])
            except Exception as e:
                error = error_payload_from_exception(e)
                errors.append(e)
                self.ctx.log(
                    step_id=f"patch.{index}",
                    level="ERROR",
                    message=error.message,
                    target=item.document_id,
                    path=item.patch.path,
                    op=item.patch.op.value,
                    error_type=error.type,
                )
                results[index] = self._result(
                    index,
                    item,
                    PatchStatus.FAILED,
                    error.message,
                    payload={"error": error.to_dict()},
                )
                if stop_on_failure:
                    stopped = True

        return BatchResult(
            documents=documents,
            results=[results[i] for i in range(len(resolved))],
            errors=errors,
            stopped=stopped,
        )


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------


def apply_patches(
    documents: Sequence[Union[Document, Dict[str, Any]]],
    patches: Iterable[PatchOp],
    *,
    graceful: bool = False,
    ctx: Optional[PatchContext] = None,
) -> BatchResult:
    """
    Aplica um lote de patches sobre documentos já carregados.

    Sem `graceful`, a primeira falha de aplicação é levantada (após o
    registro no BatchResult interno). Com `graceful`, todas as falhas ficam
    em `BatchResult.errors` junto das mutações bem-sucedidas.
    """
    config = deep_merge(DEFAULT_CONFIG, {"engine": {"graceful": graceful, "fail_fast": not graceful}})
    result = PatchEngine(documents, patches, ctx=ctx, config=config).run()
    if not graceful:
        result.raise_for_errors()
    return result


def patch_documents(
    resource_text: Union[str, bytes, IO[str], IO[bytes]],
    patch_text: Union[str, bytes, IO[str], IO[bytes]],
    *,
    config: Optional[Dict[str, Any]] = None,
    variables: Optional[VariableContext] = None,
) -> BatchResult:
    """
    Fluxo ponta a ponta: carrega documentos e patches (YAML) e executa o lote.

    Variáveis vêm de `variables` ou, na ausência, da seção `variables` da config.
    Com fail_fast, a primeira falha de aplicação é levantada.
    """
    effective = deep_merge(DEFAULT_CONFIG, config or {})
    ctx = PatchContext.create(effective)

    documents = load_documents(resource_text)
    ctx.log(step_id="load", level="DEBUG", message="documents loaded", ids=[d.id for d in documents])

    if variables is None:
        variables = variables_from_config(effective)
    patches = parse_patch_source(patch_text, variables=variables)
    ctx.log(step_id="load", level="DEBUG", message="patches loaded", count=len(patches))

    engine = PatchEngine(documents, patches, ctx=ctx, config=effective)
    result = engine.run()
    if engine.settings.stop_on_failure:
        result.raise_for_errors()
    return result
