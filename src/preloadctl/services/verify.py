"""VerifyService: runs the rule catalogs over an import batch.

The policy is compiled before any row is touched; a policy defect fails
the whole run with ``INVALID_POLICY``. Row findings never fail the run:
``ok`` stays True and the report lists every violation.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from preloadctl.domain.dataset_rules import DATASET_RULES, build_dataset_rules
from preloadctl.domain.directory import build_directory_index
from preloadctl.domain.evaluator import ViolationReport, evaluate
from preloadctl.domain.policy import (
    ImportPolicy,
    PasswordPolicy,
    PolicyConfigError,
    compile_policy,
)
from preloadctl.domain.row_rules import ROW_RULES, build_row_rules
from preloadctl.domain.types import RuleScope
from preloadctl.infrastructure.batch_file import (
    BatchDocument,
    BatchDocumentError,
    load_batch_document,
)
from preloadctl.services.contracts import RulesResultData, VerifyResultData, dump_validated
from preloadctl.services.result import ServiceResult
from preloadctl.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from preloadctl.config.settings import PreloadSettings

logger = logging.getLogger(__name__)


class VerifyService:
    """Verifies import batches against the configured policy."""

    def __init__(self, settings: PreloadSettings) -> None:
        self._settings = settings

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compile_policy(self) -> ImportPolicy:
        """Compile the configured policy.

        Raises:
            PolicyConfigError: A configured pattern is malformed.
        """
        formats = self._settings.formats
        password = self._settings.password
        return compile_policy(
            login_format=formats.login_format,
            email_format=formats.email_format,
            phone_number_format=formats.phone_number_format,
            person_name_format=formats.person_name_format,
            full_name_max_length=formats.full_name_max_length,
            phone_number_max_length=formats.phone_number_max_length,
            password=PasswordPolicy(**password.model_dump()),
        )

    @traced
    def verify(
        self,
        document: BatchDocument,
        *,
        workers: int | None = None,
        codes: Iterable[str] | None = None,
    ) -> ServiceResult:
        """Evaluate every rule against every row of *document*.

        Args:
            document: Rows, directory snapshot and workspace catalog.
            workers: Override ``[evaluation] workers``.
            codes: Only report these rule codes. Every rule still runs.
        """
        try:
            policy = self.compile_policy()
        except PolicyConfigError as exc:
            logger.warning("Import policy rejected: %s", exc)
            return ServiceResult.failure("verify", "INVALID_POLICY", str(exc))

        worker_count = workers or self._settings.evaluation.workers

        with trace_span("directory_index") as span:
            directory = build_directory_index(document.existing_users)
            if span is not None:
                span.annotate("existing_users", len(document.existing_users))

        with trace_span("bind_rules"):
            rules = [
                *build_row_rules((), document.workspaces, policy, directory=directory),
                *build_dataset_rules((), document.users, directory=directory),
            ]

        with trace_span("evaluate") as span:
            report = evaluate(document.users, rules, workers=worker_count)
            if span is not None:
                span.annotate("rows", len(report))
                span.annotate("workers", worker_count)

        data = self._report_payload(document, report, codes=codes)
        return ServiceResult(
            ok=True,
            op="verify",
            data=dump_validated(VerifyResultData, data),
        )

    def verify_file(
        self,
        path: Path,
        *,
        workers: int | None = None,
        codes: Iterable[str] | None = None,
    ) -> ServiceResult:
        """Load a batch document from *path* and verify it.

        Log records emitted during the run carry the batch path.
        """
        with structlog.contextvars.bound_contextvars(batch=str(path)):
            try:
                document = load_batch_document(path)
            except BatchDocumentError as exc:
                logger.warning("Batch document rejected: %s", exc)
                return ServiceResult.failure(
                    "verify", "INVALID_BATCH", str(exc), path=str(path)
                )
            return self.verify(document, workers=workers, codes=codes)

    @traced
    def list_rules(self, *, scope: str | None = None) -> ServiceResult:
        """Enumerate the row and dataset catalogs in evaluation order."""
        items = [
            {
                "code": str(rule.code),
                "field": rule.field,
                "scope": str(rule.scope),
                "description": rule.description,
            }
            for rule in (*ROW_RULES, *DATASET_RULES)
            if scope is None or rule.scope == RuleScope(scope)
        ]
        return ServiceResult(
            ok=True,
            op="rules",
            data=dump_validated(RulesResultData, {"count": len(items), "items": items}),
        )

    # ------------------------------------------------------------------
    # Report shaping
    # ------------------------------------------------------------------

    @staticmethod
    def _report_payload(
        document: BatchDocument,
        report: ViolationReport,
        *,
        codes: Iterable[str] | None,
    ) -> dict[str, object]:
        wanted = {c.upper() for c in codes} if codes else None
        rows: list[dict[str, object]] = []
        per_code: Counter[str] = Counter()

        for index, violations in report:
            kept = [v for v in violations if wanted is None or str(v.code) in wanted]
            if not kept:
                continue
            per_code.update(str(v.code) for v in kept)
            rows.append(
                {
                    "row": index,
                    "login": document.users[index].login,
                    "violations": [v.to_dict() for v in kept],
                }
            )

        total = sum(per_code.values())
        return {
            "rows": rows,
            "count": total,
            "rows_checked": len(report),
            "rows_with_violations": len(rows),
            "codes": dict(sorted(per_code.items())),
            "valid": total == 0,
        }
