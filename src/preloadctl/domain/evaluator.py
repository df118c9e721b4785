"""Rule evaluator: applies bound rules to rows and builds the report.

INVARIANT: Every rule is evaluated against every row. There is no early
exit, so an operator sees the complete defect list in one pass.
INVARIANT: Evaluation is pure. Rows, snapshot and policy are never
mutated; identical inputs always produce identical reports.

Rules are bound (and the directory index built) before evaluation starts.
Rows are independent once bound, so they may be spread across worker
threads; results are keyed by row index, not by completion order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from types import MappingProxyType

from preloadctl.domain.dataset_rules import build_dataset_rules
from preloadctl.domain.directory import build_directory_index
from preloadctl.domain.policy import ImportPolicy
from preloadctl.domain.row_rules import build_row_rules
from preloadctl.domain.rules import BoundRule, Violation
from preloadctl.domain.users import ExistingUserRecord, ImportRow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViolationReport:
    """Violations per row index. Rows without violations map to ``()``."""

    rows: Mapping[int, tuple[Violation, ...]]

    def __iter__(self) -> Iterator[tuple[int, tuple[Violation, ...]]]:
        return iter(sorted(self.rows.items()))

    def __len__(self) -> int:
        return len(self.rows)

    def codes_for(self, index: int) -> set[str]:
        return {str(v.code) for v in self.rows.get(index, ())}

    @property
    def violation_count(self) -> int:
        return sum(len(v) for v in self.rows.values())

    @property
    def offending_rows(self) -> list[int]:
        return sorted(i for i, v in self.rows.items() if v)

    @property
    def valid(self) -> bool:
        return self.violation_count == 0


def evaluate_row(row: ImportRow, rules: Sequence[BoundRule]) -> tuple[Violation, ...]:
    """Apply all *rules* to *row*; the full list is always materialized."""
    return tuple(
        Violation(code=rule.code, field=rule.field, value=rule.value(row))
        for rule in rules
        if rule.violated(row)
    )


def evaluate(
    rows: Iterable[ImportRow],
    rules: Iterable[BoundRule],
    *,
    workers: int = 1,
) -> ViolationReport:
    """Evaluate every rule against every row.

    Args:
        rows: Import batch, in order. Row indices are positions in it.
        rules: Bound row and dataset rules.
        workers: Thread count; ``1`` evaluates inline.
    """
    batch = tuple(rows)
    bound = tuple(rules)

    if workers > 1 and len(batch) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(lambda row: evaluate_row(row, bound), batch))
    else:
        results = [evaluate_row(row, bound) for row in batch]

    report = ViolationReport(rows=MappingProxyType(dict(enumerate(results))))
    logger.debug(
        "Evaluated %d rules against %d rows: %d violations",
        len(bound),
        len(batch),
        report.violation_count,
    )
    return report


def verify_batch(
    rows: Iterable[ImportRow],
    existing_users: Iterable[ExistingUserRecord],
    workspaces: Iterable[str],
    policy: ImportPolicy,
    *,
    workers: int = 1,
) -> ViolationReport:
    """Index the directory, bind both catalogs and evaluate the batch."""
    batch = tuple(rows)
    directory = build_directory_index(existing_users)
    rules = [
        *build_row_rules((), workspaces, policy, directory=directory),
        *build_dataset_rules((), batch, directory=directory),
    ]
    return evaluate(batch, rules, workers=workers)
