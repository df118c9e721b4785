"""Validation rule contract shared by the row and dataset catalogs.

A rule is a named predicate over an :class:`ImportRow`. The predicate
returns True when the row VIOLATES the rule. Rules are declared once in a
fixed table and bound to an immutable context per validation run.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from preloadctl.domain.types import RuleCode, RuleScope
from preloadctl.domain.users import ImportRow

_C = TypeVar("_C")


@dataclass(frozen=True)
class ValidationRule(Generic[_C]):
    """Catalog entry: code, reported field, violation predicate.

    Attributes:
        code: Stable rule code.
        field: ImportRow attribute whose value is reported on violation.
        check: ``check(row, context) -> bool``; True means violated.
        scope: Row rules need one row; dataset rules need the batch.
        description: Short catalog description (not a user message).
    """

    code: RuleCode
    field: str
    check: Callable[[ImportRow, _C], bool]
    scope: RuleScope
    description: str

    def bind(self, context: _C) -> BoundRule:
        return BoundRule(rule=self, context=context)


@dataclass(frozen=True)
class BoundRule:
    """A catalog entry closed over the context of one validation run."""

    rule: ValidationRule[Any]
    context: Any

    @property
    def code(self) -> RuleCode:
        return self.rule.code

    @property
    def field(self) -> str:
        return self.rule.field

    def violated(self, row: ImportRow) -> bool:
        return self.rule.check(row, self.context)

    def value(self, row: ImportRow) -> str:
        """Offending field value reported alongside the code."""
        return str(getattr(row, self.rule.field))


@dataclass(frozen=True)
class Violation:
    """One triggered rule on one row."""

    code: RuleCode
    field: str
    value: str

    def to_dict(self) -> dict[str, str]:
        return {"code": str(self.code), "field": self.field, "value": self.value}
