"""Typed payload contracts for the service boundary.

The verify report shape is the stable contract consumed by renderers and
downstream tools: one entry per offending row carrying rule codes and the
offending field values.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


def dump_validated[T: BaseModel](model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python")


class ViolationItem(BaseModel):
    """One triggered rule on a row."""

    code: str
    field: str
    value: str


class RowViolations(BaseModel):
    """All violations found on one import row."""

    row: int
    login: str
    violations: list[ViolationItem]


class VerifyResultData(BaseModel):
    """Payload contract for ``VerifyService.verify``."""

    rows: list[RowViolations]
    count: int
    rows_checked: int
    rows_with_violations: int
    codes: dict[str, int] = Field(default_factory=dict)
    valid: bool


class RuleItem(BaseModel):
    """One catalog entry."""

    code: str
    field: str
    scope: Literal["row", "dataset"]
    description: str


class RulesResultData(BaseModel):
    """Payload contract for ``VerifyService.list_rules``."""

    count: int
    items: list[RuleItem]
