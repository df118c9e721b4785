"""Batch document loading.

A batch document is a UTF-8 JSON object holding everything one
verification run needs, already materialized by the caller::

    {
      "workspaces": ["primary"],
      "existing_users": [{"user_id": "...", "user_name": "...", ...}],
      "users": [{"login": "...", "role": "interviewer", ...}]
    }

Only ``users`` is required.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from preloadctl.domain.users import ExistingUserRecord, ImportRow


class BatchDocumentError(Exception):
    """Raised when a batch document cannot be read or validated."""


class BatchDocument(BaseModel):
    """Import batch plus the directory snapshot and workspace catalog."""

    model_config = {"frozen": True}

    workspaces: tuple[str, ...] = ()
    existing_users: tuple[ExistingUserRecord, ...] = ()
    users: tuple[ImportRow, ...] = Field(...)


def load_batch_document(path: Path) -> BatchDocument:
    """Read and validate a batch document.

    Raises:
        BatchDocumentError: The file is missing, is not valid JSON, or does
            not match the document schema.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read batch document {path}: {exc.strerror or exc}"
        raise BatchDocumentError(msg) from exc

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        msg = f"Invalid JSON in {path}: {exc}"
        raise BatchDocumentError(msg) from exc

    try:
        return BatchDocument.model_validate(payload)
    except ValidationError as exc:
        msg = f"Invalid batch document {path}: {exc.error_count()} error(s)"
        raise BatchDocumentError(msg) from exc
