"""Log routing for the CLI.

Domain modules log through ``logging.getLogger(__name__)``, services
through ``structlog.get_logger``. Both reach one stderr handler whose
records structlog renders, so stdout only ever carries the result.

Context bound with :func:`structlog.contextvars.bound_contextvars` (the
batch path during a verify run) is merged into every record.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.typing import Processor

PACKAGE_LOGGER = "preloadctl"

_PRE_CHAIN: tuple[Processor, ...] = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
)


def _renderer(log_json: bool) -> Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route all records to stderr.

    Only the ``preloadctl`` hierarchy drops to DEBUG with *verbose*;
    everything else stays at WARNING.
    """
    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=list(_PRE_CHAIN),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
