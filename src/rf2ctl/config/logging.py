"""Logging setup: stdlib loggers rendered through structlog.

rf2ctl modules log with ``logging.getLogger(__name__)``; telemetry logs
with structlog directly. Both end up on stderr through one
``ProcessorFormatter``, either as console lines or (``--log-json``) JSON.

While a release file is being read, :func:`release_context` binds the
view and file name so every line logged during the load carries them::

    with release_context(Characteristic.STATED, path):
        graphs.register_all(read_relationships(path))
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from rf2ctl.domain.types import Characteristic

PACKAGE_LOGGER = "rf2ctl"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route all logging to stderr; rf2ctl at DEBUG when *verbose*, else WARNING.

    Third-party loggers stay at WARNING either way.
    """
    shared = _shared_processors()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)


@contextmanager
def release_context(characteristic: Characteristic, path: Path) -> Iterator[None]:
    """Bind ``view`` and ``release`` to every log line inside the block."""
    with structlog.contextvars.bound_contextvars(view=str(characteristic), release=path.name):
        yield
