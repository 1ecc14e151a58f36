"""Log routing and per-analysis correlation for the impact engine.

Each ``analyze_source_change`` call runs inside ``analysis_context``.  The
request id and source fields bound there ride along on every event the
engine emits for that call: the diff summary, the alignment summary and
any similarity lookup warnings.  Lookups run on worker threads; the aligner
copies the caller's context into each one so their events stay correlated.

``configure_logging`` is the CLI's entry point: it points structlog and
stdlib records at the outputs listed in ``LoggingConfig``.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from sourceimpact.config.models import LoggingConfig, LogOutputConfig

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def get_request_id() -> str | None:
    """Request id of the analysis running in this context, if any."""
    return _request_id.get()


@contextmanager
def analysis_context(request_id: str | None = None, **fields: Any) -> Iterator[str]:
    """Correlate every event of one analysis.

    Binds ``request_id`` (a fresh 12-hex id when omitted) plus ``fields``
    such as ``source_id``.  On exit the enclosing context is restored, so a
    caller's own request id survives a nested analysis.
    """
    token = _request_id.set(request_id or uuid4().hex[:12])
    try:
        with structlog.contextvars.bound_contextvars(**fields):
            yield _request_id.get() or ""
    finally:
        _request_id.reset(token)


def _add_request_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if rid := _request_id.get():
        event_dict.setdefault("request_id", rid)
    return event_dict


_PRE_CHAIN: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
    _add_request_id,  # type: ignore[list-item]
]


def configure_logging(config: LoggingConfig, *, verbose: bool = False) -> None:
    """Route engine logs to the configured outputs.

    ``verbose`` lowers the root level to DEBUG, which is where per-call diff
    and alignment counts are logged.  Outputs with their own ``level`` keep
    it.  Calling again replaces the previous handlers.
    """
    levels = logging.getLevelNamesMapping()
    root_level = logging.DEBUG if verbose else levels[config.level]

    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfiguration must reach module-level loggers
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()
    root.setLevel(root_level)

    for output in config.outputs:
        handler = _open_handler(output.destination)
        handler.setLevel(levels[output.level] if output.level else root_level)
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=_renderer(output),
                foreign_pre_chain=_PRE_CHAIN,
            )
        )
        root.addHandler(handler)


def _open_handler(destination: str) -> logging.Handler:
    if destination == "stderr":
        return logging.StreamHandler(sys.stderr)
    if destination == "stdout":
        return logging.StreamHandler(sys.stdout)
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a", encoding="utf-8")


def _renderer(output: LogOutputConfig) -> structlog.types.Processor:
    if output.format == "json":
        return structlog.processors.JSONRenderer()
    stream = {"stderr": sys.stderr, "stdout": sys.stdout}.get(output.destination)
    return structlog.dev.ConsoleRenderer(
        colors=stream is not None and stream.isatty(),
        pad_event_to=0,
    )
