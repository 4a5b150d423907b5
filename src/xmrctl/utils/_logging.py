"""structlog loggers for xmrctl.

Loggers are built standalone with structlog.wrap_logger, so global
structlog configuration is never touched. CLI events go to one append-only
file as JSON lines (rendered with orjson) or plain text.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal, TextIO, cast

import orjson
import structlog

from ._paths import get_cli_log_file

if TYPE_CHECKING:
    from collections.abc import Mapping

    from structlog.typing import FilteringBoundLogger, Processor

LogFormatType = Literal["json", "text"]

# Above CRITICAL, so every event is filtered out
_SILENT = logging.CRITICAL + 10


def resolve_log_level(level: str, *, environ: Mapping[str, str] | None = None) -> int:
    """Map a settings level name to a logging level.

    XMRCTL_DEBUG in the environment forces DEBUG. Unknown names map to INFO.
    """
    env = environ if environ is not None else os.environ
    if env.get("XMRCTL_DEBUG"):
        return logging.DEBUG
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


def _dumps(event_dict: Any, **kwargs: Any) -> str:  # pyright: ignore[reportExplicitAny, reportAny]
    return orjson.dumps(event_dict, **kwargs).decode("utf-8")


def _processors(log_format: LogFormatType) -> list[Processor]:
    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if log_format == "json":
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer(serializer=_dumps))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    return processors


class LogFile:
    """Append-only log target that opens its path on the first write.

    Nothing is created on disk until an event is actually logged.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._file: TextIO | None = None

    def write(self, message: str) -> int:
        if self._file is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._file = self.path.open("a", encoding="utf-8")
        return self._file.write(message)

    def flush(self) -> None:
        if self._file is not None:
            self._file.flush()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None


def create_cli_logger(
    *,
    level: str = "info",
    log_format: LogFormatType = "json",
    log_file: str = "",
    command: str = "",
    sink: LogFile | None = None,
) -> FilteringBoundLogger:
    """Create the logger for one CLI invocation.

    Args:
        level: Threshold name from settings (debug, info, warning, error).
        log_format: "json" lines or human-readable "text".
        log_file: Log file path; empty means the per-user CLI log file.
        command: CLI verb bound to every entry.
        sink: Log target to write to instead of opening ``log_file``. The
            caller owns it and closes it.

    Returns:
        A FilteringBoundLogger appending to the log file.
    """
    if sink is None:
        sink = LogFile(Path(log_file) if log_file else get_cli_log_file())

    logger = cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            structlog.WriteLogger(cast("TextIO", sink)),
            processors=_processors(log_format),
            wrapper_class=structlog.make_filtering_bound_logger(resolve_log_level(level)),
            context_class=dict,
        ),
    )
    if command:
        return logger.bind(command=command)
    return logger


def create_null_logger() -> FilteringBoundLogger:
    """Create a logger that drops every event.

    Default for components constructed without a logger.
    """
    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            structlog.ReturnLogger(),
            processors=[],
            wrapper_class=structlog.make_filtering_bound_logger(_SILENT),
            context_class=dict,
        ),
    )
