"""Diagnostics sinks for offline troubleshooting of API calls.

The API client records what it sent and what came back through a sink
injected at construction time. ``NullDiagnostics`` drops everything and is
the default; ``FileDiagnostics`` appends one JSON object per line to a trace
file. Failing to write the trace never affects the tool response.
"""

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Protocol

import structlog

from infakt_mcp.config import get_settings

logger = structlog.get_logger(__name__)


class DiagnosticsSink(Protocol):
    """Anything that can record a named event with fields."""

    def record(self, event: str, **fields: Any) -> None: ...


class NullDiagnostics:
    """Sink that discards every event."""

    def record(self, event: str, **fields: Any) -> None:
        return None


class FileDiagnostics:
    """Append-only JSON-lines trace file."""

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def record(self, event: str, **fields: Any) -> None:
        entry = {"timestamp": datetime.now(UTC).isoformat(), "event": event, **fields}
        try:
            line = json.dumps(entry, ensure_ascii=False, default=str)
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")
        except (OSError, TypeError, ValueError) as e:
            # Trace is best-effort only
            logger.debug("diagnostics_write_failed", path=str(self.path), error=str(e))


def diagnostics_from_settings() -> DiagnosticsSink:
    """Build the sink selected by INFAKT_DEBUG_LOG / INFAKT_DEBUG_LOG_PATH."""
    settings = get_settings()
    if settings.debug_log:
        return FileDiagnostics(settings.debug_log_path)
    return NullDiagnostics()
