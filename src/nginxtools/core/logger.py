"""JSON-lines logging for NGINX Tools.

Records go to a rotating file under ~/.nginxtools/logs and to stderr.
Stdout carries the MCP stdio transport and is never written to.

Besides plain leveled messages, the logger knows the two events the
server cares about: a single strategy attempt inside the command cascade,
and how the cascade as a whole ended. Tool calls are timed with the
tool_call() context manager.
"""

import json
import logging
import os
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from nginxtools.core.command_executor import CascadeResult, ExecutionOutcome

LOGGER_NAME = "nginxtools"
LOG_FILE_NAME = "nginxtools.log"
DEFAULT_LOG_DIR = "~/.nginxtools/logs"
DEFAULT_LEVEL = "WARNING"


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


class NginxToolsLogger:
    """Leveled key-value logger writing one JSON object per line."""

    log_dir: Path | None
    log_file: Path | None

    def __init__(
        self,
        log_dir: str | None = None,
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 5,
        level: str | None = None,
    ) -> None:
        """Set up handlers.

        Args:
            log_dir: Log directory (default ~/.nginxtools/logs); ignored when
                NGINXTOOLS_DISABLE_FILE_LOGGING is set
            max_bytes: Size at which the log file rotates
            backup_count: Rotated files to keep
            level: DEBUG/INFO/WARN/ERROR; falls back to NGINXTOOLS_LOG_LEVEL,
                then WARNING so an MCP client's stderr stays quiet
        """
        self._logger = logging.getLogger(LOGGER_NAME)
        self._logger.propagate = False
        for handler in list(self._logger.handlers):
            handler.close()
            self._logger.removeHandler(handler)

        if _env_flag("NGINXTOOLS_DISABLE_FILE_LOGGING"):
            self.log_dir = None
            self.log_file = None
        else:
            self.log_dir = Path(log_dir) if log_dir else Path(DEFAULT_LOG_DIR).expanduser()
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self.log_file = self.log_dir / LOG_FILE_NAME
            self._add_handler(
                RotatingFileHandler(self.log_file, maxBytes=max_bytes, backupCount=backup_count)
            )

        self._add_handler(logging.StreamHandler(sys.stderr))
        self.set_level(level or os.environ.get("NGINXTOOLS_LOG_LEVEL", DEFAULT_LEVEL))

    def _add_handler(self, handler: logging.Handler) -> None:
        handler.setFormatter(JSONFormatter())
        self._logger.addHandler(handler)

    def set_level(self, level: str) -> None:
        """Set the threshold; WARN is accepted for WARNING, unknown names mean INFO."""
        name = level.upper()
        if name == "WARN":
            name = "WARNING"
        self._logger.setLevel(getattr(logging, name, logging.INFO))

    def debug(self, msg: str, **kv: Any) -> None:
        self._logger.debug(msg, extra={"kv": kv})

    def info(self, msg: str, **kv: Any) -> None:
        self._logger.info(msg, extra={"kv": kv})

    def warn(self, msg: str, **kv: Any) -> None:
        self._logger.warning(msg, extra={"kv": kv})

    def error(self, msg: str, **kv: Any) -> None:
        self._logger.error(msg, extra={"kv": kv})

    def attempt(self, outcome: ExecutionOutcome, command: str) -> None:
        """Record one strategy attempt of the command cascade."""
        self.debug(
            "strategy_attempt",
            command=command,
            method=outcome.strategy.value,
            exit_code=outcome.exit_code,
            command_ran=outcome.command_ran,
            timed_out=outcome.timed_out,
            duration_ms=outcome.duration_ms,
        )

    def cascade_result(self, result: CascadeResult, command: str) -> None:
        """Record how a cascade ended.

        A first-try success is info, a success after fallback is a warning
        (an earlier strategy is broken on this host), exhaustion is an error.
        """
        fields: dict[str, Any] = {
            "command": command,
            "method": result.method,
            "exit_code": result.exit_code,
            "duration_ms": result.duration_ms,
        }
        if result.succeeded and not result.fallback_used:
            self.info("cascade_succeeded", **fields)
        elif result.succeeded:
            self.warn(
                "cascade_succeeded_after_fallback", prior_errors=result.prior_errors, **fields
            )
        else:
            self.error(
                "cascade_exhausted",
                reported_exit_code=result.reported_exit_code,
                timed_out=result.timed_out,
                error=result.stderr,
                **fields,
            )

    @contextmanager
    def tool_call(self, tool_name: str) -> Iterator[dict[str, Any]]:
        """Time a tool call.

        Yields a dict; whatever the caller puts in it is added to the
        closing tool_call_end record.

        Example:
            with logger.tool_call("nginx_logs") as record:
                result = await tool.execute(call, context)
                record["success"] = result.success
        """
        record: dict[str, Any] = {}
        start = time.monotonic()
        self.debug("tool_call_start", tool_name=tool_name)
        try:
            yield record
        except Exception:
            record["raised"] = True
            raise
        finally:
            duration_ms = (time.monotonic() - start) * 1000
            self.info("tool_call_end", tool_name=tool_name, duration_ms=duration_ms, **record)


class JSONFormatter(logging.Formatter):
    """timestamp, level and message, followed by the record's key-value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=UTC)
        data: dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        data.update(getattr(record, "kv", None) or {})
        return json.dumps(data, default=str)
