"""Text rendering of command results for the assistant."""

from collections.abc import Sequence
from datetime import UTC, datetime

from nginxtools.core.command_executor import CascadeResult
from nginxtools.core.exceptions import E_COMMAND_FAILED, E_TIMEOUT, E_UNAVAILABLE
from nginxtools.core.robust_executor import ALL_FAILED_MESSAGE
from nginxtools.core.tool_protocol import ToolResult


def timestamp() -> str:
    return datetime.now(UTC).isoformat()


def is_exhausted(result: CascadeResult) -> bool:
    """True when every strategy failed."""
    return result.stderr.startswith(ALL_FAILED_MESSAGE)


def command_exit_code(result: CascadeResult) -> int | None:
    """Exit status the command itself reported, or None if it never ran to completion."""
    if result.timed_out:
        return None
    if is_exhausted(result):
        return result.reported_exit_code
    return result.exit_code if result.error_message is None else None


def last_error(result: CascadeResult) -> str:
    """Error output of the last attempt, without the cascade summary prefix."""
    _, marker, tail = result.stderr.partition(f"{ALL_FAILED_MESSAGE} Last error: ")
    return tail if marker else result.stderr


def provenance(result: CascadeResult) -> str:
    """Execution method line plus any earlier strategy errors."""
    lines = [f"🔧 Execution method: {result.method}"]
    if result.fallback_used:
        lines[0] += " (fallback used)"
        for index, error in enumerate(result.prior_errors, start=1):
            lines.append(f"   ↳ attempt {index} failed: {error.strip()}")
    return "\n".join(lines)


def _block(text: str) -> str:
    return f"```\n{text.rstrip()}\n```"


def render_command_result(
    title: str,
    command: Sequence[str],
    result: CascadeResult,
    hints: Sequence[str] = (),
) -> ToolResult:
    """Render a CascadeResult as a ToolResult with a text report.

    Four cases are distinguished: success, timeout, non-zero exit (the
    command ran but reported an error) and could-not-run (no strategy got
    an exit status from the command). An exhausted cascade whose last
    attempt ran the command is reported by the command's own exit code.
    Hints are shown only on failure.

    Args:
        title: Short description of the operation, e.g. "NGINX logs"
        command: Argument vector that was run
        result: Cascade result to render
        hints: Remediation suggestions for failures

    Returns:
        ToolResult carrying the report in output, plus the result dict in data
    """
    command_line = " ".join(command)
    parts: list[str] = []
    exit_code = command_exit_code(result)

    if result.succeeded:
        parts.append(f"✅ {title}")
        parts.append(f"💻 Command: {command_line}")
        parts.append(_block(result.stdout) if result.stdout.strip() else "(no output)")
        if result.stderr.strip():
            # nginx -t and nginx -v report on stderr even when successful
            parts.append("📝 Messages:\n" + _block(result.stderr))
        error_code = None
    elif result.timed_out:
        parts.append(f"⏱️ {title} timed out")
        parts.append(f"💻 Command: {command_line}")
        parts.append(f"⚠️ {last_error(result).strip()}")
        error_code = E_TIMEOUT
    elif exit_code is not None:
        parts.append(f"⚠️ {title}: command reported an error (exit code {exit_code})")
        parts.append(f"💻 Command: {command_line}")
        if result.stdout.strip():
            parts.append(_block(result.stdout))
        if last_error(result).strip():
            parts.append("📝 Error output:\n" + _block(last_error(result)))
        error_code = E_COMMAND_FAILED
    else:
        parts.append(f"❌ {title}: command could not be run")
        parts.append(f"💻 Command: {command_line}")
        parts.append(f"⚠️ {result.stderr.strip()}")
        error_code = E_UNAVAILABLE

    parts.append(provenance(result))
    if not result.succeeded and hints:
        parts.append("💡 Suggestions:\n" + "\n".join(f"- {hint}" for hint in hints))
    parts.append(f"🕐 Timestamp: {timestamp()}")

    text = "\n\n".join(parts)
    return ToolResult(
        success=result.succeeded,
        output=text,
        error=None if result.succeeded else text,
        error_code=error_code,
        data=result.to_dict(),
    )
