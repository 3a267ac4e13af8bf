"""Shared logging utilities."""

import json
import shutil
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

LOG_ROOT = Path.cwd() / "logs"
CLI_LOG_FILE = LOG_ROOT / "relay.log"

SENSITIVE_MARKERS = ("key", "authorization", "cookie", "token")

# Single worker keeps file writes ordered and off the event loop
_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="relay-log")


def write_incoming_log(
    method: str,
    path: str,
    headers: dict[str, str],
    *,
    log_root: Path | None = None,
) -> Future[Path]:
    """Queue a single incoming request log entry."""
    payload = {
        "timestamp": _utc_now(),
        "method": method,
        "path": path,
        "headers": redact_headers(headers),
    }
    folder = (log_root or LOG_ROOT) / "incoming"
    return _executor.submit(_write_json, folder, payload)


def write_forward_log(
    method: str,
    target: str,
    status: int,
    headers: dict[str, str],
    *,
    log_root: Path | None = None,
) -> Future[Path]:
    """Queue a single forwarded request log entry."""
    payload = {
        "timestamp": _utc_now(),
        "method": method,
        "target": target,
        "status": status,
        "headers": redact_headers(headers),
    }
    folder = (log_root or LOG_ROOT) / "forwarded"
    return _executor.submit(_write_json, folder, payload)


def write_cli_log(
    level: str,
    message: str,
    **extra: Any,
) -> Future[None]:
    """Queue a line for the rolling CLI log file."""
    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
    extra_str = " ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""
    line = f"[{timestamp}] {level}: {message}"
    if extra_str:
        line += f" {extra_str}"
    line += "\n"
    return _executor.submit(_append_line, CLI_LOG_FILE, line)


def clear_logs(log_root: Path | None = None) -> None:
    """Remove logs left over from a previous run."""
    shutil.rmtree(log_root or LOG_ROOT, ignore_errors=True)


def shutdown_log_executor() -> None:
    """Flush pending writes and stop the log worker."""
    _executor.shutdown(wait=True)


def redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Redact sensitive headers."""
    redacted = {}
    for key, value in headers.items():
        if any(marker in key.lower() for marker in SENSITIVE_MARKERS):
            redacted[key] = _mask(value)
        else:
            redacted[key] = value
    return redacted


def _append_line(log_file: Path, line: str) -> None:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    with log_file.open("a") as f:
        f.write(line)


def _write_json(folder: Path, payload: dict[str, Any]) -> Path:
    """Write payload to a unique JSON file in the given folder."""
    folder.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S.%fZ")
    file_path = folder / f"{timestamp}_{uuid4().hex}.json"
    file_path.write_text(json.dumps(payload, indent=2, default=str))
    return file_path


def _mask(value: str) -> str:
    if len(value) <= 10:
        return "***"
    return value[:6] + "..." + value[-4:]


def _utc_now() -> str:
    return datetime.now(UTC).isoformat()
