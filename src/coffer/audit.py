#!/usr/bin/env python3
"""Audit Logger - Append-only record of coffer commands and their outcomes.

Secret names are logged, secret values never are. The log rotates daily
and rotated files are kept for a limited number of days.
"""

import os
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional

from .errors import AuditUnavailable

LOG_PATH = Path.home() / ".coffer.log"
RETENTION_DAYS = 30

# Outcomes recorded per command
RESULTS = ("OK", "NOT_FOUND", "REJECTED", "ABORTED", "ERROR")


class AuditLogger:
    """Append-only audit log with daily rotation."""

    def __init__(self, log_path: Optional[Path] = None, retention_days: int = RETENTION_DAYS):
        """Open (creating if needed) the audit log.

        Args:
            log_path: Log file location, defaults to ~/.coffer.log
            retention_days: How long rotated logs are kept

        """
        self.log_path = Path(log_path) if log_path else LOG_PATH
        self.retention_days = retention_days
        self.lock = threading.Lock()

        try:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            self._ensure_log_file()
        except OSError as e:
            raise AuditUnavailable(f"Failed to open audit log {self.log_path}: {e}") from e

    def _ensure_log_file(self) -> None:
        if not self.log_path.exists():
            fd = os.open(
                str(self.log_path),
                os.O_CREAT | os.O_APPEND | os.O_WRONLY,
                0o600
            )
            os.close(fd)

    def record(self, action: str, result: str, name: str = "-", reason: Optional[str] = None) -> None:
        """Append one entry.

        Format: ISO8601Z [PID] RESULT ACTION name [reason]

        Args:
            action: STORE | LIST | GET | CREATE | DELETE
            result: One of RESULTS
            name: Secret name the command targeted, "-" for none
            reason: Error code or short explanation

        """
        if result not in RESULTS:
            raise ValueError(f"Unknown audit result: {result}")

        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
        parts = [timestamp, f"[{os.getpid()}]", result, action, name or "-"]
        if reason:
            parts.append(reason)

        try:
            self._rotate_if_stale()
            with self.lock, open(self.log_path, "a") as f:
                f.write(" ".join(parts) + "\n")
        except OSError as e:
            raise AuditUnavailable(f"Failed to write audit log {self.log_path}: {e}") from e

    def _rotated_path(self, day: datetime) -> Path:
        return self.log_path.with_name(f"{self.log_path.name}.{day.strftime('%Y%m%d')}")

    def _rotate_if_stale(self) -> None:
        """Move aside a log last written before today (UTC)."""
        try:
            mtime = datetime.fromtimestamp(self.log_path.stat().st_mtime, tz=timezone.utc)
        except FileNotFoundError:
            return

        today = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
        if mtime >= today:
            return

        rotated = self._rotated_path(mtime)
        if not rotated.exists():
            self.log_path.rename(rotated)
            self._ensure_log_file()
        self._cleanup_old_logs()

    def _cleanup_old_logs(self) -> None:
        """Delete rotated logs older than the retention period."""
        cutoff = datetime.now(timezone.utc) - timedelta(days=self.retention_days)

        for log_file in self.log_path.parent.glob(f"{self.log_path.name}.*"):
            try:
                log_date = datetime.strptime(log_file.name.rsplit(".", 1)[-1], "%Y%m%d").replace(
                    tzinfo=timezone.utc
                )
            except ValueError:
                # Not one of ours
                continue

            if log_date < cutoff:
                log_file.unlink()

    def read_recent(self, lines: int = 100) -> List[str]:
        """Return up to `lines` most recent entries, oldest first."""
        if not self.log_path.exists():
            return []

        with open(self.log_path) as f:
            return f.readlines()[-lines:]
