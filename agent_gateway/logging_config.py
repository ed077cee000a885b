"""
Process logging for the gateway.

Records from the `agentgateway` logger are written to logs/app-YYYY-MM-DD.log
(last LOG_RETENTION_DAYS files kept); every record also reaches the console
through the root logger, next to uvicorn's own output.
"""

import datetime
import logging
from pathlib import Path
from typing import IO, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .settings import settings


LOGGER_NAME = "agentgateway"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
LOG_RETENTION_DAYS = 7

_configured = False


def _resolve_tz(name: Optional[str]) -> datetime.tzinfo:
    if name:
        try:
            return ZoneInfo(name)
        except ZoneInfoNotFoundError:
            pass
    return datetime.datetime.now().astimezone().tzinfo or datetime.timezone.utc


class LocalTimezoneFormatter(logging.Formatter):
    """
    ISO-8601 timestamps rendered in LOG_TIMEZONE (system local time when unset
    or unknown).
    """

    def __init__(self, fmt: str, *, timezone_name: Optional[str] = None) -> None:
        super().__init__(fmt)
        self._tz = _resolve_tz(timezone_name)

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        stamp = datetime.datetime.fromtimestamp(record.created, tz=self._tz)
        return stamp.strftime(datefmt) if datefmt else stamp.isoformat(timespec="milliseconds")


class DailyFileHandler(logging.Handler):
    """
    Appends to one file per calendar day and prunes the oldest files.
    """

    def __init__(self, log_dir: Path, keep: int = LOG_RETENTION_DAYS) -> None:
        super().__init__()
        self.log_dir = log_dir
        self.keep = keep
        self._day: Optional[datetime.date] = None
        self._stream: Optional[IO[str]] = None

    def path_for(self, day: datetime.date) -> Path:
        return self.log_dir / f"app-{day.isoformat()}.log"

    def _roll(self) -> IO[str]:
        today = datetime.date.today()
        if self._stream is not None and self._day == today:
            return self._stream
        if self._stream is not None:
            self._stream.close()
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self._day = today
        self._stream = open(self.path_for(today), "a", encoding="utf-8")
        self._prune()
        return self._stream

    def _prune(self) -> None:
        files = sorted(self.log_dir.glob("app-*.log"))
        for stale in files[: max(0, len(files) - self.keep)]:
            stale.unlink(missing_ok=True)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            stream = self._roll()
            stream.write(self.format(record) + "\n")
            stream.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        if self._stream is not None:
            self._stream.close()
            self._stream = None
        super().close()


def setup_logging(log_dir: Optional[Path] = None) -> None:
    """
    Attach the daily file handler to the app logger and a console handler to
    the root logger. Safe to call more than once.
    """
    global _configured
    if _configured:
        return

    level = getattr(logging, str(settings.log_level).upper(), logging.INFO)
    formatter = LocalTimezoneFormatter(LOG_FORMAT, timezone_name=settings.log_timezone)

    file_handler = DailyFileHandler(log_dir or Path("logs"))
    file_handler.setFormatter(formatter)
    app_logger = logging.getLogger(LOGGER_NAME)
    app_logger.setLevel(level)
    app_logger.addHandler(file_handler)

    root = logging.getLogger()
    root.setLevel(level)
    if not any(type(h) is logging.StreamHandler for h in root.handlers):
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        root.addHandler(console)

    _configured = True


logger = logging.getLogger(LOGGER_NAME)
