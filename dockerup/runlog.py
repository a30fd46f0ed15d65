"""Append-only run log written alongside every install run."""

import logging
from datetime import datetime
from pathlib import Path

from .paths import run_log_path

RUN_LOG_FORMAT = "[%(asctime)s] %(message)s"
RUN_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class RunLog:
    """Timestamped plain-text log of every command and message in a run.

    Lines are only ever appended. The file is never truncated or removed by
    the installer so the operator can inspect it after a failure or an
    interruption.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Unregistered logger: one per run, dropped together with the RunLog.
        self._logger = logging.Logger(f"dockerup.runlog.{self.path.stem}", logging.INFO)

        self._handler = logging.FileHandler(self.path, mode="a", encoding="utf-8")
        self._handler.setFormatter(
            logging.Formatter(fmt=RUN_LOG_FORMAT, datefmt=RUN_LOG_DATEFMT)
        )
        self._logger.addHandler(self._handler)

    @classmethod
    def create(cls, log_dir: Path | str, started: datetime | None = None) -> "RunLog":
        started = started or datetime.now()
        run_log = cls(run_log_path(log_dir, started))
        run_log.write(f"Docker installation log - {started:%a %b %d %H:%M:%S %Y}")
        return run_log

    def write(self, message: str) -> None:
        self._logger.info(message)

    def command(self, argv: list[str]) -> None:
        self.write(f"Executing: {' '.join(argv)}")

    def output(self, text: str) -> None:
        for line in text.splitlines():
            if line.strip():
                self.write(f"  {line}")

    def close(self) -> None:
        self._logger.removeHandler(self._handler)
        self._handler.close()
