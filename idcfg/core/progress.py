"""Progress sinks for long-running scans and bulk operations.

Progress output is advisory: a sink never changes the outcome of the operation
that reports to it.
"""
from __future__ import annotations
import logging
from typing import Optional, Protocol


class ProgressReporter(Protocol):
    def start(self, message: str, total: Optional[int] = None) -> None:
        ...

    def update(self, message: str) -> None:
        ...

    def stop(self, message: str, status: str = "success") -> None:
        ...


class LoggingProgress:
    """Writes progress to a logger; updates go to DEBUG to keep INFO readable."""

    _LEVELS = {"success": logging.INFO, "warn": logging.WARNING, "fail": logging.ERROR}

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("idcfg.progress")

    def start(self, message: str, total: Optional[int] = None) -> None:
        if total is None:
            self.logger.info(message)
        else:
            self.logger.info("%s (%d)", message, total)

    def update(self, message: str) -> None:
        self.logger.debug(message)

    def stop(self, message: str, status: str = "success") -> None:
        self.logger.log(self._LEVELS.get(status, logging.INFO), message)


class NullProgress:
    def start(self, message: str, total: Optional[int] = None) -> None:
        pass

    def update(self, message: str) -> None:
        pass

    def stop(self, message: str, status: str = "success") -> None:
        pass
