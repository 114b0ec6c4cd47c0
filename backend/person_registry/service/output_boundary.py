"""
Batch Progress Output Boundary

Observer notified by the service while a batch import runs.
"""

from abc import ABC, abstractmethod

import structlog

logger = structlog.get_logger()


class PersonOutputBoundary(ABC):
    """
    Receives batch import progress.

    ``started`` always fires first; afterwards at most one of ``completed``
    or ``aborted_with`` fires.
    """

    @abstractmethod
    def started(self) -> None:
        pass

    @abstractmethod
    def in_progress(self, done: int, total: int) -> None:
        pass

    @abstractmethod
    def completed(self) -> None:
        pass

    @abstractmethod
    def aborted_with(self, error: BaseException) -> None:
        pass


class NullOutputBoundary(PersonOutputBoundary):
    """Discards all progress events."""

    def started(self) -> None:
        pass

    def in_progress(self, done: int, total: int) -> None:
        pass

    def completed(self) -> None:
        pass

    def aborted_with(self, error: BaseException) -> None:
        pass


class LoggingBatchImportPresenter(PersonOutputBoundary):
    """Writes batch import progress to the application log."""

    def started(self) -> None:
        logger.info("Batch import started")

    def in_progress(self, done: int, total: int) -> None:
        logger.debug("Batch import in progress", done=done, total=total)

    def completed(self) -> None:
        logger.info("Batch import completed")

    def aborted_with(self, error: BaseException) -> None:
        logger.error(
            "Batch import aborted",
            error=str(error),
            error_type=type(error).__name__,
        )
