"""Progress hooks called by the discovery crawl."""

from typing import Protocol

from loguru import logger


class ProgressReporter(Protocol):
    def start(self, total: int) -> None: ...

    def update_total(self, total: int) -> None: ...

    def tick(self) -> None: ...

    def complete(self) -> None: ...


class NullProgress:
    """Discards progress."""

    def start(self, total: int) -> None:
        pass

    def update_total(self, total: int) -> None:
        pass

    def tick(self) -> None:
        pass

    def complete(self) -> None:
        pass


class LoggingProgress:
    """Reports progress through the log at debug level."""

    def __init__(self, every: int = 100):
        self.every = every
        self.total = 0
        self.count = 0

    def start(self, total: int) -> None:
        self.total = total
        self.count = 0
        logger.debug(f"Discovery started with {total} files")

    def update_total(self, total: int) -> None:
        self.total = total

    def tick(self) -> None:
        self.count += 1
        if self.every and self.count % self.every == 0:
            logger.debug(f"Resolved {self.count}/{self.total} files")

    def complete(self) -> None:
        logger.debug(f"Discovery complete: {self.count} files resolved")
