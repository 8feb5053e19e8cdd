"""Non-fatal package warnings, collected for a final report."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Tuple

from loguru import logger


class PackageWarning(Enum):
    """Kinds of warning raised while assembling the module graph."""

    AMBIGUOUS_REEXPORT = "ambiguous-reexport"


@dataclass(frozen=True)
class WarningRecord:
    kind: PackageWarning
    message: str
    extended_debug: Tuple[str, ...] = ()


class WarningCollector:
    """
    Accumulates warnings and echoes each one to the log.

    Warnings never stop a run; callers read ``records`` at the end.
    """

    def __init__(self):
        self._records: List[WarningRecord] = []

    @property
    def records(self) -> List[WarningRecord]:
        return list(self._records)

    def warn(
        self,
        kind: PackageWarning,
        message: str,
        extended_debug: Iterable[str] = (),
    ) -> None:
        record = WarningRecord(kind, message, tuple(extended_debug))
        self._records.append(record)
        logger.warning(f"{kind.value}: {message}")
        for line in record.extended_debug:
            logger.debug(f"    {line}")

    def count(self, kind: PackageWarning) -> int:
        """Return how many warnings of ``kind`` were collected."""
        return sum(1 for record in self._records if record.kind is kind)

    def __len__(self) -> int:
        return len(self._records)
