"""Bookkeeping shared across discovery passes."""

from dataclasses import dataclass, field
from typing import Iterable, Set

from model.records import ModuleRecord


def files_referenced_by(module: ModuleRecord, into: Set[str]) -> Set[str]:
    """
    Add every file referenced by ``module`` to ``into``.

    That is the module's own path, its part files and, transitively, the
    files of every module it imports or exports. A module whose path is
    already in ``into`` is not expanded again.

    Returns:
        The paths newly added to ``into``.
    """
    added: Set[str] = set()
    worklist = [module]
    while worklist:
        current = worklist.pop()
        if current.path in into:
            continue
        into.add(current.path)
        added.add(current.path)
        # Reversed so imports are expanded before exports, in declared order.
        worklist.extend(reversed(current.exports))
        worklist.extend(reversed(current.imports))
        for part in current.parts:
            if part not in into:
                into.add(part)
                added.add(part)
    return added


@dataclass
class DiscoveryState:
    """
    Mutable state of a discovery run.

    ``processed_modules`` is shared by reference between the ordinary and
    special crawls so a module is delivered at most once. ``known_parts``
    only grows: a file classified as a part is never resolved again.
    """

    processed_modules: Set[ModuleRecord] = field(default_factory=set)
    known_parts: Set[str] = field(default_factory=set)
    files_in_current_pass: Set[str] = field(default_factory=set)
    files_in_last_pass: Set[str] = field(default_factory=set)

    def is_part(self, path: str) -> bool:
        return path in self.known_parts

    def mark_part(self, path: str) -> None:
        self.known_parts.add(path)

    def is_processed(self, module: ModuleRecord) -> bool:
        return module in self.processed_modules

    def mark_processed(self, module: ModuleRecord) -> None:
        self.processed_modules.add(module)

    def module_candidates(self, files: Iterable[str]) -> Set[str]:
        """Return the files not already known to be parts."""
        return set(files) - self.known_parts

    def reset_passes(self) -> None:
        self.files_in_current_pass = set()
        self.files_in_last_pass = set()

    def begin_pass(self) -> None:
        self.files_in_last_pass = self.files_in_current_pass

    def end_pass(self, files: Iterable[str]) -> None:
        self.files_in_current_pass = self.module_candidates(files)

    def reached_fixed_point(self) -> bool:
        """True once a pass found no file missing from the previous pass."""
        return self.files_in_last_pass >= self.files_in_current_pass
